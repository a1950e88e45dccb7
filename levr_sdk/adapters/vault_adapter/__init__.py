"""Vault Adapter - allocation and claimable amount held in the Clanker vault."""

from .adapter import VaultAdapter
from .types import VaultAllocation, VaultState, VaultStatus, vault_status

__all__ = [
    "VaultAdapter",
    "VaultAllocation",
    "VaultState",
    "VaultStatus",
    "vault_status",
]
