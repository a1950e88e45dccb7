"""Treasury Airdrop Adapter - resolves the treasury allocation bucket that applies."""

from .adapter import TreasuryAirdropAdapter
from .resolver import classify_probe, rank_candidates, select_allocation
from .types import (
    AllocationStatus,
    AllocationTable,
    TreasuryAllocationCandidate,
)

__all__ = [
    "TreasuryAirdropAdapter",
    "classify_probe",
    "rank_candidates",
    "select_allocation",
    "AllocationStatus",
    "AllocationTable",
    "TreasuryAllocationCandidate",
]
