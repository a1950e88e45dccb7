"""Types for TreasuryAirdropAdapter."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum, StrEnum

from pydantic import BaseModel, ConfigDict

from levr_sdk.core.config import get_treasury_airdrop_amounts
from levr_sdk.core.utils.units import to_erc20_raw


class AllocationStatus(StrEnum):
    AVAILABLE = "available"
    LOCKED = "locked"
    CLAIMED = "claimed"
    NOT_FOUND = "not_found"


class AllocationPriority(IntEnum):
    """Lower wins when several allocation amounts survive classification."""

    AVAILABLE = 1
    LOCKED = 2
    CLAIMED_ON_CHAIN = 3
    CLAIMED_BY_BALANCE = 4


class TreasuryAllocationCandidate(BaseModel):
    model_config = ConfigDict(frozen=True)

    amount: int
    available_to_claim: int = 0
    status: AllocationStatus
    priority: int
    error: str | None = None


@dataclass(frozen=True)
class AllocationTable:
    """Versioned list of historically used treasury allocation amounts (whole tokens)."""

    version: str
    amounts: tuple[int, ...]

    @classmethod
    def from_config(cls) -> AllocationTable:
        version, amounts = get_treasury_airdrop_amounts()
        return cls(version=version, amounts=amounts)

    def raw_amounts(self, decimals: int) -> tuple[int, ...]:
        return tuple(to_erc20_raw(amount, decimals) for amount in self.amounts)
