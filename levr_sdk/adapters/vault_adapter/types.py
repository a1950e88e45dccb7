"""Types for VaultAdapter."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class VaultStatus(StrEnum):
    LOCKED = "locked"
    VESTING = "vesting"
    VESTED = "vested"
    CLAIMED = "claimed"


class VaultAllocation(BaseModel):
    model_config = ConfigDict(frozen=True)

    token: str
    amount_total: int
    amount_claimed: int
    lockup_end_time: int
    vesting_end_time: int
    admin: str

    @property
    def remaining(self) -> int:
        return max(0, self.amount_total - self.amount_claimed)


def vault_status(
    allocation: VaultAllocation, reference_timestamp: int | None
) -> VaultStatus | None:
    """Where the allocation sits on its lockup and vesting schedule at chain time.

    A fully claimed allocation is ``CLAIMED`` regardless of time; otherwise the
    status is unknown without a timestamp.
    """
    if allocation.amount_total and allocation.remaining == 0:
        return VaultStatus.CLAIMED
    if reference_timestamp is None:
        return None
    if reference_timestamp < allocation.lockup_end_time:
        return VaultStatus.LOCKED
    if reference_timestamp < allocation.vesting_end_time:
        return VaultStatus.VESTING
    return VaultStatus.VESTED


class VaultState(BaseModel):
    model_config = ConfigDict(frozen=True)

    allocation: VaultAllocation
    claimable: int
    status: VaultStatus | None = None
    reference_timestamp: int | None = None
    defaulted: tuple[str, ...] = ()
