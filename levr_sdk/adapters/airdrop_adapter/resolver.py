"""Probe classification and ranking for treasury airdrop allocations.

Every historically used allocation amount is probed with
``amountAvailableToClaim``; each probe is classified and the best survivor is
the allocation that applies. Ordering is ``(priority asc, amount desc)`` with a
stable sort, so equal candidates keep amount-table order.

Known approximation: when a probe succeeds with nothing available, a claimant
balance at or above the candidate amount is read as "claimed" and anything
below as "locked". The balance is not a claim ledger.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from levr_sdk.adapters.airdrop_adapter.types import (
    AllocationPriority,
    AllocationStatus,
    TreasuryAllocationCandidate,
)
from levr_sdk.adapters.multicall_adapter.types import CallResult

NOT_CONFIGURED_MARKERS = ("airdropnotcreated", "not created")
LOCKED_MARKERS = ("airdropnotunlocked", "not unlocked", "locked")
CLAIMED_MARKERS = ("usermaxclaimed", "totalmaxclaimed", "already claimed")
ARITHMETIC_MARKERS = ("panic(0x11)", "underflow", "overflow")


def _matches(error: str, markers: Iterable[str]) -> bool:
    return any(marker in error for marker in markers)


def classify_probe(
    amount: int, probe: CallResult, claimant_balance: int
) -> TreasuryAllocationCandidate | None:
    """Classify one ``amountAvailableToClaim`` probe, or ``None`` to drop the amount."""
    if probe.success:
        available = int(probe.value)
        if available > 0:
            return TreasuryAllocationCandidate(
                amount=amount,
                available_to_claim=available,
                status=AllocationStatus.AVAILABLE,
                priority=AllocationPriority.AVAILABLE,
            )
        if claimant_balance >= amount:
            return TreasuryAllocationCandidate(
                amount=amount,
                status=AllocationStatus.CLAIMED,
                priority=AllocationPriority.CLAIMED_BY_BALANCE,
            )
        return TreasuryAllocationCandidate(
            amount=amount,
            status=AllocationStatus.LOCKED,
            priority=AllocationPriority.LOCKED,
        )

    error = probe.error or ""
    lowered = error.lower()
    if _matches(lowered, NOT_CONFIGURED_MARKERS):
        return None
    if _matches(lowered, ARITHMETIC_MARKERS):
        return None
    if _matches(lowered, CLAIMED_MARKERS):
        return TreasuryAllocationCandidate(
            amount=amount,
            status=AllocationStatus.CLAIMED,
            priority=AllocationPriority.CLAIMED_ON_CHAIN,
            error=error,
        )
    if _matches(lowered, LOCKED_MARKERS):
        return TreasuryAllocationCandidate(
            amount=amount,
            status=AllocationStatus.LOCKED,
            priority=AllocationPriority.LOCKED,
            error=error,
        )
    # Unrecognised failures stay in contention as locked.
    return TreasuryAllocationCandidate(
        amount=amount,
        status=AllocationStatus.LOCKED,
        priority=AllocationPriority.LOCKED,
        error=error or "unknown error",
    )


def rank_candidates(
    candidates: Iterable[TreasuryAllocationCandidate],
) -> list[TreasuryAllocationCandidate]:
    return sorted(candidates, key=lambda c: (c.priority, -c.amount))


def select_allocation(
    candidates: Iterable[TreasuryAllocationCandidate],
) -> TreasuryAllocationCandidate | None:
    ranked = rank_candidates(candidates)
    return ranked[0] if ranked else None


def resolve_from_probes(
    amounts: Sequence[int], probes: Sequence[CallResult], claimant_balance: int
) -> TreasuryAllocationCandidate | None:
    if len(amounts) != len(probes):
        raise ValueError(f"{len(amounts)} amounts but {len(probes)} probes")
    candidates = [
        candidate
        for amount, probe in zip(amounts, probes)
        if (candidate := classify_probe(amount, probe, claimant_balance)) is not None
    ]
    return select_allocation(candidates)
