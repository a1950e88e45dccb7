import pytest

from levr_sdk.adapters.airdrop_adapter.resolver import (
    classify_probe,
    rank_candidates,
    resolve_from_probes,
    select_allocation,
)
from levr_sdk.adapters.airdrop_adapter.types import (
    AllocationPriority,
    AllocationStatus,
    TreasuryAllocationCandidate,
)
from levr_sdk.adapters.multicall_adapter.types import CallResult, build_read
from levr_sdk.core.constants.clanker_abi import CLANKER_AIRDROP_ABI

AIRDROP = "0x1000000000000000000000000000000000000001"
TOKEN = "0x2000000000000000000000000000000000000002"
CLAIMANT = "0x3000000000000000000000000000000000000003"


def _probe(amount: int, *, value: int | None = None, error: str | None = None) -> CallResult:
    call = build_read(
        AIRDROP, CLANKER_AIRDROP_ABI, "amountAvailableToClaim", TOKEN, CLAIMANT, amount
    )
    if error is not None:
        return CallResult(call=call, success=False, error=error)
    return CallResult(call=call, success=True, value=value)


def _candidate(amount: int, status: AllocationStatus, priority: int) -> TreasuryAllocationCandidate:
    return TreasuryAllocationCandidate(amount=amount, status=status, priority=priority)


class TestRanking:
    def test_available_beats_locked_and_claimed(self):
        candidates = [
            _candidate(10, AllocationStatus.LOCKED, 2),
            _candidate(20, AllocationStatus.AVAILABLE, 1),
            _candidate(5, AllocationStatus.CLAIMED, 4),
        ]

        selected = select_allocation(candidates)

        assert selected.amount == 20
        assert selected.status == AllocationStatus.AVAILABLE

    def test_larger_amount_wins_within_priority(self):
        candidates = [
            _candidate(10, AllocationStatus.AVAILABLE, 1),
            _candidate(20, AllocationStatus.AVAILABLE, 1),
        ]

        assert select_allocation(candidates).amount == 20

    def test_ties_keep_enumeration_order(self):
        first = TreasuryAllocationCandidate(
            amount=10, status=AllocationStatus.LOCKED, priority=2, error="first"
        )
        second = TreasuryAllocationCandidate(
            amount=10, status=AllocationStatus.LOCKED, priority=2, error="second"
        )

        assert rank_candidates([first, second]) == [first, second]
        assert select_allocation([first, second]).error == "first"

    def test_no_candidates(self):
        assert select_allocation([]) is None


class TestClassifyProbe:
    def test_available(self):
        candidate = classify_probe(100, _probe(100, value=40), claimant_balance=0)

        assert candidate.status == AllocationStatus.AVAILABLE
        assert candidate.priority == AllocationPriority.AVAILABLE
        assert candidate.available_to_claim == 40

    def test_zero_available_with_balance_covering_amount_is_claimed(self):
        candidate = classify_probe(100, _probe(100, value=0), claimant_balance=100)

        assert candidate.status == AllocationStatus.CLAIMED
        assert candidate.priority == AllocationPriority.CLAIMED_BY_BALANCE

    def test_zero_available_with_smaller_balance_is_locked(self):
        candidate = classify_probe(100, _probe(100, value=0), claimant_balance=99)

        assert candidate.status == AllocationStatus.LOCKED
        assert candidate.priority == AllocationPriority.LOCKED

    @pytest.mark.parametrize(
        "error",
        [
            "AirdropNotCreated",
            "Panic(0x11): arithmetic underflow or overflow",
        ],
    )
    def test_dropped_failures(self, error):
        assert classify_probe(100, _probe(100, error=error), claimant_balance=0) is None

    @pytest.mark.parametrize(
        ("error", "status", "priority"),
        [
            ("AirdropNotUnlocked", AllocationStatus.LOCKED, AllocationPriority.LOCKED),
            ("UserMaxClaimed", AllocationStatus.CLAIMED, AllocationPriority.CLAIMED_ON_CHAIN),
            ("TotalMaxClaimed", AllocationStatus.CLAIMED, AllocationPriority.CLAIMED_ON_CHAIN),
            ("execution reverted", AllocationStatus.LOCKED, AllocationPriority.LOCKED),
        ],
    )
    def test_classified_failures_keep_error(self, error, status, priority):
        candidate = classify_probe(100, _probe(100, error=error), claimant_balance=0)

        assert candidate.status == status
        assert candidate.priority == priority
        assert candidate.error == error


def test_resolve_from_probes_picks_best_survivor():
    amounts = [10, 20, 30, 40]
    probes = [
        _probe(10, error="AirdropNotCreated"),
        _probe(20, error="UserMaxClaimed"),
        _probe(30, value=0),
        _probe(40, error="Panic(0x11): arithmetic underflow or overflow"),
    ]

    selected = resolve_from_probes(amounts, probes, claimant_balance=0)

    assert selected.amount == 30
    assert selected.status == AllocationStatus.LOCKED


def test_resolve_from_probes_none_when_nothing_matches():
    probes = [_probe(10, error="AirdropNotCreated")]

    assert resolve_from_probes([10], probes, claimant_balance=0) is None


def test_resolve_from_probes_rejects_misaligned_inputs():
    with pytest.raises(ValueError):
        resolve_from_probes([10, 20], [_probe(10, value=1)], claimant_balance=0)
