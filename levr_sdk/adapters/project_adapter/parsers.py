"""Turn slices of tagged call results into project records.

Apart from the factory registration lookup, a failed call never aborts a parse:
the field falls back to a fixed default (0 for amounts, "" for strings, 18
decimals, the zero address, ``None`` for metadata). Optional trailing calls are
detected from the slice length.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence

from eth_utils import is_address, to_checksum_address
from loguru import logger

from levr_sdk.adapters.multicall_adapter.types import CallResult
from levr_sdk.adapters.project_adapter.metrics import (
    apr_value,
    format_balance,
    merge_pending,
    present_cycle_id,
    secondary_apr_bps,
    stream_is_active,
    utilization_bps,
    utilization_percent,
)
from levr_sdk.adapters.project_adapter.types import (
    EntityAddressSet,
    FactoryData,
    FeeSplitterState,
    GovernanceStats,
    OutstandingRewards,
    Pricing,
    ProjectMetadata,
    ProposalCounts,
    ProposalType,
    RewardBalances,
    RewardRates,
    StakingApr,
    StakingStats,
    StreamWindow,
    TokenRecord,
    TreasuryStats,
    UserState,
)
from levr_sdk.core.constants.base import DEFAULT_TOKEN_DECIMALS
from levr_sdk.core.constants.contracts import ZERO_ADDRESS
from levr_sdk.core.errors import ReadPlanMismatchError, RegistrationLookupError

SECONDARY_ASSET_DECIMALS = 18

TOKEN_METHODS = (
    "decimals",
    "name",
    "symbol",
    "totalSupply",
    "admin",
    "originalAdmin",
    "metadata",
    "imageUrl",
)
FACTORY_METHODS = ("getProjectContracts", "trustedForwarder")
FACTORY_OPTIONAL = ("getSplitter",)
TREASURY_METHODS = ("balanceOf", "balanceOf")
TREASURY_OPTIONAL = ("balanceOf",)
GOVERNANCE_METHODS = ("currentCycleId",) + ("activeProposalCount",) * len(ProposalType)
STAKING_METHODS = (
    "totalStaked",
    "aprBps",
    "outstandingRewards",
    "rewardRatePerSecond",
    "escrowBalance",
    "streamWindowSeconds",
    "streamStart",
    "streamEnd",
)
STAKING_OPTIONAL = ("outstandingRewards", "rewardRatePerSecond")
FEE_SPLITTER_METHODS = ("isSplitsConfigured", "pendingFees")
FEE_SPLITTER_OPTIONAL = ("pendingFees",)
CHAIN_METHODS = ("getCurrentBlockTimestamp",)
USER_METHODS = (
    "balanceOf",
    "stakedBalanceOf",
    "allowance",
    "claimableRewards",
    "getVotingPower",
)
USER_OPTIONAL = ("balanceOf", "claimableRewards")


def expect(
    results: Sequence[CallResult],
    methods: Sequence[str],
    optional: Sequence[str] = (),
) -> list[CallResult | None]:
    """Check a slice against its expected method layout.

    Returns the results padded with ``None`` for optional calls that were not
    planned. Any other length, or a method name out of place, is a plan bug.
    """
    if len(results) not in (len(methods), len(methods) + len(optional)):
        raise ReadPlanMismatchError(
            f"expected {len(methods)} or {len(methods) + len(optional)} results, got {len(results)}"
        )
    layout = [*methods, *optional]
    for idx, result in enumerate(results):
        if result.method != layout[idx]:
            raise ReadPlanMismatchError(
                f"slot {idx} holds {result.method}, expected {layout[idx]}"
            )
    return [*results, *([None] * (len(layout) - len(results)))]


def failed_reads(slices: Mapping[str, Sequence[CallResult]]) -> tuple[str, ...]:
    """Name every failed read as ``group.method``; indexed group names drop their ``:n`` suffix."""
    return tuple(
        f"{name.split(':')[0]}.{result.method}"
        for name, results in slices.items()
        for result in results
        if not result.success
    )


def _int(result: CallResult | None, default: int = 0) -> int:
    if result is None or not result.success:
        return default
    return int(result.value)


def _str(result: CallResult | None, default: str = "") -> str:
    if result is None or not result.success or result.value is None:
        return default
    return str(result.value)


def _address(value: object) -> str:
    if isinstance(value, str) and is_address(value):
        return to_checksum_address(value)
    return ZERO_ADDRESS


def _usd(pricing: Pricing | None, secondary: bool = False) -> str | None:
    if pricing is None:
        return None
    return pricing.secondary_asset_usd if secondary else pricing.primary_asset_usd


def parse_metadata(raw: str | None) -> ProjectMetadata | None:
    """Parse the token's free-form JSON metadata; ``None`` when it is not a JSON object.

    Badly typed known fields fall back to empty values rather than discarding
    the rest of the object.
    """
    if not raw:
        return None
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        logger.debug("Ignoring token metadata that is not valid JSON")
        return None
    if not isinstance(data, dict):
        return None
    return ProjectMetadata.model_validate(data)


def parse_token(results: Sequence[CallResult], token: str) -> TokenRecord:
    (
        decimals,
        name,
        symbol,
        total_supply,
        admin,
        original_admin,
        metadata,
        image_url,
    ) = expect(results, TOKEN_METHODS)
    return TokenRecord(
        address=to_checksum_address(token),
        decimals=_int(decimals, DEFAULT_TOKEN_DECIMALS),
        name=_str(name),
        symbol=_str(symbol),
        total_supply=_int(total_supply),
        admin=_address(admin.value) if admin.success else ZERO_ADDRESS,
        original_admin=(
            _address(original_admin.value) if original_admin.success else ZERO_ADDRESS
        ),
        metadata=parse_metadata(_str(metadata)),
        image_url=_str(image_url) or None,
    )


def parse_factory(results: Sequence[CallResult], factory: str) -> FactoryData:
    """Registration is the one read with no default: a failed lookup raises."""
    project, forwarder, splitter = expect(results, FACTORY_METHODS, FACTORY_OPTIONAL)

    if not project.success:
        raise RegistrationLookupError(f"getProjectContracts failed: {project.error}")
    if project.value:
        treasury, governor, staking, staked_token, verified = project.value
        addresses = EntityAddressSet(
            treasury=_address(treasury),
            governor=_address(governor),
            staking=_address(staking),
            staked_token=_address(staked_token),
            factory=to_checksum_address(factory),
        )
    else:
        addresses = EntityAddressSet(factory=to_checksum_address(factory))
        verified = False

    fee_splitter = None
    if splitter is not None and splitter.success:
        splitter_address = _address(splitter.value)
        if splitter_address != ZERO_ADDRESS:
            fee_splitter = splitter_address

    return FactoryData(
        addresses=addresses,
        forwarder=_address(forwarder.value) if forwarder.success else ZERO_ADDRESS,
        verified=bool(verified),
        fee_splitter=fee_splitter,
    )


def parse_treasury(
    results: Sequence[CallResult],
    token: TokenRecord,
    pricing: Pricing | None = None,
) -> TreasuryStats:
    treasury_balance, staking_balance, staking_secondary = expect(
        results, TREASURY_METHODS, TREASURY_OPTIONAL
    )
    treasury_raw = _int(treasury_balance)
    staking_raw = _int(staking_balance)
    allocated = treasury_raw + staking_raw
    usd = _usd(pricing)

    bps = utilization_bps(allocated, token.total_supply)
    return TreasuryStats(
        balance=format_balance(treasury_raw, token.decimals, usd),
        staking_balance=format_balance(staking_raw, token.decimals, usd),
        staking_secondary_balance=(
            format_balance(
                _int(staking_secondary),
                SECONDARY_ASSET_DECIMALS,
                _usd(pricing, secondary=True),
            )
            if staking_secondary is not None
            else None
        ),
        total_allocated=format_balance(allocated, token.decimals, usd),
        utilization_bps=bps,
        utilization=utilization_percent(allocated, token.total_supply),
    )


def parse_governance(results: Sequence[CallResult]) -> GovernanceStats:
    cycle, *counts = expect(results, GOVERNANCE_METHODS)
    raw_cycle_id = _int(cycle)
    return GovernanceStats(
        current_cycle_id=present_cycle_id(raw_cycle_id),
        raw_cycle_id=raw_cycle_id,
        active_proposals=ProposalCounts(
            **{
                kind.name.lower(): _int(result)
                for kind, result in zip(ProposalType, counts, strict=True)
            }
        ),
    )


def parse_fee_splitter(results: Sequence[CallResult], address: str) -> FeeSplitterState:
    configured, pending, pending_secondary = expect(
        results, FEE_SPLITTER_METHODS, FEE_SPLITTER_OPTIONAL
    )
    return FeeSplitterState(
        address=to_checksum_address(address),
        active=bool(configured.value) if configured.success else False,
        pending_fees=_int(pending),
        pending_fees_secondary=(
            _int(pending_secondary) if pending_secondary is not None else None
        ),
    )


def parse_chain_timestamp(results: Sequence[CallResult]) -> int | None:
    (timestamp,) = expect(results, CHAIN_METHODS)
    if not timestamp.success:
        logger.warning(f"Block timestamp read failed: {timestamp.error}")
        return None
    return int(timestamp.value)


def _outstanding(result: CallResult | None) -> tuple[int, int]:
    if result is None or not result.success:
        return 0, 0
    available, pending = result.value
    return int(available), int(pending)


def parse_staking(
    results: Sequence[CallResult],
    token: TokenRecord,
    *,
    reference_timestamp: int | None,
    pricing: Pricing | None = None,
    fee_splitter: FeeSplitterState | None = None,
) -> StakingStats:
    (
        total_staked,
        apr_bps,
        outstanding,
        reward_rate,
        escrow,
        window_seconds,
        stream_start,
        stream_end,
        outstanding_secondary,
        reward_rate_secondary,
    ) = expect(results, STAKING_METHODS, STAKING_OPTIONAL)

    has_secondary = outstanding_secondary is not None
    splitter_active = fee_splitter is not None and fee_splitter.active
    usd = _usd(pricing)
    usd_secondary = _usd(pricing, secondary=True)
    total_staked_raw = _int(total_staked)

    available, pending = _outstanding(outstanding)
    primary_rewards = RewardBalances(
        available=format_balance(available, token.decimals, usd),
        pending=format_balance(
            merge_pending(
                pending,
                fee_splitter.pending_fees if fee_splitter else 0,
                splitter_active,
            ),
            token.decimals,
            usd,
        ),
    )

    secondary_rewards = None
    secondary_rate = None
    secondary_apr = None
    if has_secondary:
        available_2, pending_2 = _outstanding(outstanding_secondary)
        secondary_rewards = RewardBalances(
            available=format_balance(available_2, SECONDARY_ASSET_DECIMALS, usd_secondary),
            pending=format_balance(
                merge_pending(
                    pending_2,
                    (fee_splitter.pending_fees_secondary or 0) if fee_splitter else 0,
                    splitter_active,
                ),
                SECONDARY_ASSET_DECIMALS,
                usd_secondary,
            ),
        )
        if reward_rate_secondary is not None and reward_rate_secondary.success:
            rate = int(reward_rate_secondary.value)
            secondary_rate = format_balance(rate, SECONDARY_ASSET_DECIMALS, usd_secondary)
            bps = secondary_apr_bps(rate, total_staked_raw, pricing)
            secondary_apr = apr_value(bps) if bps is not None else None

    start = _int(stream_start)
    end = _int(stream_end)
    return StakingStats(
        total_staked=format_balance(total_staked_raw, token.decimals, usd),
        apr=StakingApr(primary=apr_value(_int(apr_bps)), secondary=secondary_apr),
        outstanding_rewards=OutstandingRewards(
            primary=primary_rewards, secondary=secondary_rewards
        ),
        reward_rates=RewardRates(
            primary=format_balance(_int(reward_rate), token.decimals, usd),
            secondary=secondary_rate,
        ),
        escrow_balance=format_balance(_int(escrow), token.decimals, usd),
        stream=StreamWindow(
            start=start,
            end=end,
            window_seconds=_int(window_seconds),
            is_active=stream_is_active(start, end, reference_timestamp),
        ),
        reference_timestamp=reference_timestamp,
    )


def parse_user(
    results: Sequence[CallResult],
    user: str,
    token: TokenRecord,
    pricing: Pricing | None = None,
) -> UserState:
    (
        balance,
        staked,
        allowance,
        claimable,
        voting_power,
        secondary_balance,
        claimable_secondary,
    ) = expect(results, USER_METHODS, USER_OPTIONAL)
    usd = _usd(pricing)
    usd_secondary = _usd(pricing, secondary=True)
    has_secondary = secondary_balance is not None

    return UserState(
        address=to_checksum_address(user),
        token_balance=format_balance(_int(balance), token.decimals, usd),
        secondary_balance=(
            format_balance(_int(secondary_balance), SECONDARY_ASSET_DECIMALS, usd_secondary)
            if has_secondary
            else None
        ),
        staked_balance=format_balance(_int(staked), token.decimals, usd),
        allowance=format_balance(_int(allowance), token.decimals),
        claimable_rewards=format_balance(_int(claimable), token.decimals, usd),
        claimable_rewards_secondary=(
            format_balance(_int(claimable_secondary), SECONDARY_ASSET_DECIMALS, usd_secondary)
            if has_secondary
            else None
        ),
        voting_power=_int(voting_power),
    )
