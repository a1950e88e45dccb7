from __future__ import annotations

from decimal import ROUND_FLOOR, Decimal, localcontext

from levr_sdk.adapters.project_adapter.types import AprValue, BalanceResult, Pricing
from levr_sdk.core.constants.base import BPS_DENOMINATOR, MANTISSA, SECONDS_PER_YEAR
from levr_sdk.core.utils.units import format_units, format_usd, parse_decimal


def utilization_bps(allocated: int, total_supply: int) -> int:
    if total_supply <= 0:
        return 0
    return allocated * BPS_DENOMINATOR // total_supply


def utilization_percent(allocated: int, total_supply: int) -> float:
    return utilization_bps(allocated, total_supply) / 100


def annualize(rate_per_second: int) -> int:
    return rate_per_second * SECONDS_PER_YEAR


def scaled_price_ratio(pricing: Pricing | None) -> int | None:
    """Secondary/primary USD price ratio as a 1e18 fixed-point integer, floored.

    ``None`` when pricing is absent, unparseable, or the primary price is not positive.
    """
    if pricing is None:
        return None
    secondary = parse_decimal(pricing.secondary_asset_usd)
    primary = parse_decimal(pricing.primary_asset_usd)
    if secondary is None or primary is None or primary <= 0 or secondary < 0:
        return None
    with localcontext() as ctx:
        ctx.prec = 80
        ratio = secondary / primary * MANTISSA
        return int(ratio.to_integral_value(rounding=ROUND_FLOOR))


def secondary_apr_bps(
    rate_per_second: int, total_staked: int, pricing: Pricing | None
) -> int | None:
    """APR in bps for rewards paid in the secondary asset, priced in the staked token.

    Returns ``None`` (unknown, not zero) when nothing is staked or prices are missing.
    """
    if total_staked <= 0:
        return None
    price_scaled = scaled_price_ratio(pricing)
    if price_scaled is None:
        return None
    annual_in_primary = annualize(rate_per_second) * price_scaled // MANTISSA
    return annual_in_primary * BPS_DENOMINATOR // total_staked


def apr_value(bps: int) -> AprValue:
    return AprValue(bps=bps, percentage=bps / 100)


def stream_is_active(start: int, end: int, reference_timestamp: int | None) -> bool:
    if reference_timestamp is None:
        return False
    return start <= reference_timestamp <= end


def merge_pending(staking_pending: int, splitter_pending: int, splitter_active: bool) -> int:
    """Pending rewards reported to callers for one reward asset.

    With an active fee splitter both the splitter and the staking contract can
    hold an undistributed share of the same fees, so the two are added.
    """
    if splitter_active:
        return staking_pending + splitter_pending
    return staking_pending


def present_cycle_id(raw_cycle_id: int) -> int:
    return raw_cycle_id or 1


def format_balance(
    raw: int, decimals: int, usd_price: str | Decimal | None = None
) -> BalanceResult:
    price = parse_decimal(usd_price)
    return BalanceResult(
        raw=raw,
        formatted=format_units(raw, decimals),
        usd=format_usd(raw, decimals, price) if price is not None else None,
    )
