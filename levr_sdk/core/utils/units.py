from __future__ import annotations

from decimal import ROUND_DOWN, Decimal, InvalidOperation, localcontext

# Enough significant digits for any uint256 amount.
_UINT256_PRECISION = 80


def _to_decimal(value: str | int | float | Decimal) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return Decimal(value)
    return Decimal(str(value).strip())


def parse_decimal(value: str | int | float | Decimal | None) -> Decimal | None:
    """Best-effort decimal parse; ``None`` for missing, malformed or non-finite input."""
    if value is None:
        return None
    try:
        parsed = _to_decimal(value)
    except InvalidOperation:
        return None
    if not parsed.is_finite():
        return None
    return parsed


def to_erc20_raw(amount_tokens: str | int | float | Decimal, decimals: int) -> int:
    try:
        amt = _to_decimal(amount_tokens)
    except InvalidOperation as exc:
        raise ValueError(f"Invalid token amount: {amount_tokens}") from exc
    if amt < 0:
        raise ValueError("Amount must be non-negative")
    with localcontext() as ctx:
        ctx.prec = _UINT256_PRECISION
        scale = Decimal(10) ** int(decimals)
        return int((amt * scale).to_integral_value(rounding=ROUND_DOWN))


def from_erc20_raw(raw: int, decimals: int) -> Decimal:
    with localcontext() as ctx:
        ctx.prec = _UINT256_PRECISION
        return Decimal(int(raw)).scaleb(-int(decimals))


def format_units(raw: int, decimals: int) -> str:
    """Render a raw integer amount as a plain decimal string without trailing zeros."""
    value = from_erc20_raw(raw, decimals)
    if value == 0:
        return "0"
    text = f"{value:f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_usd(raw: int, decimals: int, usd_price: Decimal) -> str:
    with localcontext() as ctx:
        ctx.prec = _UINT256_PRECISION
        usd = from_erc20_raw(raw, decimals) * usd_price
        return f"{usd.quantize(Decimal('0.01'), rounding=ROUND_DOWN):f}"
