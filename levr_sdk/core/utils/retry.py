from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

from loguru import logger

from levr_sdk.core.utils.web3 import is_rate_limited_error, rate_limit_delay_s

# Upper bound on any single wait, provider hints included.
MAX_RATE_LIMIT_WAIT_S = 10.0

T = TypeVar("T")


def exponential_backoff_s(
    attempt: int, *, base_delay_s: float = 0.25, max_delay_s: float | None = None
) -> float:
    delay_s = base_delay_s * (2**attempt)
    if max_delay_s is not None:
        delay_s = min(delay_s, max_delay_s)
    return delay_s


def rate_limit_backoff_s(
    attempt: int,
    exc: Exception,
    *,
    base_delay_s: float = 0.25,
    max_delay_s: float = MAX_RATE_LIMIT_WAIT_S,
) -> float:
    """Provider-supplied wait when there is one, exponential backoff otherwise; never above ``max_delay_s``."""
    hinted_s = rate_limit_delay_s(exc)
    if hinted_s is None:
        return exponential_backoff_s(
            attempt, base_delay_s=base_delay_s, max_delay_s=max_delay_s
        )
    return min(hinted_s, max_delay_s)


async def retry_rate_limited(
    fn: Callable[[], Awaitable[T]],
    *,
    label: str,
    max_retries: int = 3,
    base_delay_s: float = 0.25,
    max_delay_s: float = MAX_RATE_LIMIT_WAIT_S,
) -> T:
    """Run ``fn``, retrying only rate-limit failures; anything else propagates at once."""
    if max_retries < 1:
        raise ValueError("max_retries must be >= 1")

    for attempt in range(max_retries):
        try:
            return await fn()
        except Exception as exc:  # noqa: BLE001
            if attempt >= max_retries - 1 or not is_rate_limited_error(exc):
                raise

            delay_s = rate_limit_backoff_s(
                attempt, exc, base_delay_s=base_delay_s, max_delay_s=max_delay_s
            )
            logger.warning(
                f"{label} rate-limited on attempt {attempt + 1}/{max_retries}; retrying in {delay_s:.2f}s"
            )
            await asyncio.sleep(delay_s)

    raise RuntimeError("retry_rate_limited exhausted retries")
