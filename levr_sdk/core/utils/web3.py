import time
from contextlib import asynccontextmanager
from typing import Any

from loguru import logger
from web3 import AsyncHTTPProvider, AsyncWeb3

from levr_sdk.core.config import get_rpc_urls_for_chain

# Rate-limit failover policy:
# - Move to the next configured RPC only for provider rate limiting
#   (HTTP 429 / known RPC codes / known messages)
# - Do not fail over for client errors or on-chain execution errors
_RATE_LIMIT_HTTP_STATUS = 429
_RATE_LIMIT_RPC_ERROR_CODES = {429, -32005, -33200, -33300, -33400}
_RATE_LIMIT_MESSAGE_MARKERS = (
    "too many requests",
    "rate limit",
    "request rate exceeded",
    "limit exceeded",
    "compute units per second",
    "concurrent requests",
)
_DEFAULT_RATE_LIMIT_COOLDOWN_SECONDS = 60.0
_RPC_RATE_LIMIT_COOLDOWN_UNTIL: dict[tuple[int, str], float] = {}


def _decode_rpc_response_with_id(
    provider: AsyncHTTPProvider, raw_response: bytes, request_id: Any
) -> dict[str, Any]:
    response = provider.decode_rpc_response(raw_response)
    if isinstance(response, dict) and "id" not in response:
        response["id"] = request_id
    return response


async def _perform_rpc_request(
    provider: AsyncHTTPProvider,
    *,
    method: str,
    request_data: bytes,
    request_id: Any,
) -> dict[str, Any]:
    raw_response = await provider._make_request(method, request_data)
    return _decode_rpc_response_with_id(provider, raw_response, request_id)


def _extract_http_status(exc: Exception) -> int | None:
    status = getattr(exc, "status", None)
    if isinstance(status, int):
        return status
    status_code = getattr(exc, "status_code", None)
    if isinstance(status_code, int):
        return status_code
    response = getattr(exc, "response", None)
    if response is not None:
        code = getattr(response, "status_code", None)
        if isinstance(code, int):
            return code
    return None


def _extract_retry_after_seconds_from_exception(exc: Exception) -> float | None:
    response = getattr(exc, "response", None)
    headers = getattr(response, "headers", None) if response is not None else None
    if not headers:
        return None
    value = headers.get("Retry-After")
    if value is None:
        return None
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return None
    return parsed if parsed > 0 else None


def _rpc_error_text(error: dict[str, Any]) -> str:
    msg = str(error.get("message") or "").lower()
    details = str(error.get("details") or "").lower()
    return f"{msg} {details}".strip()


def _is_rate_limited_rpc_error(error: dict[str, Any]) -> bool:
    code = error.get("code")
    if isinstance(code, int) and code in _RATE_LIMIT_RPC_ERROR_CODES:
        return True
    text = _rpc_error_text(error)
    return any(marker in text for marker in _RATE_LIMIT_MESSAGE_MARKERS)


def is_rate_limited_error(exc: Exception) -> bool:
    """True for HTTP 429s and JSON-RPC errors that carry a rate-limit signature."""
    if _extract_http_status(exc) == _RATE_LIMIT_HTTP_STATUS:
        return True
    for arg in getattr(exc, "args", ()):
        if isinstance(arg, dict) and _is_rate_limited_rpc_error(arg):
            return True
    text = str(exc).lower()
    return any(marker in text for marker in _RATE_LIMIT_MESSAGE_MARKERS)


def _extract_cooldown_seconds_from_rpc_error(error: dict[str, Any]) -> float | None:
    data = error.get("data")
    if not isinstance(data, dict):
        return None
    for key in ("backoff_seconds", "retry_after", "retry_after_seconds"):
        try:
            parsed = float(data.get(key))
        except (TypeError, ValueError):
            continue
        if parsed > 0:
            return parsed
    return None


def rate_limit_delay_s(exc: Exception) -> float | None:
    """Wait time the provider asked for: a Retry-After header or a JSON-RPC backoff hint."""
    delay_s = _extract_retry_after_seconds_from_exception(exc)
    if delay_s is not None:
        return delay_s
    for arg in getattr(exc, "args", ()):
        if isinstance(arg, dict):
            delay_s = _extract_cooldown_seconds_from_rpc_error(arg)
            if delay_s is not None:
                return delay_s
    return None


def _is_in_rate_limit_cooldown(chain_id: int, endpoint_uri: str) -> bool:
    key = (chain_id, endpoint_uri)
    until = _RPC_RATE_LIMIT_COOLDOWN_UNTIL.get(key, 0.0)
    if until <= time.monotonic():
        _RPC_RATE_LIMIT_COOLDOWN_UNTIL.pop(key, None)
        return False
    return True


def _mark_rate_limit_cooldown(
    chain_id: int, endpoint_uri: str, cooldown_seconds: float
) -> None:
    key = (chain_id, endpoint_uri)
    _RPC_RATE_LIMIT_COOLDOWN_UNTIL[key] = time.monotonic() + max(
        0.0, float(cooldown_seconds)
    )


def _clear_rate_limit_cooldowns() -> None:
    _RPC_RATE_LIMIT_COOLDOWN_UNTIL.clear()


class _FailoverRpcProvider(AsyncHTTPProvider):
    """Sends each request to the first configured RPC that is not cooling down.

    A rate-limited endpoint is parked for its Retry-After (or a default) and
    the request moves on to the next endpoint in configuration order.
    """

    def __init__(
        self,
        rpcs: list[str],
        chain_id: int,
        request_kwargs: dict | None = None,
    ):
        if not rpcs:
            raise ValueError("At least one RPC endpoint is required")
        super().__init__(rpcs[0], request_kwargs=request_kwargs)
        self.chain_id = chain_id
        self.fallback_providers = [
            AsyncHTTPProvider(rpc, request_kwargs=request_kwargs) for rpc in rpcs[1:]
        ]

    def _candidates(self) -> list[AsyncHTTPProvider]:
        providers: list[AsyncHTTPProvider] = [self, *self.fallback_providers]
        ready = [
            p
            for p in providers
            if not _is_in_rate_limit_cooldown(self.chain_id, p.endpoint_uri)
        ]
        return ready or providers

    async def disconnect(self) -> None:
        first_exc: Exception | None = None
        for provider in self.fallback_providers:
            try:
                await provider.disconnect()
            except Exception as exc:
                first_exc = first_exc or exc
        try:
            await super().disconnect()
        except Exception as exc:
            first_exc = first_exc or exc
        if first_exc is not None:
            raise first_exc

    async def make_request(self, method, params):  # type: ignore[override]
        req = self.form_request(method, params)
        request_data = self.encode_rpc_dict(req)
        request_id = req.get("id")

        last_exc: Exception | None = None
        last_response: dict[str, Any] | None = None
        for provider in self._candidates():
            try:
                response = await _perform_rpc_request(
                    provider,
                    method=method,
                    request_data=request_data,
                    request_id=request_id,
                )
            except Exception as exc:
                if not is_rate_limited_error(exc):
                    raise
                cooldown_s = (
                    _extract_retry_after_seconds_from_exception(exc)
                    or _DEFAULT_RATE_LIMIT_COOLDOWN_SECONDS
                )
                _mark_rate_limit_cooldown(
                    self.chain_id, provider.endpoint_uri, cooldown_s
                )
                logger.warning(
                    f"RPC {provider.endpoint_uri} rate-limited for chain {self.chain_id}; trying next endpoint. Error: {exc}"
                )
                last_exc = exc
                continue

            error = response.get("error")
            if isinstance(error, dict) and _is_rate_limited_rpc_error(error):
                cooldown_s = (
                    _extract_cooldown_seconds_from_rpc_error(error)
                    or _DEFAULT_RATE_LIMIT_COOLDOWN_SECONDS
                )
                _mark_rate_limit_cooldown(
                    self.chain_id, provider.endpoint_uri, cooldown_s
                )
                logger.warning(
                    f"RPC {provider.endpoint_uri} returned rate-limit JSON-RPC error for chain {self.chain_id}; trying next endpoint. Error: {error}"
                )
                last_response = response
                continue
            return response

        if last_response is not None:
            return last_response
        if last_exc is not None:
            raise last_exc
        raise RuntimeError(f"No RPC endpoint available for chain {self.chain_id}")


def get_web3_from_chain_id(chain_id: int) -> AsyncWeb3:
    rpcs = get_rpc_urls_for_chain(chain_id)
    provider = _FailoverRpcProvider(
        rpcs,
        chain_id,
        request_kwargs={"headers": AsyncHTTPProvider.get_request_headers()},
    )
    return AsyncWeb3(provider)


@asynccontextmanager
async def web3_from_chain_id(chain_id: int):
    web3 = get_web3_from_chain_id(chain_id)
    try:
        yield web3
    finally:
        await web3.provider.disconnect()
