import copy
from unittest.mock import AsyncMock

import pytest

import levr_sdk.core.config as config
from levr_sdk.core.errors import ConfigurationError
from levr_sdk.core.utils.web3 import (
    _clear_rate_limit_cooldowns,
    _FailoverRpcProvider,
    get_web3_from_chain_id,
    is_rate_limited_error,
)

PRIMARY = "https://primary-rpc.invalid"
BACKUP = "https://backup-rpc.invalid"


class _RateLimitedError(Exception):
    def __init__(self):
        super().__init__("Too Many Requests")
        self.status = 429


@pytest.fixture(autouse=True)
def clear_cooldowns():
    _clear_rate_limit_cooldowns()
    yield
    _clear_rate_limit_cooldowns()


@pytest.fixture
def restore_global_config() -> None:
    original = copy.deepcopy(config.CONFIG)
    yield
    config.set_config(original)


def _provider() -> _FailoverRpcProvider:
    return _FailoverRpcProvider([PRIMARY, BACKUP], chain_id=8453)


@pytest.mark.asyncio
async def test_failover_moves_to_next_rpc_on_http_429():
    provider = _provider()
    backup = provider.fallback_providers[0]
    provider._make_request = AsyncMock(side_effect=_RateLimitedError())
    backup._make_request = AsyncMock(
        return_value=b'{"jsonrpc":"2.0","id":1,"result":"0x1"}'
    )

    resp = await provider.make_request("eth_blockNumber", [])

    assert resp["result"] == "0x1"
    assert backup._make_request.await_count == 1


@pytest.mark.asyncio
async def test_failover_moves_to_next_rpc_on_rate_limit_error_code():
    provider = _provider()
    backup = provider.fallback_providers[0]
    provider._make_request = AsyncMock(
        return_value=(
            b'{"jsonrpc":"2.0","id":1,"error":{"code":-32005,"message":"Limit exceeded","data":{"backoff_seconds":120}}}'
        )
    )
    backup._make_request = AsyncMock(
        return_value=b'{"jsonrpc":"2.0","id":1,"result":"0x2"}'
    )

    resp = await provider.make_request("eth_blockNumber", [])

    assert resp["result"] == "0x2"
    assert backup._make_request.await_count == 1


@pytest.mark.asyncio
async def test_no_failover_on_execution_error():
    provider = _provider()
    backup = provider.fallback_providers[0]
    provider._make_request = AsyncMock(
        return_value=(
            b'{"jsonrpc":"2.0","id":1,"error":{"code":3,"message":"execution reverted"}}'
        )
    )
    backup._make_request = AsyncMock(
        return_value=b'{"jsonrpc":"2.0","id":1,"result":"0x1"}'
    )

    resp = await provider.make_request("eth_call", [])

    assert resp["error"]["code"] == 3
    assert backup._make_request.await_count == 0


@pytest.mark.asyncio
async def test_rate_limited_rpc_is_skipped_while_cooling_down():
    provider = _provider()
    backup = provider.fallback_providers[0]
    provider._make_request = AsyncMock(
        side_effect=[
            _RateLimitedError(),
            b'{"jsonrpc":"2.0","id":1,"result":"0xSHOULD_NOT_USE_PRIMARY"}',
        ]
    )
    backup._make_request = AsyncMock(
        return_value=b'{"jsonrpc":"2.0","id":1,"result":"0x3"}'
    )

    first = await provider.make_request("eth_blockNumber", [])
    second = await provider.make_request("eth_blockNumber", [])

    assert first["result"] == "0x3"
    assert second["result"] == "0x3"
    assert provider._make_request.await_count == 1
    assert backup._make_request.await_count == 2


@pytest.mark.asyncio
async def test_exhausted_rpcs_raise_last_rate_limit_error():
    provider = _provider()
    provider._make_request = AsyncMock(side_effect=_RateLimitedError())
    provider.fallback_providers[0]._make_request = AsyncMock(
        side_effect=_RateLimitedError()
    )

    with pytest.raises(_RateLimitedError):
        await provider.make_request("eth_blockNumber", [])


@pytest.mark.asyncio
async def test_disconnect_closes_fallback_providers():
    provider = _provider()
    provider.fallback_providers[0].disconnect = AsyncMock()

    await provider.disconnect()

    assert provider.fallback_providers[0].disconnect.await_count == 1


def test_is_rate_limited_error():
    assert is_rate_limited_error(_RateLimitedError())
    assert is_rate_limited_error(ValueError({"code": -32005, "message": "slow down"}))
    assert is_rate_limited_error(RuntimeError("rate limit reached"))
    assert not is_rate_limited_error(ValueError("execution reverted"))


def test_provider_requires_an_rpc():
    with pytest.raises(ValueError):
        _FailoverRpcProvider([], chain_id=8453)


def test_web3_uses_configured_rpcs_in_order(restore_global_config: None):
    config.set_config({"rpc_urls": {"8453": [PRIMARY, BACKUP]}})

    provider = get_web3_from_chain_id(8453).provider

    assert provider.endpoint_uri == PRIMARY
    assert [p.endpoint_uri for p in provider.fallback_providers] == [BACKUP]


def test_web3_rejects_unknown_chain(restore_global_config: None):
    config.set_config({})

    with pytest.raises(ConfigurationError):
        get_web3_from_chain_id(999_999)
