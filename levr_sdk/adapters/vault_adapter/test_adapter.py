import copy

import pytest

import levr_sdk.core.config as config
from levr_sdk.adapters.vault_adapter import VaultAdapter, VaultStatus
from levr_sdk.core.constants.contracts import ZERO_ADDRESS
from levr_sdk.testing.fake_chain import FakeChain, Revert

CHAIN_ID = 8453
VAULT = "0x1000000000000000000000000000000000000001"
TOKEN = "0x2000000000000000000000000000000000000002"
ADMIN = "0x3000000000000000000000000000000000000003"
E18 = 10**18

LOCKUP_END = 1_000
VESTING_END = 2_000


def _allocation(total=15 * E18, claimed=0, token=TOKEN):
    return (token, total, claimed, LOCKUP_END, VESTING_END, ADMIN)


@pytest.fixture(autouse=True)
def restore_global_config():
    original = copy.deepcopy(config.CONFIG)
    config.set_config({"contracts": {str(CHAIN_ID): {"vault": VAULT}}})
    yield
    config.set_config(original)


@pytest.fixture
def adapter(fake_chain: FakeChain) -> VaultAdapter:
    adapter = VaultAdapter(chain_id=CHAIN_ID)
    adapter._execute = fake_chain
    return adapter


def test_missing_vault_address_is_a_configuration_error():
    config.set_config({})

    with pytest.raises(ValueError):
        VaultAdapter(chain_id=CHAIN_ID).vault


@pytest.mark.asyncio
async def test_get_vault_state_reads_everything_in_one_batch(adapter, fake_chain):
    fake_chain.responses.update(
        {
            "allocation": _allocation(),
            "amountAvailableToClaim": 0,
            "getCurrentBlockTimestamp": 500,
        }
    )

    ok, state = await adapter.get_vault_state(TOKEN)

    assert ok is True
    assert len(fake_chain.batches) == 1
    assert [c.method for c in fake_chain.batches[0]] == [
        "allocation",
        "amountAvailableToClaim",
        "getCurrentBlockTimestamp",
    ]
    assert all(c.target == VAULT for c in fake_chain.batches[0][:2])
    assert state.allocation.amount_total == 15 * E18
    assert state.allocation.admin == ADMIN
    assert state.claimable == 0
    assert state.allocation.remaining == 15 * E18
    assert state.status == VaultStatus.LOCKED
    assert state.defaulted == ()


@pytest.mark.parametrize(
    "timestamp, claimed, expected",
    [
        (999, 0, VaultStatus.LOCKED),
        (1_000, 0, VaultStatus.VESTING),
        (1_999, 5 * E18, VaultStatus.VESTING),
        (2_000, 5 * E18, VaultStatus.VESTED),
        (1_500, 15 * E18, VaultStatus.CLAIMED),
    ],
)
@pytest.mark.asyncio
async def test_status_follows_chain_time(adapter, fake_chain, timestamp, claimed, expected):
    fake_chain.responses.update(
        {
            "allocation": _allocation(claimed=claimed),
            "amountAvailableToClaim": E18,
            "getCurrentBlockTimestamp": timestamp,
        }
    )

    ok, state = await adapter.get_vault_state(TOKEN)

    assert ok is True
    assert state.status == expected


@pytest.mark.asyncio
async def test_failed_claimable_read_counts_as_zero(adapter, fake_chain):
    fake_chain.responses.update(
        {
            "allocation": _allocation(),
            "amountAvailableToClaim": Revert("paused"),
            "getCurrentBlockTimestamp": 1_500,
        }
    )

    ok, state = await adapter.get_vault_state(TOKEN)

    assert ok is True
    assert state.claimable == 0
    assert state.defaulted == ("vault.amountAvailableToClaim",)


@pytest.mark.asyncio
async def test_failed_timestamp_leaves_status_unknown(adapter, fake_chain):
    fake_chain.responses.update(
        {"allocation": _allocation(), "amountAvailableToClaim": 0}
    )

    ok, state = await adapter.get_vault_state(TOKEN)

    assert ok is True
    assert state.reference_timestamp is None
    assert state.status is None
    assert state.defaulted == ("chain.getCurrentBlockTimestamp",)


@pytest.mark.asyncio
async def test_failed_allocation_read_is_none(adapter, fake_chain):
    fake_chain.responses["amountAvailableToClaim"] = 5

    ok, state = await adapter.get_vault_state(TOKEN)

    assert (ok, state) == (True, None)


@pytest.mark.asyncio
async def test_empty_allocation_is_none(adapter, fake_chain):
    fake_chain.responses.update(
        {
            "allocation": (ZERO_ADDRESS, 0, 0, 0, 0, ZERO_ADDRESS),
            "amountAvailableToClaim": 0,
            "getCurrentBlockTimestamp": 1,
        }
    )

    ok, allocation = await adapter.get_vault_allocation(TOKEN)

    assert (ok, allocation) == (True, None)


@pytest.mark.asyncio
async def test_get_vault_claimable_amount(adapter, fake_chain):
    fake_chain.responses["amountAvailableToClaim"] = 3 * E18

    assert await adapter.get_vault_claimable_amount(TOKEN) == (True, 3 * E18)

    fake_chain.responses["amountAvailableToClaim"] = Revert("paused")

    assert await adapter.get_vault_claimable_amount(TOKEN) == (True, 0)


@pytest.mark.asyncio
async def test_batch_failure(adapter, fake_chain):
    fake_chain.fail_with = RuntimeError("timeout")

    ok, error = await adapter.get_vault_state(TOKEN)

    assert ok is False
    assert "timeout" in error
