from levr_sdk.adapters.multicall_adapter.adapter import block_timestamp_call
from levr_sdk.adapters.multicall_adapter.types import ReadPlan
from levr_sdk.adapters.project_adapter.plans import (
    GROUP_CHAIN,
    GROUP_FEE_SPLITTER,
    GROUP_GOVERNANCE,
    GROUP_STAKING,
    GROUP_TREASURY,
    build_chain_group,
    build_factory_group,
    build_fee_splitter_group,
    build_governance_group,
    build_staking_group,
    build_token_group,
    build_treasury_group,
    build_user_group,
)
from levr_sdk.adapters.project_adapter.types import EntityAddressSet, ProposalType

TOKEN = "0x1000000000000000000000000000000000000001"
WETH = "0x4200000000000000000000000000000000000006"
FACTORY = "0x6000000000000000000000000000000000000006"
DEPLOYER = "0x7000000000000000000000000000000000000007"
USER = "0x8000000000000000000000000000000000000008"
ADDRESSES = EntityAddressSet(
    treasury="0x2000000000000000000000000000000000000002",
    governor="0x3000000000000000000000000000000000000003",
    staking="0x4000000000000000000000000000000000000004",
    staked_token="0x5000000000000000000000000000000000000005",
    factory=FACTORY,
)


def test_group_sizes_follow_optional_flags():
    assert build_token_group(TOKEN).count == 8
    assert build_factory_group(FACTORY, TOKEN).count == 2
    assert build_factory_group(FACTORY, TOKEN, DEPLOYER).count == 3
    assert build_treasury_group(TOKEN, ADDRESSES).count == 2
    assert build_treasury_group(TOKEN, ADDRESSES, WETH).count == 3
    assert build_governance_group(ADDRESSES.governor).count == 1 + len(ProposalType)
    assert build_staking_group(ADDRESSES.staking, TOKEN).count == 8
    assert build_staking_group(ADDRESSES.staking, TOKEN, WETH).count == 10
    assert build_fee_splitter_group(DEPLOYER, TOKEN).count == 2
    assert build_fee_splitter_group(DEPLOYER, TOKEN, WETH).count == 3
    assert build_user_group(USER, TOKEN, ADDRESSES).count == 5
    assert build_user_group(USER, TOKEN, ADDRESSES, WETH).count == 7


def test_secondary_calls_are_appended_last():
    staking = build_staking_group(ADDRESSES.staking, TOKEN, WETH)

    assert [c.method for c in staking.calls[-2:]] == [
        "outstandingRewards",
        "rewardRatePerSecond",
    ]
    assert staking.calls[-1].args == (WETH,)
    assert build_treasury_group(TOKEN, ADDRESSES, WETH).calls[-1].target == WETH


def test_governance_reads_every_proposal_type():
    group = build_governance_group(ADDRESSES.governor)

    assert [c.args for c in group.calls[1:]] == [(int(kind),) for kind in ProposalType]


def test_data_plan_records_group_order_and_sizes():
    plan = (
        ReadPlan()
        .add(build_treasury_group(TOKEN, ADDRESSES, WETH))
        .add(build_governance_group(ADDRESSES.governor))
        .add(build_staking_group(ADDRESSES.staking, TOKEN, WETH))
        .add(build_fee_splitter_group(DEPLOYER, TOKEN, WETH))
        .add(build_chain_group(block_timestamp_call()))
    )

    assert plan.names == [
        GROUP_TREASURY,
        GROUP_GOVERNANCE,
        GROUP_STAKING,
        GROUP_FEE_SPLITTER,
        GROUP_CHAIN,
    ]
    assert plan.sizes == [3, 3, 10, 3, 1]
    assert len(plan.calls) == sum(plan.sizes)
