"""Read-plan builders for one Levr project.

Each builder returns a ``ReadGroup``; the group's size is derived from the calls
it holds, so the size recorded in a ``ReadPlan`` always matches what was appended.
Optional calls (secondary reward asset, fee splitter) are appended at the end
of their group so parsers can detect them by slice length.

Plan order for a full project read:

    discovery:  token, factory
    data:       treasury, governance, staking, fee_splitter (optional), chain
"""

from __future__ import annotations

from levr_sdk.adapters.multicall_adapter.types import ReadCall, ReadGroup, build_read
from levr_sdk.adapters.project_adapter.types import EntityAddressSet, ProposalType
from levr_sdk.core.constants.clanker_abi import CLANKER_TOKEN_ABI
from levr_sdk.core.constants.erc20_abi import ERC20_ABI
from levr_sdk.core.constants.levr_abi import (
    LEVR_FACTORY_ABI,
    LEVR_FEE_SPLITTER_ABI,
    LEVR_FEE_SPLITTER_DEPLOYER_ABI,
    LEVR_GOVERNOR_ABI,
    LEVR_STAKING_ABI,
)

GROUP_TOKEN = "token"
GROUP_FACTORY = "factory"
GROUP_TREASURY = "treasury"
GROUP_GOVERNANCE = "governance"
GROUP_STAKING = "staking"
GROUP_FEE_SPLITTER = "fee_splitter"
GROUP_CHAIN = "chain"
GROUP_USER = "user"


def build_token_group(token: str) -> ReadGroup:
    return ReadGroup(
        GROUP_TOKEN,
        (
            build_read(token, ERC20_ABI, "decimals"),
            build_read(token, ERC20_ABI, "name"),
            build_read(token, ERC20_ABI, "symbol"),
            build_read(token, ERC20_ABI, "totalSupply"),
            build_read(token, CLANKER_TOKEN_ABI, "admin"),
            build_read(token, CLANKER_TOKEN_ABI, "originalAdmin"),
            build_read(token, CLANKER_TOKEN_ABI, "metadata"),
            build_read(token, CLANKER_TOKEN_ABI, "imageUrl"),
        ),
    )


def build_factory_group(
    factory: str, token: str, fee_splitter_deployer: str | None = None
) -> ReadGroup:
    calls = [
        build_read(factory, LEVR_FACTORY_ABI, "getProjectContracts", token),
        build_read(factory, LEVR_FACTORY_ABI, "trustedForwarder"),
    ]
    if fee_splitter_deployer:
        calls.append(
            build_read(
                fee_splitter_deployer, LEVR_FEE_SPLITTER_DEPLOYER_ABI, "getSplitter", token
            )
        )
    return ReadGroup(GROUP_FACTORY, tuple(calls))


def build_treasury_group(
    token: str, addresses: EntityAddressSet, secondary_asset: str | None = None
) -> ReadGroup:
    calls = [
        build_read(token, ERC20_ABI, "balanceOf", addresses.treasury),
        build_read(token, ERC20_ABI, "balanceOf", addresses.staking),
    ]
    if secondary_asset:
        calls.append(build_read(secondary_asset, ERC20_ABI, "balanceOf", addresses.staking))
    return ReadGroup(GROUP_TREASURY, tuple(calls))


def build_governance_group(governor: str) -> ReadGroup:
    calls = [build_read(governor, LEVR_GOVERNOR_ABI, "currentCycleId")]
    calls.extend(
        build_read(governor, LEVR_GOVERNOR_ABI, "activeProposalCount", int(kind))
        for kind in ProposalType
    )
    return ReadGroup(GROUP_GOVERNANCE, tuple(calls))


def build_staking_group(
    staking: str, token: str, secondary_asset: str | None = None
) -> ReadGroup:
    calls = [
        build_read(staking, LEVR_STAKING_ABI, "totalStaked"),
        build_read(staking, LEVR_STAKING_ABI, "aprBps"),
        build_read(staking, LEVR_STAKING_ABI, "outstandingRewards", token),
        build_read(staking, LEVR_STAKING_ABI, "rewardRatePerSecond", token),
        build_read(staking, LEVR_STAKING_ABI, "escrowBalance", token),
        build_read(staking, LEVR_STAKING_ABI, "streamWindowSeconds"),
        build_read(staking, LEVR_STAKING_ABI, "streamStart"),
        build_read(staking, LEVR_STAKING_ABI, "streamEnd"),
    ]
    if secondary_asset:
        calls.extend(
            [
                build_read(staking, LEVR_STAKING_ABI, "outstandingRewards", secondary_asset),
                build_read(staking, LEVR_STAKING_ABI, "rewardRatePerSecond", secondary_asset),
            ]
        )
    return ReadGroup(GROUP_STAKING, tuple(calls))


def build_fee_splitter_group(
    splitter: str, token: str, secondary_asset: str | None = None
) -> ReadGroup:
    calls = [
        build_read(splitter, LEVR_FEE_SPLITTER_ABI, "isSplitsConfigured"),
        build_read(splitter, LEVR_FEE_SPLITTER_ABI, "pendingFees", token),
    ]
    if secondary_asset:
        calls.append(build_read(splitter, LEVR_FEE_SPLITTER_ABI, "pendingFees", secondary_asset))
    return ReadGroup(GROUP_FEE_SPLITTER, tuple(calls))


def build_chain_group(block_timestamp_call: ReadCall) -> ReadGroup:
    return ReadGroup(GROUP_CHAIN, (block_timestamp_call,))


def build_user_group(
    user: str,
    token: str,
    addresses: EntityAddressSet,
    secondary_asset: str | None = None,
) -> ReadGroup:
    """Wallet-specific reads; the two secondary-asset calls come last when configured."""
    calls = [
        build_read(token, ERC20_ABI, "balanceOf", user),
        build_read(addresses.staking, LEVR_STAKING_ABI, "stakedBalanceOf", user),
        build_read(token, ERC20_ABI, "allowance", user, addresses.staking),
        build_read(addresses.staking, LEVR_STAKING_ABI, "claimableRewards", user, token),
        build_read(addresses.staking, LEVR_STAKING_ABI, "getVotingPower", user),
    ]
    if secondary_asset:
        calls.extend(
            [
                build_read(secondary_asset, ERC20_ABI, "balanceOf", user),
                build_read(
                    addresses.staking,
                    LEVR_STAKING_ABI,
                    "claimableRewards",
                    user,
                    secondary_asset,
                ),
            ]
        )
    return ReadGroup(GROUP_USER, tuple(calls))
