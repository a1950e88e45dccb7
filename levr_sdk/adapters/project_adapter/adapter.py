from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace
from typing import Any

from eth_utils import to_checksum_address

from levr_sdk.adapters.multicall_adapter.adapter import (
    block_timestamp_call,
    execute_reads,
)
from levr_sdk.adapters.multicall_adapter.types import (
    CallResult,
    ReadCall,
    ReadGroup,
    ReadPlan,
    build_read,
)
from levr_sdk.adapters.project_adapter.parsers import (
    failed_reads,
    parse_chain_timestamp,
    parse_factory,
    parse_fee_splitter,
    parse_governance,
    parse_staking,
    parse_token,
    parse_treasury,
    parse_user,
)
from levr_sdk.adapters.project_adapter.plans import (
    GROUP_CHAIN,
    GROUP_FACTORY,
    GROUP_FEE_SPLITTER,
    GROUP_GOVERNANCE,
    GROUP_STAKING,
    GROUP_TOKEN,
    GROUP_TREASURY,
    GROUP_USER,
    build_chain_group,
    build_factory_group,
    build_fee_splitter_group,
    build_governance_group,
    build_staking_group,
    build_token_group,
    build_treasury_group,
    build_user_group,
)
from levr_sdk.adapters.project_adapter.types import (
    EntityAddressSet,
    FactoryData,
    Pricing,
    Project,
    ProjectSummary,
    TokenRecord,
    UserState,
)
from levr_sdk.core.adapters.BaseAdapter import BaseAdapter
from levr_sdk.core.adapters.decorators import status_tuple
from levr_sdk.core.config import (
    get_contract_address,
    get_multicall_address,
    require_contract_address,
)
from levr_sdk.core.constants.base import ADAPTER_PROJECT, DEFAULT_PAGINATION_LIMIT
from levr_sdk.core.constants.levr_abi import LEVR_FACTORY_ABI
from levr_sdk.core.errors import BatchExecutionError

_GROUP_REGISTRY = "registry"


class ProjectAdapter(BaseAdapter):
    """Aggregated read access to Levr projects on one chain.

    A project read takes two batched round trips: a discovery batch (token
    metadata plus factory registration) and, for registered projects, a data
    batch covering treasury, governance, staking, fee splitter and the block
    timestamp.
    """

    adapter_type = ADAPTER_PROJECT

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        *,
        chain_id: int,
        secondary_asset: str | None = None,
        include_fee_splitter: bool = True,
    ) -> None:
        super().__init__("project_adapter", config)
        self.chain_id = int(chain_id)
        secondary = secondary_asset or get_contract_address(self.chain_id, "weth")
        self.secondary_asset = to_checksum_address(secondary) if secondary else None
        self.include_fee_splitter = include_fee_splitter

    @property
    def factory(self) -> str:
        return require_contract_address(self.chain_id, "factory")

    @property
    def fee_splitter_deployer(self) -> str | None:
        if not self.include_fee_splitter:
            return None
        return get_contract_address(self.chain_id, "fee_splitter_deployer")

    async def _execute(self, calls: Sequence[ReadCall]) -> list[CallResult]:
        return await execute_reads(self.chain_id, calls)

    async def _run(self, plan: ReadPlan) -> dict[str, list[CallResult]]:
        results = await self._execute(plan.calls)
        return plan.split(results)

    async def _discover(
        self, token: str
    ) -> tuple[TokenRecord, FactoryData, tuple[str, ...]]:
        token = to_checksum_address(token)
        plan = (
            ReadPlan()
            .add(build_token_group(token))
            .add(build_factory_group(self.factory, token, self.fee_splitter_deployer))
        )
        slices = await self._run(plan)
        return (
            parse_token(slices[GROUP_TOKEN], token),
            parse_factory(slices[GROUP_FACTORY], self.factory),
            failed_reads(slices),
        )

    @status_tuple
    async def get_project(
        self, token: str, *, pricing: Pricing | None = None
    ) -> Project | None:
        """Read one project. Returns ``None`` when the token is not registered with the factory."""
        token_record, factory, discovery_failed = await self._discover(token)
        addresses = factory.addresses
        if not addresses.is_registered:
            self.logger.info(f"Token {token_record.address} is not a registered Levr project")
            return None

        plan = (
            ReadPlan()
            .add(build_treasury_group(token_record.address, addresses, self.secondary_asset))
            .add(build_governance_group(addresses.governor))
            .add(build_staking_group(addresses.staking, token_record.address, self.secondary_asset))
        )
        if factory.fee_splitter:
            plan.add(
                build_fee_splitter_group(
                    factory.fee_splitter, token_record.address, self.secondary_asset
                )
            )
        plan.add(
            build_chain_group(block_timestamp_call(get_multicall_address(self.chain_id)))
        )
        slices = await self._run(plan)

        fee_splitter = (
            parse_fee_splitter(slices[GROUP_FEE_SPLITTER], factory.fee_splitter)
            if factory.fee_splitter
            else None
        )
        reference_timestamp = parse_chain_timestamp(slices[GROUP_CHAIN])

        return Project(
            chain_id=self.chain_id,
            addresses=addresses,
            forwarder=factory.forwarder,
            token=token_record,
            treasury_stats=parse_treasury(slices[GROUP_TREASURY], token_record, pricing),
            staking_stats=parse_staking(
                slices[GROUP_STAKING],
                token_record,
                reference_timestamp=reference_timestamp,
                pricing=pricing,
                fee_splitter=fee_splitter,
            ),
            governance_stats=parse_governance(slices[GROUP_GOVERNANCE]),
            fee_splitter=fee_splitter,
            pricing=pricing,
            defaulted=discovery_failed + failed_reads(slices),
        )

    @status_tuple
    async def get_projects(
        self, *, offset: int = 0, limit: int = DEFAULT_PAGINATION_LIMIT
    ) -> list[ProjectSummary]:
        """Page through the factory registry and return summary stats per registered project."""
        registry_call = build_read(self.factory, LEVR_FACTORY_ABI, "getProjects", offset, limit)
        registry = (
            await self._run(ReadPlan().add(ReadGroup(_GROUP_REGISTRY, (registry_call,))))
        )[_GROUP_REGISTRY][0]
        if not registry.success:
            raise BatchExecutionError(f"getProjects failed: {registry.error}")

        entries, _total = registry.value
        projects: list[tuple[str, EntityAddressSet, bool]] = []
        for clanker_token, (treasury, governor, staking, staked_token, verified) in entries:
            addresses = EntityAddressSet(
                treasury=to_checksum_address(treasury),
                governor=to_checksum_address(governor),
                staking=to_checksum_address(staking),
                staked_token=to_checksum_address(staked_token),
                factory=to_checksum_address(self.factory),
            )
            if addresses.is_registered:
                projects.append((to_checksum_address(clanker_token), addresses, bool(verified)))
        if not projects:
            return []

        plan = ReadPlan()
        for idx, (token, addresses, _) in enumerate(projects):
            plan.add(replace(build_token_group(token), name=f"{GROUP_TOKEN}:{idx}"))
            plan.add(
                replace(
                    build_treasury_group(token, addresses),
                    name=f"{GROUP_TREASURY}:{idx}",
                )
            )
            plan.add(
                replace(
                    build_governance_group(addresses.governor),
                    name=f"{GROUP_GOVERNANCE}:{idx}",
                )
            )
        slices = await self._run(plan)

        summaries: list[ProjectSummary] = []
        for idx, (token, addresses, verified) in enumerate(projects):
            own = {
                name: slices[f"{name}:{idx}"]
                for name in (GROUP_TOKEN, GROUP_TREASURY, GROUP_GOVERNANCE)
            }
            token_record = parse_token(own[GROUP_TOKEN], token)
            summaries.append(
                ProjectSummary(
                    chain_id=self.chain_id,
                    addresses=addresses,
                    verified=verified,
                    token=token_record,
                    treasury_stats=parse_treasury(own[GROUP_TREASURY], token_record),
                    governance_stats=parse_governance(own[GROUP_GOVERNANCE]),
                    defaulted=failed_reads(own),
                )
            )
        return summaries

    @status_tuple
    async def get_user(
        self, token: str, user: str, *, pricing: Pricing | None = None
    ) -> UserState | None:
        """Balances, stake, allowance, claimable rewards and voting power for one wallet."""
        token_record, factory, discovery_failed = await self._discover(token)
        if not factory.addresses.is_registered:
            return None

        plan = ReadPlan().add(
            build_user_group(
                to_checksum_address(user),
                token_record.address,
                factory.addresses,
                self.secondary_asset,
            )
        )
        slices = await self._run(plan)
        user_state = parse_user(slices[GROUP_USER], user, token_record, pricing)
        return user_state.model_copy(
            update={"defaulted": discovery_failed + failed_reads(slices)}
        )
