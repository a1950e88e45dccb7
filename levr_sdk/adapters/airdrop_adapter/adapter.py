from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from eth_utils import to_checksum_address

from levr_sdk.adapters.airdrop_adapter.resolver import resolve_from_probes
from levr_sdk.adapters.airdrop_adapter.types import (
    AllocationTable,
    TreasuryAllocationCandidate,
)
from levr_sdk.adapters.multicall_adapter.adapter import execute_reads
from levr_sdk.adapters.multicall_adapter.types import (
    CallResult,
    ReadCall,
    ReadGroup,
    ReadPlan,
    build_read,
)
from levr_sdk.core.adapters.BaseAdapter import BaseAdapter
from levr_sdk.core.adapters.decorators import status_tuple
from levr_sdk.core.config import require_contract_address
from levr_sdk.core.constants.base import ADAPTER_TREASURY_AIRDROP, DEFAULT_TOKEN_DECIMALS
from levr_sdk.core.constants.clanker_abi import CLANKER_AIRDROP_ABI
from levr_sdk.core.constants.erc20_abi import ERC20_ABI

GROUP_PROBES = "probes"
GROUP_BALANCE = "balance"


def build_probe_group(
    airdrop: str, token: str, claimant: str, raw_amounts: Sequence[int]
) -> ReadGroup:
    return ReadGroup(
        GROUP_PROBES,
        tuple(
            build_read(
                airdrop, CLANKER_AIRDROP_ABI, "amountAvailableToClaim", token, claimant, amount
            )
            for amount in raw_amounts
        ),
    )


def build_balance_group(token: str, claimant: str) -> ReadGroup:
    return ReadGroup(GROUP_BALANCE, (build_read(token, ERC20_ABI, "balanceOf", claimant),))


class TreasuryAirdropAdapter(BaseAdapter):
    """Finds which historical treasury airdrop allocation applies to a claimant.

    All amounts in the allocation table are probed in one batch together with
    the claimant's token balance. See ``resolver`` for the classification rules.
    """

    adapter_type = ADAPTER_TREASURY_AIRDROP

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        *,
        chain_id: int,
        table: AllocationTable | None = None,
    ) -> None:
        super().__init__("treasury_airdrop_adapter", config)
        self.chain_id = int(chain_id)
        self.table = table or AllocationTable.from_config()

    @property
    def airdrop(self) -> str:
        return require_contract_address(self.chain_id, "airdrop")

    async def _execute(self, calls: Sequence[ReadCall]) -> list[CallResult]:
        return await execute_reads(self.chain_id, calls)

    @status_tuple
    async def resolve_treasury_allocation(
        self,
        token: str,
        claimant: str,
        *,
        decimals: int = DEFAULT_TOKEN_DECIMALS,
    ) -> TreasuryAllocationCandidate | None:
        token = to_checksum_address(token)
        claimant = to_checksum_address(claimant)
        raw_amounts = self.table.raw_amounts(decimals)

        plan = (
            ReadPlan()
            .add(build_probe_group(self.airdrop, token, claimant, raw_amounts))
            .add(build_balance_group(token, claimant))
        )
        slices = plan.split(await self._execute(plan.calls))

        (balance,) = slices[GROUP_BALANCE]
        claimant_balance = int(balance.value_or(0))
        if not balance.success:
            self.logger.warning(f"Claimant balance read failed: {balance.error}")

        selected = resolve_from_probes(raw_amounts, slices[GROUP_PROBES], claimant_balance)
        self.logger.debug(
            f"Treasury allocation for {claimant} on {token} (table {self.table.version}): {selected}"
        )
        return selected
