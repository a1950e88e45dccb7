from __future__ import annotations

from collections.abc import Sequence
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
    expect,
    failed_reads,
    parse_chain_timestamp,
)
from levr_sdk.adapters.project_adapter.plans import GROUP_CHAIN, build_chain_group
from levr_sdk.adapters.vault_adapter.types import (
    VaultAllocation,
    VaultState,
    vault_status,
)
from levr_sdk.core.adapters.BaseAdapter import BaseAdapter
from levr_sdk.core.adapters.decorators import status_tuple
from levr_sdk.core.config import get_multicall_address, require_contract_address
from levr_sdk.core.constants.base import ADAPTER_VAULT
from levr_sdk.core.constants.clanker_abi import CLANKER_VAULT_ABI

GROUP_VAULT = "vault"
VAULT_METHODS = ("allocation", "amountAvailableToClaim")


def build_vault_group(vault: str, token: str) -> ReadGroup:
    return ReadGroup(
        GROUP_VAULT,
        tuple(build_read(vault, CLANKER_VAULT_ABI, method, token) for method in VAULT_METHODS),
    )


def parse_allocation(result: CallResult) -> VaultAllocation | None:
    """``None`` when the read failed or the vault never recorded an allocation for the token."""
    if not result.success:
        return None
    token, total, claimed, lockup_end, vesting_end, admin = result.value
    if int(token, 16) == 0:
        return None
    return VaultAllocation(
        token=to_checksum_address(token),
        amount_total=int(total),
        amount_claimed=int(claimed),
        lockup_end_time=int(lockup_end),
        vesting_end_time=int(vesting_end),
        admin=to_checksum_address(admin),
    )


class VaultAdapter(BaseAdapter):
    """Reads the Clanker vault that holds a project's locked and vesting supply."""

    adapter_type = ADAPTER_VAULT

    def __init__(self, config: dict[str, Any] | None = None, *, chain_id: int) -> None:
        super().__init__("vault_adapter", config)
        self.chain_id = int(chain_id)

    @property
    def vault(self) -> str:
        return require_contract_address(self.chain_id, "vault")

    async def _execute(self, calls: Sequence[ReadCall]) -> list[CallResult]:
        return await execute_reads(self.chain_id, calls)

    async def _read_vault(self, token: str) -> tuple[CallResult, CallResult]:
        plan = ReadPlan().add(build_vault_group(self.vault, to_checksum_address(token)))
        slices = plan.split(await self._execute(plan.calls))
        allocation, claimable = expect(slices[GROUP_VAULT], VAULT_METHODS)
        return allocation, claimable

    @status_tuple
    async def get_vault_allocation(self, token: str) -> VaultAllocation | None:
        allocation, _ = await self._read_vault(token)
        return parse_allocation(allocation)

    @status_tuple
    async def get_vault_claimable_amount(self, token: str) -> int:
        """Amount claimable now; 0 when the vault call reverts."""
        _, claimable = await self._read_vault(token)
        return int(claimable.value_or(0))

    @status_tuple
    async def get_vault_state(self, token: str) -> VaultState | None:
        """Allocation, claimable amount and chain time for ``token`` in one batch.

        Returns ``None`` when there is no allocation. A failed claimable read
        counts as 0 and is listed in ``defaulted``.
        """
        token = to_checksum_address(token)
        plan = (
            ReadPlan()
            .add(build_vault_group(self.vault, token))
            .add(build_chain_group(block_timestamp_call(get_multicall_address(self.chain_id))))
        )
        slices = plan.split(await self._execute(plan.calls))
        allocation_result, claimable = expect(slices[GROUP_VAULT], VAULT_METHODS)

        allocation = parse_allocation(allocation_result)
        if allocation is None:
            if not allocation_result.success:
                self.logger.info(
                    f"Vault allocation read for {token} failed: {allocation_result.error}"
                )
            return None

        reference_timestamp = parse_chain_timestamp(slices[GROUP_CHAIN])
        return VaultState(
            allocation=allocation,
            claimable=int(claimable.value_or(0)),
            status=vault_status(allocation, reference_timestamp),
            reference_timestamp=reference_timestamp,
            defaulted=failed_reads(slices),
        )
