from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from eth_abi import decode
from eth_utils import function_signature_to_4byte_selector
from eth_utils.abi import collapse_if_tuple
from hexbytes import HexBytes

from levr_sdk.adapters.multicall_adapter.types import CallResult, ReadCall, build_read
from levr_sdk.core.adapters.BaseAdapter import BaseAdapter
from levr_sdk.core.config import get_multicall_address, get_multicall_chunk_size
from levr_sdk.core.constants.base import ADAPTER_MULTICALL
from levr_sdk.core.constants.contracts import MULTICALL3_ADDRESS
from levr_sdk.core.errors import BatchExecutionError
from levr_sdk.core.utils.collections import chunks
from levr_sdk.core.utils.retry import retry_rate_limited
from levr_sdk.core.utils.web3 import web3_from_chain_id

MULTICALL3_ABI = [
    {
        "inputs": [
            {
                "components": [
                    {"internalType": "address", "name": "target", "type": "address"},
                    {"internalType": "bool", "name": "allowFailure", "type": "bool"},
                    {"internalType": "bytes", "name": "callData", "type": "bytes"},
                ],
                "internalType": "struct Multicall3.Call3[]",
                "name": "calls",
                "type": "tuple[]",
            }
        ],
        "name": "aggregate3",
        "outputs": [
            {
                "components": [
                    {"internalType": "bool", "name": "success", "type": "bool"},
                    {"internalType": "bytes", "name": "returnData", "type": "bytes"},
                ],
                "internalType": "struct Multicall3.Result[]",
                "name": "returnData",
                "type": "tuple[]",
            }
        ],
        "stateMutability": "payable",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "getCurrentBlockTimestamp",
        "outputs": [
            {"internalType": "uint256", "name": "timestamp", "type": "uint256"},
        ],
        "stateMutability": "view",
        "type": "function",
    },
]

_ERROR_STRING_SELECTOR = bytes.fromhex("08c379a0")
_PANIC_SELECTOR = bytes.fromhex("4e487b71")

PANIC_REASONS: dict[int, str] = {
    0x01: "assertion failed",
    0x11: "arithmetic underflow or overflow",
    0x12: "division or modulo by zero",
    0x21: "invalid enum value",
    0x32: "array index out of bounds",
    0x41: "out of memory",
    0x51: "uninitialized function pointer",
}


def _custom_error_signature(item: dict[str, Any]) -> str:
    types = ",".join(collapse_if_tuple(i) for i in item.get("inputs") or [])
    return f"{item['name']}({types})"


def decode_revert(data: bytes, abi: Sequence[dict[str, Any]] = ()) -> str:
    """Render revert data as ``Error(string)`` text, ``Panic(0x..)`` or a custom error name."""
    if not data:
        return "execution reverted"

    selector, payload = data[:4], data[4:]
    if selector == _ERROR_STRING_SELECTOR:
        try:
            (message,) = decode(["string"], payload)
        except Exception:  # noqa: BLE001
            return f"0x{data.hex()}"
        return str(message)

    if selector == _PANIC_SELECTOR:
        try:
            (code,) = decode(["uint256"], payload)
        except Exception:  # noqa: BLE001
            return f"0x{data.hex()}"
        reason = PANIC_REASONS.get(int(code), "unknown panic")
        return f"Panic(0x{int(code):02x}): {reason}"

    for item in abi:
        if item.get("type") != "error":
            continue
        signature = _custom_error_signature(item)
        if function_signature_to_4byte_selector(signature) != selector:
            continue
        if not item.get("inputs"):
            return str(item["name"])
        try:
            args = decode([collapse_if_tuple(i) for i in item["inputs"]], payload)
        except Exception:  # noqa: BLE001
            return str(item["name"])
        return f"{item['name']}{tuple(args)}"

    return f"0x{data.hex()}"


def block_timestamp_call(address: str = MULTICALL3_ADDRESS) -> ReadCall:
    """Multicall3 view returning the timestamp of the block the batch runs against."""
    return build_read(address, MULTICALL3_ABI, "getCurrentBlockTimestamp")


class MulticallAdapter(BaseAdapter):
    """Runs read plans through Multicall3 ``aggregate3`` with ``allowFailure`` on every call."""

    adapter_type = ADAPTER_MULTICALL

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        *,
        chain_id: int | None = None,
        web3: Any | None = None,
        address: str | None = None,
        abi: list[dict[str, Any]] | None = None,
        chunk_size: int | None = None,
    ) -> None:
        super().__init__("multicall_adapter", config)

        if web3 is None:
            raise ValueError("MulticallAdapter requires web3 instance")
        self.chain_id = int(chain_id) if chain_id is not None else None
        self.web3 = web3
        self.chunk_size = int(chunk_size or get_multicall_chunk_size())

        checksum_address = self.web3.to_checksum_address(address or MULTICALL3_ADDRESS)
        self.contract = self.web3.eth.contract(
            address=checksum_address, abi=abi or MULTICALL3_ABI
        )

    async def execute(
        self,
        calls: Sequence[ReadCall],
        *,
        block_identifier: str | int | None = None,
    ) -> list[CallResult]:
        """Execute ``calls`` and return one tagged result per call, in order.

        Large plans are split into ``chunk_size`` requests. Any transport-level
        failure raises ``BatchExecutionError``; no partial results are returned.
        """
        calls_list = list(calls)
        if not calls_list:
            return []

        raw: list[tuple[bool, bytes]] = []
        try:
            for chunk in chunks(calls_list, self.chunk_size):
                raw.extend(await self._aggregate3(chunk, block_identifier))
        except Exception as exc:
            self.logger.error(f"Batch of {len(calls_list)} calls failed: {exc}")
            raise BatchExecutionError(
                f"batched read of {len(calls_list)} calls failed: {exc}",
                call_count=len(calls_list),
            ) from exc

        if len(raw) != len(calls_list):
            raise BatchExecutionError(
                f"multicall returned {len(raw)} results for {len(calls_list)} calls",
                call_count=len(calls_list),
            )
        return [self._to_result(call, ok, data) for call, (ok, data) in zip(calls_list, raw)]

    async def _aggregate3(
        self, calls: list[ReadCall], block_identifier: str | int | None
    ) -> list[tuple[bool, bytes]]:
        encoded = [
            (self.web3.to_checksum_address(call.target), True, call.encode())
            for call in calls
        ]
        call_fn = self.contract.functions.aggregate3(encoded).call

        async def _call() -> Any:
            if block_identifier is None:
                return await call_fn()
            return await call_fn(block_identifier=block_identifier)

        result = await retry_rate_limited(
            _call, label=f"aggregate3 ({len(calls)} calls, chain {self.chain_id})"
        )
        return [(bool(ok), self._ensure_bytes(data)) for ok, data in result]

    def _to_result(self, call: ReadCall, ok: bool, data: bytes) -> CallResult:
        if not ok:
            error = decode_revert(data, call.abi)
            self.logger.debug(f"{call.method} on {call.target} reverted: {error}")
            return CallResult(call=call, success=False, error=error)
        try:
            value = call.decode(data)
        except Exception as exc:  # noqa: BLE001
            # Calls to addresses without code succeed with empty return data.
            self.logger.debug(f"{call.method} on {call.target} undecodable: {exc}")
            return CallResult(call=call, success=False, error=f"decode failed: {exc}")
        return CallResult(call=call, success=True, value=value)

    @staticmethod
    def _ensure_bytes(data: bytes | str | HexBytes) -> bytes:
        if isinstance(data, HexBytes):
            return bytes(data)
        if isinstance(data, bytes):
            return data
        if isinstance(data, str):
            if data.startswith("0x"):
                return bytes.fromhex(data[2:])
            return data.encode()
        raise TypeError("Unexpected return data type from multicall")


async def execute_reads(chain_id: int, calls: Sequence[ReadCall]) -> list[CallResult]:
    """Run ``calls`` in one batched read against the chain's configured RPCs and Multicall3."""
    async with web3_from_chain_id(chain_id) as web3:
        multicall = MulticallAdapter(
            chain_id=chain_id,
            web3=web3,
            address=get_multicall_address(chain_id),
        )
        return await multicall.execute(calls)
