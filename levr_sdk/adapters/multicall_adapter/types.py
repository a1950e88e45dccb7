"""Read descriptors, tagged results and read plans for batched calls."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from eth_abi import decode, encode
from eth_utils import function_abi_to_4byte_selector, to_checksum_address
from eth_utils.abi import collapse_if_tuple

from levr_sdk.core.errors import ReadPlanMismatchError
from levr_sdk.core.utils.collections import partition


def _fn_abi(abi: Sequence[dict[str, Any]], fn_name: str, inputs_len: int) -> dict[str, Any]:
    for item in abi:
        if item.get("type") != "function" or item.get("name") != fn_name:
            continue
        if len(item.get("inputs") or []) != inputs_len:
            continue
        return item
    raise ValueError(f"{fn_name}/{inputs_len} not found in ABI")


@dataclass(frozen=True)
class ReadCall:
    """One view call: target contract, method name and positional arguments.

    The ABI travels with the call so the result can be decoded (and reverts
    matched against the contract's custom errors) without extra lookups.
    """

    target: str
    method: str
    args: tuple[Any, ...] = ()
    abi: Sequence[dict[str, Any]] = field(default=(), compare=False, repr=False)

    @property
    def fn_abi(self) -> dict[str, Any]:
        return _fn_abi(self.abi, self.method, len(self.args))

    @property
    def input_types(self) -> list[str]:
        return [collapse_if_tuple(i) for i in self.fn_abi.get("inputs") or []]

    @property
    def output_types(self) -> list[str]:
        return [collapse_if_tuple(o) for o in self.fn_abi.get("outputs") or []]

    def encode(self) -> bytes:
        selector = function_abi_to_4byte_selector(self.fn_abi)
        return selector + encode(self.input_types, list(self.args))

    def decode(self, data: bytes) -> Any:
        """Decode return data; single-output methods yield the bare value."""
        output_types = self.output_types
        if not output_types:
            return None
        values = decode(output_types, data)
        if len(values) == 1:
            return values[0]
        return tuple(values)


def build_read(
    target: str, abi: Sequence[dict[str, Any]], method: str, *args: Any
) -> ReadCall:
    return ReadCall(
        target=to_checksum_address(target), method=method, args=tuple(args), abi=abi
    )


@dataclass(frozen=True)
class CallResult:
    """Outcome of one ``ReadCall``: ``success`` with ``value`` or a failure with ``error``."""

    call: ReadCall
    success: bool
    value: Any = None
    error: str | None = None

    @property
    def method(self) -> str:
        return self.call.method

    def value_or(self, default: Any) -> Any:
        return self.value if self.success else default


@dataclass(frozen=True)
class ReadGroup:
    name: str
    calls: tuple[ReadCall, ...]

    @property
    def count(self) -> int:
        return len(self.calls)


@dataclass
class ReadPlan:
    """Ordered concatenation of read groups plus the size of each group."""

    calls: list[ReadCall] = field(default_factory=list)
    groups: list[tuple[str, int]] = field(default_factory=list)

    def add(self, group: ReadGroup) -> ReadPlan:
        if any(name == group.name for name, _ in self.groups):
            raise ValueError(f"Group {group.name!r} already in plan")
        self.calls.extend(group.calls)
        self.groups.append((group.name, group.count))
        return self

    @property
    def names(self) -> list[str]:
        return [name for name, _ in self.groups]

    @property
    def sizes(self) -> list[int]:
        return [size for _, size in self.groups]

    def split(self, results: Sequence[CallResult]) -> dict[str, list[CallResult]]:
        slices = partition(results, self.sizes)
        for idx, (call, result) in enumerate(zip(self.calls, results, strict=True)):
            if result.call != call:
                raise ReadPlanMismatchError(
                    f"result {idx} is for {result.method} but plan expected {call.method}"
                )
        return dict(zip(self.names, slices, strict=True))
