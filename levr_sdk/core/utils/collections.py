from __future__ import annotations

from collections.abc import Sequence
from typing import Any, TypeVar

from levr_sdk.core.errors import ReadPlanMismatchError

T = TypeVar("T")


def chunks(seq: list[Any], n: int) -> list[list[Any]]:
    return [seq[i : i + n] for i in range(0, len(seq), n)]


def partition(seq: Sequence[T], sizes: Sequence[int]) -> list[list[T]]:
    """Split ``seq`` into consecutive sub-lists of the given sizes.

    Sizes must be non-negative and sum to ``len(seq)``; anything else means the
    caller's bookkeeping is wrong and raises ``ReadPlanMismatchError``.
    """
    if any(size < 0 for size in sizes):
        raise ReadPlanMismatchError(f"negative group size in {list(sizes)}")
    total = sum(sizes)
    if total != len(seq):
        raise ReadPlanMismatchError(
            f"group sizes sum to {total} but {len(seq)} results were returned"
        )

    out: list[list[T]] = []
    offset = 0
    for size in sizes:
        out.append(list(seq[offset : offset + size]))
        offset += size
    return out
