from .adapter import MulticallAdapter, block_timestamp_call, decode_revert, execute_reads
from .types import CallResult, ReadCall, ReadGroup, ReadPlan, build_read

__all__ = [
    "MulticallAdapter",
    "block_timestamp_call",
    "decode_revert",
    "execute_reads",
    "CallResult",
    "ReadCall",
    "ReadGroup",
    "ReadPlan",
    "build_read",
]
