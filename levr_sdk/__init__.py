__version__ = "0.1.0"

from levr_sdk.core import (
    BaseAdapter,
    BatchExecutionError,
    LevrError,
    ReadPlanMismatchError,
    StatusTuple,
)

__all__ = [
    "__version__",
    "BaseAdapter",
    "BatchExecutionError",
    "LevrError",
    "ReadPlanMismatchError",
    "StatusTuple",
]
