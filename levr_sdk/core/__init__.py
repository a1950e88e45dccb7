from levr_sdk.core.adapters.BaseAdapter import BaseAdapter, StatusTuple
from levr_sdk.core.errors import (
    BatchExecutionError,
    ConfigurationError,
    LevrError,
    ReadPlanMismatchError,
)

__all__ = [
    "BaseAdapter",
    "StatusTuple",
    "LevrError",
    "ReadPlanMismatchError",
    "BatchExecutionError",
    "ConfigurationError",
]
