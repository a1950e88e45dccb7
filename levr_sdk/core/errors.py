from __future__ import annotations


class LevrError(Exception):
    """Base class for errors raised by levr_sdk."""


class ReadPlanMismatchError(LevrError):
    """Group sizes recorded in a read plan disagree with the results handed back.

    This is always a bug in plan construction or assembly. It is never turned
    into a ``(False, msg)`` status tuple.
    """


class BatchExecutionError(LevrError):
    """The batched read failed as a whole; no per-call results are available."""

    def __init__(self, message: str, *, call_count: int = 0) -> None:
        super().__init__(message)
        self.call_count = call_count


class ConfigurationError(LevrError, ValueError):
    """A contract address or RPC endpoint is missing for the requested chain."""


class RegistrationLookupError(LevrError):
    """The factory registration read failed, so whether the token is a project is unknown."""
