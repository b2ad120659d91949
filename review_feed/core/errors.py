"""Error taxonomy for the review feed.

Configuration errors are raised eagerly when a paginator is built. Source
errors describe a failed read against the remote contract; the polling loop
isolates them to the tick that produced them.
"""

__all__ = [
    "PaginatorConfigError",
    "SourceError",
    "TransportError",
    "RemoteExecutionError",
    "ResponseFormatError",
]


class PaginatorConfigError(ValueError):
    """Paginator was built with a missing or invalid option."""

    pass


class SourceError(Exception):
    """Base class for all read failures.

    Callers can catch every source-side failure with a single handler.

    Attributes:
        method: Contract view method that was being called, if known.
    """

    def __init__(self, message: str, *, method: str | None = None) -> None:
        super().__init__(message)
        self.method = method


class TransportError(SourceError):
    """Network, HTTP status, or JSON-RPC level failure.

    Usually transient; the next tick is a retry.
    """

    pass


class RemoteExecutionError(SourceError):
    """The contract view call itself failed (panic, missing method, bad args)."""

    pass


class ResponseFormatError(SourceError):
    """The RPC result could not be decoded into records."""

    pass
