"""Error taxonomy shared by every agent."""

from __future__ import annotations

from .constants import STATUS_MAX_LENGTH


def truncate_message(message: object, limit: int = STATUS_MAX_LENGTH) -> str:
    """Return the first ``limit`` characters of ``str(message)``."""
    return str(message)[:limit]


class TetuStatusError(Exception):
    """Base class for errors raised inside an agent cycle."""


class ConfigurationError(TetuStatusError):
    """Raised when an endpoint, address or credential is not configured."""


class QuoteError(TetuStatusError):
    """Raised when a read-only contract call fails or returns garbage.

    The underlying message is truncated so that a verbose revert payload
    does not flood the logs.
    """

    def __init__(self, message: str, cause: BaseException | None = None):
        if cause is not None:
            message = f"{message}: {truncate_message(cause)}"
        super().__init__(message)


class FeedError(TetuStatusError):
    """Raised when an HTTP feed cannot be fetched or its payload is malformed."""


class PublishError(TetuStatusError):
    """Raised when the status display rejects an update."""
