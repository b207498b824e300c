"""Error types raised across the directory worker.

Each error carries the HTTP status the Flask layer answers with, so handlers
never have to map exception classes to codes themselves.
"""


class DirectoryError(RuntimeError):
    """Base class for failures surfaced to API callers."""

    status_code = 500


class ConfigurationError(DirectoryError):
    """Raised when a host cannot be resolved to a site configuration."""

    status_code = 400


class AuthorizationError(DirectoryError):
    """Raised when the refresh credential is missing or wrong."""

    status_code = 401


class UpstreamError(DirectoryError):
    """Raised when the upstream feed is unreachable or returns an invalid payload.

    ``diagnostic`` is the longer message persisted to ``lastError``; the
    exception message itself is the short text returned to the caller.
    """

    status_code = 502

    def __init__(self, message: str, diagnostic: str = "") -> None:
        super().__init__(message)
        self.diagnostic = diagnostic or message


class StoreError(DirectoryError):
    """Raised when the key-value store cannot be read or written."""

    status_code = 502
