"""Error taxonomy for Truelist email validation.

Two families:

- ``FatalTruelistError``: configuration or credential defects. Never
  swallowed by fail-open adapters.
- ``RemoteError``: transient failures talking to the Truelist API. Adapters
  that fail open catch this family and let the input through.
"""


class TruelistError(Exception):
    """Base class for all Truelist errors."""


class FatalTruelistError(TruelistError):
    """Errors that must always reach the caller."""


class MissingCredentialError(FatalTruelistError):
    """No API key could be resolved from config or environment."""


class AuthenticationError(FatalTruelistError):
    """The Truelist API rejected the API key (HTTP 401)."""

    def __init__(self, message: str = "Invalid or missing Truelist API key.") -> None:
        super().__init__(message)


class RemoteError(TruelistError):
    """Transport failure, non-2xx status or malformed response."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class RemoteTimeoutError(RemoteError):
    """The Truelist API did not answer within the configured timeout."""
