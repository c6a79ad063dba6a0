"""Allow/deny decision for a classification result."""

from collections.abc import Iterable
from dataclasses import dataclass

from truelist_fastapi.models import (
    EmailValidationErrorResponse,
    ErrorDetails,
    ValidationResult,
    ValidationState,
    normalize_state,
)


@dataclass(frozen=True)
class Allow:
    """The address is acceptable."""


@dataclass(frozen=True)
class Deny:
    """The address is rejected; ``payload`` is sent back to the client."""

    payload: EmailValidationErrorResponse


Decision = Allow | Deny


def build_error_response(result: ValidationResult) -> EmailValidationErrorResponse:
    """Build the 422 body from a rejected result."""
    return EmailValidationErrorResponse(
        details=ErrorDetails(
            state=result.state,
            sub_state=result.sub_state,
            suggestion=result.suggestion,
        ),
    )


def is_rejected(state: ValidationState, reject_states: Iterable[str]) -> bool:
    # Only the primary state gates; sub_state is informational
    return state.value in {normalize_state(s) for s in reject_states}


def decide(result: ValidationResult, reject_states: Iterable[str]) -> Decision:
    """Deny iff the result's state is in ``reject_states``."""
    if is_rejected(result.state, reject_states):
        return Deny(payload=build_error_response(result))
    return Allow()
