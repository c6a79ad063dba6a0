"""Shared validation pipeline behind every entry point.

Each adapter resolves credentials, obtains an address, then hands it here.
The ``PipelineMode`` decides what happens to transient remote failures:
``PROPAGATE`` re-raises them, ``FAIL_OPEN`` logs them and returns None so the
caller lets the input through. Fatal errors always propagate.
"""

from dataclasses import dataclass
from enum import Enum

from truelist_fastapi.client import verify_email
from truelist_fastapi.config import Credentials, resolve_credentials
from truelist_fastapi.core.logging import get_logger
from truelist_fastapi.errors import RemoteError
from truelist_fastapi.models import RejectionPolicy, ValidationResult
from truelist_fastapi.policy import Decision, Deny, decide

logger = get_logger(__name__)


class PipelineMode(str, Enum):
    """How an adapter treats transient remote failures."""

    PROPAGATE = "propagate"
    FAIL_OPEN = "fail_open"


@dataclass(frozen=True)
class Verdict:
    """Classification plus the decision taken on it."""

    result: ValidationResult
    decision: Decision

    @property
    def allowed(self) -> bool:
        return not isinstance(self.decision, Deny)


def credentials_for(policy: RejectionPolicy) -> Credentials:
    """Resolve credentials for a policy. Raises MissingCredentialError."""
    return resolve_credentials(policy.api_key, policy.base_url)


async def run_pipeline(
    email: str,
    policy: RejectionPolicy,
    mode: PipelineMode,
    credentials: Credentials | None = None,
) -> Verdict | None:
    """
    Verify ``email`` and decide on it.

    Args:
        email: Address to classify
        policy: Frozen rejection policy of the calling adapter
        mode: Failure-tolerance mode of the calling adapter
        credentials: Already resolved credentials, resolved here if omitted

    Returns:
        Verdict, or None when a remote failure was tolerated (FAIL_OPEN)

    Raises:
        MissingCredentialError: Always, regardless of mode
        AuthenticationError: Always, regardless of mode
        RemoteError: Only in PROPAGATE mode
    """
    if credentials is None:
        credentials = credentials_for(policy)

    try:
        result = await verify_email(email, credentials, policy.timeout_ms)
    except RemoteError as e:
        if mode is PipelineMode.PROPAGATE:
            raise
        logger.bind(error=str(e), status=e.status).warning("email_validation_fail_open")
        return None

    decision = decide(result, policy.reject_states)
    if isinstance(decision, Deny):
        logger.bind(
            email=email,
            state=result.state.value,
            sub_state=result.sub_state.value,
        ).info("email_validation_rejected")
    return Verdict(result=result, decision=decision)
