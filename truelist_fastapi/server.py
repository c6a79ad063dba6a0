"""Direct email validation for route handlers and background tasks."""

from collections.abc import Awaitable, Callable
from typing import cast

from truelist_fastapi.models import (
    EmailValidationResult,
    ValidateEmailConfig,
    ValidationState,
    ValidationSubState,
)
from truelist_fastapi.pipeline import PipelineMode, Verdict, run_pipeline


async def validate_email(
    email: str,
    config: ValidateEmailConfig | None = None,
) -> EmailValidationResult:
    """
    Validate an email address with the Truelist API.

    Reads the API key from TRUELIST_API_KEY unless ``config.api_key`` is
    set. Remote and authentication failures propagate to the caller.

    Example:
        ```python
        result = await validate_email("user@example.com")
        if not result.is_valid:
            raise HTTPException(422, detail={"suggestion": result.suggestion})
        ```
    """
    policy = (config or ValidateEmailConfig()).to_policy()
    # PROPAGATE re-raises remote failures, so a verdict is always returned
    verdict = cast(Verdict, await run_pipeline(email, policy, PipelineMode.PROPAGATE))

    result = verdict.result
    return EmailValidationResult(
        **result.model_dump(),
        is_valid=verdict.allowed,
        is_invalid=result.state == ValidationState.INVALID,
        is_disposable=result.sub_state == ValidationSubState.IS_DISPOSABLE,
        is_role=result.sub_state == ValidationSubState.IS_ROLE,
    )


def create_email_validator(
    config: ValidateEmailConfig,
) -> Callable[[str], Awaitable[EmailValidationResult]]:
    """
    Create a pre-configured validator.

    Example:
        ```python
        validate = create_email_validator(
            ValidateEmailConfig(reject_states=["invalid", "risky"])
        )
        result = await validate(form.email)
        ```
    """

    async def _validate(email: str) -> EmailValidationResult:
        return await validate_email(email, config)

    return _validate
