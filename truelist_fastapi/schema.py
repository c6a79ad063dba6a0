"""Pydantic integration: an async refinement for email fields.

Pydantic validators are synchronous, so the Truelist check runs as an async
refinement after regular validation:

    signup_email = truelist_email()

    class SignupForm(BaseModel):
        email: EmailStr
        name: str

    form = SignupForm.model_validate(data)
    await signup_email.parse(form.email)  # raises pydantic.ValidationError

A missing API key always raises. Only transient network/API errors fail
open.
"""

from pydantic import EmailStr, TypeAdapter, ValidationError
from pydantic_core import PydanticCustomError

from truelist_fastapi.models import RejectionPolicy, TruelistEmailOptions
from truelist_fastapi.pipeline import PipelineMode, credentials_for, run_pipeline

INVALID_FORMAT_MESSAGE = "Please enter a valid email address."

_email_adapter: TypeAdapter[str] = TypeAdapter(EmailStr)


def _validation_error(error_type: str, message: str, value: object) -> ValidationError:
    return ValidationError.from_exception_data(
        "truelist_email",
        [{"type": PydanticCustomError(error_type, message), "input": value}],
    )


class TruelistEmail:
    """Email refinement backed by the Truelist API."""

    def __init__(self, options: TruelistEmailOptions) -> None:
        self.policy: RejectionPolicy = options.to_policy()
        self.message = options.message

    async def refine(self, email: str) -> bool:
        """Return True if the address is acceptable."""
        # Resolve first: a missing key must raise, not fail open
        credentials = credentials_for(self.policy)

        verdict = await run_pipeline(email, self.policy, PipelineMode.FAIL_OPEN, credentials)
        return verdict is None or verdict.allowed

    async def parse(self, value: object) -> str:
        """
        Validate ``value`` as an email address, then run the refinement.

        Raises:
            ValidationError: Bad syntax or a rejected Truelist state
        """
        try:
            email = _email_adapter.validate_python(value)
        except ValidationError:
            raise _validation_error("value_error", INVALID_FORMAT_MESSAGE, value) from None

        if not await self.refine(email):
            raise _validation_error("truelist_email", self.message, value)
        return email

    __call__ = refine


def truelist_email(options: TruelistEmailOptions | None = None) -> TruelistEmail:
    """
    Create a Truelist email refinement.

    Example:
        ```python
        # Reject risky emails too
        schema = truelist_email(TruelistEmailOptions(reject_states=frozenset({"invalid", "risky"})))
        ok = await schema.refine("user@example.com")
        ```
    """
    return TruelistEmail(options or TruelistEmailOptions())
