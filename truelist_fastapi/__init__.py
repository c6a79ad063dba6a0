"""Truelist email validation for FastAPI and Starlette."""

from .client import TruelistClient, verify_email
from .errors import (
    AuthenticationError,
    FatalTruelistError,
    MissingCredentialError,
    RemoteError,
    RemoteTimeoutError,
    TruelistError,
)
from .middleware import (
    EmailValidationHandler,
    EmailValidationMiddleware,
    create_validation_handler,
    validate_form_submission,
)
from .models import (
    EmailValidationErrorResponse,
    EmailValidationHandlerConfig,
    EmailValidationResult,
    RejectionPolicy,
    TruelistEmailOptions,
    ValidateEmailConfig,
    ValidateFormSubmissionOptions,
    ValidationResult,
    ValidationState,
    ValidationSubState,
)
from .schema import TruelistEmail, truelist_email
from .server import create_email_validator, validate_email

__all__ = [
    "AuthenticationError",
    "EmailValidationErrorResponse",
    "EmailValidationHandler",
    "EmailValidationHandlerConfig",
    "EmailValidationMiddleware",
    "EmailValidationResult",
    "FatalTruelistError",
    "MissingCredentialError",
    "RejectionPolicy",
    "RemoteError",
    "RemoteTimeoutError",
    "TruelistClient",
    "TruelistEmail",
    "TruelistEmailOptions",
    "TruelistError",
    "ValidateEmailConfig",
    "ValidateFormSubmissionOptions",
    "ValidationResult",
    "ValidationState",
    "ValidationSubState",
    "create_email_validator",
    "create_validation_handler",
    "truelist_email",
    "validate_email",
    "validate_form_submission",
    "verify_email",
]
