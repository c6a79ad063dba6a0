"""Email validation models."""

from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from truelist_fastapi.config import DEFAULT_FIELD_NAME, DEFAULT_REJECT_STATES, get_settings


class ValidationState(str, Enum):
    """Primary disposition assigned by Truelist."""

    OK = "ok"  # Deliverable
    INVALID = "invalid"  # Undeliverable (bad syntax, no MX, mailbox doesn't exist)
    RISKY = "risky"  # Disposable, role-based, spam trap
    UNKNOWN = "unknown"  # Could not determine
    ACCEPT_ALL = "accept_all"  # Catch-all domain


# Truelist reports undeliverable addresses as "email_invalid"
WIRE_STATES: dict[str, ValidationState] = {
    "ok": ValidationState.OK,
    "email_invalid": ValidationState.INVALID,
    "invalid": ValidationState.INVALID,
    "risky": ValidationState.RISKY,
    "unknown": ValidationState.UNKNOWN,
    "accept_all": ValidationState.ACCEPT_ALL,
}


def normalize_state(state: "str | ValidationState") -> str:
    """Canonical value for a configured state; wire names map to their canonical state."""
    if isinstance(state, ValidationState):
        return state.value
    mapped = WIRE_STATES.get(str(state))
    return mapped.value if mapped is not None else str(state)


def default_timeout_ms() -> int:
    """Timeout from TRUELIST_TIMEOUT_MS, read when a config object is built."""
    return get_settings().truelist_timeout_ms


class ValidationSubState(str, Enum):
    """Reason behind the primary state."""

    EMAIL_OK = "email_ok"
    IS_DISPOSABLE = "is_disposable"
    IS_ROLE = "is_role"
    FAILED_SMTP_CHECK = "failed_smtp_check"
    FAILED_MX_CHECK = "failed_mx_check"
    FAILED_NO_MAILBOX = "failed_no_mailbox"
    FAILED_SPAM_TRAP = "failed_spam_trap"
    FAILED_GREYLISTED = "failed_greylisted"
    FAILED_SYNTAX_CHECK = "failed_syntax_check"
    UNKNOWN_ERROR = "unknown_error"
    ACCEPT_ALL = "accept_all"


class _CamelModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class ValidationResult(_CamelModel):
    """Classification of one address, produced fresh per call."""

    email: str
    domain: str = ""
    canonical: str = ""
    mx_record: str | None = Field(default=None, alias="mxRecord")
    first_name: str | None = Field(default=None, alias="firstName")
    last_name: str | None = Field(default=None, alias="lastName")
    state: ValidationState
    sub_state: ValidationSubState = Field(
        default=ValidationSubState.UNKNOWN_ERROR, alias="subState"
    )
    verified_at: str | None = Field(default=None, alias="verifiedAt")
    suggestion: str | None = None


class EmailValidationResult(ValidationResult):
    """Result returned by the direct validator, with convenience flags."""

    is_valid: bool = Field(alias="isValid")
    is_invalid: bool = Field(alias="isInvalid")
    is_disposable: bool = Field(alias="isDisposable")
    is_role: bool = Field(alias="isRole")


class ErrorDetails(_CamelModel):
    state: ValidationState
    sub_state: ValidationSubState = Field(alias="subState")
    suggestion: str | None = None


class EmailValidationErrorResponse(_CamelModel):
    """Body of the 422 response sent when an email is rejected."""

    error: str = "Invalid email"
    details: ErrorDetails


@dataclass(frozen=True)
class RejectionPolicy:
    """
    Frozen per-adapter configuration.

    Built once when a validator, handler or schema is configured and shared
    read-only by every invocation.
    """

    reject_states: frozenset[str] = DEFAULT_REJECT_STATES
    field_name: str = DEFAULT_FIELD_NAME
    timeout_ms: int = field(default_factory=default_timeout_ms)
    api_key: str | None = None
    base_url: str | None = None

    def __post_init__(self) -> None:
        # Accept any iterable of states or enum members
        states = frozenset(normalize_state(s) for s in self.reject_states)
        object.__setattr__(self, "reject_states", states)


class ValidateEmailConfig(BaseModel):
    """Configuration for the direct validator."""

    model_config = ConfigDict(frozen=True)

    api_key: str | None = None
    base_url: str | None = None
    reject_states: list[ValidationState | str] = Field(
        default_factory=lambda: sorted(DEFAULT_REJECT_STATES)
    )
    timeout_ms: int = Field(default_factory=default_timeout_ms)

    def to_policy(self) -> RejectionPolicy:
        return RejectionPolicy(
            reject_states=frozenset(normalize_state(s) for s in self.reject_states),
            timeout_ms=self.timeout_ms,
            api_key=self.api_key,
            base_url=self.base_url,
        )


class ValidateFormSubmissionOptions(BaseModel):
    """Configuration for the lower-level ``validate_form_submission``."""

    model_config = ConfigDict(frozen=True)

    field_name: str = DEFAULT_FIELD_NAME
    api_key: str | None = None
    base_url: str | None = None
    timeout_ms: int = Field(default_factory=default_timeout_ms)

    def to_policy(self) -> RejectionPolicy:
        return RejectionPolicy(
            field_name=self.field_name,
            timeout_ms=self.timeout_ms,
            api_key=self.api_key,
            base_url=self.base_url,
        )


class EmailValidationHandlerConfig(BaseModel):
    """Configuration for the request-interception handler and middleware."""

    model_config = ConfigDict(frozen=True)

    paths: list[str]
    methods: list[str] = Field(default_factory=lambda: ["POST"])
    field_name: str = DEFAULT_FIELD_NAME
    reject_states: list[ValidationState | str] = Field(
        default_factory=lambda: sorted(DEFAULT_REJECT_STATES)
    )
    api_key: str | None = None
    base_url: str | None = None
    timeout_ms: int = Field(default_factory=default_timeout_ms)

    def to_policy(self) -> RejectionPolicy:
        return RejectionPolicy(
            reject_states=frozenset(normalize_state(s) for s in self.reject_states),
            field_name=self.field_name,
            timeout_ms=self.timeout_ms,
            api_key=self.api_key,
            base_url=self.base_url,
        )


@dataclass(frozen=True)
class TruelistEmailOptions:
    """Options for the ``truelist_email()`` schema refinement."""

    reject_states: frozenset[str] = DEFAULT_REJECT_STATES
    message: str = "This email address is not valid."
    api_key: str | None = None
    base_url: str | None = None
    timeout_ms: int = field(default_factory=default_timeout_ms)

    def to_policy(self) -> RejectionPolicy:
        return RejectionPolicy(
            reject_states=self.reject_states,
            timeout_ms=self.timeout_ms,
            api_key=self.api_key,
            base_url=self.base_url,
        )
