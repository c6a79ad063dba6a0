"""Request-interception helpers for validating email fields in form submissions.

Emails with rejected states receive a 422 JSON response. Everything else,
including Truelist outages, passes through to the application.
"""

from typing import cast

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from truelist_fastapi.core.logging import get_logger
from truelist_fastapi.extract import extract_field
from truelist_fastapi.models import (
    EmailValidationHandlerConfig,
    RejectionPolicy,
    ValidateFormSubmissionOptions,
    ValidationResult,
)
from truelist_fastapi.pipeline import PipelineMode, Verdict, credentials_for, run_pipeline
from truelist_fastapi.policy import Deny

logger = get_logger(__name__)


async def validate_form_submission(
    request: Request,
    options: ValidateFormSubmissionOptions | None = None,
) -> ValidationResult | None:
    """
    Validate the email in a request body and return the classification.

    Returns None when the body has no email. Errors propagate; the caller
    decides how to respond.

    Example:
        ```python
        @app.post("/api/signup")
        async def signup(request: Request):
            result = await validate_form_submission(request)
            if result and result.state == ValidationState.INVALID:
                return JSONResponse({"error": "Invalid email"}, status_code=422)
        ```
    """
    policy = (options or ValidateFormSubmissionOptions()).to_policy()
    credentials = credentials_for(policy)

    email = await extract_field(request, policy.field_name)
    if email is None:
        return None

    # PROPAGATE re-raises remote failures, so a verdict is always returned
    verdict = await run_pipeline(email, policy, PipelineMode.PROPAGATE, credentials)
    return cast(Verdict, verdict).result


class EmailValidationHandler:
    """
    Callable that blocks requests carrying a rejected email.

    Returns a 422 ``JSONResponse`` for rejected emails and None otherwise.
    Path matching uses ``startswith`` so nested routes are covered.
    """

    def __init__(self, config: EmailValidationHandlerConfig) -> None:
        self.paths: tuple[str, ...] = tuple(config.paths)
        self.methods: frozenset[str] = frozenset(m.upper() for m in config.methods)
        self.policy: RejectionPolicy = config.to_policy()

    def matches(self, request: Request) -> bool:
        if request.method.upper() not in self.methods:
            return False
        pathname = request.url.path
        return any(pathname.startswith(path) for path in self.paths)

    async def __call__(self, request: Request) -> JSONResponse | None:
        if not self.matches(request):
            return None

        credentials = credentials_for(self.policy)

        email = await extract_field(request, self.policy.field_name)
        if email is None:
            logger.bind(path=request.url.path).debug("email_field_missing")
            return None

        verdict = await run_pipeline(email, self.policy, PipelineMode.FAIL_OPEN, credentials)
        if verdict is None or not isinstance(verdict.decision, Deny):
            return None

        return JSONResponse(
            verdict.decision.payload.model_dump(mode="json", by_alias=True),
            status_code=422,
        )


def create_validation_handler(config: EmailValidationHandlerConfig) -> EmailValidationHandler:
    """
    Create a handler that validates email fields on matching requests.

    Example:
        ```python
        validate = create_validation_handler(
            EmailValidationHandlerConfig(paths=["/api/signup"])
        )

        @app.post("/api/signup")
        async def signup(request: Request):
            blocked = await validate(request)
            if blocked:
                return blocked
            body = await request.json()
            ...
        ```
    """
    return EmailValidationHandler(config)


class EmailValidationMiddleware(BaseHTTPMiddleware):
    """
    Middleware running an ``EmailValidationHandler`` before the app.

    Example:
        ```python
        app.add_middleware(
            EmailValidationMiddleware,
            config=EmailValidationHandlerConfig(paths=["/api/signup", "/api/contact"]),
        )
        ```
    """

    def __init__(self, app: ASGIApp, config: EmailValidationHandlerConfig) -> None:
        super().__init__(app)
        self.handler = create_validation_handler(config)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        blocked = await self.handler(request)
        if blocked is not None:
            return blocked
        return await call_next(request)
