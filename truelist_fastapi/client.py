"""Truelist verify_inline client."""

import asyncio
from typing import Any
from urllib.parse import quote

import aiohttp
from pydantic import ValidationError

from truelist_fastapi.config import DEFAULT_TIMEOUT_MS, Credentials
from truelist_fastapi.core.logging import get_logger
from truelist_fastapi.errors import AuthenticationError, RemoteError, RemoteTimeoutError
from truelist_fastapi.models import (
    WIRE_STATES,
    ValidationResult,
    ValidationState,
    ValidationSubState,
)

logger = get_logger(__name__)

VERIFY_PATH = "/api/v1/verify_inline"

_MAX_ERROR_BODY = 200


class TruelistClient:
    """Single-attempt client for the Truelist verify_inline endpoint."""

    def __init__(self, credentials: Credentials, timeout_ms: int = DEFAULT_TIMEOUT_MS) -> None:
        """
        Initialize client.

        Args:
            credentials: Resolved API key and base URL
            timeout_ms: Upper bound on the whole call, in milliseconds
        """
        self.credentials = credentials
        self.timeout_ms = timeout_ms

    @property
    def url(self) -> str:
        return f"{self.credentials.base_url}{VERIFY_PATH}"

    async def verify(self, email: str) -> ValidationResult:
        """
        Classify one address.

        Raises:
            AuthenticationError: The API key was rejected (401)
            RemoteTimeoutError: No response within the timeout
            RemoteError: Any other transport failure or malformed response
        """
        seconds = self.timeout_ms / 1000
        try:
            async with asyncio.timeout(seconds):
                data = await self._post(email, aiohttp.ClientTimeout(total=seconds))
        except TimeoutError as e:
            logger.bind(email=email, timeout_ms=self.timeout_ms).warning("truelist_timeout")
            raise RemoteTimeoutError(
                f"Truelist API did not respond within {self.timeout_ms}ms"
            ) from e
        except aiohttp.ClientError as e:
            logger.bind(error=str(e)).error("truelist_client_error")
            raise RemoteError(f"Truelist API request failed: {e}") from e

        return self._parse_response(email, data)

    async def _post(self, email: str, timeout: aiohttp.ClientTimeout) -> Any:
        headers = {
            "Authorization": f"Bearer {self.credentials.api_key}",
            "Content-Type": "application/json",
        }
        url = f"{self.url}?email={quote(email, safe='')}"

        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.post(url, headers=headers) as response:
                if response.status == 401:
                    logger.error("truelist_auth_failure")
                    raise AuthenticationError()
                if not 200 <= response.status < 300:
                    text = await self._safe_text(response)
                    logger.bind(status=response.status).error("truelist_verify_failed")
                    raise RemoteError(
                        f"Truelist API error: {response.status}"
                        + (f" - {text}" if text else ""),
                        status=response.status,
                    )
                try:
                    return await response.json(content_type=None)
                except ValueError as e:
                    raise RemoteError("Truelist API returned invalid JSON") from e

    @staticmethod
    async def _safe_text(response: aiohttp.ClientResponse) -> str:
        try:
            text = await response.text()
        except (aiohttp.ClientError, UnicodeDecodeError):
            return ""
        return text[:_MAX_ERROR_BODY] if isinstance(text, str) else ""

    def _parse_response(self, email: str, data: Any) -> ValidationResult:
        """Map the wire payload to a ValidationResult."""
        emails = data.get("emails") if isinstance(data, dict) else None
        if not isinstance(emails, list) or not emails or not isinstance(emails[0], dict):
            raise RemoteError("Truelist API response has no email entries")

        entry = emails[0]
        if not isinstance(entry.get("email_state"), str):
            raise RemoteError("Truelist API response entry has no valid email_state")

        try:
            return ValidationResult(
                email=entry.get("address") or email,
                domain=entry.get("domain") or "",
                canonical=entry.get("canonical") or "",
                mx_record=entry.get("mx_record"),
                first_name=entry.get("first_name"),
                last_name=entry.get("last_name"),
                state=WIRE_STATES.get(entry["email_state"], ValidationState.UNKNOWN),
                sub_state=_parse_sub_state(entry.get("email_sub_state")),
                verified_at=entry.get("verified_at"),
                suggestion=entry.get("did_you_mean"),
            )
        except ValidationError as e:
            raise RemoteError(f"Truelist API returned a malformed entry: {e}") from e


def _parse_sub_state(value: Any) -> ValidationSubState:
    try:
        return ValidationSubState(value)
    except ValueError:
        return ValidationSubState.UNKNOWN_ERROR


async def verify_email(
    email: str,
    credentials: Credentials,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
) -> ValidationResult:
    """Classify one address with a fresh client."""
    return await TruelistClient(credentials, timeout_ms).verify(email)
