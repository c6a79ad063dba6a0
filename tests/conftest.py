"""
Pytest configuration and fixtures for truelist_fastapi tests.

Provides:
- Clean Truelist environment per test
- Mocked aiohttp session for the Truelist API
- Factories for wire payloads and Starlette requests
"""

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from starlette.requests import Request

from truelist_fastapi.config import get_settings

TEST_API_KEY = "test-api-key"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove Truelist variables so tests control credentials explicitly."""
    monkeypatch.delenv("TRUELIST_API_KEY", raising=False)
    monkeypatch.delenv("TRUELIST_BASE_URL", raising=False)
    monkeypatch.delenv("TRUELIST_TIMEOUT_MS", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def api_key(monkeypatch) -> str:
    """Provide the API key through the environment."""
    monkeypatch.setenv("TRUELIST_API_KEY", TEST_API_KEY)
    return TEST_API_KEY


@pytest.fixture
def truelist_payload():
    """Factory for verify_inline wire responses."""

    def _create_payload(
        state: str = "ok",
        sub_state: str = "email_ok",
        suggestion: str | None = None,
        address: str = "user@example.com",
    ) -> dict:
        return {
            "emails": [
                {
                    "address": address,
                    "domain": address.split("@")[-1],
                    "canonical": address.split("@")[0],
                    "mx_record": None,
                    "first_name": None,
                    "last_name": None,
                    "email_state": state,
                    "email_sub_state": sub_state,
                    "verified_at": "2026-01-10T10:00:00.000Z",
                    "did_you_mean": suggestion,
                }
            ]
        }

    return _create_payload


@pytest.fixture
def truelist_api():
    """
    Patch aiohttp.ClientSession with a mock Truelist API.

    Configure ``response.status`` and ``response.json`` per test, or use
    ``hang()`` to simulate an API that never answers.
    """
    with patch("aiohttp.ClientSession") as mock_session_class:
        mock_session = MagicMock()
        mock_session_class.return_value.__aenter__.return_value = mock_session

        mock_response = AsyncMock()
        mock_response.status = 200
        mock_response.text = AsyncMock(return_value="")
        mock_session.post.return_value.__aenter__.return_value = mock_response

        def respond(payload: dict, status: int = 200) -> None:
            mock_response.status = status
            mock_response.json = AsyncMock(return_value=payload)

        def hang() -> None:
            async def _never_answers(*args, **kwargs):
                await asyncio.sleep(30)

            mock_session.post.return_value.__aenter__.side_effect = _never_answers

        yield SimpleNamespace(
            session_class=mock_session_class,
            session=mock_session,
            response=mock_response,
            respond=respond,
            hang=hang,
        )


@pytest.fixture
def make_request():
    """Factory for Starlette requests with a fixed body."""

    def _create_request(
        body: bytes = b"",
        content_type: str | None = "application/json",
        method: str = "POST",
        path: str = "/api/signup",
    ) -> Request:
        headers = [(b"content-type", content_type.encode())] if content_type else []
        scope = {
            "type": "http",
            "method": method,
            "path": path,
            "query_string": b"",
            "headers": headers,
        }
        sent = False

        async def receive():
            nonlocal sent
            if sent:
                return {"type": "http.disconnect"}
            sent = True
            return {"type": "http.request", "body": body, "more_body": False}

        return Request(scope, receive)

    return _create_request


@pytest.fixture
def multipart_body():
    """Factory encoding fields as multipart/form-data (body, content type)."""

    def _encode(fields: dict[str, str], boundary: str = "truelistboundary") -> tuple[bytes, str]:
        parts = [
            f'--{boundary}\r\nContent-Disposition: form-data; name="{name}"\r\n\r\n{value}\r\n'
            for name, value in fields.items()
        ]
        body = "".join(parts) + f"--{boundary}--\r\n"
        return body.encode(), f"multipart/form-data; boundary={boundary}"

    return _encode
