from dataclasses import dataclass
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from truelist_fastapi.errors import MissingCredentialError

DEFAULT_BASE_URL = "https://api.truelist.io"
DEFAULT_API_KEY_ENV = "TRUELIST_API_KEY"
DEFAULT_FIELD_NAME = "email"
DEFAULT_TIMEOUT_MS = 10_000
DEFAULT_REJECT_STATES: frozenset[str] = frozenset({"invalid"})


class Settings(BaseSettings):
    """Settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Truelist API
    truelist_api_key: str = Field(default="")
    truelist_base_url: str = Field(default="")
    truelist_timeout_ms: int = Field(default=DEFAULT_TIMEOUT_MS)

    # Application
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")


@dataclass(frozen=True)
class Credentials:
    """API key and base URL used for one verification call."""

    api_key: str
    base_url: str


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance (not used for credentials)."""
    return Settings()


def resolve_api_key(explicit: str | None = None) -> str:
    """
    Resolve the Truelist API key.

    An explicit value (even an empty one) wins, then the TRUELIST_API_KEY
    environment variable.
    The environment is read on every call so changes apply immediately.

    Raises:
        MissingCredentialError: If neither source provides a key
    """
    key = explicit if explicit is not None else Settings().truelist_api_key
    if not key:
        raise MissingCredentialError(
            f"Truelist API key is required. Set the {DEFAULT_API_KEY_ENV} "
            "environment variable or pass api_key in config."
        )
    return key


def resolve_credentials(api_key: str | None = None, base_url: str | None = None) -> Credentials:
    """Resolve API key and base URL, explicit values first."""
    key = resolve_api_key(api_key)
    url = base_url or Settings().truelist_base_url or DEFAULT_BASE_URL
    return Credentials(api_key=key, base_url=url.rstrip("/"))
