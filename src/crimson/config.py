"""
Configuration module using pydantic-settings.

Loads settings from environment variables (or a local .env file).
"""

from functools import lru_cache
from urllib.parse import urlsplit

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from crimson.errors import ConfigurationError

EXPECTED_API_PATH = "/api/v1"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Nephthys ticket database
    database_url: str
    database_connect_timeout: int = 10  # seconds, PostgreSQL only

    # Flavortown user directory
    flavortown_api_base: str
    flavortown_api_key: str
    flavortown_timeout: float = 30.0

    crimson_debug: bool = False

    @field_validator("database_url", "flavortown_api_key")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value

    @field_validator("database_url")
    @classmethod
    def _psycopg_driver(cls, value: str) -> str:
        """Point bare postgres:// and postgresql:// URLs at the psycopg 3 driver."""
        scheme, sep, rest = value.partition("://")
        if sep and scheme in ("postgres", "postgresql"):
            return f"postgresql+psycopg://{rest}"
        return value

    @field_validator("flavortown_api_base")
    @classmethod
    def _valid_base_url(cls, value: str) -> str:
        parts = urlsplit(value)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ValueError("is not a valid URL")
        return value

    @property
    def debug(self) -> bool:
        return self.crimson_debug

    @property
    def api_base_has_expected_path(self) -> bool:
        """True when the API base URL ends in /api/v1."""
        return urlsplit(self.flavortown_api_base).path.rstrip("/") == EXPECTED_API_PATH

    @property
    def flavortown_site_root(self) -> str:
        """Public site root, i.e. the API base with the /api/v1 suffix removed."""
        base = self.flavortown_api_base.rstrip("/")
        if base.endswith(EXPECTED_API_PATH):
            base = base[: -len(EXPECTED_API_PATH)]
        return base


def load_settings(**overrides) -> Settings:
    """
    Build settings from the environment, raising ConfigurationError on failure.

    Keyword overrides take precedence over environment values.
    """
    try:
        return Settings(**overrides)
    except ValidationError as e:
        problems = []
        for err in e.errors():
            field = ".".join(str(part) for part in err["loc"]).upper()
            if err["type"] == "missing":
                problems.append(f"{field} environment variable not set")
            else:
                problems.append(f"{field}: {err['msg']}")
        raise ConfigurationError("; ".join(problems)) from e


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return load_settings()
