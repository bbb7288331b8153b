"""
Runtime configuration for Conduit.

Settings are read from ``CONDUIT_*`` environment variables once per process
and validated with pydantic.
"""

import os
from functools import lru_cache

from pydantic import BaseModel, Field, field_validator


# Default timeout in seconds for a single outbound request
DEFAULT_TIMEOUT = 30.0

# Default lifetime of issued bearer tokens, in seconds (7 days)
DEFAULT_TOKEN_LIFETIME = 7 * 24 * 60 * 60

ENV_PREFIX = "CONDUIT_"


class Settings(BaseModel):
    """
    Application settings.

    Attributes:
        database_url: SQLAlchemy database URL
        request_timeout: Per-call deadline for outbound requests, in seconds
        follow_redirects: Whether the executor follows HTTP redirects
        log_level: Level for the ``conduit`` logger
        cors_origins: Origins allowed by the CORS middleware
        jwt_secret: Secret used to verify bearer tokens
        jwt_algorithm: Signing algorithm of bearer tokens
        jwt_expires_in: Lifetime of issued tokens, in seconds
    """
    database_url: str = "sqlite:///./conduit.db"
    request_timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    follow_redirects: bool = True
    log_level: str = "INFO"
    cors_origins: list[str] = ["*"]
    jwt_secret: str | None = None
    jwt_algorithm: str = "HS256"
    jwt_expires_in: int = Field(default=DEFAULT_TOKEN_LIFETIME, gt=0)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {value}")
        return level

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_origins(cls, value):
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "Settings":
        """
        Build settings from ``CONDUIT_*`` environment variables.

        Unset variables keep their defaults.
        """
        environ = os.environ if environ is None else environ
        values = {}
        for name in cls.model_fields:
            key = ENV_PREFIX + name.upper()
            if key in environ:
                values[name] = environ[key]
        return cls(**values)


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings, loaded on first use."""
    return Settings.from_env()
