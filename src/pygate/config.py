"""Settings for pygate, read from PYGATE_* environment variables or a .env file."""

import logging
from typing import ClassVar, Literal, Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .gate.route import PROTECTED_PATHS
from .models import ActionMatching

LogLevel = Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET"]


class Settings(BaseSettings):
    model_config: ClassVar[SettingsConfigDict] = SettingsConfigDict(
        env_file=".env",
        env_prefix="PYGATE_",
        case_sensitive=False,
        extra="ignore",
    )

    login_path: str = Field(default="/login", description="Unauthenticated entry point.")
    landing_path: str = Field(
        default="/inventory",
        description="Where a signed in actor lands when visiting the login page.",
    )
    root_path: str = Field(default="/", description="Always redirected to the login page.")
    protected_paths: list[str] = Field(
        default_factory=lambda: list(PROTECTED_PATHS),
        description="Path prefixes that require a session token.",
    )
    token_cookie: str = Field(default="auth_token")

    action_matching: ActionMatching = Field(
        default=ActionMatching.IGNORE,
        description="Whether a code's implied action must equal the requested action.",
    )

    api_url: Optional[str] = Field(
        default=None, description="Inventory API base URL used by HTTPIdentity."
    )
    validate_token_path: str = Field(default="/api/auth/validate-token")
    token_secret: Optional[SecretStr] = Field(
        default=None,
        description="Shared secret; when set, route admission verifies token signatures.",
    )
    token_algorithms: list[str] = Field(default_factory=lambda: ["HS256"])

    log_level: LogLevel = Field(default="INFO")

    @field_validator("login_path", "landing_path", "root_path")
    @classmethod
    def _absolute_path(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError("paths must start with '/'")
        return value

    @field_validator("protected_paths")
    @classmethod
    def _absolute_paths(cls, value: list[str]) -> list[str]:
        for path in value:
            if not path.startswith("/"):
                raise ValueError(f"protected path {path!r} must start with '/'")
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper(cls, value):
        return value.upper() if isinstance(value, str) else value


def configure_logging(settings: Settings) -> logging.Logger:
    """Set the package logger level; handlers stay the application's business"""
    logger = logging.getLogger("pygate")
    logger.setLevel(settings.log_level)
    return logger
