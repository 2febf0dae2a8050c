"""Configuration loading for the Mocklin mock library.

This module provides centralized configuration management:
- Load settings from MOCKLIN_* environment variables and .env files
- Validate configuration using pydantic
- Provide typed access to all settings
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Library configuration loaded from environment.

    Uses pydantic-settings for environment variable handling with
    .env file support via python-dotenv.
    """

    model_config = SettingsConfigDict(
        env_prefix="MOCKLIN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Failure reporting
    failure_mode: Literal["collect", "raise", "log"] = Field(
        default="collect",
        description="How verification failures are reported",
    )
    verify_on_teardown: bool = Field(
        default=False,
        description="Require every invocation to be verified when a test ends",
    )

    # Proxy construction
    max_arity: int | None = Field(
        default=None,
        description="Largest parameter count an operation may declare (unbounded if unset)",
    )

    # Logging configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING",
        description="Log level",
    )
    log_format: Literal["json", "text"] = Field(
        default="text",
        description="Log format",
    )

    @field_validator("max_arity")
    @classmethod
    def validate_max_arity(cls, v: int | None) -> int | None:
        """Ensure the arity limit is positive when set."""
        if v is not None and v <= 0:
            raise ValueError("max_arity must be positive")
        return v


def load_settings(env_file: str | None = None) -> Settings:
    """Load library settings from environment.

    Args:
        env_file: Optional path to .env file. If not provided,
                 uses the default .env in the current directory.

    Returns:
        Validated Settings instance.

    Raises:
        ValidationError: If settings validation fails.
    """
    if env_file:
        return Settings(_env_file=env_file)  # type: ignore[call-arg]
    return Settings()


__all__ = ["Settings", "load_settings"]
