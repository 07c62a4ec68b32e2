"""Configuration loading for the Allure unittest adapter.

This module provides centralized configuration management:
- Load settings from ALLURE_* environment variables and .env files
- Validate configuration using pydantic
- Provide typed access to all settings
"""

from typing import Annotated, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Adapter configuration loaded from environment.

    Uses pydantic-settings for environment variable handling with
    .env file support via python-dotenv.
    """

    model_config = SettingsConfigDict(
        env_prefix="ALLURE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Report output
    output_directory: str = Field(
        default="build/allure-results",
        description="Directory where report events are written",
    )
    delete_previous_results: bool = Field(
        default=False,
        description="Delete files left in the output directory by an earlier run",
    )
    ignored_annotations: Annotated[list[str], NoDecode] = Field(
        default_factory=list,
        description="Extra docstring tags to ignore, comma-separated",
    )

    # Test runner
    verbosity: int = Field(
        default=1,
        description="unittest text runner verbosity (0-2)",
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

    @field_validator("output_directory")
    @classmethod
    def validate_output_directory(cls, v: str) -> str:
        """Ensure the output directory is not blank."""
        if not v.strip():
            raise ValueError("output_directory must be a non-empty path")
        return v

    @field_validator("ignored_annotations", mode="before")
    @classmethod
    def split_ignored_annotations(cls, v: object) -> object:
        """Accept a comma-separated string as well as a list."""
        if isinstance(v, str):
            return [name.strip().lstrip("@") for name in v.split(",") if name.strip()]
        return v

    @field_validator("verbosity")
    @classmethod
    def validate_verbosity(cls, v: int) -> int:
        """Ensure verbosity is within unittest's range."""
        if v < 0 or v > 2:
            raise ValueError("verbosity must be between 0 and 2")
        return v


def load_settings(env_file: str | None = None) -> Settings:
    """Load adapter settings from environment.

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
