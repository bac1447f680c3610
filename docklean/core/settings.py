"""Runtime settings for docklean.

Provides centralized configuration using Pydantic BaseSettings
with environment variable and .env support for operational tuning.
"""

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError


class DockleanSettings(BaseSettings):
    """Docker CLI, timeout and logging configuration."""

    docker_bin: str = Field(
        "docker", alias="DOCKER_BIN", description="Docker executable name or path"
    )

    docker_cli_timeout: int = Field(
        60, alias="DOCKER_CLI_TIMEOUT", description="Docker inventory command timeout in seconds"
    )

    docker_prune_timeout: int = Field(
        300,
        alias="DOCKER_PRUNE_TIMEOUT",
        description="Docker prune and removal command timeout in seconds",
    )

    log_level: str = Field("INFO", alias="LOG_LEVEL", description="Default log level")

    log_dir: str | None = Field(
        None, alias="LOG_DIR", description="Directory for docklean.log (file logging off if unset)"
    )

    log_file_size_mb: int = Field(
        10, alias="LOG_FILE_SIZE_MB", description="Max log file size before truncation"
    )

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    @field_validator("docker_cli_timeout", "docker_prune_timeout")
    @classmethod
    def validate_timeout(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("Timeouts must be positive")
        return v

    @field_validator("log_file_size_mb")
    @classmethod
    def validate_log_file_size(cls, v: int) -> int:
        # Out of range values fall back to the default rather than failing startup
        if v < 1 or v > 100:
            return 10
        return v

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()


def load_settings(**overrides) -> DockleanSettings:
    """Load settings from the environment, wrapping validation failures.

    Raises:
        ConfigurationError: if an environment value is invalid
    """
    try:
        return DockleanSettings(**overrides)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e
