"""Settings for publisher nodes.

Values are read from the environment (``PUBNODE_`` prefix) or a ``.env`` file.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS: tuple[str, ...] = (
    "TRACE",
    "DEBUG",
    "INFO",
    "SUCCESS",
    "WARNING",
    "ERROR",
    "CRITICAL",
)


class Config(BaseSettings):
    """
    Publisher configuration loaded from multiple sources.

    Priority (highest to lowest):
    1. Environment variables
    2. .env file
    3. Default values
    """

    model_config = SettingsConfigDict(
        env_prefix="PUBNODE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    LOG_LEVEL: str = "INFO"

    # Event type used by publishers that do not name their own
    DEFAULT_EVENT_TYPE: str = "event"

    # Nested trigger_sync calls allowed on one publisher before giving up
    MAX_TRIGGER_DEPTH: int = Field(default=32)

    WARN_UNHANDLED_RESULTS: bool = True

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and check the log level name."""
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {v}")
        return level

    @field_validator("MAX_TRIGGER_DEPTH")
    @classmethod
    def validate_positive(cls, v: int, info) -> int:
        """Ensure the depth limit is a positive integer."""
        if v <= 0:
            raise ValueError(f"{info.field_name} must be a positive integer, got {v}")
        return v

    @field_validator("DEFAULT_EVENT_TYPE")
    @classmethod
    def validate_event_type(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("DEFAULT_EVENT_TYPE cannot be empty")
        return v


config = Config()
