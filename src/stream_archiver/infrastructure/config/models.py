"""Pydantic configuration models for application settings."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TwitchConfig(BaseModel):
    """Twitch application credentials."""

    model_config = ConfigDict(extra="forbid")

    client_id: str = Field(default="", description="Twitch application client id")
    client_secret: str = Field(default="", description="Twitch application client secret")

    @property
    def is_configured(self) -> bool:
        """Whether both credentials are present."""
        return bool(self.client_id and self.client_secret)


class YouTubeConfig(BaseModel):
    """YouTube Data API access."""

    model_config = ConfigDict(extra="forbid")

    api_key: str = Field(default="", description="YouTube Data API v3 key")

    @property
    def is_configured(self) -> bool:
        """Whether an API key is present."""
        return bool(self.api_key)


class HooksConfig(BaseModel):
    """
    Shell command templates run after each pipeline stage.

    Templates may reference ``{id}``, ``{chat_ext}``, ``{video}`` and
    ``{title}``.
    """

    model_config = ConfigDict(extra="forbid")

    json_: str | None = Field(default=None, alias="json", description="Run after the metadata stage")
    thumbnail: str | None = Field(default=None, description="Run after the thumbnail stage")
    chat: str | None = Field(default=None, description="Run after the chat stage")
    chat_process: str | None = Field(default=None, description="Run after chat processing")
    video: str | None = Field(default=None, description="Run after the video stage")

    def as_mapping(self) -> dict[str, str]:
        """Return configured templates keyed by stage name."""
        return {key: value for key, value in self.model_dump(by_alias=True).items() if value}


class LoggingConfig(BaseModel):
    """Configuration for application logging."""

    model_config = ConfigDict(extra="forbid")

    level: str = Field(default="INFO", description="Log level for the log file")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format string for the log file",
    )
    file_path: str | None = Field(default=None, description="Log file path (None for console only)")
    max_file_size: int = Field(default=10485760, ge=1024, description="Max log file size in bytes (10MB)")
    backup_count: int = Field(default=5, ge=1, description="Number of backup log files to keep")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v.upper()


class AppConfig(BaseModel):
    """
    Main application configuration model.

    This is the root configuration object that contains all application settings,
    validated using Pydantic for type safety and runtime validation.
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True, populate_by_name=True)

    twitch: TwitchConfig = Field(default_factory=TwitchConfig)
    youtube: YouTubeConfig = Field(default_factory=YouTubeConfig)
    hooks: HooksConfig = Field(default_factory=HooksConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return self.model_dump(by_alias=True)


DEFAULT_CONFIG_TEXT = """\
# Stream archiver configuration
twitch:
  client_id: ""
  client_secret: ""
youtube:
  api_key: ""
# Commands run after each stage, e.g. json: "echo {id}"
hooks: {}
logging:
  level: INFO
"""
