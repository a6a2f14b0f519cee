"""YAML-based configuration provider implementation."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any

import click
import yaml
from pydantic import ValidationError

from stream_archiver.domain.exceptions import ConfigurationError
from stream_archiver.domain.services.configuration_provider import ConfigurationProvider
from stream_archiver.infrastructure.config.models import DEFAULT_CONFIG_TEXT, AppConfig, LoggingConfig

logger = logging.getLogger(__name__)

APP_NAME = "archiver"

_ENV_PATTERN = re.compile(r"\$\{([^}:]+)(?::([^}]*))?\}")


def default_config_path() -> Path:
    """Return the per-user configuration file location."""
    return Path(click.get_app_dir(APP_NAME)) / "config.yml"


class YamlConfigurationProvider(ConfigurationProvider):
    """
    Configuration provider that loads settings from YAML files.

    This implementation supports loading configuration from YAML files
    with environment variable substitution and validation using Pydantic models.
    A missing file is created with default values and then reported, so the
    user has a template to fill in.
    """

    def __init__(self, config_path: str | Path | None = None) -> None:
        """
        Initialize the YAML configuration provider.

        Args:
            config_path: Path to the YAML configuration file, defaults to the
                per-user application directory

        Raises:
            ConfigurationError: If the configuration file is missing, cannot
                be loaded or is invalid
        """
        self._config_path = Path(config_path) if config_path else default_config_path()
        self._config: AppConfig | None = None
        self._load_config()

    @property
    def config_path(self) -> Path:
        """Location the configuration is read from."""
        return self._config_path

    def _write_default(self) -> None:
        """Create the configuration file with default values."""
        try:
            self._config_path.parent.mkdir(parents=True, exist_ok=True)
            self._config_path.write_text(DEFAULT_CONFIG_TEXT, encoding="utf-8")
            logger.info(f"Created default configuration at {self._config_path}")
        except OSError as e:
            raise ConfigurationError(
                f"Config file missing and could not be created: {self._config_path}", e
            ) from e

    def _load_config(self) -> None:
        """Load and validate configuration from YAML file."""
        if not self._config_path.exists():
            self._write_default()
            raise ConfigurationError(f"Config file missing: {self._config_path}")

        try:
            with open(self._config_path, encoding="utf-8") as f:
                raw_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML syntax in configuration file: {e}", e) from e
        except OSError as e:
            raise ConfigurationError(f"Failed to read configuration: {e}", e) from e

        if not raw_config:
            raise ConfigurationError("Configuration file is empty")
        if not isinstance(raw_config, dict):
            raise ConfigurationError("Configuration file must contain a mapping")

        # Perform environment variable substitution
        raw_config = self._substitute_env_vars(raw_config)

        try:
            self._config = AppConfig(**raw_config)
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed: {e}", e) from e

        logger.debug(f"Loaded configuration from {self._config_path}")

    def _substitute_env_vars(self, obj: Any) -> Any:
        """
        Recursively substitute environment variables in configuration.

        Supports ${VAR_NAME} and ${VAR_NAME:default_value} syntax.
        """
        if isinstance(obj, dict):
            return {key: self._substitute_env_vars(value) for key, value in obj.items()}
        elif isinstance(obj, list):
            return [self._substitute_env_vars(item) for item in obj]
        elif isinstance(obj, str):
            return _ENV_PATTERN.sub(self._replace_var, obj)
        else:
            return obj

    @staticmethod
    def _replace_var(match: re.Match[str]) -> str:
        var_name = match.group(1)
        default_value = match.group(2) if match.group(2) is not None else ""
        return os.getenv(var_name, default_value)

    @property
    def config(self) -> AppConfig:
        """Get the loaded configuration."""
        if self._config is None:
            raise ConfigurationError("Configuration not loaded")
        return self._config

    def get_twitch_credentials(self) -> tuple[str, str]:
        """Get the Twitch application credentials."""
        return self.config.twitch.client_id, self.config.twitch.client_secret

    def get_youtube_api_key(self) -> str:
        """Get the YouTube Data API key."""
        return self.config.youtube.api_key

    def get_hooks(self) -> dict[str, str]:
        """Get the configured post-stage hook templates."""
        return self.config.hooks.as_mapping()

    def get_logging_config(self) -> LoggingConfig:
        """Get logging configuration."""
        return self.config.logging

    def reload(self) -> None:
        """Reload configuration from source."""
        self._config = None
        self._load_config()
