"""Abstract base class for configuration management."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any


class ConfigurationProvider(ABC):
    """
    Abstract service for providing application configuration.

    This interface defines the contract for loading and validating platform
    credentials, post-stage hooks and logging settings.
    """

    @property
    @abstractmethod
    def config_path(self) -> Path:
        """Location the configuration is read from."""
        pass

    @abstractmethod
    def get_twitch_credentials(self) -> tuple[str, str]:
        """
        Get the Twitch application credentials.

        Returns:
            ``(client_id, client_secret)``, either may be empty

        Raises:
            ConfigurationError: If configuration is invalid or cannot be loaded
        """
        pass

    @abstractmethod
    def get_youtube_api_key(self) -> str:
        """
        Get the YouTube Data API key.

        Returns:
            The key, possibly empty

        Raises:
            ConfigurationError: If configuration is invalid or cannot be loaded
        """
        pass

    @abstractmethod
    def get_hooks(self) -> dict[str, str]:
        """
        Get the configured post-stage hook templates.

        Returns:
            Mapping of stage name to command template, unset stages omitted
        """
        pass

    @abstractmethod
    def get_logging_config(self) -> Any:
        """
        Get logging configuration.

        Returns:
            Logging settings (level, format, file_path, etc.)
        """
        pass

    @abstractmethod
    def reload(self) -> None:
        """
        Reload configuration from source.

        Raises:
            ConfigurationError: If configuration cannot be reloaded or is invalid
        """
        pass
