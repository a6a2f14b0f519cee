"""Configuration providers and models."""

from stream_archiver.infrastructure.config.models import AppConfig, HooksConfig, LoggingConfig
from stream_archiver.infrastructure.config.yaml_provider import YamlConfigurationProvider, default_config_path

__all__ = [
    "AppConfig",
    "HooksConfig",
    "LoggingConfig",
    "YamlConfigurationProvider",
    "default_config_path",
]
