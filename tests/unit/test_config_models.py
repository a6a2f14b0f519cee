"""Tests for configuration models."""

from __future__ import annotations

from typing import Any

import pytest
import yaml
from pydantic import ValidationError

from stream_archiver.infrastructure.config.models import (
    DEFAULT_CONFIG_TEXT,
    AppConfig,
    HooksConfig,
    LoggingConfig,
    TwitchConfig,
    YouTubeConfig,
)


class TestCredentialModels:
    """Tests for the platform credential sections."""

    def test_twitch_defaults(self) -> None:
        """Test that empty credentials are allowed but not configured."""
        config = TwitchConfig()

        assert config.client_id == ""
        assert not config.is_configured

    def test_twitch_configured(self) -> None:
        """Test that both values are needed."""
        assert TwitchConfig(client_id="a", client_secret="b").is_configured
        assert not TwitchConfig(client_id="a").is_configured

    def test_youtube_configured(self) -> None:
        """Test API key presence."""
        assert YouTubeConfig(api_key="k").is_configured
        assert not YouTubeConfig().is_configured

    def test_unknown_key_rejected(self) -> None:
        """Test that typos in the configuration are reported."""
        with pytest.raises(ValidationError):
            TwitchConfig(client_idd="a")


class TestHooksConfig:
    """Tests for hook templates."""

    def test_json_alias(self) -> None:
        """Test that the metadata hook is configured under ``json``."""
        hooks = HooksConfig(**{"json": "echo {id}", "video": "ls {video}"})

        assert hooks.json_ == "echo {id}"
        assert hooks.as_mapping() == {"json": "echo {id}", "video": "ls {video}"}

    def test_empty_hooks(self) -> None:
        """Test that unset and empty templates are left out."""
        assert HooksConfig(chat="").as_mapping() == {}

    def test_unknown_stage_rejected(self) -> None:
        """Test that only pipeline stages can carry hooks."""
        with pytest.raises(ValidationError):
            HooksConfig(**{"upload": "true"})


class TestLoggingConfig:
    """Tests for LoggingConfig model."""

    def test_logging_settings_defaults(self) -> None:
        """Test logging settings with default values."""
        config = LoggingConfig()

        assert config.level == "INFO"
        assert config.file_path is None
        assert config.max_file_size == 10485760
        assert config.backup_count == 5

    def test_level_normalized(self) -> None:
        """Test that levels are upper-cased."""
        assert LoggingConfig(level="debug").level == "DEBUG"

    def test_logging_settings_validation_level(self) -> None:
        """Test log level validation."""
        with pytest.raises(ValidationError, match="Invalid log level"):
            LoggingConfig(level="LOUD")

    def test_logging_settings_validation_max_file_size(self) -> None:
        """Test max file size validation."""
        with pytest.raises(ValidationError):
            LoggingConfig(max_file_size=10)

    def test_logging_settings_validation_backup_count(self) -> None:
        """Test backup count validation."""
        with pytest.raises(ValidationError):
            LoggingConfig(backup_count=0)


class TestAppConfig:
    """Tests for AppConfig model."""

    def test_app_config_creation(self, sample_config_data: dict[str, Any]) -> None:
        """Test app config creation with valid data."""
        config = AppConfig(**sample_config_data)

        assert config.twitch.client_id == "test-client-id"
        assert config.youtube.api_key == "test-api-key"
        assert config.hooks.as_mapping() == {"json": "echo {id}"}

    def test_app_config_default_sections(self) -> None:
        """Test that every section has defaults."""
        config = AppConfig()

        assert not config.twitch.is_configured
        assert config.logging.level == "INFO"

    def test_to_dict_uses_aliases(self, sample_config_data: dict[str, Any]) -> None:
        """Test serialization keeps the ``json`` hook key."""
        data = AppConfig(**sample_config_data).to_dict()

        assert data["hooks"]["json"] == "echo {id}"
        assert "json_" not in data["hooks"]

    def test_unknown_section_rejected(self) -> None:
        """Test that unknown top-level keys are reported."""
        with pytest.raises(ValidationError):
            AppConfig(**{"channels": []})

    def test_default_template_is_valid(self) -> None:
        """Test that the generated configuration file loads."""
        config = AppConfig(**yaml.safe_load(DEFAULT_CONFIG_TEXT))

        assert config.twitch.client_id == ""
        assert config.hooks.as_mapping() == {}
