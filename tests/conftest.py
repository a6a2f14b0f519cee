"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from pathlib import Path
from typing import Any
from unittest.mock import Mock

import pytest
import requests
import yaml
from rich.console import Console

from stream_archiver.application.context import ExecutionContext, Reporter
from stream_archiver.domain.models.video import Platform, VideoRecord
from stream_archiver.infrastructure.config.models import AppConfig


@pytest.fixture
def sample_config_data() -> dict[str, Any]:
    """Sample configuration data for testing."""
    return {
        "twitch": {
            "client_id": "test-client-id",
            "client_secret": "test-client-secret",
        },
        "youtube": {
            "api_key": "test-api-key",
        },
        "hooks": {
            "json": "echo {id}",
        },
        "logging": {
            "level": "INFO",
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            "file_path": None,
            "max_file_size": 10485760,
            "backup_count": 5,
        },
    }


@pytest.fixture
def temp_config_file(tmp_path: Path, sample_config_data: dict[str, Any]) -> Path:
    """Create a temporary configuration file for testing."""
    path = tmp_path / "config.yml"
    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(sample_config_data, f)
    return path


@pytest.fixture
def app_config(sample_config_data: dict[str, Any]) -> AppConfig:
    """Create an AppConfig instance for testing."""
    return AppConfig(**sample_config_data)


def twitch_video_item(video_id: str, title: str = "Test Stream", **overrides: Any) -> dict[str, Any]:
    """Helix ``videos`` item as returned by the API."""
    item = {
        "id": video_id,
        "stream_id": "40000000000",
        "user_id": "141981764",
        "user_login": "twitchdev",
        "user_name": "TwitchDev",
        "title": title,
        "description": "",
        "created_at": "2024-01-01T00:00:00Z",
        "published_at": "2024-01-01T00:00:00Z",
        "url": f"https://www.twitch.tv/videos/{video_id}",
        "thumbnail_url": "https://static-cdn.jtvnw.net/cf_vods/thumb/%{width}x%{height}.jpg",
        "viewable": "public",
        "view_count": 42,
        "language": "en",
        "type": "archive",
        "duration": "3h8m33s",
        "muted_segments": None,
    }
    item.update(overrides)
    return item


def twitch_clip_item(clip_id: str, title: str = "Test Clip") -> dict[str, Any]:
    """Helix ``clips`` item as returned by the API."""
    return {
        "id": clip_id,
        "url": f"https://clips.twitch.tv/{clip_id}",
        "broadcaster_id": "141981764",
        "broadcaster_name": "TwitchDev",
        "creator_name": "viewer",
        "video_id": "",
        "game_id": "509670",
        "language": "en",
        "title": title,
        "view_count": 10,
        "created_at": "2024-01-01T00:00:00Z",
        "thumbnail_url": "https://clips-media-assets2.twitch.tv/preview-480x272.jpg",
        "duration": 30.0,
    }


def youtube_video_item(video_id: str, title: str = "Test Upload", live: str = "none") -> dict[str, Any]:
    """YouTube Data API ``videos`` item."""
    return {
        "kind": "youtube#video",
        "id": video_id,
        "snippet": {
            "publishedAt": "2024-01-01T00:00:00Z",
            "channelId": "UCtestchannel",
            "title": title,
            "description": "A description",
            "thumbnails": {
                "default": {"url": f"https://i.ytimg.com/vi/{video_id}/default.jpg"},
                "high": {"url": f"https://i.ytimg.com/vi/{video_id}/hqdefault.jpg"},
            },
            "channelTitle": "Test Channel",
            "liveBroadcastContent": live,
        },
        "contentDetails": {"duration": "PT10M"},
        "statistics": {"viewCount": "1234"},
    }


@pytest.fixture
def twitch_video_factory():
    """Builder for Helix ``videos`` items."""
    return twitch_video_item


@pytest.fixture
def twitch_clip_factory():
    """Builder for Helix ``clips`` items."""
    return twitch_clip_item


@pytest.fixture
def youtube_video_factory():
    """Builder for YouTube ``videos`` items."""
    return youtube_video_item


@pytest.fixture
def response_factory():
    """Builder for mock ``requests`` responses."""
    return json_response


@pytest.fixture
def sample_vod() -> VideoRecord:
    """Create a sample VOD record."""
    return VideoRecord.from_twitch_video(twitch_video_item("1234567890", "Speedrun: Any% 1:23:45"), Platform.VOD)


@pytest.fixture
def sample_clip() -> VideoRecord:
    """Create a sample clip record."""
    return VideoRecord.from_twitch_clip(twitch_clip_item("AwkwardClip-abc"))


@pytest.fixture
def sample_youtube_video() -> VideoRecord:
    """Create a sample YouTube record."""
    return VideoRecord.from_youtube_video(youtube_video_item("dQw4w9WgXcQ"))


def json_response(body: Any, status_code: int = 200) -> Mock:
    """Create a mock ``requests`` response carrying a JSON body."""
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.json.return_value = body
    return response


@pytest.fixture
def quiet_reporter() -> Reporter:
    """Reporter that records output without spinners."""
    return Reporter(verbosity=0, hide_spinners=True, console=Console(record=True, width=200))


@pytest.fixture
def mock_session() -> Mock:
    """Create a mock HTTP session."""
    return Mock(spec=requests.Session)


@pytest.fixture
def make_context(tmp_path: Path, quiet_reporter: Reporter, mock_session: Mock):
    """Factory for execution contexts writing into a temporary directory."""

    def factory(platform: Platform = Platform.VOD, **overrides: Any) -> ExecutionContext:
        settings: dict[str, Any] = {
            "platform": platform,
            "output_dir": tmp_path,
            "hide_spinners": True,
            "reporter": quiet_reporter,
            "session": mock_session,
        }
        settings.update(overrides)
        return ExecutionContext(**settings)

    return factory
