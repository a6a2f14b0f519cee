"""Twitch Helix API integration implementations."""

from stream_archiver.infrastructure.twitch.auth_manager import TwitchAuthManager
from stream_archiver.infrastructure.twitch.video_repository import TwitchVideoRepository

__all__ = [
    "TwitchAuthManager",
    "TwitchVideoRepository",
]
