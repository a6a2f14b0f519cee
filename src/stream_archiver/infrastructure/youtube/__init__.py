"""YouTube API integration implementations."""

from stream_archiver.infrastructure.youtube.auth_manager import YouTubeAuthManager
from stream_archiver.infrastructure.youtube.video_repository import YouTubeVideoRepository

__all__ = [
    "YouTubeAuthManager",
    "YouTubeVideoRepository",
]
