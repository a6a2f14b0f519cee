"""Video record model and platform enum."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from stream_archiver.domain.exceptions import MalformedResponseError


class Platform(str, Enum):
    """Supported content sources."""

    VOD = "vod"
    HIGHLIGHT = "highlight"
    CLIP = "clip"
    YOUTUBE = "youtube"

    @property
    def is_twitch(self) -> bool:
        """Whether the platform is served by the Twitch Helix API."""
        return self is not Platform.YOUTUBE

    @property
    def twitch_video_type(self) -> str:
        """Value of the Helix ``type`` query parameter for video listings."""
        if self is Platform.VOD:
            return "archive"
        if self is Platform.HIGHLIGHT:
            return "highlight"
        raise ValueError(f"{self.value} has no Helix video type")

    @property
    def label(self) -> str:
        """Human-readable platform name."""
        return {
            Platform.VOD: "Twitch VODs",
            Platform.HIGHLIGHT: "Twitch Highlights",
            Platform.CLIP: "Twitch Clips",
            Platform.YOUTUBE: "YouTube",
        }[self]


# Placeholder Helix returns while a VOD is still being processed
PROCESSING_THUMBNAIL = "https://vod-secure.twitch.tv/_404/404_processing_%{width}x%{height}.png"

_YOUTUBE_THUMBNAIL_ORDER = ("maxres", "standard", "high", "medium", "default")


@dataclass(frozen=True)
class VideoRecord:
    """
    Platform-agnostic view over one deserialized API item.

    The raw item is kept so the metadata stage can persist exactly what the
    API returned. Instances are built through the ``from_*`` constructors,
    which raise :class:`MalformedResponseError` when required fields are
    missing.
    """

    id: str
    title: str
    thumbnail_url: str
    platform: Platform
    channel_id: str = ""
    channel_name: str = ""
    created_at: str = ""
    duration: str = ""
    view_count: int = 0
    raw: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    def __post_init__(self) -> None:
        """Validate record data after initialization."""
        if not self.id:
            raise ValueError("Video ID cannot be empty")

    @property
    def is_processing(self) -> bool:
        """Whether Helix still reports the processing placeholder thumbnail."""
        return self.thumbnail_url == PROCESSING_THUMBNAIL

    @classmethod
    def from_twitch_video(cls, item: dict[str, Any], platform: Platform) -> VideoRecord:
        """Build a record from a Helix ``videos`` item."""
        try:
            return cls(
                id=str(item["id"]),
                title=str(item["title"]),
                thumbnail_url=str(item["thumbnail_url"]),
                platform=platform,
                channel_id=str(item.get("user_id", "")),
                channel_name=str(item.get("user_name", "")),
                created_at=str(item.get("created_at", "")),
                duration=str(item.get("duration", "")),
                view_count=int(item.get("view_count") or 0),
                raw=dict(item),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedResponseError(f"Invalid Twitch video item: {e}", cause=e) from e

    @classmethod
    def from_twitch_clip(cls, item: dict[str, Any]) -> VideoRecord:
        """Build a record from a Helix ``clips`` item."""
        try:
            return cls(
                id=str(item["id"]),
                title=str(item["title"]),
                thumbnail_url=str(item["thumbnail_url"]),
                platform=Platform.CLIP,
                channel_id=str(item.get("broadcaster_id", "")),
                channel_name=str(item.get("broadcaster_name", "")),
                created_at=str(item.get("created_at", "")),
                duration=str(item.get("duration", "")),
                view_count=int(item.get("view_count") or 0),
                raw=dict(item),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedResponseError(f"Invalid Twitch clip item: {e}", cause=e) from e

    @classmethod
    def from_youtube_video(cls, item: dict[str, Any]) -> VideoRecord:
        """Build a record from a YouTube Data API ``videos`` item."""
        try:
            snippet = item.get("snippet") or {}
            content_details = item.get("contentDetails") or {}
            statistics = item.get("statistics") or {}
            thumbnails = snippet.get("thumbnails") or {}
            thumbnail_url = ""
            for key in _YOUTUBE_THUMBNAIL_ORDER:
                if thumbnails.get(key):
                    thumbnail_url = thumbnails[key]["url"]
                    break

            return cls(
                id=str(item["id"]),
                title=str(snippet["title"]),
                thumbnail_url=thumbnail_url,
                platform=Platform.YOUTUBE,
                channel_id=str(snippet.get("channelId", "")),
                channel_name=str(snippet.get("channelTitle", "")),
                created_at=str(snippet.get("publishedAt", "")),
                duration=str(content_details.get("duration", "")),
                view_count=int(statistics.get("viewCount") or 0),
                raw=dict(item),
            )
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise MalformedResponseError(f"Invalid YouTube video item: {e}", cause=e) from e

    @property
    def is_live_or_upcoming(self) -> bool:
        """Whether a YouTube item is a live broadcast or a scheduled premiere."""
        snippet = self.raw.get("snippet", {})
        return snippet.get("liveBroadcastContent", "none") in ("live", "upcoming")

    def to_json_dict(self) -> dict[str, Any]:
        """
        Return the document written by the metadata stage.

        Twitch items are saved verbatim. YouTube items are converted to the
        Twitch video shape so every archive uses one metadata layout.
        """
        if self.platform is not Platform.YOUTUBE:
            return dict(self.raw)

        snippet = self.raw.get("snippet", {})
        return {
            "id": self.id,
            "stream_id": self.id,
            "user_id": self.channel_id,
            "user_login": self.channel_id,
            "user_name": self.channel_name,
            "title": self.title,
            "description": snippet.get("description", ""),
            "created_at": self.created_at,
            "published_at": self.created_at,
            "url": f"https://www.youtube.com/watch?v={self.id}",
            "thumbnail_url": self.thumbnail_url,
            "viewable": "true",
            "view_count": self.view_count,
            "language": snippet.get("defaultLanguage", "en"),
            "type": "youtube",
            "duration": self.duration,
            "muted_segments": None,
        }

    def __str__(self) -> str:
        """Human-readable string representation."""
        return f"[{self.id}] ({self.channel_name}) {self.title}"
