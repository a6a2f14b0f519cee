"""Channel domain model."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ChannelHandle:
    """
    A channel token resolved against a platform's identity API.

    For YouTube channels ``uploads_playlist`` holds the id of the playlist
    that lists every upload; Twitch handles leave it empty.
    """

    username: str
    id: str
    uploads_playlist: str = ""

    def __post_init__(self) -> None:
        """Validate channel data after initialization."""
        if not self.id:
            raise ValueError("Channel ID cannot be empty")

    def __str__(self) -> str:
        """Human-readable string representation."""
        return f"Channel(username='{self.username}', id={self.id})"
