"""Identifier normalization for copy-pasted video and channel input."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from stream_archiver.domain.models.video import Platform

logger = logging.getLogger(__name__)

_TWITCH_VIDEO_PATTERNS = (
    r"^([0-9]+)$",
    r"^(?:https://)?(?:www\.)?twitch\.tv/videos/([0-9]+)(?:\?.*)?$",
)

VIDEO_PATTERNS: dict[Platform, tuple[str, ...]] = {
    Platform.VOD: _TWITCH_VIDEO_PATTERNS,
    Platform.HIGHLIGHT: _TWITCH_VIDEO_PATTERNS,
    Platform.CLIP: (
        r"^([A-Za-z0-9_-]+)$",
        r"^(?:https://)?(?:clips\.|www\.)?twitch\.tv/([A-Za-z0-9_-]+)(?:\?.*)?$",
        r"^(?:https://)?(?:www\.)?twitch\.tv/(?:[^/]+)/clip/([A-Za-z0-9_-]+)(?:\?.*)?$",
    ),
    Platform.YOUTUBE: (
        r"^([0-9a-zA-Z_-]{11})$",
        r"^(?:https?://)?(?:www\.)?(?:youtu\.be/|youtube\.com(?:/embed/|/v/|/watch))"
        r"(?:(?:&|\?)[^&]+)*(?:(?:&|\?)v=)?([0-9a-zA-Z_-]{11})(?:(?:&|\?)[^&]+)*(?:#.*)?$",
    ),
}

_TWITCH_CHANNEL_PATTERNS = (r"^(?:https?://)?(?:www.)?(?:twitch.tv/)?(?:[^/]+/)?([^?/\& *+]+)",)

CHANNEL_PATTERNS: dict[Platform, tuple[str, ...]] = {
    Platform.VOD: _TWITCH_CHANNEL_PATTERNS,
    Platform.HIGHLIGHT: _TWITCH_CHANNEL_PATTERNS,
    Platform.CLIP: _TWITCH_CHANNEL_PATTERNS,
    Platform.YOUTUBE: (
        r"^([^?/\& *+]+)$",
        r"^(?:https?://)?(?:www\.)?youtube.com/(?:channel/|c/|user/|)([^?/\& *+]+)",
    ),
}


def split_tokens(raw: str) -> list[str]:
    """Split comma-separated input into trimmed tokens."""
    return [token.strip() for token in raw.split(",")]


class IdentifierMatcher:
    """
    Maps raw input tokens to canonical ids with an ordered pattern list.

    The first pattern that matches wins and its first capture group is the
    canonical id.
    """

    def __init__(self, patterns: Iterable[str]) -> None:
        self._patterns = tuple(re.compile(p) for p in patterns)

    @classmethod
    def for_videos(cls, platform: Platform) -> IdentifierMatcher:
        """Build the matcher for video ids and URLs on ``platform``."""
        return cls(VIDEO_PATTERNS[platform])

    @classmethod
    def for_channels(cls, platform: Platform) -> IdentifierMatcher:
        """Build the matcher for channel names and URLs on ``platform``."""
        return cls(CHANNEL_PATTERNS[platform])

    def match(self, token: str) -> str | None:
        """
        Extract the canonical id from a single token.

        Args:
            token: One trimmed input token

        Returns:
            The canonical id, or None when no pattern matches
        """
        for pattern in self._patterns:
            found = pattern.search(token)
            if found:
                return found.group(1)
        return None

    def extract_ids(self, raw: str) -> list[str]:
        """
        Extract canonical ids from comma-separated input.

        Tokens that match no pattern are dropped and logged.

        Args:
            raw: Comma-separated ids or URLs

        Returns:
            Canonical ids in input order, possibly empty
        """
        ids = []
        for token in split_tokens(raw):
            canonical = self.match(token)
            if canonical is None:
                logger.info(f"No match found for {token!r}")
                continue
            ids.append(canonical)
        return ids
