"""Turns raw CLI input into metadata records."""

from __future__ import annotations

import logging

from stream_archiver.application.context import ExecutionContext
from stream_archiver.domain.exceptions import EmptyResultError, NoMatchesError
from stream_archiver.domain.models.video import VideoRecord
from stream_archiver.domain.services.identifier_matcher import IdentifierMatcher
from stream_archiver.domain.services.video_repository import VideoRepository

logger = logging.getLogger(__name__)


class ResolutionService:
    """
    Resolves video lists and channels through a platform repository.

    Input is normalized before any API call, so input that matches nothing
    fails fast with :class:`NoMatchesError`.
    """

    def __init__(self, repository: VideoRepository, context: ExecutionContext) -> None:
        """
        Initialize the resolution service.

        Args:
            repository: Repository for the selected platform
            context: Execution context of the current invocation
        """
        self.repository = repository
        self.context = context
        self.video_matcher = IdentifierMatcher.for_videos(context.platform)
        self.channel_matcher = IdentifierMatcher.for_channels(context.platform)

    def resolve_videos(self, raw: str) -> list[VideoRecord]:
        """
        Resolve comma-separated ids or URLs.

        Args:
            raw: User input

        Returns:
            Metadata records, never empty

        Raises:
            NoMatchesError: If no token matched any pattern
            EmptyResultError: If the API returned no usable records
        """
        ids = self.video_matcher.extract_ids(raw)
        if not ids:
            raise NoMatchesError()

        logger.info(f"Resolving {len(ids)} ids")
        with self.context.reporter.status(f" Getting info for {len(ids)} videos"):
            records = self.repository.get_videos(ids)

        if not records:
            raise EmptyResultError("No videos found for the given ids")
        return records

    def resolve_channel(self, raw: str) -> list[VideoRecord]:
        """
        Resolve a channel name or URL and list its content.

        Args:
            raw: User input

        Returns:
            Metadata records, never empty

        Raises:
            NoMatchesError: If the input is not a channel name or URL
            ChannelNotFoundError: If the channel does not exist
            EmptyResultError: If the channel has no usable records
        """
        token = self.channel_matcher.match(raw.strip())
        if token is None:
            raise NoMatchesError("No valid channel found in <CHANNEL>")

        with self.context.reporter.status(f" Looking up channel {token}"):
            channel = self.repository.resolve_channel(token)
        self.context.reporter.message(
            f"Found channel {channel.username} with id {channel.id}", threshold=2, style="green"
        )

        with self.context.reporter.status(f" Listing videos for {channel.username}"):
            records = self.repository.get_channel_videos(channel)

        if not records:
            raise EmptyResultError(f"No videos found for channel {channel.username}")
        logger.info(f"Found {len(records)} videos for {channel.username}")
        return records
