"""Abstract base class for video metadata retrieval."""

from abc import ABC, abstractmethod

from stream_archiver.domain.models.channel import ChannelHandle
from stream_archiver.domain.models.video import Platform, VideoRecord


class VideoRepository(ABC):
    """
    Abstract repository for video metadata.

    This interface defines the contract for resolving canonical ids and
    channels into metadata records through a platform API. Implementations
    handle batching, pagination, error handling and data mapping. All calls
    are synchronous.
    """

    platform: Platform

    @abstractmethod
    def get_videos(self, video_ids: list[str]) -> list[VideoRecord]:
        """
        Resolve canonical ids into metadata records, in batches.

        Batches whose response cannot be used are skipped, so the result may
        be shorter than the input. An empty id list returns an empty list.

        Args:
            video_ids: Canonical ids

        Returns:
            Records for every id the API returned

        Raises:
            AuthenticationError: If the API rejects the credentials
        """
        pass

    @abstractmethod
    def resolve_channel(self, token: str) -> ChannelHandle:
        """
        Resolve a free-text channel token, trying it as an id first.

        Args:
            token: Channel id or name

        Returns:
            The resolved channel

        Raises:
            ChannelNotFoundError: If nothing matches the token
            APIError: If the lookup fails or is ambiguous
            AuthenticationError: If the API rejects the credentials
        """
        pass

    @abstractmethod
    def get_channel_videos(self, channel: ChannelHandle) -> list[VideoRecord]:
        """
        List every record published by a resolved channel.

        Args:
            channel: Channel returned by :meth:`resolve_channel`

        Returns:
            Records in page order

        Raises:
            AuthenticationError: If the API rejects the credentials
        """
        pass
