"""YouTube API authentication manager."""

from __future__ import annotations

import logging

from googleapiclient.discovery import Resource, build

from stream_archiver.domain.exceptions import AuthenticationError

logger = logging.getLogger(__name__)


class YouTubeAuthManager:
    """
    Manages YouTube Data API access with an API key.

    Only public data is read, so a key is enough and no OAuth2 flow is
    involved.
    """

    def __init__(self, api_key: str) -> None:
        """
        Initialize the YouTube authentication manager.

        Args:
            api_key: YouTube Data API v3 key
        """
        self.api_key = api_key
        self._service: Resource | None = None

    def get_authenticated_service(self) -> Resource:
        """
        Get a YouTube API service instance bound to the API key.

        Returns:
            YouTube Data API v3 service

        Raises:
            AuthenticationError: If no API key is configured or the service
                cannot be built
        """
        if not self.api_key:
            raise AuthenticationError("YouTube api_key must be set in the configuration file")

        if self._service is None:
            logger.debug("Building YouTube Data API v3 service")
            try:
                self._service = build("youtube", "v3", developerKey=self.api_key, cache_discovery=False)
            except Exception as e:
                raise AuthenticationError(f"Failed to build YouTube service: {e}", e) from e

        return self._service

    @property
    def is_configured(self) -> bool:
        """Whether an API key is present."""
        return bool(self.api_key)
