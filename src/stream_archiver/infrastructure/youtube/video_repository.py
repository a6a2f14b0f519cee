"""YouTube API video repository implementation."""

from __future__ import annotations

import logging
from typing import Any

import requests
from googleapiclient.errors import HttpError

from stream_archiver.domain.exceptions import (
    APIError,
    ChannelNotFoundError,
    MalformedResponseError,
)
from stream_archiver.domain.models.channel import ChannelHandle
from stream_archiver.domain.models.pagination import next_cursor
from stream_archiver.domain.models.video import Platform, VideoRecord
from stream_archiver.domain.services.video_repository import VideoRepository
from stream_archiver.infrastructure.youtube.auth_manager import YouTubeAuthManager

logger = logging.getLogger(__name__)

OEMBED_URL = "https://www.youtube.com/oembed"
MAX_BATCH = 50


class YouTubeVideoRepository(VideoRepository):
    """
    YouTube API implementation of the video repository.

    This class handles fetching video data from the YouTube Data API v3.
    Live broadcasts and scheduled premieres are left out so only finished
    uploads reach the download pipeline.
    """

    platform = Platform.YOUTUBE

    def __init__(self, auth_manager: YouTubeAuthManager, session: requests.Session | None = None) -> None:
        """
        Initialize the YouTube video repository.

        Args:
            auth_manager: YouTube authentication manager
            session: HTTP session for the oEmbed availability check
        """
        self.auth_manager = auth_manager
        self.session = session if session is not None else requests.Session()

    def is_available(self, video_id: str) -> bool:
        """
        Check through oEmbed whether a video is publicly reachable.

        Args:
            video_id: YouTube video ID

        Returns:
            True when oEmbed answers 200
        """
        url = f"http://www.youtube.com/watch?v={video_id}"
        try:
            response = self.session.get(OEMBED_URL, params={"format": "json", "url": url})
        except requests.RequestException as e:
            logger.info(f"Availability check for {video_id} failed: {e}")
            return False
        if response.status_code != 200:
            logger.info(f"Video {video_id} is unavailable (HTTP {response.status_code})")
            return False
        return True

    def get_videos(self, video_ids: list[str]) -> list[VideoRecord]:
        """
        Resolve user-supplied ids, dropping unavailable videos first.

        Args:
            video_ids: Canonical YouTube ids

        Returns:
            Records for available, finished videos
        """
        available = [video_id for video_id in video_ids if self.is_available(video_id)]
        return self._get_video_details(available)

    def _get_video_details(self, video_ids: list[str]) -> list[VideoRecord]:
        """Fetch full metadata in batches of at most 50 ids."""
        service = self.auth_manager.get_authenticated_service()
        pending = list(video_ids)
        records: list[VideoRecord] = []

        while pending:
            batch = pending[:MAX_BATCH]
            del pending[:MAX_BATCH]

            try:
                response = service.videos().list(
                    part="snippet,contentDetails,statistics",
                    id=",".join(batch),
                    maxResults=MAX_BATCH,
                ).execute()
                batch_records = [VideoRecord.from_youtube_video(item) for item in response["items"]]
            except HttpError as e:
                logger.error(f"Skipping batch of {len(batch)} ids: YouTube API error {e.resp.status}")
                continue
            except (KeyError, TypeError) as e:
                logger.error(f"Skipping batch of {len(batch)} ids: malformed response ({e})")
                continue
            except MalformedResponseError as e:
                logger.error(f"Skipping batch of {len(batch)} ids: {e.message}")
                continue

            for record in batch_records:
                if record.is_live_or_upcoming:
                    logger.info(f"Ignoring live or upcoming video {record.id}")
                    continue
                records.append(record)

        logger.debug(f"Resolved {len(records)} of {len(video_ids)} ids")
        return records

    def _lookup_channel(self, **query: str) -> ChannelHandle | None:
        service = self.auth_manager.get_authenticated_service()
        try:
            response = service.channels().list(part="contentDetails", **query).execute()
        except HttpError as e:
            raise APIError(f"YouTube API error: {e}", e.resp.status, e) from e

        items = response.get("items") or []
        if not items:
            return None
        try:
            item: dict[str, Any] = items[0]
            uploads = item["contentDetails"]["relatedPlaylists"]["uploads"]
            return ChannelHandle(username=next(iter(query.values())), id=str(item["id"]), uploads_playlist=uploads)
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedResponseError(f"Invalid channel item: {e}", cause=e) from e

    def resolve_channel(self, token: str) -> ChannelHandle:
        """
        Resolve a channel id, falling back to a legacy username.

        Args:
            token: Channel id or username

        Returns:
            The resolved channel with its uploads playlist

        Raises:
            ChannelNotFoundError: If neither lookup matches
            APIError: If the API call fails
        """
        channel = self._lookup_channel(id=token) or self._lookup_channel(forUsername=token)
        if channel is None:
            raise ChannelNotFoundError(token)
        logger.info(f"Found channel with id {channel.id}")
        return channel

    def get_channel_videos(self, channel: ChannelHandle) -> list[VideoRecord]:
        """
        List a channel's uploads and re-resolve them for full metadata.

        The playlist listing only carries lightweight references, so the
        collected ids go through the batch resolver afterwards.

        Args:
            channel: Channel returned by :meth:`resolve_channel`

        Returns:
            Records in playlist order
        """
        service = self.auth_manager.get_authenticated_service()
        video_ids: list[str] = []
        page_token: str | None = None

        while True:
            try:
                response = service.playlistItems().list(
                    part="snippet",
                    playlistId=channel.uploads_playlist,
                    maxResults=MAX_BATCH,
                    pageToken=page_token,
                ).execute()
                page_ids = [item["snippet"]["resourceId"]["videoId"] for item in response["items"]]
            except HttpError as e:
                logger.warning(f"Stopping playlist listing: YouTube API error {e.resp.status}")
                break
            except (KeyError, TypeError) as e:
                logger.warning(f"Stopping playlist listing: malformed response ({e})")
                break

            video_ids.extend(page_ids)

            page_token = next_cursor(page_token, response.get("nextPageToken"))
            if page_token is None:
                break

        logger.info(f"Found {len(video_ids)} uploads in playlist {channel.uploads_playlist}")
        return self._get_video_details(video_ids)
