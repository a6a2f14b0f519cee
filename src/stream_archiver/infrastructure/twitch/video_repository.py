"""Twitch Helix video repository implementation."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import datetime, timedelta, timezone
from typing import Any

import requests

from stream_archiver.domain.exceptions import (
    APIError,
    AuthenticationError,
    ChannelNotFoundError,
    MalformedResponseError,
)
from stream_archiver.domain.models.channel import ChannelHandle
from stream_archiver.domain.models.pagination import iter_time_windows, next_cursor
from stream_archiver.domain.models.video import Platform, VideoRecord
from stream_archiver.domain.services.video_repository import VideoRepository
from stream_archiver.infrastructure.twitch.auth_manager import TwitchAuthManager

logger = logging.getLogger(__name__)

HELIX_URL = "https://api.twitch.tv/helix"
MAX_BATCH = 100
PAGE_SIZE = 100


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TwitchVideoRepository(VideoRepository):
    """
    Twitch Helix implementation of the video repository.

    Handles VODs and highlights through the ``videos`` endpoint and clips
    through the ``clips`` endpoint. Clip listings are additionally scoped to
    consecutive time windows, because Helix only pages through a bounded
    number of clips per query.
    """

    def __init__(
        self,
        auth_manager: TwitchAuthManager,
        platform: Platform,
        clip_range: timedelta = timedelta(weeks=1),
        clip_interval: timedelta = timedelta(hours=1),
        now: Callable[[], datetime] = _utc_now,
    ) -> None:
        """
        Initialize the Twitch video repository.

        Args:
            auth_manager: Twitch authentication manager
            platform: One of the Twitch platforms
            clip_range: How far back clip listings reach
            clip_interval: Width of each clip listing window
            now: Clock used to anchor clip windows
        """
        if not platform.is_twitch:
            raise ValueError(f"{platform.value} is not a Twitch platform")
        self.auth_manager = auth_manager
        self.platform = platform
        self.clip_range = clip_range
        self.clip_interval = clip_interval
        self._now = now

    @property
    def _endpoint(self) -> str:
        return "clips" if self.platform is Platform.CLIP else "videos"

    def _to_record(self, item: dict[str, Any]) -> VideoRecord:
        if self.platform is Platform.CLIP:
            return VideoRecord.from_twitch_clip(item)
        return VideoRecord.from_twitch_video(item, self.platform)

    def _get_json(self, path: str, params: Iterable[tuple[str, str]]) -> dict[str, Any] | None:
        """
        Issue one Helix GET request.

        Returns:
            Decoded JSON body, or None on a soft failure

        Raises:
            AuthenticationError: If Helix answers 401
        """
        session = self.auth_manager.get_authenticated_session()
        url = f"{HELIX_URL}/{path}"
        params = list(params)
        logger.debug(f"GET {url} {params}")

        try:
            response = session.get(url, params=params)
        except requests.RequestException as e:
            logger.warning(f"Request to {url} failed: {e}")
            return None

        if response.status_code == 401:
            raise AuthenticationError("Twitch rejected the access token (HTTP 401)")
        if not response.ok:
            logger.warning(f"Request to {url} failed with HTTP {response.status_code}")
            return None

        try:
            body = response.json()
        except ValueError as e:
            logger.warning(f"Could not deserialize response from {url}: {e}")
            return None
        if not isinstance(body, dict):
            logger.warning(f"Unexpected response shape from {url}")
            return None
        return body

    def _parse_items(self, body: dict[str, Any]) -> list[VideoRecord]:
        """
        Convert the ``data`` array of a response into records.

        Raises:
            MalformedResponseError: If the array or any item is malformed
        """
        data = body.get("data")
        if not isinstance(data, list):
            raise MalformedResponseError("Response has no data array")
        return [self._to_record(item) for item in data]

    def get_videos(self, video_ids: list[str]) -> list[VideoRecord]:
        """
        Resolve ids in batches of at most 100 per request.

        Args:
            video_ids: Canonical Twitch ids

        Returns:
            Records from every batch that could be deserialized
        """
        pending = list(video_ids)
        records: list[VideoRecord] = []

        while pending:
            batch = pending[:MAX_BATCH]
            del pending[:MAX_BATCH]

            body = self._get_json(self._endpoint, [("id", video_id) for video_id in batch])
            if body is None:
                continue
            try:
                records.extend(self._parse_items(body))
            except MalformedResponseError as e:
                logger.error(f"Skipping batch of {len(batch)} ids: {e.message}")

        logger.debug(f"Resolved {len(records)} of {len(video_ids)} ids")
        return records

    def _lookup_user(self, field: str, value: str) -> ChannelHandle | None:
        """
        Look up a user by ``id`` or ``login``.

        Returns:
            The channel, or None when no user matches

        Raises:
            APIError: If the lookup fails or matches several users
        """
        body = self._get_json("users", [(field, value)])
        if body is None:
            raise APIError(f"Failed to look up Twitch user {field}={value}")

        users = body.get("data")
        if not isinstance(users, list):
            raise MalformedResponseError(f"Invalid users response for {field}={value}")
        if not users:
            return None
        if len(users) > 1:
            raise APIError(f"Twitch returned {len(users)} users for {field}={value}")

        try:
            return ChannelHandle(username=str(users[0]["login"]), id=str(users[0]["id"]))
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedResponseError(f"Invalid user item for {field}={value}", cause=e) from e

    def resolve_channel(self, token: str) -> ChannelHandle:
        """
        Resolve a channel token, trying a numeric token as a user id first.

        Args:
            token: Channel id or login

        Returns:
            The resolved channel

        Raises:
            ChannelNotFoundError: If no user matches
            APIError: If the login lookup fails or is ambiguous
        """
        channel = None
        if token.isdigit():
            try:
                channel = self._lookup_user("id", token)
            except APIError as e:
                logger.info(f"Lookup by id failed, trying login: {e.message}")

        if channel is None:
            channel = self._lookup_user("login", token)
        if channel is None:
            raise ChannelNotFoundError(token)

        logger.info(f"Found channel {channel.username} with id {channel.id}")
        return channel

    def _paginate(self, path: str, params: list[tuple[str, str]]) -> list[VideoRecord]:
        """
        Follow cursors until they run out or stop changing.

        A failed or malformed page ends the loop; records from earlier pages
        are kept.
        """
        records: list[VideoRecord] = []
        cursor: str | None = None

        while True:
            query = params + [("first", str(PAGE_SIZE)), ("after", cursor or "")]
            body = self._get_json(path, query)
            if body is None:
                break
            try:
                records.extend(self._parse_items(body))
            except MalformedResponseError as e:
                logger.info(f"Stopping pagination: {e.message}")
                break

            pagination = body.get("pagination") or {}
            returned = pagination.get("cursor") if isinstance(pagination, dict) else None
            cursor = next_cursor(cursor, returned)
            if cursor is None:
                break

        return records

    def get_channel_videos(self, channel: ChannelHandle) -> list[VideoRecord]:
        """
        List a channel's VODs, highlights or clips.

        VODs still being processed by Twitch are left out.

        Args:
            channel: Resolved channel

        Returns:
            Records in page order
        """
        if self.platform is Platform.CLIP:
            return self._get_channel_clips(channel)

        records = self._paginate(
            "videos",
            [("user_id", channel.id), ("type", self.platform.twitch_video_type)],
        )
        finished = [record for record in records if not record.is_processing]
        if len(finished) != len(records):
            logger.info(f"Ignoring {len(records) - len(finished)} videos still processing")
        return finished

    def _get_channel_clips(self, channel: ChannelHandle) -> list[VideoRecord]:
        records: list[VideoRecord] = []
        for window in iter_time_windows(self._now(), self.clip_range, self.clip_interval):
            logger.debug(f"Listing clips in {window}")
            records.extend(
                self._paginate(
                    "clips",
                    [
                        ("broadcaster_id", channel.id),
                        ("started_at", window.started_at),
                        ("ended_at", window.ended_at),
                    ],
                )
            )
        return records
