"""Tests for the Twitch Helix repository."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any
from unittest.mock import Mock

import pytest
import requests

from stream_archiver.domain.exceptions import AuthenticationError, ChannelNotFoundError
from stream_archiver.domain.models.channel import ChannelHandle
from stream_archiver.domain.models.video import PROCESSING_THUMBNAIL, Platform
from stream_archiver.infrastructure.twitch.auth_manager import TOKEN_URL, TwitchAuthManager
from stream_archiver.infrastructure.twitch.video_repository import HELIX_URL, TwitchVideoRepository

NOW = datetime(2024, 1, 8, 12, 0, tzinfo=timezone.utc)


def _params(call: Any) -> list[tuple[str, str]]:
    return list(call.kwargs["params"])


def _values(call: Any, key: str) -> list[str]:
    return [value for name, value in _params(call) if name == key]


@pytest.fixture
def helix_session() -> Mock:
    """Session returned by the mocked auth manager."""
    return Mock(spec=requests.Session)


@pytest.fixture
def auth_manager(helix_session: Mock) -> Mock:
    """Auth manager handing out the mocked session."""
    manager = Mock(spec=TwitchAuthManager)
    manager.get_authenticated_session.return_value = helix_session
    return manager


def _repository(auth_manager: Mock, platform: Platform = Platform.VOD, **kwargs: Any) -> TwitchVideoRepository:
    return TwitchVideoRepository(auth_manager, platform, now=lambda: NOW, **kwargs)


class TestTwitchAuthManager:
    """Tests for the client credentials exchange."""

    def test_token_is_requested_once(self, response_factory) -> None:
        """Test that the token is fetched lazily and reused."""
        session = Mock(spec=requests.Session)
        session.headers = {}
        session.post.return_value = response_factory({"access_token": "tok"})
        manager = TwitchAuthManager("id", "secret", session=session)

        assert manager.get_authenticated_session() is session
        assert manager.get_authenticated_session() is session

        session.post.assert_called_once()
        assert session.post.call_args.args[0] == TOKEN_URL
        assert session.headers["Client-ID"] == "id"
        assert session.headers["Authorization"] == "Bearer tok"

    def test_missing_credentials(self) -> None:
        """Test that no request is made without credentials."""
        session = Mock(spec=requests.Session)
        manager = TwitchAuthManager("", "", session=session)

        with pytest.raises(AuthenticationError, match="client_id and client_secret"):
            manager.get_authenticated_session()
        session.post.assert_not_called()

    def test_rejected_credentials(self, response_factory) -> None:
        """Test a non-success token response."""
        session = Mock(spec=requests.Session)
        session.post.return_value = response_factory({"message": "invalid client"}, status_code=403)
        manager = TwitchAuthManager("id", "secret", session=session)

        with pytest.raises(AuthenticationError, match="HTTP 403"):
            manager.get_authenticated_session()

    def test_network_failure(self) -> None:
        """Test a connection error during the exchange."""
        session = Mock(spec=requests.Session)
        session.post.side_effect = requests.ConnectionError("down")
        manager = TwitchAuthManager("id", "secret", session=session)

        with pytest.raises(AuthenticationError, match="Failed to request Twitch token"):
            manager.get_authenticated_session()


class TestGetVideos:
    """Tests for batch resolution."""

    def test_rejects_youtube(self, auth_manager: Mock) -> None:
        """Test that the repository only serves Twitch platforms."""
        with pytest.raises(ValueError):
            TwitchVideoRepository(auth_manager, Platform.YOUTUBE)

    def test_batches_of_one_hundred(
        self, auth_manager: Mock, helix_session: Mock, twitch_video_factory, response_factory
    ) -> None:
        """Test that 250 ids are resolved in batches of 100, 100 and 50."""
        ids = [str(n) for n in range(1, 251)]

        def answer(url: str, params: list[tuple[str, str]]) -> Mock:
            return response_factory({"data": [twitch_video_factory(value) for _, value in params]})

        helix_session.get.side_effect = answer

        records = _repository(auth_manager).get_videos(ids)

        calls = helix_session.get.call_args_list
        assert [len(_values(c, "id")) for c in calls] == [100, 100, 50]
        assert all(c.args[0] == f"{HELIX_URL}/videos" for c in calls)
        assert [r.id for r in records] == ids

    def test_single_batch(self, auth_manager: Mock, helix_session: Mock, twitch_video_factory, response_factory) -> None:
        """Test that fewer than 100 ids need one request."""
        helix_session.get.return_value = response_factory({"data": [twitch_video_factory("1")]})

        records = _repository(auth_manager).get_videos(["1"])

        assert helix_session.get.call_count == 1
        assert [r.id for r in records] == ["1"]

    def test_clips_use_clips_endpoint(
        self, auth_manager: Mock, helix_session: Mock, twitch_clip_factory, response_factory
    ) -> None:
        """Test clip resolution."""
        helix_session.get.return_value = response_factory({"data": [twitch_clip_factory("Clip-1")]})

        records = _repository(auth_manager, Platform.CLIP).get_videos(["Clip-1"])

        assert helix_session.get.call_args.args[0] == f"{HELIX_URL}/clips"
        assert records[0].platform == Platform.CLIP

    def test_malformed_batch_skipped(
        self, auth_manager: Mock, helix_session: Mock, twitch_video_factory, response_factory
    ) -> None:
        """Test that a batch that cannot be deserialized is dropped."""
        ids = [str(n) for n in range(1, 151)]
        helix_session.get.side_effect = [
            response_factory({"data": "not a list"}),
            response_factory({"data": [twitch_video_factory(i) for i in ids[100:]]}),
        ]

        records = _repository(auth_manager).get_videos(ids)

        assert [r.id for r in records] == ids[100:]

    def test_failed_batch_skipped(
        self, auth_manager: Mock, helix_session: Mock, twitch_video_factory, response_factory
    ) -> None:
        """Test that a server error drops only its batch."""
        ids = [str(n) for n in range(1, 151)]
        helix_session.get.side_effect = [
            response_factory({"data": [twitch_video_factory(i) for i in ids[:100]]}),
            response_factory({}, status_code=500),
        ]

        records = _repository(auth_manager).get_videos(ids)

        assert len(records) == 100

    def test_unauthorized_is_fatal(self, auth_manager: Mock, helix_session: Mock, response_factory) -> None:
        """Test that HTTP 401 aborts resolution."""
        helix_session.get.return_value = response_factory({}, status_code=401)

        with pytest.raises(AuthenticationError):
            _repository(auth_manager).get_videos(["1"])


class TestResolveChannel:
    """Tests for channel lookup."""

    def test_login_lookup(self, auth_manager: Mock, helix_session: Mock, response_factory) -> None:
        """Test resolving a login."""
        helix_session.get.return_value = response_factory({"data": [{"id": "141981764", "login": "twitchdev"}]})

        channel = _repository(auth_manager).resolve_channel("twitchdev")

        assert channel == ChannelHandle(username="twitchdev", id="141981764")
        assert _params(helix_session.get.call_args) == [("login", "twitchdev")]

    def test_numeric_token_tries_id_first(self, auth_manager: Mock, helix_session: Mock, response_factory) -> None:
        """Test that a numeric token resolves as a user id."""
        helix_session.get.return_value = response_factory({"data": [{"id": "123", "login": "someone"}]})

        channel = _repository(auth_manager).resolve_channel("123")

        assert channel.username == "someone"
        assert _params(helix_session.get.call_args) == [("id", "123")]

    def test_numeric_token_falls_back_to_login(
        self, auth_manager: Mock, helix_session: Mock, response_factory
    ) -> None:
        """Test a numeric login that is not a user id."""
        helix_session.get.side_effect = [
            response_factory({}, status_code=400),
            response_factory({"data": [{"id": "999", "login": "123"}]}),
        ]

        channel = _repository(auth_manager).resolve_channel("123")

        assert channel.id == "999"
        assert _params(helix_session.get.call_args) == [("login", "123")]

    def test_unknown_channel(self, auth_manager: Mock, helix_session: Mock, response_factory) -> None:
        """Test that zero users means the channel does not exist."""
        helix_session.get.return_value = response_factory({"data": []})

        with pytest.raises(ChannelNotFoundError, match="nobody"):
            _repository(auth_manager).resolve_channel("nobody")


class TestChannelListing:
    """Tests for cursor pagination."""

    def test_three_pages(self, auth_manager: Mock, helix_session: Mock, twitch_video_factory, response_factory) -> None:
        """Test pages of 100, 100 and 40 items with changing cursors."""
        pages = [
            [twitch_video_factory(f"a{n}") for n in range(100)],
            [twitch_video_factory(f"b{n}") for n in range(100)],
            [twitch_video_factory(f"c{n}") for n in range(40)],
        ]
        helix_session.get.side_effect = [
            response_factory({"data": pages[0], "pagination": {"cursor": "c1"}}),
            response_factory({"data": pages[1], "pagination": {"cursor": "c2"}}),
            response_factory({"data": pages[2], "pagination": {}}),
        ]
        channel = ChannelHandle(username="twitchdev", id="141981764")

        records = _repository(auth_manager).get_channel_videos(channel)

        assert [r.id for r in records] == [item["id"] for page in pages for item in page]
        calls = helix_session.get.call_args_list
        assert [_values(c, "after") for c in calls] == [[""], ["c1"], ["c2"]]
        assert _values(calls[0], "user_id") == ["141981764"]
        assert _values(calls[0], "type") == ["archive"]
        assert _values(calls[0], "first") == ["100"]

    def test_stable_cursor_terminates(
        self, auth_manager: Mock, helix_session: Mock, twitch_video_factory, response_factory
    ) -> None:
        """Test that a cursor that stops changing ends pagination."""
        helix_session.get.side_effect = [
            response_factory({"data": [twitch_video_factory("1")], "pagination": {"cursor": "same"}}),
            response_factory({"data": [twitch_video_factory("2")], "pagination": {"cursor": "same"}}),
        ]
        channel = ChannelHandle(username="twitchdev", id="141981764")

        records = _repository(auth_manager).get_channel_videos(channel)

        assert [r.id for r in records] == ["1", "2"]
        assert helix_session.get.call_count == 2

    def test_failed_page_keeps_earlier_pages(
        self, auth_manager: Mock, helix_session: Mock, twitch_video_factory, response_factory
    ) -> None:
        """Test that a failing page stops the walk without losing results."""
        helix_session.get.side_effect = [
            response_factory({"data": [twitch_video_factory("1")], "pagination": {"cursor": "c1"}}),
            response_factory({"data": None}),
        ]
        channel = ChannelHandle(username="twitchdev", id="141981764")

        records = _repository(auth_manager).get_channel_videos(channel)

        assert [r.id for r in records] == ["1"]

    def test_processing_videos_filtered(
        self, auth_manager: Mock, helix_session: Mock, twitch_video_factory, response_factory
    ) -> None:
        """Test that VODs still being processed are left out."""
        helix_session.get.return_value = response_factory(
            {
                "data": [
                    twitch_video_factory("1"),
                    twitch_video_factory("2", thumbnail_url=PROCESSING_THUMBNAIL),
                ],
            }
        )
        channel = ChannelHandle(username="twitchdev", id="141981764")

        records = _repository(auth_manager, Platform.HIGHLIGHT).get_channel_videos(channel)

        assert [r.id for r in records] == ["1"]
        assert _values(helix_session.get.call_args, "type") == ["highlight"]

    def test_clip_windows_reset_cursor(
        self, auth_manager: Mock, helix_session: Mock, twitch_clip_factory, response_factory
    ) -> None:
        """Test that every window starts without a cursor."""
        responses = []
        for window in range(3):
            responses.append(
                response_factory({"data": [twitch_clip_factory(f"w{window}a")], "pagination": {"cursor": "next"}})
            )
            responses.append(response_factory({"data": [twitch_clip_factory(f"w{window}b")], "pagination": {}}))
        helix_session.get.side_effect = responses
        channel = ChannelHandle(username="twitchdev", id="141981764")
        repository = _repository(
            auth_manager, Platform.CLIP, clip_range=timedelta(hours=2), clip_interval=timedelta(hours=1)
        )

        records = repository.get_channel_videos(channel)

        calls = helix_session.get.call_args_list
        assert len(calls) == 6
        assert [_values(c, "after") for c in calls] == [[""], ["next"]] * 3
        assert [_values(c, "started_at")[0] for c in calls[::2]] == [
            "2024-01-08T10:00:00Z",
            "2024-01-08T11:00:00Z",
            "2024-01-08T12:00:00Z",
        ]
        assert _values(calls[0], "ended_at") == ["2024-01-08T11:00:00Z"]
        assert _values(calls[0], "broadcaster_id") == ["141981764"]
        assert [r.id for r in records] == ["w0a", "w0b", "w1a", "w1b", "w2a", "w2b"]

    def test_malformed_clip_window_does_not_stop_later_windows(
        self, auth_manager: Mock, helix_session: Mock, twitch_clip_factory, response_factory
    ) -> None:
        """Test that a broken page ends only its own window."""
        helix_session.get.side_effect = [
            response_factory({"data": None}),
            response_factory({"data": [twitch_clip_factory("w1")], "pagination": {}}),
            response_factory({"data": [twitch_clip_factory("w2")], "pagination": {}}),
        ]
        channel = ChannelHandle(username="twitchdev", id="141981764")
        repository = _repository(
            auth_manager, Platform.CLIP, clip_range=timedelta(hours=2), clip_interval=timedelta(hours=1)
        )

        records = repository.get_channel_videos(channel)

        assert [r.id for r in records] == ["w1", "w2"]
        assert helix_session.get.call_count == 3
        assert [_values(c, "after") for c in helix_session.get.call_args_list] == [[""], [""], [""]]
