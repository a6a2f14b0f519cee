"""Per-platform download stage functions.

Every stage checks its artifact before doing any work and raises
:class:`AlreadyExistsError` when it is present, so re-running against the
same directory never contacts the network or spawns a process.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import requests

from stream_archiver.domain.exceptions import (
    AlreadyExistsError,
    APIError,
    ExpectedNoOpError,
    MissingProgramError,
    NoChatFoundError,
)
from stream_archiver.domain.models.video import Platform, VideoRecord
from stream_archiver.domain.services.sanitizer import sanitize
from stream_archiver.infrastructure.external.programs import ExternalProgram, run_program

logger = logging.getLogger(__name__)

CHAT_EXT = ".chat.json"
THUMBNAIL_WIDTH = "1920"
THUMBNAIL_HEIGHT = "1080"


class StageContext(Protocol):
    """Settings every stage reads."""

    output_dir: Path
    threads: int
    logging: bool
    skip_video: bool
    missing: frozenset[ExternalProgram]
    session: requests.Session


StageFunction = Callable[[VideoRecord, StageContext], None]


def _log_name(record: VideoRecord, stage: str, context: StageContext) -> str | None:
    return f"{record.id}.{stage}" if context.logging else None


def _check_absent(path: Path) -> None:
    if path.exists():
        raise AlreadyExistsError(path.name)


def metadata_filename(record: VideoRecord) -> str:
    return f"{record.id}.json"


def thumbnail_filename(record: VideoRecord) -> str:
    return f"{record.id}.jpg"


def chat_filename(record: VideoRecord) -> str:
    return f"{record.id}{CHAT_EXT}"


def processed_chat_filename(record: VideoRecord) -> str:
    return f"{chat_filename(record)}.br"


def titled_video_filename(record: VideoRecord) -> str:
    """``<sanitized title>-v<id>.mp4``, used for VODs, highlights and YouTube."""
    return f"{sanitize(record.title, False)}-v{record.id}.mp4"


def clip_video_filename(record: VideoRecord) -> str:
    """``<id>.mp4``, used for clips."""
    return f"{record.id}.mp4"


def save_metadata(record: VideoRecord, context: StageContext) -> None:
    """
    Write the record as pretty-printed JSON to ``<id>.json``.

    Raises:
        AlreadyExistsError: If the file exists
    """
    path = context.output_dir / metadata_filename(record)
    _check_absent(path)
    text = json.dumps(record.to_json_dict(), indent=2, ensure_ascii=False) + "\n"
    try:
        with open(path, "x", encoding="utf-8") as f:
            f.write(text)
    except FileExistsError as e:
        raise AlreadyExistsError(path.name) from e


def download_thumbnail(record: VideoRecord, context: StageContext) -> None:
    """
    Fetch the thumbnail into ``<id>.jpg``.

    Size placeholders in Twitch thumbnail URLs are filled in first.

    Raises:
        AlreadyExistsError: If the file exists
        APIError: If there is no thumbnail or the download fails
    """
    path = context.output_dir / thumbnail_filename(record)
    _check_absent(path)
    if not record.thumbnail_url:
        raise APIError(f"No thumbnail for {record.id}")

    url = record.thumbnail_url.replace("%{width}", THUMBNAIL_WIDTH).replace("%{height}", THUMBNAIL_HEIGHT)
    logger.debug(f"Downloading thumbnail {url}")
    try:
        response = context.session.get(url)
        response.raise_for_status()
    except requests.RequestException as e:
        status = e.response.status_code if e.response is not None else None
        raise APIError(f"Failed to download thumbnail {url}: {e}", status, e) from e

    try:
        with open(path, "xb") as f:
            f.write(response.content)
    except FileExistsError as e:
        raise AlreadyExistsError(path.name) from e


def download_twitch_chat(record: VideoRecord, context: StageContext) -> None:
    """Download VOD chat with TwitchDownloaderCLI."""
    filename = chat_filename(record)
    _check_absent(context.output_dir / filename)
    run_program(
        ExternalProgram.TWITCH_DOWNLOADER,
        ["chatdownload", "-u", record.id, "-o", filename],
        context.output_dir,
        context.missing,
        _log_name(record, "chat", context),
    )


def download_youtube_chat(record: VideoRecord, context: StageContext) -> None:
    """Download live chat replay with chat_downloader."""
    filename = chat_filename(record)
    _check_absent(context.output_dir / filename)
    run_program(
        ExternalProgram.CHAT_DOWNLOADER,
        [f"https://www.youtube.com/watch?v={record.id}", "--output", filename],
        context.output_dir,
        context.missing,
        _log_name(record, "chat", context),
    )


def compress_chat(record: VideoRecord, context: StageContext) -> None:
    """
    Compress the downloaded chat with brotli.

    Raises:
        AlreadyExistsError: If the compressed file exists
        MissingProgramError: If brotli is not installed
        NoChatFoundError: If there is no chat file to compress
    """
    _check_absent(context.output_dir / processed_chat_filename(record))
    if ExternalProgram.BROTLI in context.missing:
        raise MissingProgramError(ExternalProgram.BROTLI.value)
    filename = chat_filename(record)
    if not (context.output_dir / filename).exists():
        raise NoChatFoundError(filename)
    run_program(
        ExternalProgram.BROTLI,
        ["-q", "11", filename],
        context.output_dir,
        context.missing,
        _log_name(record, "chat_process", context),
    )


def _download_video(record: VideoRecord, context: StageContext, filename: str, url: str) -> None:
    if context.skip_video:
        raise ExpectedNoOpError("video")
    _check_absent(context.output_dir / filename)
    run_program(
        ExternalProgram.YT_DLP,
        ["-N", str(context.threads), "-o", filename, url],
        context.output_dir,
        context.missing,
        _log_name(record, "video", context),
    )


def download_twitch_video(record: VideoRecord, context: StageContext) -> None:
    """Download a VOD or highlight with yt-dlp."""
    _download_video(
        record, context, titled_video_filename(record), f"https://www.twitch.tv/videos/{record.id}"
    )


def download_clip_video(record: VideoRecord, context: StageContext) -> None:
    """Download a clip with yt-dlp."""
    _download_video(record, context, clip_video_filename(record), f"https://clips.twitch.tv/{record.id}")


def download_youtube_video(record: VideoRecord, context: StageContext) -> None:
    """Download a YouTube video with yt-dlp."""
    _download_video(
        record, context, titled_video_filename(record), f"https://youtube.com/watch?v={record.id}"
    )


def not_attempted(stage: str) -> StageFunction:
    """Return a stage that is intentionally not implemented for a platform."""

    def stage_function(record: VideoRecord, context: StageContext) -> None:
        raise ExpectedNoOpError(stage)

    return stage_function


@dataclass(frozen=True)
class StageSet:
    """The five stage bindings and the video naming rule for one platform."""

    metadata: StageFunction
    thumbnail: StageFunction
    chat: StageFunction
    chat_process: StageFunction
    video: StageFunction
    video_filename: Callable[[VideoRecord], str]


_TWITCH_VIDEO_STAGES = StageSet(
    metadata=save_metadata,
    thumbnail=download_thumbnail,
    chat=download_twitch_chat,
    chat_process=compress_chat,
    video=download_twitch_video,
    video_filename=titled_video_filename,
)

STAGES: dict[Platform, StageSet] = {
    Platform.VOD: _TWITCH_VIDEO_STAGES,
    Platform.HIGHLIGHT: _TWITCH_VIDEO_STAGES,
    Platform.CLIP: StageSet(
        metadata=save_metadata,
        thumbnail=download_thumbnail,
        chat=not_attempted("chat"),
        chat_process=not_attempted("chat_process"),
        video=download_clip_video,
        video_filename=clip_video_filename,
    ),
    Platform.YOUTUBE: StageSet(
        metadata=save_metadata,
        thumbnail=download_thumbnail,
        chat=download_youtube_chat,
        chat_process=not_attempted("chat_process"),
        video=download_youtube_video,
        video_filename=titled_video_filename,
    ),
}


def stages_for(platform: Platform) -> StageSet:
    """Look up the stage bindings for a platform."""
    return STAGES[platform]
