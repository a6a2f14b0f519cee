"""Domain models for the stream archiver."""

from stream_archiver.domain.models.channel import ChannelHandle
from stream_archiver.domain.models.pagination import TimeWindow, iter_time_windows, next_cursor, parse_duration
from stream_archiver.domain.models.processing import (
    BatchProcessingResult,
    Stage,
    StageOutcome,
    StageResult,
    VideoProcessingResult,
)
from stream_archiver.domain.models.video import Platform, VideoRecord

__all__ = [
    "ChannelHandle",
    "Platform",
    "VideoRecord",
    "TimeWindow",
    "iter_time_windows",
    "next_cursor",
    "parse_duration",
    "Stage",
    "StageOutcome",
    "StageResult",
    "VideoProcessingResult",
    "BatchProcessingResult",
]
