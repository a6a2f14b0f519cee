"""Abstract base class for the per-video download pipeline."""

from abc import ABC, abstractmethod

from stream_archiver.domain.models.processing import (
    BatchProcessingResult,
    VideoProcessingResult,
)
from stream_archiver.domain.models.video import VideoRecord


class DownloadPipeline(ABC):
    """
    Abstract service driving resolved records through the download stages.

    Stages run in order: metadata, thumbnail, chat, chat processing, video.
    Each stage is skipped when its artifact is already present.
    """

    @abstractmethod
    def process_videos(self, records: list[VideoRecord]) -> BatchProcessingResult:
        """
        Process every record sequentially.

        Args:
            records: Resolved metadata records

        Returns:
            BatchProcessingResult with one entry per record
        """
        pass

    @abstractmethod
    def process_video(self, record: VideoRecord) -> VideoProcessingResult:
        """
        Run the five stages for one record.

        Stage failures are recorded rather than raised. A metadata failure
        other than an existing file stops the remaining stages.

        Args:
            record: Record to download

        Returns:
            VideoProcessingResult with the outcome of every stage that ran
        """
        pass
