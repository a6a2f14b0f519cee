"""Default implementation of the download pipeline."""

from __future__ import annotations

import logging
from collections.abc import Callable

from stream_archiver.application.context import ExecutionContext
from stream_archiver.application.hooks import hook_variables, run_hook
from stream_archiver.domain.exceptions import (
    AlreadyExistsError,
    ArchiverError,
    ExpectedNoOpError,
    HookError,
)
from stream_archiver.domain.models.processing import (
    BatchProcessingResult,
    Stage,
    StageOutcome,
    StageResult,
    VideoProcessingResult,
)
from stream_archiver.domain.models.video import VideoRecord
from stream_archiver.domain.services.download_pipeline import DownloadPipeline
from stream_archiver.infrastructure.downloads import stages as stage_files
from stream_archiver.infrastructure.downloads.stages import StageFunction, StageSet

logger = logging.getLogger(__name__)


class DefaultDownloadPipeline(DownloadPipeline):
    """
    Drives records through metadata, thumbnail, chat, chat processing and video.

    Every stage is attempted even when an earlier one failed, except that a
    metadata failure other than an existing file ends the video.
    """

    def __init__(self, context: ExecutionContext, stages: StageSet) -> None:
        """
        Initialize the pipeline.

        Args:
            context: Execution context of the current invocation
            stages: Stage bindings for the selected platform
        """
        self.context = context
        self.stages = stages

    def _plan(self, record: VideoRecord) -> list[tuple[Stage, StageFunction, str, str]]:
        """Stage, function, verb and artifact name, in execution order."""
        return [
            (Stage.METADATA, self.stages.metadata, "Download", stage_files.metadata_filename(record)),
            (Stage.THUMBNAIL, self.stages.thumbnail, "Download", stage_files.thumbnail_filename(record)),
            (Stage.CHAT, self.stages.chat, "Download", stage_files.chat_filename(record)),
            (Stage.CHAT_PROCESS, self.stages.chat_process, "Process", stage_files.processed_chat_filename(record)),
            (Stage.VIDEO, self.stages.video, "Download", self.stages.video_filename(record)),
        ]

    def process_videos(self, records: list[VideoRecord]) -> BatchProcessingResult:
        """
        Process every record sequentially.

        Args:
            records: Resolved metadata records

        Returns:
            BatchProcessingResult with one entry per record
        """
        batch = BatchProcessingResult()
        for record in records:
            batch.add(self.process_video(record))
        batch.complete()
        logger.info(f"Pipeline finished: {batch}")
        return batch

    def process_video(self, record: VideoRecord) -> VideoProcessingResult:
        """
        Run the five stages for one record.

        Args:
            record: Record to download

        Returns:
            VideoProcessingResult with the outcome of every stage that ran
        """
        result = VideoProcessingResult(video_id=record.id, title=record.title)
        variables = hook_variables(record, self.stages.video_filename(record))

        for stage, function, verb, filename in self._plan(record):
            stage_result = self._run_stage(stage, function, record, verb, filename)
            result.add(stage_result)

            if stage_result.outcome.artifact_present:
                self._run_hook(stage, variables)

            if stage == Stage.METADATA and stage_result.is_failure:
                logger.warning(f"Skipping remaining stages for {record.id}")
                result.aborted = True
                return result

        self.context.reporter.message(f"Finished downloading {record.title}", threshold=1, style="green")
        return result

    def _run_stage(
        self,
        stage: Stage,
        function: Callable[..., None],
        record: VideoRecord,
        verb: str,
        filename: str,
    ) -> StageResult:
        reporter = self.context.reporter
        label = stage.description if stage != Stage.METADATA else stage.value

        try:
            with reporter.status(f" {verb.rstrip('e')}ing {filename}"):
                function(record, self.context)
        except AlreadyExistsError as e:
            reporter.warn(label, f"Already exists: {filename}")
            return StageResult(stage, StageOutcome.ALREADY_EXISTS, e.message)
        except ExpectedNoOpError as e:
            logger.debug(f"{stage.value} not attempted for {record.id}")
            return StageResult(stage, StageOutcome.EXPECTED, e.message)
        except ArchiverError as e:
            reporter.error(label, f"Failed to {verb.lower()} {filename}")
            reporter.debug(label, e.message)
            logger.debug(f"{stage.value} failed for {record.id}: {e.message}")
            return StageResult(stage, StageOutcome.FAILURE, e.message)
        except OSError as e:
            reporter.error(label, f"Failed to {verb.lower()} {filename}")
            reporter.debug(label, str(e))
            logger.debug(f"{stage.value} failed for {record.id}: {e}")
            return StageResult(stage, StageOutcome.FAILURE, str(e))

        reporter.good(label, f"{verb}ed {filename}")
        return StageResult(stage, StageOutcome.SUCCESS)

    def _run_hook(self, stage: Stage, variables: dict[str, str]) -> None:
        template = self.context.hooks.get(stage.value)
        if not template:
            return
        try:
            run_hook(stage.value, template, variables, self.context.output_dir)
        except HookError as e:
            self.context.reporter.error("hook", e.message)
