"""Processing result models for tracking download pipeline runs."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class Stage(str, Enum):
    """The five per-video pipeline stages, in execution order."""

    METADATA = "json"
    THUMBNAIL = "thumbnail"
    CHAT = "chat"
    CHAT_PROCESS = "chat_process"
    VIDEO = "video"

    @property
    def description(self) -> str:
        """Noun used in user-facing messages."""
        return {
            Stage.METADATA: "metadata",
            Stage.THUMBNAIL: "thumbnail",
            Stage.CHAT: "chat",
            Stage.CHAT_PROCESS: "chat",
            Stage.VIDEO: "video",
        }[self]


class StageOutcome(str, Enum):
    """Classification of a single stage attempt."""

    SUCCESS = "success"
    ALREADY_EXISTS = "already_exists"
    EXPECTED = "expected"
    FAILURE = "failure"

    @property
    def artifact_present(self) -> bool:
        """Whether the stage artifact is on disk after this outcome."""
        return self in (StageOutcome.SUCCESS, StageOutcome.ALREADY_EXISTS)


@dataclass(frozen=True)
class StageResult:
    """Outcome of one stage for one video."""

    stage: Stage
    outcome: StageOutcome
    message: str | None = None

    @property
    def is_failure(self) -> bool:
        """Whether the stage failed."""
        return self.outcome == StageOutcome.FAILURE

    def __str__(self) -> str:
        """Human-readable string representation."""
        detail = f" - {self.message}" if self.message else ""
        return f"{self.stage.value}: {self.outcome.value}{detail}"


@dataclass
class VideoProcessingResult:
    """
    Result of driving a single video through the pipeline.

    Stages that never ran because the metadata stage aborted the video are
    absent from ``stages``.
    """

    video_id: str
    title: str
    stages: list[StageResult] = field(default_factory=list)
    aborted: bool = False

    def add(self, result: StageResult) -> None:
        """Record a stage result."""
        self.stages.append(result)

    def outcome_for(self, stage: Stage) -> StageOutcome | None:
        """Return the outcome recorded for ``stage``, if it ran."""
        for result in self.stages:
            if result.stage == stage:
                return result.outcome
        return None

    @property
    def has_failures(self) -> bool:
        """Whether any stage failed."""
        return self.aborted or any(r.is_failure for r in self.stages)


@dataclass
class BatchProcessingResult:
    """
    Result of processing every resolved video in one invocation.

    Aggregates per-video results and provides counts for the summary table.
    """

    results: list[VideoProcessingResult] = field(default_factory=list)
    started_at: datetime = field(default_factory=datetime.now)
    completed_at: datetime | None = None

    def add(self, result: VideoProcessingResult) -> None:
        """Add a per-video result."""
        self.results.append(result)

    def count(self, outcome: StageOutcome) -> int:
        """Count stage results with the given outcome across all videos."""
        return sum(1 for r in self.results for s in r.stages if s.outcome == outcome)

    @property
    def has_errors(self) -> bool:
        """Whether any video had a failed stage."""
        return any(r.has_failures for r in self.results)

    @property
    def processing_time_seconds(self) -> float:
        """Wall-clock duration of the run, zero until completed."""
        if self.completed_at is None:
            return 0.0
        return (self.completed_at - self.started_at).total_seconds()

    def complete(self) -> None:
        """Mark the batch as completed."""
        self.completed_at = datetime.now()

    def __str__(self) -> str:
        """Human-readable string representation."""
        return (
            f"BatchProcessingResult(videos={len(self.results)}, "
            f"success={self.count(StageOutcome.SUCCESS)}, "
            f"existing={self.count(StageOutcome.ALREADY_EXISTS)}, "
            f"failed={self.count(StageOutcome.FAILURE)})"
        )
