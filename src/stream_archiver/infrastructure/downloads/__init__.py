"""Download stage implementations."""

from stream_archiver.infrastructure.downloads.stages import (
    CHAT_EXT,
    STAGES,
    StageContext,
    StageSet,
    stages_for,
)

__all__ = [
    "CHAT_EXT",
    "STAGES",
    "StageContext",
    "StageSet",
    "stages_for",
]
