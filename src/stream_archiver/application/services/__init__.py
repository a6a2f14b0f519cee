"""Application services."""

from stream_archiver.application.services.pipeline_service import DefaultDownloadPipeline
from stream_archiver.application.services.resolution_service import ResolutionService

__all__ = ["DefaultDownloadPipeline", "ResolutionService"]
