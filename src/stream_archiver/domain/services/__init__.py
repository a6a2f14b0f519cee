"""Domain services: abstract interfaces and pure text transforms."""

from stream_archiver.domain.services.configuration_provider import (
    ConfigurationProvider,
)
from stream_archiver.domain.services.download_pipeline import DownloadPipeline
from stream_archiver.domain.services.identifier_matcher import IdentifierMatcher
from stream_archiver.domain.services.sanitizer import sanitize
from stream_archiver.domain.services.video_repository import VideoRepository

__all__ = [
    "VideoRepository",
    "ConfigurationProvider",
    "DownloadPipeline",
    "IdentifierMatcher",
    "sanitize",
]
