"""Dependency injection container configuration."""

from __future__ import annotations

from pathlib import Path

from dependency_injector import containers, providers

from stream_archiver.application.context import ExecutionContext
from stream_archiver.application.services.pipeline_service import DefaultDownloadPipeline
from stream_archiver.application.services.resolution_service import ResolutionService
from stream_archiver.domain.models.video import Platform
from stream_archiver.domain.services.configuration_provider import ConfigurationProvider
from stream_archiver.domain.services.download_pipeline import DownloadPipeline
from stream_archiver.domain.services.video_repository import VideoRepository
from stream_archiver.infrastructure.config.yaml_provider import YamlConfigurationProvider
from stream_archiver.infrastructure.downloads.stages import stages_for
from stream_archiver.infrastructure.twitch.auth_manager import TwitchAuthManager
from stream_archiver.infrastructure.twitch.video_repository import TwitchVideoRepository
from stream_archiver.infrastructure.youtube.auth_manager import YouTubeAuthManager
from stream_archiver.infrastructure.youtube.video_repository import YouTubeVideoRepository


class Container(containers.DeclarativeContainer):
    """
    Dependency injection container for the stream archiver.

    This container manages all application dependencies and their lifecycles,
    providing a clean separation between interface definitions and concrete
    implementations.
    """

    # Configuration
    config_file_path = providers.Configuration()

    # Configuration Provider
    configuration_provider = providers.Singleton(
        YamlConfigurationProvider,
        config_path=config_file_path,
    )

    # Note: platform services are created in the getter functions because
    # they depend on the execution context built by the CLI


def create_container(config_path: str | Path) -> Container:
    """
    Create and configure the dependency injection container.

    Args:
        config_path: Path to the configuration file

    Returns:
        Configured container instance
    """
    container = Container()
    container.config_file_path.override(str(config_path))
    return container


def get_configuration_provider(container: Container) -> ConfigurationProvider:
    """
    Get the configuration provider from the container.

    Args:
        container: The dependency injection container

    Returns:
        Configuration provider instance
    """
    return container.configuration_provider()


def get_twitch_auth_manager(container: Container) -> TwitchAuthManager:
    """Get the Twitch authentication manager."""
    client_id, client_secret = get_configuration_provider(container).get_twitch_credentials()
    return TwitchAuthManager(client_id, client_secret)


def get_youtube_auth_manager(container: Container) -> YouTubeAuthManager:
    """Get the YouTube authentication manager."""
    return YouTubeAuthManager(get_configuration_provider(container).get_youtube_api_key())


def get_video_repository(container: Container, context: ExecutionContext) -> VideoRepository:
    """Get the repository for the context's platform."""
    if context.platform is Platform.YOUTUBE:
        return YouTubeVideoRepository(get_youtube_auth_manager(container), session=context.session)
    return TwitchVideoRepository(
        get_twitch_auth_manager(container),
        context.platform,
        clip_range=context.range,
        clip_interval=context.interval,
    )


def get_resolution_service(container: Container, context: ExecutionContext) -> ResolutionService:
    """Get the service that turns CLI input into records."""
    return ResolutionService(get_video_repository(container, context), context)


def get_download_pipeline(context: ExecutionContext) -> DownloadPipeline:
    """Get the download pipeline bound to the context's platform stages."""
    return DefaultDownloadPipeline(context, stages_for(context.platform))
