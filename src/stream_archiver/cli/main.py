"""Main CLI interface for the stream archiver."""

from __future__ import annotations

import sys
from pathlib import Path

import click
from click.shell_completion import get_completion_class

from stream_archiver import __version__
from stream_archiver.application.context import ExecutionContext, Reporter
from stream_archiver.cli.utils import (
    console,
    create_config_table,
    create_programs_table,
    display_batch_summary,
    display_error_message,
)
from stream_archiver.domain.exceptions import (
    ArchiverError,
    AuthenticationError,
    ConfigurationError,
)
from stream_archiver.domain.models.pagination import parse_duration
from stream_archiver.domain.models.video import Platform
from stream_archiver.domain.services.configuration_provider import ConfigurationProvider
from stream_archiver.infrastructure.config.yaml_provider import default_config_path
from stream_archiver.infrastructure.container import (
    create_container,
    get_configuration_provider,
    get_download_pipeline,
    get_resolution_service,
)
from stream_archiver.infrastructure.external.programs import find_missing
from stream_archiver.infrastructure.logging_setup import configure_logging

PROG_NAME = "archiver"
COMPLETE_VAR = "_ARCHIVER_COMPLETE"
EXIT_ERROR = 1
EXIT_INTERRUPTED = 130

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(version=__version__, prog_name=PROG_NAME)
def cli() -> None:
    """
    Stream Archiver - download Twitch VODs, highlights, clips and YouTube videos.

    For every video the metadata, thumbnail, chat and video are saved next to
    each other. Files that already exist are left alone, so an interrupted run
    can simply be repeated.
    """


def _select_platform(vods: bool, highlights: bool, clips: bool, youtube: bool) -> Platform:
    selected = [
        platform
        for platform, flag in (
            (Platform.VOD, vods),
            (Platform.HIGHLIGHT, highlights),
            (Platform.CLIP, clips),
            (Platform.YOUTUBE, youtube),
        )
        if flag
    ]
    if len(selected) != 1:
        raise click.UsageError("Select exactly one of --vods, --highlights, --clips or --youtube")
    return selected[0]


def _check_credentials(config_provider: ConfigurationProvider, platform: Platform) -> None:
    """Fail before any network activity when the platform's credentials are missing."""
    if platform is Platform.YOUTUBE:
        if not config_provider.get_youtube_api_key():
            raise AuthenticationError(
                f"YouTube api_key is not set in {config_provider.config_path}"
            )
        return

    client_id, client_secret = config_provider.get_twitch_credentials()
    if not client_id or not client_secret:
        raise AuthenticationError(
            f"Twitch client_id and client_secret are not set in {config_provider.config_path}"
        )


@cli.command()
@click.option("--vods", is_flag=True, help="Twitch VODs")
@click.option("--highlights", is_flag=True, help="Twitch Highlights")
@click.option("--clips", is_flag=True, help="Twitch Clips")
@click.option("--youtube", is_flag=True, help="YouTube")
@click.argument("videos", required=False)
@click.option("--channel", "-c", help="Target channel (YouTube or Twitch)")
@click.option(
    "--threads", "-N", type=click.IntRange(min=1), default=1, show_default=True,
    help="Number of video pieces to download simultaneously",
)
@click.option(
    "--range", "-r", "range_", default="1week", show_default=True, metavar="DURATION",
    help="How long ago to start searching for clips",
)
@click.option(
    "--interval", "-i", default="1hour", show_default=True, metavar="DURATION",
    help="Time interval to search for clips, shorter intervals find more clips",
)
@click.option("--logging", "-l", "log_commands", is_flag=True, help="Log output of external programs into files")
@click.option("--skip-video", "-K", is_flag=True, help="Do not download the video itself")
@click.option("--verbose", "-v", count=True, help="Increase output verbosity")
@click.option("--silent", "-s", count=True, help="Hide output, use twice to hide errors as well")
@click.option("--hide-spinners", "-q", is_flag=True, help="Do not show progress spinners")
@click.option(
    "--config", "config_path", type=click.Path(dir_okay=False, path_type=Path), default=None,
    help="Path to configuration file  [default: per-user config directory]",
)
@click.option(
    "--output-dir", "-o", type=click.Path(file_okay=False, path_type=Path), default=Path("."),
    help="Directory the files are written to",
)
def download(
    vods: bool,
    highlights: bool,
    clips: bool,
    youtube: bool,
    videos: str | None,
    channel: str | None,
    threads: int,
    range_: str,
    interval: str,
    log_commands: bool,
    skip_video: bool,
    verbose: int,
    silent: int,
    hide_spinners: bool,
    config_path: Path | None,
    output_dir: Path,
) -> None:
    """
    Download VIDEOS (comma-separated ids or URLs) or a whole --channel.
    """
    platform = _select_platform(vods, highlights, clips, youtube)
    if (videos is None) == (channel is None):
        raise click.UsageError("Provide either VIDEOS or --channel, but not both")
    if verbose and silent:
        raise click.UsageError("--verbose and --silent cannot be combined")
    if platform is Platform.CLIP and channel is not None and not parse_duration(interval):
        raise click.BadParameter("must be a positive duration such as 30m", param_hint="--interval")

    verbosity = verbose - silent
    configure_logging(verbosity)
    reporter = Reporter(verbosity, hide_spinners, console)

    try:
        with reporter.status(" Checking external programs"):
            missing = find_missing(platform)
        for program in sorted(missing, key=lambda p: p.value):
            reporter.error(None, f"Missing external program: {program}")

        config_path = config_path or default_config_path()
        with reporter.status(" Getting config"):
            container = create_container(config_path)
            config_provider = get_configuration_provider(container)
        configure_logging(verbosity, config_provider.get_logging_config())
        _check_credentials(config_provider, platform)

        output_dir.mkdir(parents=True, exist_ok=True)
        context = ExecutionContext(
            platform=platform,
            output_dir=output_dir.resolve(),
            threads=threads,
            verbosity=verbosity,
            range=parse_duration(range_),
            interval=parse_duration(interval),
            logging=log_commands,
            skip_video=skip_video,
            hide_spinners=hide_spinners,
            missing=missing,
            hooks=config_provider.get_hooks(),
            reporter=reporter,
        )

        resolution = get_resolution_service(container, context)
        if channel is not None:
            records = resolution.resolve_channel(channel)
        else:
            records = resolution.resolve_videos(videos or "")

        result = get_download_pipeline(context).process_videos(records)
        if verbosity >= 1:
            display_batch_summary(result)

    except KeyboardInterrupt:
        reporter.error(None, "Interrupted")
        sys.exit(EXIT_INTERRUPTED)
    except ConfigurationError as e:
        reporter.error("config", e.message)
        sys.exit(EXIT_ERROR)
    except AuthenticationError as e:
        reporter.error("auth", e.message)
        sys.exit(EXIT_ERROR)
    except ArchiverError as e:
        reporter.error(None, e.message)
        sys.exit(EXIT_ERROR)
    except OSError as e:
        reporter.error(None, str(e))
        sys.exit(EXIT_ERROR)


@cli.command()
@click.argument("shell", type=click.Choice(["bash", "zsh", "fish"]))
def completion(shell: str) -> None:
    """Print the shell completion script for SHELL."""
    completion_class = get_completion_class(shell)
    if completion_class is None:
        raise click.UsageError(f"Unsupported shell: {shell}")
    click.echo(completion_class(cli, {}, PROG_NAME, COMPLETE_VAR).source())


@cli.command()
@click.option(
    "--config", "config_path", type=click.Path(dir_okay=False, path_type=Path), default=None,
    help="Path to configuration file  [default: per-user config directory]",
)
def check(config_path: Path | None) -> None:
    """Check the configuration file and external programs."""
    config_path = config_path or default_config_path()

    try:
        config_provider = get_configuration_provider(create_container(config_path))
    except ConfigurationError as e:
        display_error_message("Configuration Error", e.message)
        console.print(create_programs_table())
        sys.exit(EXIT_ERROR)

    client_id, client_secret = config_provider.get_twitch_credentials()
    credentials = {
        "Twitch client_id": bool(client_id),
        "Twitch client_secret": bool(client_secret),
        "YouTube api_key": bool(config_provider.get_youtube_api_key()),
    }
    console.print(create_config_table(config_provider.config_path, credentials))
    console.print(create_programs_table())


def main() -> None:
    """Main entry point for the CLI."""
    cli(prog_name=PROG_NAME)


if __name__ == "__main__":
    main()
