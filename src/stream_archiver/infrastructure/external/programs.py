"""External command-line programs: capability probing and invocation.

Programs are located with :func:`shutil.which` once at startup; stages
consult the resulting missing set instead of probing again.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from contextlib import ExitStack
from enum import Enum
from pathlib import Path

from stream_archiver.domain.exceptions import CommandFailedError, MissingProgramError
from stream_archiver.domain.models.video import Platform

logger = logging.getLogger(__name__)


class ExternalProgram(str, Enum):
    """Programs the download stages delegate to."""

    YT_DLP = "yt-dlp"
    BROTLI = "brotli"
    CHAT_DOWNLOADER = "chat_downloader"
    TWITCH_DOWNLOADER = "TwitchDownloaderCLI"

    @property
    def url(self) -> str:
        """Project page with installation instructions."""
        return {
            ExternalProgram.YT_DLP: "https://github.com/yt-dlp/yt-dlp",
            ExternalProgram.BROTLI: "https://github.com/google/brotli",
            ExternalProgram.CHAT_DOWNLOADER: "https://github.com/xenova/chat-downloader",
            ExternalProgram.TWITCH_DOWNLOADER: "https://github.com/lay295/TwitchDownloader",
        }[self]

    def is_installed(self) -> bool:
        """Whether the program is found on PATH."""
        return shutil.which(self.value) is not None

    def __str__(self) -> str:
        return f"{self.value}: {self.url}"


REQUIRED_PROGRAMS: dict[Platform, tuple[ExternalProgram, ...]] = {
    Platform.VOD: (ExternalProgram.TWITCH_DOWNLOADER, ExternalProgram.BROTLI, ExternalProgram.YT_DLP),
    Platform.HIGHLIGHT: (ExternalProgram.TWITCH_DOWNLOADER, ExternalProgram.BROTLI, ExternalProgram.YT_DLP),
    Platform.CLIP: (ExternalProgram.YT_DLP,),
    Platform.YOUTUBE: (ExternalProgram.CHAT_DOWNLOADER, ExternalProgram.YT_DLP),
}


def find_missing(platform: Platform) -> frozenset[ExternalProgram]:
    """
    Probe the programs a platform's stages need.

    Args:
        platform: Selected platform

    Returns:
        Programs that are not installed
    """
    missing = frozenset(p for p in REQUIRED_PROGRAMS[platform] if not p.is_installed())
    for program in sorted(missing, key=lambda p: p.value):
        logger.debug(f"Missing external program: {program}")
    return missing


def run_program(
    program: ExternalProgram,
    args: list[str],
    cwd: Path,
    missing: frozenset[ExternalProgram] = frozenset(),
    log_name: str | None = None,
) -> None:
    """
    Run an external program to completion.

    Args:
        program: Program to run
        args: Arguments after the program name
        cwd: Working directory, where artifacts are written
        missing: Programs known to be absent
        log_name: When set, stdout and stderr are appended to
            ``<log_name>.log`` and ``<log_name>.err.log`` in ``cwd``;
            otherwise they are discarded

    Raises:
        MissingProgramError: If the program is in ``missing``
        CommandFailedError: If it cannot be started or exits non-zero
    """
    if program in missing:
        raise MissingProgramError(program.value)

    command = [program.value, *args]
    logger.debug(f"Running {command} in {cwd}")

    with ExitStack() as stack:
        if log_name is None:
            stdout = stderr = subprocess.DEVNULL
        else:
            stdout = stack.enter_context(open(cwd / f"{log_name}.log", "a", encoding="utf-8"))
            stderr = stack.enter_context(open(cwd / f"{log_name}.err.log", "a", encoding="utf-8"))
        try:
            completed = subprocess.run(command, cwd=cwd, stdout=stdout, stderr=stderr, check=False)
        except OSError as e:
            raise CommandFailedError(program.value, cause=e) from e

    if completed.returncode != 0:
        raise CommandFailedError(program.value, completed.returncode)
