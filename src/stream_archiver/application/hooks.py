"""User-configured shell commands run after pipeline stages."""

from __future__ import annotations

import logging
import shlex
import subprocess
from pathlib import Path

from stream_archiver.domain.exceptions import HookError
from stream_archiver.domain.models.video import VideoRecord
from stream_archiver.infrastructure.downloads.stages import CHAT_EXT

logger = logging.getLogger(__name__)


def hook_variables(record: VideoRecord, video_filename: str) -> dict[str, str]:
    """
    Build the placeholder values available to hook templates.

    Args:
        record: Record being processed
        video_filename: Final video file name for the record's platform

    Returns:
        Mapping for ``str.format``; ``video`` is shell-escaped
    """
    return {
        "id": record.id,
        "chat_ext": CHAT_EXT,
        "video": shlex.quote(video_filename),
        "title": record.title,
    }


def run_hook(stage: str, template: str, variables: dict[str, str], cwd: Path) -> None:
    """
    Render a hook template and run it with ``bash -c``.

    Output goes to the terminal so users can see what their hook printed.

    Args:
        stage: Stage the hook belongs to
        template: Command template
        variables: Placeholder values
        cwd: Directory the command runs in

    Raises:
        HookError: If rendering fails, bash cannot be started or the
            command exits non-zero
    """
    try:
        command = template.format(**variables)
    except (KeyError, IndexError, ValueError) as e:
        raise HookError(stage, f"invalid template: {e}", e) from e

    logger.debug(f"Running {stage} hook: {command}")
    try:
        completed = subprocess.run(["bash", "-c", command], cwd=cwd, check=False)
    except OSError as e:
        raise HookError(stage, str(e), e) from e

    if completed.returncode != 0:
        raise HookError(stage, f"exit status {completed.returncode}")
