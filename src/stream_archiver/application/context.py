"""Per-invocation execution context and user-facing reporter."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path

import requests
from rich.console import Console
from rich.text import Text

from stream_archiver.domain.models.video import Platform
from stream_archiver.infrastructure.external.programs import ExternalProgram

GOOD = 0
WARN = 1
ERROR = -1
DEBUG = 3


class Reporter:
    """
    Prints stage results and status messages gated by verbosity.

    Success messages need verbosity >= 0, warnings >= 1, errors >= -1 and
    debug text >= 3. Spinners are shown from verbosity -1 upward unless
    hidden.
    """

    def __init__(self, verbosity: int = 0, hide_spinners: bool = False, console: Console | None = None) -> None:
        self.verbosity = verbosity
        self.hide_spinners = hide_spinners
        self.console = console or Console()

    def _emit(self, threshold: int, label: str | None, message: str, style: str) -> None:
        if self.verbosity < threshold:
            return
        if label is None:
            self.console.print(Text(message, style=style))
        else:
            self.console.print(Text.assemble((f"[{label}]", f"bold {style}"), " ", (message, style)))

    def good(self, label: str | None, message: str) -> None:
        self._emit(GOOD, label, message, "green")

    def warn(self, label: str | None, message: str) -> None:
        self._emit(WARN, label, message, "yellow")

    def error(self, label: str | None, message: str) -> None:
        self._emit(ERROR, label, message, "red")

    def debug(self, label: str | None, message: str) -> None:
        self._emit(DEBUG, label, message, "dim")

    def message(self, message: str, threshold: int = GOOD, style: str = "") -> None:
        """Print plain text when verbosity reaches ``threshold``."""
        self._emit(threshold, None, message, style)

    @property
    def spinners_enabled(self) -> bool:
        return self.verbosity >= -1 and not self.hide_spinners

    @contextmanager
    def status(self, message: str) -> Iterator[None]:
        """Show a spinner while the block runs."""
        if not self.spinners_enabled:
            yield
            return
        with self.console.status(message, spinner="dots2"):
            yield


@dataclass
class ExecutionContext:
    """
    Settings and collaborators shared by one command invocation.

    Built once by the CLI and passed explicitly to every service and stage.
    The reporter is keyword-only and has no default, so the caller decides
    its verbosity and console.
    """

    platform: Platform
    output_dir: Path = field(default_factory=Path.cwd)
    threads: int = 1
    verbosity: int = 0
    range: timedelta = timedelta(weeks=1)
    interval: timedelta = timedelta(hours=1)
    logging: bool = False
    skip_video: bool = False
    hide_spinners: bool = False
    missing: frozenset[ExternalProgram] = frozenset()
    hooks: dict[str, str] = field(default_factory=dict)
    session: requests.Session = field(default_factory=requests.Session)
    reporter: Reporter = field(kw_only=True)
