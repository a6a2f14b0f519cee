"""Utility functions for CLI output."""

from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from stream_archiver.domain.models.processing import BatchProcessingResult, Stage, StageOutcome
from stream_archiver.domain.models.video import Platform
from stream_archiver.infrastructure.external.programs import REQUIRED_PROGRAMS, ExternalProgram

console = Console()

_OUTCOME_CELLS = {
    StageOutcome.SUCCESS: "[green]✅ Done[/green]",
    StageOutcome.ALREADY_EXISTS: "[yellow]⏭️ Exists[/yellow]",
    StageOutcome.EXPECTED: "[dim]-[/dim]",
    StageOutcome.FAILURE: "[red]❌ Failed[/red]",
}


def display_error_message(title: str, message: str) -> None:
    """Display an error in a red panel."""
    console.print(Panel(
        f"[red]{message}[/red]",
        title=f"[red]❌ {title}[/red]",
        border_style="red"
    ))


def display_success_message(message: str) -> None:
    """Display a success message."""
    console.print(Panel(
        f"[green]{message}[/green]",
        title="[green]✅ Success[/green]",
        border_style="green"
    ))


def display_warning_message(message: str) -> None:
    """Display a warning message."""
    console.print(Panel(
        f"[yellow]{message}[/yellow]",
        title="[yellow]⚠️ Warning[/yellow]",
        border_style="yellow"
    ))


def create_summary_table(result: BatchProcessingResult) -> Table:
    """Create a table with one row per video and one column per stage."""
    table = Table(title="📊 Download Results")
    table.add_column("ID", style="cyan")
    table.add_column("Title", max_width=40)
    for stage in Stage:
        table.add_column(stage.value, justify="center")

    for video in result.results:
        cells = []
        for stage in Stage:
            outcome = video.outcome_for(stage)
            cells.append(_OUTCOME_CELLS[outcome] if outcome else "[dim]skipped[/dim]")
        title = video.title[:37] + "..." if len(video.title) > 40 else video.title
        table.add_row(video.video_id, title, *cells)

    return table


def display_batch_summary(result: BatchProcessingResult) -> None:
    """Display the per-video table and overall counts."""
    console.print(create_summary_table(result))
    console.print(f"\n[bold]📈 Overall Summary:[/bold]")
    console.print(f"📺 Videos: {len(result.results)}")
    console.print(f"✅ Stages completed: {result.count(StageOutcome.SUCCESS)}")
    console.print(f"⏭️ Already present: {result.count(StageOutcome.ALREADY_EXISTS)}")
    console.print(f"❌ Stages failed: {result.count(StageOutcome.FAILURE)}")
    console.print(f"⏱️ Processing time: {result.processing_time_seconds:.1f} seconds")


def create_programs_table(missing: frozenset[ExternalProgram] | None = None) -> Table:
    """Create a table of external programs, where they are needed and whether they are installed."""
    table = Table(title="🔧 External Programs")
    table.add_column("Program", style="cyan")
    table.add_column("Needed for")
    table.add_column("Installed", justify="center")
    table.add_column("Project page", style="dim")

    for program in ExternalProgram:
        platforms = ", ".join(p.value for p in Platform if program in REQUIRED_PROGRAMS[p])
        installed = program.is_installed() if missing is None else program not in missing
        table.add_row(
            program.value,
            platforms,
            "[green]✅ Yes[/green]" if installed else "[red]❌ No[/red]",
            program.url,
        )
    return table


def create_config_table(config_path: Path, credentials: dict[str, bool]) -> Table:
    """Create a table showing where the configuration lives and which credentials are set."""
    table = Table(title="📋 Configuration")
    table.add_column("Property", style="cyan")
    table.add_column("Value")

    table.add_row("Config file", str(config_path))
    for name, present in credentials.items():
        table.add_row(name, "[green]✅ Set[/green]" if present else "[red]❌ Missing[/red]")
    return table
