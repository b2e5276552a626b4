"""
Functions for formatting and displaying data in the console using Rich.
"""

from pathlib import Path
from typing import Any

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from track_vault.models.config import VaultConfig
from track_vault.models.summary import ExportSummary
from track_vault.models.track import TrackRecord
from track_vault.utils.formatting import (
    format_duration,
    format_size,
    format_timestamp,
    join_artists,
)


def format_error_with_suggestions(
    error: Exception, context: dict | None = None
) -> Panel:
    """Formats an error with actionable suggestions into a Rich Panel."""
    error_type = type(error).__name__
    error_msg = str(error)

    suggestions_map = {
        "ConfigurationError": [
            "• Run `track-vault init --data-dir <PATH>` to create a configuration.",
            "• Check the values shown by `track-vault --show-config`.",
        ],
        "StorageIOError": [
            "• Check that the data directory is writable.",
            "• Make sure the disk is not full.",
        ],
        "StorageReadCorruption": [
            "• The track database could not be parsed.",
            "• Restore 'tracks.json' from a backup or fix the JSON by hand.",
        ],
        "UploadValidationError": [
            "• Provide --title, --mix and --artist with non-empty values.",
            "• Check that the file exists and is below the configured size limit.",
        ],
        "ExportSetupError": [
            "• Check that the exports directory is writable.",
            "• Set `exports_dir` in the configuration to another location.",
        ],
        "ExportWriteError": [
            "• The copied files are in place but the manifests are missing.",
            "• Free up disk space and run the export again.",
        ],
    }

    suggestions = suggestions_map.get(
        error_type, ["• Run the command with -vv for detailed logs."]
    )

    error_text = Text()
    error_text.append(f"{error_type}: ", style="bold red")
    error_text.append(error_msg)

    suggestion_text = Text("\n".join(suggestions))

    content = Table.grid(padding=(1, 0))
    content.add_row(error_text)
    content.add_row()
    content.add_row(Text("Suggestions", style="bold yellow"))
    content.add_row(suggestion_text)

    if context:
        content.add_row()
        content.add_row(Text(f"Context: {context}", style="dim"))

    return Panel(
        content,
        title="[bold red]An Error Occurred[/bold red]",
        border_style="red",
        expand=False,
    )


def print_config(config_path: Path, config_data: dict[str, Any]):
    """Displays the current configuration."""
    console = Console()
    content = "\n".join(
        f"{key} = {escape(str(value))}" for key, value in config_data.items()
    )
    console.print(
        Panel(
            content,
            title=f"Configuration ([dim]{escape(str(config_path))}[/dim])",
            border_style="cyan",
        )
    )


def print_validation_table(config: VaultConfig):
    """Displays a summary of the resolved settings."""
    console = Console()
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold cyan")
    table.add_column()

    table.add_row("Data Directory:", escape(str(Path(config.data_dir).expanduser())))
    table.add_row("Uploads:", f"[dim]{escape(str(config.uploads_path))}[/dim]")
    table.add_row("Database:", f"[dim]{escape(str(config.database_path))}[/dim]")
    table.add_row("Exports:", f"[dim]{escape(str(config.exports_path))}[/dim]")
    table.add_row("Max Upload Size:", f"{config.max_upload_mb} MB")
    table.add_row("Max Workers:", str(config.max_workers))
    table.add_row("JSON Logs:", "✓ Enabled" if config.json_logs else "✗ Disabled")

    console.print(
        Panel(
            table,
            title="[bold green]✓ Validated Settings[/bold green]",
            border_style="green",
        )
    )


def print_tracks_table(tracks: list[TrackRecord]):
    """Lists stored tracks, newest first."""
    console = Console()
    if not tracks:
        console.print("[dim]No tracks uploaded yet.[/dim]")
        return

    table = Table(title=f"Tracks ({len(tracks)})", box=box.ROUNDED)
    table.add_column("Uploaded", style="dim", no_wrap=True)
    table.add_column("Artist", style="cyan")
    table.add_column("Title")
    table.add_column("Mix", style="magenta")
    table.add_column("Featuring")
    table.add_column("Size", justify="right", style="green")
    table.add_column("ID", style="dim", no_wrap=True)
    for track in tracks:
        table.add_row(
            format_timestamp(track.upload_timestamp),
            escape(track.primary_artist),
            escape(track.track_title),
            escape(track.mix_name),
            escape(join_artists(track.featured_artists)),
            format_size(track.file_size_bytes),
            track.id,
        )
    console.print(table)


def print_stats_table(stats_data: dict[str, Any]):
    """Displays track store statistics."""
    console = Console()
    console.print(
        "\n[bold]Total Tracks:[/] "
        f"[green]{stats_data['total_tracks']}[/green] "
        f"([cyan]{format_size(stats_data['total_size_bytes'])}[/cyan])\n"
    )

    if top_artists := stats_data.get("top_artists"):
        table = Table(title="Top 10 Artists")
        table.add_column("Rank", style="dim")
        table.add_column("Artist", style="cyan")
        table.add_column("Tracks", justify="right", style="green")
        for i, (artist, count) in enumerate(top_artists, 1):
            table.add_row(str(i), escape(artist), str(count))
        console.print(table)
    else:
        console.print("[dim]No tracks in the store yet.[/dim]")


def print_export_summary(summary: ExportSummary, duration_s: float):
    """Displays the final summary of an export run."""
    console = Console()

    stats_table = Table(show_header=False, box=None, padding=(0, 2))
    stats_table.add_column(style="bold cyan", justify="right", width=20)
    stats_table.add_column(style="white", justify="left")

    stats_table.add_row("Total Tracks:", str(summary.total))
    stats_table.add_row(
        "✓ Exported:", f"[bold green]{summary.succeeded}[/bold green]"
    )
    if summary.failed > 0:
        stats_table.add_row("✗ Errors:", f"[bold red]{summary.failed}[/bold red]")

    stats_table.add_row("", "")
    stats_table.add_row(
        "Total Size:", f"[cyan]{format_size(summary.total_size_exported)}[/cyan]"
    )
    stats_table.add_row("Time Elapsed:", f"[blue]{format_duration(duration_s)}[/blue]")
    stats_table.add_row(
        "Export Location:", f"[dim]{escape(str(summary.container_path))}[/dim]"
    )

    if summary.failures:
        stats_table.add_row("", "")
        for failure in summary.failures:
            stats_table.add_row(
                "[yellow]⚠[/yellow]",
                f"[dim]{escape(failure.stored_filename)}[/dim] "
                f"{escape(failure.reason)}",
            )

    if summary.failed:
        title = "⚠ [bold]Export Finished With Errors[/bold]"
        border_color = "yellow"
    else:
        title = "🎵 [bold]Export Complete![/bold]"
        border_color = "green"

    console.print()
    console.print(
        Panel(
            stats_table,
            title=title,
            border_style=border_color,
            box=box.DOUBLE,
            expand=False,
            padding=(1, 2),
        )
    )
    console.print()
