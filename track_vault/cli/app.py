"""
Defines the command-line interface for the application using Typer.
"""

import asyncio
import csv
import json
import logging
import os
import time
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from track_vault import __version__
from track_vault.core.export_pipeline import ExportPipeline
from track_vault.core.uploader import TrackUploader, UploadRequest
from track_vault.exceptions import ExportError, TrackVaultError
from track_vault.models.config import VaultConfig
from track_vault.storage.config_manager import ConfigManager
from track_vault.storage.content_store import ContentStore
from track_vault.storage.track_store import TrackStore
from track_vault.utils.path import create_dir
from track_vault.utils.structured_logger import create_structured_logger

from .formatters import (
    print_config,
    print_export_summary,
    print_stats_table,
    print_tracks_table,
    print_validation_table,
)
from .progress_manager import ProgressManager

console = Console()

logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[
        RichHandler(
            console=console,
            rich_tracebacks=True,
            show_path=False,
            show_level=False,
            markup=True,
        )
    ],
)
log = logging.getLogger("track_vault")

app = typer.Typer(
    name="track-vault",
    help=(
        "Store uploaded audio tracks with their metadata and export them as a"
        " renamed, catalogued bundle. Use 'track-vault <command> --help' for more"
        " info."
    ),
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    add_completion=False,
)


def get_config_dir() -> Path:
    if override := os.getenv("TRACK_VAULT_CONFIG_DIR"):
        return Path(override).expanduser()
    if os.name == "nt":
        base_dir = Path(os.getenv("APPDATA", "~\\AppData\\Roaming"))
    else:
        base_dir = Path(os.getenv("XDG_CONFIG_HOME", "~/.config"))
    return base_dir.expanduser() / "track-vault"


CONFIG_DIR = get_config_dir()
CONFIG_FILE = CONFIG_DIR / "config.ini"


def _load_config(cli_options: dict | None = None) -> VaultConfig:
    try:
        return ConfigManager(CONFIG_FILE).load_config(cli_options)
    except TrackVaultError as e:
        console.print(f"[bold red]Error: {escape(str(e))}[/bold red]")
        raise typer.Exit(code=1) from e


def _open_stores(config: VaultConfig) -> tuple[TrackStore, ContentStore]:
    return TrackStore(config.database_path), ContentStore(config.uploads_path)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase logging verbosity (-vv for debug).",
    ),
    version: bool = typer.Option(
        False, "--version", help="Show version and exit.", is_eager=True
    ),
    show_config: bool = typer.Option(
        False, "--show-config", help="Display the current configuration."
    ),
):
    """Track Vault CLI"""
    if version:
        console.print(f"[bold]track-vault[/bold] version [cyan]{__version__}[/cyan]")
        raise typer.Exit()

    log_level = "INFO"
    if verbose >= 2:
        log_level = "DEBUG"
    logging.getLogger("track_vault").setLevel(log_level)

    if show_config:
        if not CONFIG_FILE.is_file():
            console.print(
                "[red]✗ Config file not found.[/] Run [cyan]track-vault init[/cyan]"
                " first."
            )
            raise typer.Exit(code=1)
        config_manager = ConfigManager(CONFIG_FILE)
        config = config_manager.load_config()
        print_config(CONFIG_FILE, config_manager.get_config_as_dict())
        log.debug(f"Resolved database path: {config.database_path}")
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


@app.command()
def init(
    data_dir: Path = typer.Option(  # noqa: B008
        ...,
        "--data-dir",
        "-d",
        help="Directory holding uploads, the track database and exports.",
    ),
    max_upload_mb: int = typer.Option(
        100, "--max-upload-mb", help="Reject uploads larger than this many MB."
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite an existing configuration."
    ),
):
    """Create the configuration and the storage directories."""
    if (
        CONFIG_FILE.exists()
        and not force
        and not typer.confirm("Configuration file already exists. Overwrite it?")
    ):
        raise typer.Abort()

    config_manager = ConfigManager(CONFIG_FILE)
    try:
        config_manager.save_new_config(
            {
                "data_dir": str(data_dir.expanduser().resolve()),
                "max_upload_mb": max_upload_mb,
            }
        )
        config = config_manager.load_config()
        create_dir(config.uploads_path)
        create_dir(config.exports_path)
        TrackStore(config.database_path)
    except (TrackVaultError, OSError) as e:
        console.print(f"[red]✗ Initialization failed: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e

    console.print(
        f"\n[bold green]✓ Configuration saved to '{escape(str(CONFIG_FILE))}'"
        "[/bold green]"
    )
    console.print(
        "Ready! Try: [cyan]track-vault upload <FILE> --title ... --mix ..."
        " --artist ...[/cyan]"
    )


@app.command()
def upload(
    audio_file: Path = typer.Argument(..., help="The audio file to store."),  # noqa: B008
    track_title: str = typer.Option(..., "--title", "-t", help="Track title."),
    mix_name: str = typer.Option(..., "--mix", "-m", help="Mix name."),
    primary_artist: str = typer.Option(..., "--artist", "-a", help="Primary artist."),
    featured_artists: list[str] | None = typer.Option(  # noqa: B008
        None, "--feat", help="Featured artist (repeat for several)."
    ),
    mime_type: str | None = typer.Option(
        None, "--mime", help="MIME type (guessed from the file name if omitted)."
    ),
):
    """Store one audio file with its metadata."""
    config = _load_config()
    track_store, content_store = _open_stores(config)
    _, _, upload_logger = create_structured_logger(config.logs_path, config.json_logs)
    upload_logger.logger.set_session_context(command="upload")
    uploader = TrackUploader(
        track_store,
        content_store,
        max_upload_bytes=config.max_upload_bytes,
        max_workers=config.max_workers,
        event_logger=upload_logger,
    )
    request = UploadRequest(
        source_path=audio_file,
        track_title=track_title,
        mix_name=mix_name,
        primary_artist=primary_artist,
        featured_artists=featured_artists or None,
        mime_type=mime_type,
    )
    try:
        record = asyncio.run(uploader.upload(request))
    except (TrackVaultError, OSError) as e:
        console.print(f"[red]✗ Upload failed: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e
    finally:
        upload_logger.logger.close()

    console.print(f"[green]✓ Track uploaded successfully.[/green] ID: {record.id}")


def _read_batch_file(batch_file: Path) -> list[UploadRequest]:
    """Reads 'file,track_title,mix_name,primary_artist,featured_artists' rows."""
    requests = []
    with open(batch_file, encoding="utf-8", newline="") as f:
        for row in csv.DictReader(f):
            source = Path((row.get("file") or "").strip())
            if not source.is_absolute():
                source = batch_file.parent / source
            featured = [
                name.strip()
                for name in (row.get("featured_artists") or "").split(";")
                if name.strip()
            ]
            requests.append(
                UploadRequest(
                    source_path=source,
                    track_title=row.get("track_title") or "",
                    mix_name=row.get("mix_name") or "",
                    primary_artist=row.get("primary_artist") or "",
                    featured_artists=featured or None,
                )
            )
    return requests


@app.command(name="upload-batch")
def upload_batch(
    batch_file: Path = typer.Argument(  # noqa: B008
        ...,
        help=(
            "CSV with columns file,track_title,mix_name,primary_artist,"
            "featured_artists (featured names separated by ';')."
        ),
    ),
    workers: int | None = typer.Option(
        None, "-w", "--workers", help="Number of simultaneous uploads."
    ),
):
    """Store many audio files listed in a CSV file."""
    cli_options = {"max_workers": workers} if workers is not None else None
    config = _load_config(cli_options)

    try:
        requests = _read_batch_file(batch_file)
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        console.print(f"[red]✗ Could not read {escape(str(batch_file))}: {e}[/red]")
        raise typer.Exit(code=1) from e
    if not requests:
        console.print("[yellow]⚠️  No uploads found in the batch file.[/yellow]")
        raise typer.Exit(code=1)

    track_store, content_store = _open_stores(config)
    _, _, upload_logger = create_structured_logger(config.logs_path, config.json_logs)
    upload_logger.logger.set_session_context(command="upload-batch")
    uploader = TrackUploader(
        track_store,
        content_store,
        max_upload_bytes=config.max_upload_bytes,
        max_workers=config.max_workers,
        event_logger=upload_logger,
    )
    try:
        results = asyncio.run(uploader.upload_many(requests))
    finally:
        upload_logger.logger.close()

    failed = sum(1 for result in results if not result.ok)
    console.print(
        f"\n[bold]Uploaded:[/] [green]{len(results) - failed}[/green]  "
        f"[bold]Failed:[/] [red]{failed}[/red]"
    )
    if failed:
        raise typer.Exit(code=1)


@app.command(name="tracks")
def list_tracks(
    as_json: bool = typer.Option(False, "--json", help="Print the records as JSON."),
):
    """List all stored tracks, newest first."""
    config = _load_config()
    track_store = TrackStore(config.database_path)
    tracks = track_store.list_all()
    if as_json:
        typer.echo(
            json.dumps([t.to_json_dict() for t in tracks], indent=2, ensure_ascii=False)
        )
    else:
        print_tracks_table(tracks)


@app.command(name="export")
def export_command(
    exports_dir: Path | None = typer.Option(  # noqa: B008
        None, "-o", "--output", help="Directory to create the export folder in."
    ),
    json_log: bool | None = typer.Option(
        None,
        "--json-log/--no-json-log",
        help="Write structured JSONL export events to the logs directory.",
    ),
):
    """Copy every stored track into a new export folder with JSON/CSV manifests."""
    cli_options = {
        key: value
        for key, value in {
            "exports_dir": (
                str(exports_dir.expanduser().resolve()) if exports_dir else None
            ),
            "json_logs": json_log,
        }.items()
        if value is not None
    }
    config = _load_config(cli_options)
    track_store, content_store = _open_stores(config)
    base_logger, export_logger, _ = create_structured_logger(
        config.logs_path, config.json_logs
    )
    base_logger.set_session_context(
        command="export", exports_dir=str(config.exports_path)
    )

    start_time = time.monotonic()
    try:
        with ProgressManager(console) as progress_manager:
            progress_manager.set_total(len(track_store.list_all()))
            pipeline = ExportPipeline(
                track_store,
                content_store,
                config.exports_path,
                event_logger=export_logger,
                progress_callback=progress_manager.on_track_processed,
            )
            summary = pipeline.run()
    except ExportError as e:
        console.print(f"[bold red]Export failed: {escape(str(e))}[/bold red]")
        raise typer.Exit(code=1) from e
    finally:
        base_logger.close()

    print_export_summary(summary, time.monotonic() - start_time)


@app.command()
def stats():
    """Show statistics from the track store."""
    config = _load_config()
    track_store = TrackStore(config.database_path)
    print_stats_table(track_store.get_stats())


@app.command()
def validate():
    """Validate the current configuration."""
    try:
        config = ConfigManager(CONFIG_FILE).load_config()
        print_validation_table(config)
    except TrackVaultError as e:
        console.print(f"[red]✗ Configuration is invalid: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e
