"""
Defines the command-line interface for the application using Typer.
"""

import asyncio
import functools
import logging
import os
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from figma_assets import __version__
from figma_assets.api.client import FigmaAPIClient
from figma_assets.core.convert_manager import ConvertManager
from figma_assets.core.download_manager import DownloadManager
from figma_assets.exceptions import FigmaAssetsError
from figma_assets.media import Downloader, ImageEncoder
from figma_assets.media.downloader import close_connection_pool
from figma_assets.models.stats import BatchOutcome
from figma_assets.storage.config_manager import ConfigManager

from .formatters import format_error_with_suggestions, print_config, print_summary_panel

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_PARTIAL_FAILURE = 2

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
log = logging.getLogger("figma_assets")

app = typer.Typer(
    name="figma-assets",
    help=(
        "Export images from a Figma file and convert them to WebP or AVIF. Use"
        " 'figma-assets <command> --help' for more info."
    ),
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    add_completion=False,
)


def get_config_dir() -> Path:
    if os.name == "nt":
        base_dir = Path(os.getenv("APPDATA", "~\\AppData\\Roaming"))
    else:
        base_dir = Path(os.getenv("XDG_CONFIG_HOME", "~/.config"))
    return base_dir.expanduser() / "figma-assets"


CONFIG_DIR = get_config_dir()
CONFIG_FILE = CONFIG_DIR / "config.ini"


def _fail(error: Exception) -> typer.Exit:
    console.print(f"\n{format_error_with_suggestions(error)}")
    return typer.Exit(code=EXIT_ERROR)


def _report(
    outcome: BatchOutcome,
    action: str,
    empty_message: str,
    peak_concurrent: int | None = None,
) -> None:
    """Prints the aggregate result and exits non-zero if any task failed."""
    if outcome.is_empty:
        console.print(f"[green]✓ {empty_message}[/green]")
        return

    print_summary_panel(outcome, action, peak_concurrent, console=console)
    if outcome.has_failures:
        log.warning(
            f"[yellow]⚠ {outcome.failed} of {outcome.total} tasks failed.[/yellow]"
        )
        raise typer.Exit(code=EXIT_PARTIAL_FAILURE)


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
    """Figma Asset Exporter CLI"""
    if version:
        console.print(f"[bold]figma-assets[/bold] version [cyan]{__version__}[/cyan]")
        raise typer.Exit()

    log_level = "INFO"
    if verbose >= 2:
        log_level = "DEBUG"
    logging.getLogger("figma_assets").setLevel(log_level)

    if show_config:
        if not CONFIG_FILE.is_file():
            console.print(
                "[red]✗ Config file not found.[/] Run [cyan]figma-assets init[/cyan]"
                " first."
            )
            raise typer.Exit(code=EXIT_ERROR)
        try:
            config_data = ConfigManager(CONFIG_FILE).get_raw_config()
        except FigmaAssetsError as e:
            raise _fail(e) from e
        print_config(CONFIG_FILE, config_data)
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


@app.command()
def init(
    token: str = typer.Argument(..., help="Figma personal access token."),
    file_key: str = typer.Argument(
        ..., help="Key of the design file (the part after /design/ in its URL)."
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite an existing config without asking."
    ),
):
    """Save the Figma token and file key to the config file."""
    if (
        CONFIG_FILE.exists()
        and not force
        and not typer.confirm("Configuration file already exists. Overwrite it?")
    ):
        raise typer.Abort()

    try:
        ConfigManager(CONFIG_FILE).save_new_config(
            {"token": token.strip(), "file_key": file_key.strip()}
        )
    except FigmaAssetsError as e:
        raise _fail(e) from e

    console.print(
        f"\n[bold green]✓ Configuration saved to '{escape(str(CONFIG_FILE))}'"
        "[/bold green]"
    )
    console.print(
        "Ready to export! Try: [cyan]figma-assets download --download-dir ./images"
        "[/cyan]"
    )


@app.command(name="download")
def download_command(
    download_dir: Path = typer.Option(  # noqa: B008
        ...,
        "--download-dir",
        "-d",
        help="Directory to save PNG files into (created if missing).",
    ),
    file_key: str | None = typer.Option(
        None, "--file-key", "-k", help="Override the configured Figma file key."
    ),
    node_ids: str | None = typer.Option(
        None,
        "--node-ids",
        "-n",
        help="Comma-separated node ids to export (default: all top-level frames).",
    ),
    scale: float | None = typer.Option(
        None, "--scale", "-s", help="Render scale between 0.01 and 4."
    ),
):
    """Download the images of a Figma file as PNG."""
    cli_options = {
        key: value
        for key, value in {
            "file_key": file_key,
            "node_ids": node_ids.split(",") if node_ids else None,
            "scale": scale,
        }.items()
        if value is not None
    }

    async def _download_async() -> BatchOutcome:
        api_client = None
        try:
            config = ConfigManager(CONFIG_FILE).load_config(cli_options)
            api_client = FigmaAPIClient(config.token, config.file_key, config.scale)
            manager = DownloadManager(
                functools.partial(api_client.fetch_assets, config.node_ids),
                Downloader(),
            )
            console.print("[bold cyan]🎨 Starting download session...[/bold cyan]")
            return await manager.execute(download_dir)
        finally:
            await close_connection_pool()
            if api_client:
                await api_client.close()

    try:
        outcome = asyncio.run(_download_async())
    except FigmaAssetsError as e:
        raise _fail(e) from e

    _report(outcome, "Downloaded", "No images found.")


@app.command(name="convert")
def convert_command(
    input_dir: Path = typer.Option(  # noqa: B008
        ..., "--input-dir", "-i", help="Directory containing .png files."
    ),
    output_dir: Path = typer.Option(  # noqa: B008
        ..., "--output-dir", "-o", help="Directory to write converted files into."
    ),
    target_format: str = typer.Option(
        ...,
        "--format",
        "-f",
        help="Target format: exactly 'webp' or 'avif' (lowercase).",
    ),
    quality: int = typer.Option(
        80, "--quality", "-q", min=0, max=100, help="Encoder quality (0-100)."
    ),
):
    """Convert every PNG in a directory to WebP or AVIF."""
    manager = ConvertManager(ImageEncoder(quality))

    try:
        outcome = asyncio.run(manager.execute(input_dir, output_dir, target_format))
    except FigmaAssetsError as e:
        raise _fail(e) from e

    _report(
        outcome,
        "Converted",
        f"No .png files found in '{escape(str(input_dir))}'.",
        peak_concurrent=manager.peak_concurrent,
    )
