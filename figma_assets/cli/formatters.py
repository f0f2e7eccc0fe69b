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

from figma_assets.exceptions import EncoderMissingError
from figma_assets.models.stats import BatchOutcome
from figma_assets.utils.formatting import format_duration


def format_error_with_suggestions(
    error: Exception, context: dict | None = None
) -> Panel:
    """Formats an error with actionable suggestions into a Rich Panel."""
    error_type = type(error).__name__
    error_msg = str(error)

    suggestions_map = {
        "ConfigurationError": [
            "• Run `figma-assets init <TOKEN> <FILE_KEY>` to create a config file.",
            "• Or export FIGMA_TOKEN and FIGMA_FILE_KEY in your shell.",
        ],
        "AuthenticationError": [
            "• Generate a new personal access token in Figma account settings.",
            "• Make sure the token's account can view the file.",
            "• Run `figma-assets init <TOKEN> <FILE_KEY> --force` to update it.",
        ],
        "ListingError": [
            "• Check the file key: it is the part after /file/ or /design/ in the URL.",
            "• Check your internet connection.",
            "• The Figma API might be temporarily unavailable; try again later.",
        ],
        "DirectoryError": [
            "• Check that the path exists and that you have permission to use it.",
        ],
        "UnsupportedFormatError": [
            "• Use `--format webp` or `--format avif`.",
        ],
    }

    if isinstance(error, EncoderMissingError):
        suggestions = [f"• {line}" for line in error.guide.splitlines()]
    else:
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
    """Displays the current configuration, hiding the token."""
    console = Console()
    content = ""
    for key, value in config_data.items():
        if key == "token":
            value = "[hidden]" if value else ""
        elif isinstance(value, list):
            value = ", ".join(value)
        content += f"{key} = {escape(str(value))}\n"

    console.print(
        Panel(
            content.strip(),
            title=f"Configuration ([dim]{escape(str(config_path))}[/dim])",
            border_style="cyan",
        )
    )


def print_summary_panel(
    outcome: BatchOutcome,
    action: str,
    peak_concurrent: int | None = None,
    console: Console | None = None,
):
    """Displays the final summary of a batch, listing every failed task."""
    console = console or Console()

    stats_table = Table(show_header=False, box=None, padding=(0, 2))
    stats_table.add_column(style="bold cyan", justify="right", width=20)
    stats_table.add_column(style="white", justify="left")

    stats_table.add_row(
        f"✓ {action}:", f"[bold green]{outcome.succeeded}[/bold green]"
    )
    if outcome.failed > 0:
        stats_table.add_row("✗ Failed:", f"[bold red]{outcome.failed}[/bold red]")

    stats_table.add_row("", "")  # Spacer
    stats_table.add_row(
        "Time Elapsed:", f"[blue]{format_duration(outcome.duration_s)}[/blue]"
    )
    if peak_concurrent:
        stats_table.add_row("Peak Concurrent:", f"[green]{peak_concurrent}[/green]")

    if outcome.has_failures:
        title = f"⚠ [bold]{action} with {outcome.failed} failure(s)[/bold]"
        border_color = "yellow"
    else:
        title = f"✓ [bold]{action} Complete![/bold]"
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

    if outcome.has_failures:
        failures = Table(box=box.ROUNDED, title="[bold red]Failed Tasks[/bold red]")
        failures.add_column("Item", style="cyan")
        failures.add_column("Reason")
        for result in outcome.failures:
            failures.add_row(escape(result.label), escape(result.error or ""))
        console.print(failures)

    console.print()
