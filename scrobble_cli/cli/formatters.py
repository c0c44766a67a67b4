"""
Functions for formatting and displaying data in the console using Rich.
"""

from pathlib import Path
from typing import Any

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from scrobble_cli.core.queue_builder import ScrobbleQueue
from scrobble_cli.models.config import ScrobblerConfig
from scrobble_cli.models.stats import ScrobbleStats
from scrobble_cli.utils.formatting import format_duration


def format_error_with_suggestions(
    error: Exception, context: dict | None = None
) -> Panel:
    """Formats an error with actionable suggestions into a Rich Panel."""
    error_type = type(error).__name__
    error_msg = str(error)

    suggestions_map = {
        "NotAuthenticatedError": [
            "• Run `scrobble-cli login <USERNAME>` to create a session.",
        ],
        "EmptyPlaylistError": [
            "• Check that the playlist file contains at least one album.",
        ],
        "AuthenticationError": [
            "• Verify your Last.fm username and password.",
            "• Run `scrobble-cli login <USERNAME>` again.",
        ],
        "SessionExpiredError": [
            "• Your session may have been revoked. Run `scrobble-cli login` again.",
            "• Check the API key and shared secret with `scrobble-cli validate`.",
        ],
        "CommunicationError": [
            "• A network connection issue occurred.",
            "• The Last.fm API might be temporarily unavailable.",
            "• Tracks scrobbled before the failure stay scrobbled.",
        ],
        "ScrobbleSubmissionError": [
            "• Tracks scrobbled before the failure stay scrobbled.",
            "• Exclude the already submitted albums with --exclude before retrying.",
        ],
        "DurationFormatError": [
            "• Track durations must be written as MM:SS (e.g. '3:45').",
        ],
        "PlaylistFormatError": [
            "• Each album needs a 'title' and a list of 'tracks'.",
        ],
        "ConfigurationError": [
            "• Run `scrobble-cli init <API_KEY> <SHARED_SECRET>` to create a config.",
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
    """Displays the current configuration, hiding sensitive data."""
    console = Console()
    content = ""
    for key, value in config_data.items():
        if key in ("shared_secret", "session_key") and value:
            value = "[hidden]"
        content += f"{key} = {value}\n"

    console.print(
        Panel(
            content.strip(),
            title=f"Configuration ([dim]{config_path}[/dim])",
            border_style="cyan",
        )
    )


def print_validation_table(config: ScrobblerConfig):
    """Displays a summary of the current settings."""
    console = Console()
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold cyan")
    table.add_column()

    table.add_row("API Key:", f"[green]{config.api_key[:8]}...[/green]")
    table.add_row(
        "Session:",
        f"✓ Logged in as {config.username}" if config.is_logged_in else "✗ Not logged in",
    )
    table.add_row("User Agent:", config.user_agent)
    table.add_row("Default Offset:", format_duration(config.offset_in_seconds))

    console.print(
        Panel(
            table,
            title="[bold green]✓ Validated Settings[/bold green]",
            border_style="green",
        )
    )


def print_queue_table(queue: ScrobbleQueue):
    """Displays the planned scrobbles, batch by batch."""
    console = Console()
    for number, batch in enumerate(queue.batches, 1):
        table = Table(title=f"Batch {number}", box=box.SIMPLE)
        table.add_column("Time", style="dim")
        table.add_column("Artist", style="cyan")
        table.add_column("Track")
        table.add_column("Album", style="magenta")
        for entry in batch:
            table.add_row(str(entry.timestamp), entry.artist, entry.track, entry.album)
        console.print(table)


def print_summary_panel(stats: ScrobbleStats):
    """Displays the final summary of the scrobble session."""
    console = Console()

    stats_table = Table(show_header=False, box=None, padding=(0, 2))
    stats_table.add_column(style="bold cyan", justify="right", width=20)
    stats_table.add_column(style="white", justify="left")

    stats_table.add_row("Tracks:", f"[bold]{stats.tracks_submitted}[/bold]")
    if not stats.dry_run:
        stats_table.add_row(
            "✓ Accepted:", f"[bold green]{stats.tracks_accepted}[/bold green]"
        )
        if stats.tracks_ignored > 0:
            stats_table.add_row(
                "○ Ignored:", f"[yellow]{stats.tracks_ignored}[/yellow]"
            )
    stats_table.add_row("Batches:", str(stats.batches_submitted))
    stats_table.add_row(
        "Time Elapsed:", f"[blue]{format_duration(stats.elapsed)}[/blue]"
    )

    if stats.dry_run:
        title = "🔍 [bold]Dry Run Summary[/bold]"
        border_color = "yellow"
    else:
        title = "🎵 [bold]Scrobbling Complete![/bold]"
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
