"""
Defines the command-line interface for the application using Typer.
"""

import asyncio
import logging
import os
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TextColumn

from scrobble_cli import __version__
from scrobble_cli.api.auth import SessionManager
from scrobble_cli.api.client import ScrobblerAPIClient
from scrobble_cli.core.scrobbler import Scrobbler
from scrobble_cli.exceptions import NotAuthenticatedError, ScrobbleCliError
from scrobble_cli.models.album import AlbumDetails, ScrobbleOptions
from scrobble_cli.models.config import DEFAULT_USER_AGENT, ScrobblerConfig
from scrobble_cli.models.stats import ScrobbleStats
from scrobble_cli.storage.config_manager import ConfigManager
from scrobble_cli.utils.formatting import build_inclusion_mask
from scrobble_cli.utils.playlist import load_playlist

from .formatters import (
    format_error_with_suggestions,
    print_config,
    print_queue_table,
    print_summary_panel,
    print_validation_table,
)

console = Console()

logging.basicConfig(
    level="WARNING",
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
log = logging.getLogger("scrobble_cli")

app = typer.Typer(
    name="scrobble-cli",
    help=(
        "Scrobble whole albums you listened to away from your computer to Last.fm."
        " Use 'scrobble-cli <command> --help' for more info."
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
    return base_dir.expanduser() / "scrobble-cli"


CONFIG_DIR = get_config_dir()
CONFIG_FILE = CONFIG_DIR / "config.ini"


def _fail(error: ScrobbleCliError) -> typer.Exit:
    console.print(format_error_with_suggestions(error))
    return typer.Exit(code=1)


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
    """Last.fm album scrobbler"""
    if version:
        console.print(f"[bold]scrobble-cli[/bold] version [cyan]{__version__}[/cyan]")
        raise typer.Exit()

    log_level = "WARNING"
    if verbose == 1:
        log_level = "INFO"
    elif verbose >= 2:
        log_level = "DEBUG"
    logging.getLogger("scrobble_cli").setLevel(log_level)

    if show_config:
        if not CONFIG_FILE.is_file():
            console.print(
                "[red]✗ Config file not found.[/] Run [cyan]scrobble-cli init[/cyan]"
                " first."
            )
            raise typer.Exit(code=1)
        config_manager = ConfigManager(CONFIG_FILE)
        config = config_manager.load_config()
        print_config(CONFIG_FILE, config.model_dump(exclude={"config_path"}))
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


@app.command()
def init(
    api_key: str = typer.Argument(..., help="Your Last.fm API account key."),
    shared_secret: str = typer.Argument(..., help="The API account's shared secret."),
    user_agent: str = typer.Option(
        DEFAULT_USER_AGENT, "--user-agent", help="User-Agent sent to Last.fm."
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite an existing configuration without asking."
    ),
):
    """Initialize configuration with Last.fm API credentials."""
    if (
        CONFIG_FILE.exists()
        and not force
        and not typer.confirm("Configuration file already exists. Overwrite it?")
    ):
        raise typer.Abort()

    settings = {
        "api_key": api_key,
        "shared_secret": shared_secret,
        "user_agent": user_agent,
    }
    try:
        # Validate before writing anything
        ScrobblerConfig(**settings, config_path=str(CONFIG_DIR))
    except ValueError as e:
        console.print(f"[red]✗ Invalid API credentials:[/red] {e}")
        raise typer.Exit(code=1) from e

    try:
        ConfigManager(CONFIG_FILE).save_new_config(settings)
    except ScrobbleCliError as e:
        raise _fail(e) from e

    console.print(f"\n[bold green]✓ Configuration saved to '{CONFIG_FILE}'[/bold green]")
    console.print("Next, log in: [cyan]scrobble-cli login <USERNAME>[/cyan]")


@app.command()
def login(
    username: str = typer.Argument(..., help="Your Last.fm username."),
    password: str = typer.Option(
        ..., "--password", "-p", prompt=True, hide_input=True, help="Your Last.fm password."
    ),
):
    """Log in to Last.fm and store the session key."""

    async def _login_async() -> str:
        async with ScrobblerAPIClient(
            config.api_key, config.shared_secret, config.user_agent
        ) as api_client:
            session = SessionManager(api_client)
            return await session.login(username, password)

    try:
        config_manager = ConfigManager(CONFIG_FILE)
        config = config_manager.load_config()
        session_key = asyncio.run(_login_async())
        config_manager.update_session(username, session_key)
    except ScrobbleCliError as e:
        raise _fail(e) from e

    console.print(f"[green]✓ Logged in to Last.fm as [bold]{username}[/bold].[/green]")


@app.command()
def logout():
    """Forget the stored Last.fm session key."""
    try:
        ConfigManager(CONFIG_FILE).update_session("", "")
    except ScrobbleCliError as e:
        raise _fail(e) from e
    console.print("[green]✓ Session key removed.[/green]")


@app.command(name="scrobble")
def scrobble_command(
    playlists: list[Path] = typer.Argument(  # noqa: B008
        ...,
        help="JSON playlist files, in the order you listened to them.",
        exists=True,
        dir_okay=False,
    ),
    offset: int | None = typer.Option(
        None,
        "-t",
        "--offset",
        help="Seconds ago you finished listening (default from config, usually 0).",
    ),
    exclude: list[str] | None = typer.Option(  # noqa: B008
        None,
        "-x",
        "--exclude",
        help="Skip a track, given as zero-based ALBUM:TRACK indexes. Repeatable.",
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Show the planned scrobbles without submitting them."
    ),
):
    """Scrobble the albums of one or more playlists."""
    cli_options = {"offset_in_seconds": offset} if offset is not None else {}

    try:
        config = ConfigManager(CONFIG_FILE).load_config(cli_options)
        albums: list[AlbumDetails] = []
        for playlist in playlists:
            albums.extend(load_playlist(playlist))
        inclusion_mask = build_inclusion_mask(exclude or [])
    except ValueError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1) from e
    except ScrobbleCliError as e:
        raise _fail(e) from e

    options = ScrobbleOptions(
        inclusion_mask=inclusion_mask, offset_in_seconds=config.offset_in_seconds
    )
    stats = ScrobbleStats(dry_run=dry_run)

    async def _scrobble_async():
        async with ScrobblerAPIClient(
            config.api_key, config.shared_secret, config.user_agent
        ) as api_client:
            session = SessionManager(api_client, config.session_key)
            scrobbler = Scrobbler(api_client, session)

            if not dry_run and not session.is_authenticated:
                raise NotAuthenticatedError()

            queue = scrobbler.plan(albums, options)

            if dry_run:
                print_queue_table(queue)
                for batch in queue.batches:
                    stats.record_batch(len(batch), 0)
                return

            with Progress(
                SpinnerColumn(),
                TextColumn("[bold cyan]Scrobbling"),
                BarColumn(),
                MofNCompleteColumn(),
                console=console,
            ) as progress:
                task = progress.add_task("scrobble", total=queue.size)
                batches = iter(queue.batches)
                async for accepted in scrobbler.submit_queue(queue):
                    size = len(next(batches))
                    stats.record_batch(size, accepted)
                    progress.advance(task, size)

    try:
        asyncio.run(_scrobble_async())
    except ScrobbleCliError as e:
        if stats.batches_submitted:
            console.print(
                f"[yellow]⚠️  {stats.tracks_submitted} tracks were already scrobbled"
                " before the failure.[/yellow]"
            )
        raise _fail(e) from e

    print_summary_panel(stats)


@app.command()
def validate():
    """Validate the current configuration."""
    try:
        config_manager = ConfigManager(CONFIG_FILE)
        config = config_manager.load_config()
        print_validation_table(config)
    except ScrobbleCliError as e:
        console.print(f"[red]✗ Configuration is invalid: {e}[/red]")
        raise typer.Exit(code=1) from e
