"""
Entry point for `python -m scrobble_cli` and the `scrobble-cli` script.
"""

import asyncio
import logging
import sys

import typer
from rich.console import Console

from scrobble_cli.cli.app import app
from scrobble_cli.cli.formatters import format_error_with_suggestions
from scrobble_cli.exceptions import ScrobbleCliError

log = logging.getLogger("scrobble_cli")


def main() -> None:
    """Runs the CLI and turns anything that escapes a command into an exit code."""
    console = Console(stderr=True)

    try:
        app()
    except (typer.Exit, typer.Abort):
        pass
    except (KeyboardInterrupt, asyncio.CancelledError):
        # Batches already sent stay scrobbled, nothing to undo
        console.print("\n[yellow]⚠️  Scrobbling interrupted.[/yellow]")
        sys.exit(130)
    except ScrobbleCliError as e:
        console.print(format_error_with_suggestions(e))
        sys.exit(1)
    except Exception as e:
        console.print(format_error_with_suggestions(e, {"type": "Unexpected"}))
        log.debug("Full traceback:", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
