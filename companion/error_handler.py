"""Unified CLI error handler for companion commands."""

from __future__ import annotations

import functools
import logging
import os
import traceback

import typer

from companion import ui
from companion.errors import (
    CompanionError,
    ConfigError,
    ExportFormatError,
    SnippetReadError,
    UnsupportedLanguageError,
)

logger = logging.getLogger("companion.error_handler")

# First isinstance match wins
ERROR_HINTS: tuple[tuple[type[CompanionError], str], ...] = (
    (UnsupportedLanguageError, "Run 'companion languages' to see supported languages."),
    (SnippetReadError, "Pass '-' to read the snippet from stdin instead."),
    (ExportFormatError, "Use an output path ending in .json, .yaml, .yml or .md."),
    (ConfigError, "Run 'companion config show' to inspect the active settings."),
)


def _debug_mode() -> bool:
    """Check if debug output is enabled via COMPANION_DEBUG env var."""
    return os.environ.get("COMPANION_DEBUG", "").lower() in ("1", "true", "yes")


def hint_for(error: CompanionError) -> str:
    """Return the actionable hint for an error, or an empty string."""
    for error_type, hint in ERROR_HINTS:
        if isinstance(error, error_type):
            return hint
    return ""


def _render_companion_error(e: CompanionError) -> None:
    hint = hint_for(e)
    if ui.is_json():
        ui.print_json_output({
            "error": type(e).__name__,
            "detail": str(e),
            "hint": hint,
            "exitCode": e.exit_code,
        })
        return

    ui.console.print(f"\n[bold red]Error:[/bold red] {e}")
    if e.context and _debug_mode():
        ui.console.print("[dim]Context:[/dim]")
        for key, value in e.context.items():
            if value:
                ui.console.print(f"  [dim]{key}:[/dim] {value}")
    if hint:
        ui.console.print(f"[dim]{hint}[/dim]")


def handle_errors(func):
    """Decorator that turns exceptions raised by a command into exit codes.

    CompanionError exits with its own ``exit_code`` after printing the
    message and a hint (a JSON object in ``--json`` mode). Ctrl-C exits
    with 130 and anything unexpected with 1. ``typer.Exit`` passes through.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except CompanionError as e:
            logger.debug("%s failed: %s", func.__name__, e)
            _render_companion_error(e)
            if _debug_mode():
                ui.console.print(f"\n[dim]{traceback.format_exc()}[/dim]")
            raise typer.Exit(e.exit_code)
        except KeyboardInterrupt:
            ui.console.print("\n[dim]Interrupted.[/dim]")
            raise typer.Exit(130)
        except (typer.Exit, typer.Abort, SystemExit):
            raise
        except Exception as e:
            logger.debug("Unexpected error in %s", func.__name__, exc_info=True)
            ui.console.print(f"\n[bold red]Unexpected error:[/bold red] {e}")
            if _debug_mode():
                ui.console.print(f"\n[dim]{traceback.format_exc()}[/dim]")
            else:
                ui.console.print("[dim]Set COMPANION_DEBUG=1 for full traceback.[/dim]")
            raise typer.Exit(1)

    return wrapper
