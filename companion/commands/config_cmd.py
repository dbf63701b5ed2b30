"""CLI commands for configuration management."""
from __future__ import annotations

from typing import Optional

import typer

from companion import ui
from companion.completions import complete_config_key, complete_language
from companion.error_handler import handle_errors

app = typer.Typer(
    name="config",
    help="Manage companion configuration.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

ORIGIN_STYLES = {"env": "magenta", "project": "green", "global": "cyan", "default": "dim"}


@app.command()
@handle_errors
def show(
    json_output: bool = typer.Option(False, "--json", help="Print the resolved config as JSON."),
):
    """Display the resolved configuration (all layers merged)."""
    from rich.panel import Panel
    from rich.table import Table
    from companion.core.config_service import DEFAULTS, get_config_service

    info = get_config_service().show()
    if json_output:
        ui.print_json_output(info)
        return

    sources = info["sources"]
    ui.console.print(Panel(
        f"Global:  {sources['global_config'] or '[dim]not found[/dim]'}\n"
        f"Project: {sources['project_config'] or '[dim]not found[/dim]'}",
        title="Config Sources",
        border_style="cyan",
    ))

    resolved = info["resolved"]
    origins = info["origins"]
    for section, defaults in DEFAULTS.items():
        values = resolved.get(section, {})
        table = Table(title=section.capitalize(), show_header=True)
        table.add_column("Setting", style="cyan")
        table.add_column("Value")
        table.add_column("Source")
        table.add_column("Default", style="dim")
        for key, default in defaults.items():
            origin = origins.get(f"{section}.{key}", "default")
            style = ORIGIN_STYLES[origin]
            table.add_row(
                key, str(values.get(key, default)),
                f"[{style}]{origin}[/{style}]", str(default),
            )
        ui.console.print(table)


@app.command("get")
@handle_errors
def get_value(
    key: str = typer.Argument(
        ..., help="Config key in dotted notation (e.g. analysis.complexity_high)",
        autocompletion=complete_config_key,
    ),
):
    """Print one resolved value and the layer it came from."""
    from companion.core.config_service import get_config_service

    value, origin = get_config_service().lookup(key)
    ui.console.print(f"{key} = {value} [dim]({origin})[/dim]")


@app.command("set")
@handle_errors
def set_value(
    key: str = typer.Argument(
        ..., help="Config key in dotted notation (e.g. analysis.complexity_high)",
        autocompletion=complete_config_key,
    ),
    value: str = typer.Argument(..., help="Value to set"),
):
    """Set a global configuration value."""
    from companion.core.config_service import get_config_service

    stored = get_config_service().set_global(key, value)
    ui.console.print(f"[green]Set[/green] {key} = {stored}")


@app.command()
@handle_errors
def init(
    language: Optional[str] = typer.Option(
        None, "--language", "-l",
        help="Default language hint for this project.",
        autocompletion=complete_language,
    ),
):
    """Create a .companion.toml project config in the current directory."""
    from companion.core.config_service import get_config_service

    path = get_config_service().init_project_config(language)
    ui.console.print(f"[green]Created project config:[/green] {path}")


@app.command()
@handle_errors
def path():
    """Show all configuration file locations."""
    from rich.table import Table
    from companion.core.config_service import get_config_service

    table = Table(title="Config Paths", show_header=True)
    table.add_column("File", style="cyan")
    table.add_column("Location")
    for name, location in get_config_service().config_paths().items():
        table.add_row(name, location)
    ui.console.print(table)
