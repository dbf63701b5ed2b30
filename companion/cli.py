#!/usr/bin/env python3
"""
companion: analyze a code snippet and get a summary, metrics, suggestions,
test ideas, a docstring scaffold and a refactor plan.
"""
import logging
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.logging import RichHandler

from companion import ui
from companion.completions import complete_format, complete_language, complete_view
from companion.error_handler import handle_errors

app = typer.Typer(
    name="companion",
    help="Plan, polish, and explain your code from the terminal.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Import subcommands
from companion.commands import config_cmd

app.add_typer(config_cmd.app, name="config", help="Manage configuration", rich_help_panel="Settings")


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )
    logging.getLogger("companion").setLevel(level)


def _validate_view(value: Optional[str]) -> Optional[str]:
    if value is not None and value not in ui.VIEWS:
        raise typer.BadParameter(f"Choose one of: {', '.join(ui.VIEWS)}")
    return value


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging."),
):
    """Plan, polish, and explain your code from the terminal."""
    _configure_logging(verbose)


def _set_output_modes(json_output: bool, plain: bool) -> None:
    from companion.core.config_service import get_config_service

    ui.set_json_mode(json_output)
    ui.set_plain_mode(plain or bool(get_config_service().get("ui.plain_output", False)))


def _pick_view(view: Optional[str]) -> str:
    from companion.core.config_service import get_config_service

    if view:
        return view
    configured = get_config_service().get_default_view()
    if configured not in ui.VIEWS:
        logging.getLogger("companion.cli").warning(
            "Ignoring unknown ui.default_view %r", configured
        )
        return ui.DEFAULT_VIEW
    return configured


def _render(run, view: str, all_views: bool, output: Optional[str]) -> None:
    """Print an analysis run and optionally export it."""
    from companion.core.export_service import ExportService

    result = run.result
    if ui.is_json():
        ui.print_json_output(result.to_dict())
    else:
        ui.hero_stats(result)
        ui.quick_wins_panel(result)
        views = list(ui.VIEWS) if all_views else [view]
        for name in views:
            label = ui.VIEWS[name][0]
            ui.section_divider(label)
            ui.render_view(result, name)
        ui.section_divider()
        ui.resources_view(result)

    if output:
        export = ExportService().export_result(result, Path(output))
        ui.success_panel(
            "Exported",
            f"{export.format} report written to {export.output_path} ({export.size_bytes} bytes)",
        )


@app.command(rich_help_panel="Analysis")
@handle_errors
def analyze(
    path: Optional[str] = typer.Argument(None, help="Snippet file, or '-' to read stdin (default)"),
    language: Optional[str] = typer.Option(
        None, "--language", "-l",
        help="Language hint (typescript, javascript, python, go, ruby). Inferred from the file extension when omitted.",
        autocompletion=complete_language,
    ),
    view: Optional[str] = typer.Option(
        None, "--view", "-V",
        help="View to show: summary, suggestions, tests, docstring, refactor.",
        autocompletion=complete_view, callback=_validate_view,
    ),
    all_views: bool = typer.Option(False, "--all", help="Show all five views."),
    json_output: bool = typer.Option(False, "--json", help="Print the result as JSON."),
    plain: bool = typer.Option(False, "--plain", help="Plain text output, no colors or panels."),
    output: Optional[str] = typer.Option(
        None, "--output", "-o",
        help="Export to a .json, .yaml/.yml or .md file.",
        autocompletion=complete_format,
    ),
):
    """[bold cyan]Analyze[/bold cyan] a code snippet."""
    from companion.core.analysis_service import AnalysisService

    _set_output_modes(json_output, plain)
    svc = AnalysisService()
    if path is None or path == "-":
        run = svc.analyze_text(sys.stdin.read(), language=language)
    else:
        run = svc.analyze_file(Path(path), language=language)
    _render(run, _pick_view(view), all_views, output)


@app.command(rich_help_panel="Analysis")
@handle_errors
def demo(
    view: Optional[str] = typer.Option(
        None, "--view", "-V",
        help="View to show: summary, suggestions, tests, docstring, refactor.",
        autocompletion=complete_view, callback=_validate_view,
    ),
    all_views: bool = typer.Option(False, "--all", help="Show all five views."),
    json_output: bool = typer.Option(False, "--json", help="Print the result as JSON."),
    plain: bool = typer.Option(False, "--plain", help="Plain text output, no colors or panels."),
):
    """Analyze the bundled [bold]sample[/bold] snippet."""
    from companion.analyzers.snippet_analyzer import DEFAULT_SAMPLE
    from companion.core.analysis_service import AnalysisService

    _set_output_modes(json_output, plain)
    ui.banner()
    run = AnalysisService().analyze_text(DEFAULT_SAMPLE, language="typescript", label="<demo>")
    _render(run, _pick_view(view), all_views, None)


@app.command(rich_help_panel="Info")
def languages(
    json_output: bool = typer.Option(False, "--json", help="Print the table as JSON."),
):
    """List supported languages, aliases and file extensions."""
    from rich.table import Table

    from companion.analyzers.languages import LANGUAGE_SPECS

    rows = [
        {
            "id": lang_id.value,
            "name": spec.name,
            "aliases": sorted(spec.aliases),
            "extensions": sorted(spec.extensions),
            "docstring_style": spec.docstring_style,
        }
        for lang_id, spec in LANGUAGE_SPECS.items()
    ]
    if json_output:
        ui.print_json_output(rows)
        return

    table = Table(title="Supported Languages", show_header=True)
    table.add_column("Language", style="cyan")
    table.add_column("Name")
    table.add_column("Aliases", style="dim")
    table.add_column("Extensions")
    table.add_column("Docstring")
    for row in rows:
        table.add_row(
            row["id"], row["name"], ", ".join(row["aliases"]),
            ", ".join(row["extensions"]), row["docstring_style"],
        )
    ui.console.print(table)


if __name__ == "__main__":
    app()
