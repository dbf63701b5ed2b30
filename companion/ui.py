"""Shared UI theme, console, and display helpers for companion."""

import json
from typing import Optional

from rich.align import Align
from rich.console import Console, Group
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text
from rich.theme import Theme

from companion.analyzers.languages import get_spec
from companion.analyzers.models import AnalysisResult, Metrics

# ── Output Mode State ──
_plain_mode: bool = False
_json_mode: bool = False


def set_plain_mode(enabled: bool = True) -> None:
    """Enable or disable plain text output (no colors, no panels, ASCII only)."""
    global _plain_mode, console
    _plain_mode = enabled
    if enabled:
        console = Console(no_color=True, highlight=False)
    else:
        console = Console(theme=COMPANION_THEME)


def set_json_mode(enabled: bool = True) -> None:
    """Enable or disable JSON output mode."""
    global _json_mode
    _json_mode = enabled


def is_plain() -> bool:
    """Check if plain output mode is active."""
    return _plain_mode


def is_json() -> bool:
    """Check if JSON output mode is active."""
    return _json_mode


def print_json_output(data: dict | list) -> None:
    """Print data as formatted JSON to stdout."""
    print(json.dumps(data, indent=2, default=str))


# ── Theme ──
COMPANION_THEME = Theme({
    "info": "cyan",
    "success": "bold green",
    "warning": "yellow",
    "error": "bold red",
    "metric.good": "bold green",
    "metric.caution": "bold yellow",
    "metric.plain": "bold",
    "view.title": "bold blue",
    "brand": "bold cyan",
    "muted": "dim",
})

console = Console(theme=COMPANION_THEME)

# ── Status Icons ──
ICONS = {
    "checked": "[green]✔[/green]",        # checkmark
    "unchecked": "[dim]○[/dim]",          # empty circle
    "arrow": "[dim]──▸[/dim]",  # arrow ──▸
    "bullet": "[cyan]•[/cyan]",           # bullet
}

# ASCII equivalents for plain mode
PLAIN_ICONS = {
    "checked": "[x]",
    "unchecked": "[ ]",
    "arrow": "-->",
    "bullet": "*",
}

# view id -> (tab label, tab description, panel title)
VIEWS: dict[str, tuple[str, str, str]] = {
    "summary": ("Explain", "Generate an overview of intent and shape.", "Overview"),
    "suggestions": ("Improve", "Surface tactical improvements and lint-like catches.",
                    "Polish & Guardrails"),
    "tests": ("Test Plan", "Draft scenarios that should be verified.", "High-Value Scenarios"),
    "docstring": ("Docs", "Bootstrap documentation and inline notes.", "Docstring Bootstrap"),
    "refactor": ("Refactor", "Sequence next steps and guardrails.", "Next-Step Blueprint"),
}

DEFAULT_VIEW = "summary"

# Badge emphasis thresholds for the metrics panel
CYCLOMATIC_CAUTION_ABOVE = 12
CYCLOMATIC_GOOD_BELOW = 6
COMMENT_DENSITY_GOOD_ABOVE = 0.12


def icon(name: str) -> str:
    """Get an icon, falling back to its ASCII form in plain mode."""
    if _plain_mode:
        return PLAIN_ICONS.get(name, PLAIN_ICONS["bullet"])
    return ICONS.get(name, ICONS["bullet"])


def banner():
    """Display the companion welcome banner."""
    if _json_mode:
        return
    if _plain_mode:
        print("Coding Companion - plan, polish, and explain your code")
        print()
        return

    content = Text.from_markup(
        "\n"
        "[bold cyan]  Coding Companion[/bold cyan]\n"
        "[dim]  Plan, polish, and explain your code[/dim]\n"
        "[dim]  with a single workspace.[/dim]\n"
    )
    console.print(Panel(
        Align.center(content),
        border_style="cyan",
        padding=(0, 4),
    ))


def metric_badges(metrics: Metrics) -> list[tuple[str, str, Optional[str]]]:
    """Return (label, value, emphasis) for each metric badge.

    Emphasis is ``"good"``, ``"caution"`` or None.
    """
    cyclomatic = metrics.cyclomatic_sketch
    if cyclomatic > CYCLOMATIC_CAUTION_ABOVE:
        cyclomatic_emphasis = "caution"
    elif cyclomatic < CYCLOMATIC_GOOD_BELOW:
        cyclomatic_emphasis = "good"
    else:
        cyclomatic_emphasis = None
    comments_emphasis = "good" if metrics.comment_density > COMMENT_DENSITY_GOOD_ABOVE else None

    return [
        ("Lines", str(metrics.lines_of_code), None),
        ("Branches", str(metrics.branches), None),
        ("Async", str(metrics.async_operations), None),
        ("Cyclomatic", str(cyclomatic), cyclomatic_emphasis),
        ("Comments", f"{round(metrics.comment_density * 100)}%", comments_emphasis),
        ("Dependencies", str(len(metrics.external_dependencies)), None),
    ]


def hero_stats(result: AnalysisResult) -> None:
    """Display the headline counts and the detected language."""
    if _json_mode:
        return
    name = get_spec(result.detected_language).name
    override = result.detected_language != result.language_hint
    if _plain_mode:
        print(f"Detected: {name}" + (f" (hint: {result.language_hint})" if override else ""))
        print(f"{result.metrics.lines_of_code} lines analysed | "
              f"{len(result.suggestions)} suggested improvements | "
              f"{len(result.test_ideas)} test ideas")
        print()
        return

    stats = (
        f"[bold]{result.metrics.lines_of_code}[/bold] [dim]lines analysed[/dim]   "
        f"[bold]{len(result.suggestions)}[/bold] [dim]suggested improvements[/dim]   "
        f"[bold]{len(result.test_ideas)}[/bold] [dim]test ideas[/dim]"
    )
    detected = f"[info]Detected:[/info] [bold]{name}[/bold]"
    if override:
        detected += f" [dim](hint: {result.language_hint})[/dim]"
    console.print(detected)
    console.print(stats)
    console.print()


def quick_wins_panel(result: AnalysisResult) -> None:
    """Display the quick wins list."""
    if _json_mode:
        return
    if _plain_mode:
        print("Quick wins:")
        for item in result.quick_wins:
            print(f"  {PLAIN_ICONS['bullet']} {item}")
        print()
        return

    body = "\n".join(f"{ICONS['bullet']} {item}" for item in result.quick_wins)
    console.print(Panel(body, title="[bold]Quick wins[/bold]", border_style="yellow"))


def metrics_panel(metrics: Metrics) -> None:
    """Display the complexity snapshot with emphasised badges."""
    if _json_mode:
        return
    badges = metric_badges(metrics)
    deps = sorted(metrics.external_dependencies)
    if _plain_mode:
        print("Complexity Snapshot:")
        for label, value, emphasis in badges:
            marker = f" ({emphasis})" if emphasis else ""
            print(f"  {label}: {value}{marker}")
        if deps:
            print(f"  External modules: {', '.join(deps)}")
        return

    table = Table(show_header=False, box=None, padding=(0, 2))
    for label, _, _ in badges:
        table.add_column(label, justify="center")
    table.add_row(*[f"[dim]{label}[/dim]" for label, _, _ in badges])
    table.add_row(*[
        f"[metric.{emphasis or 'plain'}]{value}[/metric.{emphasis or 'plain'}]"
        for _, value, emphasis in badges
    ])
    content = [table]
    if deps:
        content.append(Text.from_markup(
            "\n[dim]External modules:[/dim] " + "  ".join(f"[cyan]{d}[/cyan]" for d in deps)
        ))
    console.print(Panel(Group(*content), title="[bold]Complexity Snapshot[/bold]",
                        border_style="blue"))


def functions_table(result: AnalysisResult) -> None:
    """Display the extracted callables."""
    if _json_mode or not result.functions:
        return
    if _plain_mode:
        for fn in result.functions:
            print(f"  {fn.name}: {fn.signature}")
            print(f"    {fn.description}")
        print()
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Callable", style="cyan")
    table.add_column("Signature", style="dim")
    table.add_column("Notes")
    for fn in result.functions:
        table.add_row(fn.name, fn.signature, fn.description)
    console.print(table)


def _insight_list(title: str, items, ordered: bool = False) -> None:
    if _plain_mode:
        print(f"{title}:")
        for index, item in enumerate(items, 1):
            marker = f"{index}." if ordered else PLAIN_ICONS["bullet"]
            print(f"  {marker} {item}")
        print()
        return

    lines = [
        f"[bold]{index}.[/bold] {item}" if ordered else f"{ICONS['bullet']} {item}"
        for index, item in enumerate(items, 1)
    ]
    console.print(Panel("\n".join(lines), title=f"[view.title]{title}[/view.title]",
                        border_style="blue"))


def checklist_view(result: AnalysisResult) -> None:
    """Display the delivery checklist."""
    if _plain_mode:
        print("Delivery Checklist:")
        for item in result.checklist:
            print(f"  {icon('checked' if item.checked else 'unchecked')} {item.label}")
        print()
        return
    for item in result.checklist:
        console.print(f"  {icon('checked' if item.checked else 'unchecked')} {item.label}")


def render_view(result: AnalysisResult, view: str = DEFAULT_VIEW) -> None:
    """Display one of the five result views."""
    if _json_mode:
        return
    title = VIEWS.get(view, VIEWS[DEFAULT_VIEW])[2]

    if view == "suggestions":
        _insight_list(title, result.suggestions)
    elif view == "tests":
        _insight_list(title, result.test_ideas)
    elif view == "docstring":
        if _plain_mode:
            print(f"{title}:")
            print(result.docstring)
            print()
            print("Adapt this scaffold to capture intent, constraints, and failure modes.")
            return
        lexer = get_spec(result.detected_language).id.value
        console.print(Panel(Syntax(result.docstring, lexer, theme="ansi_dark"),
                            title=f"[view.title]{title}[/view.title]", border_style="blue"))
        console.print("[dim]Adapt this scaffold to capture intent, constraints, "
                      "and failure modes.[/dim]")
    elif view == "refactor":
        _insight_list(title, result.refactor_plan, ordered=True)
        section_divider("Delivery Checklist")
        checklist_view(result)
    else:
        if _plain_mode:
            print(result.summary)
            print()
        else:
            console.print(Panel(result.summary, title=f"[view.title]{title}[/view.title]",
                                border_style="blue"))
        functions_table(result)
        metrics_panel(result.metrics)


def resources_view(result: AnalysisResult) -> None:
    """Display the resource shortcuts."""
    if _json_mode:
        return
    if _plain_mode:
        print("Resource shortcuts:")
        for r in result.resources:
            print(f"  {PLAIN_ICONS['bullet']} {r.title} - {r.link}")
        return

    table = Table(title="Resource shortcuts", show_header=True, header_style="bold")
    table.add_column("Resource", style="cyan")
    table.add_column("Why")
    table.add_column("Link", style="dim")
    for r in result.resources:
        table.add_row(r.title, r.description, r.link)
    console.print(table)


def success_panel(title: str, content=None):
    """Display a success panel."""
    if _json_mode:
        return
    if _plain_mode:
        print(f"OK: {title}")
        if content:
            print(f"  {content}")
        return

    console.print(Panel(
        content or "",
        title=f"[bold green]{title}[/bold green]",
        border_style="green",
    ))


def section_divider(text: str = ""):
    """Print a subtle section divider."""
    if _json_mode:
        return
    if _plain_mode:
        if text:
            print(f"\n-- {text} --")
        else:
            print()
        return

    if text:
        console.print(f"\n[dim]── {text} ──[/dim]")
    else:
        console.print()
