"""Insight synthesizer: deterministic templating over metrics and callables.

Each qualitative field is a pure function of facts already computed by the
resolver, the metrics scan and the structural extractor. Suggestions come
from an ordered table of independent rules, so several can fire at once and
their order never depends on anything but the table.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from .languages import LanguageId, LanguageSpec, get_spec
from .models import AnalysisSettings, ChecklistItem, FunctionInfo, Metrics, Resource
from .resources import resources_for
from .structure import split_identifier

logger = logging.getLogger(__name__)

PREDICATE_VERBS = frozenset({"validate", "check", "verify", "ensure", "is", "has", "can", "should"})


@dataclass(frozen=True)
class Facts:
    """Everything a rule may look at."""
    spec: LanguageSpec
    hint: LanguageId
    metrics: Metrics
    functions: tuple[FunctionInfo, ...]
    settings: AnalysisSettings
    blank: bool = False

    @property
    def has_code(self) -> bool:
        return self.metrics.lines_of_code > 0 and not self.blank

    @property
    def comment_percent(self) -> int:
        return round(self.metrics.comment_density * 100)

    @property
    def long_parameter_functions(self) -> list[str]:
        limit = self.settings.long_parameter_list
        return [fn.name for fn in self.functions if len(fn.parameters) > limit]


@dataclass(frozen=True)
class Rule:
    """A condition and the text it contributes when it holds."""
    id: str
    applies: Callable[[Facts], bool]
    suggestion: Callable[[Facts], str]
    quick_win: Optional[Callable[[Facts], str]] = None
    priority: int = 9


@dataclass(frozen=True)
class Insights:
    """The qualitative half of an analysis result."""
    summary: str
    suggestions: tuple[str, ...]
    test_ideas: tuple[str, ...]
    quick_wins: tuple[str, ...]
    docstring: str
    refactor_plan: tuple[str, ...]
    checklist: tuple[ChecklistItem, ...]
    resources: tuple[Resource, ...]


def _plural(count: int, word: str, plural: str | None = None) -> str:
    return f"{count} {word if count == 1 else (plural or word + 's')}"


RULES: tuple[Rule, ...] = (
    Rule(
        id="language-mismatch",
        applies=lambda f: f.spec.id != f.hint,
        suggestion=lambda f: (
            f"Switch the language selector to {f.spec.name}: the snippet reads like "
            f"{f.spec.name}, not {get_spec(f.hint).name}."
        ),
        quick_win=lambda f: f"Detected {f.spec.name}; the {get_spec(f.hint).name} hint was overridden.",
        priority=0,
    ),
    Rule(
        id="documentation",
        applies=lambda f: f.metrics.comment_density < f.settings.comment_density_target,
        suggestion=lambda f: (
            f"Add documentation: only {f.comment_percent}% of lines are comments "
            f"(target {round(f.settings.comment_density_target * 100)}%). Describe intent, "
            "inputs and failure modes next to each callable."
        ),
        quick_win=lambda f: "Add a doc comment to each public callable.",
        priority=3,
    ),
    Rule(
        id="decompose",
        applies=lambda f: f.metrics.cyclomatic_sketch > f.settings.complexity_high,
        suggestion=lambda f: (
            f"Consider decomposing: a cyclomatic sketch of {f.metrics.cyclomatic_sketch} "
            f"exceeds {f.settings.complexity_high}; split branch-heavy logic into smaller "
            "helpers with one responsibility each."
        ),
        quick_win=lambda f: f"Split the most branch-heavy logic (sketch {f.metrics.cyclomatic_sketch}).",
        priority=2,
    ),
    Rule(
        id="error-handling",
        applies=lambda f: f.metrics.async_operations > 0 and f.metrics.error_handlers == 0,
        suggestion=lambda f: (
            f"Add error handling: {_plural(f.metrics.async_operations, 'asynchronous operation')} "
            f"run without visible {f.spec.error_handling_hint}."
        ),
        quick_win=lambda f: f"Guard asynchronous calls with {f.spec.error_handling_hint}.",
        priority=1,
    ),
    Rule(
        id="debug-output",
        applies=lambda f: f.metrics.debug_statements > 0,
        suggestion=lambda f: (
            f"Remove debug output: {f.metrics.debug_statements} leftover "
            f"{f.spec.debug_hint} should become structured logging or go away."
        ),
        quick_win=lambda f: f"Strip {f.metrics.debug_statements} leftover {f.spec.debug_hint}.",
        priority=1,
    ),
    Rule(
        id="self-contained",
        applies=lambda f: not f.metrics.external_dependencies,
        suggestion=lambda f: (
            "Self-contained: no external dependencies detected, so this snippet is a cheap "
            f"target for unit tests with {f.spec.test_framework}."
        ),
    ),
    Rule(
        id="dependency-audit",
        applies=lambda f: len(f.metrics.external_dependencies) > f.settings.dependency_high,
        suggestion=lambda f: (
            f"Audit dependencies: {len(f.metrics.external_dependencies)} external modules "
            "are imported; confirm each one is needed and pinned."
        ),
        quick_win=lambda f: f"Prune unused imports among {len(f.metrics.external_dependencies)} modules.",
        priority=4,
    ),
    Rule(
        id="long-snippet",
        applies=lambda f: f.metrics.lines_of_code > f.settings.long_snippet_lines,
        suggestion=lambda f: (
            f"Split the file: {f.metrics.lines_of_code} lines is past the "
            f"{f.settings.long_snippet_lines}-line mark where reviews lose focus."
        ),
    ),
    Rule(
        id="long-parameter-list",
        applies=lambda f: bool(f.long_parameter_functions),
        suggestion=lambda f: (
            f"Group parameters: {', '.join(f.long_parameter_functions)} take more than "
            f"{f.settings.long_parameter_list} arguments; pass an options object instead."
        ),
    ),
    Rule(
        id="loose-code",
        applies=lambda f: not f.functions,
        suggestion=lambda f: "Wrap top-level statements in named functions so they can be tested and reused.",
    ),
)


def _fired(facts: Facts) -> list[Rule]:
    if not facts.has_code:
        return []
    return [rule for rule in RULES if rule.applies(facts)]


def build_summary(facts: Facts) -> str:
    if not facts.has_code:
        return "No clear structure detected. Paste a snippet to generate insights."

    m = facts.metrics
    opening = f"A {m.lines_of_code}-line {facts.spec.name} snippet"
    if facts.functions:
        opening += f" defining {_plural(len(facts.functions), 'callable')}"
    else:
        opening += " with no clear callable structure"
    if m.external_dependencies:
        opening += (
            " and importing "
            f"{_plural(len(m.external_dependencies), 'external dependency', 'external dependencies')}"
        )
    parts = [opening + "."]

    if m.cyclomatic_sketch <= facts.settings.complexity_low:
        parts.append(f"Control flow is straightforward (cyclomatic sketch {m.cyclomatic_sketch}).")
    elif m.cyclomatic_sketch <= facts.settings.complexity_high:
        parts.append(f"Control flow is moderately branched (cyclomatic sketch {m.cyclomatic_sketch}).")
    else:
        parts.append(
            f"Control flow is branch-heavy (cyclomatic sketch {m.cyclomatic_sketch}) "
            "and worth decomposing."
        )

    if m.comment_density >= facts.settings.comment_density_target:
        parts.append(f"Comments cover {facts.comment_percent}% of lines, which keeps intent readable.")
    else:
        parts.append(
            f"Comments cover only {facts.comment_percent}% of lines, so intent lives mostly in the code."
        )

    if m.async_operations:
        parts.append(f"It coordinates {_plural(m.async_operations, 'asynchronous operation')}.")
    return " ".join(parts)


def build_suggestions(facts: Facts) -> tuple[str, ...]:
    if not facts.has_code:
        return ("Paste a snippet to receive tailored suggestions.",)
    fired = _fired(facts)
    if not fired:
        return ("No pressing issues detected: keep the snippet small and covered by tests.",)
    return tuple(rule.suggestion(facts) for rule in fired)


def build_quick_wins(facts: Facts) -> tuple[str, ...]:
    if not facts.has_code:
        return ("Paste a snippet to surface quick wins.",)
    ranked = sorted(
        (rule for rule in _fired(facts) if rule.quick_win is not None),
        key=lambda rule: rule.priority,
    )
    wins = tuple(rule.quick_win(facts) for rule in ranked[: facts.settings.max_quick_wins])
    return wins or ("Nothing urgent: the snippet already clears the quick checks.",)


def build_test_ideas(facts: Facts) -> tuple[str, ...]:
    ideas: list[str] = []
    for fn in facts.functions:
        if fn.parameters:
            ideas.append(f"Verify {fn.name} handles empty or invalid {fn.parameters[0]} without crashing.")
        else:
            ideas.append(f"Verify {fn.name} returns a consistent result when called repeatedly.")
        words = split_identifier(fn.name)
        if words and words[0] in PREDICATE_VERBS:
            ideas.append(
                f"Verify {fn.name} accepts valid values and rejects cases just outside the allowed range."
            )
        if fn.is_async:
            ideas.append(
                f"Verify {fn.name} behaves correctly when an awaited operation rejects or times out."
            )

    m = facts.metrics
    if m.branches:
        ideas.append(
            f"Cover each of the {_plural(m.branches, 'branch', 'branches')}: aim for at least "
            f"{m.cyclomatic_sketch} cases to walk every path in the cyclomatic sketch."
        )
    if not facts.functions:
        ideas.append("Exercise boundary values: empty input, a single element and the largest realistic input.")
        ideas.append("Exercise error paths: malformed input and failing collaborators should surface clear errors.")
    if m.external_dependencies:
        first = sorted(m.external_dependencies)[0]
        ideas.append(f"Stub {first} and the other external modules so tests stay fast and deterministic.")
    return tuple(ideas)


def build_docstring(facts: Facts) -> str:
    """Render a documentation scaffold in the language's comment convention."""
    fn = facts.functions[0] if facts.functions else None
    title = fn.name if fn else "Module"
    purpose = fn.description if fn else "Describe the purpose of this module."
    params = fn.parameters if fn else ()
    style = facts.spec.docstring_style

    if style == "python":
        lines = [f'"""{title}: {purpose}', "", "Args:"]
        lines += [f"    {p}: Describe {p}." for p in params] or ["    None detected."]
        lines += ["", "Returns:", "    Describe the return value.", "",
                  "Raises:", "    Describe failure modes and invalid input handling.", '"""']
        return "\n".join(lines)

    if style == "go":
        lines = [f"// {title} {purpose[0].lower() + purpose[1:]}", "//", "// Parameters:"]
        lines += [f"//   - {p}: describe {p}." for p in params] or ["//   - none detected."]
        lines += ["//", "// Returns: describe the return value.",
                  "// Errors: describe failure modes and invalid input handling."]
        return "\n".join(lines)

    if style == "yard":
        lines = [f"# {title}: {purpose}", "#"]
        lines += [f"# @param {p} [Object] describe {p}." for p in params] or ["# (no parameters detected)"]
        lines += ["# @return [Object] describe the return value.",
                  "# @raise [StandardError] describe failure modes and invalid input handling."]
        return "\n".join(lines)

    lines = ["/**", f" * {title}: {purpose}", " *"]
    lines += [f" * @param {p} - Describe {p}." for p in params] or [" * (no parameters detected)"]
    lines += [" * @returns Describe the return value.",
              " * @throws Describe failure modes and invalid input handling.", " */"]
    return "\n".join(lines)


def build_refactor_plan(facts: Facts) -> tuple[str, ...]:
    if not facts.has_code:
        return ("Paste a snippet to draft a refactor plan.",)

    m, s = facts.metrics, facts.settings
    names = [fn.name for fn in facts.functions[:3]]
    target = ", ".join(names) if names else "the snippet"
    plan = [f"Pin current behaviour with characterization tests around {target}."]

    if m.cyclomatic_sketch > s.complexity_high:
        plan.append(
            f"Extract a helper for the most complex branch: the cyclomatic sketch is "
            f"{m.cyclomatic_sketch}, aim for {s.complexity_high} or less per callable."
        )
    if len(m.external_dependencies) > s.dependency_high:
        plan.append(
            f"Introduce module boundaries: wrap the {len(m.external_dependencies)} external "
            "dependencies behind a thin adapter layer."
        )
    if len(facts.functions) > 5:
        plan.append(f"Group the {len(facts.functions)} callables into cohesive modules by responsibility.")
    if m.async_operations:
        plan.append(
            f"Centralize asynchronous flow: route the "
            f"{_plural(m.async_operations, 'async operation')} through one orchestration point "
            f"with consistent {facts.spec.error_handling_hint}."
        )
    if m.debug_statements:
        plan.append(f"Replace ad-hoc {facts.spec.debug_hint} with structured logging.")
    if m.comment_density < s.comment_density_target:
        plan.append("Document each public callable as you touch it, starting from the docstring scaffold.")
    if m.lines_of_code > s.long_snippet_lines:
        plan.append(
            f"Break the {m.lines_of_code}-line snippet into files of at most {s.long_snippet_lines} lines."
        )
    plan.append("Re-run the analysis and compare metrics to confirm the change reduced complexity.")
    return tuple(plan)


def build_checklist(facts: Facts) -> tuple[ChecklistItem, ...]:
    m, s = facts.metrics, facts.settings
    has_code = facts.has_code
    return (
        ChecklistItem("Tests added or updated", m.test_markers > 0),
        ChecklistItem("Documentation updated", has_code and m.comment_density >= s.comment_density_target),
        ChecklistItem("Error handling reviewed", m.error_handlers > 0),
        ChecklistItem("Dependencies pinned", has_code and not m.external_dependencies),
        ChecklistItem("Complexity within budget", has_code and m.cyclomatic_sketch <= s.complexity_high),
    )


def synthesize(
    code: str,
    metrics: Metrics,
    functions: tuple[FunctionInfo, ...],
    language: LanguageId,
    hint: LanguageId,
    settings: AnalysisSettings | None = None,
) -> Insights:
    """Turn quantitative and structural facts into the qualitative artifacts.

    ``code`` is only consulted to tell blank input apart from real code.
    """
    facts = Facts(
        spec=get_spec(language),
        hint=hint,
        metrics=metrics,
        functions=functions,
        settings=settings or AnalysisSettings(),
        blank=not (code or "").strip(),
    )
    insights = Insights(
        summary=build_summary(facts),
        suggestions=build_suggestions(facts),
        test_ideas=build_test_ideas(facts),
        quick_wins=build_quick_wins(facts),
        docstring=build_docstring(facts),
        refactor_plan=build_refactor_plan(facts),
        checklist=build_checklist(facts),
        resources=resources_for(language),
    )
    logger.debug("Synthesized %d suggestions and %d test ideas",
                 len(insights.suggestions), len(insights.test_ideas))
    return insights
