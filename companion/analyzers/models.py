"""Data models for snippet analysis results."""
from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class AnalysisInput:
    """A snippet and the language the user selected for it."""
    code: str
    language_hint: str = "typescript"


@dataclass(frozen=True)
class AnalysisSettings:
    """Thresholds that turn metrics into qualitative insights."""
    comment_density_target: float = 0.12
    complexity_high: int = 10
    complexity_low: int = 6
    dependency_high: int = 5
    long_snippet_lines: int = 150
    long_parameter_list: int = 4
    max_functions: int = 25
    detection_threshold: int = 3
    max_quick_wins: int = 3


@dataclass(frozen=True)
class FunctionInfo:
    """A declared callable found in the snippet."""
    name: str
    signature: str
    description: str
    parameters: tuple[str, ...] = ()
    is_async: bool = False

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "signature": self.signature,
            "description": self.description,
            "parameters": list(self.parameters),
            "isAsync": self.is_async,
        }


@dataclass(frozen=True)
class Metrics:
    """Quantitative facts gathered by the lexical scan."""
    lines_of_code: int = 0
    branches: int = 0
    async_operations: int = 0
    cyclomatic_sketch: int = 1
    comment_density: float = 0.0
    external_dependencies: frozenset[str] = field(default_factory=frozenset)
    comment_lines: int = 0
    error_handlers: int = 0
    debug_statements: int = 0
    test_markers: int = 0

    def to_dict(self) -> dict:
        return {
            "linesOfCode": self.lines_of_code,
            "branches": self.branches,
            "asyncOperations": self.async_operations,
            "cyclomaticSketch": self.cyclomatic_sketch,
            "commentDensity": self.comment_density,
            "externalDependencies": sorted(self.external_dependencies),
            "commentLines": self.comment_lines,
            "errorHandlers": self.error_handlers,
            "debugStatements": self.debug_statements,
            "testMarkers": self.test_markers,
        }


@dataclass(frozen=True)
class ChecklistItem:
    """A delivery gate, pre-checked when the snippet already satisfies it."""
    label: str
    checked: bool = False


@dataclass(frozen=True)
class Resource:
    """A curated reference link."""
    title: str
    description: str
    link: str


@dataclass(frozen=True)
class AnalysisResult:
    """Complete, immutable analysis of one snippet."""
    detected_language: str
    language_hint: str
    summary: str
    functions: tuple[FunctionInfo, ...] = ()
    metrics: Metrics = field(default_factory=Metrics)
    suggestions: tuple[str, ...] = ()
    test_ideas: tuple[str, ...] = ()
    quick_wins: tuple[str, ...] = ()
    docstring: str = ""
    refactor_plan: tuple[str, ...] = ()
    checklist: tuple[ChecklistItem, ...] = ()
    resources: tuple[Resource, ...] = ()

    def to_dict(self) -> dict:
        """Render the result in its camelCase wire shape."""
        return {
            "detectedLanguage": self.detected_language,
            "languageHint": self.language_hint,
            "summary": self.summary,
            "functions": [fn.to_dict() for fn in self.functions],
            "metrics": self.metrics.to_dict(),
            "suggestions": list(self.suggestions),
            "testIdeas": list(self.test_ideas),
            "quickWins": list(self.quick_wins),
            "docstring": self.docstring,
            "refactorPlan": list(self.refactor_plan),
            "checklist": [
                {"label": item.label, "checked": item.checked} for item in self.checklist
            ],
            "resources": [
                {"title": r.title, "description": r.description, "link": r.link}
                for r in self.resources
            ],
        }
