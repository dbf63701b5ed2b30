"""Snippet analysis service.

Bridges the analysis engine with the outside world by:
- Choosing the language hint (flag, file extension, config, default)
- Reading snippets from files and building thresholds from config
- Serializing AnalysisResult into a Markdown report and a plain context dict
"""

from __future__ import annotations

import dataclasses
import logging
from pathlib import Path
from typing import Optional

from companion.analyzers.languages import (
    LanguageId,
    get_spec,
    language_for_path,
    parse_language,
    supported_languages,
)
from companion.analyzers.models import AnalysisResult, AnalysisSettings
from companion.analyzers.snippet_analyzer import SnippetAnalyzer
from companion.core import AnalysisRun, SnippetSource
from companion.core.config_service import ConfigService, coerce_value, get_config_service
from companion.errors import ConfigError, SnippetReadError, UnsupportedLanguageError

logger = logging.getLogger("companion.core.analysis")

STDIN_LABEL = "<stdin>"


def serialize_result_text(result: AnalysisResult) -> str:
    """Convert an AnalysisResult to a Markdown report covering every view."""
    m = result.metrics
    name = get_spec(result.detected_language).name
    parts = [
        "# Snippet Analysis",
        "",
        f"- Detected language: {name}"
        + (f" (hint: {result.language_hint})" if result.detected_language != result.language_hint else ""),
        f"- Lines of code: {m.lines_of_code}",
        f"- Branches: {m.branches}",
        f"- Async operations: {m.async_operations}",
        f"- Cyclomatic sketch: {m.cyclomatic_sketch}",
        f"- Comment density: {round(m.comment_density * 100)}%",
    ]
    if m.external_dependencies:
        parts.append(f"- External dependencies: {', '.join(sorted(m.external_dependencies))}")

    parts.extend(["", "## Overview", "", result.summary])

    if result.functions:
        parts.extend(["", "## Callables", "", "| Callable | Signature | Notes |", "| --- | --- | --- |"])
        for fn in result.functions:
            signature = fn.signature.replace("|", "\\|")
            parts.append(f"| {fn.name} | `{signature}` | {fn.description} |")

    parts.extend(["", "## Quick Wins", ""])
    parts.extend(f"- {item}" for item in result.quick_wins)

    parts.extend(["", "## Suggestions", ""])
    parts.extend(f"- {item}" for item in result.suggestions)

    parts.extend(["", "## Test Plan", ""])
    parts.extend(f"- {item}" for item in result.test_ideas)

    parts.extend(["", "## Docstring", "", f"```{result.detected_language}", result.docstring, "```"])

    parts.extend(["", "## Refactor Plan", ""])
    parts.extend(f"{i}. {step}" for i, step in enumerate(result.refactor_plan, 1))

    parts.extend(["", "## Delivery Checklist", ""])
    parts.extend(f"- [{'x' if item.checked else ' '}] {item.label}" for item in result.checklist)

    parts.extend(["", "## Resources", ""])
    parts.extend(f"- [{r.title}]({r.link}): {r.description}" for r in result.resources)

    return "\n".join(parts) + "\n"


def serialize_result_context(result: AnalysisResult) -> dict:
    """Convert an AnalysisResult to a snake_case dict for YAML and context storage."""
    m = result.metrics
    return {
        "detected_language": result.detected_language,
        "language_hint": result.language_hint,
        "summary": result.summary,
        "functions": [
            {
                "name": fn.name,
                "signature": fn.signature,
                "description": fn.description,
                "parameters": list(fn.parameters),
                "is_async": fn.is_async,
            }
            for fn in result.functions
        ],
        "metrics": {
            "lines_of_code": m.lines_of_code,
            "branches": m.branches,
            "async_operations": m.async_operations,
            "cyclomatic_sketch": m.cyclomatic_sketch,
            "comment_density": round(m.comment_density, 4),
            "external_dependencies": sorted(m.external_dependencies),
            "comment_lines": m.comment_lines,
            "error_handlers": m.error_handlers,
            "debug_statements": m.debug_statements,
            "test_markers": m.test_markers,
        },
        "quick_wins": list(result.quick_wins),
        "suggestions": list(result.suggestions),
        "test_ideas": list(result.test_ideas),
        "docstring": result.docstring,
        "refactor_plan": list(result.refactor_plan),
        "checklist": [{"label": c.label, "checked": c.checked} for c in result.checklist],
        "resources": [
            {"title": r.title, "description": r.description, "link": r.link}
            for r in result.resources
        ],
    }


class AnalysisService:
    """Runs the analysis engine with configuration-driven defaults."""

    def __init__(self, config: Optional[ConfigService] = None):
        self._config = config or get_config_service()

    def settings_from_config(self) -> AnalysisSettings:
        """Build AnalysisSettings from the resolved [analysis] table.

        Raises:
            ConfigError: If a configured threshold has the wrong type.
        """
        section = self._config.get_analysis_section()
        values = {}
        for f in dataclasses.fields(AnalysisSettings):
            if f.name not in section:
                continue
            raw = section[f.name]
            value = coerce_value(f"analysis.{f.name}", raw)
            expected = float if f.type in ("float", float) else int
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigError(
                    f"Config key 'analysis.{f.name}' must be a number, got {raw!r}",
                    context={"key": f"analysis.{f.name}"},
                )
            values[f.name] = expected(value)
        return AnalysisSettings(**values)

    def resolve_hint(
        self,
        language: Optional[str] = None,
        path: Optional[Path] = None,
    ) -> tuple[str, str]:
        """Pick the language hint and report where it came from.

        Order: explicit flag, file extension, config default, built-in default.

        Raises:
            UnsupportedLanguageError: If an explicit or configured language is unknown.
        """
        if language:
            lang_id = parse_language(language)
            if lang_id is None:
                raise UnsupportedLanguageError(language, supported_languages())
            return lang_id.value, "flag"

        if path is not None:
            lang_id = language_for_path(path)
            if lang_id is not None:
                return lang_id.value, "extension"

        configured = self._config.get_default_language()
        if configured:
            lang_id = parse_language(configured)
            if lang_id is None:
                raise UnsupportedLanguageError(configured, supported_languages())
            return lang_id.value, "config"
        return LanguageId.TYPESCRIPT.value, "default"

    def analyze_text(
        self,
        code: str,
        language: Optional[str] = None,
        label: str = STDIN_LABEL,
        path: Optional[Path] = None,
    ) -> AnalysisRun:
        """Analyze snippet text and return it with its source metadata."""
        hint, origin = self.resolve_hint(language, path)
        analyzer = SnippetAnalyzer(self.settings_from_config())
        result = analyzer.analyze_code(code, hint)
        source = SnippetSource(
            label=label,
            language_hint=hint,
            hint_origin=origin,
            char_count=len(code),
        )
        logger.info(
            "Analyzed %s: hint=%s (%s), detected=%s",
            label, hint, origin, result.detected_language,
        )
        return AnalysisRun(source=source, result=result)

    def analyze_file(self, path: Path, language: Optional[str] = None) -> AnalysisRun:
        """Read a snippet file (UTF-8, undecodable bytes replaced) and analyze it.

        Raises:
            SnippetReadError: If the path is missing, a directory, or unreadable.
        """
        if not path.exists():
            raise SnippetReadError(f"File not found: {path}", file_path=str(path))
        if path.is_dir():
            raise SnippetReadError(f"Expected a file, got a directory: {path}", file_path=str(path))
        try:
            code = path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            raise SnippetReadError(f"Could not read {path}: {e}", file_path=str(path)) from e
        return self.analyze_text(code, language=language, label=str(path), path=path)
