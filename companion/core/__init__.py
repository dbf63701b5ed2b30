"""Service layer for companion.

All services return typed dataclasses. Services never import from
companion.ui, companion.cli, or typer. Consumer layers (the CLI) handle
presentation.
"""

from __future__ import annotations

from dataclasses import dataclass

from companion.analyzers.models import AnalysisResult


@dataclass
class SnippetSource:
    """Where an analysed snippet came from and how its hint was chosen."""

    label: str  # file path or "<stdin>"
    language_hint: str
    hint_origin: str  # "flag", "extension", "config" or "default"
    char_count: int = 0


@dataclass
class AnalysisRun:
    """A snippet source paired with its analysis."""

    source: SnippetSource
    result: AnalysisResult
