"""Custom exception hierarchy for companion.

The analysis engine itself never raises for any snippet; these errors come
from the layers around it (reading input, exporting results, configuration).
Each exception carries an optional ``context`` dict with structured metadata
(file path, language, config key, etc.) that the CLI error handler can render.

Exception hierarchy::

    CompanionError
    ├── UnsupportedLanguageError
    ├── SnippetReadError
    ├── ExportFormatError
    └── ConfigError
"""
from __future__ import annotations

from typing import Optional


class CompanionError(Exception):
    """Base class for all companion exceptions.

    Args:
        message: Human-readable error description.
        context: Optional dict of structured metadata.
    """

    exit_code: int = 1

    def __init__(self, message: str, context: Optional[dict] = None):
        self.context = context or {}
        super().__init__(message)


# ── Input Errors ───────────────────────────────────────────────────

class UnsupportedLanguageError(CompanionError):
    """Raised when a language name or alias is not recognised."""

    exit_code = 2

    def __init__(self, language: str, available: Optional[list[str]] = None):
        available_str = f". Available: {', '.join(available)}" if available else ""
        super().__init__(
            f"Language '{language}' is not supported{available_str}",
            context={"language": language},
        )


class SnippetReadError(CompanionError):
    """Raised when a snippet file cannot be read."""

    def __init__(self, message: str, file_path: str = ""):
        super().__init__(message, context={"file": file_path})


# ── Output Errors ──────────────────────────────────────────────────

class ExportFormatError(CompanionError):
    """Raised when an export path has a suffix no exporter handles."""

    def __init__(self, file_path: str, supported: Optional[list[str]] = None):
        supported_str = f". Supported: {', '.join(supported)}" if supported else ""
        super().__init__(
            f"Cannot infer an export format from '{file_path}'{supported_str}",
            context={"file": file_path},
        )


class ConfigError(CompanionError):
    """Raised when configuration is invalid or missing."""
    pass
