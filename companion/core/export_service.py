"""Analysis export service.

Supports three export formats, picked from the output file suffix:
  - JSON (.json): the camelCase AnalysisResult wire shape
  - YAML (.yaml, .yml): the snake_case analysis context
  - Markdown (.md, .markdown): a report covering every view
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

import yaml

from companion.analyzers.models import AnalysisResult
from companion.core.analysis_service import serialize_result_context, serialize_result_text
from companion.errors import ExportFormatError

logger = logging.getLogger("companion.core.export")

# suffix -> format name
EXPORT_FORMATS: dict[str, str] = {
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".md": "markdown",
    ".markdown": "markdown",
}


@dataclass
class ExportResult:
    """Result of an export operation."""

    format: str
    output_path: Path
    size_bytes: int


def format_for_path(path: Path) -> str:
    """Infer the export format from a file suffix.

    Raises:
        ExportFormatError: If no exporter handles the suffix.
    """
    fmt = EXPORT_FORMATS.get(path.suffix.lower())
    if fmt is None:
        raise ExportFormatError(str(path), sorted(EXPORT_FORMATS))
    return fmt


class ExportService:
    """Writes analysis results to disk."""

    def export_result(self, result: AnalysisResult, output_path: Path) -> ExportResult:
        """Export a result to ``output_path`` in the format its suffix names.

        Args:
            result: The analysis to write.
            output_path: Destination file; parent directories are created.

        Returns:
            ExportResult with the format, path and size.

        Raises:
            ExportFormatError: If the suffix is not .json, .yaml, .yml, .md or .markdown.
        """
        fmt = format_for_path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        if fmt == "json":
            with open(output_path, "w", encoding="utf-8") as f:
                json.dump(result.to_dict(), f, indent=2, ensure_ascii=False)
        elif fmt == "yaml":
            with open(output_path, "w", encoding="utf-8") as f:
                yaml.safe_dump(
                    serialize_result_context(result), f,
                    default_flow_style=False, sort_keys=False, allow_unicode=True,
                )
        else:
            output_path.write_text(serialize_result_text(result), encoding="utf-8")

        size = output_path.stat().st_size
        logger.info("Exported analysis as %s to %s (%d bytes)", fmt, output_path, size)
        return ExportResult(format=fmt, output_path=output_path, size_bytes=size)
