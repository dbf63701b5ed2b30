"""Lexical metrics: line, branch, async, comment and dependency counts.

Everything here is a textual scan driven by the language's pattern table.
Nothing is parsed, so commented-out branches still count.
"""
from __future__ import annotations

import logging
import re
from typing import Iterable

from .languages import LanguageId, LanguageSpec, get_spec
from .models import Metrics

logger = logging.getLogger(__name__)

_QUOTED = re.compile(r'"([^"]+)"')


def normalize_newlines(code: str) -> str:
    """Convert CRLF and lone CR line endings to LF."""
    return code.replace("\r\n", "\n").replace("\r", "\n")


def count_lines(code: str) -> int:
    """Count newline-delimited lines; empty text has zero lines.

    A trailing newline terminates the last line rather than starting a new one.
    """
    code = normalize_newlines(code)
    return code.count("\n") + (1 if code and not code.endswith("\n") else 0)


def split_lines(code: str) -> list[str]:
    """Split text into exactly ``count_lines(code)`` lines."""
    code = normalize_newlines(code)
    if not code:
        return []
    lines = code.split("\n")
    if code.endswith("\n"):
        lines.pop()
    return lines


def _unclosed(text: str, pairs: Iterable[tuple[str, str]]) -> str | None:
    """Return the closer of the delimiter left open at the end of ``text``."""
    pairs = tuple(pairs)
    pos = 0
    while True:
        hits = [(text.find(opener, pos), opener, closer) for opener, closer in pairs]
        hits = [hit for hit in hits if hit[0] >= 0]
        if not hits:
            return None
        start, opener, closer = min(hits)
        end = text.find(closer, start + len(opener))
        if end < 0:
            return closer
        pos = end + len(closer)


def comment_line_flags(lines: list[str], spec: LanguageSpec) -> list[bool]:
    """Flag each line that is a line comment or part of a block comment.

    Symmetric delimiters (Python triple quotes) are string literals when they
    open mid-line: the lines they span are not comments, but the open state
    is still tracked so their closing quotes are not mistaken for an opener.
    """
    flags: list[bool] = []
    string_pairs = tuple(pair for pair in spec.block_comments if pair[0] == pair[1])
    closing: str | None = None
    in_comment = False
    for line in lines:
        stripped = line.lstrip()
        if closing is not None:
            flags.append(in_comment)
            if spec.block_comment_at_column_zero:
                end = 0 if line.startswith(closing) else -1
                rest = line[len(closing):]
            else:
                end = stripped.find(closing)
                rest = stripped[end + len(closing):]
            if end >= 0:
                closing = _unclosed(rest, string_pairs)
                in_comment = False
            continue
        if spec.comment_single and stripped.startswith(spec.comment_single):
            flags.append(True)
            continue
        candidate = line if spec.block_comment_at_column_zero else stripped
        opener = next((pair for pair in spec.block_comments if candidate.startswith(pair[0])), None)
        if opener is not None:
            if spec.block_comment_at_column_zero:
                closing = opener[1]
            else:
                closing = _unclosed(candidate, spec.block_comments)
            in_comment = True
        else:
            closing = _unclosed(stripped, string_pairs)
            in_comment = False
        flags.append(opener is not None)
    return flags


def count_comment_lines(lines: list[str], spec: LanguageSpec) -> int:
    """Count lines that are line comments or part of a block comment."""
    return sum(comment_line_flags(lines, spec))


def count_matches(patterns: Iterable[re.Pattern], code: str) -> int:
    """Total number of non-overlapping matches of every pattern."""
    return sum(len(pattern.findall(code)) for pattern in patterns)


def _package_root(module: str) -> str:
    parts = module.split("/")
    if module.startswith("@") and len(parts) > 1:
        return "/".join(parts[:2])
    return parts[0]


def _normalize_dependency(module: str, spec: LanguageSpec) -> str | None:
    module = module.strip()
    if not module:
        return None
    if spec.dependency_root == "package":
        if module.startswith((".", "/")):
            return None
        return _package_root(module)
    if spec.dependency_root == "top-level":
        if module.startswith(".") or module == "__future__":
            return None
        return module.split(".")[0]
    return module


def extract_dependencies(code: str, spec: LanguageSpec) -> frozenset[str]:
    """Collect external module names referenced by the language's import idioms."""
    found: set[str] = set()
    for pattern in spec.import_patterns:
        for match in pattern.finditer(code):
            groups = match.groupdict()
            candidates: list[str] = []
            if groups.get("module"):
                candidates.append(groups["module"])
            if groups.get("modules"):
                candidates.extend(
                    part.split(" as ")[0] for part in groups["modules"].split(",")
                )
            if groups.get("block"):
                candidates.extend(_QUOTED.findall(groups["block"]))
            for candidate in candidates:
                name = _normalize_dependency(candidate, spec)
                if name:
                    found.add(name)
    return frozenset(found)


def extract_metrics(code: str, language: LanguageId | str) -> Metrics:
    """Compute the quantitative metrics of a snippet for the given language."""
    spec = get_spec(language)
    code = normalize_newlines(code or "")
    lines = split_lines(code)
    lines_of_code = len(lines)
    if lines_of_code == 0:
        return Metrics()

    branches = count_matches(spec.branch_patterns, code)
    comment_lines = count_comment_lines(lines, spec)
    density = min(1.0, max(0.0, comment_lines / max(1, lines_of_code)))

    metrics = Metrics(
        lines_of_code=lines_of_code,
        branches=branches,
        async_operations=count_matches(spec.async_patterns, code),
        cyclomatic_sketch=1 + branches,
        comment_density=density,
        external_dependencies=extract_dependencies(code, spec),
        comment_lines=comment_lines,
        error_handlers=count_matches(spec.error_patterns, code),
        debug_statements=count_matches(spec.debug_patterns, code),
        test_markers=count_matches(spec.test_patterns, code),
    )
    logger.debug(
        "Metrics for %s: %d lines, %d branches, %d async, %d deps",
        spec.id.value, lines_of_code, branches, metrics.async_operations,
        len(metrics.external_dependencies),
    )
    return metrics
