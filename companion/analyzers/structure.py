"""Structural extractor: declared callables, their signatures and intent.

Declarations are found by matching each language's declaration shapes at
the start of a line. A declaration counts when it sits at column zero, or
when its nearest less-indented enclosing line opens a class or module
(a method). Callables nested inside other callables are skipped.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from .languages import LanguageId, LanguageSpec, get_spec
from .metrics import comment_line_flags, count_matches, normalize_newlines, split_lines
from .models import FunctionInfo

logger = logging.getLogger(__name__)

MAX_FUNCTIONS = 25

# Names a declaration pattern can pick up from control flow, never callables
CONTROL_KEYWORDS: frozenset[str] = frozenset({
    "if", "elif", "elsif", "else", "for", "while", "until", "unless", "do",
    "switch", "case", "when", "catch", "try", "with", "return", "function",
    "new", "typeof", "await", "super",
})

# (leading words, phrase template, default subject)
VERB_PHRASES: tuple[tuple[frozenset[str], str, str], ...] = (
    (frozenset({"get", "fetch", "load", "read", "find", "retrieve", "query", "lookup", "select"}),
     "Retrieves the {subject}.", "requested data"),
    (frozenset({"set", "update", "patch", "assign", "apply", "put"}),
     "Updates the {subject}.", "target state"),
    (frozenset({"validate", "check", "verify", "ensure", "assert"}),
     "Validates the {subject} and reports problems.", "input"),
    (frozenset({"is", "has", "can", "should"}),
     "Returns whether the {subject} condition holds.", "tested"),
    (frozenset({"handle", "on", "process"}),
     "Handles the {subject}.", "incoming event"),
    (frozenset({"create", "make", "build", "new", "init", "initialize", "generate"}),
     "Creates the {subject}.", "new instance"),
    (frozenset({"delete", "remove", "clear", "destroy", "drop", "reset"}),
     "Removes the {subject}.", "target entry"),
    (frozenset({"parse", "format", "convert", "transform", "serialize", "deserialize",
                "render", "map", "normalize", "to"}),
     "Transforms the {subject} into another representation.", "input"),
    (frozenset({"compute", "calculate", "count", "sum", "measure", "score"}),
     "Computes the {subject}.", "derived value"),
    (frozenset({"save", "write", "store", "persist", "cache"}),
     "Persists the {subject}.", "current data"),
    (frozenset({"send", "emit", "publish", "notify", "dispatch", "post"}),
     "Sends the {subject} to its consumers.", "message"),
    (frozenset({"main", "run", "start", "execute", "launch", "serve", "listen"}),
     "Runs the {subject}.", "entry point"),
    (frozenset({"test"}),
     "Exercises the {subject} behaviour.", "expected"),
)

_SKIPPED_PARAMETERS = frozenset({"self", "cls"})
_IDENTIFIER = re.compile(r"[A-Za-z_$][\w$]*")
_MODIFIERS = re.compile(r"^(?:(?:public|private|protected|readonly|override)\s+)+")
_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class _Declaration:
    match: re.Match
    line_start: int


def split_identifier(name: str) -> list[str]:
    """Split camelCase, PascalCase and snake_case identifiers into lowercase words."""
    name = name.rstrip("?!=")
    spaced = re.sub(r"([a-z0-9])([A-Z])", r"\1 \2", name)
    spaced = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1 \2", spaced)
    return [w.lower() for w in re.split(r"[\s_$]+", spaced) if w]


def describe_function(name: str, is_async: bool = False) -> str:
    """Infer a one-line description from the callable's name."""
    words = split_identifier(name)
    if not words:
        description = "Encapsulates an unnamed unit of logic."
    else:
        head, rest = words[0], words[1:]
        description = ""
        for verbs, template, default_subject in VERB_PHRASES:
            if head in verbs:
                subject = " ".join(rest) if rest else default_subject
                description = template.format(subject=subject)
                break
        if not description:
            description = f"Encapsulates logic for {' '.join(words)}."
    if is_async:
        description = "Asynchronously " + description[0].lower() + description[1:]
    return description


def _collapse(text: str) -> str:
    text = _WHITESPACE.sub(" ", text).strip()
    text = re.sub(r"([(\[])\s+", r"\1", text)
    text = re.sub(r",?\s+([)\]])", r"\1", text)
    return text


def _split_top_level(text: str) -> list[str]:
    parts: list[str] = []
    depth = 0
    current: list[str] = []
    for char in text:
        if char in "([{<":
            depth += 1
        elif char in ")]}>" and depth > 0:
            depth -= 1
        if char == "," and depth == 0:
            parts.append("".join(current))
            current = []
        else:
            current.append(char)
    parts.append("".join(current))
    return parts


def parameter_names(params: str) -> tuple[str, ...]:
    """Extract parameter names from a rendered parameter list."""
    inner = params.strip()
    if inner.startswith("(") and inner.endswith(")"):
        inner = inner[1:-1]
    names: list[str] = []
    for part in _split_top_level(inner):
        part = _MODIFIERS.sub("", part.strip().lstrip("@.*&").strip())
        if not part:
            continue
        if part[0] in "{[":
            names.append("options" if part[0] == "{" else "values")
            continue
        match = _IDENTIFIER.match(part)
        if match and match.group(0) not in _SKIPPED_PARAMETERS:
            names.append(match.group(0))
    return tuple(names)


def _render_signature(match: re.Match, spec: LanguageSpec) -> tuple[str, str]:
    groups = match.groupdict()
    name = groups["name"]
    if groups.get("params"):
        params = _collapse(groups["params"])
    elif groups.get("bare"):
        params = f"({_collapse(groups['bare'])})"
    else:
        params = "()"

    signature = name + params
    receiver = (groups.get("receiver") or "").strip()
    if receiver:
        separator = "" if receiver.endswith(".") else " "
        signature = _collapse(receiver) + separator + signature
    returns = (groups.get("returns") or "").strip()
    if returns:
        signature += spec.return_separator + _collapse(returns)
    return signature, params


def _find_declarations(code: str, spec: LanguageSpec) -> list[_Declaration]:
    lines = split_lines(code)
    flags = comment_line_flags(lines, spec)
    declarations: list[_Declaration] = []
    scopes: list[tuple[int, bool]] = []  # (indent, opens a class/module)
    offset = 0

    for line, is_comment in zip(lines, flags):
        line_start = offset
        offset += len(line) + 1
        stripped = line.lstrip()
        if is_comment or not stripped:
            continue

        indent = len(line) - len(stripped)
        while scopes and scopes[-1][0] >= indent:
            scopes.pop()
        in_container = bool(scopes) and scopes[-1][1]

        if indent == 0:
            patterns = spec.declaration_patterns
        elif in_container:
            patterns = spec.member_patterns
        else:
            patterns = ()

        for pattern in patterns:
            match = pattern.match(code, line_start + indent)
            if match and match.group("name") not in CONTROL_KEYWORDS:
                declarations.append(_Declaration(match=match, line_start=line_start))
                break

        opens_container = bool(spec.container_pattern and spec.container_pattern.match(line))
        scopes.append((indent, opens_container))

    return declarations


def extract_functions(
    code: str,
    language: LanguageId | str,
    limit: int = MAX_FUNCTIONS,
) -> tuple[FunctionInfo, ...]:
    """Extract declared callables in source order, capped at ``limit``."""
    spec = get_spec(language)
    code = normalize_newlines(code or "")
    if not code.strip() or limit <= 0:
        return ()

    declarations = _find_declarations(code, spec)
    functions: list[FunctionInfo] = []
    for index, decl in enumerate(declarations[:limit]):
        end = declarations[index + 1].line_start if index + 1 < len(declarations) else len(code)
        body = code[decl.match.end():end]
        is_async = bool(decl.match.groupdict().get("async")) or (
            count_matches(spec.async_patterns, body) > 0
        )
        signature, params = _render_signature(decl.match, spec)
        name = decl.match.group("name")
        functions.append(FunctionInfo(
            name=name,
            signature=signature,
            description=describe_function(name, is_async=is_async),
            parameters=parameter_names(params),
            is_async=is_async,
        ))

    if len(declarations) > limit:
        logger.debug("Found %d callables, keeping the first %d", len(declarations), limit)
    return tuple(functions)
