"""Per-language pattern tables for snippet analysis.

Every heuristic the engine applies (detection signals, comment syntax,
branch/async/import idioms, declaration shapes) is looked up here by
``LanguageId``. Adding a language means adding one ``LanguageSpec`` entry.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional


class LanguageId(str, Enum):
    """Supported language identifiers."""
    TYPESCRIPT = "typescript"
    JAVASCRIPT = "javascript"
    PYTHON = "python"
    GO = "go"
    RUBY = "ruby"


DEFAULT_LANGUAGE = LanguageId.TYPESCRIPT

# Tie-break order when two languages score the same and neither is the hint.
# JavaScript leads: a JS/TS tie means no TypeScript-only signal matched.
DETECTION_ORDER: tuple[LanguageId, ...] = (
    LanguageId.JAVASCRIPT,
    LanguageId.TYPESCRIPT,
    LanguageId.PYTHON,
    LanguageId.GO,
    LanguageId.RUBY,
)

# Parameter list with one level of nested parentheses
PARAMS = r"\((?:[^()]|\([^()]*\))*\)"


def _rx(*patterns: str) -> tuple[re.Pattern, ...]:
    return tuple(re.compile(p, re.MULTILINE) for p in patterns)


def _signals(*pairs: tuple[str, int]) -> tuple[tuple[re.Pattern, int], ...]:
    return tuple((re.compile(p, re.MULTILINE), weight) for p, weight in pairs)


@dataclass(frozen=True)
class LanguageSpec:
    """Pattern table for one programming language.

    Import patterns expose a ``module`` group, a comma separated ``modules``
    group, or a ``block`` group holding quoted paths. Declaration patterns are
    matched at the first non-blank character of a line and expose ``name`` and
    ``params``, and optionally ``async``, ``receiver``, ``returns`` and
    ``bare`` (a single unparenthesised parameter).
    """

    id: LanguageId
    name: str
    extensions: frozenset[str]
    aliases: frozenset[str]
    comment_single: str
    block_comments: tuple[tuple[str, str], ...]
    signals: tuple[tuple[re.Pattern, int], ...]
    branch_patterns: tuple[re.Pattern, ...]
    async_patterns: tuple[re.Pattern, ...]
    error_patterns: tuple[re.Pattern, ...]
    debug_patterns: tuple[re.Pattern, ...]
    test_patterns: tuple[re.Pattern, ...]
    import_patterns: tuple[re.Pattern, ...]
    declaration_patterns: tuple[re.Pattern, ...]
    member_patterns: tuple[re.Pattern, ...] = ()
    container_pattern: Optional[re.Pattern] = None
    block_comment_at_column_zero: bool = False
    dependency_root: str = "path"  # "package", "top-level" or "path"
    docstring_style: str = "jsdoc"
    return_separator: str = ": "
    error_handling_hint: str = "try/catch"
    debug_hint: str = "console.log"
    test_framework: str = "Jest"


_C_FAMILY_SIGNALS = (
    (r"\bfunction\s+\w+\s*\(", 2),
    (r"\b(?:const|let)\s+\w+\s*=", 1),
    (r"=>", 1),
    (r";\s*$", 1),
    (r"\bconsole\.\w+\(", 1),
    (r"^\s*import\s+.*\bfrom\s+['\"]", 2),
    (r"===|!==", 1),
)

_C_FAMILY_BRANCHES = _rx(
    r"\bif\b",
    r"\bfor\b",
    r"\bwhile\b",
    r"\bcase\b",
    r"\bcatch\b",
    r"&&",
    r"\|\|",
    r"\?\?",
    r"\s\?\s",
)

_C_FAMILY_ASYNC = _rx(
    r"\bawait\b",
    r"\.then\(",
    r"\bnew\s+Promise\b",
    r"\bPromise\.(?:all|allSettled|any|race)\(",
    r"\bset(?:Timeout|Interval|Immediate)\(",
)

_C_FAMILY_IMPORTS = _rx(
    r"""^\s*import\s+(?:type\s+)?[\w*{}\s,$]+?\s+from\s+['"](?P<module>[^'"]+)['"]""",
    r"""^\s*import\s+['"](?P<module>[^'"]+)['"]""",
    r"""^\s*export\s+(?:type\s+)?(?:\*|\{[^}]*\})(?:\s+as\s+\w+)?\s+from\s+['"](?P<module>[^'"]+)['"]""",
    r"""\brequire\(\s*['"](?P<module>[^'"]+)['"]\s*\)""",
    r"""\bimport\(\s*['"](?P<module>[^'"]+)['"]\s*\)""",
)

_JS_NAME = r"[A-Za-z_$][\w$]*"

_C_FAMILY_DECLARATIONS = _rx(
    rf"(?:export\s+(?:default\s+)?)?(?:declare\s+)?(?P<async>async\s+)?function\s*\*?\s*"
    rf"(?P<name>{_JS_NAME})\s*(?:<[^>(]*>)?\s*(?P<params>{PARAMS})"
    rf"(?:\s*:\s*(?P<returns>[^{{;]+?))?\s*[{{;]",
    rf"(?:export\s+)?(?:const|let|var)\s+(?P<name>{_JS_NAME})\s*(?::\s*[^=\n]+?)?\s*=\s*"
    rf"(?P<async>async\s+)?(?:(?P<params>{PARAMS})|(?P<bare>{_JS_NAME}))"
    rf"(?:\s*:\s*(?P<returns>[^=\n]+?))?\s*=>",
    rf"(?:export\s+)?(?:const|let|var)\s+(?P<name>{_JS_NAME})\s*(?::\s*[^=\n]+?)?\s*=\s*"
    rf"(?P<async>async\s+)?function\b\s*\*?\s*(?:{_JS_NAME})?\s*(?P<params>{PARAMS})",
)

_C_FAMILY_MEMBERS = _rx(
    rf"(?:(?:public|private|protected|static|readonly|override|abstract)\s+)*"
    rf"(?P<async>async\s+)?(?:(?:get|set)\s+)?\*?(?P<name>{_JS_NAME})\s*(?:<[^>(]*>)?\s*"
    rf"(?P<params>{PARAMS})(?:\s*:\s*(?P<returns>[^{{;]+?))?\s*\{{",
    rf"(?:(?:public|private|protected|static|readonly)\s+)*(?P<name>{_JS_NAME})\s*"
    rf"(?::\s*[^=\n]+?)?\s*=\s*(?P<async>async\s+)?(?P<params>{PARAMS})"
    rf"(?:\s*:\s*(?P<returns>[^=\n]+?))?\s*=>",
)

_C_FAMILY_CONTAINER = re.compile(
    r"^\s*(?:export\s+)?(?:default\s+)?(?:abstract\s+)?class\b"
)

_PYTHON_DECLARATIONS = _rx(
    rf"(?P<async>async\s+)?def\s+(?P<name>[A-Za-z_]\w*)\s*(?P<params>{PARAMS})"
    r"\s*(?:->\s*(?P<returns>[^:\n]+?))?\s*:",
)

_RUBY_DECLARATIONS = _rx(
    r"def\s+(?P<receiver>self\.)?(?P<name>[A-Za-z_]\w*[?!=]?)"
    r"(?:[ \t]*(?P<params>\([^)]*\))|[ \t]+(?P<bare>[^\n;#(][^\n;#]*))?",
)


LANGUAGE_SPECS: dict[LanguageId, LanguageSpec] = {
    LanguageId.TYPESCRIPT: LanguageSpec(
        id=LanguageId.TYPESCRIPT,
        name="TypeScript",
        extensions=frozenset({".ts", ".tsx", ".mts", ".cts"}),
        aliases=frozenset({"ts", "tsx"}),
        comment_single="//",
        block_comments=(("/*", "*/"),),
        signals=_signals(
            *_C_FAMILY_SIGNALS,
            (r":\s*(?:string|number|boolean|any|void|unknown|never)\b", 2),
            (r"^\s*(?:export\s+)?interface\s+\w+", 3),
            (r"^\s*(?:export\s+)?type\s+\w+\s*=", 3),
            (r"\b(?:public|private|protected|readonly)\s+\w+", 2),
            (r"\bas\s+(?:const|string|number|any|unknown)\b", 2),
            (r"\):\s*(?:Promise<|[A-Z]\w*\b)", 2),
        ),
        branch_patterns=_C_FAMILY_BRANCHES,
        async_patterns=_C_FAMILY_ASYNC,
        error_patterns=_rx(r"\bcatch\b"),
        debug_patterns=_rx(r"\bconsole\.(?:log|debug|trace|dir)\(", r"\bdebugger\b"),
        test_patterns=_rx(r"^\s*(?:describe|it|test)(?:\.\w+)?\(", r"\bexpect\("),
        import_patterns=_C_FAMILY_IMPORTS,
        declaration_patterns=_C_FAMILY_DECLARATIONS,
        member_patterns=_C_FAMILY_MEMBERS,
        container_pattern=_C_FAMILY_CONTAINER,
        dependency_root="package",
        docstring_style="jsdoc",
        error_handling_hint="try/catch blocks or .catch() handlers",
        debug_hint="console.log calls",
        test_framework="Jest or Vitest",
    ),
    LanguageId.JAVASCRIPT: LanguageSpec(
        id=LanguageId.JAVASCRIPT,
        name="JavaScript",
        extensions=frozenset({".js", ".jsx", ".mjs", ".cjs"}),
        aliases=frozenset({"js", "jsx", "node"}),
        comment_single="//",
        block_comments=(("/*", "*/"),),
        signals=_signals(
            *_C_FAMILY_SIGNALS,
            (r"\brequire\(\s*['\"]", 2),
            (r"\bmodule\.exports\b", 3),
            (r"\bexports\.\w+\s*=", 2),
        ),
        branch_patterns=_C_FAMILY_BRANCHES,
        async_patterns=_C_FAMILY_ASYNC,
        error_patterns=_rx(r"\bcatch\b"),
        debug_patterns=_rx(r"\bconsole\.(?:log|debug|trace|dir)\(", r"\bdebugger\b"),
        test_patterns=_rx(r"^\s*(?:describe|it|test)(?:\.\w+)?\(", r"\bexpect\("),
        import_patterns=_C_FAMILY_IMPORTS,
        declaration_patterns=_C_FAMILY_DECLARATIONS,
        member_patterns=_C_FAMILY_MEMBERS,
        container_pattern=_C_FAMILY_CONTAINER,
        dependency_root="package",
        docstring_style="jsdoc",
        error_handling_hint="try/catch blocks or .catch() handlers",
        debug_hint="console.log calls",
        test_framework="Jest or Vitest",
    ),
    LanguageId.PYTHON: LanguageSpec(
        id=LanguageId.PYTHON,
        name="Python",
        extensions=frozenset({".py", ".pyi", ".pyw"}),
        aliases=frozenset({"py", "python3"}),
        comment_single="#",
        block_comments=(('"""', '"""'), ("'''", "'''")),
        signals=_signals(
            (r"^\s*(?:async\s+)?def\s+\w+\s*\(.*\)\s*(?:->\s*[^:]+)?:\s*$", 3),
            (r"^\s*class\s+\w+(?:\(.*\))?:\s*$", 3),
            (r"^\s*elif\b.*:\s*$", 2),
            (r"^\s*from\s+[\w.]+\s+import\s+\w", 2),
            (r"^\s*import\s+[\w.]+(?:\s+as\s+\w+)?\s*$", 1),
            (r"\bself\.\w+", 1),
            (r"\b(?:None|True|False)\b", 1),
            (r"^\s*(?:if|for|while|with|try|else|except)\b.*:\s*$", 1),
        ),
        branch_patterns=_rx(
            r"\bif\b",
            r"\belif\b",
            r"\bfor\b",
            r"\bwhile\b",
            r"\bexcept\b",
            r"\bcase\b",
            r"\band\b",
            r"\bor\b",
        ),
        async_patterns=_rx(
            r"\bawait\b",
            r"\basync\s+(?:with|for)\b",
            r"\basyncio\.(?:gather|create_task|run|wait|wait_for|sleep|as_completed|to_thread)\(",
            r"\bThread\(",
            r"\b(?:Thread|Process)PoolExecutor\(",
            r"\.run_in_executor\(",
        ),
        error_patterns=_rx(r"^\s*except\b"),
        debug_patterns=_rx(r"^\s*print\(", r"\bpdb\.set_trace\(", r"^\s*breakpoint\(\)"),
        test_patterns=_rx(
            r"^\s*(?:async\s+)?def\s+test_\w+",
            r"^\s*assert\b",
            r"\bself\.assert\w+\(",
            r"\bpytest\.\w+",
        ),
        import_patterns=_rx(
            r"^\s*import\s+(?P<modules>[\w.]+(?:\s+as\s+\w+)?(?:\s*,\s*[\w.]+(?:\s+as\s+\w+)?)*)",
            r"^\s*from\s+(?P<module>[\w.]+)\s+import\b",
        ),
        declaration_patterns=_PYTHON_DECLARATIONS,
        member_patterns=_PYTHON_DECLARATIONS,
        container_pattern=re.compile(r"^\s*class\s+\w+"),
        dependency_root="top-level",
        docstring_style="python",
        return_separator=" -> ",
        error_handling_hint="try/except blocks",
        debug_hint="print() calls",
        test_framework="pytest",
    ),
    LanguageId.GO: LanguageSpec(
        id=LanguageId.GO,
        name="Go",
        extensions=frozenset({".go"}),
        aliases=frozenset({"golang"}),
        comment_single="//",
        block_comments=(("/*", "*/"),),
        signals=_signals(
            (r"^package\s+\w+", 4),
            (r"\bfunc\b", 3),
            (r":=", 2),
            (r"^import\s+(?:\(|\")", 2),
            (r"\berr\s*!=\s*nil\b", 2),
            (r"\bfmt\.\w+\(", 1),
            (r"\b(?:chan|defer)\s", 1),
        ),
        branch_patterns=_rx(
            r"\bif\b",
            r"\bfor\b",
            r"\bcase\b",
            r"&&",
            r"\|\|",
        ),
        async_patterns=_rx(
            r"\bgo\s+(?:func\b|[\w.]+\()",
            r"\bchan\b",
            r"<-",
            r"\bsync\.(?:WaitGroup|Mutex|RWMutex|Once)\b",
            r"\berrgroup\.\w+",
        ),
        error_patterns=_rx(r"\berr\s*!=\s*nil\b", r"\brecover\(\)"),
        debug_patterns=_rx(r"\bfmt\.Print(?:ln|f)?\(", r"\blog\.Print(?:ln|f)?\(", r"\bprintln\("),
        test_patterns=_rx(
            r"^func\s+Test\w*\(\s*\w+\s+\*testing\.T\)",
            r"\bt\.(?:Error|Errorf|Fatal|Fatalf|Run)\(",
        ),
        import_patterns=_rx(
            r'^\s*import\s+(?:[\w.]+\s+)?"(?P<module>[^"]+)"',
            r"^\s*import\s*\((?P<block>[^)]*)\)",
        ),
        declaration_patterns=_rx(
            r"func\s+(?P<receiver>\([^)]*\)\s*)?(?P<name>[A-Za-z_]\w*)\s*(?:\[[^\]]*\])?\s*"
            r"(?P<params>\([^)]*\))\s*(?P<returns>\([^)]*\)|[^{\n]+?)?\s*\{",
        ),
        dependency_root="path",
        docstring_style="go",
        return_separator=" ",
        error_handling_hint="if err != nil checks",
        debug_hint="fmt.Println calls",
        test_framework="the testing package",
    ),
    LanguageId.RUBY: LanguageSpec(
        id=LanguageId.RUBY,
        name="Ruby",
        extensions=frozenset({".rb", ".rake", ".gemspec"}),
        aliases=frozenset({"rb"}),
        comment_single="#",
        block_comments=(("=begin", "=end"),),
        block_comment_at_column_zero=True,
        signals=_signals(
            (r"^\s*def\s+(?:self\.)?\w+[?!=]?\s*(?:\([^)]*\))?\s*$", 3),
            (r"^\s*end\s*$", 2),
            (r"\bdo\s*(?:\|[^|]*\|)?\s*$", 2),
            (r"^\s*require(?:_relative)?\s+['\"]", 2),
            (r"^\s*elsif\b", 2),
            (r"\bunless\b", 2),
            (r"^\s*(?:module|class)\s+[A-Z]\w*(?:\s*<\s*[\w:]+)?\s*$", 2),
            (r"\battr_(?:reader|writer|accessor)\b", 2),
            (r"\bputs\b", 1),
        ),
        branch_patterns=_rx(
            r"\bif\b",
            r"\belsif\b",
            r"\bunless\b",
            r"\bwhile\b",
            r"\buntil\b",
            r"\bfor\b",
            r"\bwhen\b",
            r"\brescue\b",
            r"&&",
            r"\|\|",
            r"\band\b",
            r"\bor\b",
            r"\s\?\s",
        ),
        async_patterns=_rx(
            r"\bThread\.new\b",
            r"\bFiber\.new\b",
            r"\bRactor\.new\b",
            r"\bConcurrent::\w+",
            r"\bAsync\s*(?:do\b|\{)",
            r"\.async\b",
        ),
        error_patterns=_rx(r"\brescue\b"),
        debug_patterns=_rx(
            r"^\s*(?:puts|p|pp|print)\b",
            r"\bbinding\.(?:pry|irb)\b",
            r"\bbyebug\b",
        ),
        test_patterns=_rx(
            r"\b(?:RSpec\.)?describe\b.*\bdo\b",
            r"^\s*it\s+['\"]",
            r"\bexpect\(",
            r"\bassert(?:_\w+)?\b",
            r"^\s*def\s+test_\w+",
        ),
        import_patterns=_rx(
            r"""^\s*require\s*\(?\s*['"](?P<module>[^'"]+)['"]""",
            r"""^\s*gem\s+['"](?P<module>[^'"]+)['"]""",
        ),
        declaration_patterns=_RUBY_DECLARATIONS,
        member_patterns=_RUBY_DECLARATIONS,
        container_pattern=re.compile(r"^\s*(?:class|module)\s+[A-Z]"),
        dependency_root="path",
        docstring_style="yard",
        error_handling_hint="begin/rescue blocks",
        debug_hint="puts/p calls",
        test_framework="RSpec or Minitest",
    ),
}


def get_spec(language: LanguageId | str) -> LanguageSpec:
    """Return the pattern table for a language, defaulting to TypeScript."""
    lang_id = language if isinstance(language, LanguageId) else parse_language(language)
    return LANGUAGE_SPECS[lang_id or DEFAULT_LANGUAGE]


def parse_language(value: Optional[str]) -> Optional[LanguageId]:
    """Map a language name or alias to a LanguageId, or None when unknown."""
    if not value:
        return None
    key = value.strip().lower()
    for lang_id, spec in LANGUAGE_SPECS.items():
        if key == lang_id.value or key in spec.aliases:
            return lang_id
    return None


def language_for_path(path: Path) -> Optional[LanguageId]:
    """Detect a language from a file extension."""
    suffix = path.suffix.lower()
    for lang_id, spec in LANGUAGE_SPECS.items():
        if suffix in spec.extensions:
            return lang_id
    return None


def supported_languages() -> list[str]:
    """Return the supported language identifiers in display order."""
    return [lang.value for lang in LanguageId]
