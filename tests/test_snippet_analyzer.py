"""End-to-end tests for the analysis pipeline."""
import pytest

from companion.analyzers.models import AnalysisInput, AnalysisSettings
from companion.analyzers.snippet_analyzer import DEFAULT_SAMPLE, SnippetAnalyzer, analyze_code


class TestScenarios:
    def test_single_typescript_function(self, ts_snippet):
        result = analyze_code(ts_snippet, "typescript")
        assert result.detected_language == "typescript"
        assert [fn.name for fn in result.functions] == ["getUserName"]
        assert result.functions[0].signature == "getUserName(user: User): string"
        assert result.metrics.lines_of_code == 7
        assert result.metrics.branches == 1
        assert result.metrics.cyclomatic_sketch == 2
        assert not any(s.startswith("Add documentation") for s in result.suggestions)
        assert result.test_ideas
        assert any("getUserName" in idea for idea in result.test_ideas)

    def test_python_detected_despite_go_hint(self, python_snippet):
        result = analyze_code(python_snippet, "go")
        assert result.detected_language == "python"
        assert result.language_hint == "go"
        assert result.functions[0].name == "load_config"
        assert result.suggestions[0].startswith("Switch the language selector to Python")
        assert result.docstring.startswith('"""')

    def test_branch_heavy_uncommented(self, branchy_snippet):
        result = analyze_code(branchy_snippet, "typescript")
        assert result.metrics.branches == 10
        assert result.metrics.cyclomatic_sketch == 11
        assert result.metrics.comment_density == 0.0
        assert any(s.startswith("Add documentation") for s in result.suggestions)
        assert any(s.startswith("Consider decomposing") for s in result.suggestions)

    def test_empty_input(self):
        result = analyze_code("", "typescript")
        assert result.summary == "No clear structure detected. Paste a snippet to generate insights."
        assert result.functions == ()
        assert result.metrics.lines_of_code == 0
        assert result.metrics.cyclomatic_sketch == 1
        assert result.metrics.comment_density == 0.0
        assert result.metrics.external_dependencies == frozenset()

    def test_default_sample(self):
        result = analyze_code(DEFAULT_SAMPLE)
        assert result.detected_language == "typescript"
        assert [fn.name for fn in result.functions] == ["loadUserProfile", "isActiveProfile"]
        assert result.functions[0].is_async is True
        assert result.functions[0].parameters == ("userId", "includeTeam")
        assert result.metrics.external_dependencies == frozenset({"@acme/http"})


class TestProperties:
    @pytest.mark.parametrize("language", ["typescript", "javascript", "python", "go", "ruby"])
    def test_deterministic(self, language, ts_snippet, python_snippet, go_snippet):
        for code in (ts_snippet, python_snippet, go_snippet, ""):
            assert analyze_code(code, language) == analyze_code(code, language)

    def test_line_conventions(self):
        assert analyze_code("").metrics.lines_of_code == 0
        assert analyze_code("x").metrics.lines_of_code == 1
        assert analyze_code("x\n").metrics.lines_of_code == 1

    def test_floor_and_bounds(self):
        for code in ["", "x", "// only\n// comments\n", "if (a) {}\n" * 40]:
            metrics = analyze_code(code).metrics
            assert metrics.cyclomatic_sketch >= 1
            assert 0.0 <= metrics.comment_density <= 1.0
            assert metrics.cyclomatic_sketch == 1 + metrics.branches

    def test_function_order_is_source_order(self):
        code = "def zeta():\n    pass\n\ndef alpha():\n    pass\n\ndef mid():\n    pass\n"
        names = [fn.name for fn in analyze_code(code, "python").functions]
        assert names == ["zeta", "alpha", "mid"]

    def test_commented_branch_free_snippet_triggers_neither_rule(self):
        code = "// Adds two numbers.\n// Both inputs must be finite.\nconst add = (a, b) => a + b;\n"
        suggestions = analyze_code(code, "javascript").suggestions
        assert not any(s.startswith("Add documentation") for s in suggestions)
        assert not any(s.startswith("Consider decomposing") for s in suggestions)

    def test_never_raises_on_odd_input(self):
        for code in ["\x00\x01", "((((", "\r\r\r", "🙂" * 100, "def (", "func ("]:
            analyze_code(code, "ruby")

    def test_unknown_hint_defaults_to_typescript(self):
        assert analyze_code("x", "cobol").language_hint == "typescript"


class TestSnippetAnalyzer:
    def test_analyze_input(self, ts_snippet):
        analyzer = SnippetAnalyzer()
        result = analyzer.analyze(AnalysisInput(code=ts_snippet, language_hint="ts"))
        assert result.detected_language == "typescript"

    def test_settings_are_applied(self, branchy_snippet):
        analyzer = SnippetAnalyzer(AnalysisSettings(complexity_high=20))
        result = analyzer.analyze_code(branchy_snippet, "typescript")
        assert not any(s.startswith("Consider decomposing") for s in result.suggestions)

    def test_max_functions_setting(self):
        code = "".join(f"def f{i}():\n    pass\n" for i in range(5))
        result = SnippetAnalyzer(AnalysisSettings(max_functions=2)).analyze_code(code, "python")
        assert len(result.functions) == 2


class TestToDict:
    def test_camel_case_wire_shape(self, ts_snippet):
        data = analyze_code(ts_snippet).to_dict()
        assert set(data) == {
            "detectedLanguage", "languageHint", "summary", "functions", "metrics",
            "suggestions", "testIdeas", "quickWins", "docstring", "refactorPlan",
            "checklist", "resources",
        }
        assert data["metrics"]["linesOfCode"] == 7
        assert data["functions"][0]["isAsync"] is False
        assert {"label", "checked"} == set(data["checklist"][0])


class TestMultilineStrings:
    def test_functions_after_module_string_are_found(self):
        code = (
            'QUERY = """\n'
            "SELECT 1\n"
            '"""\n'
            "\n"
            "def load(path):\n"
            "    return path\n"
            "\n"
            "def save(path):\n"
            "    return path\n"
        )
        result = analyze_code(code, "python")
        assert [fn.name for fn in result.functions] == ["load", "save"]
        assert result.metrics.comment_density == 0.0
