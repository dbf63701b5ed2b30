"""Tests for the snippet analysis service."""

import pytest

from companion.analyzers.models import AnalysisSettings
from companion.core import AnalysisRun
from companion.core.analysis_service import (
    STDIN_LABEL,
    AnalysisService,
    serialize_result_context,
    serialize_result_text,
)
from companion.core.config_service import _write_toml
from companion.errors import ConfigError, SnippetReadError, UnsupportedLanguageError


class TestResolveHint:
    def test_flag_wins(self, tmp_path):
        hint, origin = AnalysisService().resolve_hint("py", tmp_path / "main.go")
        assert (hint, origin) == ("python", "flag")

    def test_extension(self, tmp_path):
        assert AnalysisService().resolve_hint(None, tmp_path / "lib.rb") == ("ruby", "extension")

    def test_unknown_extension_uses_config(self, tmp_path):
        assert AnalysisService().resolve_hint(None, tmp_path / "notes.txt") == ("typescript", "config")

    def test_config_default_language(self, companion_config):
        _write_toml({"analysis": {"default_language": "golang"}}, companion_config["project"])
        assert AnalysisService().resolve_hint() == ("go", "config")

    def test_unknown_flag(self):
        with pytest.raises(UnsupportedLanguageError) as exc:
            AnalysisService().resolve_hint("cobol")
        assert exc.value.exit_code == 2

    def test_unknown_configured_language(self, monkeypatch):
        monkeypatch.setenv("COMPANION_LANGUAGE", "cobol")
        with pytest.raises(UnsupportedLanguageError):
            AnalysisService().resolve_hint()


class TestSettingsFromConfig:
    def test_defaults(self):
        assert AnalysisService().settings_from_config() == AnalysisSettings()

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("COMPANION_COMPLEXITY_HIGH", "20")
        settings = AnalysisService().settings_from_config()
        assert settings.complexity_high == 20

    def test_toml_override(self, companion_config):
        _write_toml({"analysis": {"max_quick_wins": 1, "comment_density_target": 0.3}},
                    companion_config["global"])
        settings = AnalysisService().settings_from_config()
        assert settings.max_quick_wins == 1
        assert settings.comment_density_target == pytest.approx(0.3)

    def test_invalid_env_value(self, monkeypatch):
        monkeypatch.setenv("COMPANION_MAX_FUNCTIONS", "lots")
        with pytest.raises(ConfigError):
            AnalysisService().settings_from_config()

    def test_non_numeric_file_value(self, companion_config):
        _write_toml({"analysis": {"complexity_high": "high"}}, companion_config["project"])
        with pytest.raises(ConfigError):
            AnalysisService().settings_from_config()


class TestAnalyzeText:
    def test_returns_run(self, ts_snippet):
        run = AnalysisService().analyze_text(ts_snippet)
        assert isinstance(run, AnalysisRun)
        assert run.source.label == STDIN_LABEL
        assert run.source.hint_origin == "config"
        assert run.source.char_count == len(ts_snippet)
        assert run.result.detected_language == "typescript"
        assert [fn.name for fn in run.result.functions] == ["getUserName"]

    def test_settings_flow_into_analysis(self, branchy_snippet, monkeypatch):
        monkeypatch.setenv("COMPANION_MAX_FUNCTIONS", "0")
        run = AnalysisService().analyze_text(branchy_snippet, language="js")
        assert run.result.functions == ()

    def test_empty_input(self):
        run = AnalysisService().analyze_text("")
        assert run.result.metrics.lines_of_code == 0
        assert run.result.suggestions == ("Paste a snippet to receive tailored suggestions.",)


class TestAnalyzeFile:
    def test_infers_hint_from_extension(self, tmp_path, python_snippet):
        path = tmp_path / "loader.py"
        path.write_text(python_snippet)
        run = AnalysisService().analyze_file(path)
        assert run.source.language_hint == "python"
        assert run.source.hint_origin == "extension"
        assert run.source.label == str(path)
        assert run.result.detected_language == "python"

    def test_missing_file(self, tmp_path):
        with pytest.raises(SnippetReadError) as exc:
            AnalysisService().analyze_file(tmp_path / "missing.ts")
        assert exc.value.file_path.endswith("missing.ts")

    def test_directory(self, tmp_path):
        with pytest.raises(SnippetReadError, match="directory"):
            AnalysisService().analyze_file(tmp_path)

    def test_undecodable_bytes_are_replaced(self, tmp_path):
        path = tmp_path / "binary.go"
        path.write_bytes(b"package main\n\xff\xfe\nfunc main() {}\n")
        run = AnalysisService().analyze_file(path)
        assert run.result.detected_language == "go"
        assert run.result.metrics.lines_of_code == 3


class TestSerialization:
    def test_text_report_sections(self, ts_snippet):
        result = AnalysisService().analyze_text(ts_snippet).result
        text = serialize_result_text(result)
        assert text.startswith("# Snippet Analysis\n")
        for heading in ("## Overview", "## Callables", "## Quick Wins", "## Suggestions",
                        "## Test Plan", "## Docstring", "## Refactor Plan",
                        "## Delivery Checklist", "## Resources"):
            assert heading in text
        assert "| getUserName |" in text
        assert "- Lines of code: 7" in text
        assert "```typescript" in text

    def test_text_report_marks_hint_override(self, python_snippet):
        result = AnalysisService().analyze_text(python_snippet, language="go").result
        assert "- Detected language: Python (hint: go)" in serialize_result_text(result)

    def test_context_uses_snake_case(self, ts_snippet):
        result = AnalysisService().analyze_text(ts_snippet).result
        context = serialize_result_context(result)
        assert context["detected_language"] == "typescript"
        assert context["metrics"]["lines_of_code"] == 7
        assert "cyclomatic_sketch" in context["metrics"]
        assert context["functions"][0]["is_async"] is False
        assert all(set(item) == {"label", "checked"} for item in context["checklist"])
