"""Tests for shell completion functions."""
from companion.completions import (
    complete_config_key,
    complete_format,
    complete_language,
    complete_view,
)


class TestCompleteLanguage:
    def test_names_and_aliases(self):
        assert complete_language("py") == ["python", "py", "python3"]

    def test_go_alias(self):
        assert complete_language("g") == ["go", "golang"]

    def test_case_insensitive(self):
        assert "ruby" in complete_language("RU")

    def test_returns_empty_on_no_match(self):
        assert complete_language("zzz") == []


class TestCompleteView:
    def test_returns_matching(self):
        assert complete_view("re") == ["refactor"]

    def test_returns_all_on_empty(self):
        assert complete_view("") == ["summary", "suggestions", "tests", "docstring", "refactor"]


class TestCompleteFormat:
    def test_yaml_suffixes(self):
        assert complete_format(".y") == [".yaml", ".yml"]

    def test_returns_all_on_empty(self):
        assert set(complete_format("")) == {".json", ".yaml", ".yml", ".md", ".markdown"}


class TestCompleteConfigKey:
    def test_ui_keys(self):
        assert complete_config_key("ui.") == ["ui.plain_output", "ui.default_view"]

    def test_analysis_prefix(self):
        assert "analysis.complexity_high" in complete_config_key("analysis.comp")
