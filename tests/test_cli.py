"""End-to-end tests for the companion CLI."""

import json

from typer.testing import CliRunner

from companion.cli import app
from companion.core.config_service import _read_toml

runner = CliRunner()


class TestLanguagesCommand:
    def test_table(self):
        result = runner.invoke(app, ["languages"])
        assert result.exit_code == 0
        assert "Supported Languages" in result.output
        assert "golang" in result.output

    def test_json(self):
        result = runner.invoke(app, ["languages", "--json"])
        assert result.exit_code == 0
        rows = json.loads(result.output)
        assert [row["id"] for row in rows] == ["typescript", "javascript", "python", "go", "ruby"]
        python = next(row for row in rows if row["id"] == "python")
        assert ".py" in python["extensions"]


class TestAnalyzeCommand:
    def test_file_plain(self, tmp_path, python_snippet):
        path = tmp_path / "loader.py"
        path.write_text(python_snippet)
        result = runner.invoke(app, ["analyze", str(path), "--plain"])
        assert result.exit_code == 0
        assert "Detected: Python" in result.output
        assert "Quick wins:" in result.output
        assert "-- Explain --" in result.output
        assert "load_config" in result.output

    def test_stdin_json(self, ts_snippet):
        result = runner.invoke(app, ["analyze", "--json", "-l", "ts"], input=ts_snippet)
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["detectedLanguage"] == "typescript"
        assert data["functions"][0]["name"] == "getUserName"

    def test_dash_reads_stdin(self, go_snippet):
        result = runner.invoke(app, ["analyze", "-", "--json"], input=go_snippet)
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["detectedLanguage"] == "go"
        assert data["languageHint"] == "typescript"

    def test_view_option(self, ts_snippet):
        result = runner.invoke(app, ["analyze", "--plain", "-V", "tests"], input=ts_snippet)
        assert result.exit_code == 0
        assert "High-Value Scenarios:" in result.output

    def test_default_view_from_config(self, ts_snippet, companion_config):
        runner.invoke(app, ["config", "set", "ui.default_view", "refactor"])
        result = runner.invoke(app, ["analyze", "--plain"], input=ts_snippet)
        assert result.exit_code == 0
        assert "Next-Step Blueprint:" in result.output
        assert "Delivery Checklist:" in result.output

    def test_plain_from_env(self, ts_snippet, monkeypatch):
        monkeypatch.setenv("COMPANION_PLAIN", "true")
        result = runner.invoke(app, ["analyze"], input=ts_snippet)
        assert result.exit_code == 0
        assert "Detected: TypeScript" in result.output

    def test_missing_file(self, tmp_path):
        result = runner.invoke(app, ["analyze", str(tmp_path / "nope.ts")])
        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_unsupported_language(self):
        result = runner.invoke(app, ["analyze", "-l", "cobol"], input="x = 1\n")
        assert result.exit_code == 2
        assert "not supported" in result.output

    def test_invalid_view(self):
        result = runner.invoke(app, ["analyze", "--view", "poetry"], input="x = 1\n")
        assert result.exit_code == 2

    def test_export(self, tmp_path, ts_snippet):
        out = tmp_path / "report.md"
        result = runner.invoke(app, ["analyze", "--plain", "-o", str(out)], input=ts_snippet)
        assert result.exit_code == 0
        assert "OK: Exported" in result.output
        assert out.read_text().startswith("# Snippet Analysis")

    def test_export_bad_suffix(self, tmp_path, ts_snippet):
        result = runner.invoke(app, ["analyze", "-o", str(tmp_path / "report.txt")], input=ts_snippet)
        assert result.exit_code == 1
        assert "Cannot infer an export format" in result.output


class TestDemoCommand:
    def test_plain(self):
        result = runner.invoke(app, ["demo", "--plain"])
        assert result.exit_code == 0
        assert "Coding Companion" in result.output
        assert "Detected: TypeScript" in result.output
        assert "loadUserProfile" in result.output

    def test_all_views(self):
        result = runner.invoke(app, ["demo", "--plain", "--all"])
        assert result.exit_code == 0
        for label in ("Explain", "Improve", "Test Plan", "Docs", "Refactor"):
            assert f"-- {label} --" in result.output
        assert "Resource shortcuts:" in result.output

    def test_json(self):
        result = runner.invoke(app, ["demo", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert "@acme/http" in data["metrics"]["externalDependencies"]


class TestConfigCommand:
    def test_set(self, companion_config):
        result = runner.invoke(app, ["config", "set", "analysis.complexity_high", "20"])
        assert result.exit_code == 0
        assert "analysis.complexity_high = 20" in result.output
        assert _read_toml(companion_config["global"])["analysis"]["complexity_high"] == 20

    def test_set_unknown_key(self):
        result = runner.invoke(app, ["config", "set", "bogus.key", "1"])
        assert result.exit_code == 1
        assert "Unknown config key" in result.output

    def test_set_invalid_value(self):
        result = runner.invoke(app, ["config", "set", "analysis.max_functions", "many"])
        assert result.exit_code == 1

    def test_show(self):
        result = runner.invoke(app, ["config", "show"])
        assert result.exit_code == 0
        assert "Config Sources" in result.output
        assert "complexity_high" in result.output

    def test_init_twice(self, companion_config):
        first = runner.invoke(app, ["config", "init"])
        assert first.exit_code == 0
        assert companion_config["project"].is_file()
        second = runner.invoke(app, ["config", "init"])
        assert second.exit_code == 1
        assert "already exists" in second.output

    def test_path(self):
        result = runner.invoke(app, ["config", "path"])
        assert result.exit_code == 0
        assert "Config Paths" in result.output

    def test_get(self, companion_config):
        runner.invoke(app, ["config", "set", "analysis.max_quick_wins", "2"])
        result = runner.invoke(app, ["config", "get", "analysis.max_quick_wins"])
        assert result.exit_code == 0
        assert "analysis.max_quick_wins = 2 (global)" in result.output

    def test_get_unknown_key(self):
        result = runner.invoke(app, ["config", "get", "analysis.nope"])
        assert result.exit_code == 1

    def test_show_json(self, monkeypatch):
        monkeypatch.setenv("COMPANION_COMPLEXITY_HIGH", "14")
        result = runner.invoke(app, ["config", "show", "--json"])
        assert result.exit_code == 0
        info = json.loads(result.output)
        assert info["resolved"]["analysis"]["complexity_high"] == 14
        assert info["origins"]["analysis.complexity_high"] == "env"

    def test_init_with_language(self, companion_config):
        result = runner.invoke(app, ["config", "init", "--language", "py"])
        assert result.exit_code == 0
        assert _read_toml(companion_config["project"])["analysis"]["default_language"] == "python"

    def test_init_with_unknown_language(self):
        result = runner.invoke(app, ["config", "init", "-l", "cobol"])
        assert result.exit_code == 2


class TestJsonErrors:
    def test_missing_file_json(self, tmp_path):
        result = runner.invoke(app, ["analyze", str(tmp_path / "nope.ts"), "--json"])
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["error"] == "SnippetReadError"
        assert "stdin" in data["hint"]
