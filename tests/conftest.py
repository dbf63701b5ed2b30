"""Shared fixtures for companion tests."""
import pytest

from companion import ui
from companion.core.config_service import ENV_VAR_MAP, reset_config_service


@pytest.fixture(autouse=True)
def companion_config(tmp_path, monkeypatch):
    """Point config files at a temporary directory for every test.

    This ensures tests never read or write real config. Also clears
    COMPANION_* env vars and resets the config singleton and output modes.
    """
    global_path = tmp_path / "global" / "config.toml"
    project_path = tmp_path / "project" / ".companion.toml"
    monkeypatch.setattr(
        "companion.core.config_service._global_config_path", lambda: global_path
    )
    monkeypatch.setattr(
        "companion.core.config_service._project_config_path", lambda: project_path
    )
    for env_var in ENV_VAR_MAP:
        monkeypatch.delenv(env_var, raising=False)
    monkeypatch.delenv("COMPANION_DEBUG", raising=False)
    reset_config_service()

    yield {"global": global_path, "project": project_path}

    reset_config_service()
    ui.set_json_mode(False)
    ui.set_plain_mode(False)


@pytest.fixture
def ts_snippet():
    """A single TypeScript function with one branch and one comment line."""
    return (
        "// Returns the display name of a user.\n"
        "function getUserName(user: User): string {\n"
        "  if (user.nickname) {\n"
        "    return user.nickname;\n"
        "  }\n"
        "  return `${user.first} ${user.last}`;\n"
        "}\n"
    )


@pytest.fixture
def python_snippet():
    return (
        "def load_config(path):\n"
        "    with open(path) as handle:\n"
        "        return handle.read()\n"
    )


@pytest.fixture
def branchy_snippet():
    """Ten branches, no comments."""
    lines = ["function classify(n) {"]
    lines += [f"  if (n > {i * 10}) return 'bucket{i}';" for i in range(10, 0, -1)]
    lines += ["}"]
    return "\n".join(lines) + "\n"


@pytest.fixture
def go_snippet():
    return (
        "package main\n"
        "\n"
        'import "fmt"\n'
        "\n"
        "func main() {\n"
        '\tmsg := "hi"\n'
        "\tfmt.Println(msg)\n"
        "}\n"
    )
