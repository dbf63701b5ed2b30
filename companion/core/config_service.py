"""Layered configuration service for companion.

Priority (highest to lowest):
1. CLI flags (--language, --plain): applied by the command, not stored here
2. Environment variables (COMPANION_*)
3. Project config (.companion.toml in current directory)
4. Global config (~/.config/companion/config.toml)
5. Built-in defaults
"""
from __future__ import annotations

import copy
import logging
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import tomli_w

from companion.analyzers.languages import parse_language, supported_languages
from companion.errors import ConfigError, UnsupportedLanguageError

logger = logging.getLogger("companion.config")

# Default configuration values
DEFAULTS: dict[str, Any] = {
    "analysis": {
        "default_language": "typescript",
        "comment_density_target": 0.12,
        "complexity_high": 10,
        "complexity_low": 6,
        "dependency_high": 5,
        "long_snippet_lines": 150,
        "long_parameter_list": 4,
        "max_functions": 25,
        "detection_threshold": 3,
        "max_quick_wins": 3,
    },
    "ui": {
        "plain_output": False,
        "default_view": "summary",
    },
}

# Mapping of env vars to config paths
ENV_VAR_MAP = {
    "COMPANION_LANGUAGE": "analysis.default_language",
    "COMPANION_PLAIN": "ui.plain_output",
    "COMPANION_MAX_FUNCTIONS": "analysis.max_functions",
    "COMPANION_COMMENT_TARGET": "analysis.comment_density_target",
    "COMPANION_COMPLEXITY_HIGH": "analysis.complexity_high",
}


def _global_config_dir() -> Path:
    """Return the global config directory: ~/.config/companion/."""
    return Path.home() / ".config" / "companion"


def _global_config_path() -> Path:
    """Return the global config file path."""
    return _global_config_dir() / "config.toml"


def _project_config_path() -> Path:
    """Return the project config file path (.companion.toml in cwd)."""
    return Path.cwd() / ".companion.toml"


def _read_toml(path: Path) -> dict:
    """Read a TOML file, returning empty dict if missing or unreadable."""
    if not path.is_file():
        return {}
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Failed to read %s: %s", path, e)
        return {}


def _write_toml(data: dict, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "wb") as f:
        tomli_w.dump(data, f)


def _deep_merge(base: dict, override: dict) -> dict:
    """Deep merge override into base (override wins)."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _get_nested(data: dict, dotted_key: str, default: Any = None) -> Any:
    """Get a value from a nested dict using dotted key notation."""
    keys = dotted_key.split(".")
    current = data
    for key in keys:
        if not isinstance(current, dict):
            return default
        current = current.get(key)
        if current is None:
            return default
    return current


def _set_nested(data: dict, dotted_key: str, value: Any) -> None:
    """Set a value in a nested dict using dotted key notation."""
    keys = dotted_key.split(".")
    current = data
    for key in keys[:-1]:
        if key not in current or not isinstance(current[key], dict):
            current[key] = {}
        current = current[key]
    current[keys[-1]] = value


def config_keys() -> list[str]:
    """Return every known dotted config key."""
    return [
        f"{section}.{key}"
        for section, values in DEFAULTS.items()
        for key in values
    ]


def coerce_value(dotted_key: str, raw: Any) -> Any:
    """Convert a raw (usually string) value to the type of the key's default.

    Raises:
        ConfigError: If the key is unknown or the value does not convert.
    """
    default = _get_nested(DEFAULTS, dotted_key)
    if default is None:
        raise ConfigError(
            f"Unknown config key '{dotted_key}'",
            context={"key": dotted_key, "available": ", ".join(config_keys())},
        )
    if not isinstance(raw, str):
        return raw
    text = raw.strip()
    try:
        if isinstance(default, bool):
            lowered = text.lower()
            if lowered in ("true", "1", "yes", "on"):
                return True
            if lowered in ("false", "0", "no", "off"):
                return False
            raise ValueError(f"not a boolean: {raw!r}")
        if isinstance(default, int):
            return int(text)
        if isinstance(default, float):
            return float(text)
    except ValueError as e:
        raise ConfigError(
            f"Invalid value for '{dotted_key}': {raw!r}",
            context={"key": dotted_key, "reason": str(e)},
        ) from e
    return text


@dataclass
class ResolvedConfig:
    """Merged configuration plus the layer each known key was taken from."""
    data: dict = field(default_factory=dict)
    origins: dict[str, str] = field(default_factory=dict)
    global_config_path: Optional[Path] = None
    project_config_path: Optional[Path] = None

    def get(self, dotted_key: str, default: Any = None) -> Any:
        """Get a config value using dotted key notation."""
        return _get_nested(self.data, dotted_key, default)

    def origin(self, dotted_key: str) -> str:
        """Return "default", "global", "project" or "env" for a known key."""
        return self.origins.get(dotted_key, "default")


def _file_origins(data: dict, layer: str) -> dict[str, str]:
    return {
        key: layer for key in config_keys()
        if _get_nested(data, key) is not None
    }


class ConfigService:
    """Layered configuration service.

    Later layers win: defaults, the global file, the project file, then
    COMPANION_* environment variables.
    """

    def __init__(self):
        self._resolved: Optional[ResolvedConfig] = None

    def resolve(self, force: bool = False) -> ResolvedConfig:
        """Resolve the full config from all layers.

        Raises:
            ConfigError: If a COMPANION_* variable holds a value of the wrong type.
        """
        if self._resolved is not None and not force:
            return self._resolved

        merged = copy.deepcopy(DEFAULTS)
        origins: dict[str, str] = {}

        global_path = _global_config_path()
        project_path = _project_config_path()
        for layer, path in (("global", global_path), ("project", project_path)):
            data = _read_toml(path)
            if data:
                merged = _deep_merge(merged, data)
                origins.update(_file_origins(data, layer))
                logger.debug("Loaded %s config from %s", layer, path)

        for env_var, config_path in ENV_VAR_MAP.items():
            env_value = os.environ.get(env_var)
            if env_value is not None:
                _set_nested(merged, config_path, coerce_value(config_path, env_value))
                origins[config_path] = "env"
                logger.debug("Applied %s to %s", env_var, config_path)

        self._resolved = ResolvedConfig(
            data=merged,
            origins=origins,
            global_config_path=global_path if global_path.is_file() else None,
            project_config_path=project_path if project_path.is_file() else None,
        )
        return self._resolved

    def lookup(self, dotted_key: str) -> tuple[Any, str]:
        """Return a known key's resolved value and the layer that set it.

        Raises:
            ConfigError: If the key is not a known setting.
        """
        if dotted_key not in config_keys():
            raise ConfigError(
                f"Unknown config key '{dotted_key}'",
                context={"key": dotted_key, "available": ", ".join(config_keys())},
            )
        resolved = self.resolve()
        return resolved.get(dotted_key), resolved.origin(dotted_key)

    def get(self, dotted_key: str, default: Any = None) -> Any:
        """Get a resolved config value."""
        return self.resolve().get(dotted_key, default)

    def get_default_language(self) -> str:
        """Get the language hint used when neither a flag nor an extension gives one."""
        return self.get("analysis.default_language", "typescript")

    def get_default_view(self) -> str:
        """Get the view rendered when --view is omitted."""
        return self.get("ui.default_view", "summary")

    def get_analysis_section(self) -> dict:
        """Get the resolved [analysis] table."""
        return dict(self.get("analysis", {}))

    def set_global(self, dotted_key: str, value: Any) -> Any:
        """Set a value in the global config file and return the stored value."""
        value = coerce_value(dotted_key, value)
        path = _global_config_path()
        data = _read_toml(path)
        _set_nested(data, dotted_key, value)
        _write_toml(data, path)
        # Invalidate cache
        self._resolved = None
        logger.info("Set %s = %s in %s", dotted_key, value, path)
        return value

    def init_project_config(self, language: Optional[str] = None) -> Path:
        """Create a .companion.toml in the current directory.

        ``language`` seeds analysis.default_language; the rest are defaults.

        Raises:
            ConfigError: If the file already exists.
            UnsupportedLanguageError: If ``language`` is not a supported language.
        """
        path = _project_config_path()
        if path.exists():
            raise ConfigError(
                f"Project config already exists: {path}",
                context={"file": str(path)},
            )

        default_language = DEFAULTS["analysis"]["default_language"]
        if language:
            lang_id = parse_language(language)
            if lang_id is None:
                raise UnsupportedLanguageError(language, supported_languages())
            default_language = lang_id.value

        data = {
            "analysis": {
                "default_language": default_language,
                "comment_density_target": DEFAULTS["analysis"]["comment_density_target"],
                "complexity_high": DEFAULTS["analysis"]["complexity_high"],
            },
            "ui": {
                "default_view": DEFAULTS["ui"]["default_view"],
            },
        }
        _write_toml(data, path)
        self._resolved = None
        logger.info("Created project config: %s", path)
        return path

    def show(self) -> dict:
        """Return the resolved config as a dict with its source files."""
        resolved = self.resolve(force=True)
        return {
            "resolved": resolved.data,
            "origins": dict(resolved.origins),
            "sources": {
                "global_config": str(resolved.global_config_path) if resolved.global_config_path else None,
                "project_config": str(resolved.project_config_path) if resolved.project_config_path else None,
            },
        }

    def config_paths(self) -> dict[str, str]:
        """Return all config file locations and their existence status."""
        global_path = _global_config_path()
        project_path = _project_config_path()
        return {
            "global_config": f"{global_path} ({'exists' if global_path.is_file() else 'not found'})",
            "project_config": f"{project_path} ({'exists' if project_path.is_file() else 'not found'})",
        }


# Module-level singleton
_config_service: Optional[ConfigService] = None


def get_config_service() -> ConfigService:
    """Get or create the global ConfigService instance."""
    global _config_service
    if _config_service is None:
        _config_service = ConfigService()
    return _config_service


def reset_config_service() -> None:
    """Reset the global config service (useful for testing)."""
    global _config_service
    _config_service = None
