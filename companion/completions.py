"""Shell completion functions for the companion CLI."""
from __future__ import annotations


def complete_language(incomplete: str) -> list[str]:
    """Complete language identifiers and their aliases."""
    from companion.analyzers.languages import LANGUAGE_SPECS
    names: list[str] = []
    for lang_id, spec in LANGUAGE_SPECS.items():
        names.append(lang_id.value)
        names.extend(sorted(spec.aliases))
    return [n for n in names if n.startswith(incomplete.lower())]


def complete_view(incomplete: str) -> list[str]:
    """Complete result view names."""
    from companion.ui import VIEWS
    return [v for v in VIEWS if v.startswith(incomplete)]


def complete_format(incomplete: str) -> list[str]:
    """Complete export file suffixes."""
    from companion.core.export_service import EXPORT_FORMATS
    return [f for f in EXPORT_FORMATS if f.startswith(incomplete)]


def complete_config_key(incomplete: str) -> list[str]:
    """Complete dotted configuration keys."""
    from companion.core.config_service import config_keys
    return [k for k in config_keys() if k.startswith(incomplete)]
