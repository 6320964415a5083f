"""HPCTerm configuration — loads from ~/.config/hpcterm/config.toml."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

try:
    import tomllib  # type: ignore[import-not-found]
except ModuleNotFoundError:
    try:
        import tomli as tomllib  # type: ignore[no-redef,import-not-found]
    except ModuleNotFoundError:
        tomllib = None  # type: ignore[assignment]

LOGGER = logging.getLogger(__name__)


CONFIG_PATH = Path(os.environ.get(
    "HPCTERM_CONFIG",
    Path.home() / ".config" / "hpcterm" / "config.toml",
))


@dataclass
class HPCTermConfig:
    """Application configuration with sensible defaults."""

    # Delay before previews re-render after an edit (seconds)
    preview_debounce: float = 0.3

    # HPL helpers
    hpl_memory_ratio: float = 0.8
    hpl_n_multiple: int = 128
    hpl_process_count: int = 4
    hpl_memory_gb: float = 16.0


# (section, key, attribute, cast)
_KEYS = [
    ("ui", "preview_debounce", "preview_debounce", float),
    ("hpl", "memory_ratio", "hpl_memory_ratio", float),
    ("hpl", "n_multiple", "hpl_n_multiple", int),
    ("hpl", "process_count", "hpl_process_count", int),
    ("hpl", "memory_gb", "hpl_memory_gb", float),
]

_RANGES = [
    ("ui", "preview_debounce", "preview_debounce", lambda v: 0 <= v <= 10),
    ("hpl", "memory_ratio", "hpl_memory_ratio", lambda v: 0 < v <= 1),
    ("hpl", "n_multiple", "hpl_n_multiple", lambda v: v >= 1),
    ("hpl", "process_count", "hpl_process_count", lambda v: v >= 1),
    ("hpl", "memory_gb", "hpl_memory_gb", lambda v: v >= 0),
]


def load_config(path: Path | None = None) -> HPCTermConfig:
    """Load config from TOML file, falling back to defaults on any error."""
    cfg = HPCTermConfig()
    config_path = path or CONFIG_PATH
    if not config_path.is_file():
        return cfg
    if tomllib is None:
        return cfg

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except Exception as e:
        LOGGER.warning("Ignoring unreadable config %s: %s", config_path, e)
        return cfg

    for section, key, attr, cast in _KEYS:
        table = data.get(section, {})
        if not isinstance(table, dict) or key not in table:
            continue
        try:
            setattr(cfg, attr, cast(table[key]))
        except (ValueError, TypeError):
            LOGGER.warning("Ignoring invalid [%s] %s = %r", section, key, table[key])

    for section, key, attr, valid in _RANGES:
        value = getattr(cfg, attr)
        if not valid(value):
            default = getattr(HPCTermConfig, attr)
            LOGGER.warning(
                "[%s] %s = %r is out of range, using %r", section, key, value, default,
            )
            setattr(cfg, attr, default)

    return cfg
