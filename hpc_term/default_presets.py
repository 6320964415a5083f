"""Built-in HPL presets seeded on first run."""

from __future__ import annotations

from dataclasses import replace

from hpc_term.hpl import DEFAULT_CONFIG, GridConfig
from hpc_term.screens.presets import list_presets, save_preset

DEFAULT_PRESETS: dict[str, GridConfig] = {
    "HPL Defaults": DEFAULT_CONFIG,
    "Quick Smoke Test": replace(
        DEFAULT_CONFIG, ns=(5000,), nbs=(128,), ps=(1,), qs=(1,),
    ),
    "Single Node 16 Ranks": replace(
        DEFAULT_CONFIG, ns=(40000,), nbs=(192,), ps=(4,), qs=(4,),
    ),
    "Block Size Sweep": replace(
        DEFAULT_CONFIG, ns=(29000,), nbs=(128, 192, 256), ps=(2,), qs=(2,),
    ),
    "Panel Factorization Sweep": replace(
        DEFAULT_CONFIG, pfacts=(0, 1, 2), rfacts=(0, 1, 2), bcasts=(1, 2),
    ),
}


def ensure_default_presets() -> None:
    """Seed default presets if the presets directory is empty or missing.

    Only writes defaults when no user presets exist yet (first run).
    If the user later deletes a default preset, it stays deleted.
    """
    if list_presets():
        return
    for name, config in DEFAULT_PRESETS.items():
        save_preset(name, config)
