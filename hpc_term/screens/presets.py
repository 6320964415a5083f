"""Named HPL presets — GridConfig records stored as JSON files.

Each preset is one ``<name>.json`` file holding the fields of a
:class:`~hpc_term.hpl.GridConfig` (see :func:`~hpc_term.hpl.config_to_dict`).
Unknown keys are ignored on load and missing keys take the HPL defaults,
so presets written by older versions keep loading.
"""

from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import fields
from pathlib import Path

from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, DataTable, Input, Static

from hpc_term.hpl import GridConfig, config_from_dict, config_to_dict, validate_config
from hpc_term.utils.formatting import escape_markup

LOGGER = logging.getLogger(__name__)

PRESETS_DIR = Path(os.environ.get(
    "HPCTERM_PRESETS_DIR",
    Path.home() / ".config" / "hpcterm" / "presets",
))

MAX_NAME_LENGTH = 64
_NAME_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_ .-]*$")
_FIELD_NAMES = frozenset(f.name for f in fields(GridConfig))


def check_preset_name(name: str) -> str:
    """Return *name* stripped, or raise :class:`ValueError` if it cannot be a file name."""
    name = name.strip()
    if not name:
        raise ValueError("Preset name must not be empty")
    if len(name) > MAX_NAME_LENGTH:
        raise ValueError(f"Preset name too long (max {MAX_NAME_LENGTH} chars)")
    if not _NAME_RE.match(name) or ".." in name:
        raise ValueError(
            f"Invalid preset name: {name!r} "
            "(letters, digits, spaces, '_', '-' and '.')"
        )
    return name


def _preset_path(name: str) -> Path:
    return PRESETS_DIR / f"{check_preset_name(name)}.json"


def list_presets() -> list[str]:
    """Names of the stored presets, sorted case-insensitively."""
    if not PRESETS_DIR.is_dir():
        return []
    return sorted((p.stem for p in PRESETS_DIR.glob("*.json")), key=str.lower)


def save_preset(name: str, config: GridConfig) -> Path:
    """Write *config* under *name*, replacing any preset of that name."""
    path = _preset_path(name)
    PRESETS_DIR.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(config_to_dict(config), indent=2) + "\n")
    LOGGER.debug("Saved preset %r to %s", name, path)
    return path


def load_preset(name: str) -> GridConfig | None:
    """Read the preset *name*.

    Returns ``None`` when the file is missing, is not JSON, or does not
    hold an object with at least one HPL.dat field.  A preset that loads
    but fails :func:`~hpc_term.hpl.validate_config` is still returned;
    the editor reports the problems.
    """
    path = _preset_path(name)
    try:
        data = json.loads(path.read_text())
    except FileNotFoundError:
        return None
    except (OSError, ValueError) as e:
        LOGGER.warning("Unreadable preset %s: %s", path, e)
        return None
    if not isinstance(data, dict) or not _FIELD_NAMES & data.keys():
        LOGGER.warning("Preset %s holds no HPL.dat fields", path)
        return None
    config = config_from_dict(data)
    for problem in validate_config(config):
        LOGGER.info("Preset %r: %s", name, problem)
    return config


def delete_preset(name: str) -> bool:
    """Remove the preset *name*; ``False`` if there was none."""
    path = _preset_path(name)
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    return True


def _grids(config: GridConfig) -> str:
    return " ".join(f"{p}x{q}" for p, q in zip(config.ps, config.qs))


def _values(items: tuple) -> str:
    return " ".join(str(v) for v in items)


# ---------------------------------------------------------------------------
# Modals
# ---------------------------------------------------------------------------

class SavePresetScreen(ModalScreen[str | None]):
    """Ask for a preset name; returns it, or ``None`` on cancel."""

    BINDINGS = [Binding("escape", "cancel", "Cancel", show=False)]

    DEFAULT_CSS = """
    SavePresetScreen {
        align: center middle;
    }
    #save-dialog {
        width: 56;
        height: auto;
        border: thick $accent;
        background: $surface;
        padding: 1 2;
    }
    #save-hint {
        height: 1;
        margin-bottom: 1;
        color: $text-muted;
    }
    #save-hint.-error {
        color: $error;
    }
    #save-buttons {
        height: 3;
        align: center middle;
    }
    #save-buttons Button {
        margin: 0 1;
    }
    """

    def compose(self) -> ComposeResult:
        with Vertical(id="save-dialog"):
            yield Static("Save HPL preset", id="save-title")
            yield Input(placeholder="Preset name", id="save-input")
            yield Static("", id="save-hint")
            with Horizontal(id="save-buttons"):
                yield Button("Save", variant="success", id="btn-save")
                yield Button("Cancel", variant="default", id="btn-save-cancel")

    def _hint(self, msg: str, error: bool = False) -> None:
        hint = self.query_one("#save-hint", Static)
        hint.update(Text(msg))
        hint.set_class(error, "-error")

    def on_input_changed(self, event: Input.Changed) -> None:
        raw = event.value.strip()
        if raw and raw in list_presets():
            self._hint(f"Replaces the existing preset '{raw}'")
        else:
            self._hint("")

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self._submit()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-save":
            self._submit()
        else:
            self.dismiss(None)

    def _submit(self) -> None:
        try:
            name = check_preset_name(self.query_one("#save-input", Input).value)
        except ValueError as e:
            self._hint(str(e), error=True)
            return
        self.dismiss(name)

    def action_cancel(self) -> None:
        self.dismiss(None)


class LoadPresetScreen(ModalScreen[str | None]):
    """Pick a preset from a table; returns its name, or ``None`` on cancel."""

    BINDINGS = [
        Binding("escape", "cancel", "Cancel", show=False),
        Binding("delete", "delete_preset", "Delete", show=True),
    ]

    DEFAULT_CSS = """
    LoadPresetScreen {
        align: center middle;
    }
    #load-dialog {
        width: 90;
        height: 70%;
        border: thick $accent;
        background: $surface;
        padding: 1 2;
    }
    #preset-table {
        height: 1fr;
    }
    #load-status {
        height: 1;
        color: $text-muted;
    }
    #load-buttons {
        height: 3;
        align: center middle;
    }
    #load-buttons Button {
        margin: 0 1;
    }
    """

    _COLUMNS = ("Name", "Ns", "NBs", "P x Q", "Check")

    def compose(self) -> ComposeResult:
        with Vertical(id="load-dialog"):
            yield Static("Load HPL preset", id="load-title")
            yield DataTable(id="preset-table", cursor_type="row")
            yield Static("", id="load-status")
            with Horizontal(id="load-buttons"):
                yield Button("Load", variant="success", id="btn-load")
                yield Button("Delete", variant="error", id="btn-delete")
                yield Button("Cancel", variant="default", id="btn-load-cancel")

    def on_mount(self) -> None:
        table = self.query_one("#preset-table", DataTable)
        for col in self._COLUMNS:
            table.add_column(col, key=col.lower())
        self._fill_table()

    def _fill_table(self) -> None:
        table = self.query_one("#preset-table", DataTable)
        table.clear()
        names = list_presets()
        for name in names:
            config = load_preset(name)
            if config is None:
                table.add_row(Text(name), "", "", "", Text("unreadable", style="red"), key=name)
                continue
            problems = validate_config(config)
            check = (
                Text("ok", style="green") if not problems
                else Text(problems[0], style="yellow")
            )
            table.add_row(
                Text(name),
                Text(_values(config.ns)),
                Text(_values(config.nbs)),
                Text(_grids(config)),
                check,
                key=name,
            )
        status = "No saved presets" if not names else f"{len(names)} preset(s)"
        self.query_one("#load-status", Static).update(Text(status))

    def _selected(self) -> str | None:
        table = self.query_one("#preset-table", DataTable)
        if table.row_count == 0:
            return None
        row_key = table.coordinate_to_cell_key((table.cursor_row, 0)).row_key
        return str(row_key.value)

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        self.dismiss(str(event.row_key.value))

    def on_button_pressed(self, event: Button.Pressed) -> None:
        bid = event.button.id
        if bid == "btn-load":
            name = self._selected()
            if name is not None:
                self.dismiss(name)
        elif bid == "btn-delete":
            self.action_delete_preset()
        else:
            self.dismiss(None)

    def action_delete_preset(self) -> None:
        name = self._selected()
        if name is None:
            return
        from hpc_term.screens.confirm import ConfirmScreen
        self.app.push_screen(
            ConfirmScreen(
                f"Delete preset [b]{escape_markup(name)}[/b]?",
                confirm_label="Delete",
            ),
            callback=lambda ok: self._delete(name) if ok else None,
        )

    def _delete(self, name: str) -> None:
        delete_preset(name)
        self._fill_table()

    def action_cancel(self) -> None:
        self.dismiss(None)
