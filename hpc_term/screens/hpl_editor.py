"""HPL tab — HPL.dat editor with grid / problem-size helpers and live preview."""

from __future__ import annotations

from pathlib import Path

from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical, Horizontal, VerticalScroll
from textual.events import Click
from textual.timer import Timer
from textual.widgets import Static, Input, Select, Button, RichLog, Label

from hpc_term.config import HPCTermConfig
from hpc_term.grid import nearby_suggestions
from hpc_term.hpl import (
    DEFAULT_CONFIG,
    LIST_FIELDS,
    GridConfig,
    apply_grid_suggestion,
    config_from_dict,
    generate_hpl_dat,
    parse_hpl_dat,
    suggest_n,
    validate_config,
)
from hpc_term.screens.param_catalog import ALL_PARAMS, OPTIONS
from hpc_term.utils.formatting import escape_markup, styled_suggestion
from hpc_term.utils.validators import parse_number_list, parse_process_count

# Coded scalars get a Select; everything else is a free-text Input.
SELECT_FIELDS: set[str] = {k for k in OPTIONS if k not in LIST_FIELDS}


def _format_value(value: object) -> str:
    if isinstance(value, tuple):
        return " ".join(str(v) for v in value)
    return "" if value is None else str(value)


class HplTab(Vertical):
    """Form-driven HPL.dat builder."""

    BINDINGS = [
        Binding("ctrl+g", "suggest_grid", "Suggest Grid", show=True),
        Binding("f2", "import", "Import HPL.dat", show=True),
        Binding("ctrl+t", "save_preset", "Save Preset", show=True),
        Binding("ctrl+l", "load_preset", "Load Preset", show=True),
    ]

    DEFAULT_CSS = """
    HplTab {
        height: 1fr;
    }
    #hpl-grid {
        height: 1fr;
        layout: grid;
        grid-size: 2 1;
        grid-columns: 1fr 1fr;
        grid-gutter: 1;
        padding: 1;
    }
    #hpl-form {
        height: 1fr;
        padding: 0 1;
    }
    #hpl-preview {
        height: 1fr;
        border: solid $accent;
    }
    .form-label-row {
        height: 1;
        margin-top: 1;
    }
    .form-label-text {
        text-style: bold;
        width: 1fr;
    }
    .help-link {
        width: auto;
        color: $accent;
        text-style: bold;
    }
    .form-section {
        margin-top: 1;
        text-style: bold italic;
        color: $accent;
    }
    #grid-nearby {
        height: auto;
        margin-top: 1;
    }
    #btn-suggest-grid, #btn-suggest-n, #btn-import, #btn-save-preset,
    #btn-load-preset, #btn-write-hpl {
        margin-top: 1;
        width: 100%;
    }
    Input.-invalid {
        border: tall $error;
    }
    """

    def __init__(self, config: HPCTermConfig | None = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self.config = config or HPCTermConfig()
        self._preview_timer: Timer | None = None
        self.output = ""

    def compose(self) -> ComposeResult:
        with Horizontal(id="hpl-grid"):
            with VerticalScroll(id="hpl-form"):
                # ---- Helpers ----
                yield Label("── Process Grid ──", classes="form-section")
                yield Label("Total MPI processes")
                yield Input(value=str(self.config.hpl_process_count), id="input-procs")
                yield Button("Suggest P x Q (Ctrl+G)", variant="primary", id="btn-suggest-grid")
                yield Static("", id="grid-nearby")

                yield Label("── Problem Size ──", classes="form-section")
                yield Label("Total memory across nodes (GB)")
                yield Input(value=f"{self.config.hpl_memory_gb:g}", id="input-memory-gb")
                yield Button("Suggest N", variant="primary", id="btn-suggest-n")

                # ---- HPL.dat fields ----
                yield Label("── HPL.dat ──", classes="form-section")
                for key, label, _, _ in ALL_PARAMS:
                    yield self._label_row(label, key)
                    default = getattr(DEFAULT_CONFIG, key)
                    if key in SELECT_FIELDS:
                        yield Select(
                            [(text, code) for code, text in OPTIONS[key]],
                            value=default, allow_blank=False, id=f"hpl-{key}",
                        )
                    else:
                        yield Input(value=_format_value(default), id=f"hpl-{key}")

                # ---- Files / presets ----
                yield Label("── Files ──", classes="form-section")
                yield Button("Import HPL.dat (F2)", variant="default", id="btn-import")
                yield Input(value="HPL.dat", id="input-hpl-path")
                yield Button("Write HPL.dat", variant="success", id="btn-write-hpl")
                yield Button("Save as Preset (Ctrl+T)", variant="primary", id="btn-save-preset")
                yield Button("Load Preset (Ctrl+L)", variant="default", id="btn-load-preset")

            with Vertical(id="hpl-preview-pane"):
                yield Label("HPL.dat", classes="form-section")
                yield RichLog(id="hpl-preview", wrap=False, highlight=True, markup=False)

        yield Static("Edit the fields to build HPL.dat", id="hpl-status", classes="status-bar")

    @staticmethod
    def _label_row(text: str, param_key: str) -> Horizontal:
        """Create a single-line label with a clickable [?] help indicator."""
        row = Horizontal(classes="form-label-row")
        row.compose_add_child(Static(text, classes="form-label-text"))
        row.compose_add_child(Static("[?]", classes="help-link", id=f"help-{param_key}", markup=False))
        return row

    def on_mount(self) -> None:
        self._update_preview()
        self._update_nearby()

    # ---- Event handlers ---------------------------------------------------

    def on_input_changed(self, event: Input.Changed) -> None:
        wid = event.input.id or ""
        if wid == "input-procs":
            self._update_nearby()
            self._schedule_preview()
        elif wid.startswith("hpl-"):
            self._schedule_preview()

    def on_select_changed(self, event: Select.Changed) -> None:
        self._schedule_preview()

    def on_click(self, event: Click) -> None:
        widget = event.widget
        if widget is None:
            return
        wid = widget.id or ""
        if wid.startswith("help-"):
            from hpc_term.screens.help_screen import ParamHelpScreen
            self.app.push_screen(ParamHelpScreen(wid[5:]))

    def on_button_pressed(self, event: Button.Pressed) -> None:
        bid = event.button.id or ""
        if bid == "btn-suggest-grid":
            self.action_suggest_grid()
        elif bid == "btn-suggest-n":
            self.action_suggest_n()
        elif bid == "btn-import":
            self.action_import()
        elif bid == "btn-write-hpl":
            self.action_write_file()
        elif bid == "btn-save-preset":
            self.action_save_preset()
        elif bid == "btn-load-preset":
            self.action_load_preset()

    def _schedule_preview(self) -> None:
        """Debounce preview updates to avoid jank on rapid input."""
        if self._preview_timer is not None:
            self._preview_timer.stop()
        self._preview_timer = self.set_timer(
            self.config.preview_debounce, self._update_preview,
        )

    # ---- Form <-> GridConfig ----------------------------------------------

    def _input(self, key: str) -> Input:
        return self.query_one(f"#hpl-{key}", Input)

    def get_config(self) -> GridConfig:
        """Read the form into a :class:`GridConfig`.

        Raises :class:`ValueError` naming the first field that does not
        parse.
        """
        values: dict[str, object] = {}
        for key, label, _, _ in ALL_PARAMS:
            if key in SELECT_FIELDS:
                value = self.query_one(f"#hpl-{key}", Select).value
                if value is None or value is Select.BLANK:
                    raise ValueError(f"{label}: select a value")
                values[key] = value
                continue
            raw = self._input(key).value.strip()
            if key == "out_file":
                values[key] = raw.split()[0] if raw else None
                continue
            try:
                numbers = parse_number_list(raw)
            except ValueError as e:
                raise ValueError(f"{label}: {e}") from None
            if key in LIST_FIELDS:
                values[key] = numbers
            elif len(numbers) != 1:
                raise ValueError(f"{label}: expected a single number")
            else:
                values[key] = numbers[0]
        return config_from_dict(values)

    def set_config(self, config: GridConfig) -> None:
        """Fill the form from *config* and re-render."""
        skipped: list[str] = []
        for key, label, _, _ in ALL_PARAMS:
            value = getattr(config, key)
            if key in SELECT_FIELDS:
                codes = {code for code, _ in OPTIONS[key]}
                if value in codes:
                    self.query_one(f"#hpl-{key}", Select).value = value
                else:
                    skipped.append(label)
                continue
            self._input(key).value = _format_value(value)
        self._update_preview()
        if skipped:
            self._set_status(f"! Unsupported codes kept at previous value: {', '.join(skipped)}")

    # ---- Preview ----------------------------------------------------------

    def _process_count(self) -> int | None:
        try:
            return parse_process_count(self.query_one("#input-procs", Input).value)
        except ValueError:
            return None

    def _update_preview(self) -> None:
        try:
            preview = self.query_one("#hpl-preview", RichLog)
        except LookupError:
            return
        try:
            config = self.get_config()
        except ValueError as e:
            self._set_status(f"! {e}")
            return
        self.output = generate_hpl_dat(config)
        preview.clear()
        preview.write(self.output)
        problems = validate_config(config, self._process_count())
        if problems:
            self._set_status(f"! {problems[0]}")
        else:
            self._set_status("HPL.dat is ready")

    def _update_nearby(self) -> None:
        nearby = self.query_one("#grid-nearby", Static)
        count = self._process_count()
        if count is None:
            nearby.update("")
            return
        suggestions = nearby_suggestions(count)
        if not suggestions:
            nearby.update("No nearby process counts give a squarer grid")
            return
        text = Text("Nearby: ")
        for i, suggestion in enumerate(suggestions):
            if i:
                text.append(", ")
            text.append_text(styled_suggestion(suggestion))
        nearby.update(text)

    def _set_status(self, msg: str) -> None:
        self.query_one("#hpl-status", Static).update(Text(f" {msg}"))

    # ---- Helpers ----------------------------------------------------------

    def action_suggest_grid(self) -> None:
        try:
            count = parse_process_count(self.query_one("#input-procs", Input).value)
            config = self.get_config()
        except ValueError as e:
            self._set_status(f"! {e}")
            return
        config = apply_grid_suggestion(config, count)
        self._input("ps").value = _format_value(config.ps)
        self._input("qs").value = _format_value(config.qs)
        self._update_nearby()
        self._update_preview()
        self._set_status(f"{count} processes → P={config.ps[0]}, Q={config.qs[0]}")

    def action_suggest_n(self) -> None:
        raw = self.query_one("#input-memory-gb", Input).value.strip()
        try:
            memory_gb = float(raw)
            n = suggest_n(
                memory_gb,
                ratio=self.config.hpl_memory_ratio,
                multiple=self.config.hpl_n_multiple,
            )
        except ValueError:
            self._set_status(f"! Invalid memory size: {raw!r}")
            return
        self._input("ns").value = str(n)
        self._update_preview()
        self._set_status(f"N={n} uses about {self.config.hpl_memory_ratio:.0%} of {memory_gb:g} GB")

    # ---- Import / export --------------------------------------------------

    def action_import(self) -> None:
        from hpc_term.screens.import_screen import ImportScreen
        self.app.push_screen(ImportScreen(), callback=self.import_text)

    def import_text(self, text: str | None) -> None:
        if text is None:
            return
        config = parse_hpl_dat(text)
        if config is None:
            self._set_status("! Not an HPL.dat file (need at least 3 non-blank lines)")
            return
        self.set_config(config)

    def action_write_file(self) -> None:
        raw = self.query_one("#input-hpl-path", Input).value.strip()
        if not raw:
            self._set_status("! Enter an output path first")
            return
        path = Path(raw).expanduser()
        if path.exists():
            from hpc_term.screens.confirm import ConfirmScreen
            self.app.push_screen(
                ConfirmScreen(
                    f"Overwrite [b]{escape_markup(str(path))}[/b]?",
                    confirm_label="Overwrite",
                ),
                callback=lambda ok: self._write_file(path) if ok else None,
            )
        else:
            self._write_file(path)

    def _write_file(self, path: Path) -> None:
        self._update_preview()
        try:
            path.write_text(self.output + "\n")
        except OSError as e:
            self._set_status(f"! Could not write {path}: {e.strerror or e}")
            return
        self._set_status(f"Wrote {path}")

    # ---- Presets ----------------------------------------------------------

    def action_save_preset(self) -> None:
        from hpc_term.screens.presets import SavePresetScreen
        self.app.push_screen(SavePresetScreen(), callback=self._on_save_preset)

    def _on_save_preset(self, name: str | None) -> None:
        if not name:
            return
        from hpc_term.screens.presets import save_preset
        try:
            save_preset(name, self.get_config())
        except (ValueError, OSError) as e:
            self._set_status(f"! {e}")
            return
        self._set_status(f"Preset '{name}' saved")

    def action_load_preset(self) -> None:
        from hpc_term.screens.presets import LoadPresetScreen
        self.app.push_screen(LoadPresetScreen(), callback=self._on_load_preset)

    def _on_load_preset(self, name: str | None) -> None:
        if not name:
            return
        from hpc_term.screens.presets import load_preset
        config = load_preset(name)
        if config is not None:
            self.set_config(config)
            self._set_status(f"Preset '{name}' loaded")
        else:
            self._set_status(f"! Preset '{name}' could not be loaded")
