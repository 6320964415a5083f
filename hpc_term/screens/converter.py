"""Converter tab — PBS/Torque script in, Slurm script out, with live preview."""

from __future__ import annotations

from pathlib import Path

from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical, Horizontal
from textual.timer import Timer
from textual.widgets import Static, Input, Button, TextArea, RichLog, Label

from hpc_term.converters import ResourceRequest, collect_resources, translate
from hpc_term.utils.formatting import styled_script
from hpc_term.utils.validators import format_time, parse_memory, parse_time


def describe_resources(request: ResourceRequest) -> str:
    """One-line summary of a resource request for the status bar."""
    parts: list[str] = []
    if request.node_count:
        parts.append(f"{request.node_count} node(s)")
    if request.processes_per_node:
        parts.append(f"{request.processes_per_node} task(s)/node")
    if request.total_tasks is not None:
        parts.append(f"{request.total_tasks} task(s) total")
    if request.wall_time:
        try:
            parts.append(f"walltime {format_time(parse_time(request.wall_time))}")
        except ValueError:
            parts.append(f"! walltime {request.wall_time!r} not understood")
    if request.memory:
        try:
            parts.append(f"mem {parse_memory(request.memory)} MB")
        except ValueError:
            parts.append(f"! mem {request.memory!r} not understood")
    if not parts:
        return "No resource requests found"
    return " · ".join(parts)


class ConverterTab(Vertical):
    """Paste or load a PBS script and get the equivalent Slurm script."""

    BINDINGS = [
        Binding("ctrl+o", "load_file", "Load File", show=True),
        Binding("ctrl+y", "copy_output", "Copy Slurm Script", show=True),
    ]

    DEFAULT_CSS = """
    ConverterTab {
        height: 1fr;
    }
    #converter-grid {
        height: 1fr;
        layout: grid;
        grid-size: 2 1;
        grid-columns: 1fr 1fr;
        grid-gutter: 1;
        padding: 1;
    }
    #converter-file-row {
        height: auto;
    }
    #input-pbs-path {
        width: 1fr;
    }
    #btn-load-pbs {
        width: auto;
    }
    #pbs-input {
        height: 1fr;
    }
    #slurm-preview {
        height: 1fr;
        border: solid $accent;
    }
    #btn-copy-slurm {
        margin-top: 1;
        width: 100%;
    }
    .form-section {
        text-style: bold italic;
        color: $accent;
    }
    """

    def __init__(self, debounce: float = 0.3, **kwargs) -> None:
        super().__init__(**kwargs)
        self._debounce = debounce
        self._preview_timer: Timer | None = None
        self.output = ""

    def compose(self) -> ComposeResult:
        with Horizontal(id="converter-grid"):
            with Vertical(id="converter-input-pane"):
                yield Label("PBS / Torque Script", classes="form-section")
                with Horizontal(id="converter-file-row"):
                    yield Input(placeholder="/path/to/job.pbs", id="input-pbs-path")
                    yield Button("Load", variant="primary", id="btn-load-pbs")
                yield TextArea(id="pbs-input", language=None, soft_wrap=False)
            with Vertical(id="converter-output-pane"):
                yield Label("Slurm Script", classes="form-section")
                yield RichLog(id="slurm-preview", wrap=False, highlight=False, markup=False)
                yield Button("Copy to Clipboard (Ctrl+Y)", variant="success", id="btn-copy-slurm")

        yield Static("Paste a PBS script on the left", id="converter-status", classes="status-bar")

    def on_mount(self) -> None:
        self._update_preview()

    # ---- Event handlers ---------------------------------------------------

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        self._schedule_preview()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        bid = event.button.id or ""
        if bid == "btn-load-pbs":
            self.action_load_file()
        elif bid == "btn-copy-slurm":
            self.action_copy_output()

    def _schedule_preview(self) -> None:
        """Debounce preview updates to avoid jank on rapid input."""
        if self._preview_timer is not None:
            self._preview_timer.stop()
        self._preview_timer = self.set_timer(self._debounce, self._update_preview)

    # ---- Public API -------------------------------------------------------

    def set_source(self, text: str) -> None:
        """Replace the PBS script and re-render immediately."""
        self.query_one("#pbs-input", TextArea).load_text(text)
        self._update_preview()

    # ---- Preview ----------------------------------------------------------

    def _update_preview(self) -> None:
        try:
            source = self.query_one("#pbs-input", TextArea).text
            preview = self.query_one("#slurm-preview", RichLog)
        except LookupError:
            return
        self.output = translate(source)
        preview.clear()
        if self.output:
            preview.write(styled_script(self.output))
            self._set_status(describe_resources(collect_resources(source)))
        else:
            self._set_status("Paste a PBS script on the left")

    def _set_status(self, msg: str) -> None:
        self.query_one("#converter-status", Static).update(Text(f" {msg}"))

    # ---- Actions ----------------------------------------------------------

    def action_load_file(self) -> None:
        raw = self.query_one("#input-pbs-path", Input).value.strip()
        if not raw:
            self._set_status("! Enter a script path first")
            return
        path = Path(raw).expanduser()
        try:
            text = path.read_text(errors="replace")
        except OSError as e:
            self._set_status(f"! Could not read {path}: {e.strerror or e}")
            return
        self.set_source(text)

    def action_copy_output(self) -> None:
        if not self.output:
            self._set_status("! Nothing to copy")
            return
        self.app.copy_to_clipboard(self.output)
        self._set_status("Slurm script copied to clipboard")
