"""Read-only help modal for HPL parameters."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Static, Button

from hpc_term.screens.param_catalog import OPTIONS, PARAM_BY_KEY


def help_text(key: str) -> tuple[str, str]:
    """Return ``(title, body)`` for the parameter *key*."""
    entry = PARAM_BY_KEY.get(key)
    if not entry:
        return key, "No documentation available."
    _, label, short_desc, long_desc = entry
    body = f"{short_desc}\n\n{long_desc}"
    if key in OPTIONS:
        codes = ", ".join(text for _, text in OPTIONS[key])
        body += f"\n\nAccepted codes: {codes}"
    return label, body


class ParamHelpScreen(ModalScreen[None]):
    """Read-only help screen for viewing a parameter's documentation."""

    BINDINGS = [
        Binding("escape", "close", "Close", show=False),
    ]

    DEFAULT_CSS = """
    ParamHelpScreen {
        align: center middle;
    }
    #help-dialog {
        width: 70;
        height: 60%;
        border: thick $accent;
        background: $surface;
        padding: 1 2;
    }
    #help-title {
        text-style: bold;
        color: $accent;
        margin-bottom: 1;
    }
    #help-body {
        height: 1fr;
        overflow-y: auto;
    }
    #btn-close-help {
        margin-top: 1;
        width: 100%;
    }
    """

    def __init__(self, key: str, **kwargs) -> None:
        super().__init__(**kwargs)
        self._key = key

    def compose(self) -> ComposeResult:
        title, body = help_text(self._key)
        with Vertical(id="help-dialog"):
            yield Static(title, id="help-title", markup=False)
            yield Static(body, id="help-body", markup=False)
            yield Button("Close", variant="primary", id="btn-close-help")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-close-help":
            self.dismiss(None)

    def action_close(self) -> None:
        self.dismiss(None)
