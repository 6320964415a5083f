"""Import modal — paste an existing HPL.dat to load it into the editor."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Static, TextArea


class ImportScreen(ModalScreen[str | None]):
    """Returns the pasted text, or ``None`` on cancel."""

    BINDINGS = [Binding("escape", "cancel", "Cancel", show=True)]

    DEFAULT_CSS = """
    ImportScreen {
        align: center middle;
    }
    #import-dialog {
        width: 90%;
        height: 80%;
        border: thick $accent;
        background: $surface;
    }
    #import-title {
        dock: top;
        padding: 0 2;
        background: $primary-background;
        text-style: bold;
    }
    #import-text {
        height: 1fr;
    }
    #import-buttons {
        height: 3;
        align: center middle;
    }
    #import-buttons Button {
        margin: 0 1;
        min-width: 10;
    }
    """

    def __init__(self, text: str = "", **kwargs) -> None:
        super().__init__(**kwargs)
        self._text = text

    def compose(self) -> ComposeResult:
        with Vertical(id="import-dialog"):
            yield Static("Paste HPL.dat contents", id="import-title")
            yield TextArea(self._text, id="import-text", language=None)
            with Horizontal(id="import-buttons"):
                yield Button("Import", variant="success", id="btn-import-ok")
                yield Button("Cancel", variant="default", id="btn-import-cancel")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-import-ok":
            self.dismiss(self.query_one("#import-text", TextArea).text)
            return
        self.dismiss(None)

    def action_cancel(self) -> None:
        self.dismiss(None)
