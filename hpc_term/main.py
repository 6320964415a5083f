"""HPCTerm — main application entry point."""

from __future__ import annotations

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Header, Footer, TabbedContent, TabPane

from hpc_term.config import HPCTermConfig, load_config
from hpc_term.screens.converter import ConverterTab
from hpc_term.screens.hpl_editor import HplTab


class HPCTermApp(App):
    """A terminal front end for PBS→Slurm conversion and HPL.dat building."""

    TITLE = "HPCTerm"
    SUB_TITLE = "PBS → Slurm · HPL.dat"

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit", show=True, priority=True),
        Binding("f5", "switch_tab('converter')", "Converter", show=True),
        Binding("f6", "switch_tab('hpl')", "HPL", show=True),
        Binding("ctrl+r", "reload_config", "Reload Config", show=False),
    ]

    def __init__(
        self,
        config: HPCTermConfig | None = None,
        initial_script: str | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.config = config or HPCTermConfig()
        self._initial_script = initial_script

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with TabbedContent(id="tabs"):
            with TabPane("Converter", id="converter"):
                yield ConverterTab(debounce=self.config.preview_debounce)
            with TabPane("HPL", id="hpl"):
                yield HplTab(config=self.config)
        yield Footer()

    def on_mount(self) -> None:
        if self._initial_script:
            self.query_one(ConverterTab).set_source(self._initial_script)

    def action_reload_config(self) -> None:
        """Reload configuration from disk."""
        from dataclasses import fields
        new_cfg = load_config()
        for f in fields(new_cfg):
            setattr(self.config, f.name, getattr(new_cfg, f.name))
        self.log.info("Configuration reloaded", config=self.config)
        self.notify("Configuration reloaded", severity="information")

    def action_switch_tab(self, tab_id: str) -> None:
        self.query_one("#tabs", TabbedContent).active = tab_id


def print_grid_report(n: int) -> None:
    """Print the P x Q suggestion for *n* and nearby alternatives."""
    from rich.console import Console
    from rich.table import Table

    from hpc_term.grid import nearby_suggestions, suggest_grid
    from hpc_term.utils.formatting import ratio_style

    console = Console()
    p, q = suggest_grid(n)
    console.print(f"[b]{n}[/b] processes → P=[b]{p}[/b], Q=[b]{q}[/b]  (ratio {p / q:.2f})")

    suggestions = nearby_suggestions(n)
    if not suggestions:
        return
    table = Table(title="Nearby process counts")
    for column in ("processes", "P", "Q", "ratio"):
        table.add_column(column, justify="right")
    for s in suggestions:
        table.add_row(
            str(s.n), str(s.p), str(s.q), f"{s.ratio:.2f}",
            style=ratio_style(s.ratio),
        )
    console.print(table)


def run(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    import argparse
    import sys
    from pathlib import Path

    from hpc_term import __version__

    parser = argparse.ArgumentParser(
        description="HPCTerm — PBS→Slurm converter and HPL.dat builder",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--convert", metavar="PATH",
        help="Print the Slurm translation of a PBS script ('-' for stdin) and exit",
    )
    parser.add_argument(
        "--grid", metavar="N", type=int,
        help="Print the P x Q grid suggestion for N processes and exit",
    )
    parser.add_argument(
        "--open", metavar="PATH",
        help="Start the TUI with a PBS script loaded in the converter",
    )
    args = parser.parse_args(argv)

    if args.grid is not None:
        if args.grid < 1:
            parser.error("--grid needs a positive process count")
        print_grid_report(args.grid)
        return

    if args.convert:
        from hpc_term.converters import translate
        try:
            if args.convert == "-":
                source = sys.stdin.read()
            else:
                source = Path(args.convert).read_text()
        except OSError as e:
            parser.exit(1, f"error: cannot read {args.convert}: {e.strerror or e}\n")
        print(translate(source))
        return

    initial_script = None
    if args.open:
        try:
            initial_script = Path(args.open).read_text()
        except OSError as e:
            parser.exit(1, f"error: cannot read {args.open}: {e.strerror or e}\n")

    cfg = load_config()

    from hpc_term.default_presets import ensure_default_presets
    ensure_default_presets()

    HPCTermApp(config=cfg, initial_script=initial_script).run()


if __name__ == "__main__":
    run()
