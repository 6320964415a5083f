"""Rich formatting helpers for HPCTerm."""

from __future__ import annotations

from rich.markup import escape as escape_markup
from rich.style import Style
from rich.text import Text

from hpc_term.converters import SLURM_MARKER, UNRECOGNIZED_SUFFIX
from hpc_term.grid import GridSuggestion


def ratio_color(ratio: float) -> str:
    """Return a Rich colour name for a grid's ``p/q`` ratio (1.0 is square)."""
    if ratio >= 0.75:
        return "green"
    if ratio >= 0.4:
        return "yellow"
    return "red"


def ratio_style(ratio: float) -> Style:
    return Style(color=ratio_color(ratio))


def styled_suggestion(suggestion: GridSuggestion) -> Text:
    """``"16 → 4 x 4"`` coloured by squareness."""
    return Text(
        f"{suggestion.n} → {suggestion.p} x {suggestion.q}",
        style=ratio_style(suggestion.ratio),
    )


def styled_script(script: str) -> Text:
    """Highlight a translated Slurm script.

    Directive lines are bold; passthrough lines for unrecognized PBS
    flags are red so they stand out for manual review.
    """
    text = Text()
    lines = script.split("\n")
    for i, line in enumerate(lines):
        if line.endswith(UNRECOGNIZED_SUFFIX):
            text.append(line, style="bold red")
        elif line.startswith(SLURM_MARKER):
            text.append(line, style="bold cyan")
        elif line.lstrip().startswith("#"):
            text.append(line, style="dim")
        else:
            text.append(line)
        if i < len(lines) - 1:
            text.append("\n")
    return text

