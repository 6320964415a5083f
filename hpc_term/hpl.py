"""HPL.dat parser and generator.

HPL's input file is strictly positional: after two header lines every
field occupies a fixed slot, and the text after the value on each line
is only a label.  Lists are written as a count line followed by a values
line; the process grid uses a single count line for both the Ps and the
Qs line.

:func:`parse_hpl_dat` walks the lines with a cursor in schema order and
never raises.  :func:`generate_hpl_dat` writes the same schema back with
canonical labels, so ``parse_hpl_dat(generate_hpl_dat(c)) == c``.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Union

from hpc_term.grid import suggest_grid

LOGGER = logging.getLogger(__name__)

Value = Union[int, float, str]

HEADER: tuple[str, str] = (
    "HPLinpack benchmark input file",
    "Innovative Computing Laboratory, University of Tennessee",
)

DEFAULT_OUT_FILE = "HPL.out"


@dataclass(frozen=True)
class GridConfig:
    """One HPL.dat file.  List fields are tuples so the record is hashable."""

    out_file: str | None = DEFAULT_OUT_FILE
    out_device: Value | None = 6
    ns: tuple[Value, ...] = (29000,)
    nbs: tuple[Value, ...] = (128,)
    pmap: Value | None = 0
    ps: tuple[Value, ...] = (2,)
    qs: tuple[Value, ...] = (2,)
    threshold: Value | None = 16.0
    pfacts: tuple[Value, ...] = (2,)
    nbmins: tuple[Value, ...] = (4,)
    ndivs: tuple[Value, ...] = (2,)
    rfacts: tuple[Value, ...] = (1,)
    bcasts: tuple[Value, ...] = (1,)
    depths: tuple[Value, ...] = (1,)
    swap: Value | None = 2
    swapping_threshold: Value | None = 64
    l1: Value | None = 0
    u: Value | None = 0
    equilibration: Value | None = 1
    alignment: Value | None = 8


DEFAULT_CONFIG = GridConfig()


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class _Scalar:
    key: str
    comment: str


@dataclass(frozen=True)
class _List:
    key: str
    count_comment: str
    values_comment: str


@dataclass(frozen=True)
class _Grid:
    count_comment: str
    ps_comment: str
    qs_comment: str


_SCHEMA: tuple[_Scalar | _List | _Grid, ...] = (
    _Scalar("out_file", "output file name (if any)"),
    _Scalar("out_device", "device out (6=stdout,7=stderr,file)"),
    _List("ns", "# of problems sizes (N)", "Ns"),
    _List("nbs", "# of NBs", "NBs"),
    _Scalar("pmap", "PMAP process mapping (0=Row-,1=Column-major)"),
    _Grid("# of process grids (P x Q)", "Ps", "Qs"),
    _Scalar("threshold", "threshold"),
    _List("pfacts", "# of panel fact", "PFACTs (0=left, 1=Crout, 2=Right)"),
    _List("nbmins", "# of recursive stopping criterium", "NBMINs (>= 1)"),
    _List("ndivs", "# of panels in recursion", "NDIVs"),
    _List("rfacts", "# of recursive panel fact.", "RFACTs (0=left, 1=Crout, 2=Right)"),
    _List("bcasts", "# of broadcast", "BCASTs (0=1rg,1=1rM,2=2rg,3=2rM,4=Lng,5=LnM)"),
    _List("depths", "# of lookahead depth", "DEPTHs (>=0)"),
    _Scalar("swap", "SWAP (0=bin-exch,1=long,2=mix)"),
    _Scalar("swapping_threshold", "swapping threshold"),
    _Scalar("l1", "L1 in (0=transposed,1=no-transposed) form"),
    _Scalar("u", "U  in (0=transposed,1=no-transposed) form"),
    _Scalar("equilibration", "Equilibration (0=no,1=yes)"),
    _Scalar("alignment", "memory alignment in double (> 0)"),
)

LIST_FIELDS: tuple[str, ...] = (
    "ns", "nbs", "ps", "qs", "pfacts", "nbmins", "ndivs", "rfacts", "bcasts", "depths",
)

_INT_RE = re.compile(r"^[+-]?\d+$")
_FLOAT_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")
_LEADING_INT_RE = re.compile(r"^[+-]?\d+")


def _coerce(token: str) -> Value:
    """Convert *token* to int or float when it looks numeric."""
    if _INT_RE.match(token):
        return int(token)
    if _FLOAT_RE.match(token):
        return float(token)
    return token


def _to_number(token: str | None) -> Value | None:
    if token is None:
        return None
    value = _coerce(token)
    if isinstance(value, str):
        LOGGER.debug("Non-numeric HPL scalar %r", token)
        return math.nan
    return value


def _parse_count(token: str | None) -> int:
    if token is None:
        return 0
    match = _LEADING_INT_RE.match(token)
    if not match:
        return 0
    return max(0, int(match.group(0)))


class _FieldCursor:
    """Sequential reader over the non-blank lines of an HPL.dat body."""

    def __init__(self, lines: list[str]) -> None:
        self._lines = lines
        self._pos = 0

    def first_token(self) -> str | None:
        if self._pos >= len(self._lines):
            return None
        line = self._lines[self._pos]
        self._pos += 1
        return line.split()[0]

    def values(self, count: int) -> tuple[Value, ...]:
        if self._pos >= len(self._lines):
            return ()
        line = self._lines[self._pos]
        self._pos += 1
        return tuple(_coerce(t) for t in line.split()[:count])

    def list_field(self) -> tuple[Value, ...]:
        count = _parse_count(self.first_token())
        return self.values(count)


# ---------------------------------------------------------------------------
# Parse / generate
# ---------------------------------------------------------------------------

def parse_hpl_dat(text: str | None) -> GridConfig | None:
    """Parse HPL.dat *text*; ``None`` when there are fewer than 3 usable lines."""
    if not text:
        return None
    lines = [line.strip() for line in text.split("\n")]
    lines = [line for line in lines if line]
    if len(lines) < 3:
        LOGGER.debug("HPL.dat input too short (%d non-blank lines)", len(lines))
        return None

    cursor = _FieldCursor(lines[len(HEADER):])
    values: dict[str, Any] = {}
    for entry in _SCHEMA:
        if isinstance(entry, _Grid):
            count = _parse_count(cursor.first_token())
            values["ps"] = cursor.values(count)
            values["qs"] = cursor.values(count)
        elif isinstance(entry, _List):
            values[entry.key] = cursor.list_field()
        elif entry.key == "out_file":
            values[entry.key] = cursor.first_token()
        else:
            values[entry.key] = _to_number(cursor.first_token())
    return GridConfig(**values)


def _line(value: str, comment: str) -> str:
    return f"{value:<12} {comment}"


def _join(values: tuple[Value, ...]) -> str:
    return " ".join(str(v) for v in values)


def generate_hpl_dat(config: GridConfig) -> str:
    """Render *config* as HPL.dat text.

    ``None`` scalars fall back to the HPL defaults.  List fields must be
    present.
    """
    lines = list(HEADER)
    for entry in _SCHEMA:
        if isinstance(entry, _Grid):
            lines.append(_line(str(len(config.ps)), entry.count_comment))
            lines.append(_line(_join(config.ps), entry.ps_comment))
            lines.append(_line(_join(config.qs), entry.qs_comment))
        elif isinstance(entry, _List):
            items = getattr(config, entry.key)
            lines.append(_line(str(len(items)), entry.count_comment))
            lines.append(_line(_join(items), entry.values_comment))
        elif entry.key == "out_file":
            lines.append(_line(config.out_file or DEFAULT_OUT_FILE, entry.comment))
        else:
            value = getattr(config, entry.key)
            if value is None:
                value = getattr(DEFAULT_CONFIG, entry.key)
            lines.append(_line(str(value), entry.comment))
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def suggest_n(memory_gb: float, ratio: float = 0.8, multiple: int = 128) -> int:
    """Largest problem size whose N×N double matrix fits in *ratio* of memory.

    The result is rounded down to a multiple of *multiple* (a common NB).
    """
    if memory_gb < 0:
        raise ValueError(f"Memory must not be negative, got {memory_gb}")
    if not 0 < ratio <= 1:
        raise ValueError(f"Memory ratio must be in (0, 1], got {ratio}")
    usable_bytes = memory_gb * 1024 ** 3 * ratio
    n = math.floor(math.sqrt(usable_bytes / 8))
    return n // multiple * multiple


def apply_grid_suggestion(config: GridConfig, process_count: int) -> GridConfig:
    """Return a copy of *config* with a single near-square P × Q grid."""
    p, q = suggest_grid(process_count)
    return replace(config, ps=(p,), qs=(q,))


def config_to_dict(config: GridConfig) -> dict[str, Any]:
    """JSON-friendly dict (tuples become lists)."""
    return {
        key: list(value) if isinstance(value, tuple) else value
        for key, value in asdict(config).items()
    }


def config_from_dict(data: dict[str, Any]) -> GridConfig:
    """Build a config from a dict; unknown keys are ignored, missing keys default."""
    known = {f.name for f in fields(GridConfig)}
    values: dict[str, Any] = {}
    for key, value in data.items():
        if key not in known:
            continue
        if key in LIST_FIELDS:
            if isinstance(value, (list, tuple)):
                value = tuple(value)
            else:
                value = (value,)
        values[key] = value
    return GridConfig(**values)


_LABELS: dict[str, str] = {
    "out_device": "Device out",
    "ns": "Ns",
    "nbs": "NBs",
    "pmap": "PMAP",
    "ps": "Ps",
    "qs": "Qs",
    "threshold": "Threshold",
    "pfacts": "PFACTs",
    "nbmins": "NBMINs",
    "ndivs": "NDIVs",
    "rfacts": "RFACTs",
    "bcasts": "BCASTs",
    "depths": "DEPTHs",
    "swap": "SWAP",
    "swapping_threshold": "Swapping threshold",
    "l1": "L1",
    "u": "U",
    "equilibration": "Equilibration",
    "alignment": "Memory alignment",
}

_POSITIVE_LISTS = ("ns", "nbs", "ps", "qs", "nbmins", "ndivs")


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and not math.isnan(value)
    )


def validate_config(config: GridConfig, process_count: int | None = None) -> list[str]:
    """Return human-readable problems with *config* (empty when it looks sane)."""
    problems: list[str] = []
    for key in LIST_FIELDS:
        items = getattr(config, key)
        label = _LABELS[key]
        if not items:
            problems.append(f"{label} must not be empty")
            continue
        bad = [v for v in items if not _is_number(v)]
        if bad:
            problems.append(f"{label} contains non-numeric value {bad[0]!r}")
        elif key in _POSITIVE_LISTS and any(v <= 0 for v in items):
            problems.append(f"{label} values must be positive")

    if len(config.ps) != len(config.qs):
        problems.append(
            f"Ps and Qs must have the same length ({len(config.ps)} vs {len(config.qs)})"
        )

    for key, label in _LABELS.items():
        if key in LIST_FIELDS:
            continue
        value = getattr(config, key)
        if value is not None and not _is_number(value):
            problems.append(f"{label} is not a number")

    if process_count is not None:
        for p, q in zip(config.ps, config.qs):
            if _is_number(p) and _is_number(q) and p * q > process_count:
                problems.append(
                    f"Grid {p}x{q} needs {p * q} processes, "
                    f"only {process_count} available"
                )
    return problems
