"""HPL.dat parameter catalog with detailed documentation.

Every field the HPL editor can produce has an entry here with a short
description and a detailed multi-line help text.  Coded fields also list
the codes HPL accepts so the editor can offer them as choices.

Descriptions follow the HPL tuning notes at
https://www.netlib.org/benchmark/hpl/tuning.html.
"""

from __future__ import annotations

# --------------------------------------------------------------------------
# Types
# --------------------------------------------------------------------------

ParamEntry = tuple[str, str, str, str]
"""(key, label, short_desc, long_desc)"""

# --------------------------------------------------------------------------
# Choices for coded fields
# --------------------------------------------------------------------------

FACTORIZATION_OPTIONS: list[tuple[int, str]] = [
    (0, "0 (Left)"),
    (1, "1 (Crout)"),
    (2, "2 (Right)"),
]

OPTIONS: dict[str, list[tuple[int, str]]] = {
    "out_device": [(6, "6 (stdout)"), (7, "7 (stderr)"), (8, "8 (file)")],
    "pmap": [(0, "0 (Row-major)"), (1, "1 (Column-major)")],
    "pfacts": FACTORIZATION_OPTIONS,
    "rfacts": FACTORIZATION_OPTIONS,
    "bcasts": [
        (0, "0 (1rg)"), (1, "1 (1rM)"), (2, "2 (2rg)"),
        (3, "3 (2rM)"), (4, "4 (Lng)"), (5, "5 (LnM)"),
    ],
    "swap": [(0, "0 (bin-exch)"), (1, "1 (long)"), (2, "2 (mix)")],
    "l1": [(0, "0 (transposed)"), (1, "1 (no-transposed)")],
    "u": [(0, "0 (transposed)"), (1, "1 (no-transposed)")],
    "equilibration": [(0, "0 (No)"), (1, "1 (Yes)")],
}

# --------------------------------------------------------------------------
# Full parameter catalog, in HPL.dat order
# --------------------------------------------------------------------------

ALL_PARAMS: list[ParamEntry] = [
    ("out_file", "Output file name", "File HPL writes results to",
     "Name of the output file.  Only used when the device out is set "
     "to 8 (file); otherwise it is ignored but must still be present.\n\n"
     "Example: HPL.out"),

    ("out_device", "Device out", "Where HPL writes its report",
     "  6 — standard output\n"
     "  7 — standard error\n"
     "  8 — the file named above"),

    ("ns", "Ns", "Problem sizes (N)",
     "Space-separated list of matrix orders to run.  The matrix "
     "occupies about 8·N² bytes spread across all processes, so the "
     "largest N that fits in roughly 80% of total memory usually gives "
     "the best result.\n\n"
     "Use the memory helper to compute a starting point.\n\n"
     "Example: 29000 40000"),

    ("nbs", "NBs", "Block sizes (NB)",
     "Space-separated list of block sizes used for data distribution "
     "and computational granularity.  Good values are usually in the "
     "range 32–256 and depend on the BLAS library.\n\n"
     "Example: 128 192 256"),

    ("pmap", "PMAP", "Process mapping",
     "Decides how MPI ranks are laid out on the P × Q grid.\n\n"
     "[0] Row-major: consecutive ranks fill a row first.\n"
     "+-------+-------+-------+\n"
     "| Rank0 | Rank1 | Rank2 |\n"
     "+-------+-------+-------+\n"
     "| Rank3 | Rank4 | Rank5 |\n"
     "+-------+-------+-------+\n\n"
     "[1] Column-major: consecutive ranks fill a column first.\n"
     "+-------+-------+-------+\n"
     "| Rank0 | Rank2 | Rank4 |\n"
     "+-------+-------+-------+\n"
     "| Rank1 | Rank3 | Rank5 |\n"
     "+-------+-------+-------+"),

    ("ps", "Ps", "Process grid rows (P)",
     "Rows of each process grid to try.  Must have as many entries "
     "as Qs; each P × Q pair is one grid.  P slightly smaller than Q "
     "is usually best.\n\n"
     "Use the grid helper to factor your process count."),

    ("qs", "Qs", "Process grid columns (Q)",
     "Columns of each process grid, paired positionally with Ps."),

    ("threshold", "Threshold", "Residual check threshold",
     "Scaled residuals above this value are reported as failures.  "
     "16.0 is the standard value; a negative value skips the checks."),

    ("pfacts", "PFACTs", "Panel factorization",
     "Panel factorization variants to try.\n\n"
     "[0] Left-looking: suits systems with low memory bandwidth.\n"
     "[1] Crout: suits networks with high latency.\n"
     "[2] Right-looking: cache friendly, usually fastest on modern "
     "systems."),

    ("nbmins", "NBMINs", "Recursive stopping criterion",
     "Panel width below which the recursion stops (>= 1).  "
     "Typical values: 4 or 8."),

    ("ndivs", "NDIVs", "Panels in recursion",
     "Number of sub-panels each panel is split into during recursion.  "
     "2 is the usual choice."),

    ("rfacts", "RFACTs", "Recursive panel factorization",
     "Factorization variant used inside the recursion.  Same codes as "
     "PFACTs; trying combinations of the two is a common sweep.\n\n"
     "[0] Left\n[1] Crout\n[2] Right"),

    ("bcasts", "BCASTs", "Panel broadcast algorithm",
     "Algorithm used to broadcast the panel along process rows.\n\n"
     "  0 1rg: increasing-ring\n"
     "  1 1rM: increasing-ring (modified)\n"
     "  2 2rg: increasing-2-ring\n"
     "  3 2rM: increasing-2-ring (modified)\n"
     "  4 Lng: long (bandwidth reducing)\n"
     "  5 LnM: long (modified)\n\n"
     "1rM or 2rg tend to perform well on most systems."),

    ("depths", "DEPTHs", "Lookahead depth",
     "  0: no lookahead\n"
     "  1: one panel ahead (most common)\n"
     " >=2: deeper lookahead\n\n"
     "Deeper lookahead hides communication latency at the cost of "
     "memory."),

    ("swap", "SWAP", "Swapping algorithm",
     "  0 bin-exch: binary exchange\n"
     "  1 long: spread-roll\n"
     "  2 mix: binary exchange below the threshold, spread-roll above"),

    ("swapping_threshold", "Swapping threshold", "Mixed swap threshold",
     "Column count at which SWAP=2 switches algorithms.  64 is typical."),

    ("l1", "L1", "L1 storage form",
     "  0 — transposed\n  1 — no-transposed"),

    ("u", "U", "U storage form",
     "  0 — transposed\n  1 — no-transposed"),

    ("equilibration", "Equilibration", "Equilibrate during swaps",
     "  0 — no\n  1 — yes\n\nOnly relevant when SWAP is 1 or 2."),

    ("alignment", "Memory alignment", "Alignment in doubles",
     "Memory alignment, in double-precision words, of allocated "
     "buffers (> 0).  Usually 4, 8 or 16."),
]

# --------------------------------------------------------------------------
# Lookup structures
# --------------------------------------------------------------------------

PARAM_BY_KEY: dict[str, ParamEntry] = {p[0]: p for p in ALL_PARAMS}
