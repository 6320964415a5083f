"""Process-grid (P × Q) advisor for HPL runs."""

from __future__ import annotations

import math
from dataclasses import dataclass
from functools import cmp_to_key
from typing import Iterator

NEARBY_RADIUS = 5
NEARBY_LIMIT = 3
RATIO_TOLERANCE = 0.01


@dataclass(frozen=True)
class GridSuggestion:
    """A P × Q factorization of process count *n* with ``p <= q``."""

    n: int
    p: int
    q: int

    @property
    def ratio(self) -> float:
        return self.p / self.q


def suggest_grid(n: int) -> tuple[int, int]:
    """Return ``(p, q)`` with ``p * q == n`` and ``p`` as close to √n as possible.

    Raises :class:`ValueError` when *n* is not a positive integer.
    """
    if n < 1:
        raise ValueError(f"Process count must be positive, got {n}")
    p = math.isqrt(n)
    while n % p:
        p -= 1
    return p, n // p


def _candidates(n: int) -> Iterator[GridSuggestion]:
    for candidate in range(max(1, n - NEARBY_RADIUS), n + NEARBY_RADIUS + 1):
        if candidate == n:
            continue
        p, q = suggest_grid(candidate)
        # 1 x N grids are only acceptable for tiny counts
        if p > 1 or candidate <= 3:
            yield GridSuggestion(n=candidate, p=p, q=q)


def nearby_suggestions(n: int) -> list[GridSuggestion]:
    """Rank squarer grids for process counts within ±5 of *n*.

    Entries are ordered by ``p/q`` descending.  Two ratios within
    ``RATIO_TOLERANCE`` of each other are treated as equal and the
    count closer to *n* wins.  At most ``NEARBY_LIMIT`` are returned.
    """

    def compare(a: GridSuggestion, b: GridSuggestion) -> float:
        if abs(abs(1 - b.ratio) - abs(1 - a.ratio)) < RATIO_TOLERANCE:
            return abs(a.n - n) - abs(b.n - n)
        return b.ratio - a.ratio

    ranked = sorted(_candidates(n), key=cmp_to_key(compare))
    return ranked[:NEARBY_LIMIT]
