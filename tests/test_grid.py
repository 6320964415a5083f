"""Tests for hpc_term.grid — P × Q process-grid advisor."""

from __future__ import annotations

import pytest

from hpc_term.grid import GridSuggestion, nearby_suggestions, suggest_grid


class TestSuggestGrid:
    def test_composite(self):
        assert suggest_grid(12) == (3, 4)

    def test_prime_is_degenerate(self):
        assert suggest_grid(17) == (1, 17)

    def test_perfect_square(self):
        assert suggest_grid(16) == (4, 4)
        assert suggest_grid(36) == (6, 6)

    def test_one(self):
        assert suggest_grid(1) == (1, 1)

    def test_large(self):
        assert suggest_grid(1024) == (32, 32)
        assert suggest_grid(96) == (8, 12)

    def test_invariants(self):
        for n in range(1, 200):
            p, q = suggest_grid(n)
            assert p * q == n
            assert p <= q

    def test_zero_raises(self):
        with pytest.raises(ValueError, match="positive"):
            suggest_grid(0)


class TestNearbySuggestions:
    def test_twelve(self):
        assert nearby_suggestions(12) == [
            GridSuggestion(n=9, p=3, q=3),
            GridSuggestion(n=16, p=4, q=4),
            GridSuggestion(n=15, p=3, q=5),
        ]

    def test_equal_ratio_prefers_closer_count(self):
        # 16 and 25 are both square; 16 is one closer to 20
        assert [s.n for s in nearby_suggestions(20)] == [16, 25, 24]

    def test_sorted_by_ratio(self):
        assert [s.n for s in nearby_suggestions(100)] == [99, 96, 104]

    def test_small_counts_allow_degenerate(self):
        assert [(s.n, s.p, s.q) for s in nearby_suggestions(1)] == [
            (4, 2, 2), (6, 2, 3), (2, 1, 2),
        ]

    def test_window_and_limit(self):
        result = nearby_suggestions(12)
        assert len(result) <= 3
        for s in result:
            assert 7 <= s.n <= 17
            assert s.n != 12
            assert s.p * s.q == s.n

    def test_drops_primes(self):
        assert all(s.p > 1 for s in nearby_suggestions(50))

    def test_deterministic(self):
        assert nearby_suggestions(37) == nearby_suggestions(37)

    def test_ratio(self):
        assert GridSuggestion(n=15, p=3, q=5).ratio == pytest.approx(0.6)
