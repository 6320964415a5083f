"""Tests for hpc_term.utils.validators."""

from __future__ import annotations

import pytest

from hpc_term.utils.validators import (
    parse_time,
    format_time,
    parse_memory,
    parse_number_list,
    parse_process_count,
)


# ---------------------------------------------------------------------------
# parse_time
# ---------------------------------------------------------------------------

class TestParseTime:
    def test_seconds_only(self):
        assert parse_time("90") == 90

    def test_mm_ss(self):
        assert parse_time("05:30") == 5 * 60 + 30

    def test_hh_mm_ss(self):
        assert parse_time("02:30:45") == 2 * 3600 + 30 * 60 + 45

    def test_d_hh_mm_ss(self):
        assert parse_time("1-12:00:00") == 1 * 86400 + 12 * 3600

    def test_multi_day(self):
        assert parse_time("3-00:00:00") == 3 * 86400

    def test_whitespace_stripped(self):
        assert parse_time("  01:00:00  ") == 3600

    def test_empty_raises(self):
        with pytest.raises(ValueError, match="Empty"):
            parse_time("")

    def test_blank_raises(self):
        with pytest.raises(ValueError):
            parse_time("   ")

    def test_zero(self):
        assert parse_time("0") == 0
        assert parse_time("00:00:00") == 0


# ---------------------------------------------------------------------------
# format_time
# ---------------------------------------------------------------------------

class TestFormatTime:
    def test_zero(self):
        assert format_time(0) == "00:00:00"

    def test_one_hour(self):
        assert format_time(3600) == "01:00:00"

    def test_complex(self):
        assert format_time(2 * 3600 + 30 * 60 + 15) == "02:30:15"

    def test_with_days(self):
        assert format_time(86400 + 3600) == "1-01:00:00"

    def test_negative_raises(self):
        with pytest.raises(ValueError, match="Negative"):
            format_time(-1)

    def test_roundtrip(self):
        """parse_time(format_time(n)) should equal n."""
        for secs in [0, 1, 60, 3661, 86400, 90061]:
            assert parse_time(format_time(secs)) == secs


# ---------------------------------------------------------------------------
# parse_memory
# ---------------------------------------------------------------------------

class TestParseMemory:
    def test_bare_number(self):
        assert parse_memory("4096") == 4096

    def test_megabytes(self):
        assert parse_memory("512M") == 512

    def test_gigabytes(self):
        assert parse_memory("4G") == 4 * 1024

    def test_terabytes(self):
        assert parse_memory("1T") == 1024 * 1024

    def test_case_insensitive(self):
        assert parse_memory("2g") == 2 * 1024
        assert parse_memory("2GB") == 2 * 1024

    def test_invalid_raises(self):
        with pytest.raises(ValueError, match="Invalid memory"):
            parse_memory("lots")


# ---------------------------------------------------------------------------
# parse_memory edge cases
# ---------------------------------------------------------------------------

class TestParseMemoryEdgeCases:
    def test_kilobytes(self):
        # 1024 KB = 1 MB
        assert parse_memory("1024K") == 1

    def test_small_kilobytes_floor_to_1(self):
        # 100 KB < 1 MB, but min is 1
        assert parse_memory("100K") == 1

    def test_terabytes(self):
        assert parse_memory("2T") == 2 * 1024 * 1024

    def test_with_b_suffix(self):
        assert parse_memory("4GB") == 4 * 1024
        assert parse_memory("512MB") == 512

    def test_whitespace(self):
        assert parse_memory("  8G  ") == 8 * 1024

    def test_pbs_style_suffix(self):
        assert parse_memory("32gb") == 32 * 1024
        assert parse_memory("512mb") == 512


# ---------------------------------------------------------------------------
# parse_process_count
# ---------------------------------------------------------------------------

class TestParseProcessCount:
    def test_valid(self):
        assert parse_process_count("12") == 12

    def test_whitespace_stripped(self):
        assert parse_process_count("  64 ") == 64

    def test_empty_raises(self):
        with pytest.raises(ValueError, match="empty"):
            parse_process_count("   ")

    def test_zero_raises(self):
        with pytest.raises(ValueError, match="at least 1"):
            parse_process_count("0")

    def test_negative_raises(self):
        with pytest.raises(ValueError, match="Invalid process count"):
            parse_process_count("-4")

    def test_text_raises(self):
        with pytest.raises(ValueError, match="Invalid process count"):
            parse_process_count("many")


# ---------------------------------------------------------------------------
# parse_number_list
# ---------------------------------------------------------------------------

class TestParseNumberList:
    def test_whitespace_separated(self):
        assert parse_number_list("128 192 256") == (128, 192, 256)

    def test_comma_separated(self):
        assert parse_number_list("2,4, 8") == (2, 4, 8)

    def test_floats(self):
        assert parse_number_list("16.0 -1") == (16.0, -1)

    def test_ints_stay_ints(self):
        assert all(isinstance(v, int) for v in parse_number_list("1 2"))

    def test_empty_raises(self):
        with pytest.raises(ValueError, match="empty"):
            parse_number_list(" , ")

    def test_bad_token_raises(self):
        with pytest.raises(ValueError, match="Not a number: 'x'"):
            parse_number_list("1 x 3")
