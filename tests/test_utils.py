"""Tests for size, duration and timestamp helpers."""

from datetime import UTC, datetime, timedelta

import pytest

from docklean.core.exceptions import InvalidArgumentError
from docklean.utils import (
    filter_until_timestamp,
    format_bytes,
    parse_duration,
    parse_size,
    parse_size_limit,
    parse_timestamp,
)


class TestParseSize:
    """Test suite for lenient Docker size parsing."""

    @pytest.mark.parametrize(
        "size_str,expected",
        [
            ("512 B", 512),
            ("10 kB", 10_000),
            ("150 MB", 150_000_000),
            ("2 GB", 2_000_000_000),
            ("1 TB", 1_000_000_000_000),
        ],
    )
    def test_units_are_decimal(self, size_str, expected):
        assert parse_size(size_str) == expected

    def test_case_insensitive_units(self):
        assert parse_size("1 gb") == parse_size("1 GB") == 1_000_000_000
        assert parse_size("100 KB") == parse_size("100 kB")

    def test_decimal_values(self):
        assert parse_size("1.5 GB") == 1_500_000_000
        assert parse_size("0.5MB") == 500_000

    def test_whitespace_variations(self):
        assert parse_size("  1.2GB  ") == 1_200_000_000
        assert parse_size("1.2   GB") == 1_200_000_000

    def test_rounds_to_nearest_byte(self):
        assert parse_size("1.23456 MB") == 1_234_560

    def test_docker_df_reclaimable_column(self):
        """system df reports 'size (percent)'."""
        assert parse_size("980.2MB (2%)") == 980_200_000

    @pytest.mark.parametrize("value", ["", None, "invalid", "100", "abc MB", ". MB", "1.5 GiB"])
    def test_unparseable_returns_zero(self, value):
        assert parse_size(value) == 0

    def test_zero_bytes(self):
        assert parse_size("0 B") == 0
        assert parse_size("0B") == 0

    def test_monotonic_for_fixed_unit(self):
        sizes = [parse_size(f"{n} MB") for n in (1, 2, 10, 99.5, 100)]
        assert sizes == sorted(sizes)


class TestFormatBytes:
    """Test suite for human-readable byte formatting."""

    @pytest.mark.parametrize(
        "size_bytes,expected",
        [
            (512, "512 B"),
            (1, "1 B"),
            (999, "999 B"),
            (1000, "1.0 KB"),
            (1500, "1.5 KB"),
            (5000, "5.0 KB"),
            (1_500_000, "1.5 MB"),
            (100_000_000, "100 MB"),
            (2_000_000_000, "2.0 GB"),
            (1_000_000_000_000, "1.0 TB"),
        ],
    )
    def test_formats(self, size_bytes, expected):
        assert format_bytes(size_bytes) == expected

    @pytest.mark.parametrize("size_bytes", [0, -100])
    def test_non_positive_is_zero(self, size_bytes):
        assert format_bytes(size_bytes) == "0 B"

    def test_caps_units_at_tb(self):
        assert format_bytes(1000**5) == "1000 TB"

    def test_round_trip_keeps_unit(self):
        for text in ("3 KB", "42 MB", "7.5 GB", "2 TB"):
            assert format_bytes(parse_size(text)).split()[1] == text.split()[1]


class TestParseSizeLimit:
    """Test suite for strict user-supplied size limits."""

    def test_with_unit(self):
        assert parse_size_limit("5GB") == 5_000_000_000
        assert parse_size_limit("500 mb") == 500_000_000
        assert parse_size_limit("1.5 kB") == 1500

    def test_bare_number_is_bytes(self):
        assert parse_size_limit("1048576") == 1_048_576
        assert parse_size_limit(600_000_000) == 600_000_000

    @pytest.mark.parametrize("value", ["", "   ", None, "abc", "GB", "5 XB", "-5GB", "0", "0 MB", 0, -1])
    def test_rejects_invalid(self, value):
        with pytest.raises(InvalidArgumentError):
            parse_size_limit(value)


class TestParseDuration:
    """Test suite for --older-than durations."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("30m", timedelta(minutes=30)),
            ("12h", timedelta(hours=12)),
            ("7d", timedelta(days=7)),
            ("2w", timedelta(weeks=2)),
            ("1.5d", timedelta(hours=36)),
        ],
    )
    def test_units(self, value, expected):
        assert parse_duration(value) == expected

    @pytest.mark.parametrize("value", ["", None, "7", "7s", "10 seconds", "abc", "0d", "-1d"])
    def test_rejects_invalid(self, value):
        with pytest.raises(InvalidArgumentError):
            parse_duration(value)


class TestParseTimestamp:
    """Test suite for Docker CreatedAt parsing."""

    def test_docker_cli_format(self):
        parsed = parse_timestamp("2024-01-15 10:30:00 +0000 UTC")
        assert parsed == datetime(2024, 1, 15, 10, 30, tzinfo=UTC)

    def test_docker_cli_format_with_nanoseconds(self):
        """Network CreatedAt carries nine fractional digits."""
        parsed = parse_timestamp("2026-10-18 08:21:09.123456789 +0000 UTC")
        assert parsed == datetime(2026, 10, 18, 8, 21, 9, 123456, tzinfo=UTC)
        assert int(parsed.timestamp() * 1000) == 1_792_311_669_123

    def test_docker_cli_format_with_short_fraction(self):
        parsed = parse_timestamp("2024-01-15 10:30:00.5 +0000 UTC")
        assert parsed == datetime(2024, 1, 15, 10, 30, 0, 500000, tzinfo=UTC)

    def test_docker_cli_format_with_offset(self):
        parsed = parse_timestamp("2024-01-15 12:30:00 +0200 CEST")
        assert parsed == datetime(2024, 1, 15, 10, 30, tzinfo=UTC)

    def test_iso_format(self):
        assert parse_timestamp("2024-01-15T10:30:00Z") == datetime(2024, 1, 15, 10, 30, tzinfo=UTC)
        assert parse_timestamp("2024-01-15T10:30:00.123+00:00").microsecond == 123000

    def test_naive_is_utc(self):
        assert parse_timestamp("2024-01-15T10:30:00").tzinfo == UTC

    @pytest.mark.parametrize("value", [None, "", "not a date", "2 weeks ago"])
    def test_unparseable(self, value):
        assert parse_timestamp(value) is None


class TestFilterUntilTimestamp:
    """Test suite for the prune `until` filter value."""

    def test_none_without_threshold(self):
        assert filter_until_timestamp(None) is None
        assert filter_until_timestamp(timedelta(0)) is None

    def test_iso_cutoff(self):
        now = datetime(2025, 6, 8, 12, 0, 0, tzinfo=UTC)
        assert filter_until_timestamp(timedelta(days=7), now) == "2025-06-01T12:00:00.000Z"
