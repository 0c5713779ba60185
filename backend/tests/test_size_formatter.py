"""Tests for human readable size formatting."""
import pytest

from filedrop.services.size_formatter import format_size


@pytest.mark.parametrize(
    ("size", "expected"),
    [
        (5_127_123, "5.1 MB"),
        (999, "999 B"),
        (1000, "1000 B"),
        (1_000_001, "1 MB"),
        (None, ""),
    ],
)
def test_format_size_reference_values(size, expected):
    assert format_size(size) == expected


@pytest.mark.parametrize(
    ("size", "expected"),
    [
        (0, "0 B"),
        (1, "1 B"),
        (1001, "1 kB"),
        (1500, "1.5 kB"),
        (2700, "2.7 kB"),
        (1_000_000, "1000 kB"),
        (1_000_000_000, "1000 MB"),
        (1_000_000_001, "1 GB"),
        (2_500_000_000, "2.5 GB"),
        (1_234_567_890_123, "1234.6 GB"),
    ],
)
def test_format_size_units(size, expected):
    assert format_size(size) == expected


def test_format_size_rounds_half_up():
    # 1.25 kB would become 1.2 with round-half-to-even
    assert format_size(1250) == "1.3 kB"
