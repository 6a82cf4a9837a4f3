from __future__ import annotations

import pytest

from campus_router.formatting import format_distance, format_duration


@pytest.mark.parametrize(
    ("meters", "expected"),
    [(0.0, "0 m"), (312.4, "312 m"), (999.4, "999 m"), (1000.0, "1.0 km"), (2450.5, "2.5 km")],
)
def test_format_distance(meters: float, expected: str) -> None:
    assert format_distance(meters) == expected


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [(0.0, "0 min"), (214.3, "4 min"), (3540.0, "59 min"), (3600.0, "1h 0m"), (5400.0, "1h 30m"), (43_600.0, "12h 7m")],
)
def test_format_duration(seconds: float, expected: str) -> None:
    assert format_duration(seconds) == expected
