"""Weekly topic calendar tests — weeks start on Sunday."""

from datetime import date

import pytest

from arguably.core.weekly_topics import week_start


@pytest.mark.parametrize("today, expected", [
    (date(2026, 10, 18), date(2026, 10, 18)),   # Sunday
    (date(2026, 10, 19), date(2026, 10, 18)),   # Monday
    (date(2026, 10, 24), date(2026, 10, 18)),   # Saturday
    (date(2026, 10, 25), date(2026, 10, 25)),   # next Sunday
    (date(2027, 1, 1), date(2026, 12, 27)),     # across the year boundary
])
def test_week_start(today, expected):
    assert week_start(today) == expected
