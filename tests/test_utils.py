from datetime import date

import pytest

from movie_catalog.utils import (
    clamp_total_pages,
    release_window,
    release_year_bounds,
    unique_keep_order,
)


def test_unique_keep_order():
    assert unique_keep_order([3, 1, 3, 2, 1]) == [3, 1, 2]


def test_release_year_bounds():
    assert release_year_bounds(date(2026, 10, 19)) == (1888, 2036)


def test_release_window():
    assert release_window(5, date(2026, 10, 19)) == (date(2021, 10, 19), date(2026, 10, 19))


def test_release_window_from_leap_day():
    assert release_window(1, date(2024, 2, 29)) == (date(2023, 2, 28), date(2024, 2, 29))


@pytest.mark.parametrize(
    "total_pages, expected",
    [(None, 1), (0, 1), (-4, 1), (1, 1), (42, 42), (500, 500), (501, 500)],
)
def test_clamp_total_pages(total_pages, expected):
    assert clamp_total_pages(total_pages, 500) == expected
