from __future__ import annotations

import datetime
from typing import Iterable, List, Optional, Set, Tuple, TypeVar

from django.db.models import Manager

T = TypeVar("T")

# The first motion picture on record, "Roundhay Garden Scene", dates from 1888.
FIRST_FILM_YEAR = 1888
FUTURE_RELEASE_YEARS = 10


def unique_keep_order(ls: Iterable[T]) -> List[T]:
    return list({x: None for x in ls}.keys())


def related_ids(manager: Manager) -> Set[int]:
    # `.all()` reuses the prefetch cache when the DAO prefetched the relation
    return {obj.pk for obj in manager.all()}


def release_year_bounds(today: Optional[datetime.date] = None) -> Tuple[int, int]:
    today = today or datetime.date.today()
    return FIRST_FILM_YEAR, today.year + FUTURE_RELEASE_YEARS


def release_window(years: int, today: Optional[datetime.date] = None) -> Tuple[datetime.date, datetime.date]:
    today = today or datetime.date.today()
    try:
        start = today.replace(year=today.year - years)
    except ValueError:
        # Feb 29 on a non-leap target year
        start = today.replace(year=today.year - years, day=28)
    return start, today


def clamp_total_pages(total_pages: Optional[int], max_pages: int) -> int:
    if not total_pages or total_pages < 1:
        return 1
    return min(total_pages, max_pages)
