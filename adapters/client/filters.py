"""
Client-side search, date-range filtering and pagination of the event list.
The API returns every event; narrowing down happens here.

Date ranges are half-open [start, end) in the caller's time zone, with
weeks starting on Sunday.
"""

import math
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import List, Optional, Sequence, Tuple, Union

from core.domain.constants import EVENTS_PER_PAGE, MAX_PLAIN_PAGES
from core.domain.models import Event

ELLIPSIS = "..."


class DateFilter(str, Enum):
    TODAY = "today"
    CURRENT_WEEK = "current-week"
    LAST_WEEK = "last-week"
    CURRENT_MONTH = "current-month"
    LAST_MONTH = "last-month"


@dataclass
class EventFilters:
    """Search term plus at most one preset range and an optional custom range"""
    search: str = ""
    date_filter: Optional[DateFilter] = None
    custom_start: Optional[date] = None
    custom_end: Optional[date] = None

    @property
    def has_custom_range(self) -> bool:
        return self.custom_start is not None and self.custom_end is not None


def _midnight(day: date, tz) -> datetime:
    return datetime.combine(day, time.min, tzinfo=tz)


def _month_start(year: int, month: int, tz) -> datetime:
    # month may be 0 or 13 when stepping across a year boundary
    year += (month - 1) // 12
    month = (month - 1) % 12 + 1
    return datetime(year, month, 1, tzinfo=tz)


def date_range(date_filter: DateFilter, now: datetime) -> Tuple[datetime, datetime]:
    """[start, end) covered by a preset filter, relative to `now`"""
    tz = now.tzinfo
    today = _midnight(now.date(), tz)

    if date_filter == DateFilter.TODAY:
        return today, today + timedelta(days=1)

    # Sunday-based week: Monday is weekday() 0, so Sunday is 6
    week_start = today - timedelta(days=(now.weekday() + 1) % 7)
    if date_filter == DateFilter.CURRENT_WEEK:
        return week_start, week_start + timedelta(days=7)
    if date_filter == DateFilter.LAST_WEEK:
        return week_start - timedelta(days=7), week_start

    if date_filter == DateFilter.CURRENT_MONTH:
        return _month_start(now.year, now.month, tz), _month_start(now.year, now.month + 1, tz)
    if date_filter == DateFilter.LAST_MONTH:
        return _month_start(now.year, now.month - 1, tz), _month_start(now.year, now.month, tz)

    raise ValueError(f"Unknown date filter: {date_filter}")


def apply_filters(events: Sequence[Event], filters: EventFilters, now: datetime) -> List[Event]:
    """Events matching the search term and date ranges, order preserved"""
    if now.tzinfo is None:
        now = now.astimezone()
    results = list(events)

    term = filters.search.strip().lower()
    if term:
        results = [e for e in results if term in e.title.lower()]

    if filters.date_filter is not None:
        start, end = date_range(filters.date_filter, now)
        results = [e for e in results if start <= e.date < end]

    if filters.has_custom_range:
        # Both ends inclusive as whole days
        start = _midnight(filters.custom_start, now.tzinfo)
        end = _midnight(filters.custom_end, now.tzinfo) + timedelta(days=1)
        results = [e for e in results if start <= e.date < end]

    return results


@dataclass
class Page:
    items: List[Event]
    number: int
    total_pages: int
    total_items: int
    pages: List[Union[int, str]] = field(default_factory=list)

    @property
    def has_previous(self) -> bool:
        return self.number > 1

    @property
    def has_next(self) -> bool:
        return self.number < self.total_pages


def visible_pages(current: int, total: int) -> List[Union[int, str]]:
    """Page numbers to show, with ELLIPSIS standing in for skipped runs"""
    if total <= MAX_PLAIN_PAGES:
        return list(range(1, total + 1))

    if current <= 3:
        start, end = 2, 4
    elif current >= total - 2:
        start, end = total - 3, total - 1
    else:
        start, end = current - 1, current + 1

    pages: List[Union[int, str]] = [1]
    if start > 2:
        pages.append(ELLIPSIS)
    pages.extend(range(start, end + 1))
    if end < total - 1:
        pages.append(ELLIPSIS)
    pages.append(total)
    return pages


def paginate(events: Sequence[Event], page: int = 1, per_page: int = EVENTS_PER_PAGE) -> Page:
    """Slice out one page; out-of-range page numbers are clamped"""
    total_pages = math.ceil(len(events) / per_page)
    number = min(max(page, 1), max(total_pages, 1))
    offset = (number - 1) * per_page
    return Page(
        items=list(events[offset:offset + per_page]),
        number=number,
        total_pages=total_pages,
        total_items=len(events),
        pages=visible_pages(number, total_pages),
    )
