"""
Value objects for queries: period windows and the table view configuration.
"""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional


class PeriodType(str, Enum):
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"
    CUSTOM = "custom"
    ALL = "all"


def _month_end(year: int, month: int) -> dt.date:
    if month == 12:
        return dt.date(year + 1, 1, 1) - dt.timedelta(days=1)
    return dt.date(year, month + 1, 1) - dt.timedelta(days=1)


@dataclass(frozen=True)
class PeriodFilter:
    """Defines a date range for comparing two slices of a dataset."""
    period_type: PeriodType = PeriodType.ALL
    year: Optional[int] = None
    month: Optional[int] = None          # 1-12
    quarter: Optional[int] = None        # 1-4
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None

    def resolve(self) -> tuple[Optional[dt.date], Optional[dt.date]]:
        """Return (start_date, end_date) based on period_type."""
        if self.period_type == PeriodType.ALL:
            return None, None

        if self.period_type == PeriodType.CUSTOM:
            return self.start_date, self.end_date

        if self.year is None:
            return None, None

        if self.period_type == PeriodType.MONTH:
            if self.month is None:
                return None, None
            return dt.date(self.year, self.month, 1), _month_end(self.year, self.month)

        if self.period_type == PeriodType.QUARTER:
            if self.quarter is None:
                return None, None
            start_month = (self.quarter - 1) * 3 + 1
            return dt.date(self.year, start_month, 1), _month_end(self.year, start_month + 2)

        if self.period_type == PeriodType.YEAR:
            return dt.date(self.year, 1, 1), dt.date(self.year, 12, 31)

        return None, None

    def contains(self, day: Optional[dt.date]) -> bool:
        """Whether a parsed date falls in the window (unbounded windows match everything)."""
        start, end = self.resolve()
        if start is None and end is None:
            return True
        if day is None:
            return False
        if start is not None and day < start:
            return False
        if end is not None and day > end:
            return False
        return True

    @property
    def label(self) -> str:
        """Human-readable label for the period."""
        if self.period_type == PeriodType.ALL:
            return "All Time"
        if self.period_type == PeriodType.MONTH and self.year and self.month:
            return f"{dt.date(self.year, self.month, 1):%B %Y}"
        if self.period_type == PeriodType.QUARTER and self.year and self.quarter:
            return f"Q{self.quarter} {self.year}"
        if self.period_type == PeriodType.YEAR and self.year:
            return str(self.year)
        if self.period_type == PeriodType.CUSTOM:
            s = self.start_date.isoformat() if self.start_date else "?"
            e = self.end_date.isoformat() if self.end_date else "?"
            return f"{s} to {e}"
        return "Unknown"

    def previous(self) -> "PeriodFilter":
        """Return the immediately preceding period of the same type."""
        if self.period_type == PeriodType.MONTH and self.year and self.month:
            if self.month == 1:
                return PeriodFilter(PeriodType.MONTH, self.year - 1, 12)
            return PeriodFilter(PeriodType.MONTH, self.year, self.month - 1)

        if self.period_type == PeriodType.QUARTER and self.year and self.quarter:
            if self.quarter == 1:
                return PeriodFilter(PeriodType.QUARTER, self.year - 1, quarter=4)
            return PeriodFilter(PeriodType.QUARTER, self.year, quarter=self.quarter - 1)

        if self.period_type == PeriodType.YEAR and self.year:
            return PeriodFilter(PeriodType.YEAR, self.year - 1)

        if self.period_type == PeriodType.CUSTOM and self.start_date and self.end_date:
            duration = self.end_date - self.start_date
            new_end = self.start_date - dt.timedelta(days=1)
            return PeriodFilter(
                PeriodType.CUSTOM,
                start_date=new_end - duration,
                end_date=new_end,
            )

        return PeriodFilter(PeriodType.ALL)


# ---------------------------------------------------------------------------
# Table view
# ---------------------------------------------------------------------------

class DateFilterMode(str, Enum):
    EXACT = "exact"
    RANGE = "range"


@dataclass(frozen=True)
class DateFilter:
    """Exact day or inclusive [start, end] window on the view's date column."""
    mode: DateFilterMode = DateFilterMode.EXACT
    on: Optional[dt.date] = None
    start: Optional[dt.date] = None
    end: Optional[dt.date] = None

    @classmethod
    def exact(cls, day: dt.date) -> "DateFilter":
        return cls(DateFilterMode.EXACT, on=day)

    @classmethod
    def between(cls, start: dt.date, end: dt.date) -> "DateFilter":
        return cls(DateFilterMode.RANGE, start=start, end=end)

    @property
    def is_active(self) -> bool:
        if self.mode == DateFilterMode.EXACT:
            return self.on is not None
        return self.start is not None and self.end is not None

    def matches(self, day: Optional[dt.date]) -> bool:
        if not self.is_active:
            return True
        if day is None:
            return False
        if self.mode == DateFilterMode.EXACT:
            return day == self.on
        return self.start <= day <= self.end


def _frozen_map(value: Optional[Mapping]) -> Mapping:
    return MappingProxyType(dict(value or {}))


@dataclass(frozen=True)
class ViewConfig:
    """Search/filter/sort/pagination state for the raw-row table.

    Immutable: every state change produces a new config via the with_* helpers.
    page is 1-based; page_size None turns pagination off.
    """
    search: str = ""
    exact_filters: Mapping[str, str] = field(default_factory=dict)
    substring_filters: Mapping[str, str] = field(default_factory=dict)
    order_type: Optional[str] = None
    item_service: Optional[str] = None
    date_column: Optional[str] = None
    date_filter: Optional[DateFilter] = None
    sort_key: Optional[str] = None
    sort_direction: str = "asc"
    page: int = 1
    page_size: Optional[int] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "exact_filters", _frozen_map(self.exact_filters))
        object.__setattr__(self, "substring_filters", _frozen_map(self.substring_filters))
        if self.sort_direction not in ("asc", "desc"):
            raise ValueError(f"Invalid sort_direction: {self.sort_direction}")

    @property
    def has_active_filters(self) -> bool:
        return bool(
            self.search
            or any(self.exact_filters.values())
            or any(self.substring_filters.values())
            or self.order_type
            or self.item_service
            or (self.date_filter is not None and self.date_filter.is_active)
        )

    # ------------------------------------------------------------------
    # Transitions (filters reset the page)
    # ------------------------------------------------------------------

    def with_search(self, term: str) -> "ViewConfig":
        return replace(self, search=term, page=1)

    def with_filter(self, column: str, value: Optional[str]) -> "ViewConfig":
        filters = dict(self.exact_filters)
        if value:
            filters[column] = value
        else:
            filters.pop(column, None)
        return replace(self, exact_filters=filters, page=1)

    def with_substring(self, column: str, term: Optional[str]) -> "ViewConfig":
        filters = dict(self.substring_filters)
        if term:
            filters[column] = term
        else:
            filters.pop(column, None)
        return replace(self, substring_filters=filters, page=1)

    def with_order_type(self, order_type: Optional[str]) -> "ViewConfig":
        return replace(self, order_type=order_type or None, page=1)

    def with_item_service(self, item_service: Optional[str]) -> "ViewConfig":
        return replace(self, item_service=item_service or None, page=1)

    def with_date_filter(self, date_filter: Optional[DateFilter], column: Optional[str] = None) -> "ViewConfig":
        return replace(self, date_filter=date_filter, date_column=column or self.date_column, page=1)

    def with_sort(self, key: str) -> "ViewConfig":
        """Sort by key; sorting by the current key again flips the direction."""
        if self.sort_key == key:
            direction = "desc" if self.sort_direction == "asc" else "asc"
        else:
            direction = "asc"
        return replace(self, sort_key=key, sort_direction=direction)

    def with_page(self, page: int) -> "ViewConfig":
        return replace(self, page=max(1, page))

    def with_page_size(self, page_size: Optional[int]) -> "ViewConfig":
        return replace(self, page_size=page_size, page=1)

    def without_pagination(self) -> "ViewConfig":
        return replace(self, page=1, page_size=None)

    def cleared(self) -> "ViewConfig":
        """Drop every filter and the sort, keeping the page size."""
        return ViewConfig(page_size=self.page_size, date_column=self.date_column)
