"""
Table view — stateless search / filter / sort / paginate over a Dataset.

Steps run in a fixed order: drop empty rows, free-text search, exact filters,
substring filters, order-type and item/service filters, date filter, sort,
paginate.
"""
from __future__ import annotations

import functools
import math
from dataclasses import dataclass
from typing import Optional

import pandas as pd

from salescope.config import HIGH_CARDINALITY_COLUMNS, SUBSTRING_FILTER_THRESHOLD
from salescope.data.dataset import Dataset, frame_column
from salescope.data.normalize import (
    empty_row_mask,
    is_blank,
    classify_item_service,
    order_type_for_code,
    resolve_order_type,
)
from salescope.data.parsers import parse_date
from salescope.data.roles import SchemaRoles, infer_dataset_roles
from salescope.data.schemas import ViewConfig


@dataclass(frozen=True)
class ViewResult:
    """One page of rows plus the full filtered count."""
    rows: list
    total_count: int
    page: int
    page_size: Optional[int]
    columns: tuple = ()

    @property
    def total_pages(self) -> int:
        if not self.page_size:
            return 1 if self.total_count else 0
        return math.ceil(self.total_count / self.page_size)

    def as_dataset(self) -> Dataset:
        return Dataset.from_records(self.rows, columns=self.columns)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _text(value) -> str:
    return "" if value is None else str(value)


def _keep(df: pd.DataFrame, mask: pd.Series) -> pd.DataFrame:
    return df[mask.to_numpy(dtype=bool)]


def _as_number(value) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
        return number if math.isfinite(number) else None
    return None


def _compare(a, b, descending: bool) -> int:
    # Blank values sort last whichever the direction
    a_blank, b_blank = is_blank(a), is_blank(b)
    if a_blank and b_blank:
        return 0
    if a_blank:
        return 1
    if b_blank:
        return -1

    sign = -1 if descending else 1
    a_num, b_num = _as_number(a), _as_number(b)
    if a_num is not None and b_num is not None:
        return sign * ((a_num > b_num) - (a_num < b_num))

    a_str, b_str = str(a).lower(), str(b).lower()
    return sign * ((a_str > b_str) - (a_str < b_str))


def sort_records(records: list[dict], key: str, direction: str = "asc") -> list[dict]:
    """Stable sort of records by one column (numeric when both sides are numbers)."""
    descending = direction == "desc"
    cmp = functools.cmp_to_key(lambda r1, r2: _compare(r1.get(key), r2.get(key), descending))
    return sorted(records, key=cmp)


# ---------------------------------------------------------------------------
# Filter steps
# ---------------------------------------------------------------------------

def _search(df: pd.DataFrame, term: str) -> pd.DataFrame:
    needle = term.lower()
    if df.shape[1] == 0:
        return df
    hits = df.map(lambda v: needle in _text(v).lower()).any(axis=1)
    return _keep(df, hits)


def _exact(df: pd.DataFrame, column: str, required: str) -> pd.DataFrame:
    return _keep(df, frame_column(df, column).map(_text) == str(required))


def _contains(df: pd.DataFrame, column: str, term: str) -> pd.DataFrame:
    needle = term.lower()
    return _keep(df, frame_column(df, column).map(lambda v: needle in _text(v).lower()))


def _order_type(df: pd.DataFrame, column: str, wanted: str) -> pd.DataFrame:
    return _keep(df, frame_column(df, column).map(order_type_for_code) == wanted)


def _item_service(df: pd.DataFrame, column: str, wanted: str) -> pd.DataFrame:
    return _keep(df, frame_column(df, column).map(classify_item_service) == wanted)


def _date(df: pd.DataFrame, column: str, config: ViewConfig) -> pd.DataFrame:
    parsed = frame_column(df, column).map(parse_date)
    return _keep(df, parsed.map(config.date_filter.matches))


def _needs_roles(config: ViewConfig) -> bool:
    wants_date = config.date_filter is not None and config.date_filter.is_active and not config.date_column
    return bool(config.order_type or config.item_service or wants_date)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def filter_frame(
    dataset: Dataset,
    config: ViewConfig,
    roles: SchemaRoles | None = None,
) -> pd.DataFrame:
    """Every filter step of the view, without sorting or pagination."""
    df = dataset.frame
    if df.empty:
        return df
    df = _keep(df, ~empty_row_mask(df))

    if roles is None and _needs_roles(config):
        roles = infer_dataset_roles(dataset)

    if config.search:
        df = _search(df, config.search)

    for column, required in config.exact_filters.items():
        if required:
            df = _exact(df, column, required)

    for column, term in config.substring_filters.items():
        if term:
            df = _contains(df, column, term)

    if config.order_type and roles is not None and roles.order_code:
        wanted = resolve_order_type(config.order_type)
        if wanted:
            df = _order_type(df, roles.order_code, wanted)

    if config.item_service and roles is not None and roles.item_service_category:
        df = _item_service(df, roles.item_service_category, config.item_service.strip().title())

    if config.date_filter is not None and config.date_filter.is_active:
        column = config.date_column or (roles.date if roles is not None else None)
        if column:
            df = _date(df, column, config)

    return df


def apply_view(
    dataset: Dataset,
    config: ViewConfig | None = None,
    roles: SchemaRoles | None = None,
) -> ViewResult:
    """Filter, sort and paginate a dataset. The dataset is never modified."""
    config = config or ViewConfig()
    df = filter_frame(dataset, config, roles)
    records = df.to_dict("records")

    if config.sort_key:
        records = sort_records(records, config.sort_key, config.sort_direction)

    total = len(records)
    page = max(1, config.page)
    if config.page_size:
        start = (page - 1) * config.page_size
        records = records[start:start + config.page_size]

    return ViewResult(
        rows=records,
        total_count=total,
        page=page,
        page_size=config.page_size,
        columns=dataset.columns,
    )


# ---------------------------------------------------------------------------
# Filter widgets
# ---------------------------------------------------------------------------

def filter_options(dataset: Dataset, column: str) -> list[str]:
    """Distinct non-blank values of a column, sorted case-insensitively."""
    values = {_text(v) for v in dataset.column(column) if not is_blank(v)}
    return sorted(values, key=lambda s: (s.lower(), s))


def uses_substring_filter(dataset: Dataset, column: str) -> bool:
    """High-cardinality columns get a search box instead of a dropdown."""
    if len(filter_options(dataset, column)) > SUBSTRING_FILTER_THRESHOLD:
        return True
    lower = column.lower()
    return any(name in lower for name in HIGH_CARDINALITY_COLUMNS)


def suggestions(dataset: Dataset, column: str, term: str, limit: int = 10) -> list[str]:
    """Values of a column containing term, for type-ahead."""
    if not term:
        return []
    needle = term.lower()
    return [v for v in filter_options(dataset, column) if needle in v.lower()][:limit]
