"""
Aggregation engine — one group-by primitive behind every "by X" breakdown.

Selectors are vectorized: each takes the dataset frame and returns a Series
aligned to its index (keys or numeric values).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, Optional

import pandas as pd

from salescope.analytics.common import safe_divide
from salescope.data.dataset import frame_column
from salescope.data.normalize import is_blank
from salescope.data.parsers import parse_amount, month_key

Selector = Callable[[pd.DataFrame], pd.Series]


@dataclass(frozen=True)
class Bucket:
    """Count / total / average for one key."""
    key: str
    count: int
    total: float

    @property
    def average(self) -> float:
        return safe_divide(self.total, self.count)

    def to_dict(self) -> dict:
        return {"key": self.key, "count": self.count, "total": self.total, "average": self.average}


class Breakdown:
    """Ordered key → Bucket mapping with its own total and quantity."""

    def __init__(self, buckets: Iterable[Bucket] = ()) -> None:
        self._buckets: dict[str, Bucket] = {}
        for bucket in buckets:
            self._buckets[bucket.key] = bucket

    @property
    def buckets(self) -> list[Bucket]:
        return list(self._buckets.values())

    @property
    def total(self) -> float:
        return sum(b.total for b in self._buckets.values())

    @property
    def total_qty(self) -> int:
        return sum(b.count for b in self._buckets.values())

    def keys(self) -> list[str]:
        return list(self._buckets)

    def get(self, key: str) -> Optional[Bucket]:
        return self._buckets.get(key)

    def __getitem__(self, key: str) -> Bucket:
        return self._buckets[key]

    def __contains__(self, key: str) -> bool:
        return key in self._buckets

    def __iter__(self) -> Iterator[Bucket]:
        return iter(self.buckets)

    def __len__(self) -> int:
        return len(self._buckets)

    def __repr__(self) -> str:
        return f"Breakdown(keys={len(self)}, total={self.total}, total_qty={self.total_qty})"

    def sorted_by_total(self) -> "Breakdown":
        """Descending by total; equal totals keep their current order."""
        return Breakdown(sorted(self.buckets, key=lambda b: b.total, reverse=True))

    def chronological(self) -> "Breakdown":
        """Ascending by key — for YYYY-MM keys this is the sales trend order."""
        return Breakdown(sorted(self.buckets, key=lambda b: b.key))

    def to_dict(self) -> dict:
        return {
            "buckets": [b.to_dict() for b in self.buckets],
            "total": self.total,
            "total_qty": self.total_qty,
        }


# ---------------------------------------------------------------------------
# Selectors
# ---------------------------------------------------------------------------

def _clean_key(value) -> Optional[str]:
    if is_blank(value):
        return None
    return str(value).strip()


def column_key(column: Optional[str]) -> Selector:
    """Key = trimmed cell text of a column (no column → no keys)."""
    def select(frame: pd.DataFrame) -> pd.Series:
        return frame_column(frame, column).map(_clean_key)
    return select


def mapped_key(column: Optional[str], fn: Callable) -> Selector:
    """Key = fn(cell) for a column; fn returns None to leave a row out."""
    def select(frame: pd.DataFrame) -> pd.Series:
        return frame_column(frame, column).map(fn)
    return select


def constant_key(label: str) -> Selector:
    """Every row under one key."""
    def select(frame: pd.DataFrame) -> pd.Series:
        return pd.Series(label, index=frame.index, dtype=object)
    return select


def month_key_selector(column: Optional[str]) -> Selector:
    """Key = YYYY-MM of the parsed date; unparseable dates get no key."""
    return mapped_key(column, month_key)


def amount_value(column: Optional[str]) -> Selector:
    """Value = parsed amount of a column (0 everywhere when there is no column)."""
    def select(frame: pd.DataFrame) -> pd.Series:
        if column is None or column not in frame.columns:
            return pd.Series(0.0, index=frame.index)
        return frame[column].map(parse_amount).astype(float)
    return select


def count_value(frame: pd.DataFrame) -> pd.Series:
    """Value = 1 per row, for count-only breakdowns."""
    return pd.Series(1.0, index=frame.index)


# ---------------------------------------------------------------------------
# Group-by
# ---------------------------------------------------------------------------

def group_by(frame: pd.DataFrame, key: Selector, value: Selector) -> Breakdown:
    """Group rows by key(frame), summing value(frame).

    Rows with a null/empty key are skipped. Buckets come back sorted by total
    descending; equal totals keep first-encounter order.
    """
    if frame is None or frame.empty:
        return Breakdown()

    keys = key(frame).map(_clean_key)
    values = value(frame).astype(float)
    work = pd.DataFrame({"key": keys, "value": values})
    work = work[work["key"].notna()]
    if work.empty:
        return Breakdown()

    grouped = work.groupby("key", sort=False).agg(
        count=("value", "size"),
        total=("value", "sum"),
    )
    grouped = grouped.sort_values("total", ascending=False, kind="stable")

    return Breakdown(
        Bucket(key=str(k), count=int(r["count"]), total=float(r["total"]))
        for k, r in grouped.iterrows()
    )
