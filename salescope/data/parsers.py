"""
Cell value parsers: amounts and calendar dates.

Both parsers are total: malformed input degrades to 0 / None instead of raising.
"""
from __future__ import annotations

import datetime as dt
import math
import re
import warnings

import numpy as np
import pandas as pd

from salescope.config import CURRENCY_SYMBOLS, CURRENCY_PREFIXES


# ---------------------------------------------------------------------------
# Amounts
# ---------------------------------------------------------------------------

_STRIP_RE = re.compile(r"[" + re.escape(CURRENCY_SYMBOLS) + r",\s]")
_PREFIX_RE = re.compile(
    r"^(?:" + "|".join(re.escape(p) for p in sorted(CURRENCY_PREFIXES, key=len, reverse=True)) + r")",
    re.IGNORECASE,
)
_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def parse_amount(raw) -> float | int:
    """Convert a raw cell into a number; anything unparseable is 0."""
    if isinstance(raw, (bool, np.bool_)):
        return 0
    if isinstance(raw, (int, float, np.integer, np.floating)):
        if isinstance(raw, (float, np.floating)) and not math.isfinite(raw):
            return 0
        return raw.item() if isinstance(raw, np.generic) else raw
    if not isinstance(raw, str):
        return 0

    cleaned = _STRIP_RE.sub("", raw)
    cleaned = _PREFIX_RE.sub("", cleaned)
    m = _NUMBER_RE.match(cleaned)
    if not m:
        return 0
    value = float(m.group(0))
    return value if math.isfinite(value) else 0


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------

_SPLIT_RE = re.compile(r"[/-]")
_TIME_SPLIT_RE = re.compile(r"[T\s]")
_HAS_LETTER_RE = re.compile(r"[A-Za-z]")


def _make_date(year: int, month: int, day: int) -> dt.date | None:
    try:
        return dt.date(year, month, day)
    except (ValueError, OverflowError):
        return None


def _parse_parts(text: str) -> dt.date | None:
    """Structured 3-part parse: YYYY-MM-DD, or ambiguous MM/DD/YYYY vs DD/MM/YYYY."""
    parts = _SPLIT_RE.split(text)
    if len(parts) != 3 or not all(p.strip().isascii() and p.strip().isdigit() for p in parts):
        return None
    try:
        first, second, third = (int(p) for p in parts)
    except ValueError:
        # digit runs past the int conversion limit
        return None

    # 2-digit years are taken as 20xx
    if third < 100:
        third += 2000
    if 31 < first < 100:
        first += 2000

    if first > 1000:
        found = _make_date(first, second, third)
        if found:
            return found

    if third > 1000:
        month_first = _make_date(third, first, second)
        day_first = _make_date(third, second, first)
        if month_first and day_first:
            # No locale signal: the earlier reading wins
            return min(month_first, day_first)
        return month_first or day_first

    return None


def _parse_fallback(text: str) -> dt.date | None:
    if not _HAS_LETTER_RE.search(text):
        return None
    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        try:
            ts = pd.to_datetime(text, errors="coerce")
        except (ValueError, TypeError, OverflowError):
            return None
    if ts is None or pd.isna(ts):
        return None
    return ts.date()


def parse_date(raw) -> dt.date | None:
    """Convert a raw cell into a calendar date (time discarded), or None."""
    if raw is None or raw is pd.NaT:
        return None
    if isinstance(raw, pd.Timestamp):
        return None if pd.isna(raw) else raw.date()
    if isinstance(raw, dt.datetime):
        return raw.date()
    if isinstance(raw, dt.date):
        return raw
    if not isinstance(raw, str):
        return None

    text = raw.strip()
    if not text:
        return None

    head = _TIME_SPLIT_RE.split(text, maxsplit=1)[0]
    found = _parse_parts(head)
    if found:
        return found
    return _parse_fallback(text)


def month_key(raw) -> str | None:
    """YYYY-MM bucket key for a raw date cell."""
    d = parse_date(raw)
    if d is None:
        return None
    return f"{d.year:04d}-{d.month:02d}"
