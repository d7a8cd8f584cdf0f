"""
Ingestion normalization — structural emptiness filtering and row classification.
"""
from __future__ import annotations

import logging
from typing import Mapping

import pandas as pd

from salescope.config import (
    BLANK_MARKERS, ORDER_TYPE_CODES, ITEM, SERVICE, SERVICE_KEYWORDS,
    OUTSTANDING_KEYWORDS, PAID_KEYWORDS,
)
from salescope.data.dataset import Dataset

logger = logging.getLogger(__name__)


def is_blank(value) -> bool:
    """True for None, NaN, empty/whitespace strings and the '-' placeholder."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() in BLANK_MARKERS
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def is_empty_row(record: Mapping) -> bool:
    """A row is structurally empty when every value is blank."""
    return all(is_blank(v) for v in record.values())


def empty_row_mask(df: pd.DataFrame) -> pd.Series:
    """Boolean Series marking structurally empty rows of a frame."""
    if df.shape[1] == 0:
        return pd.Series(True, index=df.index)
    return df.map(is_blank).all(axis=1)


def drop_empty_rows(dataset: Dataset) -> Dataset:
    """Remove structurally empty rows; safe to re-apply on clean data."""
    if dataset.is_empty:
        return dataset
    mask = empty_row_mask(dataset.frame)
    dropped = int(mask.sum())
    if dropped:
        logger.info(
            "Filtered to %d valid records (removed %d empty rows)", len(dataset) - dropped, dropped,
        )
    return dataset.subset(~mask)


# ---------------------------------------------------------------------------
# Row classification
# ---------------------------------------------------------------------------

def order_type_for_code(code) -> str | None:
    """Order type from the first character of an order code (None when unknown)."""
    if is_blank(code):
        return None
    return ORDER_TYPE_CODES.get(str(code).strip()[:1])


def resolve_order_type(value) -> str | None:
    """Accept an order type label ('Import') or its code ('1')."""
    if is_blank(value):
        return None
    text = str(value).strip()
    if text in ORDER_TYPE_CODES:
        return ORDER_TYPE_CODES[text]
    for label in ORDER_TYPE_CODES.values():
        if text.lower() in (label.lower(), f"{label.lower()} order"):
            return label
    return None


def classify_item_service(value) -> str | None:
    """Item or Service for a category cell; blanks are not classified.

    Anything that matches no rule counts as an Item.
    """
    if is_blank(value):
        return None
    text = str(value).strip().lower()
    if text == ITEM.lower():
        return ITEM
    if text == SERVICE.lower():
        return SERVICE
    if text[0].isdigit():
        return ITEM
    if text[0] == "s" or any(k in text for k in SERVICE_KEYWORDS):
        return SERVICE
    return ITEM


def payment_status(value) -> str | None:
    """'outstanding', 'paid' or None from a payment type / status cell."""
    if is_blank(value):
        return None
    text = str(value).lower()
    if any(k in text for k in OUTSTANDING_KEYWORDS):
        return "outstanding"
    if any(k in text for k in PAID_KEYWORDS):
        return "paid"
    return None
