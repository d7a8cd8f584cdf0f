"""
Breakdown classifiers — order type, item vs service, currency, top-N.

All of them are thin key selectors over analytics.aggregate.group_by.
"""
from __future__ import annotations

import logging
import math
from typing import Optional

import pandas as pd

from salescope.analytics.aggregate import (
    Breakdown,
    Bucket,
    Selector,
    amount_value,
    constant_key,
    group_by,
    mapped_key,
)
from salescope.config import (
    DEFAULT_CURRENCY,
    ORDER_TYPE_CODES,
    OTHER_LABEL,
    TOP_N,
    UNKNOWN_CURRENCY,
)
from salescope.data.dataset import frame_column
from salescope.data.normalize import (
    classify_item_service,
    is_blank,
    order_type_for_code,
    resolve_order_type,
)
from salescope.data.roles import SchemaRoles

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Order type (Import / Local / Job)
# ---------------------------------------------------------------------------

def order_type_breakdown(
    frame: pd.DataFrame,
    roles: SchemaRoles,
    override: Optional[str] = None,
    value: Selector | None = None,
) -> Breakdown:
    """Order types keyed by the first character of the order code.

    Codes outside 1/2/3 fall in no bucket. Without an order code column the
    override (an upstream order-type filter) puts every row under that type.
    """
    value = value or amount_value(roles.amount)
    if roles.order_code:
        return group_by(frame, mapped_key(roles.order_code, order_type_for_code), value)

    label = resolve_order_type(override)
    if label is None:
        logger.debug("No order code column and no order type override; order types left empty")
        return Breakdown()
    return group_by(frame, constant_key(label), value)


# ---------------------------------------------------------------------------
# Item vs Service
# ---------------------------------------------------------------------------

def item_service_breakdown(
    frame: pd.DataFrame,
    roles: SchemaRoles,
    value: Selector | None = None,
) -> Breakdown:
    """Item / Service split of the category column (empty without one)."""
    if not roles.item_service_category:
        return Breakdown()
    value = value or amount_value(roles.amount)
    return group_by(frame, mapped_key(roles.item_service_category, classify_item_service), value)


# ---------------------------------------------------------------------------
# Currency
# ---------------------------------------------------------------------------

def _currency_label(value) -> str:
    return UNKNOWN_CURRENCY if is_blank(value) else str(value).strip()


def currency_breakdown(
    frame: pd.DataFrame,
    roles: SchemaRoles,
    value: Selector | None = None,
) -> Breakdown:
    """Totals per currency.

    A blank cell is "Unknown"; a dataset with no currency column is all INR.
    """
    value = value or amount_value(roles.amount)
    if not roles.currency:
        return group_by(frame, constant_key(DEFAULT_CURRENCY), value)
    return group_by(frame, mapped_key(roles.currency, _currency_label), value)


# ---------------------------------------------------------------------------
# Top-N with remainder
# ---------------------------------------------------------------------------

def _remainder_total(head_totals: list[float], target: float) -> float:
    """Remainder value whose sum with the head totals lands exactly on target."""
    other = target - sum(head_totals)
    for _ in range(8):
        reached = sum(head_totals + [other])
        if reached == target:
            break
        other = math.nextafter(other, math.inf if reached < target else -math.inf)
    return other


def top_n(breakdown: Breakdown, n: int = TOP_N, other_label: str = OTHER_LABEL) -> Breakdown:
    """Top n buckets by total plus one remainder bucket; totals are preserved.

    A bucket already keyed other_label is folded into the remainder rather
    than ranked, so its count and total are never dropped.
    """
    if len(breakdown) <= n:
        return breakdown

    ranked = [b for b in breakdown.sorted_by_total().buckets if b.key != other_label]
    head, rest = ranked[:n], ranked[n:]
    if other_label in breakdown:
        rest.append(breakdown[other_label])
    other = Bucket(
        key=other_label,
        count=sum(b.count for b in rest),
        total=_remainder_total([b.total for b in head], breakdown.total),
    )
    return Breakdown(head + [other])


# ---------------------------------------------------------------------------
# Order type × Item/Service
# ---------------------------------------------------------------------------

def order_type_item_service(
    frame: pd.DataFrame,
    roles: SchemaRoles,
    override: Optional[str] = None,
) -> dict[str, Breakdown]:
    """Item/Service breakdown within each order type (every type present, maybe empty)."""
    result = {label: Breakdown() for label in ORDER_TYPE_CODES.values()}
    if frame is None or frame.empty:
        return result

    if roles.order_code:
        types = frame_column(frame, roles.order_code).map(order_type_for_code)
    else:
        label = resolve_order_type(override)
        if label is None:
            return result
        types = pd.Series(label, index=frame.index, dtype=object)

    for label in result:
        part = frame[(types == label).to_numpy(dtype=bool)]
        result[label] = item_service_breakdown(part, roles)
    return result
