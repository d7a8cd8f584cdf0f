"""
Dataset summary — headline KPIs and every breakdown in one AnalysisResult.
"""
from __future__ import annotations

import datetime as dt
import logging
import math
from dataclasses import dataclass, field
from typing import Optional

from salescope.analytics.aggregate import Breakdown, amount_value, column_key, group_by, month_key_selector
from salescope.analytics.breakdowns import (
    currency_breakdown,
    item_service_breakdown,
    order_type_breakdown,
    order_type_item_service,
    top_n,
)
from salescope.analytics.common import round_money, safe_divide
from salescope.data.dataset import Dataset, frame_column
from salescope.data.normalize import drop_empty_rows, payment_status
from salescope.data.parsers import parse_date
from salescope.data.roles import SchemaRoles, infer_dataset_roles

logger = logging.getLogger(__name__)


@dataclass
class AnalysisResult:
    total_records: int = 0
    total_sales: float = 0.0
    paid_sales: float = 0.0
    outstanding_payments: float = 0.0
    average_sale_value: float = 0.0
    date_start: Optional[dt.date] = None
    date_end: Optional[dt.date] = None
    roles: SchemaRoles = field(default_factory=SchemaRoles)
    by_vendor: Breakdown = field(default_factory=Breakdown)
    by_payment_type: Breakdown = field(default_factory=Breakdown)
    by_shipping_type: Breakdown = field(default_factory=Breakdown)
    by_month: Breakdown = field(default_factory=Breakdown)
    order_types: Breakdown = field(default_factory=Breakdown)
    item_service: Breakdown = field(default_factory=Breakdown)
    currency: Breakdown = field(default_factory=Breakdown)
    top_vendors: Breakdown = field(default_factory=Breakdown)
    order_type_item_service: dict = field(default_factory=dict)

    @property
    def sales_trend(self) -> Breakdown:
        """Monthly breakdown in calendar order."""
        return self.by_month.chronological()

    def to_dict(self) -> dict:
        return {
            "total_records": self.total_records,
            "total_sales": self.total_sales,
            "paid_sales": self.paid_sales,
            "outstanding_payments": self.outstanding_payments,
            "average_sale_value": self.average_sale_value,
            "date_range": {
                "start": self.date_start.isoformat() if self.date_start else None,
                "end": self.date_end.isoformat() if self.date_end else None,
            },
            "detected_columns": self.roles.to_dict(),
            "sales_by_vendor": self.by_vendor.to_dict(),
            "sales_by_payment_type": self.by_payment_type.to_dict(),
            "sales_by_shipping_type": self.by_shipping_type.to_dict(),
            "sales_by_month": self.by_month.to_dict(),
            "sales_trend": self.sales_trend.to_dict(),
            "order_types": self.order_types.to_dict(),
            "item_service": self.item_service.to_dict(),
            "currency": self.currency.to_dict(),
            "top_vendors": self.top_vendors.to_dict(),
            "order_type_item_service": {k: v.to_dict() for k, v in self.order_type_item_service.items()},
        }


def analyze_dataset(
    dataset: Dataset,
    roles: SchemaRoles | None = None,
    order_type_override: Optional[str] = None,
) -> AnalysisResult:
    """Run every aggregation over a dataset.

    Roles are inferred from the dataset when not given. An empty dataset yields
    a zero-valued result with empty breakdowns.
    """
    dataset = drop_empty_rows(dataset)
    if roles is None:
        roles = infer_dataset_roles(dataset)
    if dataset.is_empty:
        return AnalysisResult(roles=roles, order_type_item_service=order_type_item_service(None, roles))

    frame = dataset.frame
    value = amount_value(roles.amount)
    amounts = value(frame)

    total_sales = math.fsum(amounts)
    statuses = frame_column(frame, roles.payment_type).map(payment_status)
    paid = math.fsum(amounts[(statuses == "paid").to_numpy(dtype=bool)])
    outstanding = math.fsum(amounts[(statuses == "outstanding").to_numpy(dtype=bool)])

    dates = frame_column(frame, roles.date).map(parse_date).dropna()
    date_start = min(dates) if len(dates) else None
    date_end = max(dates) if len(dates) else None

    by_vendor = group_by(frame, column_key(roles.vendor), value)

    result = AnalysisResult(
        total_records=len(dataset),
        total_sales=round_money(total_sales),
        paid_sales=round_money(paid),
        outstanding_payments=round_money(outstanding),
        average_sale_value=round_money(safe_divide(total_sales, len(dataset))),
        date_start=date_start,
        date_end=date_end,
        roles=roles,
        by_vendor=by_vendor,
        by_payment_type=group_by(frame, column_key(roles.payment_type), value),
        by_shipping_type=group_by(frame, column_key(roles.shipping_type), value),
        by_month=group_by(frame, month_key_selector(roles.date), value),
        order_types=order_type_breakdown(frame, roles, override=order_type_override, value=value),
        item_service=item_service_breakdown(frame, roles, value=value),
        currency=currency_breakdown(frame, roles, value=value),
        top_vendors=top_n(by_vendor),
        order_type_item_service=order_type_item_service(frame, roles, override=order_type_override),
    )
    logger.info(
        "Analyzed %d records: total %.2f across %d vendors", result.total_records, total_sales, len(by_vendor),
    )
    return result
