"""
Period comparison — analyze two date windows of one dataset side by side.
"""
from __future__ import annotations

from dataclasses import dataclass, field

from salescope.analytics.aggregate import Breakdown
from salescope.analytics.common import pct_change, round_money
from salescope.analytics.summary import AnalysisResult, analyze_dataset
from salescope.data.dataset import Dataset
from salescope.data.normalize import drop_empty_rows
from salescope.data.parsers import parse_date
from salescope.data.roles import SchemaRoles, infer_dataset_roles
from salescope.data.schemas import PeriodFilter, PeriodType


def slice_period(dataset: Dataset, period: PeriodFilter, roles: SchemaRoles | None = None) -> Dataset:
    """Rows whose parsed date falls inside the period.

    Without a date column only the ALL period keeps rows.
    """
    if roles is None:
        roles = infer_dataset_roles(dataset)
    if period.period_type == PeriodType.ALL:
        return dataset
    if not roles.date:
        return Dataset.from_records([], columns=dataset.columns)
    dates = dataset.column(roles.date).map(parse_date)
    return dataset.subset(dates.map(period.contains))


def breakdown_changes(first: Breakdown, second: Breakdown) -> list[dict]:
    """Per-key totals of two breakdowns with the change from first to second."""
    keys = first.keys() + [k for k in second.keys() if k not in first]
    rows = []
    for key in keys:
        a = first.get(key)
        b = second.get(key)
        a_total = a.total if a else 0.0
        b_total = b.total if b else 0.0
        rows.append({
            "key": key,
            "first_total": a_total,
            "second_total": b_total,
            "difference": round_money(b_total - a_total),
            "change_pct": pct_change(b_total, a_total),
        })
    return rows


@dataclass
class PeriodComparison:
    first_period: PeriodFilter
    second_period: PeriodFilter
    first: AnalysisResult
    second: AnalysisResult
    changes: dict = field(default_factory=dict)
    vendor_changes: list = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "first_period": self.first_period.label,
            "second_period": self.second_period.label,
            "first": self.first.to_dict(),
            "second": self.second.to_dict(),
            "changes": self.changes,
            "vendor_changes": self.vendor_changes,
        }


def compare_periods(
    dataset: Dataset,
    first: PeriodFilter,
    second: PeriodFilter,
    roles: SchemaRoles | None = None,
) -> PeriodComparison:
    """Analyze two periods with the roles of the whole dataset and report deltas."""
    dataset = drop_empty_rows(dataset)
    if roles is None:
        roles = infer_dataset_roles(dataset)

    a = analyze_dataset(slice_period(dataset, first, roles), roles)
    b = analyze_dataset(slice_period(dataset, second, roles), roles)

    changes = {
        "total_sales": pct_change(b.total_sales, a.total_sales),
        "total_records": pct_change(b.total_records, a.total_records),
        "average_sale_value": pct_change(b.average_sale_value, a.average_sale_value),
    }
    return PeriodComparison(
        first_period=first,
        second_period=second,
        first=a,
        second=b,
        changes=changes,
        vendor_changes=breakdown_changes(a.by_vendor, b.by_vendor),
    )
