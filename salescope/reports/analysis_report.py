"""
Analysis report — JSON payloads and an Excel workbook of every breakdown.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional

import pandas as pd

from salescope.analytics.aggregate import Breakdown
from salescope.analytics.common import pct_of_total, sanitize_for_json
from salescope.analytics.comparison import compare_periods
from salescope.analytics.summary import AnalysisResult, analyze_dataset
from salescope.config import OTHER_LABEL
from salescope.data.dataset import Dataset
from salescope.data.roles import SchemaRoles
from salescope.data.schemas import PeriodFilter, ViewConfig
from salescope.data.view import apply_view
from salescope.excel.writer import ExcelWriter
from salescope.reports.models import AnalysisResponse, ComparisonResponse, ViewResponse


BREAKDOWN_COLS = [
    ("key", "text", "Name"),
    ("count", "number", "Records"),
    ("total", "amount", "Total"),
    ("average", "amount", "Average"),
    ("share", "percent", "% of Total"),
]

ROLE_COLS = [
    ("role", "text", "Role"),
    ("column", "text", "Detected Column"),
]

BREAKDOWN_SHEETS = [
    ("By Vendor", "by_vendor"),
    ("Top Vendors", "top_vendors"),
    ("By Payment Type", "by_payment_type"),
    ("By Shipping Type", "by_shipping_type"),
    ("Sales Trend", "sales_trend"),
    ("Order Types", "order_types"),
    ("Item vs Service", "item_service"),
    ("Currency", "currency"),
]


def generate_json(
    dataset: Dataset,
    roles: SchemaRoles | None = None,
    order_type_override: Optional[str] = None,
) -> dict:
    result = analyze_dataset(dataset, roles, order_type_override)
    return sanitize_for_json(AnalysisResponse.model_validate(result.to_dict()).model_dump())


def generate_view_json(
    dataset: Dataset,
    config: ViewConfig | None = None,
    roles: SchemaRoles | None = None,
) -> dict:
    view = apply_view(dataset, config, roles)
    return sanitize_for_json(ViewResponse(
        rows=view.rows,
        total_count=view.total_count,
        page=view.page,
        page_size=view.page_size,
        total_pages=view.total_pages,
        columns=list(view.columns),
    ).model_dump())


def generate_comparison_json(
    dataset: Dataset,
    first: PeriodFilter,
    second: PeriodFilter,
    roles: SchemaRoles | None = None,
) -> dict:
    comparison = compare_periods(dataset, first, second, roles)
    return sanitize_for_json(ComparisonResponse.model_validate(comparison.to_dict()).model_dump())


def _breakdown_rows(breakdown: Breakdown) -> list[dict]:
    total = breakdown.total
    return [
        {**b.to_dict(), "share": round(pct_of_total(b.total, total), 1)}
        for b in breakdown
    ]


def _highlight_other(_idx: int, row: dict) -> str | None:
    return "other" if row.get("key") == OTHER_LABEL else None


def write_workbook(result: AnalysisResult, output_path: str | Path, source_name: str = "") -> Path:
    """Write an AnalysisResult as a styled workbook: summary sheet + one sheet per breakdown."""
    ew = ExcelWriter()

    ws = ew.add_sheet("Summary")
    if result.date_start and result.date_end:
        date_range = f"{result.date_start.isoformat()} to {result.date_end.isoformat()}"
    else:
        date_range = "N/A"
    subtitle = f"{source_name}  |  {date_range}  |  Generated {pd.Timestamp.now():%B %d, %Y}".lstrip(" |")
    ew.write_title(ws, "SALES ANALYSIS", subtitle)

    row = ew.write_section(ws, 5, "OVERVIEW")
    row = ew.write_kpi_row(ws, row, [
        (result.total_sales, "TOTAL SALES", "amount"),
        (result.total_records, "RECORDS", "number"),
        (result.average_sale_value, "AVERAGE SALE", "amount"),
    ])

    row = ew.write_section(ws, row, "PAYMENTS")
    row = ew.write_kpi_row(ws, row, [
        (result.paid_sales, "PAID", "amount"),
        (result.outstanding_payments, "OUTSTANDING", "amount"),
    ])

    row = ew.write_section(ws, row, "DETECTED COLUMNS")
    ew.write_table(
        ws, row, ROLE_COLS,
        [{"role": role, "column": column or "(not found)"} for role, column in result.roles.to_dict().items()],
        freeze=False,
    )

    for sheet_name, attr in BREAKDOWN_SHEETS:
        breakdown = getattr(result, attr)
        ws_b = ew.add_sheet(sheet_name)
        ew.write_table(
            ws_b, 1, BREAKDOWN_COLS, _breakdown_rows(breakdown),
            highlight_fn=_highlight_other,
            total_row={"count": breakdown.total_qty, "total": breakdown.total, "share": 100.0},
        )

    ws_x = ew.add_sheet("Order Type x Category")
    cross_rows = []
    for order_type, breakdown in result.order_type_item_service.items():
        items = breakdown.get("Item")
        services = breakdown.get("Service")
        cross_rows.append({
            "key": order_type,
            "item": items.total if items else 0.0,
            "service": services.total if services else 0.0,
            "total": breakdown.total,
        })
    ew.write_table(ws_x, 1, [
        ("key", "text", "Order Type"),
        ("item", "amount", "Items"),
        ("service", "amount", "Services"),
        ("total", "amount", "Total"),
    ], cross_rows)

    return ew.save(output_path)


def generate_excel(
    dataset: Dataset,
    output_path: str | Path,
    roles: SchemaRoles | None = None,
    order_type_override: Optional[str] = None,
    source_name: str = "",
) -> Path:
    result = analyze_dataset(dataset, roles, order_type_override)
    return write_workbook(result, output_path, source_name)
