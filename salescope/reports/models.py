"""
Pydantic schemas for the JSON outputs handed to report / visualization consumers.
"""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel


class BucketModel(BaseModel):
    key: str
    count: int
    total: float
    average: float


class BreakdownModel(BaseModel):
    buckets: list[BucketModel]
    total: float
    total_qty: int


class DateRangeModel(BaseModel):
    start: Optional[str] = None
    end: Optional[str] = None


class DetectedColumnsModel(BaseModel):
    vendor: Optional[str] = None
    amount: Optional[str] = None
    date: Optional[str] = None
    paymentType: Optional[str] = None
    shippingType: Optional[str] = None
    orderCode: Optional[str] = None
    itemServiceCategory: Optional[str] = None
    currency: Optional[str] = None
    remarks: Optional[str] = None


class AnalysisResponse(BaseModel):
    total_records: int
    total_sales: float
    paid_sales: float
    outstanding_payments: float
    average_sale_value: float
    date_range: DateRangeModel
    detected_columns: DetectedColumnsModel
    sales_by_vendor: BreakdownModel
    sales_by_payment_type: BreakdownModel
    sales_by_shipping_type: BreakdownModel
    sales_by_month: BreakdownModel
    sales_trend: BreakdownModel
    order_types: BreakdownModel
    item_service: BreakdownModel
    currency: BreakdownModel
    top_vendors: BreakdownModel
    order_type_item_service: dict[str, BreakdownModel]


class ViewResponse(BaseModel):
    rows: list[dict[str, Any]]
    total_count: int
    page: int
    page_size: Optional[int] = None
    total_pages: int
    columns: list[str]


class BreakdownChangeModel(BaseModel):
    key: str
    first_total: float
    second_total: float
    difference: float
    change_pct: Optional[float] = None


class ComparisonResponse(BaseModel):
    first_period: str
    second_period: str
    first: AnalysisResponse
    second: AnalysisResponse
    changes: dict[str, Optional[float]]
    vendor_changes: list[BreakdownChangeModel]
