"""Aggregation, breakdowns, dataset summary and period comparison."""
from .aggregate import Bucket, Breakdown, group_by
from .breakdowns import (
    order_type_breakdown,
    item_service_breakdown,
    currency_breakdown,
    top_n,
    order_type_item_service,
)
from .summary import AnalysisResult, analyze_dataset
from .comparison import PeriodComparison, compare_periods, slice_period
