"""SaleScope — schema-tolerant analytics for sales CSV exports."""
from salescope.data import (
    Dataset,
    DateFilter,
    IngestionError,
    PeriodFilter,
    PeriodType,
    SchemaRoles,
    ViewConfig,
    apply_view,
    infer_roles,
    load_csv,
    parse_amount,
    parse_date,
)
from salescope.analytics import (
    AnalysisResult,
    Breakdown,
    Bucket,
    analyze_dataset,
    compare_periods,
    group_by,
    top_n,
)

__version__ = "0.1.0"
