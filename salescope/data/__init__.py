"""Data loading, normalization, role detection and the table view."""
from .dataset import Dataset
from .loader import IngestionError, load_csv, load_frame
from .parsers import parse_amount, parse_date, month_key
from .roles import SchemaRoles, infer_roles, infer_dataset_roles
from .schemas import PeriodFilter, PeriodType, DateFilter, DateFilterMode, ViewConfig
from .normalize import drop_empty_rows, classify_item_service, order_type_for_code, payment_status
from .view import ViewResult, apply_view, filter_options, suggestions, uses_substring_filter
