"""
SaleScope — Configuration: paths, role detection rules, classification constants.
"""
import os
from dataclasses import dataclass, field
from pathlib import Path

# ---------------------------------------------------------------------------
# Paths: override with SALESCOPE_DATA_DIR env var
# ---------------------------------------------------------------------------
_data_dir = Path(os.environ.get("SALESCOPE_DATA_DIR", str(Path.home() / "SaleScope")))
BASE_FOLDER = _data_dir
REPORTS_FOLDER = BASE_FOLDER / "reports"

LOG_LEVEL = os.environ.get("SALESCOPE_LOG_LEVEL", "WARNING")

# ---------------------------------------------------------------------------
# Query view defaults
# ---------------------------------------------------------------------------
DEFAULT_PAGE_SIZE = int(os.environ.get("SALESCOPE_PAGE_SIZE", "50"))

# Columns with more distinct values than this get a substring search box
# instead of a dropdown
SUBSTRING_FILTER_THRESHOLD = 15

HIGH_CARDINALITY_COLUMNS = [
    "vendor", "customer", "supplier", "name", "description",
    "remarks", "notes", "address", "contact",
]

# ---------------------------------------------------------------------------
# Breakdown defaults
# ---------------------------------------------------------------------------
TOP_N = int(os.environ.get("SALESCOPE_TOP_N", "10"))
OTHER_LABEL = "Other Vendors"

# ---------------------------------------------------------------------------
# Amount parsing
# ---------------------------------------------------------------------------
CURRENCY_SYMBOLS = "$₹€£"
CURRENCY_PREFIXES = ["rs.", "rs", "inr", "usd", "eur", "gbp"]

# ---------------------------------------------------------------------------
# Classification tables
# ---------------------------------------------------------------------------
# First character of an order code → order type
ORDER_TYPE_CODES = {
    "1": "Import",
    "2": "Local",
    "3": "Job",
}

ITEM = "Item"
SERVICE = "Service"
SERVICE_KEYWORDS = ["service", "labour", "labor"]

UNKNOWN_CURRENCY = "Unknown"
DEFAULT_CURRENCY = "INR"

# Payment status keywords (outstanding is checked first)
OUTSTANDING_KEYWORDS = ["pending", "outstanding", "unpaid", "due"]
PAID_KEYWORDS = ["paid", "completed", "cleared"]

# Cells with only these values count as blank when detecting empty rows
BLANK_MARKERS = {"", "-"}


# ---------------------------------------------------------------------------
# Column role detection
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RoleRule:
    """Name-matching rule for one semantic role.

    candidates   — name fragments in priority order
    excludes     — a header containing any of these never takes the role
    exclude_all  — a header containing every fragment of a group never takes the role
    sample_terms — candidate → terms the first-row value must contain
    """
    role: str
    candidates: tuple[str, ...]
    excludes: tuple[str, ...] = ()
    exclude_all: tuple[tuple[str, ...], ...] = ()
    sample_terms: dict = field(default_factory=dict)


ROLE_RULES = [
    RoleRule(
        "vendor",
        ("vendor name", "vendor", "supplier name", "supplier", "company"),
    ),
    RoleRule(
        "amount",
        ("document total", "doc total", "amount", "total", "value",
         "sales", "revenue", "net", "gross"),
        excludes=("currency", "payment terms", "status"),
        exclude_all=(("price", "mode"),),
    ),
    RoleRule(
        "date",
        ("date", "document date", "doc date", "posting date", "invoice date",
         "sale date", "transaction date", "order date"),
        excludes=("due date",),
    ),
    RoleRule(
        "payment_type",
        ("payment type", "payment method", "payment terms", "payment",
         "payment status"),
    ),
    RoleRule(
        "shipping_type",
        ("shipping type", "shipping method", "shipping", "delivery", "ship via"),
    ),
    RoleRule(
        "order_code",
        ("#_1", "order number", "order no", "order code"),
    ),
    RoleRule(
        "item_service_category",
        ("document type", "item/service", "item type", "type", "item code",
         "item", "product code", "product", "sku"),
        sample_terms={"type": ("item", "service")},
    ),
    RoleRule(
        "currency",
        ("currency", "price mode", "pricemode", "curr"),
    ),
    RoleRule(
        "remarks",
        ("remarks", "notes", "comments", "status"),
    ),
]
