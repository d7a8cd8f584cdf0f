"""
Column role detection — maps raw headers to semantic roles (vendor, amount, date, ...).
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, fields
from typing import Iterable, Mapping, Optional

from salescope.config import ROLE_RULES, RoleRule

logger = logging.getLogger(__name__)

# Python attribute name → public role name
_PUBLIC_NAMES = {
    "vendor": "vendor",
    "amount": "amount",
    "date": "date",
    "payment_type": "paymentType",
    "shipping_type": "shippingType",
    "order_code": "orderCode",
    "item_service_category": "itemServiceCategory",
    "currency": "currency",
    "remarks": "remarks",
}


@dataclass(frozen=True)
class SchemaRoles:
    """Detected column per role (None when no header matched)."""
    vendor: Optional[str] = None
    amount: Optional[str] = None
    date: Optional[str] = None
    payment_type: Optional[str] = None
    shipping_type: Optional[str] = None
    order_code: Optional[str] = None
    item_service_category: Optional[str] = None
    currency: Optional[str] = None
    remarks: Optional[str] = None

    def get(self, role: str) -> Optional[str]:
        """Look up by attribute name or public (camelCase) role name."""
        for attr, public in _PUBLIC_NAMES.items():
            if role in (attr, public):
                return getattr(self, attr)
        raise KeyError(role)

    def to_dict(self) -> dict[str, Optional[str]]:
        return {_PUBLIC_NAMES[f.name]: getattr(self, f.name) for f in fields(self)}

    @property
    def missing(self) -> list[str]:
        return [_PUBLIC_NAMES[f.name] for f in fields(self) if getattr(self, f.name) is None]


# ---------------------------------------------------------------------------
# Matching
# ---------------------------------------------------------------------------

_SEP_RE = re.compile(r"[\s_]+")


def _normalize(name) -> str:
    return _SEP_RE.sub(" ", str(name).lower()).strip()


def _excluded(header: str, rule: RoleRule) -> bool:
    if any(ex in header for ex in rule.excludes):
        return True
    return any(all(part in header for part in group) for group in rule.exclude_all)


def _sample_ok(rule: RoleRule, candidate: str, column: str, sample: Mapping) -> bool:
    terms = rule.sample_terms.get(candidate)
    if not terms:
        return True
    value = sample.get(column)
    if value is None:
        return False
    text = str(value).lower()
    return any(t in text for t in terms)


def match_role(rule: RoleRule, columns: list[str], sample: Mapping | None = None) -> str | None:
    """Return the first column matching a rule (exact pass, then substring pass)."""
    sample = sample or {}
    normalized = [(col, _normalize(col)) for col in columns]
    eligible = [(col, norm) for col, norm in normalized if not _excluded(norm, rule)]
    candidates = [(c, _normalize(c)) for c in rule.candidates]

    for raw_cand, cand in candidates:
        for col, norm in eligible:
            if norm == cand and _sample_ok(rule, raw_cand, col, sample):
                return col

    for raw_cand, cand in candidates:
        for col, norm in eligible:
            if cand in norm and _sample_ok(rule, raw_cand, col, sample):
                return col

    return None


def infer_roles(
    columns: Iterable[str],
    sample: Mapping | None = None,
) -> SchemaRoles:
    """Detect every role from a header list and an optional first-row sample.

    Roles are matched independently, so one column can end up in two roles.
    """
    columns = [c for c in columns if c is not None]
    detected = {}
    for rule in ROLE_RULES:
        detected[rule.role] = match_role(rule, columns, sample)
    logger.debug("Detected columns: %s", detected)
    return SchemaRoles(**detected)


def infer_dataset_roles(dataset) -> SchemaRoles:
    """Roles for a Dataset, sampled from its first record."""
    return infer_roles(dataset.columns, dataset.first() or {})
