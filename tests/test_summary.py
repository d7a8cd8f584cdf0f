"""
test_summary.py

Unit tests for the dataset summary and period comparison.
"""

import datetime as dt
import unittest

from salescope.analytics.comparison import breakdown_changes, compare_periods, slice_period
from salescope.analytics.aggregate import Breakdown, Bucket
from salescope.analytics.summary import analyze_dataset
from salescope.data.dataset import Dataset
from salescope.data.schemas import PeriodFilter, PeriodType
from salescope.reports.models import AnalysisResponse

SALES = [
    {"#_1": "1001", "Vendor Name": "Acme", "Document Total": "Rs. 1,000", "Document Date": "2024-01-05",
     "Payment Type": "Paid", "Document Type": "Item", "Currency": "INR"},
    {"#_1": "2002", "Vendor Name": "Acme", "Document Total": "500", "Document Date": "2024-01-20",
     "Payment Type": "Pending", "Document Type": "Service", "Currency": "INR"},
    {"#_1": "3003", "Vendor Name": "Globex", "Document Total": "$250", "Document Date": "2024-02-11",
     "Payment Type": "Paid", "Document Type": "Item", "Currency": "USD"},
    {"#_1": "1004", "Vendor Name": "Initech", "Document Total": "250", "Document Date": "15/02/2024",
     "Payment Type": "Cash", "Document Type": "Item", "Currency": ""},
]


class TestAnalyzeDataset(unittest.TestCase):
    """End-to-end analysis of a small export."""

    def test_vendor_scenario(self):
        ds = Dataset.from_records([
            {"vendor": v, "amount": a}
            for v, a in zip(["A", "A", "B", "B", "C"], ["$100", "200", "-", "", "50.5"])
        ])
        result = analyze_dataset(ds)
        b = result.by_vendor
        self.assertEqual((b["A"].total, b["A"].count), (300, 2))
        self.assertEqual((b["B"].total, b["B"].count), (0, 2))
        self.assertEqual((b["C"].total, b["C"].count), (50.5, 1))
        self.assertEqual(b.total, 350.5)
        self.assertEqual(result.total_sales, 350.5)
        self.assertEqual(result.total_records, 5)

    def test_headline_figures(self):
        result = analyze_dataset(Dataset.from_records(SALES))
        self.assertEqual(result.total_records, 4)
        self.assertEqual(result.total_sales, 2000.0)
        self.assertEqual(result.average_sale_value, 500.0)
        self.assertEqual(result.paid_sales, 1250.0)
        self.assertEqual(result.outstanding_payments, 500.0)
        self.assertEqual(result.date_start, dt.date(2024, 1, 5))
        self.assertEqual(result.date_end, dt.date(2024, 2, 15))

    def test_breakdowns(self):
        result = analyze_dataset(Dataset.from_records(SALES))
        self.assertEqual(result.by_vendor.keys(), ["Acme", "Globex", "Initech"])
        self.assertEqual(result.order_types["Import"].total, 1250.0)
        self.assertEqual(result.order_types["Local"].total, 500.0)
        self.assertEqual(result.item_service["Service"].count, 1)
        self.assertEqual(result.currency["Unknown"].total, 250.0)
        self.assertEqual(result.sales_trend.keys(), ["2024-01", "2024-02"])
        self.assertEqual(result.order_type_item_service["Import"]["Item"].total, 1250.0)
        self.assertEqual(result.top_vendors.keys(), result.by_vendor.keys())

    def test_to_dict_validates(self):
        data = analyze_dataset(Dataset.from_records(SALES)).to_dict()
        model = AnalysisResponse.model_validate(data)
        self.assertEqual(model.detected_columns.orderCode, "#_1")
        self.assertEqual(model.date_range.start, "2024-01-05")

    def test_empty_dataset(self):
        result = analyze_dataset(Dataset.from_records([], columns=["Vendor", "Amount"]))
        self.assertEqual(result.total_records, 0)
        self.assertEqual(result.total_sales, 0.0)
        self.assertEqual(len(result.by_vendor), 0)
        self.assertIsNone(result.date_start)
        self.assertEqual(set(result.order_type_item_service), {"Import", "Local", "Job"})
        AnalysisResponse.model_validate(result.to_dict())

    def test_rows_without_columns_detected(self):
        result = analyze_dataset(Dataset.from_records([{"foo": "1"}, {"foo": "2"}]))
        self.assertEqual(result.total_records, 2)
        self.assertEqual(result.total_sales, 0.0)
        self.assertEqual(result.currency.keys(), ["INR"])
        self.assertEqual(len(result.order_types), 0)

    def test_order_type_override(self):
        ds = Dataset.from_records([{"Vendor": "A", "Amount": "10"}])
        result = analyze_dataset(ds, order_type_override="Import")
        self.assertEqual(result.order_types.keys(), ["Import"])


class TestComparison(unittest.TestCase):
    """Two periods of one dataset."""

    def setUp(self):
        self.ds = Dataset.from_records(SALES)
        self.jan = PeriodFilter(PeriodType.MONTH, 2024, 1)
        self.feb = PeriodFilter(PeriodType.MONTH, 2024, 2)

    def test_slice_period(self):
        self.assertEqual(len(slice_period(self.ds, self.jan)), 2)
        self.assertEqual(len(slice_period(self.ds, self.feb)), 2)
        self.assertEqual(len(slice_period(self.ds, PeriodFilter())), 4)
        custom = PeriodFilter(PeriodType.CUSTOM, start_date=dt.date(2024, 1, 10), end_date=dt.date(2024, 2, 11))
        self.assertEqual(len(slice_period(self.ds, custom)), 2)

    def test_slice_without_date_column(self):
        ds = Dataset.from_records([{"Vendor": "A", "Amount": "1"}])
        self.assertTrue(slice_period(ds, self.jan).is_empty)
        self.assertEqual(len(slice_period(ds, PeriodFilter())), 1)

    def test_changes(self):
        comparison = compare_periods(self.ds, self.jan, self.feb)
        self.assertEqual(comparison.first.total_sales, 1500.0)
        self.assertEqual(comparison.second.total_sales, 500.0)
        self.assertAlmostEqual(comparison.changes["total_sales"], -66.6666, places=3)
        self.assertEqual(comparison.changes["total_records"], 0.0)
        keys = [row["key"] for row in comparison.vendor_changes]
        self.assertEqual(keys, ["Acme", "Globex", "Initech"])
        self.assertIsNone(comparison.vendor_changes[1]["change_pct"])

    def test_empty_first_period(self):
        dec = PeriodFilter(PeriodType.MONTH, 2023, 12)
        comparison = compare_periods(self.ds, dec, self.jan)
        self.assertEqual(comparison.first.total_records, 0)
        self.assertIsNone(comparison.changes["total_sales"])

    def test_previous_periods(self):
        self.assertEqual(self.jan.previous(), PeriodFilter(PeriodType.MONTH, 2023, 12))
        q1 = PeriodFilter(PeriodType.QUARTER, 2024, quarter=1)
        self.assertEqual(q1.previous().label, "Q4 2023")
        custom = PeriodFilter(PeriodType.CUSTOM, start_date=dt.date(2024, 1, 11), end_date=dt.date(2024, 1, 20))
        self.assertEqual(custom.previous().resolve(), (dt.date(2024, 1, 1), dt.date(2024, 1, 10)))
        self.assertEqual(self.feb.resolve(), (dt.date(2024, 2, 1), dt.date(2024, 2, 29)))

    def test_breakdown_changes(self):
        a = Breakdown([Bucket("X", 1, 100.0)])
        b = Breakdown([Bucket("X", 1, 150.0), Bucket("Y", 1, 10.0)])
        rows = breakdown_changes(a, b)
        self.assertEqual(rows[0]["change_pct"], 50.0)
        self.assertEqual(rows[0]["difference"], 50.0)
        self.assertEqual(rows[1]["first_total"], 0.0)


if __name__ == "__main__":
    unittest.main()
