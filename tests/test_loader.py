"""
test_loader.py

Unit tests for CSV ingestion, empty-row filtering and the Dataset container.
"""

import shutil
import tempfile
import unittest
from pathlib import Path

import pandas as pd

from salescope.data.dataset import Dataset
from salescope.data.loader import IngestionError, load_csv
from salescope.data.normalize import (
    classify_item_service,
    drop_empty_rows,
    is_blank,
    order_type_for_code,
    payment_status,
    resolve_order_type,
)

CSV_TEXT = (
    "Vendor Name,Document Total,Document Date\n"
    "Acme,\"1,200.00\",2024-01-05\n"
    ",,\n"
    "-,-,\n"
    "Globex,50,2024-02-10\n"
)


class TestLoadCsv(unittest.TestCase):
    """Text, bytes and file inputs."""

    def setUp(self):
        self.tmp = Path(tempfile.mkdtemp())

    def tearDown(self):
        shutil.rmtree(self.tmp, ignore_errors=True)

    def test_text_input_drops_empty_rows(self):
        ds = load_csv(CSV_TEXT)
        self.assertEqual(ds.columns, ("Vendor Name", "Document Total", "Document Date"))
        self.assertEqual(len(ds), 2)
        self.assertEqual(ds.first()["Document Total"], "1,200.00")

    def test_cells_stay_text_and_blanks_are_none(self):
        ds = load_csv("Code,Amount,Note\n001,10,\n")
        record = ds.first()
        self.assertEqual(record["Code"], "001")
        self.assertEqual(record["Amount"], "10")
        self.assertIsNone(record["Note"])

    def test_bytes_with_bom(self):
        ds = load_csv("\ufeffVendor,Amount\nA,5\n".encode("utf-8"))
        self.assertEqual(ds.columns, ("Vendor", "Amount"))

    def test_path_input(self):
        path = self.tmp / "sales.csv"
        path.write_text(CSV_TEXT, encoding="utf-8")
        self.assertEqual(len(load_csv(path)), 2)
        self.assertEqual(len(load_csv(str(path))), 2)

    def test_path_string_with_comma(self):
        path = self.tmp / "sales, 2024.csv"
        path.write_text(CSV_TEXT, encoding="utf-8")
        ds = load_csv(str(path))
        self.assertEqual(len(ds), 2)
        self.assertEqual(ds.columns, ("Vendor Name", "Document Total", "Document Date"))

    def test_single_line_csv_text_is_not_a_path(self):
        ds = load_csv("Vendor,Amount")
        self.assertTrue(ds.is_empty)
        self.assertEqual(ds.columns, ("Vendor", "Amount"))

    def test_empty_input(self):
        self.assertTrue(load_csv("").is_empty)
        header_only = load_csv("Vendor,Amount\n")
        self.assertTrue(header_only.is_empty)
        self.assertEqual(header_only.columns, ("Vendor", "Amount"))

    def test_missing_file_raises(self):
        with self.assertRaises(IngestionError):
            load_csv(self.tmp / "missing.csv")

    def test_ingestion_error_is_value_error(self):
        self.assertTrue(issubclass(IngestionError, ValueError))


class TestDataset(unittest.TestCase):
    """Snapshot semantics of the Dataset container."""

    def test_from_records_copies_input(self):
        rows = [{"a": "1", "b": None}]
        ds = Dataset.from_records(rows)
        rows[0]["a"] = "changed"
        self.assertEqual(ds.first()["a"], "1")

    def test_frame_is_a_copy(self):
        ds = Dataset.from_records([{"a": "1"}])
        frame = ds.frame
        frame.loc[0, "a"] = "x"
        self.assertEqual(ds.first()["a"], "1")

    def test_nan_becomes_none(self):
        ds = Dataset.from_frame(pd.DataFrame({"a": [1.0, float("nan")]}))
        self.assertIsNone(ds.records()[1]["a"])

    def test_missing_column_is_all_none(self):
        ds = Dataset.from_records([{"a": "1"}, {"a": "2"}])
        self.assertEqual(list(ds.column("zzz")), [None, None])

    def test_equality(self):
        a = Dataset.from_records([{"x": "1"}])
        b = Dataset.from_records([{"x": "1"}])
        self.assertEqual(a, b)
        self.assertNotEqual(a, Dataset.from_records([{"x": "2"}]))

    def test_empty(self):
        self.assertTrue(Dataset.empty().is_empty)
        self.assertIsNone(Dataset.empty().first())
        self.assertEqual(Dataset.from_records([], columns=["a"]).columns, ("a",))

    def test_integer_column_with_missing_cells_keeps_integers(self):
        ds = Dataset.from_records([{"sku": "A", "qty": 1}, {"sku": "B", "qty": None}, {"sku": "C", "qty": 12}])
        qty = [r["qty"] for r in ds.records()]
        self.assertEqual(qty, [1, None, 12])
        self.assertIs(type(qty[0]), int)


class TestNormalize(unittest.TestCase):
    """Blank detection and row classifiers."""

    def test_is_blank(self):
        for value in [None, "", "  ", "-", " - ", float("nan")]:
            with self.subTest(value=value):
                self.assertTrue(is_blank(value))
        for value in ["0", 0, "x", "--"]:
            with self.subTest(value=value):
                self.assertFalse(is_blank(value))

    def test_drop_empty_rows_is_idempotent(self):
        ds = Dataset.from_records([
            {"a": "1", "b": None},
            {"a": "-", "b": ""},
            {"a": None, "b": None},
        ])
        once = drop_empty_rows(ds)
        self.assertEqual(len(once), 1)
        self.assertEqual(drop_empty_rows(once), once)

    def test_order_type_codes(self):
        self.assertEqual(order_type_for_code("1001300"), "Import")
        self.assertEqual(order_type_for_code("2005512"), "Local")
        self.assertEqual(order_type_for_code("3002200"), "Job")
        self.assertIsNone(order_type_for_code("9999999"))
        self.assertIsNone(order_type_for_code(None))
        self.assertEqual(order_type_for_code(" 2x"), "Local")

    def test_resolve_order_type(self):
        self.assertEqual(resolve_order_type("1"), "Import")
        self.assertEqual(resolve_order_type("local"), "Local")
        self.assertEqual(resolve_order_type("Job Order"), "Job")
        self.assertIsNone(resolve_order_type("Export"))
        self.assertIsNone(resolve_order_type(None))

    def test_classify_item_service(self):
        cases = {
            "Item": "Item",
            "SERVICE": "Service",
            "12345": "Item",
            "S-100": "Service",
            "Labour charges": "Service",
            "Widget": "Item",
        }
        for raw, expected in cases.items():
            with self.subTest(raw=raw):
                self.assertEqual(classify_item_service(raw), expected)
        self.assertIsNone(classify_item_service(""))
        self.assertIsNone(classify_item_service(None))

    def test_payment_status(self):
        self.assertEqual(payment_status("Paid"), "paid")
        self.assertEqual(payment_status("Payment Pending"), "outstanding")
        self.assertEqual(payment_status("UNPAID"), "outstanding")
        self.assertEqual(payment_status("Completed"), "paid")
        self.assertIsNone(payment_status("Cash"))
        self.assertIsNone(payment_status(None))


if __name__ == "__main__":
    unittest.main()
