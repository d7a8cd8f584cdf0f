"""
test_reports.py

Unit tests for JSON payloads and the Excel workbook.
"""

import json
import shutil
import tempfile
import unittest
from pathlib import Path

from openpyxl import load_workbook

from salescope.data.dataset import Dataset
from salescope.data.schemas import PeriodFilter, PeriodType, ViewConfig
from salescope.excel.styles import HIGHLIGHT_FILLS, NUMBER_FORMATS
from salescope.excel.writer import safe_sheet_title
from salescope.reports.analysis_report import (
    generate_comparison_json,
    generate_excel,
    generate_json,
    generate_view_json,
)


def _sales(n_vendors=12):
    rows = []
    for i in range(n_vendors):
        rows.append({
            "Order Number": f"{i % 3 + 1}00{i}",
            "Vendor Name": f"Vendor {i:02d}",
            "Amount": str((i + 1) * 10),
            "Date": f"2024-0{i % 2 + 1}-1{i % 9}",
            "Payment Status": "Paid" if i % 2 else "Pending",
        })
    return Dataset.from_records(rows)


class TestJsonReports(unittest.TestCase):

    def test_analysis_json_is_serializable(self):
        data = generate_json(_sales())
        json.dumps(data)
        self.assertEqual(data["total_records"], 12)
        self.assertEqual(data["total_sales"], 780.0)
        self.assertEqual(data["detected_columns"]["vendor"], "Vendor Name")
        self.assertEqual(len(data["top_vendors"]["buckets"]), 11)
        self.assertEqual(data["top_vendors"]["buckets"][-1]["key"], "Other Vendors")
        self.assertEqual(data["top_vendors"]["total"], data["sales_by_vendor"]["total"])

    def test_view_json(self):
        data = generate_view_json(_sales(), ViewConfig(page_size=5, page=3))
        json.dumps(data)
        self.assertEqual(data["total_count"], 12)
        self.assertEqual(data["total_pages"], 3)
        self.assertEqual(len(data["rows"]), 2)
        self.assertIn("Vendor Name", data["columns"])

    def test_comparison_json(self):
        jan = PeriodFilter(PeriodType.MONTH, 2024, 1)
        feb = PeriodFilter(PeriodType.MONTH, 2024, 2)
        data = generate_comparison_json(_sales(), jan, feb)
        json.dumps(data)
        self.assertEqual(data["first_period"], "January 2024")
        self.assertEqual(data["first"]["total_records"] + data["second"]["total_records"], 12)


class TestExcelReport(unittest.TestCase):

    def setUp(self):
        self.tmp = Path(tempfile.mkdtemp())

    def tearDown(self):
        shutil.rmtree(self.tmp, ignore_errors=True)

    def test_workbook_sheets(self):
        out = generate_excel(_sales(), self.tmp / "nested" / "Analysis.xlsx", source_name="sales.csv")
        self.assertTrue(out.exists())
        wb = load_workbook(out)
        for name in ["Summary", "By Vendor", "Top Vendors", "Sales Trend", "Currency", "Order Type x Category"]:
            self.assertIn(name, wb.sheetnames)

        ws = wb["Top Vendors"]
        self.assertEqual(ws.cell(row=1, column=1).value, "Name")
        keys = [ws.cell(row=r, column=1).value for r in range(2, ws.max_row + 1)]
        self.assertIn("Other Vendors", keys)
        self.assertEqual(keys[-1], "TOTAL")

    def test_empty_dataset_workbook(self):
        out = generate_excel(Dataset.from_records([], columns=["Vendor"]), self.tmp / "empty.xlsx")
        wb = load_workbook(out)
        self.assertEqual(wb["By Vendor"].max_row, 1)

    def test_safe_sheet_title(self):
        self.assertEqual(safe_sheet_title("a/b:c"), "a-b-c")
        self.assertEqual(len(safe_sheet_title("x" * 40)), 31)
        self.assertEqual(safe_sheet_title(""), "Sheet")

    def test_style_tables_hold_only_used_entries(self):
        self.assertEqual(set(HIGHLIGHT_FILLS), {"other"})
        self.assertEqual(set(NUMBER_FORMATS), {"amount", "percent", "number"})


if __name__ == "__main__":
    unittest.main()
