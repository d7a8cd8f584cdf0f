"""
test_cli.py

Smoke tests for the command-line entry point.
"""

import contextlib
import io
import json
import shutil
import tempfile
import unittest
from pathlib import Path

from salescope.cli import main

CSV = (
    "Order Number,Vendor Name,Document Total,Document Date,Payment Type\n"
    "1001,Acme,100,2024-01-05,Paid\n"
    "2002,Globex,50,2024-02-10,Pending\n"
    "3003,Acme,25,2024-02-20,Paid\n"
)


class TestCli(unittest.TestCase):

    def setUp(self):
        self.tmp = Path(tempfile.mkdtemp())
        self.csv = self.tmp / "sales.csv"
        self.csv.write_text(CSV, encoding="utf-8")

    def tearDown(self):
        shutil.rmtree(self.tmp, ignore_errors=True)

    def _run(self, *argv):
        out, err = io.StringIO(), io.StringIO()
        with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
            code = main(list(argv))
        return code, out.getvalue(), err.getvalue()

    def test_analyze_json(self):
        code, out, _ = self._run("analyze", str(self.csv), "--json")
        self.assertEqual(code, 0)
        data = json.loads(out)
        self.assertEqual(data["total_sales"], 175.0)
        self.assertEqual(data["paid_sales"], 125.0)

    def test_analyze_excel(self):
        target = self.tmp / "out" / "report.xlsx"
        code, out, _ = self._run("analyze", str(self.csv), "--excel", str(target))
        self.assertEqual(code, 0)
        self.assertTrue(target.exists())
        self.assertIn("TOTAL SALES", out.upper())

    def test_view_json(self):
        code, out, _ = self._run(
            "view", str(self.csv), "--contains", "Vendor Name=acme", "--sort", "Document Total", "--desc", "--json",
        )
        self.assertEqual(code, 0)
        data = json.loads(out)
        self.assertEqual([r["Document Total"] for r in data["rows"]], ["100", "25"])

    def test_view_table(self):
        code, out, _ = self._run("view", str(self.csv), "--order-type", "Local")
        self.assertEqual(code, 0)
        self.assertIn("Globex", out)
        self.assertIn("1 matching rows", out)

    def test_compare_json(self):
        code, out, _ = self._run("compare", str(self.csv), "--first", "2024-01", "--second", "2024-02", "--json")
        self.assertEqual(code, 0)
        data = json.loads(out)
        self.assertEqual(data["changes"]["total_sales"], -25.0)

    def test_compare_defaults_to_previous_period(self):
        code, out, _ = self._run("compare", str(self.csv), "--second", "2024-02", "--json")
        self.assertEqual(code, 0)
        self.assertEqual(json.loads(out)["first_period"], "January 2024")

    def test_roles(self):
        code, out, _ = self._run("roles", str(self.csv), "--json")
        self.assertEqual(code, 0)
        self.assertEqual(json.loads(out)["orderCode"], "Order Number")

    def test_missing_file(self):
        code, _, err = self._run("analyze", str(self.tmp / "nope.csv"))
        self.assertEqual(code, 1)
        self.assertIn("File not found", err)

    def test_no_command_prints_help(self):
        code, out, _ = self._run()
        self.assertEqual(code, 0)
        self.assertIn("analyze", out)


if __name__ == "__main__":
    unittest.main()
