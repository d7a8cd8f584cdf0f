#!/usr/bin/env python3
"""
SaleScope CLI — analyze, browse and compare sales CSV exports.

USAGE:
  salescope analyze sales.csv                              # Headline summary
  salescope analyze sales.csv --json                       # Full analysis as JSON
  salescope analyze sales.csv --excel out/Analysis.xlsx    # Styled workbook
  salescope analyze sales.csv --order-type Import          # Treat every row as Import

  salescope view sales.csv --search acme --sort "Doc Total" --desc
  salescope view sales.csv --filter "Payment Type=Cash" --contains "Vendor Name=corp"
  salescope view sales.csv --start 2024-01-01 --end 2024-03-31 --page 2

  salescope compare sales.csv --first 2024-01 --second 2024-02
  salescope compare sales.csv --second 2024-Q2                  # Q2 against Q1
  salescope compare sales.csv --first 2024-Q1 --second 2024-01-01:2024-06-30

  salescope roles sales.csv                                # Detected column roles
"""
from __future__ import annotations

import argparse
import json
import logging
import re
import sys
from datetime import datetime
from pathlib import Path

import pandas as pd

from salescope.config import DEFAULT_PAGE_SIZE, LOG_LEVEL, REPORTS_FOLDER
from salescope.data.dataset import Dataset
from salescope.data.loader import IngestionError, load_csv
from salescope.data.parsers import parse_date
from salescope.data.roles import infer_dataset_roles
from salescope.data.schemas import DateFilter, PeriodFilter, PeriodType, ViewConfig

logger = logging.getLogger("salescope.cli")

_QUARTER_RE = re.compile(r"^(\d{4})-?Q([1-4])$", re.IGNORECASE)
_MONTH_RE = re.compile(r"^(\d{4})-(\d{1,2})$")
_YEAR_RE = re.compile(r"^(\d{4})$")


# ---------------------------------------------------------------------------
# Argument helpers
# ---------------------------------------------------------------------------

def _banner(title: str) -> None:
    print("\n" + "=" * 70)
    print(f"  SALESCOPE — {title}")
    print("=" * 70)


def _load(path: str) -> Dataset:
    source = Path(path)
    if not source.exists():
        raise IngestionError(f"File not found: {path}")
    return load_csv(source)


def _date_arg(text: str):
    day = parse_date(text)
    if day is None:
        raise argparse.ArgumentTypeError(f"not a date: {text!r}")
    return day


def _pair_arg(text: str) -> tuple[str, str]:
    column, sep, value = text.partition("=")
    if not sep or not column:
        raise argparse.ArgumentTypeError(f"expected COLUMN=VALUE, got {text!r}")
    return column, value


def _period_arg(text: str) -> PeriodFilter:
    """START:END, YYYY-Qn, YYYY-MM or YYYY."""
    text = text.strip()
    if ":" in text:
        start, _, end = text.partition(":")
        return PeriodFilter(PeriodType.CUSTOM, start_date=_date_arg(start), end_date=_date_arg(end))
    m = _QUARTER_RE.match(text)
    if m:
        return PeriodFilter(PeriodType.QUARTER, int(m.group(1)), quarter=int(m.group(2)))
    m = _MONTH_RE.match(text)
    if m and 1 <= int(m.group(2)) <= 12:
        return PeriodFilter(PeriodType.MONTH, int(m.group(1)), int(m.group(2)))
    m = _YEAR_RE.match(text)
    if m:
        return PeriodFilter(PeriodType.YEAR, int(m.group(1)))
    raise argparse.ArgumentTypeError(f"not a period: {text!r}")


def _print_json(data) -> None:
    print(json.dumps(data, indent=2, default=str))


def _print_breakdown(title: str, breakdown, limit: int = 10) -> None:
    if not len(breakdown):
        return
    print(f"\n  {title}")
    for bucket in breakdown.buckets[:limit]:
        print(f"    {bucket.key[:40]:<42}{bucket.count:>6}  {bucket.total:>16,.2f}")


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def cmd_analyze(args):
    """Summary, JSON or Excel analysis of one file."""
    from salescope.analytics.summary import analyze_dataset
    from salescope.reports.analysis_report import generate_json, write_workbook

    dataset = _load(args.file)

    if args.json:
        _print_json(generate_json(dataset, order_type_override=args.order_type))
        return

    _banner("SALES ANALYSIS")
    result = analyze_dataset(dataset, order_type_override=args.order_type)

    print(f"\n  File:          {args.file}")
    if result.date_start and result.date_end:
        print(f"  Date range:    {result.date_start} to {result.date_end}")
    print(f"  Records:       {result.total_records:,}")
    print(f"  Total sales:   {result.total_sales:,.2f}")
    print(f"  Average sale:  {result.average_sale_value:,.2f}")
    print(f"  Paid:          {result.paid_sales:,.2f}")
    print(f"  Outstanding:   {result.outstanding_payments:,.2f}")

    _print_breakdown("TOP VENDORS", result.top_vendors, limit=len(result.top_vendors))
    _print_breakdown("ORDER TYPES", result.order_types)
    _print_breakdown("ITEM vs SERVICE", result.item_service)
    _print_breakdown("CURRENCY", result.currency)
    _print_breakdown("SALES TREND", result.sales_trend, limit=24)

    if args.excel:
        out = Path(args.excel)
    elif args.save:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        out = REPORTS_FOLDER / f"Sales_Analysis_{timestamp}.xlsx"
    else:
        out = None

    if out is not None:
        write_workbook(result, out, source_name=Path(args.file).name)
        print(f"\n  Report saved to: {out}")
    print("=" * 70 + "\n")


def _view_config(args) -> ViewConfig:
    config = ViewConfig(page_size=args.page_size or None)
    if args.search:
        config = config.with_search(args.search)
    for column, value in args.filter or []:
        config = config.with_filter(column, value)
    for column, term in args.contains or []:
        config = config.with_substring(column, term)
    if args.order_type:
        config = config.with_order_type(args.order_type)
    if args.item_service:
        config = config.with_item_service(args.item_service)
    if args.date:
        config = config.with_date_filter(DateFilter.exact(args.date), args.date_column)
    elif args.start and args.end:
        config = config.with_date_filter(DateFilter.between(args.start, args.end), args.date_column)
    if args.sort:
        config = config.with_sort(args.sort)
        if args.desc:
            config = config.with_sort(args.sort)
    return config.with_page(args.page)


def cmd_view(args):
    """Search / filter / sort / paginate the raw rows."""
    from salescope.data.view import apply_view
    from salescope.reports.analysis_report import generate_view_json

    if (args.start is None) != (args.end is None):
        raise SystemExit("salescope view: --start and --end must be given together")

    dataset = _load(args.file)
    config = _view_config(args)

    if args.json:
        _print_json(generate_view_json(dataset, config))
        return

    view = apply_view(dataset, config)
    if view.rows:
        with pd.option_context("display.max_columns", None, "display.width", 200):
            print(pd.DataFrame(view.rows, columns=list(view.columns)).fillna("").to_string(index=False))
    else:
        print("No matching rows.")
    print(f"\nPage {view.page} of {max(view.total_pages, 1)}  |  {view.total_count:,} matching rows")


def cmd_compare(args):
    """Compare two periods of one file."""
    from salescope.analytics.comparison import compare_periods
    from salescope.reports.analysis_report import generate_comparison_json

    dataset = _load(args.file)
    first = args.first or args.second.previous()

    if args.json:
        _print_json(generate_comparison_json(dataset, first, args.second))
        return

    _banner("PERIOD COMPARISON")
    comparison = compare_periods(dataset, first, args.second)
    a, b = comparison.first, comparison.second

    print(f"\n  {'':<22}{comparison.first_period.label:>20}{comparison.second_period.label:>20}{'Change':>10}")
    for label, key in [("Total sales", "total_sales"), ("Records", "total_records"),
                       ("Average sale", "average_sale_value")]:
        change = comparison.changes.get(key)
        change_str = f"{change:+.1f}%" if change is not None else "n/a"
        print(f"  {label:<22}{getattr(a, key):>20,.2f}{getattr(b, key):>20,.2f}{change_str:>10}")

    if comparison.vendor_changes:
        print("\n  VENDORS")
        for row in comparison.vendor_changes[:15]:
            change = row["change_pct"]
            change_str = f"{change:+.1f}%" if change is not None else "new"
            print(f"    {row['key'][:30]:<32}{row['first_total']:>16,.2f}{row['second_total']:>16,.2f}{change_str:>10}")
    print("=" * 70 + "\n")


def cmd_roles(args):
    """Print the detected column for every role."""
    dataset = _load(args.file)
    roles = infer_dataset_roles(dataset)

    if args.json:
        _print_json(roles.to_dict())
        return

    print(f"\nCOLUMNS ({len(dataset.columns)}): {', '.join(dataset.columns)}\n")
    for role, column in roles.to_dict().items():
        print(f"  {role:<22}{column or '(not found)'}")
    print()


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="salescope",
        description="SaleScope — sales CSV analytics engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command")

    # analyze subcommand
    analyze_parser = subparsers.add_parser("analyze", help="Analyze a sales CSV")
    analyze_parser.add_argument("file", help="CSV file")
    analyze_parser.add_argument("--json", action="store_true", help="Print the full analysis as JSON")
    analyze_parser.add_argument("--excel", metavar="OUT", help="Write an Excel workbook to OUT")
    analyze_parser.add_argument("--save", action="store_true", help="Write a workbook to the reports folder")
    analyze_parser.add_argument("--order-type", help="Order type for files without an order code column")
    analyze_parser.set_defaults(func=cmd_analyze)

    # view subcommand
    view_parser = subparsers.add_parser("view", help="Browse raw rows")
    view_parser.add_argument("file", help="CSV file")
    view_parser.add_argument("--search", help="Free-text search across all columns")
    view_parser.add_argument("--filter", type=_pair_arg, action="append", metavar="COL=VAL",
                             help="Exact match on a column (repeatable)")
    view_parser.add_argument("--contains", type=_pair_arg, action="append", metavar="COL=VAL",
                             help="Case-insensitive substring match on a column (repeatable)")
    view_parser.add_argument("--order-type", help="Import, Local or Job (or 1/2/3)")
    view_parser.add_argument("--item-service", choices=["Item", "Service", "item", "service"],
                             help="Only items or only services")
    view_parser.add_argument("--date", type=_date_arg, help="Rows on this date")
    view_parser.add_argument("--start", type=_date_arg, help="Range start (inclusive)")
    view_parser.add_argument("--end", type=_date_arg, help="Range end (inclusive)")
    view_parser.add_argument("--date-column", help="Date column to filter on (default: detected)")
    view_parser.add_argument("--sort", metavar="COL", help="Sort column")
    view_parser.add_argument("--desc", action="store_true", help="Sort descending")
    view_parser.add_argument("--page", type=int, default=1, help="Page number (1-based)")
    view_parser.add_argument("--page-size", type=int, default=DEFAULT_PAGE_SIZE,
                             help=f"Rows per page, 0 for all (default {DEFAULT_PAGE_SIZE})")
    view_parser.add_argument("--json", action="store_true", help="Print the page as JSON")
    view_parser.set_defaults(func=cmd_view)

    # compare subcommand
    compare_parser = subparsers.add_parser("compare", help="Compare two periods")
    compare_parser.add_argument("file", help="CSV file")
    compare_parser.add_argument("--first", type=_period_arg,
                                help="START:END, YYYY-Qn, YYYY-MM or YYYY (default: the period before --second)")
    compare_parser.add_argument("--second", type=_period_arg, required=True,
                                help="START:END, YYYY-Qn, YYYY-MM or YYYY")
    compare_parser.add_argument("--json", action="store_true", help="Print the comparison as JSON")
    compare_parser.set_defaults(func=cmd_compare)

    # roles subcommand
    roles_parser = subparsers.add_parser("roles", help="Show detected column roles")
    roles_parser.add_argument("file", help="CSV file")
    roles_parser.add_argument("--json", action="store_true", help="Print roles as JSON")
    roles_parser.set_defaults(func=cmd_roles)

    return parser


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=LOG_LEVEL.upper(), format="%(levelname)s %(name)s: %(message)s")
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 0

    try:
        args.func(args)
    except IngestionError as exc:
        logger.error("%s", exc)
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
