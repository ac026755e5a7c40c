"""
PayOptimizer
- Allocate payment methods (cards with promotions, loyalty points) to a batch
  of orders so each order pays as little as possible within method limits.
- Print per-method totals; optionally export plans to CSV or Excel.

Run:
  python pay_optimizer.py orders.json paymentmethods.json

Dependencies:
  pip install openpyxl
"""
from __future__ import annotations
import argparse
import logging
import sys
from typing import List, Optional

from config import POINTS_ID, InputError, load_orders, load_payment_methods
from csv_handler import export_plans_to_csv, import_orders_from_csv
from excel_export import export_excel
from logging_utils import configure_logging
from optimizer import PaymentOptimizer
from report import print_report

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pay-optimizer",
        description="Choose the cheapest payment methods for a batch of orders.",
    )
    parser.add_argument("orders", help="orders file (.json, or .csv with id,value,promotions)")
    parser.add_argument("methods", help="payment methods JSON file")
    parser.add_argument("--points-id", default=POINTS_ID, help=f"id of the loyalty points method (default: {POINTS_ID})")
    parser.add_argument("--csv", metavar="PATH", help="also write committed plans to a CSV file")
    parser.add_argument("--excel", metavar="PATH", help="also write an Excel report")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="logging level (default: WARNING)",
    )
    parser.add_argument("--log-file", metavar="PATH", help="also write log records to a file")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the application"""
    args = build_parser().parse_args(argv)
    configure_logging(getattr(logging, args.log_level), log_path=args.log_file)

    try:
        if args.orders.lower().endswith(".csv"):
            orders = import_orders_from_csv(args.orders)
        else:
            orders = load_orders(args.orders)
        methods = load_payment_methods(args.methods)

        optimizer = PaymentOptimizer(orders, methods, points_id=args.points_id)
        summary = optimizer.optimize()

        if args.csv:
            export_plans_to_csv(optimizer.plans, args.csv)
        if args.excel:
            export_excel(optimizer, args.excel)
    except (InputError, OSError) as exc:
        logger.debug("Run aborted", exc_info=True)
        print(f"There was an error: {exc}", file=sys.stderr)
        return 1

    print_report(summary)
    return 0


if __name__ == "__main__":
    sys.exit(main())
