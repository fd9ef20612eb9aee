import argparse
import sys
from pathlib import Path

# Ensure repo root is on sys.path when running this script directly.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from inventorypro.core.currency import format_inr, format_inr_compact
from inventorypro.core.logging import setup_logging
from inventorypro.database import session_scope
from inventorypro.services.report_service import build_inventory_report


def parse_args():
    parser = argparse.ArgumentParser(description="Print inventory value and low-stock summary.")
    parser.add_argument("--top", type=int, default=5, help="Number of top products to list.")
    return parser.parse_args()


def main():
    setup_logging()
    args = parse_args()

    with session_scope() as db:
        report = build_inventory_report(db, top_limit=args.top)

    stats = report["stats"]
    print(f"Inventory value:   {format_inr(stats.total_value)}")
    print(f"Potential revenue: {format_inr(stats.potential_revenue)}")
    print(f"Potential profit:  {format_inr(stats.potential_profit)}")
    print(f"Low stock items:   {stats.low_stock_count} ({report['out_of_stock_count']} out of stock)")

    print("By category:")
    for row in report["categories"]:
        print(f"  {row.category}: {row.quantity} units, {format_inr_compact(row.value)}")

    print("Top products by retail value:")
    for item in report["top_products"]:
        print(f"  {item.name}: {format_inr_compact(item.value)}")


if __name__ == "__main__":
    main()
