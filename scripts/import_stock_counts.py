import argparse
import sys
from pathlib import Path

# Ensure repo root is on sys.path when running this script directly.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from openpyxl.utils.exceptions import InvalidFileException
from sqlalchemy.exc import SQLAlchemyError

from inventorypro.core.errors import LedgerError, PartialBulkFailure
from inventorypro.core.logging import setup_logging
from inventorypro.services.import_service import import_stock_counts


def parse_args():
    parser = argparse.ArgumentParser(
        description="Apply a stock-count workbook as one bulk stock update."
    )
    parser.add_argument("--path", required=True, help="Path to .xlsx workbook.")
    parser.add_argument("--sheet", default=None, help="Sheet to read. Default: first sheet.")
    parser.add_argument("--notes", default=None, help="Notes recorded on every movement.")
    parser.add_argument("--actor", default=None, help="Recorded as created_by.")
    parser.add_argument("--dry-run", action="store_true", help="Show planned changes without saving.")
    return parser.parse_args()


def main():
    setup_logging()
    args = parse_args()
    try:
        summary = import_stock_counts(
            args.path,
            sheet=args.sheet,
            notes=args.notes,
            actor=args.actor,
            dry_run=args.dry_run,
        )
    except PartialBulkFailure as exc:
        raise SystemExit(
            f"Import stopped after {len(exc.result.committed)} change(s): {exc.result.error}. "
            "Re-run against fresh quantities."
        ) from exc
    except (OSError, ValueError, SQLAlchemyError, InvalidFileException, LedgerError) as exc:
        raise SystemExit(f"Import failed: {exc}") from exc

    for entry in summary["plan"]:
        if entry.new_quantity == entry.current_quantity:
            continue
        print(
            f"  product {entry.product_id}: "
            f"{entry.current_quantity} -> {entry.new_quantity} ({entry.quantity_change:+d})"
        )
    print(f"{summary['rows']} rows, {summary['changed']} changed, {summary['unchanged']} unchanged")

    if args.dry_run:
        print("Dry run complete, no changes committed.")
    else:
        print("Import complete.")


if __name__ == "__main__":
    main()
