from inventorypro.services.alert_service import run_low_stock_alert
from inventorypro.services.ledger_service import (
    BulkAdjustResult,
    BulkUpdate,
    adjust_stock,
    bulk_adjust_stock,
    find_ledger_discrepancies,
)
from inventorypro.services.report_service import build_inventory_report

__all__ = [
    "BulkAdjustResult",
    "BulkUpdate",
    "adjust_stock",
    "build_inventory_report",
    "bulk_adjust_stock",
    "find_ledger_discrepancies",
    "run_low_stock_alert",
]
