import logging
from pathlib import Path

from openpyxl import load_workbook
from sqlalchemy import select

from inventorypro.database import Base, engine, session_scope
from inventorypro.models import import_all_models
from inventorypro.models.product import Product
from inventorypro.services.ledger_service import BulkUpdate, bulk_adjust_stock

logger = logging.getLogger(__name__)

HEADER_ALIASES = {
    "id": "product_id",
    "productid": "product_id",
    "product_id": "product_id",
    "sku": "sku",
    "item_code": "sku",
    "itemcode": "sku",
    "code": "sku",
    "new_quantity": "new_quantity",
    "newquantity": "new_quantity",
    "quantity": "new_quantity",
    "qty": "new_quantity",
    "count": "new_quantity",
    "counted": "new_quantity",
    "counted_qty": "new_quantity",
    "stock": "new_quantity",
    "stock_quantity": "new_quantity",
}

_PLACEHOLDER_VALUES = {"none", "[none]", "null", "na", "n/a", "nan", "-", "--"}


def _is_blank(value):
    return value is None or (isinstance(value, str) and not value.strip())


def _clean_text(value):
    if _is_blank(value):
        return None
    text = str(value).strip()
    if text.lower() in _PLACEHOLDER_VALUES:
        return None
    return text


def normalize_header(value):
    if value is None:
        return ""
    value_text = str(value).strip().lower()
    if not value_text:
        return ""
    for char in (" ", "-", ".", "/"):
        value_text = value_text.replace(char, "_")
    value_text = "_".join(part for part in value_text.split("_") if part)
    alias = HEADER_ALIASES.get(value_text)
    if alias:
        return alias
    alias = HEADER_ALIASES.get(value_text.replace("_", ""))
    if alias:
        return alias
    return value_text


def to_int(value, field, required=True):
    if _is_blank(value):
        if required:
            raise ValueError(f"{field} is required")
        return None
    if isinstance(value, bool):
        raise ValueError(f"{field} must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value.is_integer():
            return int(value)
        raise ValueError(f"{field} must be an integer")
    if isinstance(value, str):
        value_text = value.strip().replace(",", "")
        try:
            return int(value_text)
        except ValueError:
            try:
                numeric = float(value_text)
            except ValueError:
                raise ValueError(f"{field} must be an integer") from None
            if not numeric.is_integer():
                raise ValueError(f"{field} must be an integer")
            return int(numeric)
    return int(value)


def load_count_rows(worksheet):
    rows_iter = worksheet.iter_rows(values_only=True)
    headers = next(rows_iter, None)
    if not headers:
        return []
    header_keys = [normalize_header(header) for header in headers]
    columns = {key for key in header_keys if key}
    if "new_quantity" not in columns:
        raise ValueError("stock count sheet missing columns: new_quantity")
    if "product_id" not in columns and "sku" not in columns:
        raise ValueError("stock count sheet needs a product_id or sku column")

    indices = [(idx, key) for idx, key in enumerate(header_keys) if key in ("product_id", "sku", "new_quantity")]
    rows = []
    for row_number, row in enumerate(rows_iter, start=2):
        if row is None or all(_is_blank(value) for value in row):
            continue
        record = {key: row[idx] if idx < len(row) else None for idx, key in indices}
        record["row"] = row_number
        rows.append(record)
    return rows


def _resolve_product(db, record):
    row_number = record["row"]
    product_id = to_int(record.get("product_id"), f"row {row_number} product_id", required=False)
    if product_id is not None:
        product = db.get(Product, product_id)
        if product is None:
            raise ValueError(f"row {row_number}: product {product_id} not found")
        return product

    sku = _clean_text(record.get("sku"))
    if sku is None:
        raise ValueError(f"row {row_number}: product_id or sku is required")
    matches = db.execute(select(Product).where(Product.sku == sku)).unique().scalars().all()
    if not matches:
        raise ValueError(f"row {row_number}: sku {sku} not found")
    if len(matches) > 1:
        raise ValueError(f"row {row_number}: sku {sku} matches {len(matches)} products")
    return matches[0]


def plan_updates(db, rows):
    """Turn counted rows into bulk entries against the quantities stored now."""
    plan = []
    seen = set()
    for record in rows:
        product = _resolve_product(db, record)
        if product.id in seen:
            raise ValueError(f"row {record['row']}: product {product.id} listed twice")
        seen.add(product.id)
        counted = to_int(record.get("new_quantity"), f"row {record['row']} new_quantity")
        plan.append(
            BulkUpdate(
                product_id=product.id,
                current_quantity=product.stock_quantity,
                new_quantity=max(0, counted),
            )
        )
    return plan


def import_stock_counts(workbook_path, *, sheet=None, notes=None, actor=None, dry_run=False, db=None):
    workbook_path = Path(workbook_path)
    if not workbook_path.exists():
        raise FileNotFoundError(f"File not found: {workbook_path}")
    if workbook_path.suffix.lower() != ".xlsx":
        raise ValueError("Only .xlsx files are supported.")

    workbook = load_workbook(workbook_path, data_only=True, read_only=True)
    try:
        if sheet:
            if sheet not in workbook.sheetnames:
                raise ValueError(f"Sheet not found: {sheet}")
            worksheet = workbook[sheet]
        else:
            worksheet = workbook[workbook.sheetnames[0]]
        rows = load_count_rows(worksheet)
    finally:
        workbook.close()

    if not rows:
        raise ValueError("No stock count rows found.")

    if db is None:
        import_all_models()
        Base.metadata.create_all(bind=engine)
    with session_scope(db) as session:
        plan = plan_updates(session, rows)
        changes = [entry for entry in plan if entry.new_quantity != entry.current_quantity]
        summary = {
            "rows": len(rows),
            "changed": len(changes),
            "unchanged": len(plan) - len(changes),
            "plan": plan,
        }
        if dry_run:
            session.rollback()
            return summary
        result = bulk_adjust_stock(session, plan, notes=notes, actor=actor)
        summary["changed"] = result.changed
        summary["movements"] = result.committed

    logger.info(
        "Imported stock counts from %s: %s changed, %s unchanged",
        workbook_path,
        summary["changed"],
        summary["unchanged"],
    )
    return summary


__all__ = [
    "import_stock_counts",
    "load_count_rows",
    "normalize_header",
    "plan_updates",
    "to_int",
]
