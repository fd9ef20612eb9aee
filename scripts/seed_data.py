import argparse
import sys
from decimal import Decimal
from pathlib import Path

# Ensure repo root is on sys.path when running this script directly.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from sqlalchemy import delete, select

from inventorypro.core.logging import setup_logging
from inventorypro.database import Base, SessionLocal, engine
from inventorypro.models import Category, Product, StockMovement, import_all_models


def parse_args():
    parser = argparse.ArgumentParser(description="Seed a sample product catalogue.")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Clear existing data before seeding.",
    )
    return parser.parse_args()


def main():
    setup_logging()
    args = parse_args()

    import_all_models()
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        if args.reset:
            db.execute(delete(StockMovement))
            db.execute(delete(Product))
            db.execute(delete(Category))
            db.commit()

        has_product = db.execute(select(Product.id).limit(1)).first()
        if has_product:
            print("Seed skipped: products already exist.")
            return

        electronics = Category(name="Electronics")
        stationery = Category(name="Stationery")
        db.add_all([electronics, stationery])
        db.flush()

        db.add_all(
            [
                Product(
                    name="USB-C Charger",
                    sku="EL-1001",
                    category_id=electronics.id,
                    cost_price=Decimal("450.00"),
                    selling_price=Decimal("799.00"),
                    stock_quantity=40,
                    low_stock_threshold=10,
                ),
                Product(
                    name="Wireless Mouse",
                    sku="EL-1002",
                    category_id=electronics.id,
                    cost_price=Decimal("320.00"),
                    selling_price=Decimal("599.00"),
                    stock_quantity=4,
                    low_stock_threshold=8,
                ),
                Product(
                    name="A4 Notebook",
                    sku="ST-2001",
                    category_id=stationery.id,
                    cost_price=Decimal("35.00"),
                    selling_price=Decimal("60.00"),
                    stock_quantity=0,
                    low_stock_threshold=25,
                ),
                Product(
                    name="Gift Wrap",
                    cost_price=Decimal("15.00"),
                    selling_price=Decimal("30.00"),
                    stock_quantity=120,
                    low_stock_threshold=20,
                ),
            ]
        )
        db.commit()
        print("Seed data created.")
    finally:
        db.close()


if __name__ == "__main__":
    main()
