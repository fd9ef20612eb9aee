from decimal import Decimal

from sqlalchemy.orm import sessionmaker

from inventorypro.database import Base, build_engine
from inventorypro.models import Category, Product, import_all_models


def make_session_factory():
    import_all_models()
    engine = build_engine("sqlite:///:memory:")
    Base.metadata.create_all(bind=engine)
    return engine, sessionmaker(bind=engine)


def add_category(db, name):
    category = Category(name=name)
    db.add(category)
    db.commit()
    return category


def add_product(db, name="Widget", **values):
    values.setdefault("cost_price", Decimal("10.00"))
    values.setdefault("selling_price", Decimal("15.00"))
    values.setdefault("stock_quantity", 10)
    values.setdefault("low_stock_threshold", 5)
    product = Product(name=name, **values)
    db.add(product)
    db.commit()
    return product
