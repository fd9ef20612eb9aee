import importlib

from inventorypro.models.alert import Alert
from inventorypro.models.category import Category
from inventorypro.models.product import Product
from inventorypro.models.stock_movement import StockMovement


def import_all_models() -> None:
    for module_name in (
        "inventorypro.models.alert",
        "inventorypro.models.category",
        "inventorypro.models.product",
        "inventorypro.models.stock_movement",
    ):
        importlib.import_module(module_name)


__all__ = [
    "Alert",
    "Category",
    "Product",
    "StockMovement",
    "import_all_models",
]
