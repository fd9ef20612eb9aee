import unittest
from decimal import Decimal

from inventorypro.core.constants import UNCATEGORIZED_LABEL
from inventorypro.services.report_service import (
    build_inventory_report,
    category_inventory,
    inventory_stats,
    low_stock_products,
    top_products,
)
from support import add_category, add_product, make_session_factory


def product(name, cost, price, qty, threshold=0, category=None, category_id=None):
    return {
        "id": None,
        "name": name,
        "sku": None,
        "cost_price": cost,
        "selling_price": price,
        "stock_quantity": qty,
        "low_stock_threshold": threshold,
        "category": category,
        "category_id": category_id,
    }


class InventoryStatsTest(unittest.TestCase):
    def test_total_value_sums_cost_times_quantity(self):
        stats = inventory_stats([product("A", 10, 12, 2), product("B", 20, 25, 3)])
        self.assertEqual(stats.total_value, Decimal("80"))

    def test_profit_is_revenue_minus_value(self):
        snapshot = [
            product("A", Decimal("10.10"), Decimal("19.99"), 3, threshold=5),
            product("B", Decimal("0.30"), Decimal("0.10"), 7, threshold=2),
        ]
        stats = inventory_stats(snapshot)
        self.assertEqual(stats.potential_revenue, Decimal("60.67"))
        self.assertEqual(stats.potential_profit, stats.potential_revenue - stats.total_value)
        self.assertEqual(stats.low_stock_count, 1)
        self.assertEqual(inventory_stats(snapshot), stats)

    def test_empty_snapshot(self):
        for snapshot in (None, []):
            stats = inventory_stats(snapshot)
            self.assertEqual(stats.total_value, 0)
            self.assertEqual(stats.low_stock_count, 0)


class CategoryInventoryTest(unittest.TestCase):
    def test_groups_in_first_encounter_order(self):
        rows = category_inventory(
            [
                product("A", 2, 3, 5, category={"id": 1, "name": "Tools"}),
                product("B", 1, 3, 4),
                product("C", 3, 4, 1, category={"id": 1, "name": "Tools"}),
                product("D", 5, 6, 2, category_id=2),
                product("E", 5, 6, 1, category_id=99),
            ],
            categories=[{"id": 2, "name": "Paint"}],
        )
        self.assertEqual([row.category for row in rows], ["Tools", UNCATEGORIZED_LABEL, "Paint"])
        tools, uncategorized, paint = rows
        self.assertEqual(tools.quantity, 6)
        self.assertEqual(tools.value, Decimal("13"))
        self.assertEqual(uncategorized.quantity, 5)
        self.assertEqual(uncategorized.value, Decimal("9"))
        self.assertEqual(paint.value, Decimal("10"))


class TopProductsTest(unittest.TestCase):
    def test_ranks_by_retail_value_and_keeps_ties_in_order(self):
        ranked = top_products(
            [
                product("low", 1, 1, 1),
                product("tie-first", 1, 5, 2),
                product("best", 1, 50, 1),
                product("tie-second", 1, 10, 1),
            ],
            limit=3,
        )
        self.assertEqual([item.name for item in ranked], ["best", "tie-first", "tie-second"])
        self.assertEqual(ranked[0].value, Decimal("50"))

    def test_limit(self):
        self.assertEqual(top_products([product("a", 1, 1, 1)], limit=0), [])


class LowStockTest(unittest.TestCase):
    def test_severity_and_order(self):
        items = low_stock_products(
            [
                product("ok", 1, 1, 10, threshold=5),
                product("low", 1, 1, 3, threshold=5),
                product("out", 1, 1, 0, threshold=5),
                product("edge", 1, 1, 5, threshold=5),
            ]
        )
        self.assertEqual([item.name for item in items], ["out", "low"])
        self.assertEqual(items[0].severity, "out_of_stock")
        self.assertEqual(items[1].severity, "low_stock")


class InventoryReportTest(unittest.TestCase):
    def test_report_from_store(self):
        engine, Session = make_session_factory()
        db = Session()
        try:
            tools = add_category(db, "Tools")
            add_product(db, name="Hammer", category_id=tools.id, stock_quantity=0, low_stock_threshold=2)
            add_product(db, name="Loose", stock_quantity=4, low_stock_threshold=1)

            report = build_inventory_report(db)
        finally:
            db.close()
            engine.dispose()

        self.assertEqual(report["stats"].low_stock_count, 1)
        self.assertEqual(report["out_of_stock_count"], 1)
        self.assertEqual(
            sorted(row.category for row in report["categories"]),
            ["Tools", UNCATEGORIZED_LABEL],
        )
        self.assertEqual(report["low_stock"][0].name, "Hammer")


if __name__ == "__main__":
    unittest.main()
