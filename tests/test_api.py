import unittest
from decimal import Decimal
from unittest.mock import MagicMock, patch

import jwt
from fastapi.testclient import TestClient

from inventorypro.core import security
from inventorypro.database.session import get_db
from inventorypro.main import app
from inventorypro.routers import health
from inventorypro.services import alert_service
from support import add_product, make_session_factory


JWT_TEST_SECRET = "inventory-test-secret-0123456789abcdef"


class ApiTestCase(unittest.TestCase):
    def setUp(self):
        self.engine, self.Session = make_session_factory()

        def override_get_db():
            db = self.Session()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        self.client = TestClient(app)
        self.db = self.Session()

    def tearDown(self):
        app.dependency_overrides.clear()
        self.db.close()
        self.engine.dispose()


class StockApiTest(ApiTestCase):
    def test_adjust_records_movement(self):
        product = add_product(self.db, stock_quantity=10)
        response = self.client.post(
            "/stock/adjust",
            json={
                "product_id": product.id,
                "quantity_change": -3,
                "current_quantity": 10,
                "movement_type": "sale",
                "notes": "Counter sale",
            },
            headers={"X-Actor-Id": "cashier-1"},
        )
        self.assertEqual(response.status_code, 201, response.text)
        body = response.json()
        self.assertEqual(body["previous_quantity"], 10)
        self.assertEqual(body["new_quantity"], 7)
        self.assertEqual(body["movement_type"], "sale")
        self.assertEqual(body["created_by"], "cashier-1")

    def test_adjust_below_zero_is_rejected(self):
        product = add_product(self.db, stock_quantity=2)
        response = self.client.post(
            "/stock/adjust",
            json={"product_id": product.id, "quantity_change": -5, "current_quantity": 2},
        )
        self.assertEqual(response.status_code, 400)

    def test_adjust_rejects_bulk_update_type(self):
        product = add_product(self.db, stock_quantity=2)
        response = self.client.post(
            "/stock/adjust",
            json={
                "product_id": product.id,
                "quantity_change": 1,
                "current_quantity": 2,
                "movement_type": "bulk_update",
            },
        )
        self.assertEqual(response.status_code, 422)

    def test_adjust_with_stale_quantity_conflicts(self):
        product = add_product(self.db, stock_quantity=8)
        response = self.client.post(
            "/stock/adjust",
            json={"product_id": product.id, "quantity_change": 1, "current_quantity": 5},
        )
        self.assertEqual(response.status_code, 409)

    def test_adjust_unknown_product(self):
        response = self.client.post(
            "/stock/adjust",
            json={"product_id": 999, "quantity_change": 1, "current_quantity": 0},
        )
        self.assertEqual(response.status_code, 404)

    def test_bulk_update(self):
        first = add_product(self.db, name="First", stock_quantity=10)
        second = add_product(self.db, name="Second", stock_quantity=4)
        response = self.client.post(
            "/stock/bulk",
            json={
                "updates": [
                    {"product_id": first.id, "current_quantity": 10, "new_quantity": 15},
                    {"product_id": second.id, "current_quantity": 4, "new_quantity": 4},
                ],
                "notes": "Weekly count",
            },
        )
        self.assertEqual(response.status_code, 200, response.text)
        body = response.json()
        self.assertEqual(body["changed"], 1)
        self.assertEqual(body["skipped"], [second.id])
        self.assertEqual(body["movements"][0]["quantity_change"], 5)
        self.assertEqual(body["movements"][0]["movement_type"], "bulk_update")

    def test_bulk_clamps_negative_targets(self):
        product = add_product(self.db, stock_quantity=3)
        response = self.client.post(
            "/stock/bulk",
            json={"updates": [{"product_id": product.id, "current_quantity": 3, "new_quantity": -4}]},
        )
        self.assertEqual(response.status_code, 200, response.text)
        self.assertEqual(response.json()["movements"][0]["new_quantity"], 0)

    def test_bulk_partial_failure_reports_committed_prefix(self):
        first = add_product(self.db, name="First", stock_quantity=10)
        second = add_product(self.db, name="Second", stock_quantity=4)
        response = self.client.post(
            "/stock/bulk",
            json={
                "updates": [
                    {"product_id": first.id, "current_quantity": 10, "new_quantity": 12},
                    {"product_id": second.id, "current_quantity": 9, "new_quantity": 1},
                ]
            },
        )
        self.assertEqual(response.status_code, 409)
        detail = response.json()["detail"]
        self.assertEqual(detail["failed_at"], 1)
        self.assertEqual(len(detail["committed"]), 1)
        self.assertEqual(detail["committed"][0]["product_id"], first.id)

    def test_empty_bulk_is_rejected(self):
        response = self.client.post("/stock/bulk", json={"updates": []})
        self.assertEqual(response.status_code, 422)

    def test_out_of_range_quantities_are_rejected(self):
        product = add_product(self.db, stock_quantity=10)
        adjust = self.client.post(
            "/stock/adjust",
            json={"product_id": product.id, "quantity_change": 10**20, "current_quantity": 10},
        )
        bulk = self.client.post(
            "/stock/bulk",
            json={"updates": [{"product_id": product.id, "current_quantity": 10, "new_quantity": 10**20}]},
        )
        self.assertEqual(adjust.status_code, 422)
        self.assertEqual(bulk.status_code, 422)
        self.assertEqual(self.client.get("/stock/movements").json(), [])

    def test_movement_history_and_reconcile(self):
        product = add_product(self.db, stock_quantity=10)
        for change, current in ((5, 10), (-2, 15)):
            self.client.post(
                "/stock/adjust",
                json={"product_id": product.id, "quantity_change": change, "current_quantity": current},
            )

        response = self.client.get("/stock/movements", params={"product_id": product.id, "limit": 1})
        self.assertEqual(response.status_code, 200)
        movements = response.json()
        self.assertEqual(len(movements), 1)
        self.assertEqual(movements[0]["new_quantity"], 13)

        self.assertEqual(self.client.get("/stock/reconcile").json(), [])
        self.client.patch(f"/products/{product.id}", json={"stock_quantity": 50})
        drift = self.client.get("/stock/reconcile").json()
        self.assertEqual(drift[0]["product_id"], product.id)
        self.assertEqual(drift[0]["ledger_quantity"], 13)


class ProductApiTest(ApiTestCase):
    def test_patch_with_blank_name_is_rejected(self):
        product = add_product(self.db, name="Drill")
        response = self.client.patch(f"/products/{product.id}", json={"name": "   "})
        self.assertEqual(response.status_code, 422)
        self.assertEqual(self.client.get(f"/products/{product.id}").json()["name"], "Drill")

    def test_patch_strips_name(self):
        product = add_product(self.db, name="Drill")
        response = self.client.patch(f"/products/{product.id}", json={"name": "  Hammer Drill "})
        self.assertEqual(response.status_code, 200, response.text)
        self.assertEqual(response.json()["name"], "Hammer Drill")


class HealthApiTest(ApiTestCase):
    def test_reports_store_reachable(self):
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["store"], "ok")

    def test_unreachable_store_is_503(self):
        with patch.object(health, "store_is_reachable", return_value=False):
            response = self.client.get("/health")
        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json()["status"], "degraded")


class ReportApiTest(ApiTestCase):
    def test_summary(self):
        add_product(
            self.db,
            name="Mouse",
            cost_price=Decimal("8.00"),
            selling_price=Decimal("12.00"),
            stock_quantity=10,
            low_stock_threshold=5,
        )
        add_product(self.db, name="Cable", stock_quantity=0, low_stock_threshold=5)

        body = self.client.get("/reports/summary").json()
        self.assertEqual(Decimal(body["stats"]["total_value"]), Decimal("80"))
        self.assertEqual(Decimal(body["stats"]["potential_profit"]), Decimal("40"))
        self.assertEqual(body["stats"]["low_stock_count"], 1)
        self.assertEqual(body["out_of_stock_count"], 1)
        self.assertEqual(body["low_stock"][0]["severity"], "out_of_stock")
        self.assertEqual(body["categories"][0]["category"], "Uncategorized")


class AuthApiTest(ApiTestCase):
    def test_write_requires_key_when_configured(self):
        settings = MagicMock(API_KEYS="secret-key", JWT_SECRET=None)
        with patch.object(security, "get_settings", return_value=settings):
            denied = self.client.post("/categories", json={"name": "Tools"})
            allowed = self.client.post(
                "/categories",
                json={"name": "Tools"},
                headers={"X-API-Key": "secret-key"},
            )
        self.assertEqual(denied.status_code, 401)
        self.assertEqual(allowed.status_code, 201, allowed.text)

    def _jwt_settings(self):
        return MagicMock(API_KEYS=None, JWT_SECRET=JWT_TEST_SECRET, JWT_ALGORITHM="HS256")

    def test_jwt_subject_is_recorded_as_actor(self):
        product = add_product(self.db, stock_quantity=4)
        token = jwt.encode({"sub": "alice"}, JWT_TEST_SECRET, algorithm="HS256")

        with patch.object(security, "get_settings", return_value=self._jwt_settings()):
            response = self.client.post(
                "/stock/adjust",
                json={"product_id": product.id, "quantity_change": 2, "current_quantity": 4},
                headers={"Authorization": f"Bearer {token}", "X-Actor-Id": "mallory"},
            )

        self.assertEqual(response.status_code, 201, response.text)
        self.assertEqual(response.json()["created_by"], "alice")

    def test_jwt_signed_with_another_secret_is_rejected(self):
        product = add_product(self.db, stock_quantity=4)
        token = jwt.encode({"sub": "alice"}, "a-different-secret-of-at-least-32-bytes", algorithm="HS256")

        with patch.object(security, "get_settings", return_value=self._jwt_settings()):
            response = self.client.post(
                "/stock/adjust",
                json={"product_id": product.id, "quantity_change": 2, "current_quantity": 4},
                headers={"Authorization": f"Bearer {token}"},
            )

        self.assertEqual(response.status_code, 401)

    def test_duplicate_category_conflicts(self):
        self.client.post("/categories", json={"name": "Tools"})
        response = self.client.post("/categories", json={"name": "Tools"})
        self.assertEqual(response.status_code, 409)


class AlertApiTest(ApiTestCase):
    def test_low_stock_alert(self):
        add_product(self.db, stock_quantity=1, low_stock_threshold=5)
        with patch.object(alert_service, "send_email", return_value="email-9"):
            response = self.client.post("/alerts/low-stock", json={"email": "ops@example.com"})
        self.assertEqual(response.status_code, 200, response.text)
        self.assertEqual(response.json()["product_count"], 1)

        history = self.client.get("/alerts").json()
        self.assertEqual(len(history), 1)
        self.assertTrue(history[0]["delivered"])
        self.assertEqual(history[0]["provider_message_id"], "email-9")

    def test_low_stock_alert_failure(self):
        add_product(self.db, stock_quantity=1, low_stock_threshold=5)
        with patch.object(alert_service, "send_email", side_effect=RuntimeError("boom")):
            response = self.client.post("/alerts/low-stock", json={"email": "ops@example.com"})
        self.assertEqual(response.status_code, 500)
        self.assertIn("boom", response.json()["detail"])


if __name__ == "__main__":
    unittest.main()
