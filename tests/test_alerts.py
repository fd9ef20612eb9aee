import unittest
from unittest.mock import patch

from sqlalchemy import select

from inventorypro.models import Alert
from inventorypro.services import alert_service
from inventorypro.services.alert_service import build_alert_html, build_alert_text, run_low_stock_alert
from inventorypro.services.report_service import LowStockItem
from support import add_product, make_session_factory


class LowStockAlertTest(unittest.TestCase):
    def setUp(self):
        self.engine, Session = make_session_factory()
        self.db = Session()

    def tearDown(self):
        self.db.close()
        self.engine.dispose()

    def alerts(self):
        return self.db.execute(select(Alert)).scalars().all()

    def test_nothing_to_report(self):
        add_product(self.db, stock_quantity=10, low_stock_threshold=5)
        with patch.object(alert_service, "send_email") as send:
            outcome = run_low_stock_alert(self.db, recipient="ops@example.com")

        self.assertTrue(outcome.success)
        self.assertEqual(outcome.message, "No low-stock items found")
        self.assertEqual(outcome.product_count, 0)
        send.assert_not_called()
        self.assertEqual(self.alerts(), [])

    def test_sends_low_stock_products_most_urgent_first(self):
        add_product(self.db, name="Plenty", stock_quantity=50, low_stock_threshold=5)
        add_product(self.db, name="Running Low", sku="RL-1", stock_quantity=3, low_stock_threshold=5)
        add_product(self.db, name="Gone", stock_quantity=0, low_stock_threshold=5)

        with patch.object(alert_service, "send_email", return_value="email-123") as send:
            outcome = run_low_stock_alert(self.db, recipient="ops@example.com")

        self.assertTrue(outcome.success)
        self.assertTrue(outcome.delivered)
        self.assertEqual(outcome.product_count, 2)
        self.assertEqual(outcome.email_id, "email-123")
        self.assertEqual(outcome.message, "Alert sent for 2 product(s)")

        subject, html_body, recipients = send.call_args.args
        self.assertIn("2 product(s)", subject)
        self.assertEqual(recipients, ["ops@example.com"])
        self.assertLess(html_body.index("Gone"), html_body.index("Running Low"))
        self.assertNotIn("Plenty", html_body)

        alerts = self.alerts()
        self.assertEqual(len(alerts), 1)
        self.assertTrue(alerts[0].delivered)
        self.assertEqual(alerts[0].provider_message_id, "email-123")

    def test_delivery_failure_is_reported_and_logged(self):
        add_product(self.db, stock_quantity=1, low_stock_threshold=5)
        with patch.object(
            alert_service,
            "send_email",
            side_effect=RuntimeError("Email API error: HTTP 422"),
        ):
            outcome = run_low_stock_alert(self.db, recipient="ops@example.com")

        self.assertFalse(outcome.success)
        self.assertIn("HTTP 422", outcome.message)
        alerts = self.alerts()
        self.assertEqual(len(alerts), 1)
        self.assertFalse(alerts[0].delivered)
        self.assertEqual(alerts[0].failure_reason, "Email API error: HTTP 422")

    def test_missing_recipient(self):
        add_product(self.db, stock_quantity=1, low_stock_threshold=5)
        with patch.object(alert_service, "get_settings") as settings:
            settings.return_value.ALERT_RECIPIENT_EMAIL = None
            outcome = run_low_stock_alert(self.db)

        self.assertFalse(outcome.success)
        self.assertEqual(outcome.message, "No alert recipient configured")

    def test_send_disabled_still_logs(self):
        add_product(self.db, stock_quantity=1, low_stock_threshold=5)
        with patch.object(alert_service, "send_email") as send:
            outcome = run_low_stock_alert(
                self.db,
                recipient="ops@example.com",
                send_notifications=False,
            )

        send.assert_not_called()
        self.assertTrue(outcome.success)
        self.assertFalse(outcome.delivered)
        self.assertEqual(len(self.alerts()), 1)


class AlertMessageTest(unittest.TestCase):
    def test_message_marks_out_of_stock_and_escapes_names(self):
        items = [
            LowStockItem(1, "Nuts & <Bolts>", None, 0, 4, "out_of_stock"),
            LowStockItem(2, "Washers", "W-2", 2, 4, "low_stock"),
        ]
        text = build_alert_text(items)
        html_body = build_alert_html(items)

        self.assertIn("SKU - | stock 0 / threshold 4 (OUT OF STOCK)", text)
        self.assertIn("SKU W-2 | stock 2 / threshold 4", text)
        self.assertIn("Nuts &amp; &lt;Bolts&gt;", html_body)
        self.assertIn("#dc2626", html_body)


if __name__ == "__main__":
    unittest.main()
