import html
import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from inventorypro.config import get_settings
from inventorypro.core.constants import STATUS_OUT_OF_STOCK
from inventorypro.database import session_scope
from inventorypro.models.alert import Alert
from inventorypro.models.product import Product
from inventorypro.services.email_service import send_email
from inventorypro.services.report_service import LowStockItem, low_stock_products

logger = logging.getLogger(__name__)

_OUT_OF_STOCK_COLOR = "#dc2626"
_LOW_STOCK_COLOR = "#f59e0b"


@dataclass(frozen=True)
class AlertOutcome:
    success: bool
    message: str
    product_count: int
    delivered: bool
    email_id: Optional[str] = None


def build_alert_subject(items: list[LowStockItem]) -> str:
    return "⚠ Low Stock Alert: {} product(s) need attention".format(len(items))


def build_alert_text(items: list[LowStockItem]) -> str:
    lines = ["{} product(s) need attention:".format(len(items)), ""]
    for item in items:
        marker = " (OUT OF STOCK)" if item.severity == STATUS_OUT_OF_STOCK else ""
        lines.append(
            "- {} | SKU {} | stock {} / threshold {}{}".format(
                item.name,
                item.sku or "-",
                item.stock_quantity,
                item.low_stock_threshold,
                marker,
            )
        )
    return "\n".join(lines)


def build_alert_html(items: list[LowStockItem]) -> str:
    rows = []
    for item in items:
        color = _OUT_OF_STOCK_COLOR if item.severity == STATUS_OUT_OF_STOCK else _LOW_STOCK_COLOR
        rows.append(
            "<tr>"
            "<td>{}</td>"
            "<td>{}</td>"
            '<td style="color:{};font-weight:600;">{}</td>'
            "<td>{}</td>"
            "</tr>".format(
                html.escape(item.name or ""),
                html.escape(item.sku or "-"),
                color,
                item.stock_quantity,
                item.low_stock_threshold,
            )
        )
    return (
        "<h2>⚠ Low Stock Alert</h2>"
        "<p>{} product(s) need attention:</p>"
        "<table>"
        "<thead><tr><th>Product</th><th>SKU</th><th>Current Stock</th><th>Threshold</th></tr></thead>"
        "<tbody>{}</tbody>"
        "</table>"
        "<p>Sent from {}</p>"
    ).format(len(items), "".join(rows), html.escape(get_settings().APP_NAME))


def _load_low_stock(db: Session) -> list[LowStockItem]:
    products = (
        db.execute(select(Product).order_by(Product.stock_quantity.asc(), Product.id.asc()))
        .unique()
        .scalars()
        .all()
    )
    return low_stock_products(products)


def _run(db: Session, recipient: Optional[str], send_notifications: bool) -> AlertOutcome:
    settings = get_settings()
    items = _load_low_stock(db)
    if not items:
        return AlertOutcome(
            success=True,
            message="No low-stock items found",
            product_count=0,
            delivered=False,
        )

    recipient = (recipient or settings.ALERT_RECIPIENT_EMAIL or "").strip()
    if not recipient:
        return AlertOutcome(
            success=False,
            message="No alert recipient configured",
            product_count=len(items),
            delivered=False,
        )

    subject = build_alert_subject(items)
    text = build_alert_text(items)

    delivered = False
    failure_reason = None
    email_id = None
    if send_notifications:
        try:
            email_id = send_email(subject, build_alert_html(items), [recipient], text=text)
            delivered = True
        except (RuntimeError, ValueError) as exc:
            failure_reason = str(exc)
            logger.error("Low stock alert failed: %s", exc, extra={"recipient": recipient})

    db.add(
        Alert(
            alert_date=date.today(),
            recipient=recipient,
            product_count=len(items),
            message=text,
            delivered=delivered,
            failure_reason=failure_reason,
            provider_message_id=email_id,
        )
    )
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    if failure_reason:
        return AlertOutcome(
            success=False,
            message="Alert delivery failed: {}".format(failure_reason),
            product_count=len(items),
            delivered=False,
        )
    if not send_notifications:
        message = "Alert prepared for {} product(s); sending disabled".format(len(items))
    else:
        message = "Alert sent for {} product(s)".format(len(items))
    logger.info("%s", message, extra={"recipient": recipient})
    return AlertOutcome(
        success=True,
        message=message,
        product_count=len(items),
        delivered=delivered,
        email_id=email_id,
    )


def run_low_stock_alert(
    db: Optional[Session] = None,
    *,
    recipient: Optional[str] = None,
    send_notifications: bool = True,
) -> AlertOutcome:
    """Re-read products, and email the low-stock list to ``recipient``."""
    with session_scope(db) as session:
        return _run(session, recipient, send_notifications)


def list_alerts(db: Session, limit: int = 50) -> list[Alert]:
    stmt = select(Alert).order_by(Alert.created_at.desc(), Alert.id.desc()).limit(limit)
    return list(db.execute(stmt).scalars().all())


__all__ = [
    "AlertOutcome",
    "build_alert_html",
    "build_alert_subject",
    "build_alert_text",
    "list_alerts",
    "run_low_stock_alert",
]
