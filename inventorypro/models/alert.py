from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, Date, DateTime, Integer, String

from inventorypro.database.base import Base


class Alert(Base):
    __tablename__ = "alerts"

    id = Column(Integer, primary_key=True)
    alert_date = Column(Date, nullable=False)
    recipient = Column(String, nullable=False)
    product_count = Column(Integer, nullable=False)
    message = Column(String, nullable=False)

    delivered = Column(Boolean, nullable=False)
    failure_reason = Column(String)
    provider_message_id = Column(String)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))


__all__ = ["Alert"]
