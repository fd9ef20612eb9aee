from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class LowStockAlertRequest(BaseModel):
    email: Optional[str] = None
    send_notifications: bool = True


class AlertOutcomeRead(BaseModel):
    success: bool
    message: str
    product_count: int
    delivered: bool
    email_id: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class AlertRead(BaseModel):
    id: int
    alert_date: date
    recipient: str
    product_count: int
    message: str
    delivered: bool
    failure_reason: Optional[str]
    provider_message_id: Optional[str]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
