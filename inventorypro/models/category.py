from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String

from inventorypro.core.constants import CATEGORY_NAME_MAX_LENGTH
from inventorypro.database.base import Base


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    name = Column(String(CATEGORY_NAME_MAX_LENGTH), nullable=False, unique=True)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )


__all__ = ["Category"]
