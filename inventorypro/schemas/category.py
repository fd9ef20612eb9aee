from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from inventorypro.core.constants import CATEGORY_NAME_MAX_LENGTH


class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=CATEGORY_NAME_MAX_LENGTH)


class CategoryRef(BaseModel):
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class CategoryRead(CategoryRef):
    created_at: datetime
