from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class OrmOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class CategoryOut(OrmOut):
    id: int
    name: str


class ItemOut(OrmOut):
    id: int
    name: str
    description: Optional[str] = None
    price: Decimal
    category_id: int


class ItemWithCategoryOut(ItemOut):
    category: CategoryOut


class CategoryWithItemsOut(CategoryOut):
    items: List[ItemOut]


class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)


class CategoryUpdate(BaseModel):
    name: str = Field(min_length=1, max_length=255)


class ItemCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    price: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    category_id: int


class ItemUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    category_id: Optional[int] = None

    # description можно сбросить в null, остальные поля нет
    @field_validator("name", "price", "category_id")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("field cannot be null")
        return value
