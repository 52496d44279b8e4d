from decimal import Decimal
from typing import List, Optional

from sqlalchemy import CheckConstraint, Column, Numeric, Text
from sqlalchemy.dialects.sqlite import VARCHAR
from sqlmodel import Field, Relationship, SQLModel


class Category(SQLModel, table=True):
    __tablename__ = "categories"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(sa_column=Column(VARCHAR(255), unique=True, nullable=False))

    # passive_deletes="all": удаление категории с блюдами должно упасть на FK, а не обнулить category_id
    items: List["Item"] = Relationship(
        back_populates="category",
        sa_relationship_kwargs={"passive_deletes": "all", "order_by": "Item.name"},
    )


class Item(SQLModel, table=True):
    __tablename__ = "items"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(sa_column=Column(VARCHAR(255), nullable=False))
    description: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    price: Decimal = Field(sa_column=Column(Numeric(10, 2), nullable=False))
    category_id: int = Field(foreign_key="categories.id", index=True)

    category: Optional[Category] = Relationship(back_populates="items")
    order_items: List["OrderItem"] = Relationship(
        back_populates="item",
        sa_relationship_kwargs={"passive_deletes": "all", "order_by": "OrderItem.id"},
    )

    __table_args__ = (
        CheckConstraint("price > 0", name="items_price_positive"),
    )
