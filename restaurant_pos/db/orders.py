from datetime import datetime
from enum import Enum
from typing import List, Optional

from sqlalchemy import CheckConstraint, Column, DateTime, Enum as SAEnum
from sqlalchemy.sql.schema import Index
from sqlmodel import Field, Relationship, SQLModel


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class OrderItem(SQLModel, table=True):
    __tablename__ = "order_items"

    id: Optional[int] = Field(default=None, primary_key=True)
    order_id: int = Field(foreign_key="orders.id", ondelete="CASCADE", index=True)
    item_id: int = Field(foreign_key="items.id", index=True)
    quantity: int = Field(default=1)

    order: Optional["Order"] = Relationship(back_populates="order_items")
    item: Optional["Item"] = Relationship(back_populates="order_items")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="order_items_quantity_positive"),
    )


class Order(SQLModel, table=True):
    __tablename__ = "orders"

    id: Optional[int] = Field(default=None, primary_key=True)
    session_id: int = Field(foreign_key="table_sessions.id", index=True)
    status: OrderStatus = Field(
        default=OrderStatus.PENDING,
        sa_column=Column(SAEnum(OrderStatus, name="orderstatus"), nullable=False),
    )
    created_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime, nullable=False))

    session: Optional["TableSession"] = Relationship(back_populates="orders")
    # Позиции заказа удаляются вместе с заказом
    order_items: List[OrderItem] = Relationship(
        back_populates="order",
        sa_relationship_kwargs={
            "cascade": "all, delete-orphan",
            "passive_deletes": True,
            "order_by": "OrderItem.id",
        },
    )

    __table_args__ = (
        Index("orders_created_at_idx", "created_at"),
    )
