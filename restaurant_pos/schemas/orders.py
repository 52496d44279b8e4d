"""
Схемы заказов и позиций заказа.

Здесь же собраны составные ответы, в которые вложены заказы:
стол с активными сессиями, сессия с заказами, блюдо с историей заказов.
"""
from datetime import datetime
from typing import List

from pydantic import BaseModel, Field

from ..db.orders import OrderStatus
from .menu import ItemOut, ItemWithCategoryOut, OrmOut
from .tables import TableOut, TableSessionOut, TableSessionWithTableOut


class OrderLineCreate(BaseModel):
    item_id: int
    quantity: int = Field(gt=0)


class OrderCreate(BaseModel):
    session_id: int
    items: List[OrderLineCreate]


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class OrderItemAdd(BaseModel):
    order_id: int
    item_id: int
    quantity: int = Field(gt=0)


class OrderItemQuantityUpdate(BaseModel):
    quantity: int = Field(gt=0)


class OrderOut(OrmOut):
    id: int
    session_id: int
    status: OrderStatus
    created_at: datetime


class OrderItemOut(OrmOut):
    id: int
    order_id: int
    item_id: int
    quantity: int


class OrderItemWithItemOut(OrderItemOut):
    item: ItemOut


class OrderItemLineOut(OrderItemOut):
    item: ItemWithCategoryOut


class OrderItemWithOrderOut(OrderItemOut):
    order: OrderOut


class OrderWithItemsOut(OrderOut):
    order_items: List[OrderItemWithItemOut]


class OrderWithSessionOut(OrderOut):
    session: TableSessionWithTableOut


class OrderDetailOut(OrderWithSessionOut):
    order_items: List[OrderItemLineOut]


class OrderItemDetailOut(OrderItemOut):
    order: OrderWithSessionOut
    item: ItemWithCategoryOut


class TableSessionWithOrdersOut(TableSessionOut):
    orders: List[OrderWithItemsOut]


class TableSessionDetailOut(TableSessionWithOrdersOut):
    table: TableOut


class TableWithSessionsOut(TableOut):
    sessions: List[TableSessionWithOrdersOut]


class ItemDetailOut(ItemWithCategoryOut):
    order_items: List[OrderItemWithOrderOut]
