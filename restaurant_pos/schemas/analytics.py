from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel

from .menu import ItemWithCategoryOut


class DailySummaryOut(BaseModel):
    date: datetime
    total_orders: int
    total_sessions: int
    total_revenue: Decimal


class PopularItemOut(BaseModel):
    item: ItemWithCategoryOut
    total_quantity: int
    order_count: int
