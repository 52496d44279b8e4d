"""
Агрегации для дашборда: сводка за день и популярные блюда.
"""
from datetime import datetime, time, timedelta
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy.orm import selectinload
from sqlmodel import Session, func, select

from ..db.menu import Item
from ..db.orders import Order, OrderItem, OrderStatus
from ..db.tables import TableSession
from ..schemas.analytics import DailySummaryOut, PopularItemOut
from ..schemas.menu import ItemWithCategoryOut

CENT = Decimal("0.01")


def _to_money(value) -> Decimal:
    # SQLite отдаёт SUM как float, Postgres как Decimal
    return Decimal(str(value or 0)).quantize(CENT)


def local_day_bounds(day: datetime) -> Tuple[datetime, datetime]:
    """Границы календарного дня в локальной зоне сервера: [00:00:00.000, 23:59:59.999]."""
    if day.tzinfo is not None:
        day = day.astimezone().replace(tzinfo=None)
    start = datetime.combine(day.date(), time.min)
    end = datetime.combine(day.date(), time(23, 59, 59, 999000))
    return start, end


def _completed_lines(statement, start: datetime, end: datetime):
    return (
        statement
        .join(Order, OrderItem.order_id == Order.id)
        .join(Item, OrderItem.item_id == Item.id)
        .where(
            Order.status == OrderStatus.COMPLETED,
            Order.created_at >= start,
            Order.created_at <= end,
        )
    )


def revenue_in_database(session: Session, start: datetime, end: datetime) -> Decimal:
    statement = _completed_lines(
        select(func.sum(Item.price * OrderItem.quantity)).select_from(OrderItem), start, end
    )
    return _to_money(session.exec(statement).one())


def revenue_in_memory(session: Session, start: datetime, end: datetime) -> Decimal:
    rows = session.exec(_completed_lines(select(OrderItem, Item), start, end)).all()
    total = sum((item.price * line.quantity for line, item in rows), Decimal("0"))
    return _to_money(total)


def daily_summary(session: Session, day: Optional[datetime] = None) -> DailySummaryOut:
    day = day or datetime.now()
    start, end = local_day_bounds(day)

    total_orders = session.exec(
        select(func.count(Order.id)).where(Order.created_at >= start, Order.created_at <= end)
    ).one()
    total_sessions = session.exec(
        select(func.count(TableSession.id)).where(
            TableSession.start_time >= start, TableSession.start_time <= end
        )
    ).one()

    return DailySummaryOut(
        date=day,
        total_orders=total_orders,
        total_sessions=total_sessions,
        total_revenue=revenue_in_database(session, start, end),
    )


def popular_items(session: Session, limit: int = 10, days: int = 7) -> List[PopularItemOut]:
    """
    Самые заказываемые блюда за последние days суток (от текущего момента).

    Сортировка по суммарному количеству, при равенстве порядок не определён.
    """
    since = datetime.now() - timedelta(days=days)
    total_quantity = func.sum(OrderItem.quantity).label("total_quantity")
    order_count = func.count(OrderItem.id).label("order_count")

    rows = session.exec(
        select(OrderItem.item_id, total_quantity, order_count)
        .join(Order, OrderItem.order_id == Order.id)
        .where(Order.created_at >= since)
        .group_by(OrderItem.item_id)
        .order_by(total_quantity.desc())
        .limit(limit)
    ).all()
    if not rows:
        return []

    items = session.exec(
        select(Item)
        .where(Item.id.in_([row.item_id for row in rows]))
        .options(selectinload(Item.category))
    ).all()
    items_by_id = {item.id: item for item in items}

    return [
        PopularItemOut(
            item=ItemWithCategoryOut.model_validate(items_by_id[row.item_id]),
            total_quantity=int(row.total_quantity or 0),
            order_count=row.order_count,
        )
        for row in rows
    ]
