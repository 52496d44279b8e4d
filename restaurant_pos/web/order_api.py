"""
API для работы с заказами.

Содержит endpoints для:
- Создания заказа за столом (заказ и все позиции пишутся одной транзакцией)
- Просмотра списка заказов с фильтрацией по сессии и статусу
- Смены статуса и удаления заказа
- Добавления, изменения и удаления отдельных позиций
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from restaurant_pos.db.menu import Item
from restaurant_pos.db.orders import Order, OrderItem, OrderStatus
from restaurant_pos.db.tables import TableSession
from restaurant_pos.dependencies import SessionDep, SettingsDep, get_current_user
from restaurant_pos.schemas.orders import (
    OrderCreate,
    OrderDetailOut,
    OrderItemAdd,
    OrderItemDetailOut,
    OrderItemOut,
    OrderItemQuantityUpdate,
    OrderOut,
    OrderStatusUpdate,
)
from restaurant_pos.services.order_status import StatusTransitionError, check_status_transition

logger = logging.getLogger(__name__)
router = APIRouter()

_ORDER_DETAIL = (
    selectinload(Order.session).selectinload(TableSession.table),
    selectinload(Order.order_items).selectinload(OrderItem.item).selectinload(Item.category),
)


def _fetch_order(session: Session, order_id: int) -> Optional[Order]:
    return session.exec(
        select(Order).where(Order.id == order_id).options(*_ORDER_DETAIL)
    ).first()


@router.get("/orders", response_model=List[OrderDetailOut])
def list_orders(
    session: SessionDep,
    session_id: Optional[int] = None,
    status: Optional[OrderStatus] = None,
):
    query = select(Order).options(*_ORDER_DETAIL)

    if session_id:
        query = query.where(Order.session_id == session_id)
    if status:
        query = query.where(Order.status == status)

    orders = session.exec(query.order_by(Order.created_at.desc())).all()
    return [OrderDetailOut.model_validate(order) for order in orders]


@router.get("/orders/{order_id}", response_model=OrderDetailOut)
def get_order(order_id: int, session: SessionDep):
    order = _fetch_order(session, order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return OrderDetailOut.model_validate(order)


@router.post("/orders", response_model=OrderDetailOut, dependencies=[Depends(get_current_user)])
def create_order(order_data: OrderCreate, session: SessionDep):
    logger.info(f"Creating order: session_id={order_data.session_id}, items={order_data.items}")

    if not session.get(TableSession, order_data.session_id):
        raise HTTPException(status_code=404, detail=f"Table session {order_data.session_id} not found")

    # Проверяем блюда до записи, чтобы не открывать транзакцию впустую
    item_ids = {line.item_id for line in order_data.items}
    found_ids = set()
    if item_ids:
        found_ids = set(session.exec(select(Item.id).where(Item.id.in_(item_ids))).all())
    missing = sorted(item_ids - found_ids)
    if missing:
        logger.warning(f"Order rejected, unknown items: {missing}")
        raise HTTPException(status_code=404, detail=f"Items not found: {missing}")

    order = Order(
        session_id=order_data.session_id,
        order_items=[
            OrderItem(item_id=line.item_id, quantity=line.quantity)
            for line in order_data.items
        ],
    )

    # Заказ и позиции одним коммитом: при ошибке любой строки не сохраняется ничего
    try:
        session.add(order)
        session.commit()
    except IntegrityError as e:
        logger.error(f"Order creation rolled back: {e.orig}")
        session.rollback()
        raise

    logger.info(f"Order created with id: {order.id}, lines: {len(order_data.items)}")
    return OrderDetailOut.model_validate(_fetch_order(session, order.id))


@router.patch("/orders/{order_id}/status", response_model=OrderDetailOut, dependencies=[Depends(get_current_user)])
def update_order_status(order_id: int, update: OrderStatusUpdate, session: SessionDep, settings: SettingsDep):
    """
    Обновление статуса заказа
    """
    order = session.get(Order, order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")

    try:
        check_status_transition(order.status, update.status, settings.strict_status_transitions)
    except StatusTransitionError as e:
        logger.warning(f"Order {order_id}: {e}")
        raise HTTPException(status_code=422, detail=str(e))

    order.status = update.status
    session.add(order)
    session.commit()
    logger.info(f"Order {order_id} status set to {update.status.value}")
    return OrderDetailOut.model_validate(_fetch_order(session, order_id))


@router.delete("/orders/{order_id}", response_model=OrderOut, dependencies=[Depends(get_current_user)])
def delete_order(order_id: int, session: SessionDep):
    order = session.get(Order, order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")

    deleted = OrderOut.model_validate(order)
    session.delete(order)
    session.commit()
    logger.info(f"Order {order_id} deleted with its items")
    return deleted


def _order_item_detail(session: Session, order_item_id: int) -> OrderItemDetailOut:
    order_item = session.exec(
        select(OrderItem)
        .where(OrderItem.id == order_item_id)
        .options(
            selectinload(OrderItem.order).selectinload(Order.session).selectinload(TableSession.table),
            selectinload(OrderItem.item).selectinload(Item.category),
        )
    ).one()
    return OrderItemDetailOut.model_validate(order_item)


@router.post("/order-items", response_model=OrderItemDetailOut, dependencies=[Depends(get_current_user)])
def add_order_item(data: OrderItemAdd, session: SessionDep):
    if not session.get(Order, data.order_id):
        raise HTTPException(status_code=404, detail=f"Order {data.order_id} not found")
    if not session.get(Item, data.item_id):
        raise HTTPException(status_code=404, detail=f"Item {data.item_id} not found")

    order_item = OrderItem(order_id=data.order_id, item_id=data.item_id, quantity=data.quantity)
    session.add(order_item)
    session.commit()
    session.refresh(order_item)
    logger.info(f"Item {data.item_id} x{data.quantity} added to order {data.order_id}")
    return _order_item_detail(session, order_item.id)


@router.patch("/order-items/{order_item_id}", response_model=OrderItemDetailOut, dependencies=[Depends(get_current_user)])
def update_order_item_quantity(order_item_id: int, data: OrderItemQuantityUpdate, session: SessionDep):
    order_item = session.get(OrderItem, order_item_id)
    if not order_item:
        raise HTTPException(status_code=404, detail="Order item not found")

    order_item.quantity = data.quantity
    session.add(order_item)
    session.commit()
    return _order_item_detail(session, order_item_id)


@router.delete("/order-items/{order_item_id}", response_model=OrderItemOut, dependencies=[Depends(get_current_user)])
def remove_order_item(order_item_id: int, session: SessionDep):
    order_item = session.get(OrderItem, order_item_id)
    if not order_item:
        raise HTTPException(status_code=404, detail="Order item not found")

    removed = OrderItemOut.model_validate(order_item)
    session.delete(order_item)
    session.commit()
    logger.info(f"Order item {order_item_id} removed from order {removed.order_id}")
    return removed
