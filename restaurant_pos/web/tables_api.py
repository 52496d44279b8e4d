"""
API столов и посадок (сессий).

Содержит endpoints для:
- Управления столами зала
- Открытия и закрытия сессии за столом
- Просмотра активных и завершённых сессий с их заказами
"""
import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import selectinload
from sqlmodel import select

from restaurant_pos.db.orders import Order, OrderItem
from restaurant_pos.db.tables import DiningTable, TableSession
from restaurant_pos.dependencies import SessionDep, SettingsDep, get_current_user
from restaurant_pos.schemas.orders import (
    TableSessionDetailOut,
    TableWithSessionsOut,
)
from restaurant_pos.schemas.tables import (
    TableCreate,
    TableOut,
    TableSessionStart,
    TableSessionUpdate,
    TableSessionWithTableOut,
    TableUpdate,
)

logger = logging.getLogger(__name__)
router = APIRouter()


def _with_orders(*path):
    # selectinload по цепочке path -> order_items -> item
    loader = selectinload(path[0])
    for relationship in path[1:]:
        loader = loader.selectinload(relationship)
    return loader.selectinload(Order.order_items).selectinload(OrderItem.item)


@router.get("/tables", response_model=List[TableWithSessionsOut])
def list_tables(session: SessionDep):
    """
    Все столы по возрастанию номера, у каждого только активные сессии
    """
    # Завершённые сессии отсекаются в самом запросе, история в память не грузится
    active_sessions = DiningTable.sessions.and_(TableSession.end_time.is_(None))
    tables = session.exec(
        select(DiningTable)
        .options(_with_orders(active_sessions, TableSession.orders))
        .order_by(DiningTable.table_number)
    ).all()

    return [TableWithSessionsOut.model_validate(table) for table in tables]


@router.get("/tables/{table_id}", response_model=TableWithSessionsOut)
def get_table(table_id: int, session: SessionDep):
    table = session.get(DiningTable, table_id)
    if not table:
        raise HTTPException(status_code=404, detail="Table not found")
    return TableWithSessionsOut.model_validate(table)


@router.post("/tables", response_model=TableOut, dependencies=[Depends(get_current_user)])
def create_table(data: TableCreate, session: SessionDep):
    table = DiningTable(table_number=data.table_number)
    session.add(table)
    session.commit()
    session.refresh(table)
    logger.info(f"Table created: id={table.id}, number={table.table_number}")
    return TableOut.model_validate(table)


@router.put("/tables/{table_id}", response_model=TableOut, dependencies=[Depends(get_current_user)])
def update_table(table_id: int, data: TableUpdate, session: SessionDep):
    table = session.get(DiningTable, table_id)
    if not table:
        raise HTTPException(status_code=404, detail="Table not found")

    table.table_number = data.table_number
    session.add(table)
    session.commit()
    session.refresh(table)
    return TableOut.model_validate(table)


@router.delete("/tables/{table_id}", response_model=TableOut, dependencies=[Depends(get_current_user)])
def delete_table(table_id: int, session: SessionDep):
    table = session.get(DiningTable, table_id)
    if not table:
        raise HTTPException(status_code=404, detail="Table not found")

    deleted = TableOut.model_validate(table)
    session.delete(table)
    session.commit()
    logger.info(f"Table {table_id} deleted")
    return deleted


@router.get("/table-sessions", response_model=List[TableSessionDetailOut])
def list_table_sessions(
    session: SessionDep,
    table_id: Optional[int] = None,
    active: Optional[bool] = None,
):
    """
    Список сессий, новые сверху
    - active=true: только открытые (end_time не заполнен)
    - active=false: только закрытые
    """
    query = select(TableSession).options(
        selectinload(TableSession.table),
        _with_orders(TableSession.orders),
    )

    if table_id:
        query = query.where(TableSession.table_id == table_id)

    if active is True:
        query = query.where(TableSession.end_time.is_(None))
    elif active is False:
        query = query.where(TableSession.end_time.is_not(None))

    sessions = session.exec(query.order_by(TableSession.start_time.desc())).all()
    return [TableSessionDetailOut.model_validate(s) for s in sessions]


@router.get("/table-sessions/{session_id}", response_model=TableSessionDetailOut)
def get_table_session(session_id: int, session: SessionDep):
    table_session = session.get(TableSession, session_id)
    if not table_session:
        raise HTTPException(status_code=404, detail="Table session not found")
    return TableSessionDetailOut.model_validate(table_session)


@router.post("/table-sessions", response_model=TableSessionWithTableOut, dependencies=[Depends(get_current_user)])
def start_table_session(data: TableSessionStart, session: SessionDep, settings: SettingsDep):
    """
    Открывает сессию за столом.

    Наличие уже открытой сессии проверяется только при enforce_single_active_session,
    иначе это задача вызывающей стороны (GET /table-sessions?table_id=..&active=true).
    """
    if not session.get(DiningTable, data.table_id):
        raise HTTPException(status_code=404, detail=f"Table {data.table_id} not found")

    if settings.enforce_single_active_session:
        active_session = session.exec(
            select(TableSession).where(
                TableSession.table_id == data.table_id,
                TableSession.end_time.is_(None),
            )
        ).first()
        if active_session:
            logger.warning(f"Table {data.table_id} already has active session {active_session.id}")
            raise HTTPException(
                status_code=409,
                detail=f"Table {data.table_id} already has an active session",
            )

    table_session = TableSession(table_id=data.table_id, customer_name=data.customer_name)
    session.add(table_session)
    session.commit()
    session.refresh(table_session)
    logger.info(f"Session {table_session.id} started at table {data.table_id}")
    return TableSessionWithTableOut.model_validate(table_session)


@router.post("/table-sessions/{session_id}/end", response_model=TableSessionDetailOut, dependencies=[Depends(get_current_user)])
def end_table_session(session_id: int, session: SessionDep):
    table_session = session.get(TableSession, session_id)
    if not table_session:
        raise HTTPException(status_code=404, detail="Table session not found")

    # Повторный вызов просто перезаписывает время окончания
    table_session.end_time = datetime.now()
    session.add(table_session)
    session.commit()
    session.refresh(table_session)
    logger.info(f"Session {session_id} ended")
    return TableSessionDetailOut.model_validate(table_session)


@router.patch("/table-sessions/{session_id}", response_model=TableSessionWithTableOut, dependencies=[Depends(get_current_user)])
def update_table_session(session_id: int, data: TableSessionUpdate, session: SessionDep):
    table_session = session.get(TableSession, session_id)
    if not table_session:
        raise HTTPException(status_code=404, detail="Table session not found")

    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(table_session, key, value)

    session.add(table_session)
    session.commit()
    session.refresh(table_session)
    return TableSessionWithTableOut.model_validate(table_session)
