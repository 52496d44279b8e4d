from datetime import datetime
from typing import List, Optional

from sqlalchemy import Column, DateTime, Integer
from sqlalchemy.sql.schema import Index
from sqlmodel import Field, Relationship, SQLModel


class DiningTable(SQLModel, table=True):
    __tablename__ = "tables"

    id: Optional[int] = Field(default=None, primary_key=True)
    table_number: int = Field(sa_column=Column(Integer, unique=True, nullable=False))

    sessions: List["TableSession"] = Relationship(
        back_populates="table",
        sa_relationship_kwargs={"passive_deletes": "all", "order_by": "TableSession.start_time.desc()"},
    )


class TableSession(SQLModel, table=True):
    """Посадка гостей за стол. Сессия активна, пока end_time не заполнен."""
    __tablename__ = "table_sessions"

    id: Optional[int] = Field(default=None, primary_key=True)
    table_id: int = Field(foreign_key="tables.id")
    customer_name: Optional[str] = Field(default=None)
    # Локальное время сервера без зоны
    start_time: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime, nullable=False))
    end_time: Optional[datetime] = Field(default=None, sa_column=Column(DateTime, nullable=True))

    table: Optional[DiningTable] = Relationship(back_populates="sessions")
    orders: List["Order"] = Relationship(
        back_populates="session",
        sa_relationship_kwargs={"passive_deletes": "all", "order_by": "Order.created_at.desc()"},
    )

    __table_args__ = (
        Index("table_sessions_table_id_end_time_idx", "table_id", "end_time"),
        Index("table_sessions_start_time_idx", "start_time"),
    )

    @property
    def is_active(self) -> bool:
        return self.end_time is None
