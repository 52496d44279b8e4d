from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from .menu import OrmOut


class TableOut(OrmOut):
    id: int
    table_number: int


class TableCreate(BaseModel):
    table_number: int = Field(gt=0)


class TableUpdate(BaseModel):
    table_number: int = Field(gt=0)


class TableSessionOut(OrmOut):
    id: int
    table_id: int
    customer_name: Optional[str] = None
    start_time: datetime
    end_time: Optional[datetime] = None


class TableSessionWithTableOut(TableSessionOut):
    table: TableOut


class TableSessionStart(BaseModel):
    table_id: int
    customer_name: Optional[str] = None


class TableSessionUpdate(BaseModel):
    customer_name: Optional[str] = None
