from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from restaurant_pos.dependencies import SessionDep, get_current_user
from restaurant_pos.schemas.analytics import DailySummaryOut, PopularItemOut
from restaurant_pos.services.analytics import daily_summary, popular_items

router = APIRouter(prefix="/analytics", dependencies=[Depends(get_current_user)])


@router.get("/daily-summary", response_model=DailySummaryOut)
def get_daily_summary(session: SessionDep, day: Optional[datetime] = Query(default=None, alias="date")):
    return daily_summary(session, day)


@router.get("/popular-items", response_model=List[PopularItemOut])
def get_popular_items(session: SessionDep, limit: int = Query(default=10, ge=1), days: int = Query(default=7, ge=1)):
    return popular_items(session, limit=limit, days=days)
