from datetime import date
from typing import Optional
import sqlite3
from fastapi import APIRouter, Depends, Query
from .. import schemas
from ..dates import parse_month
from ..db import get_db_conn
from ..services import budget_service, penalty_service
from ..services.user_service import get_user

router = APIRouter(prefix="/api/budget", tags=["budget"])

MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"


@router.get("/dashboard", response_model=schemas.BudgetDashboard)
async def api_dashboard(
    user_id: int,
    month: Optional[str] = Query(None, pattern=MONTH_PATTERN),
    db_conn: sqlite3.Connection = Depends(get_db_conn),
):
    target = parse_month(month) if month else None
    return budget_service.get_dashboard(db_conn, user_id, target)


@router.get("/penalty", response_model=schemas.PenaltyBreakdown)
async def api_penalty(
    user_id: int,
    month: Optional[str] = Query(None, pattern=MONTH_PATTERN),
    db_conn: sqlite3.Connection = Depends(get_db_conn),
):
    get_user(db_conn, user_id)
    target = parse_month(month) if month else date.today()
    return penalty_service.get_penalty_breakdown(db_conn, user_id, target)
