"""
Statistics API endpoints: monthly stats, history and year-to-date summary.
"""
from datetime import date
from typing import List
import sqlite3
from fastapi import APIRouter, Depends, Path, Query
from .. import schemas
from ..db import get_db_conn
from ..services import stats_service
from ..services.user_service import get_user

router = APIRouter(prefix="/api/stats", tags=["stats"])


@router.get("/history", response_model=List[schemas.MonthlyStats])
def api_stats_history(
    user_id: int,
    months: int = Query(6, ge=1, le=36),
    db_conn: sqlite3.Connection = Depends(get_db_conn),
):
    get_user(db_conn, user_id)
    return stats_service.get_stats_history(db_conn, user_id, months)


@router.get("/current", response_model=schemas.MonthlyStats)
def api_current_stats(
    user_id: int,
    db_conn: sqlite3.Connection = Depends(get_db_conn),
):
    """Stats for the running month."""
    get_user(db_conn, user_id)
    today = date.today()
    return stats_service.get_monthly_stats(db_conn, user_id, today.year, today.month)


@router.get("/year/{year}", response_model=schemas.YearToDateSummary)
def api_year_to_date(
    year: int,
    user_id: int,
    db_conn: sqlite3.Connection = Depends(get_db_conn),
):
    get_user(db_conn, user_id)
    return stats_service.get_year_to_date_summary(db_conn, user_id, year)


@router.get("/{year}/{month}", response_model=schemas.MonthlyStats)
def api_monthly_stats(
    user_id: int,
    year: int,
    month: int = Path(..., ge=1, le=12),
    db_conn: sqlite3.Connection = Depends(get_db_conn),
):
    """Stored stats for the month; generated on first request."""
    get_user(db_conn, user_id)
    return stats_service.get_monthly_stats(db_conn, user_id, year, month)


@router.post("/{year}/{month}/regenerate", response_model=schemas.MonthlyStats)
def api_regenerate_stats(
    user_id: int,
    year: int,
    month: int = Path(..., ge=1, le=12),
    db_conn: sqlite3.Connection = Depends(get_db_conn),
):
    get_user(db_conn, user_id)
    return stats_service.generate_monthly_stats(db_conn, user_id, year, month)
