from typing import List
import sqlite3
from fastapi import APIRouter, Depends, Query
from .. import schemas
from ..db import get_db_conn
from ..services import price_service
from ..services.user_service import get_user

router = APIRouter(prefix="/api/prices", tags=["prices"])


@router.post("", response_model=schemas.PriceRecord)
async def api_record_price(
    rec: schemas.PriceRecordCreate,
    db_conn: sqlite3.Connection = Depends(get_db_conn),
):
    return price_service.record_price(
        db_conn, rec.user_id, rec.shopping_item_id, rec.price, rec.source, rec.recorded_date
    )


@router.get("/items/{item_id}/history", response_model=List[schemas.PriceRecord])
async def api_price_history(
    item_id: int,
    user_id: int,
    limit: int = Query(10, ge=1, le=100),
    db_conn: sqlite3.Connection = Depends(get_db_conn),
):
    return price_service.get_price_history(db_conn, user_id, item_id, limit)


@router.get("/items/{item_id}/trend", response_model=schemas.PriceTrend)
async def api_price_trend(
    item_id: int,
    user_id: int,
    db_conn: sqlite3.Connection = Depends(get_db_conn),
):
    return price_service.get_price_trend(db_conn, user_id, item_id)


@router.get("/comparison", response_model=List[schemas.PriceComparison])
async def api_price_comparison(
    user_id: int,
    db_conn: sqlite3.Connection = Depends(get_db_conn),
):
    get_user(db_conn, user_id)
    return price_service.get_price_comparison(db_conn, user_id)
