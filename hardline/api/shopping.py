from datetime import date
from typing import Any, Dict, List
import sqlite3
from fastapi import APIRouter, Depends, HTTPException
from .. import schemas
from ..db import get_db_conn
from ..services import shopping_service
from ..services.user_service import get_user

router = APIRouter(prefix="/api/shopping", tags=["shopping"])


def _get_owned_item(db_conn: sqlite3.Connection, item_id: int, user_id: int) -> Dict[str, Any]:
    row = db_conn.execute(
        "SELECT * FROM shopping_items WHERE id = ? AND user_id = ?", (item_id, user_id)
    ).fetchone()
    if not row:
        raise HTTPException(status_code=404, detail="Shopping item not found")
    return dict(row)


@router.get("/cycle", response_model=schemas.CycleInfo)
async def api_current_cycle(
    user_id: int,
    db_conn: sqlite3.Connection = Depends(get_db_conn),
) -> schemas.CycleInfo:
    user = get_user(db_conn, user_id)
    today = date.today()
    return schemas.CycleInfo(
        payday=user["payday"],
        date=today.isoformat(),
        cycle=shopping_service.get_current_shopping_cycle(user["payday"], today),
    )


@router.get("/list", response_model=List[schemas.ShoppingItem])
async def api_active_list(
    user_id: int,
    db_conn: sqlite3.Connection = Depends(get_db_conn),
) -> List[schemas.ShoppingItem]:
    """Active items for the current shopping cycle (plus items for both cycles)."""
    items = shopping_service.get_active_shopping_list(db_conn, user_id)
    return [schemas.ShoppingItem(**item) for item in items]


@router.post("/items", response_model=schemas.ShoppingItem)
async def api_create_item(
    item: schemas.ShoppingItemCreate,
    db_conn: sqlite3.Connection = Depends(get_db_conn),
) -> schemas.ShoppingItem:
    get_user(db_conn, item.user_id)
    cur = db_conn.execute(
        "INSERT INTO shopping_items (user_id, name, category, cycle, quantity, is_diabetic_friendly, typical_cost, is_active) "
        "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
        (
            item.user_id,
            item.name.strip(),
            item.category,
            item.cycle,
            item.quantity,
            1 if item.is_diabetic_friendly else 0,
            item.typical_cost,
            1 if item.is_active else 0,
        ),
    )
    db_conn.commit()
    return schemas.ShoppingItem(**_get_owned_item(db_conn, cur.lastrowid, item.user_id))


@router.patch("/items/{item_id}", response_model=schemas.ShoppingItem)
async def api_update_item(
    item_id: int,
    user_id: int,
    update: schemas.ShoppingItemUpdate,
    db_conn: sqlite3.Connection = Depends(get_db_conn),
) -> schemas.ShoppingItem:
    _get_owned_item(db_conn, item_id, user_id)
    fields = update.model_dump(exclude_unset=True, exclude_none=True)
    if not fields:
        raise HTTPException(status_code=400, detail="No fields to update")
    set_clause = ", ".join([f"{k} = ?" for k in fields.keys()])
    params = list(fields.values()) + [item_id]
    db_conn.execute(f"UPDATE shopping_items SET {set_clause} WHERE id = ?", params)
    db_conn.commit()
    return schemas.ShoppingItem(**_get_owned_item(db_conn, item_id, user_id))
