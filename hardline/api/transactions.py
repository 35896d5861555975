from datetime import date
from typing import Any, Dict, List, Optional
import sqlite3
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from .. import schemas
from ..schemas.transactions import TransactionKind
from ..db import get_db_conn
from ..services.penalty_service import check_penalty_trigger
from ..services.user_service import get_user

router = APIRouter(prefix="/api/transactions", tags=["transactions"])


def _get_owned_transaction(db_conn: sqlite3.Connection, tx_id: int, user_id: int) -> Dict[str, Any]:
    row = db_conn.execute(
        "SELECT * FROM transactions WHERE id = ? AND user_id = ?", (tx_id, user_id)
    ).fetchone()
    if not row:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return dict(row)


@router.get("", response_model=List[schemas.Transaction])
async def api_get_transactions(
    user_id: int,
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
    type: Optional[TransactionKind] = None,
    category: Optional[str] = None,
    db_conn: sqlite3.Connection = Depends(get_db_conn),
) -> List[schemas.Transaction]:
    """Get a user's ledger with optional filtering, newest first."""
    query = "SELECT * FROM transactions WHERE user_id = ?"
    params: List[Any] = [user_id]

    if from_date:
        query += " AND date >= ?"
        params.append(from_date.isoformat())
    if to_date:
        query += " AND date <= ?"
        params.append(to_date.isoformat())
    if type is not None:
        query += " AND type = ?"
        params.append(type)
    if category is not None:
        query += " AND category = ?"
        params.append(category)

    query += " ORDER BY date DESC, id DESC"
    rows = db_conn.execute(query, params).fetchall()
    return [schemas.Transaction(**dict(row)) for row in rows]


@router.post("", response_model=schemas.Transaction)
async def api_create_transaction(
    tr: schemas.TransactionCreate,
    db_conn: sqlite3.Connection = Depends(get_db_conn),
) -> schemas.Transaction:
    """Record an income or expense transaction."""
    get_user(db_conn, tr.user_id)
    is_penalty = tr.type == "expense" and check_penalty_trigger(db_conn, tr.user_id, tr.category, tr.date)

    cur = db_conn.execute(
        "INSERT INTO transactions (user_id, type, date, amount, description, category, income_source, is_penalty_trigger) "
        "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
        (
            tr.user_id,
            tr.type,
            tr.date.isoformat(),
            tr.amount,
            tr.description.strip(),
            tr.category if tr.type == "expense" else None,
            tr.income_source if tr.type == "income" else None,
            1 if is_penalty else 0,
        ),
    )
    db_conn.commit()
    return schemas.Transaction(**_get_owned_transaction(db_conn, cur.lastrowid, tr.user_id))


@router.put("/{tx_id}", response_model=schemas.Transaction)
async def api_update_transaction(
    tx_id: int,
    user_id: int,
    update: schemas.TransactionUpdate,
    db_conn: sqlite3.Connection = Depends(get_db_conn),
) -> schemas.Transaction:
    """Update an existing transaction."""
    existing = _get_owned_transaction(db_conn, tx_id, user_id)
    fields = update.model_dump(exclude_unset=True)
    if not fields:
        raise HTTPException(status_code=400, detail="No fields to update")

    if existing["type"] == "income" and fields.get("category") is not None:
        raise HTTPException(status_code=422, detail="Income transactions have no category")
    if existing["type"] == "expense" and fields.get("income_source") is not None:
        raise HTTPException(status_code=422, detail="Expense transactions have no income source")

    # Validate the merged record so an update can't break category rules
    merged = {**existing, **fields}
    try:
        schemas.TransactionBase(**merged)
    except ValidationError as exc:
        detail = "; ".join(err["msg"] for err in exc.errors())
        raise HTTPException(status_code=422, detail=detail)

    if "date" in fields and fields["date"] is not None:
        fields["date"] = fields["date"].isoformat()
    set_clause = ", ".join([f"{k} = ?" for k in fields.keys()])
    params = list(fields.values()) + [tx_id]
    db_conn.execute(f"UPDATE transactions SET {set_clause} WHERE id = ?", params)
    db_conn.commit()
    return schemas.Transaction(**_get_owned_transaction(db_conn, tx_id, user_id))


@router.delete("/{tx_id}")
async def api_delete_transaction(
    tx_id: int,
    user_id: int,
    db_conn: sqlite3.Connection = Depends(get_db_conn),
) -> JSONResponse:
    _get_owned_transaction(db_conn, tx_id, user_id)
    db_conn.execute("DELETE FROM transactions WHERE id = ?", (tx_id,))
    db_conn.commit()
    return JSONResponse(content={"deleted": True})
