from datetime import date
from typing import Any, Dict, List, Optional
import sqlite3
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse
from .. import auto_debit, schemas
from ..db import get_db_conn
from ..services.user_service import get_user

router = APIRouter(prefix="/api/fixed-expenses", tags=["fixed-expenses"])
system_router = APIRouter(prefix="/api/system", tags=["system"])


def _get_owned(db_conn: sqlite3.Connection, expense_id: int, user_id: int) -> Dict[str, Any]:
    row = db_conn.execute(
        "SELECT * FROM fixed_expenses WHERE id = ? AND user_id = ?", (expense_id, user_id)
    ).fetchone()
    if not row:
        raise HTTPException(status_code=404, detail="Fixed expense not found")
    return dict(row)


@router.get("", response_model=List[schemas.FixedExpense])
async def api_get_fixed_expenses(
    user_id: int,
    only_active: bool = False,
    db_conn: sqlite3.Connection = Depends(get_db_conn),
) -> List[schemas.FixedExpense]:
    """List a user's fixed expenses ordered by trigger day."""
    query = "SELECT * FROM fixed_expenses WHERE user_id = ?"
    if only_active:
        query += " AND is_active = 1"
    query += " ORDER BY trigger_day, id"
    rows = db_conn.execute(query, (user_id,)).fetchall()
    return [schemas.FixedExpense(**dict(row)) for row in rows]


@router.post("", response_model=schemas.FixedExpense)
async def api_create_fixed_expense(
    rec: schemas.FixedExpenseCreate,
    db_conn: sqlite3.Connection = Depends(get_db_conn),
) -> schemas.FixedExpense:
    get_user(db_conn, rec.user_id)
    cur = db_conn.execute(
        "INSERT INTO fixed_expenses (user_id, name, amount, trigger_day, is_active) VALUES (?, ?, ?, ?, ?)",
        (rec.user_id, rec.name, rec.amount, rec.trigger_day, 1 if rec.is_active else 0),
    )
    db_conn.commit()
    return schemas.FixedExpense(**_get_owned(db_conn, cur.lastrowid, rec.user_id))


@router.patch("/{expense_id}", response_model=schemas.FixedExpense)
async def api_update_fixed_expense(
    expense_id: int,
    user_id: int,
    update: schemas.FixedExpenseUpdate,
    db_conn: sqlite3.Connection = Depends(get_db_conn),
) -> schemas.FixedExpense:
    """Edit amount, trigger day, name or the active flag."""
    _get_owned(db_conn, expense_id, user_id)
    fields = update.model_dump(exclude_unset=True, exclude_none=True)
    if "name" in fields:
        fields["name"] = fields["name"].strip()
        if not fields["name"]:
            raise HTTPException(status_code=400, detail="Name must not be blank")
    if not fields:
        raise HTTPException(status_code=400, detail="No fields to update")
    set_clause = ", ".join([f"{k} = ?" for k in fields.keys()])
    params = list(fields.values()) + [expense_id]
    db_conn.execute(
        f"UPDATE fixed_expenses SET {set_clause}, updated_at = CURRENT_TIMESTAMP WHERE id = ?", params
    )
    db_conn.commit()
    return schemas.FixedExpense(**_get_owned(db_conn, expense_id, user_id))


@router.delete("/{expense_id}")
async def api_delete_fixed_expense(
    expense_id: int,
    user_id: int,
    db_conn: sqlite3.Connection = Depends(get_db_conn),
) -> JSONResponse:
    _get_owned(db_conn, expense_id, user_id)
    db_conn.execute("DELETE FROM fixed_expenses WHERE id = ?", (expense_id,))
    db_conn.commit()
    return JSONResponse(content={"deleted": True})


@router.post("/{expense_id}/manual-debit", response_model=schemas.FixedExpense)
async def api_manual_debit(
    expense_id: int,
    user_id: int,
    db_conn: sqlite3.Connection = Depends(get_db_conn),
) -> schemas.FixedExpense:
    """Charge a fixed expense right now, outside the daily schedule."""
    _get_owned(db_conn, expense_id, user_id)
    if not auto_debit.manual_charge(expense_id):
        raise HTTPException(status_code=400, detail="Manual debit failed")
    return schemas.FixedExpense(**_get_owned(db_conn, expense_id, user_id))


@system_router.post("/auto-debit", response_model=schemas.ChargeRunResult)
async def api_run_auto_debit(
    run_date: Optional[date] = Query(None, alias="date"),
) -> schemas.ChargeRunResult:
    """Run the daily auto-debit once, on demand (optionally for another date)."""
    today = run_date or date.today()
    summary = auto_debit.run_daily_charges(today)
    return schemas.ChargeRunResult(date=today.isoformat(), **summary.as_dict())
