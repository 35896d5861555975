import sqlite3
from fastapi import APIRouter, Depends, HTTPException
from .. import schemas
from ..db import get_db_conn
from ..services.user_service import get_user

router = APIRouter(prefix="/api/users", tags=["users"])


@router.post("", response_model=schemas.User)
async def api_create_user(
    user: schemas.UserCreate,
    db_conn: sqlite3.Connection = Depends(get_db_conn),
) -> schemas.User:
    """Create a user (owner of fixed expenses, ledger and shopping data)."""
    try:
        cur = db_conn.execute(
            "INSERT INTO users (name, email, payday, penalty_system_enabled) VALUES (?, ?, ?, ?)",
            (user.name, user.email.strip().lower(), user.payday, 1 if user.penalty_system_enabled else 0),
        )
    except sqlite3.IntegrityError:
        raise HTTPException(status_code=400, detail="Email already registered")
    db_conn.commit()
    return schemas.User(**get_user(db_conn, cur.lastrowid))


@router.get("/{user_id}", response_model=schemas.User)
async def api_get_user(
    user_id: int,
    db_conn: sqlite3.Connection = Depends(get_db_conn),
) -> schemas.User:
    return schemas.User(**get_user(db_conn, user_id))


@router.patch("/{user_id}", response_model=schemas.User)
async def api_update_user(
    user_id: int,
    update: schemas.UserUpdate,
    db_conn: sqlite3.Connection = Depends(get_db_conn),
) -> schemas.User:
    """Update user settings (name, payday, penalty system)."""
    get_user(db_conn, user_id)
    fields = update.model_dump(exclude_unset=True, exclude_none=True)
    if not fields:
        raise HTTPException(status_code=400, detail="No fields to update")
    set_clause = ", ".join([f"{k} = ?" for k in fields.keys()])
    params = list(fields.values()) + [user_id]
    db_conn.execute(f"UPDATE users SET {set_clause} WHERE id = ?", params)
    db_conn.commit()
    return schemas.User(**get_user(db_conn, user_id))
