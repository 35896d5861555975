import sqlite3
from typing import Any, Dict

from ..exceptions import NotFoundError


def get_user(db_conn: sqlite3.Connection, user_id: int) -> Dict[str, Any]:
    row = db_conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
    if not row:
        raise NotFoundError("User not found")
    return dict(row)


def active_fixed_total(db_conn: sqlite3.Connection, user_id: int) -> float:
    """Sum of the user's active fixed expense amounts."""
    row = db_conn.execute(
        "SELECT COALESCE(SUM(amount), 0) FROM fixed_expenses WHERE user_id = ? AND is_active = 1",
        (user_id,),
    ).fetchone()
    return float(row[0])
