"""
Spending penalties, applied only when the user switched them on:

* every takeaway costs PENALTY_AMOUNT
* every snack beyond SNACK_LIMIT in a month costs PENALTY_AMOUNT
"""
import sqlite3
from datetime import date
from typing import Dict

from ..constants import PENALTY_AMOUNT, SNACK_LIMIT
from ..dates import month_bounds


def _penalties_enabled(db_conn: sqlite3.Connection, user_id: int) -> bool:
    row = db_conn.execute(
        "SELECT penalty_system_enabled FROM users WHERE id = ?", (user_id,)
    ).fetchone()
    return bool(row and row[0])


def _count_category(db_conn: sqlite3.Connection, user_id: int, category: str, month: date) -> int:
    start, end = month_bounds(month)
    row = db_conn.execute(
        "SELECT COUNT(*) FROM transactions "
        "WHERE user_id = ? AND type = 'expense' AND category = ? AND date BETWEEN ? AND ?",
        (user_id, category, start.isoformat(), end.isoformat()),
    ).fetchone()
    return int(row[0])


def get_penalty_breakdown(db_conn: sqlite3.Connection, user_id: int, month: date) -> Dict[str, int]:
    if not _penalties_enabled(db_conn, user_id):
        return {"takeaways": 0, "snacks": 0, "total": 0}

    takeaway_penalty = _count_category(db_conn, user_id, "Takeaway", month) * PENALTY_AMOUNT
    snack_count = _count_category(db_conn, user_id, "Snack", month)
    snack_penalty = max(0, snack_count - SNACK_LIMIT) * PENALTY_AMOUNT

    return {
        "takeaways": takeaway_penalty,
        "snacks": snack_penalty,
        "total": takeaway_penalty + snack_penalty,
    }


def calculate_monthly_penalty(db_conn: sqlite3.Connection, user_id: int, month: date) -> int:
    return get_penalty_breakdown(db_conn, user_id, month)["total"]


def check_penalty_trigger(db_conn: sqlite3.Connection, user_id: int, category: str, on: date) -> bool:
    """Would a new expense in ``category`` on ``on`` incur a penalty?"""
    if not _penalties_enabled(db_conn, user_id):
        return False
    if category == "Takeaway":
        return True
    if category == "Snack":
        return _count_category(db_conn, user_id, "Snack", on) >= SNACK_LIMIT
    return False
