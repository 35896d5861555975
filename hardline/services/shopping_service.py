import sqlite3
from datetime import date
from typing import Any, Dict, List, Optional

from ..dates import days_in_month
from .user_service import get_user


def get_current_shopping_cycle(payday: int, current_date: Optional[date] = None) -> str:
    """
    MonthStart: payday up to payday+13 (big shop: cleaning and groceries).
    MidMonth: everything else (top-up: fresh produce).
    """
    if current_date is None:
        current_date = date.today()
    day = current_date.day
    mid_month_day = payday + 14
    last_day = days_in_month(current_date.year, current_date.month)

    if payday <= day < min(mid_month_day, last_day + 1):
        return "MonthStart"
    return "MidMonth"


def get_active_shopping_list(
    db_conn: sqlite3.Connection, user_id: int, today: Optional[date] = None
) -> List[Dict[str, Any]]:
    user = get_user(db_conn, user_id)
    cycle = get_current_shopping_cycle(user["payday"], today)
    rows = db_conn.execute(
        "SELECT * FROM shopping_items WHERE user_id = ? AND is_active = 1 AND cycle IN (?, 'Both') ORDER BY category, name",
        (user_id, cycle),
    ).fetchall()
    return [dict(r) for r in rows]
