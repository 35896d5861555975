import sqlite3
from datetime import date
from typing import Any, Dict, Optional

from ..dates import clamp_day, shift_months
from .stats_service import is_fixed_charge, month_transactions
from .user_service import active_fixed_total, get_user


def next_payday(payday: int, today: date) -> date:
    """This month's payday if it is still ahead, otherwise next month's.

    Paydays past the end of a short month fall on its last day.
    """
    this_month = clamp_day(today.year, today.month, payday)
    if today < this_month:
        return this_month
    if today == this_month and this_month.day < payday:
        # clamped payday (e.g. the 31st in a 30-day month) is today
        return this_month
    following = shift_months(today.replace(day=1), 1)
    return clamp_day(following.year, following.month, payday)


def get_dashboard(
    db_conn: sqlite3.Connection,
    user_id: int,
    month: Optional[date] = None,
    today: Optional[date] = None,
) -> Dict[str, Any]:
    """Available = total income - active fixed expenses - total spent."""
    user = get_user(db_conn, user_id)
    if today is None:
        today = date.today()
    if month is None:
        month = today

    rows = month_transactions(db_conn, user_id, month.year, month.month)
    total_income = sum(r["amount"] for r in rows if r["type"] == "income")
    total_spent = sum(r["amount"] for r in rows if r["type"] == "expense" and not is_fixed_charge(r))
    fixed = active_fixed_total(db_conn, user_id)

    return {
        "total_income": total_income,
        "total_spent": total_spent,
        "fixed_expenses": fixed,
        "available_balance": max(0.0, total_income - fixed - total_spent),
        "days_until_payday": (next_payday(user["payday"], today) - today).days,
    }
