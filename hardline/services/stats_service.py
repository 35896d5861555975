"""
Monthly statistics per user.

Savings = total income - active fixed expenses - discretionary expenses.
Ledger rows written by the charge engine are fixed expenses, so they are
left out of the expense totals to avoid counting them twice.
"""
import json
import logging
import sqlite3
from datetime import date
from typing import Any, Dict, List, Optional

from ..constants import AUTO_DEBIT_PREFIX, EXPENSE_CATEGORIES, MANUAL_DEBIT_PREFIX
from ..dates import days_in_month, month_bounds, shift_months
from .user_service import active_fixed_total

logger = logging.getLogger(__name__)

TOP_EXPENSES_LIMIT = 5


def is_fixed_charge(row: sqlite3.Row) -> bool:
    """True for ledger rows produced by the auto/manual debit engine."""
    if row["fixed_expense_id"] is not None:
        return True
    desc = row["description"] or ""
    return desc.startswith(AUTO_DEBIT_PREFIX) or desc.startswith(MANUAL_DEBIT_PREFIX)


def month_transactions(db_conn: sqlite3.Connection, user_id: int, year: int, month: int) -> List[sqlite3.Row]:
    start, end = month_bounds(date(year, month, 1))
    return db_conn.execute(
        "SELECT * FROM transactions WHERE user_id = ? AND date BETWEEN ? AND ? ORDER BY date, id",
        (user_id, start.isoformat(), end.isoformat()),
    ).fetchall()


def _empty_breakdown() -> Dict[str, float]:
    return {cat: 0.0 for cat in EXPENSE_CATEGORIES}


def _row_to_stats(row: sqlite3.Row) -> Dict[str, Any]:
    stats = dict(row)
    stats.pop("updated_at", None)
    stats["category_breakdown"] = json.loads(stats["category_breakdown"])
    stats["top_expenses"] = json.loads(stats["top_expenses"])
    return stats


def generate_monthly_stats(db_conn: sqlite3.Connection, user_id: int, year: int, month: int) -> Dict[str, Any]:
    """Recompute the stats for one user/month and upsert them."""
    rows = month_transactions(db_conn, user_id, year, month)

    total_income = sum(r["amount"] for r in rows if r["type"] == "income")
    expenses = [r for r in rows if r["type"] == "expense" and not is_fixed_charge(r)]
    total_expenses = sum(r["amount"] for r in expenses)

    breakdown = _empty_breakdown()
    for r in expenses:
        if r["category"] in breakdown:
            breakdown[r["category"]] += r["amount"]

    top = sorted(expenses, key=lambda r: (-r["amount"], r["id"]))[:TOP_EXPENSES_LIMIT]
    top_expenses = [
        {
            "id": r["id"],
            "date": r["date"],
            "description": r["description"],
            "category": r["category"],
            "amount": r["amount"],
        }
        for r in top
    ]

    total_fixed = active_fixed_total(db_conn, user_id)
    savings = total_income - total_fixed - total_expenses
    savings_rate = (savings / total_income) * 100 if total_income > 0 else 0.0
    savings_rate = max(0.0, min(100.0, savings_rate))
    avg_daily = total_expenses / days_in_month(year, month)

    stats = {
        "user_id": user_id,
        "year": year,
        "month": month,
        "total_income": total_income,
        "total_expenses": total_expenses,
        "total_fixed_expenses": total_fixed,
        "savings": savings,
        "savings_rate": round(savings_rate, 2),
        "category_breakdown": breakdown,
        "top_expenses": top_expenses,
        "transaction_count": len(rows),
        "avg_daily_spending": round(avg_daily, 2),
    }

    db_conn.execute(
        """
        INSERT INTO monthly_stats (
            user_id, year, month, total_income, total_expenses, total_fixed_expenses,
            savings, savings_rate, category_breakdown, top_expenses, transaction_count,
            avg_daily_spending, updated_at
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, CURRENT_TIMESTAMP)
        ON CONFLICT (user_id, year, month) DO UPDATE SET
            total_income = excluded.total_income,
            total_expenses = excluded.total_expenses,
            total_fixed_expenses = excluded.total_fixed_expenses,
            savings = excluded.savings,
            savings_rate = excluded.savings_rate,
            category_breakdown = excluded.category_breakdown,
            top_expenses = excluded.top_expenses,
            transaction_count = excluded.transaction_count,
            avg_daily_spending = excluded.avg_daily_spending,
            updated_at = CURRENT_TIMESTAMP
        """,
        (
            user_id,
            year,
            month,
            stats["total_income"],
            stats["total_expenses"],
            stats["total_fixed_expenses"],
            stats["savings"],
            stats["savings_rate"],
            json.dumps(breakdown),
            json.dumps(top_expenses),
            stats["transaction_count"],
            stats["avg_daily_spending"],
        ),
    )
    db_conn.commit()
    logger.info("Monthly stats regenerated for user=%s %04d-%02d", user_id, year, month)
    return stats


def get_monthly_stats(db_conn: sqlite3.Connection, user_id: int, year: int, month: int) -> Dict[str, Any]:
    """Stored stats for the month, generating them on first access."""
    row = db_conn.execute(
        "SELECT * FROM monthly_stats WHERE user_id = ? AND year = ? AND month = ?",
        (user_id, year, month),
    ).fetchone()
    if not row:
        return generate_monthly_stats(db_conn, user_id, year, month)
    return _row_to_stats(row)


def get_stats_history(
    db_conn: sqlite3.Connection, user_id: int, months: int = 6, today: Optional[date] = None
) -> List[Dict[str, Any]]:
    """Stats for the last ``months`` months, oldest to newest."""
    if today is None:
        today = date.today()
    first = today.replace(day=1)
    history = []
    for i in range(months - 1, -1, -1):
        target = shift_months(first, -i)
        history.append(get_monthly_stats(db_conn, user_id, target.year, target.month))
    return history


def get_year_to_date_summary(db_conn: sqlite3.Connection, user_id: int, year: int) -> Dict[str, Any]:
    rows = db_conn.execute(
        "SELECT * FROM monthly_stats WHERE user_id = ? AND year = ? ORDER BY month",
        (user_id, year),
    ).fetchall()
    stats = [_row_to_stats(r) for r in rows]

    category_totals = _empty_breakdown()
    for s in stats:
        for cat, amount in s["category_breakdown"].items():
            category_totals[cat] = category_totals.get(cat, 0.0) + amount

    avg_rate = sum(s["savings_rate"] for s in stats) / len(stats) if stats else 0.0

    return {
        "year": year,
        "months_covered": len(stats),
        "total_income": sum(s["total_income"] for s in stats),
        "total_expenses": sum(s["total_expenses"] for s in stats),
        "total_fixed_expenses": sum(s["total_fixed_expenses"] for s in stats),
        "total_savings": sum(s["savings"] for s in stats),
        "avg_savings_rate": round(avg_rate, 2),
        "category_totals": category_totals,
        "monthly_stats": stats,
    }
