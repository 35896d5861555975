import sqlite3
from datetime import date
from typing import Any, Dict, List, Optional

from ..exceptions import NotFoundError

TREND_THRESHOLD_PERCENT = 5
TREND_WINDOW = 5


def _get_item(db_conn: sqlite3.Connection, user_id: int, shopping_item_id: int) -> Dict[str, Any]:
    row = db_conn.execute(
        "SELECT * FROM shopping_items WHERE id = ? AND user_id = ?", (shopping_item_id, user_id)
    ).fetchone()
    if not row:
        raise NotFoundError("Shopping item not found")
    return dict(row)


def record_price(
    db_conn: sqlite3.Connection,
    user_id: int,
    shopping_item_id: int,
    price: float,
    source: str = "manual",
    recorded_date: Optional[date] = None,
) -> Dict[str, Any]:
    _get_item(db_conn, user_id, shopping_item_id)
    if recorded_date is None:
        recorded_date = date.today()
    cur = db_conn.execute(
        "INSERT INTO price_history (user_id, shopping_item_id, price, recorded_date, source) VALUES (?, ?, ?, ?, ?)",
        (user_id, shopping_item_id, price, recorded_date.isoformat(), source),
    )
    db_conn.commit()
    return {
        "id": cur.lastrowid,
        "user_id": user_id,
        "shopping_item_id": shopping_item_id,
        "price": price,
        "recorded_date": recorded_date.isoformat(),
        "source": source,
    }


def get_price_history(
    db_conn: sqlite3.Connection, user_id: int, shopping_item_id: int, limit: int = 10
) -> List[Dict[str, Any]]:
    """Newest first."""
    rows = db_conn.execute(
        "SELECT * FROM price_history WHERE user_id = ? AND shopping_item_id = ? "
        "ORDER BY recorded_date DESC, id DESC LIMIT ?",
        (user_id, shopping_item_id, limit),
    ).fetchall()
    return [dict(r) for r in rows]


def get_price_trend(db_conn: sqlite3.Connection, user_id: int, shopping_item_id: int) -> Dict[str, Any]:
    history = get_price_history(db_conn, user_id, shopping_item_id, limit=TREND_WINDOW)

    if len(history) < 2:
        latest = history[0]["price"] if history else None
        return {
            "trend": "insufficient_data",
            "current_price": latest,
            "previous_price": None,
            "change_percent": None,
            "avg_price": latest,
        }

    current = history[0]["price"]
    previous = history[1]["price"]
    avg_price = sum(h["price"] for h in history) / len(history)

    if previous == 0:
        change_percent = None
        trend = "up" if current > 0 else "stable"
    else:
        change_percent = (current - previous) / previous * 100
        if change_percent > TREND_THRESHOLD_PERCENT:
            trend = "up"
        elif change_percent < -TREND_THRESHOLD_PERCENT:
            trend = "down"
        else:
            trend = "stable"
        change_percent = round(change_percent, 2)

    return {
        "trend": trend,
        "current_price": current,
        "previous_price": previous,
        "change_percent": change_percent,
        "avg_price": round(avg_price, 2),
    }


def get_price_comparison(db_conn: sqlite3.Connection, user_id: int) -> List[Dict[str, Any]]:
    items = db_conn.execute(
        "SELECT * FROM shopping_items WHERE user_id = ? AND is_active = 1 ORDER BY name", (user_id,)
    ).fetchall()
    comparisons = []
    for item in items:
        trend = get_price_trend(db_conn, user_id, item["id"])
        comparisons.append({
            "item_id": item["id"],
            "item_name": item["name"],
            "current_price": trend["current_price"] or 0.0,
            "typical_cost": item["typical_cost"],
            "trend": trend["trend"],
            "change_percent": trend["change_percent"],
        })
    return comparisons
