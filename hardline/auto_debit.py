# hardline/auto_debit.py
"""
Recurring charge engine for fixed expenses (debit orders).

`run_daily_charges` is meant to be called once a day (see CronService).
It picks every active fixed expense whose trigger day equals today's
day-of-month and writes at most one "Auto-debit: {name}" ledger entry per
expense per calendar month.

Two signals decide whether an expense was already charged this month:

* ``last_charged_at`` falls inside the current month, or
* the ledger already holds an auto-debit entry for the expense in the
  current month. In that case ``last_charged_at`` is brought back in sync
  and nothing is charged.

Each expense is handled in its own ``BEGIN IMMEDIATE`` transaction: the
guard is evaluated against state read under the write lock, and the ledger
insert plus the timestamp update commit (or roll back) together. A failing
expense is rolled back and counted, it never aborts the batch.

Trigger days are matched strictly: an expense due on the 31st does not fire
in months that have no 31st.
"""
from __future__ import annotations

import logging
import sqlite3
from dataclasses import asdict, dataclass
from datetime import date, datetime
from typing import Any, Dict, Optional

from . import db
from .constants import AUTO_DEBIT_PREFIX, FIXED_EXPENSE_CATEGORY, MANUAL_DEBIT_PREFIX
from .dates import in_month, month_bounds

logger = logging.getLogger(__name__)

_CHARGED = "charged"
_SKIPPED = "skipped"


@dataclass
class ChargeSummary:
    succeeded: int = 0
    skipped: int = 0
    failed: int = 0

    def as_dict(self) -> Dict[str, int]:
        return asdict(self)


def auto_debit_label(name: str) -> str:
    return f"{AUTO_DEBIT_PREFIX}{name}"


def manual_debit_label(name: str) -> str:
    return f"{MANUAL_DEBIT_PREFIX}{name}"


# --------- Ledger writes ---------

def _insert_ledger_entry(
    conn: sqlite3.Connection, rec: Dict[str, Any], on: date, description: str
) -> int:
    cur = conn.execute(
        "INSERT INTO transactions (user_id, type, date, amount, description, category, fixed_expense_id) "
        "VALUES (?, 'expense', ?, ?, ?, ?, ?)",
        (
            rec["user_id"],
            on.isoformat(),
            rec["amount"],
            description,
            FIXED_EXPENSE_CATEGORY,
            rec["id"],
        ),
    )
    return cur.lastrowid


def _mark_charged(conn: sqlite3.Connection, rec_id: int, stamp: str) -> None:
    conn.execute(
        "UPDATE fixed_expenses SET last_charged_at = ?, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
        (stamp, rec_id),
    )


def _auto_debit_exists(conn: sqlite3.Connection, rec: Dict[str, Any], today: date) -> bool:
    start, end = month_bounds(today)
    row = conn.execute(
        "SELECT 1 FROM transactions "
        "WHERE user_id = ? AND type = 'expense' AND description = ? AND date BETWEEN ? AND ? LIMIT 1",
        (rec["user_id"], auto_debit_label(rec["name"]), start.isoformat(), end.isoformat()),
    ).fetchone()
    return row is not None


# --------- Core ---------

def _charge_one(conn: sqlite3.Connection, rec_id: int, today: date) -> str:
    conn.execute("BEGIN IMMEDIATE")
    try:
        row = conn.execute("SELECT * FROM fixed_expenses WHERE id = ?", (rec_id,)).fetchone()
        if row is None or not row["is_active"]:
            # Deleted or deactivated since the candidate query
            conn.rollback()
            return _SKIPPED
        rec = dict(row)

        if in_month(rec["last_charged_at"], today):
            logger.info('Expense "%s" already debited this month, skipping', rec["name"])
            outcome = _SKIPPED
        elif _auto_debit_exists(conn, rec, today):
            logger.info(
                'Transaction already exists for "%s" this month, updating last_charged_at', rec["name"]
            )
            _mark_charged(conn, rec["id"], today.isoformat())
            outcome = _SKIPPED
        else:
            _insert_ledger_entry(conn, rec, today, auto_debit_label(rec["name"]))
            _mark_charged(conn, rec["id"], today.isoformat())
            logger.info(
                'Successfully debited %s for "%s" (user=%s)', rec["amount"], rec["name"], rec["user_id"]
            )
            outcome = _CHARGED

        conn.commit()
        return outcome
    except Exception:
        conn.rollback()
        raise


def run_daily_charges(today: Optional[date] = None) -> ChargeSummary:
    """
    Charge every active fixed expense due on ``today`` (defaults to the
    current date). Returns succeeded/skipped/failed counts.
    """
    if today is None:
        today = date.today()

    summary = ChargeSummary()
    logger.info("Processing auto-debits for day %s of %s/%s", today.day, today.month, today.year)

    conn = db.get_connection()
    try:
        rows = conn.execute(
            "SELECT id, user_id, name FROM fixed_expenses WHERE is_active = 1 AND trigger_day = ? ORDER BY id",
            (today.day,),
        ).fetchall()
        logger.info("Found %s expenses to process", len(rows))

        for row in rows:
            try:
                outcome = _charge_one(conn, row["id"], today)
            except Exception:
                logger.exception(
                    'Error processing expense "%s" (id=%s, user=%s)', row["name"], row["id"], row["user_id"]
                )
                summary.failed += 1
                continue
            if outcome == _CHARGED:
                summary.succeeded += 1
            else:
                summary.skipped += 1
    finally:
        conn.close()

    logger.info(
        "Auto-debit processing complete: %s success, %s skipped, %s errors",
        summary.succeeded,
        summary.skipped,
        summary.failed,
    )
    return summary


def manual_charge(fixed_expense_id: int, now: Optional[datetime] = None) -> bool:
    """
    Charge one fixed expense immediately, outside the daily schedule.

    Manual charges are not deduplicated. Returns False (and logs why) when
    the expense is missing, inactive, or the write fails.
    """
    if now is None:
        now = datetime.now()

    conn: Optional[sqlite3.Connection] = None
    try:
        conn = db.get_connection()
        row = conn.execute("SELECT * FROM fixed_expenses WHERE id = ?", (fixed_expense_id,)).fetchone()
        if row is None:
            logger.error("Expense %s not found", fixed_expense_id)
            return False
        rec = dict(row)
        if not rec["is_active"]:
            logger.error("Expense %s is not active", fixed_expense_id)
            return False

        _insert_ledger_entry(conn, rec, now.date(), manual_debit_label(rec["name"]))
        _mark_charged(conn, rec["id"], now.isoformat(timespec="seconds"))
        conn.commit()
        logger.info('Manual debit successful for "%s"', rec["name"])
        return True
    except Exception:
        if conn is not None:
            conn.rollback()
        logger.exception("Error in manual debit for %s", fixed_expense_id)
        return False
    finally:
        if conn is not None:
            conn.close()
