# hardline/db.py
"""
Database connection and initialization helpers.
This file is the single source of truth for opening the SQLite connection.
"""

import logging
import sqlite3
from typing import Generator

from .core import config

logger = logging.getLogger(__name__)

# Can be overridden (HARDLINE_DB_PATH, or patched directly in tests)
DB_PATH = config.DB_PATH


def get_connection() -> sqlite3.Connection:
    DB_PATH.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(
        str(DB_PATH),
        check_same_thread=False,
        timeout=10,
    )
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def get_db_conn() -> Generator[sqlite3.Connection, None, None]:
    """
    Dependency for FastAPI to get database connection.
    """
    conn = get_connection()
    try:
        yield conn
    finally:
        conn.close()


def initialise_database() -> None:
    """Create database tables if they don't exist."""
    conn = get_connection()
    cur = conn.cursor()

    # Readers (API requests) must not block the scheduler's commits
    cur.execute("PRAGMA journal_mode=WAL")

    cur.execute("""
        CREATE TABLE IF NOT EXISTS users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            email TEXT NOT NULL UNIQUE,
            payday INTEGER NOT NULL CHECK (payday BETWEEN 1 AND 31),
            penalty_system_enabled BOOLEAN NOT NULL DEFAULT 0,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)

    cur.execute("""
        CREATE TABLE IF NOT EXISTS fixed_expenses (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id INTEGER NOT NULL,
            name TEXT NOT NULL CHECK (length(trim(name)) > 0),
            amount REAL NOT NULL CHECK (amount >= 0),
            trigger_day INTEGER NOT NULL CHECK (trigger_day BETWEEN 1 AND 31),
            is_active BOOLEAN NOT NULL DEFAULT 1,
            last_charged_at TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            FOREIGN KEY (user_id) REFERENCES users (id) ON DELETE CASCADE
        )
    """)
    cur.execute(
        "CREATE INDEX IF NOT EXISTS idx_fixed_expenses_due ON fixed_expenses (is_active, trigger_day)"
    )

    cur.execute("""
        CREATE TABLE IF NOT EXISTS transactions (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id INTEGER NOT NULL,
            type TEXT NOT NULL CHECK (type IN ('income', 'expense')),
            date TEXT NOT NULL,
            amount REAL NOT NULL CHECK (amount >= 0),
            description TEXT NOT NULL,
            category TEXT,
            income_source TEXT,
            fixed_expense_id INTEGER,
            is_penalty_trigger BOOLEAN NOT NULL DEFAULT 0,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            FOREIGN KEY (user_id) REFERENCES users (id) ON DELETE CASCADE,
            FOREIGN KEY (fixed_expense_id) REFERENCES fixed_expenses (id) ON DELETE SET NULL
        )
    """)
    # Month-range lookups by owner (ledger listing and the auto-debit guard)
    cur.execute(
        "CREATE INDEX IF NOT EXISTS idx_transactions_user_date ON transactions (user_id, date)"
    )

    cur.execute("""
        CREATE TABLE IF NOT EXISTS monthly_stats (
            user_id INTEGER NOT NULL,
            year INTEGER NOT NULL,
            month INTEGER NOT NULL CHECK (month BETWEEN 1 AND 12),
            total_income REAL NOT NULL DEFAULT 0,
            total_expenses REAL NOT NULL DEFAULT 0,
            total_fixed_expenses REAL NOT NULL DEFAULT 0,
            savings REAL NOT NULL DEFAULT 0,
            savings_rate REAL NOT NULL DEFAULT 0,
            category_breakdown TEXT NOT NULL,
            top_expenses TEXT NOT NULL,
            transaction_count INTEGER NOT NULL DEFAULT 0,
            avg_daily_spending REAL NOT NULL DEFAULT 0,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            PRIMARY KEY (user_id, year, month),
            FOREIGN KEY (user_id) REFERENCES users (id) ON DELETE CASCADE
        )
    """)

    cur.execute("""
        CREATE TABLE IF NOT EXISTS shopping_items (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id INTEGER NOT NULL,
            name TEXT NOT NULL,
            category TEXT NOT NULL,
            cycle TEXT NOT NULL CHECK (cycle IN ('MonthStart', 'MidMonth', 'Both')),
            quantity INTEGER NOT NULL DEFAULT 1 CHECK (quantity >= 1),
            is_diabetic_friendly BOOLEAN NOT NULL DEFAULT 0,
            typical_cost REAL NOT NULL DEFAULT 0,
            is_active BOOLEAN NOT NULL DEFAULT 1,
            FOREIGN KEY (user_id) REFERENCES users (id) ON DELETE CASCADE
        )
    """)

    cur.execute("""
        CREATE TABLE IF NOT EXISTS price_history (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id INTEGER NOT NULL,
            shopping_item_id INTEGER NOT NULL,
            price REAL NOT NULL CHECK (price >= 0),
            recorded_date TEXT NOT NULL,
            source TEXT NOT NULL DEFAULT 'manual',
            FOREIGN KEY (user_id) REFERENCES users (id) ON DELETE CASCADE,
            FOREIGN KEY (shopping_item_id) REFERENCES shopping_items (id) ON DELETE CASCADE
        )
    """)
    cur.execute(
        "CREATE INDEX IF NOT EXISTS idx_price_history_item ON price_history (user_id, shopping_item_id, recorded_date)"
    )

    conn.commit()
    conn.close()
    logger.info("Database initialised at %s", DB_PATH)
