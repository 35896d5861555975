import os
import sqlite3
import tempfile
from datetime import date
from pathlib import Path
from typing import Optional

import pytest

# Settings are read at import time; keep logs and the default DB out of the repo
_SESSION_DIR = Path(tempfile.mkdtemp(prefix="hardline-tests-"))
os.environ.setdefault("LOG_DIR", str(_SESSION_DIR / "logs"))
os.environ.setdefault("HARDLINE_DB_PATH", str(_SESSION_DIR / "default.sqlite3"))
os.environ["CRON_ENABLED"] = "0"

from hardline import db as db_module  # noqa: E402


@pytest.fixture()
def temp_db_path(tmp_path, monkeypatch) -> Path:
    path = tmp_path / "hardline_test.sqlite3"
    monkeypatch.setattr(db_module, "DB_PATH", path)
    db_module.initialise_database()
    return path


@pytest.fixture()
def db_conn(temp_db_path):
    conn = sqlite3.connect(str(temp_db_path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture()
def app_client(temp_db_path):
    from fastapi.testclient import TestClient
    from hardline.main import app

    return TestClient(app)


@pytest.fixture()
def make_user(db_conn):
    counter = {"n": 0}

    def _make(name: str = "Thandi", payday: int = 25, penalties: bool = False) -> int:
        counter["n"] += 1
        cur = db_conn.execute(
            "INSERT INTO users (name, email, payday, penalty_system_enabled) VALUES (?, ?, ?, ?)",
            (name, f"user{counter['n']}@example.com", payday, 1 if penalties else 0),
        )
        db_conn.commit()
        return cur.lastrowid

    return _make


@pytest.fixture()
def make_fixed_expense(db_conn):
    def _make(
        user_id: int,
        name: str = "Rent",
        amount: float = 8500,
        trigger_day: int = 1,
        is_active: bool = True,
        last_charged_at: Optional[str] = None,
    ) -> int:
        cur = db_conn.execute(
            "INSERT INTO fixed_expenses (user_id, name, amount, trigger_day, is_active, last_charged_at) "
            "VALUES (?, ?, ?, ?, ?, ?)",
            (user_id, name, amount, trigger_day, 1 if is_active else 0, last_charged_at),
        )
        db_conn.commit()
        return cur.lastrowid

    return _make


@pytest.fixture()
def add_transaction(db_conn):
    def _add(
        user_id: int,
        on: str,
        amount: float,
        type: str = "expense",
        description: str = "pytest",
        category: Optional[str] = "Food",
        fixed_expense_id: Optional[int] = None,
    ) -> int:
        cur = db_conn.execute(
            "INSERT INTO transactions (user_id, type, date, amount, description, category, fixed_expense_id) "
            "VALUES (?, ?, ?, ?, ?, ?, ?)",
            (user_id, type, on, amount, description, category if type == "expense" else None, fixed_expense_id),
        )
        db_conn.commit()
        return cur.lastrowid

    return _add


@pytest.fixture()
def freeze_today(monkeypatch):
    """Pin ``date.today()`` for the given modules (each imports ``date`` from datetime)."""

    def _freeze(day: date, *modules) -> date:
        class _FrozenDate(date):
            @classmethod
            def today(cls):
                return day

        for module in modules:
            monkeypatch.setattr(module, "date", _FrozenDate)
        return day

    return _freeze
