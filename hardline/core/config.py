from __future__ import annotations

import os
from pathlib import Path


def _project_root() -> Path:
    # core/config.py -> hardline/core -> hardline -> project root
    return Path(__file__).resolve().parents[2]


def _env_flag(name: str, default: str = "1") -> bool:
    return str(os.getenv(name, default)).strip().lower() in {"1", "true", "yes", "on"}


PROJECT_ROOT: Path = _project_root()

# Data directory (SQLite DB)
DATA_DIR: Path = Path(os.getenv("DATA_DIR", str(PROJECT_ROOT / "data")))
DB_PATH: Path = Path(os.getenv("HARDLINE_DB_PATH", str(DATA_DIR / "hardline.db")))

LOG_DIR: Path = Path(os.getenv("LOG_DIR", str(PROJECT_ROOT / "logs")))
IS_PRODUCTION: bool = os.getenv("ENVIRONMENT") == "production"

# Daily auto-debit job (server local time)
CRON_ENABLED: bool = _env_flag("CRON_ENABLED")
AUTO_DEBIT_HOUR: int = int(os.getenv("AUTO_DEBIT_HOUR", "3"))
AUTO_DEBIT_MINUTE: int = int(os.getenv("AUTO_DEBIT_MINUTE", "15"))
AUTO_DEBIT_ON_STARTUP: bool = _env_flag("AUTO_DEBIT_ON_STARTUP")
