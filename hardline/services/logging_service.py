from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path


def _file_handler(path: Path, production: bool) -> logging.FileHandler:
    if production:
        # max 10MB, keep 5 files
        return RotatingFileHandler(str(path), maxBytes=10 * 1024 * 1024, backupCount=5)
    return logging.FileHandler(str(path))


def _has_file_handler(lg: logging.Logger, path: Path) -> bool:
    return any(
        getattr(h, "baseFilename", None) == str(path)
        for h in lg.handlers
        if isinstance(h, logging.FileHandler)
    )


def configure_logging(log_dir: Path, production: bool = False) -> None:
    """Configure application logging (file + console) and attach to uvicorn loggers.

    Idempotent: safe to call multiple times.
    """
    log_dir.mkdir(parents=True, exist_ok=True)

    server_log_path = log_dir / "server.log"
    error_log_path = log_dir / "errors.log"

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    formatter = logging.Formatter(fmt)

    detailed_fmt = "%(asctime)s %(levelname)s %(name)s [%(filename)s:%(lineno)d] %(funcName)s(): %(message)s"
    detailed_formatter = logging.Formatter(detailed_fmt)

    server_handler = _file_handler(server_log_path, production)
    server_handler.setLevel(logging.INFO if production else logging.DEBUG)
    server_handler.setFormatter(formatter)

    error_handler = _file_handler(error_log_path, production)
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(detailed_formatter)

    # Console handler; production only shows warnings and errors
    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setLevel(logging.WARNING if production else logging.INFO)
    stream_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    if not _has_file_handler(root_logger, server_log_path):
        root_logger.addHandler(server_handler)
    if not _has_file_handler(root_logger, error_log_path):
        root_logger.addHandler(error_handler)
    if not any(
        isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
        for h in root_logger.handlers
    ):
        root_logger.addHandler(stream_handler)

    # Scheduler chatter is only useful when debugging
    logging.getLogger("apscheduler").setLevel(logging.WARNING)

    # Uvicorn loggers
    for uv_logger_name in ("uvicorn.error", "uvicorn.access", "uvicorn"):
        lg = logging.getLogger(uv_logger_name)
        lg.setLevel(logging.INFO)
        if not _has_file_handler(lg, server_log_path):
            lg.addHandler(server_handler)
