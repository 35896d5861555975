"""
APScheduler-based CronService for the daily auto-debit run.

Runs `run_daily_charges` once at startup (optional) and then daily at the
configured time (03:15 by default). The charge engine is idempotent per
expense and month, so repeated invocations won't duplicate charges.
"""

import logging
from datetime import datetime
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from .. import auto_debit
from ..core import config

logger = logging.getLogger(__name__)


class CronService:
    """Background scheduler for the auto-debit job."""

    def __init__(
        self,
        hour: Optional[int] = None,
        minute: Optional[int] = None,
        run_on_startup: Optional[bool] = None,
    ) -> None:
        self._scheduler: BackgroundScheduler | None = None
        self._hour = config.AUTO_DEBIT_HOUR if hour is None else hour
        self._minute = config.AUTO_DEBIT_MINUTE if minute is None else minute
        self._run_on_startup = config.AUTO_DEBIT_ON_STARTUP if run_on_startup is None else run_on_startup
        self.daily_job_id = "auto_debit_daily"
        self.startup_job_id = "auto_debit_startup"

    @property
    def running(self) -> bool:
        return self._scheduler is not None

    def start(self) -> None:
        if self._scheduler is not None:
            logger.info("CronService already started; ignoring duplicate start.")
            return

        scheduler = BackgroundScheduler()

        if self._run_on_startup:
            scheduler.add_job(
                self._run_auto_debit,
                id=self.startup_job_id,
                next_run_time=datetime.now(),
                replace_existing=True,
                coalesce=True,
                max_instances=1,
                misfire_grace_time=3600,
            )

        scheduler.add_job(
            self._run_auto_debit,
            id=self.daily_job_id,
            trigger=CronTrigger(hour=self._hour, minute=self._minute),
            replace_existing=True,
            coalesce=True,
            max_instances=1,
            misfire_grace_time=3600,
        )

        scheduler.start()
        self._scheduler = scheduler
        logger.info(
            "CronService started: daily auto-debit at %02d:%02d (startup run: %s).",
            self._hour,
            self._minute,
            self._run_on_startup,
        )

    def stop(self) -> None:
        if self._scheduler is None:
            return
        try:
            self._scheduler.shutdown(wait=False)
            logger.info("CronService stopped.")
        finally:
            self._scheduler = None

    def job_ids(self) -> list[str]:
        if self._scheduler is None:
            return []
        return [job.id for job in self._scheduler.get_jobs()]

    @staticmethod
    def _run_auto_debit() -> None:
        try:
            summary = auto_debit.run_daily_charges()
            logger.info("run_daily_charges executed: %s", summary.as_dict())
        except Exception:
            logger.exception("run_daily_charges failed")
