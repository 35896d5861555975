from datetime import date

from hardline.services import cron_service
from hardline.services.cron_service import CronService


def test_start_schedules_daily_job_and_stop_clears_it():
    cron = CronService(hour=4, minute=30, run_on_startup=False)
    cron.start()
    try:
        assert cron.running
        assert cron.job_ids() == [cron.daily_job_id]
        # Duplicate start is ignored
        cron.start()
        assert cron.job_ids() == [cron.daily_job_id]
    finally:
        cron.stop()
    assert not cron.running
    assert cron.job_ids() == []


def test_job_wrapper_runs_charges(db_conn, make_user, make_fixed_expense, freeze_today):
    today = freeze_today(date(2025, 11, 14), cron_service.auto_debit)
    uid = make_user()
    make_fixed_expense(uid, trigger_day=today.day)

    CronService._run_auto_debit()

    count = db_conn.execute("SELECT COUNT(*) FROM transactions WHERE user_id = ?", (uid,)).fetchone()[0]
    assert count == 1


def test_job_wrapper_swallows_run_failures(monkeypatch, caplog):
    def _boom(today=None):
        raise RuntimeError("database unavailable")

    monkeypatch.setattr(cron_service.auto_debit, "run_daily_charges", _boom)

    CronService._run_auto_debit()

    assert "run_daily_charges failed" in caplog.text
