"""
Scheduler and CLI trigger tests.
"""
import asyncio
import json
from datetime import date, datetime, time

import pytest

from app import cli
from app.core.errors import GenerationError
from app.db.base import SessionLocal
from app.models.activity import Frequency
from app.models.activity_log import ActivityLog
from app.services import scheduler as scheduler_module
from app.services.generator import GenerationResult
from app.services.scheduler import DailyGenerationScheduler, seconds_until
from tests.helpers import make_activity, make_user


class TestSecondsUntil:
    def test_later_today(self):
        assert seconds_until(time(0, 5), datetime(2024, 3, 15, 0, 0)) == 300

    def test_already_passed_rolls_to_tomorrow(self):
        assert seconds_until(time(0, 5), datetime(2024, 3, 15, 0, 10)) == 24 * 3600 - 300

    def test_exactly_now_waits_a_day(self):
        assert seconds_until(time(0, 5), datetime(2024, 3, 15, 0, 5)) == 24 * 3600


class TestRunOnce:
    def test_generates_for_every_user(self, db, calendar):
        a = make_user(db, "a@example.com")
        b = make_user(db, "b@example.com")
        make_activity(db, a, "a", Frequency.DAILY)
        make_activity(db, b, "b", Frequency.DAILY)

        sched = DailyGenerationScheduler(SessionLocal, calendar, time(0, 5))
        result = sched.run_once()

        assert result.target_date == date(2024, 3, 15)
        assert result.created == 2
        assert db.query(ActivityLog).count() == 2

    def test_duplicate_trigger_is_harmless(self, db, calendar):
        user = make_user(db)
        make_activity(db, user, "a", Frequency.DAILY)
        sched = DailyGenerationScheduler(SessionLocal, calendar, time(0, 5))
        sched.run_once()
        assert sched.run_once().created == 0
        assert db.query(ActivityLog).count() == 1


class TestLoop:
    def test_start_and_stop(self, calendar):
        async def scenario():
            sched = DailyGenerationScheduler(SessionLocal, calendar, time(0, 5))
            sched.start()
            assert sched.running
            await sched.stop()
            return sched.running

        assert asyncio.run(scenario()) is False

    @pytest.mark.parametrize(
        "error",
        [
            GenerationError(day=date(2024, 3, 15), reason="OperationalError"),
            RuntimeError("boom"),
        ],
        ids=["generation-error", "unexpected-error"],
    )
    def test_failed_tick_does_not_stop_the_loop(self, calendar, monkeypatch, error):
        monkeypatch.setattr(scheduler_module, "seconds_until", lambda run_at, now: 0)
        calls = []

        def fake_run_once(day=None):
            calls.append(day)
            if len(calls) == 1:
                raise error
            return GenerationResult(target_date=calendar.today())

        async def scenario():
            sched = DailyGenerationScheduler(SessionLocal, calendar, time(0, 5))
            sched.run_once = fake_run_once
            sched.start()
            for _ in range(200):
                if len(calls) >= 2:
                    break
                await asyncio.sleep(0.01)
            still_running = sched.running
            await sched.stop()
            return still_running

        assert asyncio.run(scenario()) is True
        assert len(calls) >= 2


class TestCli:
    @pytest.fixture(autouse=True)
    def quiet_logging(self, monkeypatch):
        monkeypatch.setattr(cli, "setup_logging", lambda level: None)

    def test_generate_prints_summary(self, db, capsys):
        user = make_user(db)
        make_activity(db, user, "w", Frequency.WEEKLY)

        code = cli.main(["generate", "--date", "2024-03-10"])

        assert code == 0
        out = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        assert out == {"date": "2024-03-10", "created": 1, "frequencies": ["daily", "weekly"]}

    def test_generate_for_one_user(self, db, capsys):
        a = make_user(db, "a@example.com")
        b = make_user(db, "b@example.com")
        make_activity(db, a, "a", Frequency.DAILY)
        make_activity(db, b, "b", Frequency.DAILY)

        code = cli.main(["generate", "--date", "2024-03-15", "--user-id", str(b.id)])

        assert code == 0
        assert db.query(ActivityLog).filter(ActivityLog.user_id == a.id).count() == 0
        assert db.query(ActivityLog).filter(ActivityLog.user_id == b.id).count() == 1

    def test_generation_failure_exit_code(self, capsys, monkeypatch):
        def boom(db, target, user_id=None):
            raise GenerationError(day=target, reason="OperationalError")

        monkeypatch.setattr(cli, "generate_for_date", boom)
        code = cli.main(["generate", "--date", "2024-03-15"])

        assert code == 1
        err = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert err["code"] == "GENERATION_FAILED"
