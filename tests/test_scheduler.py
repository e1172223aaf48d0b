from __future__ import annotations

import threading
from datetime import datetime

import pytest

from news_recorder.application.scheduler import DailySchedule, run_on_schedule


def test_parses_daily_cron() -> None:
    assert DailySchedule.from_cron("0 7 * * *") == DailySchedule(minute=0, hour=7)
    assert DailySchedule.from_cron("30 18 * * *") == DailySchedule(minute=30, hour=18)


@pytest.mark.parametrize(
    "expression",
    ["0 7 * *", "0 7 1 * *", "*/5 * * * *", "61 7 * * *", "0 24 * * *", ""],
)
def test_rejects_unsupported_expressions(expression: str) -> None:
    with pytest.raises(ValueError):
        DailySchedule.from_cron(expression)


def test_next_run_later_today_or_tomorrow() -> None:
    schedule = DailySchedule(minute=0, hour=7)
    assert schedule.next_run(datetime(2024, 5, 1, 6, 59)) == datetime(2024, 5, 1, 7, 0)
    assert schedule.next_run(datetime(2024, 5, 1, 7, 0)) == datetime(2024, 5, 2, 7, 0)
    assert schedule.next_run(datetime(2024, 12, 31, 8, 0)) == datetime(2025, 1, 1, 7, 0)


class _NoSleepEvent(threading.Event):
    def __init__(self) -> None:
        super().__init__()
        self.waits: list[float] = []

    def wait(self, timeout=None) -> bool:
        self.waits.append(timeout)
        return self.is_set()


def test_runs_job_at_each_trigger_and_survives_job_errors() -> None:
    event = _NoSleepEvent()
    calls = []

    def job() -> None:
        calls.append(len(calls))
        if len(calls) == 1:
            raise RuntimeError("portal crashed")

    runs = run_on_schedule(
        job,
        DailySchedule(minute=0, hour=7),
        event,
        now=lambda: datetime(2024, 5, 1, 6, 0),
        max_runs=2,
    )

    assert runs == 2
    assert calls == [0, 1]
    assert event.waits == [3600.0, 3600.0]


def test_stop_event_ends_the_loop() -> None:
    event = threading.Event()
    event.set()
    assert run_on_schedule(lambda: None, DailySchedule(minute=0, hour=7), event) == 0
