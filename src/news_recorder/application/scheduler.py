"""Daily trigger for production mode, driven by a cron string such as '0 7 * * *'."""

import threading
import traceback
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional


@dataclass(frozen=True)
class DailySchedule:
    """Fixed minute and hour every day. Only '*' is accepted for day, month and weekday."""
    minute: int
    hour: int

    @classmethod
    def from_cron(cls, expression: str) -> "DailySchedule":
        fields = expression.split()
        if len(fields) != 5:
            raise ValueError(f"Expected 5 cron fields, got {len(fields)}: {expression!r}")
        minute, hour, day, month, weekday = fields
        if (day, month, weekday) != ("*", "*", "*"):
            raise ValueError(f"Only daily schedules ('M H * * *') are supported: {expression!r}")
        try:
            m, h = int(minute), int(hour)
        except ValueError:
            raise ValueError(f"Minute and hour must be numbers: {expression!r}") from None
        if not (0 <= m <= 59 and 0 <= h <= 23):
            raise ValueError(f"Minute or hour out of range: {expression!r}")
        return cls(minute=m, hour=h)

    def next_run(self, after: datetime) -> datetime:
        candidate = after.replace(hour=self.hour, minute=self.minute, second=0, microsecond=0)
        if candidate <= after:
            candidate += timedelta(days=1)
        return candidate


def run_on_schedule(
    job: Callable[[], None],
    schedule: DailySchedule,
    stop_event: threading.Event,
    now: Callable[[], datetime] = datetime.now,
    max_runs: Optional[int] = None,
) -> int:
    """
    Block until stop_event is set, running job at every trigger time.
    Job exceptions are logged and the schedule carries on. Returns the number of runs.
    """
    runs = 0
    while not stop_event.is_set():
        if max_runs is not None and runs >= max_runs:
            break
        current = now()
        target = schedule.next_run(current)
        wait_seconds = (target - current).total_seconds()
        print(f"⏰ Next capture at {target:%Y-%m-%d %H:%M} ({wait_seconds / 3600:.1f}h)")
        if stop_event.wait(wait_seconds):
            break
        print("⏰ Running scheduled news capture")
        try:
            job()
        except Exception as e:
            print(f"💥 Scheduled job failed: {e}")
            traceback.print_exc()
        runs += 1
    return runs
