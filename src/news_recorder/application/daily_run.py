"""Daily run – process every configured portal, one at a time, for a date."""

import threading
import traceback
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from news_recorder.application.pipeline import PortalCaptureOrchestrator
from news_recorder.domain.models import PortalConfig, SessionOutcome, SessionState


def today_key(now: Optional[datetime] = None) -> str:
    """UTC calendar date as YYYY-MM-DD."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).strftime("%Y-%m-%d")


class DailyRunCoordinator:
    """
    Sequential on purpose: one browser, one recorder and one ffmpeg at a time,
    and a failing portal never takes the others down.
    """

    def __init__(
        self,
        orchestrator: PortalCaptureOrchestrator,
        stop_event: Optional[threading.Event] = None,
    ):
        self._orchestrator = orchestrator
        self._stop = stop_event or threading.Event()
        self.last_outcomes: List[SessionOutcome] = []

    def run_daily(self, portals: Sequence[PortalConfig], date_key: str) -> None:
        print(f"📅 Starting daily news capture for: {date_key}")
        self.last_outcomes = []
        try:
            for portal in portals:
                if self._stop.is_set():
                    print("🛑 Stop requested, skipping remaining portals")
                    break
                try:
                    outcome = self._orchestrator.run(portal, date_key)
                except Exception as e:
                    print(f"💥 Unexpected failure for {portal.name}: {e}")
                    traceback.print_exc()
                    continue
                self.last_outcomes.append(outcome)
                if not outcome.succeeded:
                    print(f"❌ {portal.name}: {outcome.state.value} ({outcome.error})")
            self._print_summary(len(portals))
        except Exception as e:
            print(f"💥 Failed to complete processing: {e}")
            traceback.print_exc()

    def run_today(self, portals: Sequence[PortalConfig]) -> None:
        self.run_daily(portals, today_key())

    def _print_summary(self, total: int) -> None:
        succeeded = sum(1 for o in self.last_outcomes if o.succeeded)
        aborted = sum(1 for o in self.last_outcomes if o.state is SessionState.ABORTED)
        failed = len(self.last_outcomes) - succeeded - aborted
        skipped = total - len(self.last_outcomes)
        print("\n" + "=" * 60)
        if succeeded == total:
            print(f"🎉 All {total} portals processed successfully")
        else:
            print(
                f"Run finished: {succeeded} succeeded, {failed} failed, "
                f"{aborted} aborted, {skipped} skipped"
            )
        print("=" * 60)
