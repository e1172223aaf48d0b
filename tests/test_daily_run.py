from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

from news_recorder.application.daily_run import DailyRunCoordinator, today_key
from news_recorder.application.pipeline import PortalCaptureOrchestrator
from news_recorder.domain.models import PortalConfig, SessionState
from tests.fakes import CopyCombiner, FakeCapture, FakeSynthesizer, InstantEvent, make_config

PORTAL_A = PortalConfig(name="Jugantor", url="https://www.jugantor.com/", language="bn")
PORTAL_B = PortalConfig(name="Thedailystar", url="https://www.thedailystar.net/", language="en")


def _coordinator(tmp_path: Path, captures: dict[str, FakeCapture], stop_event=None):
    pending = list(captures.values())
    stop_event = stop_event or InstantEvent()
    orchestrator = PortalCaptureOrchestrator(
        capture_factory=lambda: pending.pop(0),
        synthesizer=FakeSynthesizer(duration=4.0),
        combiner=CopyCombiner(),
        config=make_config(tmp_path),
        stop_event=stop_event,
        clock=lambda: 0.0,
    )
    return DailyRunCoordinator(orchestrator, stop_event=stop_event)


def test_navigation_timeout_on_one_portal_does_not_stop_the_next(tmp_path: Path) -> None:
    captures = {
        "a": FakeCapture(fail_navigation=True),
        "b": FakeCapture(texts=["Parliament passes the annual budget"]),
    }
    coordinator = _coordinator(tmp_path, captures)

    coordinator.run_daily([PORTAL_A, PORTAL_B], "2024-05-01")

    day = tmp_path / "output" / "2024-05-01"
    assert not (day / "Jugantor" / "final.mp4").exists()
    final_b = day / "Thedailystar" / "final.mp4"
    assert final_b.exists() and final_b.stat().st_size > 0
    states = [o.state for o in coordinator.last_outcomes]
    assert states == [SessionState.FAILED, SessionState.COMBINED]
    assert captures["a"].closed and captures["b"].closed


def test_every_portal_yields_a_final_video(tmp_path: Path) -> None:
    coordinator = _coordinator(
        tmp_path,
        {"a": FakeCapture(texts=["Dhaka traffic eases after new flyover"]), "b": FakeCapture()},
    )

    coordinator.run_daily([PORTAL_A, PORTAL_B], "2024-05-01")

    for portal in (PORTAL_A, PORTAL_B):
        final = tmp_path / "output" / "2024-05-01" / portal.name / "final.mp4"
        assert final.stat().st_size > 0


def test_rerun_for_same_date_overwrites_the_same_files(tmp_path: Path) -> None:
    day_dir = tmp_path / "output" / "2024-05-01" / "Thedailystar"

    _coordinator(tmp_path, {"b": FakeCapture(texts=["First edition headline text"])}).run_daily(
        [PORTAL_B], "2024-05-01"
    )
    first_listing = sorted(p.name for p in day_dir.iterdir())

    _coordinator(tmp_path, {"b": FakeCapture(texts=["Second edition headline text"])}).run_daily(
        [PORTAL_B], "2024-05-01"
    )
    second_listing = sorted(p.name for p in day_dir.iterdir())

    assert first_listing == second_listing == [
        "final.mp4",
        "headlines.mp3",
        "headlines.txt",
        "recording.mp4",
    ]
    assert (day_dir / "headlines.txt").read_text(encoding="utf-8") == "Second edition headline text"


def test_orchestrator_crash_is_logged_and_run_continues(tmp_path: Path, capsys) -> None:
    class ExplodingOrchestrator:
        def __init__(self) -> None:
            self.seen: list[str] = []

        def run(self, portal, date_key):
            self.seen.append(portal.name)
            raise RuntimeError("boom")

    orchestrator = ExplodingOrchestrator()
    coordinator = DailyRunCoordinator(orchestrator)  # type: ignore[arg-type]

    coordinator.run_daily([PORTAL_A, PORTAL_B], "2024-05-01")

    assert orchestrator.seen == ["Jugantor", "Thedailystar"]
    assert "Unexpected failure for Jugantor" in capsys.readouterr().out


def test_stop_event_skips_remaining_portals(tmp_path: Path) -> None:
    stop_event = InstantEvent()
    stop_event.set()
    coordinator = _coordinator(tmp_path, {"a": FakeCapture(), "b": FakeCapture()}, stop_event)

    coordinator.run_daily([PORTAL_A, PORTAL_B], "2024-05-01")

    assert coordinator.last_outcomes == []


def test_today_key_is_utc_date() -> None:
    dhaka = timezone(timedelta(hours=6))
    assert today_key(datetime(2024, 5, 2, 3, 0, tzinfo=dhaka)) == "2024-05-01"


def test_failed_rerun_removes_previous_final_video(tmp_path: Path) -> None:
    day_dir = tmp_path / "output" / "2024-05-01" / "Jugantor"

    _coordinator(tmp_path, {"a": FakeCapture(texts=["Morning edition headline"])}).run_daily(
        [PORTAL_A], "2024-05-01"
    )
    assert (day_dir / "final.mp4").exists()

    coordinator = _coordinator(tmp_path, {"a": FakeCapture(fail_navigation=True)})
    coordinator.run_daily([PORTAL_A], "2024-05-01")

    assert coordinator.last_outcomes[0].state is SessionState.FAILED
    assert not (day_dir / "final.mp4").exists()
