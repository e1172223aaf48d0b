"""
Portal capture pipeline – single responsibility: drive one portal through
launch → record → navigate → scrape → synthesize → wait → stop → combine.
Depends only on port interfaces (SOLID – Dependency Inversion).
"""

import os
import threading
import time
import traceback
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from news_recorder.config import HEADLINE_SELECTORS, AppConfig
from news_recorder.domain.models import (
    CaptureArtifacts,
    PortalConfig,
    RecordingSession,
    SessionOutcome,
    SessionState,
)
from news_recorder.errors import MergeError, NavigationError, SessionAborted
from news_recorder.ports.interfaces import IMediaCombiner, IPortalCapture, ISpeechSynthesizer

MIN_HEADLINE_LENGTH = 5
MAX_HEADLINE_LENGTH = 200
NARRATED_HEADLINES = 5

NARRATION_INTROS = {
    "bn": "{name} এর শীর্ষ খবর: ",
}
DEFAULT_NARRATION_INTRO = "Top headlines from {name}: "


def filter_headlines(
    texts: Iterable[str],
    min_length: int = MIN_HEADLINE_LENGTH,
    max_length: int = MAX_HEADLINE_LENGTH,
) -> List[str]:
    """Keep stripped texts strictly longer than min_length and shorter than max_length, in order."""
    headlines = []
    for text in texts:
        if not isinstance(text, str):
            continue
        text = text.strip()
        if min_length < len(text) < max_length:
            headlines.append(text)
    return headlines


def build_narration(
    portal_name: str,
    headlines: List[str],
    language: str,
    limit: int = NARRATED_HEADLINES,
) -> str:
    intro = NARRATION_INTROS.get(language, DEFAULT_NARRATION_INTRO).format(name=portal_name)
    return (intro + ". ".join(headlines[:limit])).strip()


def required_duration_ms(tts_duration_seconds: float, min_duration_ms: int, buffer_ms: int) -> int:
    """
    How long the recording must run: never below min_duration_ms, and long enough
    for the whole narration plus buffer_ms. A silent narration (0s) yields the floor.
    """
    narration_ms = max(tts_duration_seconds, 0.0) * 1000
    if narration_ms <= 0:
        return min_duration_ms
    return max(min_duration_ms, int(round(narration_ms + buffer_ms)))


def write_headlines(path: Path, headlines: List[str]) -> None:
    # Blank-line separated; the viewer splits on the same separator
    Path(path).write_text("\n\n".join(headlines), encoding="utf-8")


class PortalCaptureOrchestrator:
    """
    Runs one RecordingSession as an explicit state machine. run() never raises:
    every outcome, including failures, comes back as a SessionOutcome.
    """

    def __init__(
        self,
        *,
        capture_factory: Callable[[], IPortalCapture],
        synthesizer: ISpeechSynthesizer,
        combiner: IMediaCombiner,
        config: AppConfig,
        stop_event: Optional[threading.Event] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._capture_factory = capture_factory
        self._tts = synthesizer
        self._combiner = combiner
        self._config = config
        self._stop = stop_event or threading.Event()
        self._clock = clock

    def run(self, portal: PortalConfig, date_key: str) -> SessionOutcome:
        session = RecordingSession.create(portal, date_key, self._config.output_dir)
        outcome = SessionOutcome(
            session=session,
            state=SessionState.INIT,
            artifacts=CaptureArtifacts.for_session(session),
        )
        print("=" * 60)
        print(f"🌐 Starting processing: {portal.name} ({portal.url})")
        print("=" * 60)

        capture: Optional[IPortalCapture] = None
        try:
            self._check_cancelled()
            session.output_directory.mkdir(parents=True, exist_ok=True)
            capture = self._capture_factory()
            self._run_session(capture, outcome)
        except SessionAborted as e:
            outcome.state = SessionState.ABORTED
            outcome.error = str(e)
            self._discard_final(outcome.artifacts)
            print(f"🛑 Aborted {portal.name}: {e}")
        except Exception as e:
            outcome.state = SessionState.FAILED
            outcome.error = f"{type(e).__name__}: {e}"
            self._discard_final(outcome.artifacts)
            print(f"🔥 Critical error processing {portal.name}: {e}")
            traceback.print_exc()
        finally:
            if capture is not None:
                try:
                    capture.close()
                except Exception as e:
                    print(f"  ⚠️  Error closing browser: {e}")
        return outcome

    def _run_session(self, capture: IPortalCapture, outcome: SessionOutcome) -> None:
        portal = outcome.session.portal
        artifacts = outcome.artifacts
        settings = self._config.recording

        print("\n[1/7] Launching browser...")
        capture.launch()
        self._advance(outcome, SessionState.BROWSER_LAUNCHED)

        print("\n[2/7] Starting screen recording...")
        capture.start_recording(artifacts.raw_video_path)
        started = self._clock()
        self._advance(outcome, SessionState.RECORDING)

        print(f"\n[3/7] Navigating to {portal.url}...")
        try:
            capture.navigate(portal.url, settings.navigation_timeout_ms)
        except Exception as e:
            print(f"🚨 Navigation failed for {portal.name}: {e}")
            self._stop_quietly(capture)
            if isinstance(e, NavigationError):
                raise
            raise NavigationError(f"Could not load {portal.url}: {e}") from e
        self._advance(outcome, SessionState.NAVIGATED)

        print("\n[4/7] Extracting headlines...")
        artifacts.headlines = self._scrape(capture, portal)
        write_headlines(artifacts.headlines_path, artifacts.headlines)
        self._advance(outcome, SessionState.SCRAPED)

        print("\n[5/7] Generating narration...")
        self._advance(outcome, SessionState.SYNTHESIZING)
        narration = build_narration(portal.name, artifacts.headlines, portal.language)
        tts_result = self._tts.synthesize(
            narration,
            artifacts.raw_audio_path,
            portal.language,
            prefer_primary=self._config.tts.prefer_primary,
        )
        outcome.tts_result = tts_result
        outcome.required_duration_ms = required_duration_ms(
            tts_result.duration_seconds,
            settings.min_duration_ms,
            settings.narration_buffer_ms,
        )

        self._advance(outcome, SessionState.WAITING_OUT_DURATION)
        self._wait_out(started, outcome.required_duration_ms)

        print("\n[6/7] Stopping recording...")
        capture.stop_recording()
        self._advance(outcome, SessionState.STOPPED)

        print("\n[7/7] Combining video and narration...")
        self._combine(outcome)
        self._advance(outcome, SessionState.COMBINED)
        print(f"\n✅ Successfully processed {portal.name}: {artifacts.final_video_path}")

    def _advance(self, outcome: SessionOutcome, state: SessionState) -> None:
        outcome.state = state

    def _check_cancelled(self) -> None:
        if self._stop.is_set():
            raise SessionAborted("run cancelled")

    def _scrape(self, capture: IPortalCapture, portal: PortalConfig) -> List[str]:
        try:
            headlines = filter_headlines(capture.scrape_headlines(HEADLINE_SELECTORS))
        except Exception as e:
            print(f"  ⚠️  Headline extraction failed for {portal.name}: {e}")
            headlines = []
        if not headlines:
            print(f"  ⚠️  No headlines found for {portal.name}")
        else:
            print(f"  Found {len(headlines)} headlines:")
            for i, headline in enumerate(headlines[:NARRATED_HEADLINES], 1):
                print(f"    {i}. {headline[:60]}")
        return headlines

    def _wait_out(self, started: float, required_ms: int) -> None:
        remaining = required_ms / 1000.0 - (self._clock() - started)
        print(f"  ⏳ Recording for {required_ms / 1000:.1f} seconds total ({max(remaining, 0):.1f}s left)...")
        if remaining > 0 and self._stop.wait(remaining):
            raise SessionAborted("run cancelled while recording")
        self._check_cancelled()

    def _combine(self, outcome: SessionOutcome) -> None:
        artifacts = outcome.artifacts
        try:
            outcome.merge_result = self._combiner.combine(
                artifacts.raw_video_path,
                artifacts.raw_audio_path,
                artifacts.final_video_path,
            )
        except MergeError as e:
            print(f"  ❌ Failed to merge video/audio: {e}")
            print("  ⚠️  Using the raw recording as the final video")
            os.replace(artifacts.raw_video_path, artifacts.final_video_path)

    @staticmethod
    def _stop_quietly(capture: IPortalCapture) -> None:
        try:
            capture.stop_recording()
        except Exception as e:
            print(f"  ⚠️  Error stopping recorder: {e}")

    @staticmethod
    def _discard_final(artifacts: CaptureArtifacts) -> None:
        try:
            artifacts.final_video_path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            print(f"  ⚠️  Could not remove {artifacts.final_video_path}: {e}")
