from __future__ import annotations

import shutil
import threading
from pathlib import Path
from typing import Sequence

from news_recorder.config import AppConfig, RecordingSettings
from news_recorder.domain.models import MergeResult, TtsResult
from news_recorder.errors import MergeError, NavigationError, ProcessError
from news_recorder.ports.interfaces import IMediaCombiner, IPortalCapture, ISpeechSynthesizer

VIDEO_BYTES = b"\x00\x00\x00\x18ftypmp42fake-video-frames"


def make_config(tmp_path: Path, min_duration_ms: int = 10000, buffer_ms: int = 2000) -> AppConfig:
    return AppConfig(
        output_dir=tmp_path / "output",
        recording=RecordingSettings(min_duration_ms=min_duration_ms, narration_buffer_ms=buffer_ms),
    )


class InstantEvent(threading.Event):
    """Stop event whose wait() returns at once and remembers how long it was asked to wait."""

    def __init__(self, set_during_wait: bool = False) -> None:
        super().__init__()
        self.waits: list[float] = []
        self._set_during_wait = set_during_wait

    def wait(self, timeout: float | None = None) -> bool:
        self.waits.append(timeout or 0.0)
        if self._set_during_wait:
            self.set()
        return self.is_set()


class FakeCapture(IPortalCapture):
    def __init__(
        self,
        texts: Sequence[str] = (),
        fail_launch: bool = False,
        fail_navigation: bool = False,
        fail_scrape: bool = False,
    ) -> None:
        self.texts = list(texts)
        self.fail_launch = fail_launch
        self.fail_navigation = fail_navigation
        self.fail_scrape = fail_scrape
        self.calls: list[str] = []
        self.video_path: Path | None = None
        self.closed = False
        self.stopped = False

    def launch(self) -> None:
        self.calls.append("launch")
        if self.fail_launch:
            raise RuntimeError("chromium failed to start")

    def start_recording(self, video_path: Path) -> None:
        self.calls.append("start_recording")
        self.video_path = Path(video_path)

    def navigate(self, url: str, timeout_ms: int) -> None:
        self.calls.append(f"navigate:{timeout_ms}")
        if self.fail_navigation:
            raise NavigationError(f"Timeout {timeout_ms}ms exceeded loading {url}")

    def scrape_headlines(self, selectors: Sequence[str]) -> list[str]:
        self.calls.append("scrape")
        if self.fail_scrape:
            raise RuntimeError("Execution context was destroyed")
        return list(self.texts)

    def stop_recording(self) -> None:
        self.calls.append("stop_recording")
        if self.stopped or self.video_path is None:
            return
        self.stopped = True
        self.video_path.write_bytes(VIDEO_BYTES)

    def close(self) -> None:
        self.calls.append("close")
        self.closed = True


class FakeSynthesizer(ISpeechSynthesizer):
    def __init__(self, duration: float = 0.0) -> None:
        self.duration = duration
        self.requests: list[tuple[str, str, bool]] = []

    def synthesize(self, text, output_path, language, prefer_primary=True) -> TtsResult:
        self.requests.append((text, language, prefer_primary))
        Path(output_path).write_bytes(b"ID3fake-audio" if self.duration else b"")
        return TtsResult(
            artifact_path=Path(output_path),
            duration_seconds=self.duration,
            backend="fake",
            tier="primary" if self.duration else "silent",
        )


class CopyCombiner(IMediaCombiner):
    """Pretends to mux by copying the video."""

    def __init__(self) -> None:
        self.calls = 0

    def combine(self, video_path, audio_path, output_path) -> MergeResult:
        self.calls += 1
        shutil.copyfile(video_path, output_path)
        return MergeResult(artifact_path=Path(output_path), audio_merged=True, message="ok")


class BrokenCombiner(IMediaCombiner):
    def combine(self, video_path, audio_path, output_path) -> MergeResult:
        raise MergeError("Complete failure: mux crashed and disk full")


class FakeRunner:
    """ProcessRunner stand-in: records argv/input, optionally writes the last argv as a file."""

    def __init__(self, stdout: bytes = b"", fail: bool = False, write_output: bool = False) -> None:
        self.stdout = stdout
        self.fail = fail
        self.write_output = write_output
        self.calls: list[tuple[list[str], bytes | None]] = []

    def run(self, argv, input_bytes=None, timeout=None) -> bytes:
        self.calls.append((list(argv), input_bytes))
        if self.fail:
            raise ProcessError(list(argv), "exited with code 1", returncode=1, stderr="Invalid data")
        if self.write_output:
            Path(argv[-1]).write_bytes(b"muxed:" + (input_bytes or b""))
        return self.stdout
