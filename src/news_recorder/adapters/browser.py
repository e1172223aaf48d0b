"""Playwright capture – headless Chromium with the page recorded through record_video_dir."""

import shutil
import tempfile
from pathlib import Path
from typing import List, Optional, Sequence

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from news_recorder.adapters.process import ProcessRunner
from news_recorder.config import EncoderSettings, RecordingSettings
from news_recorder.errors import NavigationError
from news_recorder.ports.interfaces import IPortalCapture

BROWSER_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
]

# innerText of each matching element once, in document order
_SCRAPE_SCRIPT = """
(selector) => Array.from(document.querySelectorAll(selector))
    .map(el => (el.innerText || '').trim())
"""


class PlaywrightCapture(IPortalCapture):
    """
    One browser per portal. Recording starts when the context is created, before
    navigation, so early paint is captured. stop_recording() closes the context,
    saves Playwright's WebM and transcodes it to MP4 with the encoder settings.
    """

    def __init__(
        self,
        recording: RecordingSettings,
        encoder: EncoderSettings,
        runner: ProcessRunner,
        ffmpeg_binary: str = "ffmpeg",
        transcode_timeout: float = 300.0,
        headless: bool = True,
    ):
        self._recording = recording
        self._encoder = encoder
        self._runner = runner
        self._ffmpeg = ffmpeg_binary
        self._transcode_timeout = transcode_timeout
        self._headless = headless

        self._playwright = None
        self._browser = None
        self._context = None
        self._page = None
        self._video_path: Optional[Path] = None
        self._clip_dir: Optional[tempfile.TemporaryDirectory] = None

    def launch(self) -> None:
        self._playwright = sync_playwright().start()
        try:
            self._browser = self._playwright.chromium.launch(
                headless=self._headless,
                args=BROWSER_ARGS,
            )
        except Exception:
            self._playwright.stop()
            self._playwright = None
            raise

    def start_recording(self, video_path: Path) -> None:
        if self._browser is None:
            raise RuntimeError("launch() must be called before start_recording()")
        self._video_path = Path(video_path)
        self._clip_dir = tempfile.TemporaryDirectory(prefix="news-recorder-")
        viewport = self._recording.viewport
        self._context = self._browser.new_context(
            viewport=viewport,
            record_video_dir=self._clip_dir.name,
            record_video_size=viewport,
        )
        self._page = self._context.new_page()
        print(f"  [capture] Recording started at {self._recording.fps} fps -> {self._video_path.name}")

    def navigate(self, url: str, timeout_ms: int) -> None:
        try:
            self._page.goto(url, wait_until="domcontentloaded", timeout=timeout_ms)
        except PlaywrightError as e:
            raise NavigationError(f"Could not load {url}: {e}") from e

    def scrape_headlines(self, selectors: Sequence[str]) -> List[str]:
        texts = self._page.evaluate(_SCRAPE_SCRIPT, ", ".join(selectors))
        return [str(t) for t in texts or []]

    def transcode_argv(self, source: Path, destination: Path) -> List[str]:
        return [
            self._ffmpeg,
            "-y",
            "-loglevel", "error",
            "-i", str(source),
            "-r", str(self._recording.fps),
            "-c:v", self._encoder.codec,
            "-preset", self._encoder.preset,
            "-crf", str(self._encoder.crf),
            "-pix_fmt", "yuv420p",
            "-movflags", "+faststart",
            "-an",
            str(destination),
        ]

    def stop_recording(self) -> None:
        if self._context is None:
            return
        video = self._page.video if self._page is not None else None
        context, self._context, self._page = self._context, None, None
        context.close()
        if video is None:
            raise RuntimeError("Playwright did not attach a video to the page")

        webm = Path(self._clip_dir.name) / "capture.webm"
        try:
            video.save_as(str(webm))
        except PlaywrightError:
            # Context already gone; the raw file is still on disk
            shutil.copyfile(video.path(), webm)

        self._video_path.parent.mkdir(parents=True, exist_ok=True)
        self._runner.run(
            self.transcode_argv(webm, self._video_path),
            timeout=self._transcode_timeout,
        )
        print(f"  [capture] Recording saved: {self._video_path}")
        self._cleanup_clips()

    def close(self) -> None:
        if self._context is not None:
            try:
                self._context.close()
            except PlaywrightError as e:
                print(f"  ⚠️  Error closing browser context: {e}")
            self._context = None
            self._page = None
        if self._browser is not None:
            try:
                self._browser.close()
            except PlaywrightError as e:
                print(f"  ⚠️  Error closing browser: {e}")
            self._browser = None
        if self._playwright is not None:
            self._playwright.stop()
            self._playwright = None
        self._cleanup_clips()

    def _cleanup_clips(self) -> None:
        if self._clip_dir is not None:
            self._clip_dir.cleanup()
            self._clip_dir = None
