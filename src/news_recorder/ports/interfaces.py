"""
Port interfaces (SOLID – Dependency Inversion).
The orchestrator depends only on these; adapters implement them and tests inject fakes.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Sequence

from news_recorder.domain.models import MergeResult, TtsResult


class IPortalCapture(ABC):
    """Headless browser plus a screen recording attached to its page."""

    @abstractmethod
    def launch(self) -> None:
        """Start an isolated browser with the configured viewport."""
        pass

    @abstractmethod
    def start_recording(self, video_path: Path) -> None:
        """Open a page and begin recording it; the video lands at video_path on stop."""
        pass

    @abstractmethod
    def navigate(self, url: str, timeout_ms: int) -> None:
        """Load url until DOM content loaded; raise on failure or timeout."""
        pass

    @abstractmethod
    def scrape_headlines(self, selectors: Sequence[str]) -> List[str]:
        """Return the inner text of every element matching selectors, in page order."""
        pass

    @abstractmethod
    def stop_recording(self) -> None:
        """Finalize the video file. Safe to call more than once."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Release the browser. Safe to call more than once."""
        pass


class ISpeechSynthesizer(ABC):
    """Text-to-speech with its own fallbacks; never raises."""

    @abstractmethod
    def synthesize(
        self,
        text: str,
        output_path: Path,
        language: str,
        prefer_primary: bool = True,
    ) -> TtsResult:
        pass


class IMediaCombiner(ABC):
    """Mux a video and an audio file into one output."""

    @abstractmethod
    def combine(self, video_path: Path, audio_path: Path, output_path: Path) -> MergeResult:
        """Return a MergeResult; raise MergeError only when no output could be written."""
        pass
