"""Domain models – immutable values describing one portal capture."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional


@dataclass(frozen=True)
class PortalConfig:
    """A news portal to capture. language is a short tag such as 'bn' or 'en'."""
    name: str
    url: str
    language: str = "en"


@dataclass(frozen=True)
class RecordingSession:
    """One portal on one day. output_directory is <output_root>/<date_key>/<portal name>."""
    portal: PortalConfig
    date_key: str
    output_directory: Path

    @classmethod
    def create(cls, portal: PortalConfig, date_key: str, output_root: Path) -> "RecordingSession":
        return cls(
            portal=portal,
            date_key=date_key,
            output_directory=Path(output_root) / date_key / portal.name,
        )


@dataclass
class CaptureArtifacts:
    """File layout of a session; headlines is filled in after scraping."""
    raw_video_path: Path
    raw_audio_path: Path
    final_video_path: Path
    headlines_path: Path
    headlines: List[str] = field(default_factory=list)

    @classmethod
    def for_session(cls, session: RecordingSession) -> "CaptureArtifacts":
        out = session.output_directory
        return cls(
            raw_video_path=out / "recording.mp4",
            raw_audio_path=out / "headlines.mp3",
            final_video_path=out / "final.mp4",
            headlines_path=out / "headlines.txt",
        )


@dataclass(frozen=True)
class TtsResult:
    """
    Narration produced by the speech synthesizer.
    duration_seconds == 0 means no audio was produced (silent tier), not an error.
    """
    artifact_path: Path
    duration_seconds: float
    backend: str
    tier: str  # 'primary' | 'fallback' | 'silent'

    def __post_init__(self):
        if self.duration_seconds < 0:
            object.__setattr__(self, "duration_seconds", 0.0)


@dataclass(frozen=True)
class MergeResult:
    artifact_path: Path
    audio_merged: bool
    message: str
    error_detail: Optional[str] = None


class SessionState(str, Enum):
    INIT = "init"
    BROWSER_LAUNCHED = "browser_launched"
    RECORDING = "recording"
    NAVIGATED = "navigated"
    SCRAPED = "scraped"
    SYNTHESIZING = "synthesizing"
    WAITING_OUT_DURATION = "waiting_out_duration"
    STOPPED = "stopped"
    COMBINED = "combined"
    FAILED = "failed"
    ABORTED = "aborted"


@dataclass
class SessionOutcome:
    """What the orchestrator reports back for one portal."""
    session: RecordingSession
    state: SessionState
    artifacts: CaptureArtifacts
    tts_result: Optional[TtsResult] = None
    merge_result: Optional[MergeResult] = None
    required_duration_ms: Optional[int] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.state is SessionState.COMBINED
