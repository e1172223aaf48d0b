"""Domain models and value objects."""

from news_recorder.domain.models import (
    CaptureArtifacts,
    MergeResult,
    PortalConfig,
    RecordingSession,
    SessionOutcome,
    SessionState,
    TtsResult,
)

__all__ = [
    "CaptureArtifacts",
    "MergeResult",
    "PortalConfig",
    "RecordingSession",
    "SessionOutcome",
    "SessionState",
    "TtsResult",
]
