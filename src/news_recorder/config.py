"""
Configuration – read once from the environment (and .env) into an immutable AppConfig.
Pass the AppConfig explicitly; nothing else in the package reads os.environ for settings.
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional, Tuple

from dotenv import load_dotenv

from news_recorder.domain.models import PortalConfig

# Portals captured when PORTALS_FILE is not set
DEFAULT_PORTALS = (
    PortalConfig(name="Prothomalo", url="https://www.prothomalo.com/", language="bn"),
    PortalConfig(name="Jugantor", url="https://www.jugantor.com/", language="bn"),
    PortalConfig(name="Thedailystar", url="https://www.thedailystar.net/", language="en"),
)

# Elements whose text is treated as a headline candidate
HEADLINE_SELECTORS = ("h1", "h2", "h3", ".headline", ".title", ".news-title")


@dataclass(frozen=True)
class RecordingSettings:
    fps: int = 15
    viewport_width: int = 1280
    viewport_height: int = 800
    min_duration_ms: int = 10000
    narration_buffer_ms: int = 2000  # covers synthesis/playback start latency
    navigation_timeout_ms: int = 45000

    @property
    def viewport(self) -> dict:
        return {"width": self.viewport_width, "height": self.viewport_height}


@dataclass(frozen=True)
class EncoderSettings:
    crf: int = 28
    codec: str = "libx264"
    preset: str = "ultrafast"


@dataclass(frozen=True)
class TTSSettings:
    # Priority order: cloud provider (google or elevenlabs) > espeak > silent
    cloud_provider: str = "google"
    prefer_primary: bool = True
    google_credentials: Optional[str] = None
    elevenlabs_api_key: Optional[str] = None
    elevenlabs_voice_id: str = "21m00Tcm4TlvDq8ikWAM"
    elevenlabs_voice_id_bn: str = "21m00Tcm4TlvDq8ikWAM"
    elevenlabs_model_id: str = "eleven_multilingual_v2"
    espeak_binary: str = "espeak"
    speech_rate: int = 150
    timeout_seconds: float = 120.0


@dataclass(frozen=True)
class AppConfig:
    portals: Tuple[PortalConfig, ...] = DEFAULT_PORTALS
    output_dir: Path = Path("output")
    recording: RecordingSettings = field(default_factory=RecordingSettings)
    encoder: EncoderSettings = field(default_factory=EncoderSettings)
    tts: TTSSettings = field(default_factory=TTSSettings)
    ffmpeg_binary: str = "ffmpeg"
    ffmpeg_timeout_seconds: float = 300.0
    app_env: str = "development"
    schedule_cron: str = "0 7 * * *"
    viewer_host: str = "0.0.0.0"
    viewer_port: int = 3000

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"


def _flag(env: Mapping[str, str], name: str, default: str) -> bool:
    return env.get(name, default).lower() == "true"


def load_portals(path: str) -> Tuple[PortalConfig, ...]:
    """Read a JSON list of {name, url, language} objects."""
    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)
    if not isinstance(raw, list) or not raw:
        raise ValueError(f"{path}: expected a non-empty JSON list of portals")
    portals = []
    for entry in raw:
        if not isinstance(entry, dict) or not entry.get("name") or not entry.get("url"):
            raise ValueError(f"{path}: every portal needs 'name' and 'url' ({entry!r})")
        portals.append(
            PortalConfig(
                name=str(entry["name"]),
                url=str(entry["url"]),
                language=str(entry.get("language", "en")),
            )
        )
    return tuple(portals)


def load_config(env: Optional[Mapping[str, str]] = None, dotenv: bool = True) -> AppConfig:
    """
    Build the AppConfig. With env=None the process environment is used,
    after loading a .env file from the working directory (if present).
    """
    if env is None:
        if dotenv:
            load_dotenv()
        env = os.environ

    portals_file = env.get("PORTALS_FILE")
    portals = load_portals(portals_file) if portals_file else DEFAULT_PORTALS

    recording = RecordingSettings(
        fps=int(env.get("RECORDING_FPS", "15")),
        viewport_width=int(env.get("VIEWPORT_WIDTH", "1280")),
        viewport_height=int(env.get("VIEWPORT_HEIGHT", "800")),
        min_duration_ms=int(env.get("MIN_DURATION_MS", "10000")),
        narration_buffer_ms=int(env.get("NARRATION_BUFFER_MS", "2000")),
        navigation_timeout_ms=int(env.get("NAVIGATION_TIMEOUT_MS", "45000")),
    )
    encoder = EncoderSettings(
        crf=int(env.get("VIDEO_CRF", "28")),
        codec=env.get("VIDEO_CODEC", "libx264"),
        preset=env.get("VIDEO_PRESET", "ultrafast"),
    )
    default_voice = env.get("ELEVENLABS_VOICE_ID", "21m00Tcm4TlvDq8ikWAM")
    tts = TTSSettings(
        cloud_provider=env.get("TTS_CLOUD_PROVIDER", "google").lower(),
        prefer_primary=_flag(env, "TTS_PREFER_PRIMARY", "true"),
        google_credentials=env.get("GOOGLE_APPLICATION_CREDENTIALS") or None,
        elevenlabs_api_key=env.get("ELEVENLABS_API_KEY") or None,
        elevenlabs_voice_id=default_voice,
        elevenlabs_voice_id_bn=env.get("ELEVENLABS_VOICE_ID_BN", default_voice),
        elevenlabs_model_id=env.get("ELEVENLABS_MODEL_ID", "eleven_multilingual_v2"),
        espeak_binary=env.get("ESPEAK_BINARY", "espeak"),
        timeout_seconds=float(env.get("TTS_TIMEOUT_SECONDS", "120")),
    )
    if tts.cloud_provider not in ("google", "elevenlabs"):
        raise ValueError(f"TTS_CLOUD_PROVIDER must be 'google' or 'elevenlabs', got {tts.cloud_provider!r}")

    return AppConfig(
        portals=portals,
        output_dir=Path(env.get("OUTPUT_DIR", "output")),
        recording=recording,
        encoder=encoder,
        tts=tts,
        ffmpeg_binary=env.get("FFMPEG_BINARY", "ffmpeg"),
        ffmpeg_timeout_seconds=float(env.get("FFMPEG_TIMEOUT_SECONDS", "300")),
        app_env=env.get("APP_ENV", "development").lower(),
        schedule_cron=env.get("SCHEDULE_CRON", "0 7 * * *"),
        viewer_host=env.get("VIEWER_HOST", "0.0.0.0"),
        viewer_port=int(env.get("VIEWER_PORT", "3000")),
    )
