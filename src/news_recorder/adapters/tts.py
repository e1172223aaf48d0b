"""
Speech synthesis for headline narration.

Priority order: cloud provider (Google Cloud TTS or ElevenLabs) > espeak > silent file.
Each backend is a strategy; SpeechSynthesizer walks the ladder until one writes the file.
"""

import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

from pydub.utils import mediainfo

from news_recorder.adapters.process import ProcessRunner
from news_recorder.config import TTSSettings
from news_recorder.domain.models import TtsResult
from news_recorder.ports.interfaces import ISpeechSynthesizer

PRIMARY = "primary"
FALLBACK = "fallback"
SILENT = "silent"

# Google voice per language tag; everything that is not 'bn' uses the news voice
GOOGLE_VOICES = {
    "bn": ("bn-BD", "bn-BD-Standard-A"),
}
GOOGLE_DEFAULT_VOICE = ("en-US", "en-US-News-L")

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b-\x1f\x7f]")


def sanitize_text(text: Optional[str]) -> str:
    """Drop control characters and collapse whitespace; scraped text is untrusted."""
    if not text:
        return ""
    text = _CONTROL_CHARS.sub(" ", text)
    return " ".join(text.split())


def probe_duration(path: Path) -> float:
    """Audio duration in seconds via ffprobe (pydub.mediainfo). Anything unreadable is 0."""
    try:
        if not Path(path).exists() or Path(path).stat().st_size == 0:
            return 0.0
        duration = float(mediainfo(str(path)).get("duration", 0) or 0)
    except Exception as e:
        print(f"  ⚠️  Could not determine audio duration: {e}")
        return 0.0
    return duration if duration > 0 else 0.0


def google_voice(language: str) -> Tuple[str, str]:
    """(language_code, voice_name) for a language tag."""
    return GOOGLE_VOICES.get(language, GOOGLE_DEFAULT_VOICE)


class TTSStrategy(ABC):
    """One rung of the fallback ladder."""

    name = "tts"
    tier = FALLBACK

    def is_available(self) -> bool:
        return True

    @abstractmethod
    def generate(self, text: str, output_path: Path, language: str) -> None:
        """Write audio for text to output_path or raise."""
        pass


class GoogleCloudTTS(TTSStrategy):
    """Google Cloud Text-to-Speech (credentialed via GOOGLE_APPLICATION_CREDENTIALS)."""

    name = "google-cloud-tts"
    tier = PRIMARY

    def __init__(self, settings: TTSSettings, client_factory: Optional[Callable] = None):
        self._settings = settings
        self._client_factory = client_factory
        self._client = None

    def is_available(self) -> bool:
        return bool(self._settings.google_credentials)

    def _get_client(self):
        if self._client is None:
            if self._client_factory is not None:
                self._client = self._client_factory()
            else:
                from google.cloud import texttospeech
                self._client = texttospeech.TextToSpeechClient()
        return self._client

    def generate(self, text: str, output_path: Path, language: str) -> None:
        from google.cloud import texttospeech

        language_code, voice_name = google_voice(language)
        response = self._get_client().synthesize_speech(
            input=texttospeech.SynthesisInput(text=text),
            voice=texttospeech.VoiceSelectionParams(
                language_code=language_code,
                name=voice_name,
            ),
            audio_config=texttospeech.AudioConfig(
                audio_encoding=texttospeech.AudioEncoding.MP3,
            ),
            timeout=self._settings.timeout_seconds,
        )
        if not response.audio_content:
            raise RuntimeError("Google TTS returned no audio")
        Path(output_path).write_bytes(response.audio_content)


class ElevenLabsTTS(TTSStrategy):
    """ElevenLabs text_to_speech.convert(); one voice for Bangla, one for everything else."""

    name = "elevenlabs"
    tier = PRIMARY

    def __init__(self, settings: TTSSettings, client=None):
        self._settings = settings
        self._client = client

    def is_available(self) -> bool:
        return bool(self._settings.elevenlabs_api_key)

    def voice_id(self, language: str) -> str:
        if language == "bn":
            return self._settings.elevenlabs_voice_id_bn
        return self._settings.elevenlabs_voice_id

    def _get_client(self):
        if self._client is None:
            from elevenlabs.client import ElevenLabs
            self._client = ElevenLabs(
                api_key=self._settings.elevenlabs_api_key,
                timeout=self._settings.timeout_seconds,
            )
        return self._client

    def generate(self, text: str, output_path: Path, language: str) -> None:
        response = self._get_client().text_to_speech.convert(
            text=text,
            voice_id=self.voice_id(language),
            model_id=self._settings.elevenlabs_model_id,
            output_format="mp3_44100_128",
        )
        # convert() streams the audio back in chunks
        audio_bytes = b""
        for chunk in response:
            if isinstance(chunk, bytes):
                audio_bytes += chunk
            elif hasattr(chunk, "read"):
                audio_bytes += chunk.read()
        if not audio_bytes:
            raise RuntimeError("ElevenLabs returned no audio")
        Path(output_path).write_bytes(audio_bytes)


class EspeakTTS(TTSStrategy):
    """
    Local espeak. Text goes in on stdin so headline text never reaches argv.
    Bangla output is resampled through ffmpeg; other languages keep espeak's WAV bytes.
    """

    name = "espeak"
    tier = FALLBACK

    def __init__(self, settings: TTSSettings, runner: ProcessRunner, ffmpeg_binary: str = "ffmpeg"):
        self._settings = settings
        self._runner = runner
        self._ffmpeg = ffmpeg_binary

    def espeak_argv(self, language: str) -> List[str]:
        return [
            self._settings.espeak_binary,
            "-v", language,
            "-s", str(self._settings.speech_rate),
            "--stdout",
            "--stdin",
        ]

    def resample_argv(self, output_path: Path) -> List[str]:
        return [
            self._ffmpeg,
            "-y",
            "-loglevel", "error",
            "-i", "-",
            "-ar", "44100",
            str(output_path),
        ]

    def generate(self, text: str, output_path: Path, language: str) -> None:
        timeout = self._settings.timeout_seconds
        wav = self._runner.run(
            self.espeak_argv(language),
            input_bytes=text.encode("utf-8"),
            timeout=timeout,
        )
        if language == "bn":
            self._runner.run(self.resample_argv(output_path), input_bytes=wav, timeout=timeout)
        else:
            Path(output_path).write_bytes(wav)


class SilentTTS(TTSStrategy):
    """Last resort: an empty file so downstream steps still find something at the path."""

    name = "silent"
    tier = SILENT

    def generate(self, text: str, output_path: Path, language: str) -> None:
        Path(output_path).write_bytes(b"")


def build_default_strategies(
    settings: TTSSettings,
    runner: ProcessRunner,
    ffmpeg_binary: str = "ffmpeg",
) -> List[TTSStrategy]:
    if settings.cloud_provider == "elevenlabs":
        primary: TTSStrategy = ElevenLabsTTS(settings)
    else:
        primary = GoogleCloudTTS(settings)
    return [primary, EspeakTTS(settings, runner, ffmpeg_binary), SilentTTS()]


class SpeechSynthesizer(ISpeechSynthesizer):
    """Walks the strategy ladder; always returns a TtsResult and always leaves a file behind."""

    def __init__(
        self,
        strategies: Sequence[TTSStrategy],
        probe: Callable[[Path], float] = probe_duration,
    ):
        self._strategies = list(strategies)
        self._probe = probe

    def synthesize(
        self,
        text: str,
        output_path: Path,
        language: str,
        prefer_primary: bool = True,
    ) -> TtsResult:
        output_path = Path(output_path)
        text = sanitize_text(text)

        for strategy in self._strategies:
            if strategy.tier == PRIMARY and not prefer_primary:
                continue
            if not strategy.is_available():
                if strategy.tier == PRIMARY:
                    print(f"  ℹ️  {strategy.name} not configured, skipping")
                continue
            try:
                output_path.parent.mkdir(parents=True, exist_ok=True)
                strategy.generate(text, output_path, language)
            except Exception as e:
                print(f"  ⚠️  {strategy.name} failed: {e}, falling back")
                continue

            duration = 0.0 if strategy.tier == SILENT else self._probe(output_path)
            if strategy.tier == SILENT:
                print(f"  ⚠️  No speech generated, wrote silent placeholder: {output_path.name}")
            else:
                print(f"  🔊 Generated {strategy.name} audio ({duration:.2f}s): {output_path.name}")
            return TtsResult(
                artifact_path=output_path,
                duration_seconds=max(duration, 0.0),
                backend=strategy.name,
                tier=strategy.tier,
            )

        # Ladder exhausted without even the silent rung succeeding
        print("  ❌ TTS generation failed on every backend")
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_bytes(b"")
        except OSError as e:
            print(f"  ❌ Could not write placeholder audio {output_path}: {e}")
        return TtsResult(artifact_path=output_path, duration_seconds=0.0, backend="none", tier=SILENT)
