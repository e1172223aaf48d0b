"""
Adapters – concrete implementations of ports.
default_adapters() wires Playwright, the TTS ladder and ffmpeg from an AppConfig;
tests and alternative backends pass overrides instead.
"""

from news_recorder.adapters.browser import PlaywrightCapture
from news_recorder.adapters.media import MediaCombiner
from news_recorder.adapters.process import ProcessRunner
from news_recorder.adapters.tts import SpeechSynthesizer, build_default_strategies
from news_recorder.config import AppConfig


def default_adapters(config: AppConfig, **overrides):
    """
    Build the orchestrator's collaborators.
    Overrides: capture_factory=..., synthesizer=..., combiner=... for testing.
    """
    runner = ProcessRunner(default_timeout=config.ffmpeg_timeout_seconds)

    def capture_factory():
        return PlaywrightCapture(
            recording=config.recording,
            encoder=config.encoder,
            runner=runner,
            ffmpeg_binary=config.ffmpeg_binary,
            transcode_timeout=config.ffmpeg_timeout_seconds,
        )

    defaults = {
        "capture_factory": capture_factory,
        "synthesizer": SpeechSynthesizer(
            build_default_strategies(config.tts, runner, config.ffmpeg_binary)
        ),
        "combiner": MediaCombiner(
            runner,
            ffmpeg_binary=config.ffmpeg_binary,
            timeout=config.ffmpeg_timeout_seconds,
        ),
    }
    defaults.update(overrides)
    return defaults


__all__ = [
    "MediaCombiner",
    "PlaywrightCapture",
    "ProcessRunner",
    "SpeechSynthesizer",
    "default_adapters",
]
