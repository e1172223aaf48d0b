"""Ports (interfaces) – depend on these, implement in adapters."""

from news_recorder.ports.interfaces import (
    IMediaCombiner,
    IPortalCapture,
    ISpeechSynthesizer,
)

__all__ = [
    "IMediaCombiner",
    "IPortalCapture",
    "ISpeechSynthesizer",
]
