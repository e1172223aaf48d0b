"""Application layer – portal pipeline, daily run and schedule."""

from news_recorder.application.daily_run import DailyRunCoordinator
from news_recorder.application.pipeline import PortalCaptureOrchestrator

__all__ = ["DailyRunCoordinator", "PortalCaptureOrchestrator"]
