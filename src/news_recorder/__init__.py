"""
News Recorder – daily narrated screen recordings of news portal front pages.

Use from project root:
  from news_recorder.config import load_config
  from news_recorder.adapters import default_adapters
  from news_recorder.application import PortalCaptureOrchestrator, DailyRunCoordinator
  config = load_config()
  orchestrator = PortalCaptureOrchestrator(**default_adapters(config), config=config)
  DailyRunCoordinator(orchestrator).run_today(config.portals)

For tests or other browsers/TTS backends: implement ports (e.g. IPortalCapture) and inject.
"""

__version__ = "0.1.0"
