"""
CLI entrypoint:
  python -m news_recorder                  # APP_ENV=production -> daily at 07:00, else run now
  python -m news_recorder --date 2024-05-01
  python -m news_recorder --serve          # results viewer
"""

import argparse
import signal
import threading
from datetime import datetime

from news_recorder.adapters import default_adapters
from news_recorder.application.daily_run import DailyRunCoordinator, today_key
from news_recorder.application.pipeline import PortalCaptureOrchestrator
from news_recorder.application.scheduler import DailySchedule, run_on_schedule
from news_recorder.config import load_config
from news_recorder.viewer.app import serve


def _date_arg(value: str) -> str:
    try:
        datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got {value!r}") from None
    return value


def _install_stop_handlers(stop_event: threading.Event) -> None:
    def _handle(signum, _frame):
        print(f"\n🛑 Received signal {signum}, finishing up...")
        stop_event.set()

    signal.signal(signal.SIGINT, _handle)
    signal.signal(signal.SIGTERM, _handle)


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Record news portal front pages with narrated headlines"
    )
    parser.add_argument(
        "--date",
        type=_date_arg,
        help="Date key for a one-off run (YYYY-MM-DD, default: today UTC)",
    )
    parser.add_argument(
        "--serve",
        action="store_true",
        help="Start the results viewer instead of recording",
    )
    args = parser.parse_args()

    config = load_config()

    if args.serve:
        serve(config.output_dir, host=config.viewer_host, port=config.viewer_port)
        return

    stop_event = threading.Event()
    _install_stop_handlers(stop_event)

    orchestrator = PortalCaptureOrchestrator(
        **default_adapters(config),
        config=config,
        stop_event=stop_event,
    )
    coordinator = DailyRunCoordinator(orchestrator, stop_event=stop_event)

    if config.is_production and not args.date:
        print("🚀 Running in production mode")
        schedule = DailySchedule.from_cron(config.schedule_cron)
        run_on_schedule(lambda: coordinator.run_today(config.portals), schedule, stop_event)
    else:
        print("🔧 Running in development mode")
        coordinator.run_daily(config.portals, args.date or today_key())


def viewer_main() -> None:
    config = load_config()
    serve(config.output_dir, host=config.viewer_host, port=config.viewer_port)


if __name__ == "__main__":
    main()
