"""Read the output/<date>/<portal>/ tree the pipeline writes."""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

_DATE_DIR = re.compile(r"^\d{4}-\d{2}-\d{2}$")


@dataclass
class PortalResult:
    portal: str
    date: str
    video_url: Optional[str] = None
    audio_url: Optional[str] = None
    headlines: List[str] = field(default_factory=list)
    headlines_available: bool = False


def latest_date(output_dir: Path) -> Optional[str]:
    if not output_dir.is_dir():
        return None
    dates = sorted(
        (p.name for p in output_dir.iterdir() if p.is_dir() and _DATE_DIR.match(p.name)),
        reverse=True,
    )
    return dates[0] if dates else None


def read_headlines(path: Path) -> Optional[List[str]]:
    if not path.is_file():
        return None
    text = path.read_text(encoding="utf-8")
    return [h for h in text.split("\n\n") if h.strip()]


def collect_latest_results(output_dir: Path) -> Tuple[Optional[str], List[PortalResult]]:
    """(date, per-portal results) for the most recent date directory."""
    output_dir = Path(output_dir)
    date = latest_date(output_dir)
    if date is None:
        return None, []

    results = []
    for portal_dir in sorted(p for p in (output_dir / date).iterdir() if p.is_dir()):
        result = PortalResult(portal=portal_dir.name, date=date)
        for name in ("final.mp4", "recording.mp4"):
            if (portal_dir / name).is_file():
                result.video_url = f"/{date}/{portal_dir.name}/{name}"
                break
        if (portal_dir / "headlines.mp3").is_file() and (portal_dir / "headlines.mp3").stat().st_size > 0:
            result.audio_url = f"/{date}/{portal_dir.name}/headlines.mp3"
        headlines = read_headlines(portal_dir / "headlines.txt")
        if headlines is not None:
            result.headlines = headlines
            result.headlines_available = True
        results.append(result)
    return date, results
