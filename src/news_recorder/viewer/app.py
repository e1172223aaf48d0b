"""Read-only results page plus static serving of the output tree."""

from html import escape
from pathlib import Path
from urllib.parse import quote

from fastapi import FastAPI
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles

from news_recorder.viewer.results import PortalResult, collect_latest_results


def _render_portal(result: PortalResult) -> str:
    if result.video_url:
        video = (
            f'<video width="640" controls>'
            f'<source src="{escape(quote(result.video_url))}" type="video/mp4">'
            f"Your browser does not support the video tag.</video>"
        )
    else:
        video = "<p>No video available</p>"

    if result.headlines_available and result.headlines:
        items = "".join(f"<li>{escape(h)}</li>" for h in result.headlines)
        headlines = f"<ul>{items}</ul>"
    else:
        headlines = "<p>Headlines unavailable</p>"

    if result.audio_url:
        audio = (
            f'<audio controls>'
            f'<source src="{escape(quote(result.audio_url))}" type="audio/mpeg">'
            f"Your browser does not support the audio element.</audio>"
        )
    else:
        audio = "<p>No audio available</p>"

    return (
        '<div style="margin-bottom: 40px; border-bottom: 1px solid #ccc; padding-bottom: 20px;">'
        f"<h2>{escape(result.portal)}</h2>{video}<h3>Headlines:</h3>{headlines}{audio}</div>"
    )


def render_index(output_dir: Path) -> str:
    date, results = collect_latest_results(output_dir)
    if date is None:
        body = "<h1>News Recorder Results</h1><p>No recordings yet</p>"
    else:
        body = f"<h1>News Recorder Results - {escape(date)}</h1>" + "".join(
            _render_portal(r) for r in results
        )
    return (
        '<!DOCTYPE html><html><head><meta charset="utf-8">'
        "<title>News Recorder Results</title></head>"
        f"<body>{body}</body></html>"
    )


def create_app(output_dir: Path) -> FastAPI:
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    app = FastAPI(title="News Recorder Results", docs_url=None, redoc_url=None)

    @app.get("/", response_class=HTMLResponse)
    def index() -> HTMLResponse:
        return HTMLResponse(render_index(output_dir))

    # Registered after "/" so the index route wins; serves /<date>/<portal>/<file>
    app.mount("/", StaticFiles(directory=str(output_dir)), name="output")
    return app


def serve(output_dir: Path, host: str = "0.0.0.0", port: int = 3000) -> None:
    import uvicorn

    print(f"Server running on http://localhost:{port}")
    uvicorn.run(create_app(output_dir), host=host, port=port)
