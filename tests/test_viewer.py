from __future__ import annotations

from pathlib import Path

from fastapi.testclient import TestClient

from news_recorder.viewer.app import create_app
from news_recorder.viewer.results import collect_latest_results


def _portal_dir(output: Path, date: str, portal: str) -> Path:
    path = output / date / portal
    path.mkdir(parents=True)
    return path


def test_index_lists_latest_date_only(tmp_path: Path) -> None:
    old = _portal_dir(tmp_path, "2024-04-30", "Jugantor")
    (old / "headlines.txt").write_text("Yesterday's story", encoding="utf-8")
    new = _portal_dir(tmp_path, "2024-05-01", "Thedailystar")
    (new / "final.mp4").write_bytes(b"video")
    (new / "headlines.mp3").write_bytes(b"ID3audio")
    (new / "headlines.txt").write_text("Budget passed\n\nFloods <recede>", encoding="utf-8")

    response = TestClient(create_app(tmp_path)).get("/")

    assert response.status_code == 200
    body = response.text
    assert "News Recorder Results - 2024-05-01" in body
    assert "/2024-05-01/Thedailystar/final.mp4" in body
    assert "/2024-05-01/Thedailystar/headlines.mp3" in body
    assert "<li>Budget passed</li>" in body
    assert "<li>Floods &lt;recede&gt;</li>" in body
    assert "Yesterday&#x27;s story" not in body and "Jugantor" not in body


def test_missing_artifacts_render_placeholders(tmp_path: Path) -> None:
    _portal_dir(tmp_path, "2024-05-01", "Jugantor")

    body = TestClient(create_app(tmp_path)).get("/").text

    assert "No video available" in body
    assert "No audio available" in body
    assert "Headlines unavailable" in body


def test_empty_output_tree(tmp_path: Path) -> None:
    body = TestClient(create_app(tmp_path / "output")).get("/").text
    assert "No recordings yet" in body


def test_static_files_are_served_by_date_and_portal(tmp_path: Path) -> None:
    portal = _portal_dir(tmp_path, "2024-05-01", "Thedailystar")
    (portal / "headlines.txt").write_text("Budget passed", encoding="utf-8")

    client = TestClient(create_app(tmp_path))

    response = client.get("/2024-05-01/Thedailystar/headlines.txt")
    assert response.status_code == 200
    assert response.text == "Budget passed"
    assert client.get("/2024-05-01/Thedailystar/final.mp4").status_code == 404


def test_recording_is_used_when_final_is_missing(tmp_path: Path) -> None:
    portal = _portal_dir(tmp_path, "2024-05-01", "Prothomalo")
    (portal / "recording.mp4").write_bytes(b"raw")
    (portal / "headlines.mp3").write_bytes(b"")

    date, results = collect_latest_results(tmp_path)

    assert date == "2024-05-01"
    assert results[0].video_url == "/2024-05-01/Prothomalo/recording.mp4"
    assert results[0].audio_url is None
    assert results[0].headlines_available is False


def test_non_date_directories_are_ignored(tmp_path: Path) -> None:
    (tmp_path / "tmp-scratch").mkdir()
    _portal_dir(tmp_path, "2024-05-01", "Jugantor")
    date, _ = collect_latest_results(tmp_path)
    assert date == "2024-05-01"
