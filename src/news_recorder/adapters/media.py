"""Media combiner – mux the screen recording with the narration using ffmpeg."""

import shutil
from pathlib import Path
from typing import List, Optional

from news_recorder.adapters.process import ProcessRunner
from news_recorder.domain.models import MergeResult
from news_recorder.errors import InvalidMergeRequest, MergeError
from news_recorder.ports.interfaces import IMediaCombiner


class MediaCombiner(IMediaCombiner):
    """
    Copies the video stream, encodes audio to AAC and cuts at the shorter input.
    Falls back to a plain copy of the video when audio is missing or the mux fails.
    """

    def __init__(
        self,
        runner: ProcessRunner,
        ffmpeg_binary: str = "ffmpeg",
        audio_bitrate: str = "192k",
        timeout: float = 300.0,
    ):
        self._runner = runner
        self._ffmpeg = ffmpeg_binary
        self._audio_bitrate = audio_bitrate
        self._timeout = timeout

    def mux_argv(self, video_path: Path, audio_path: Path, output_path: Path) -> List[str]:
        return [
            self._ffmpeg,
            "-y",
            "-loglevel", "error",
            "-i", str(video_path),
            "-i", str(audio_path),
            "-map", "0:v:0",
            "-map", "1:a:0",
            "-c:v", "copy",
            "-c:a", "aac",
            "-b:a", self._audio_bitrate,
            "-shortest",
            str(output_path),
        ]

    def combine(
        self,
        video_path: Optional[Path],
        audio_path: Optional[Path],
        output_path: Optional[Path],
    ) -> MergeResult:
        if not video_path or not output_path:
            raise InvalidMergeRequest("Video path and output path are required")

        video_path = Path(video_path)
        output_path = Path(output_path)
        if not video_path.exists():
            raise MergeError(f"Video file not found at: {video_path}")

        audio = Path(audio_path) if audio_path else None
        if audio is None or not audio.exists() or audio.stat().st_size == 0:
            print("  ⚠️  Audio file missing or empty, creating video-only output")
            try:
                self._copy(video_path, output_path)
            except OSError as e:
                raise MergeError(f"Could not copy video to {output_path}: {e}") from e
            return MergeResult(
                artifact_path=output_path,
                audio_merged=False,
                message="Created video without audio",
            )

        try:
            self._runner.run(
                self.mux_argv(video_path, audio, output_path),
                timeout=self._timeout,
            )
        except Exception as mux_error:
            print(f"  ❌ Failed to merge video and audio: {mux_error}")
            try:
                self._copy(video_path, output_path)
            except OSError as copy_error:
                raise MergeError(
                    f"Complete failure: {mux_error} and {copy_error}"
                ) from copy_error
            print("  ⚠️  Saved video without audio as fallback")
            return MergeResult(
                artifact_path=output_path,
                audio_merged=False,
                message="Saved video without audio after merge failure",
                error_detail=str(mux_error),
            )

        print(f"  🎬 Successfully merged: {output_path.name}")
        return MergeResult(
            artifact_path=output_path,
            audio_merged=True,
            message="Successfully merged video and audio",
        )

    @staticmethod
    def _copy(source: Path, destination: Path) -> None:
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, destination)
