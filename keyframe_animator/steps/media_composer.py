"""
Caption and voice-over composition step using FFmpeg.
"""

import os
import re
import subprocess
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import List

from .base import PipelineStep
from ..errors import CompositionError


@dataclass(frozen=True)
class CompositionRequest:
    video_path: Path
    captions_path: Path
    voiceover_path: Path
    output_path: Path


def escape_filter_path(path: Path) -> str:
    """
    Quote a path for use as a filter option inside an FFmpeg -vf graph.

    FFmpeg unescapes twice: once when splitting the filtergraph and once
    when parsing the filter's options, so the path is escaped for the
    option level first and the graph level second.
    """
    value = str(path).replace("\\", "/")
    value = re.sub(r"([\\':])", r"\\\1", value)
    return re.sub(r"([\\'\[\],;])", r"\\\1", value)


class MediaComposerStep(PipelineStep[CompositionRequest, Path]):
    """
    Burns captions into a video and muxes in a voice-over track.

    Input: CompositionRequest
    Output: Path to the composed video
    """

    name = "media_composition"
    description = "Add captions and voice-over with FFmpeg"

    def run(self, request: CompositionRequest) -> Path:
        return self.compose(
            request.video_path,
            request.captions_path,
            request.voiceover_path,
            request.output_path,
        )

    def compose(
        self,
        input_video_path: Path,
        captions_path: Path,
        voiceover_path: Path,
        output_video_path: Path,
    ) -> Path:
        """
        Run FFmpeg and place the result at ``output_video_path``.

        FFmpeg writes into a temporary file in the output directory that is
        renamed onto the output path only after a clean exit; the temporary
        file is removed on every failure path.

        Raises:
            CompositionError: An input is missing, FFmpeg failed, or it
                produced no output
        """
        request = CompositionRequest(input_video_path, captions_path, voiceover_path, output_video_path)
        for label, path in (
            ("Input video", input_video_path),
            ("Captions file", captions_path),
            ("Voice-over file", voiceover_path),
        ):
            if not path.exists():
                raise CompositionError(f"{label} not found: {path}")

        output_video_path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{output_video_path.stem}.",
            suffix=output_video_path.suffix,
            dir=output_video_path.parent,
        )
        os.close(fd)
        tmp_path = Path(tmp_name)

        try:
            cmd = self.build_command(request, tmp_path)
            try:
                result = subprocess.run(cmd, capture_output=True, text=True)
            except FileNotFoundError as e:
                raise CompositionError(f"FFmpeg not found at '{self.config.ffmpeg_path}'") from e

            if result.returncode != 0:
                print(f"FFmpeg stderr: {result.stderr}")
                raise CompositionError(
                    f"Failed to add captions and voice-over (exit {result.returncode})",
                    returncode=result.returncode,
                    stderr=result.stderr,
                )
            if not tmp_path.exists() or tmp_path.stat().st_size == 0:
                raise CompositionError(
                    "FFmpeg exited cleanly but produced no output",
                    returncode=result.returncode,
                    stderr=result.stderr,
                )

            tmp_path.replace(output_video_path)
        finally:
            tmp_path.unlink(missing_ok=True)

        print("Captions and voice-over added successfully")
        return output_video_path

    def build_command(self, request: CompositionRequest, target: Path) -> List[str]:
        return [
            self.config.ffmpeg_path,
            "-y",  # Overwrite output
            "-i", str(request.video_path),
            "-i", str(request.voiceover_path),
            "-vf", f"subtitles={escape_filter_path(request.captions_path)}",
            "-map", "0:v:0",
            "-map", "1:a:0",
            "-c:v", self.config.video_codec,
            "-c:a", self.config.audio_codec,
            "-strict", "experimental",
            str(target),
        ]
