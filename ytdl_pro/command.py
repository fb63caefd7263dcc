"""Downloader argument-vector construction."""

from __future__ import annotations

import os
from pathlib import Path
from typing import List

from .errors import ValidationError
from .models import AUDIO_FORMAT, DownloadRequest, Invocation
from .sanitizer import sanitize

MAX_HEIGHT = 2160
MAX_URL_LENGTH = 2048
OUTPUT_NAME_TEMPLATE = "%(uploader)s - %(title)s.%(ext)s"
CAPTURE_FLAGS = [
    "--write-info-json",
    "--write-thumbnail",
    "--embed-subs",
    "--write-auto-sub",
]


class FormatSelector:
    """
    Build a yt-dlp format selector chain.

    Video:
      best[height<=H][ext=F] / best[height<=H] / best
      where H is the requested height, or MAX_HEIGHT for "best" (0).
    Audio only:
      bestaudio/best, then extracted to mp3 (quality and format ignored).
    """

    def __init__(self, quality: int, container_format: str, audio_only: bool):
        self.quality = quality
        self.container_format = container_format
        self.audio_only = audio_only

    def build(self) -> List[str]:
        if self.audio_only:
            return ["-f", "bestaudio/best", "--extract-audio", "--audio-format", AUDIO_FORMAT]
        height = self.quality or MAX_HEIGHT
        fmt = sanitize(self.container_format)
        chain = [
            f"best[height<={height}][ext={fmt}]",
            f"best[height<={height}]",
            "best",
        ]
        return ["-f", "/".join(chain)]


class CommandBuilder:
    """Compose an :class:`Invocation` from validated input.

    Every user-supplied string passes through :func:`sanitize` before it is
    placed in the argument vector. No filesystem or network access happens
    here.
    """

    def __init__(self, executable: str | Path):
        self.executable = str(executable)

    def output_template(self, output_dir: str | Path) -> str:
        directory = sanitize(str(output_dir)).strip() or "."
        return os.path.join(directory, OUTPUT_NAME_TEMPLATE)

    def target_url(self, url: str) -> str:
        clean = sanitize(url).strip()
        if not clean:
            raise ValidationError("No URL entered!")
        if len(clean) > MAX_URL_LENGTH:
            raise ValidationError(f"URL is longer than {MAX_URL_LENGTH} characters")
        return clean

    def build_request(self, request: DownloadRequest) -> Invocation:
        argv: List[str] = [self.executable, "-o", self.output_template(request.output_dir)]
        argv.extend(
            FormatSelector(request.quality, request.container_format, request.audio_only).build()
        )
        argv.extend(CAPTURE_FLAGS)
        argv.append(self.target_url(request.url))
        return Invocation(argv=argv, request=request)


def build(
    executable: str | Path,
    url: str,
    output_dir: str | Path,
    quality: int = 0,
    container_format: str = "mp4",
    audio_only: bool = False,
) -> Invocation:
    request = DownloadRequest(
        url=url,
        quality=quality,
        container_format=container_format,
        audio_only=audio_only,
        output_dir=Path(output_dir),
    )
    return CommandBuilder(executable).build_request(request)


__all__ = [
    "CAPTURE_FLAGS",
    "MAX_HEIGHT",
    "MAX_URL_LENGTH",
    "OUTPUT_NAME_TEMPLATE",
    "CommandBuilder",
    "FormatSelector",
    "build",
]
