from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import List, Optional

from yt_dlp.utils import shell_quote

# Core data models shared by the builder, executor and reporters

AUDIO_FORMAT = "mp3"


class RequestState(str, Enum):
    VALIDATING = "validating"
    REJECTED = "rejected"
    BUILDING = "building"
    EXECUTING = "executing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class ResourceKind(str, Enum):
    VIDEO = "video"
    SHORT_LINK = "short_link"
    PLAYLIST = "playlist"
    CHANNEL = "channel"
    HANDLE = "handle"


@dataclass(frozen=True)
class DownloadRequest:
    url: str
    quality: int = 0  # 0 = best available
    container_format: str = "mp4"
    audio_only: bool = False
    output_dir: Path = Path("downloads")

    @property
    def effective_format(self) -> str:
        return AUDIO_FORMAT if self.audio_only else self.container_format

    def quality_label(self) -> str:
        return "Best" if self.quality == 0 else f"{self.quality}p"


@dataclass
class Invocation:
    """Argument vector for one downloader run.

    Handed to the executor exactly once; ``consume`` refuses a second run.
    """

    argv: List[str]
    request: DownloadRequest
    _consumed: bool = field(default=False, repr=False, compare=False)

    @property
    def executable(self) -> str:
        return self.argv[0]

    @property
    def consumed(self) -> bool:
        return self._consumed

    def consume(self) -> List[str]:
        if self._consumed:
            raise RuntimeError("Invocation has already been executed")
        self._consumed = True
        return list(self.argv)

    def to_command_line(self) -> str:
        return shell_quote(self.argv)


@dataclass
class DownloadOutcome:
    url: str
    quality: int
    container_format: str
    audio_only: bool
    success: bool
    timestamp: datetime
    return_code: Optional[int] = None
    state: RequestState = RequestState.FAILED
    explanation: Optional[str] = None

    @classmethod
    def for_request(
        cls,
        request: DownloadRequest,
        success: bool,
        return_code: Optional[int] = None,
        explanation: Optional[str] = None,
    ) -> "DownloadOutcome":
        return cls(
            url=request.url,
            quality=0 if request.audio_only else request.quality,
            container_format=request.effective_format,
            audio_only=request.audio_only,
            success=success,
            timestamp=datetime.now(),
            return_code=return_code,
            state=RequestState.SUCCEEDED if success else RequestState.FAILED,
            explanation=explanation,
        )


__all__ = [
    "AUDIO_FORMAT",
    "RequestState",
    "ResourceKind",
    "DownloadRequest",
    "Invocation",
    "DownloadOutcome",
]
