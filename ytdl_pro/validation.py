"""Whitelists and URL shape recognition for user-supplied download input.

The ``is_*`` predicates never raise; callers decide whether a ``False`` is
fatal. ``parse_quality`` and ``validate_request`` raise ``ValidationError``
for the CLI and menu layers.
"""

from __future__ import annotations

import re
from typing import List, Optional

from .errors import ValidationError
from .models import DownloadRequest, ResourceKind

QUALITY_LADDER = [144, 240, 360, 480, 720, 1080, 1440, 2160]
BEST_QUALITY = 0
FORMAT_WHITELIST = ["mp4", "webm", "mkv", "avi"]

QUALITY_DESCRIPTIONS = {
    144: "Very Low Quality (Mobile)",
    240: "Low Quality",
    360: "Medium Quality",
    480: "Standard Quality (SD)",
    720: "High Quality (HD)",
    1080: "Very High Quality (Full HD)",
    1440: "Ultra Quality (2K)",
    2160: "Crystal Quality (4K)",
}

_PREFIX = r"^(https?://)?(www\.)?"

# Anchored at the start only: anything after a recognised prefix
# (tracking parameters, timestamps) is accepted.
URL_PATTERNS = [
    (ResourceKind.VIDEO, re.compile(_PREFIX + r"youtube\.com/watch\?v=[a-zA-Z0-9_-]{11}")),
    (ResourceKind.SHORT_LINK, re.compile(_PREFIX + r"youtu\.be/[a-zA-Z0-9_-]{11}")),
    (ResourceKind.PLAYLIST, re.compile(_PREFIX + r"youtube\.com/playlist\?list=[a-zA-Z0-9_-]+")),
    (ResourceKind.CHANNEL, re.compile(_PREFIX + r"youtube\.com/channel/[a-zA-Z0-9_-]+")),
    (ResourceKind.HANDLE, re.compile(_PREFIX + r"youtube\.com/@[a-zA-Z0-9_.-]+")),
]

SUPPORTED_URL_HELP = (
    "Supported formats:\n"
    "  - Single video: youtube.com/watch?v=...\n"
    "  - Short link: youtu.be/...\n"
    "  - Playlist: youtube.com/playlist?list=...\n"
    "  - Channel: youtube.com/channel/...\n"
    "  - Username: youtube.com/@username"
)

_WHITESPACE = " \t\r\n"


def trim(s: str) -> str:
    return s.strip(_WHITESPACE)


def is_valid_quality(q: int) -> bool:
    if isinstance(q, bool) or not isinstance(q, int):
        return False
    return q == BEST_QUALITY or q in QUALITY_LADDER


def is_valid_format(f: str) -> bool:
    return isinstance(f, str) and f in FORMAT_WHITELIST


def classify_url(u: str) -> Optional[ResourceKind]:
    if not isinstance(u, str):
        return None
    for kind, pattern in URL_PATTERNS:
        if pattern.match(u):
            return kind
    return None


def is_valid_url(u: str) -> bool:
    return classify_url(u) is not None


def parse_quality(text: str | int) -> int:
    """Parse ``720``, ``"720"``, ``"720p"`` or ``"best"`` into a ladder value."""
    if isinstance(text, int) and not isinstance(text, bool):
        value = text
    else:
        raw = trim(str(text)).lower()
        if raw in ("best", ""):
            return BEST_QUALITY
        if raw.endswith("p"):
            raw = raw[:-1]
        try:
            value = int(raw)
        except ValueError:
            raise ValidationError(
                f"Invalid quality '{text}'. Choose one of: {quality_choices()}"
            ) from None
    if not is_valid_quality(value):
        raise ValidationError(
            f"Invalid quality '{text}'. Choose one of: {quality_choices()}"
        )
    return value


def quality_choices() -> str:
    return ", ".join(str(q) for q in QUALITY_LADDER) + " or 0 for best"


def validate_request(
    request: DownloadRequest, allowed_kinds: Optional[List[ResourceKind]] = None
) -> ResourceKind:
    """Reject a request before any process is spawned; returns the URL kind."""
    kind = classify_url(request.url)
    if kind is None:
        raise ValidationError("Invalid URL format!\n" + SUPPORTED_URL_HELP)
    if allowed_kinds is not None and kind not in allowed_kinds:
        wanted = ", ".join(k.value for k in allowed_kinds)
        raise ValidationError(f"Expected a {wanted} URL, got a {kind.value} URL")
    if not request.audio_only:
        if not is_valid_quality(request.quality):
            raise ValidationError(
                f"Invalid quality '{request.quality}'. Choose one of: {quality_choices()}"
            )
        if not is_valid_format(request.container_format):
            raise ValidationError(
                f"Invalid format '{request.container_format}'. "
                f"Choose one of: {', '.join(FORMAT_WHITELIST)}"
            )
    return kind


__all__ = [
    "QUALITY_LADDER",
    "BEST_QUALITY",
    "FORMAT_WHITELIST",
    "QUALITY_DESCRIPTIONS",
    "URL_PATTERNS",
    "SUPPORTED_URL_HELP",
    "trim",
    "is_valid_quality",
    "is_valid_format",
    "is_valid_url",
    "classify_url",
    "parse_quality",
    "quality_choices",
    "validate_request",
]
