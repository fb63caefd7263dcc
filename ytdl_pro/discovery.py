"""Filesystem collaborators: downloader discovery and directory creation."""

from __future__ import annotations

import os
import stat
import subprocess
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from .errors import ConfigurationError
from .logging_utils import get_logger

if os.name == "nt":
    CANDIDATE_PATHS = [
        Path("libs") / "yt-dlp.exe",
        Path("yt-dlp.exe"),
        Path("bin") / "yt-dlp.exe",
    ]
    _SCRIPT_NAME = "yt-dlp.exe"
else:
    CANDIDATE_PATHS = [
        Path("./libs/yt-dlp"),
        Path("./yt-dlp"),
        Path("/usr/local/bin/yt-dlp"),
        Path("/usr/bin/yt-dlp"),
        Path("./bin/yt-dlp"),
    ]
    _SCRIPT_NAME = "yt-dlp"


def default_candidates() -> List[Path]:
    """Fixed search order, then the script installed with the yt-dlp package."""
    scripts_dir = Path(sys.executable).parent
    return CANDIDATE_PATHS + [scripts_dir / _SCRIPT_NAME]


def is_executable(path: Path) -> bool:
    if os.name == "nt":
        return True
    return os.access(path, os.X_OK)


def make_executable(path: Path) -> None:
    mode = path.stat().st_mode
    path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


def detect_downloader_path(
    candidates: Optional[Sequence[Path]] = None, verbose: bool = False
) -> Path:
    """Return the first candidate that exists, marking it executable if needed."""
    log = get_logger()
    paths = list(candidates) if candidates is not None else default_candidates()
    for path in paths:
        if not path.is_file():
            continue
        if not is_executable(path):
            try:
                make_executable(path)
            except OSError as e:
                raise ConfigurationError(f"yt-dlp found at {path} but is not executable: {e}") from e
        if verbose:
            log.info("Found yt-dlp at: %s", path)
        else:
            log.debug("Found yt-dlp at: %s", path)
        return path
    lines = [
        "Error: yt-dlp not found anywhere!",
        "Please install yt-dlp or place it in one of these locations:",
    ]
    lines.extend(f"  - {p}" for p in paths)
    raise ConfigurationError("\n".join(lines))


def resolve_downloader(override: Optional[Path], verbose: bool = False) -> Path:
    if override is None:
        return detect_downloader_path(verbose=verbose)
    return detect_downloader_path([Path(override)], verbose=verbose)


def ensure_directory(path: Path) -> bool:
    """Create ``path`` if missing; returns True when it was created."""
    if path.is_dir():
        return False
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ConfigurationError(f"Failed to create directory: {path} ({e})") from e
    get_logger().debug("Directory created: %s", path)
    return True


def probe_version(executable: Path, timeout: float = 30.0) -> Optional[str]:
    """Run ``<executable> --version``; None when it cannot be run or fails."""
    try:
        result = subprocess.run(
            [str(executable), "--version"], capture_output=True, text=True, timeout=timeout
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        get_logger().warning("Downloader test failed: %s", e)
        return None
    if result.returncode != 0:
        return None
    return result.stdout.strip()


__all__ = [
    "CANDIDATE_PATHS",
    "default_candidates",
    "detect_downloader_path",
    "resolve_downloader",
    "ensure_directory",
    "is_executable",
    "make_executable",
    "probe_version",
]
