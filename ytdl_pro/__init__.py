"""YouTube Downloader Pro package root.

Public surface kept intentionally small; internal modules may evolve.
"""

from .command import CommandBuilder, build
from .config import AppConfig
from .downloader import VideoDownloader
from .errors import ConfigurationError, ExecutionError, ValidationError
from .executor import Executor
from .models import DownloadOutcome, DownloadRequest, Invocation
from .reporting import DownloadLog
from .sanitizer import quote_for_shell, sanitize
from .validation import is_valid_format, is_valid_quality, is_valid_url, trim

__all__ = [
    "AppConfig",
    "CommandBuilder",
    "ConfigurationError",
    "DownloadLog",
    "DownloadOutcome",
    "DownloadRequest",
    "ExecutionError",
    "Executor",
    "Invocation",
    "ValidationError",
    "VideoDownloader",
    "build",
    "is_valid_format",
    "is_valid_quality",
    "is_valid_url",
    "quote_for_shell",
    "sanitize",
    "trim",
]


def main():
    """Run the command-line interface."""
    from .cli import main as cli_main

    cli_main()
