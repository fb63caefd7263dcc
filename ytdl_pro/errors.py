"""Exception hierarchy shared by the CLI, the menu and the download service."""

from __future__ import annotations


class DownloaderError(Exception):
    """Base exception for downloader front-end errors."""

    def __init__(self, message: str, code: str) -> None:
        self.message = message
        self.code = code
        super().__init__(message)


class ValidationError(DownloaderError):
    """Raised when user input is rejected before any process is spawned."""

    def __init__(self, message: str = "Invalid input") -> None:
        super().__init__(message, "INVALID_INPUT")


class ConfigurationError(DownloaderError):
    """Raised at startup when the downloader executable or a directory is unusable."""

    def __init__(self, message: str = "Downloader is not configured") -> None:
        super().__init__(message, "CONFIGURATION")


class ExecutionError(DownloaderError):
    """Raised when the downloader process fails or cannot be spawned."""

    def __init__(self, message: str = "Download failed", return_code: int | None = None) -> None:
        self.return_code = return_code
        super().__init__(message, "EXECUTION_FAILED")


__all__ = [
    "DownloaderError",
    "ValidationError",
    "ConfigurationError",
    "ExecutionError",
]
