"""Outcome reporters: the append-only download log and console feedback."""

from __future__ import annotations

from collections import deque
from pathlib import Path
from typing import Iterable, List, Protocol

from rich.console import Console
from rich.markup import escape

from .logging_utils import get_logger
from .models import DownloadOutcome

LOG_FILENAME = "download_log.txt"
DEFAULT_HISTORY_ENTRIES = 20
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

FAILURE_REASONS = [
    "Internet connection problem",
    "Invalid or unavailable URL",
    "Video not available in your region",
    "Requested quality not available",
    "Disk space full",
]


def failure_explanation() -> str:
    lines = ["Download failed! Possible reasons:"]
    lines.extend(f"  {i}. {reason}" for i, reason in enumerate(FAILURE_REASONS, start=1))
    return "\n".join(lines)


class OutcomeReporter(Protocol):
    """Receives one outcome per executed request."""

    def report(self, outcome: DownloadOutcome) -> None:
        ...


def format_outcome(outcome: DownloadOutcome) -> str:
    status = "Download Successful" if outcome.success else "Download Failed"
    quality = "Best" if outcome.quality == 0 else f"{outcome.quality}p"
    return (
        f"[{outcome.timestamp.strftime(TIMESTAMP_FORMAT)}] {status} - "
        f"URL: {outcome.url} | Quality: {quality} | Format: {outcome.container_format}"
    )


class DownloadLog:
    """Append-only text log, one line per outcome."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def report(self, outcome: DownloadOutcome) -> None:
        self.append(outcome)

    def append(self, outcome: DownloadOutcome) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # Newlines inside a URL would split the entry
        line = format_outcome(outcome).replace("\r", " ").replace("\n", " ")
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(line + "\n")

    def recent(self, max_entries: int = DEFAULT_HISTORY_ENTRIES) -> List[str]:
        """Most recent ``max_entries`` lines, oldest first (file order)."""
        if max_entries <= 0 or not self.path.exists():
            return []
        with open(self.path, "r", encoding="utf-8", errors="replace") as f:
            tail = deque((line.rstrip("\n") for line in f if line.strip()), maxlen=max_entries)
        return list(tail)


class ConsoleReporter:
    """Prints outcomes with rich markup."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def report(self, outcome: DownloadOutcome) -> None:
        if outcome.success:
            self.console.print("[bold green]Download successful![/]")
        else:
            self.console.print(f"[bold red]{escape(outcome.explanation or failure_explanation())}[/]")


class ReporterChain:
    """Forwards each outcome to every reporter; one failing reporter does not stop the rest."""

    def __init__(self, reporters: Iterable[OutcomeReporter] = ()):
        self._reporters: List[OutcomeReporter] = list(reporters)
        self._log = get_logger()

    def register(self, reporter: OutcomeReporter) -> None:
        self._reporters.append(reporter)

    def report(self, outcome: DownloadOutcome) -> None:
        for reporter in self._reporters:
            try:
                reporter.report(outcome)
            except Exception as e:
                self._log.error(
                    "Reporter %s failed for %s: %s", type(reporter).__name__, outcome.url, e
                )


__all__ = [
    "LOG_FILENAME",
    "DEFAULT_HISTORY_ENTRIES",
    "FAILURE_REASONS",
    "failure_explanation",
    "format_outcome",
    "OutcomeReporter",
    "DownloadLog",
    "ConsoleReporter",
    "ReporterChain",
]
