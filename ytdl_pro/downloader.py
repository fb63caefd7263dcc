"""Per-request download pipeline: validate, build, execute."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import List, Optional

from .command import CommandBuilder
from .config import AppConfig
from .discovery import resolve_downloader
from .errors import ValidationError
from .executor import Executor
from .logging_utils import get_logger
from .models import DownloadOutcome, DownloadRequest, Invocation, RequestState, ResourceKind
from .reporting import OutcomeReporter
from .validation import trim, validate_request


class VideoDownloader:
    """Drive one request at a time through the pipeline.

    States: validating -> rejected, or validating -> building -> executing ->
    succeeded | failed. Rejected requests raise ``ValidationError`` and never
    spawn a process. There are no automatic retries.
    """

    def __init__(
        self,
        config: AppConfig,
        executable: Path,
        reporter: Optional[OutcomeReporter] = None,
    ):
        self.config = config
        self.executable = executable
        self.builder = CommandBuilder(executable)
        self.executor = Executor(reporter=reporter, timeout=config.timeout_seconds)
        self.last_state: RequestState | None = None
        self._log = get_logger()

    @classmethod
    def from_config(
        cls, config: AppConfig, reporter: Optional[OutcomeReporter] = None
    ) -> "VideoDownloader":
        """Resolve the downloader executable; raises ``ConfigurationError``."""
        executable = resolve_downloader(config.downloader_path, verbose=config.verbose)
        return cls(config, executable, reporter)

    def make_request(
        self,
        url: str,
        quality: Optional[int] = None,
        container_format: Optional[str] = None,
        audio_only: bool = False,
    ) -> DownloadRequest:
        return DownloadRequest(
            url=trim(url),
            quality=self.config.default_quality if quality is None else quality,
            container_format=container_format or self.config.default_format,
            audio_only=audio_only,
            output_dir=self.config.download_dir,
        )

    def prepare(
        self, request: DownloadRequest, allowed_kinds: Optional[List[ResourceKind]] = None
    ) -> Invocation:
        """Validate and build without executing; raises ``ValidationError``."""
        self.last_state = RequestState.VALIDATING
        try:
            kind = validate_request(request, allowed_kinds)
            self.last_state = RequestState.BUILDING
            invocation = self.builder.build_request(request)
        except ValidationError:
            self.last_state = RequestState.REJECTED
            raise
        self._log.debug("Built %s invocation for %s", kind.value, request.url)
        return invocation

    def download(
        self,
        request: DownloadRequest,
        allowed_kinds: Optional[List[ResourceKind]] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> DownloadOutcome:
        invocation = self.prepare(request, allowed_kinds)
        return self.execute(invocation, cancel_event)

    def execute(
        self, invocation: Invocation, cancel_event: Optional[threading.Event] = None
    ) -> DownloadOutcome:
        self.last_state = RequestState.EXECUTING
        outcome = self.executor.run(invocation, cancel_event=cancel_event)
        self.last_state = outcome.state
        return outcome


__all__ = ["VideoDownloader"]
