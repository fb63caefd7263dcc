"""Synchronous downloader process execution."""

from __future__ import annotations

import subprocess
import threading
import time
from typing import List, Optional

from .errors import ExecutionError
from .logging_utils import get_logger
from .models import DownloadOutcome, Invocation
from .reporting import OutcomeReporter, failure_explanation

POLL_INTERVAL = 0.1
KILL_GRACE_SECONDS = 5.0


class Executor:
    """Run one :class:`Invocation` at a time and classify its exit status.

    The child is spawned from an argument vector (never through a shell) and
    is always reaped before ``run`` returns. Exit code 0 is success; anything
    else, including a spawn failure, a timeout, a cancellation or a Ctrl-C, is failure.
    Exactly one outcome is forwarded to the reporter per run.
    """

    def __init__(
        self,
        reporter: Optional[OutcomeReporter] = None,
        timeout: Optional[float] = None,
        poll_interval: float = POLL_INTERVAL,
        kill_grace: float = KILL_GRACE_SECONDS,
    ):
        self.reporter = reporter
        self.timeout = timeout
        self.poll_interval = poll_interval
        self.kill_grace = kill_grace
        self._log = get_logger()

    def run(
        self, invocation: Invocation, cancel_event: Optional[threading.Event] = None
    ) -> DownloadOutcome:
        argv = invocation.consume()
        request = invocation.request
        self._log.debug("Command: %s", invocation.to_command_line())
        try:
            self._execute(argv, cancel_event)
            outcome = DownloadOutcome.for_request(request, success=True, return_code=0)
        except ExecutionError as e:
            self._log.info("Download failed for %s (exit=%s)", request.url, e.return_code)
            outcome = DownloadOutcome.for_request(
                request, success=False, return_code=e.return_code, explanation=e.message
            )
        if self.reporter is not None:
            self.reporter.report(outcome)
        return outcome

    def _execute(self, argv: List[str], cancel_event: Optional[threading.Event]) -> None:
        try:
            process = subprocess.Popen(argv)
        except OSError as e:
            raise ExecutionError(
                f"Could not start downloader: {e}\n{failure_explanation()}"
            ) from e
        try:
            return_code = self._wait(process, cancel_event)
        except KeyboardInterrupt:
            # Ctrl-C fails this download only; the caller carries on
            code = self._stop(process)
            raise ExecutionError(
                f"Download interrupted\n{failure_explanation()}", return_code=code
            ) from None
        except BaseException:
            self._stop(process)
            raise
        self._log.debug("Downloader exited with code %s", return_code)
        if return_code != 0:
            raise ExecutionError(failure_explanation(), return_code=return_code)

    def _wait(
        self, process: subprocess.Popen, cancel_event: Optional[threading.Event]
    ) -> int:
        if self.timeout is None and cancel_event is None:
            return process.wait()
        deadline = None if self.timeout is None else time.monotonic() + self.timeout
        while True:
            try:
                return process.wait(timeout=self.poll_interval)
            except subprocess.TimeoutExpired:
                pass
            if cancel_event is not None and cancel_event.is_set():
                code = self._stop(process)
                raise ExecutionError("Download cancelled", return_code=code)
            if deadline is not None and time.monotonic() >= deadline:
                code = self._stop(process)
                raise ExecutionError(
                    f"Download timed out after {self.timeout:g} seconds\n{failure_explanation()}",
                    return_code=code,
                )

    def _stop(self, process: subprocess.Popen) -> Optional[int]:
        if process.poll() is not None:
            return process.returncode
        process.terminate()
        try:
            return process.wait(timeout=self.kill_grace)
        except subprocess.TimeoutExpired:
            process.kill()
            return process.wait()


def run(invocation: Invocation, reporter: Optional[OutcomeReporter] = None) -> DownloadOutcome:
    return Executor(reporter=reporter).run(invocation)


__all__ = ["Executor", "run", "POLL_INTERVAL", "KILL_GRACE_SECONDS"]
