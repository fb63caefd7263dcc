import io
from datetime import datetime, timedelta

from rich.console import Console
from ytdl_pro.models import DownloadOutcome, DownloadRequest
from ytdl_pro.reporting import ConsoleReporter, DownloadLog, ReporterChain, format_outcome


def make_outcome(i=0, success=True, quality=0, fmt="mp4", url=None):
    return DownloadOutcome(
        url=url or f"https://youtu.be/video{i:06d}",
        quality=quality,
        container_format=fmt,
        audio_only=False,
        success=success,
        timestamp=datetime(2024, 1, 1, 12, 0, 0) + timedelta(minutes=i),
    )


def test_format_outcome_line():
    line = format_outcome(make_outcome(quality=720, fmt="webm"))
    assert line == (
        "[2024-01-01 12:00:00] Download Successful - "
        "URL: https://youtu.be/video000000 | Quality: 720p | Format: webm"
    )


def test_format_outcome_best_and_failed():
    line = format_outcome(make_outcome(success=False))
    assert "Download Failed" in line
    assert "Quality: Best" in line


def test_log_appends_one_line_per_outcome(tmp_path):
    log = DownloadLog(tmp_path / "logs" / "download_log.txt")
    log.report(make_outcome(1))
    log.report(make_outcome(2, success=False))
    lines = (tmp_path / "logs" / "download_log.txt").read_text().splitlines()
    assert len(lines) == 2
    assert "video000001" in lines[0] and "video000002" in lines[1]


def test_recent_returns_last_entries_oldest_first(tmp_path):
    log = DownloadLog(tmp_path / "log.txt")
    for i in range(1, 51):
        log.append(make_outcome(i))
    recent = log.recent(max_entries=20)
    assert len(recent) == 20
    assert "video000031" in recent[0]
    assert "video000050" in recent[-1]
    ids = [int(line.split("video")[1][:6]) for line in recent]
    assert ids == list(range(31, 51))


def test_recent_fewer_entries_than_limit(tmp_path):
    log = DownloadLog(tmp_path / "log.txt")
    for i in range(3):
        log.append(make_outcome(i))
    assert len(log.recent(20)) == 3


def test_recent_missing_file(tmp_path):
    assert DownloadLog(tmp_path / "nope.txt").recent() == []


def test_newline_in_url_stays_on_one_line(tmp_path):
    log = DownloadLog(tmp_path / "log.txt")
    log.append(make_outcome(url="https://youtu.be/x\ninjected"))
    assert len((tmp_path / "log.txt").read_text().splitlines()) == 1


def test_outcome_for_request_uses_request_fields():
    req = DownloadRequest(url="youtu.be/dQw4w9WgXcQ", quality=480, container_format="avi")
    outcome = DownloadOutcome.for_request(req, success=True, return_code=0)
    assert (outcome.url, outcome.quality, outcome.container_format) == (req.url, 480, "avi")


def test_console_reporter_prints_failure_reasons():
    buf = io.StringIO()
    ConsoleReporter(Console(file=buf, width=120)).report(make_outcome(success=False))
    out = buf.getvalue()
    assert "Download failed! Possible reasons:" in out
    assert "Disk space full" in out


class Boom:
    def report(self, outcome):
        raise RuntimeError("boom")


class Collect:
    def __init__(self):
        self.seen = []

    def report(self, outcome):
        self.seen.append(outcome)


def test_reporter_chain_continues_after_failure():
    collect = Collect()
    chain = ReporterChain([Boom(), collect])
    outcome = make_outcome()
    chain.report(outcome)
    assert collect.seen == [outcome]
