import json
import os
import sys
from pathlib import Path

import pytest

# Ensure project root on sys.path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from ytdl_pro.cli import run_cli as _run_cli  # noqa: E402

FAKE_DOWNLOADER = """\
import json
import sys
import time

with open({record!r}, "a") as f:
    f.write(json.dumps(sys.argv[1:]) + "\\n")
if "--version" in sys.argv:
    print("2099.01.01")
    sys.exit(0)
time.sleep({sleep!r})
sys.exit({exit_code!r})
"""


class ListReporter:
    def __init__(self):
        self.outcomes = []

    def report(self, outcome):
        self.outcomes.append(outcome)


@pytest.fixture()
def reporter():
    return ListReporter()


@pytest.fixture()
def calls_file(tmp_path):
    return tmp_path / "calls.jsonl"


@pytest.fixture()
def read_calls(calls_file):
    def _read():
        if not calls_file.exists():
            return []
        return [json.loads(line) for line in calls_file.read_text().splitlines()]

    return _read


@pytest.fixture()
def make_downloader(tmp_path, calls_file):
    """Write a yt-dlp stand-in that records its argv and exits with ``exit_code``."""
    if os.name == "nt":
        pytest.skip("fake downloader is a POSIX shell wrapper")

    def _make(exit_code=0, sleep=0, name="yt-dlp"):
        script = tmp_path / f"{name}_impl.py"
        script.write_text(
            FAKE_DOWNLOADER.format(record=str(calls_file), sleep=sleep, exit_code=exit_code)
        )
        wrapper = tmp_path / name
        wrapper.write_text(f'#!/bin/sh\nexec "{sys.executable}" "{script}" "$@"\n')
        wrapper.chmod(0o755)
        return wrapper

    return _make


@pytest.fixture()
def run_cli(tmp_path, monkeypatch, capsys):
    """Run the CLI in-process inside ``tmp_path``; returns (code, out, err)."""
    monkeypatch.chdir(tmp_path)
    config_path = tmp_path / "config.json"

    def _run(args):
        argv = ["--config", str(config_path)] + list(args)
        try:
            code = _run_cli(argv)
        except SystemExit as e:  # argparse errors
            code = e.code
        out, err = capsys.readouterr()
        return code, out, err

    return _run
