from datetime import datetime, timedelta

import pytest
from ytdl_pro.models import DownloadOutcome
from ytdl_pro.reporting import DownloadLog


def seed(log_path, count):
    log = DownloadLog(log_path)
    for i in range(1, count + 1):
        log.append(
            DownloadOutcome(
                url=f"https://youtu.be/entry{i:06d}",
                quality=0,
                container_format="mp4",
                audio_only=False,
                success=True,
                timestamp=datetime(2024, 5, 1) + timedelta(seconds=i),
            )
        )


@pytest.mark.contract
def test_history_default_shows_most_recent_twenty_oldest_first(run_cli, tmp_path):
    seed(tmp_path / "logs" / "download_log.txt", 50)
    code, out, err = run_cli(["--history"])
    assert code == 0
    shown = [line for line in out.splitlines() if "entry" in line]
    assert len(shown) == 20
    assert "entry000031" in shown[0]
    assert "entry000050" in shown[-1]


@pytest.mark.contract
def test_history_explicit_count(run_cli, tmp_path):
    seed(tmp_path / "logs" / "download_log.txt", 10)
    code, out, err = run_cli(["--history", "3"])
    shown = [line for line in out.splitlines() if "entry" in line]
    assert [s.split("entry")[1][:6] for s in shown] == ["000008", "000009", "000010"]
