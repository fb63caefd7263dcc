import dataclasses
import json
from pathlib import Path

import pytest
from ytdl_pro.config import AppConfig
from ytdl_pro.errors import ConfigurationError


def test_defaults():
    config = AppConfig()
    assert config.download_dir == Path("downloads")
    assert config.log_file == Path("logs") / "download_log.txt"
    assert config.verbose is False
    assert config.history_entries == 20


def test_config_is_immutable():
    config = AppConfig()
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.verbose = True  # type: ignore[misc]


def test_with_changes_returns_new_value():
    config = AppConfig()
    changed = config.with_changes(verbose=True, download_dir="videos")
    assert changed.verbose is True
    assert changed.download_dir == Path("videos")
    assert config.verbose is False
    assert config.download_dir == Path("downloads")


def test_save_and_load_round_trip(tmp_path):
    path = tmp_path / "cfg" / "config.json"
    config = AppConfig(download_dir=tmp_path / "dl", downloader_path="/usr/bin/yt-dlp", timeout_seconds=60)
    config.save(path)
    assert json.loads(path.read_text())["download_dir"] == str(tmp_path / "dl")
    assert AppConfig.from_file(path) == config


def test_from_file_missing_returns_defaults(tmp_path):
    assert AppConfig.from_file(tmp_path / "absent.json") == AppConfig()


def test_from_file_ignores_unknown_keys(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"verbose": True, "layout_ratio": 60}))
    assert AppConfig.from_file(path).verbose is True


@pytest.mark.parametrize("content", ["{not json", "[1, 2]", '{"download_dir": null}'])
def test_from_file_rejects_malformed_settings(tmp_path, content):
    path = tmp_path / "config.json"
    path.write_text(content)
    with pytest.raises(ConfigurationError, match="Invalid settings file"):
        AppConfig.from_file(path)
