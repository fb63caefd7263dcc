"""Configuration management for the downloader front end."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Optional

from .errors import ConfigurationError

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "ytdl-pro" / "config.json"


@dataclass(frozen=True)
class AppConfig:
    download_dir: Path = Path("downloads")
    log_file: Path = Path("logs") / "download_log.txt"
    verbose: bool = False
    downloader_path: Optional[Path] = None  # skips discovery when set
    timeout_seconds: Optional[float] = None
    history_entries: int = 20
    default_format: str = "mp4"
    default_quality: int = 0

    def __post_init__(self):
        # Frozen: coerce through object.__setattr__
        for name in ("download_dir", "log_file"):
            value = getattr(self, name)
            if not isinstance(value, Path):
                object.__setattr__(self, name, Path(value))
        if self.downloader_path is not None and not isinstance(self.downloader_path, Path):
            object.__setattr__(self, "downloader_path", Path(self.downloader_path))

    def with_changes(self, **changes: Any) -> "AppConfig":
        """Return a new configuration; the current value is left untouched."""
        return replace(self, **changes)

    def save(self, path: Path) -> None:
        """Saves the configuration to a JSON file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(asdict(self), f, indent=2, cls=PathEncoder)

    @classmethod
    def from_file(cls, path: Path) -> "AppConfig":
        """Loads configuration from a JSON file; unknown keys are ignored.

        Raises ``ConfigurationError`` when the file cannot be read or holds
        values of the wrong shape.
        """
        if not path.exists():
            return cls()
        try:
            with open(path, "r") as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("expected a JSON object")
            known = {f.name for f in fields(cls)}
            return cls(**{k: v for k, v in data.items() if k in known})
        except (OSError, ValueError, TypeError) as e:
            raise ConfigurationError(f"Invalid settings file {path}: {e}") from e


class PathEncoder(json.JSONEncoder):
    def default(self, o: Any) -> Any:
        if isinstance(o, Path):
            return str(o)
        return super().default(o)
