"""Interactive numbered menu rendered with rich."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, TextIO

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import IntPrompt, Prompt
from rich.table import Table

from .cli import EXIT_CONFIG, EXIT_OK
from .config import AppConfig
from .discovery import ensure_directory, probe_version
from .downloader import VideoDownloader
from .errors import ConfigurationError, ValidationError
from .logging_utils import get_logger, set_verbose
from .models import ResourceKind
from .reporting import ConsoleReporter, DownloadLog, ReporterChain
from .validation import (
    FORMAT_WHITELIST,
    QUALITY_DESCRIPTIONS,
    QUALITY_LADDER,
    SUPPORTED_URL_HELP,
    classify_url,
    is_valid_quality,
    trim,
)

RULE = "─" * 42

MAIN_MENU = [
    ("1", "Download single video"),
    ("2", "Download playlist"),
    ("3", "Download channel videos"),
    ("4", "Download audio only"),
    ("5", "Settings"),
    ("6", "Show download history"),
    ("0", "Exit"),
]


class _LineStream:
    """Readline wrapper that signals end of input like builtin input() does."""

    def __init__(self, stream: TextIO):
        self._stream = stream

    def readline(self) -> str:
        line = self._stream.readline()
        if not line:
            raise EOFError
        return line


class InteractiveMenu:
    """Menu loop over an immutable :class:`AppConfig`.

    Settings changes replace ``self.config`` with a new value (persisted to
    ``config_path``) and rebuild the downloader so later requests see them.
    """

    def __init__(
        self,
        config: AppConfig,
        config_path: Optional[Path] = None,
        console: Optional[Console] = None,
        stream: Optional[TextIO] = None,
        pause: bool = True,
    ):
        self.config = config
        self.config_path = config_path
        self.console = console or Console()
        self.stream = _LineStream(stream) if stream is not None else None
        self.pause = pause
        self.history = DownloadLog(config.log_file)
        self.downloader: Optional[VideoDownloader] = None
        self._log = get_logger()

    @property
    def service(self) -> VideoDownloader:
        """The downloader set up by :meth:`run`."""
        if self.downloader is None:
            raise ConfigurationError("Downloader is not set up; start the menu with run()")
        return self.downloader

    # --- Prompts -----------------------------------------------------
    def _ask(self, prompt: str, choices: Optional[List[str]] = None) -> str:
        return Prompt.ask(
            prompt, console=self.console, choices=choices, stream=self.stream
        )

    def _wait(self) -> None:
        if self.pause:
            Prompt.ask(
                "\nPress Enter to continue",
                console=self.console,
                default="",
                show_default=False,
                stream=self.stream,
            )
            self.console.clear()

    def ask_url(self) -> str:
        self.console.print("Enter video/playlist/channel URL:")
        return trim(self._ask(">>") or "")

    def ask_quality(self) -> int:
        table = Table(title="Available Qualities")
        table.add_column("Quality", justify="right")
        table.add_column("Description")
        for q in QUALITY_LADDER:
            table.add_row(f"{q}p", QUALITY_DESCRIPTIONS[q])
        table.add_row("0", "Best available quality")
        self.console.print(table)
        while True:
            quality = IntPrompt.ask(
                "Enter video quality (or 0 for best)", console=self.console, stream=self.stream
            )
            if is_valid_quality(quality):
                return quality
            self.console.print("[red]Invalid input! Please enter a valid quality.[/red]")

    def ask_format(self) -> str:
        self.console.print("Available formats:")
        for i, fmt in enumerate(FORMAT_WHITELIST, start=1):
            self.console.print(f"  {i}. {fmt}")
        choice = self._ask(
            f"Choose format (1-{len(FORMAT_WHITELIST)})",
            choices=[str(i) for i in range(1, len(FORMAT_WHITELIST) + 1)],
        )
        return FORMAT_WHITELIST[int(choice) - 1]

    # --- Screens -----------------------------------------------------
    def show_header(self) -> None:
        self.console.print(
            Panel.fit(
                "[bold]YouTube Downloader Pro[/bold]\n"
                "Supports videos, playlists, and channels\n"
                f"Download folder: {escape(str(self.config.download_dir))}",
            )
        )

    def show_main_menu(self) -> str:
        table = Table(title="Main Menu", show_header=False)
        for key, label in MAIN_MENU:
            table.add_row(key, label)
        self.console.print(table)
        return self._ask("Choose option", choices=[key for key, _ in MAIN_MENU])

    def download_flow(
        self,
        title: str,
        allowed_kinds: Optional[List[ResourceKind]] = None,
        audio_only: bool = False,
    ) -> Optional[bool]:
        """Prompt for one request and run it; None when nothing was run."""
        self.console.print(f"\n[bold]{title}[/bold]\n{RULE}")
        url = self.ask_url()
        if not url:
            self.console.print("[red]No URL entered![/red]")
            return None
        kind = classify_url(url)
        if kind is None:
            self.console.print(f"[red]Invalid URL format![/red]\n{SUPPORTED_URL_HELP}")
            return None
        if allowed_kinds is not None and kind not in allowed_kinds:
            wanted = " or ".join(k.value for k in allowed_kinds)
            self.console.print(f"[red]Please enter a valid {wanted} URL![/red]")
            return None
        if audio_only:
            request = self.service.make_request(url, audio_only=True)
        else:
            quality = self.ask_quality()
            fmt = self.ask_format()
            request = self.service.make_request(url, quality=quality, container_format=fmt)
        self.console.print(
            "\n[bold]Download Summary[/bold]\n"
            f"URL: {escape(request.url)}\n"
            f"Quality: {'Best Available' if request.quality == 0 else request.quality_label()}\n"
            f"Format: {request.effective_format}\n"
            f"Destination: {escape(str(request.output_dir))}\n{RULE}"
        )
        try:
            outcome = self.service.download(request, allowed_kinds)
        except ValidationError as e:
            self.console.print(f"[red]{escape(e.message)}[/red]")
            return None
        if outcome.success:
            self.console.print(f"Files saved to: {escape(str(request.output_dir))}")
        return outcome.success

    def show_history(self) -> None:
        self.console.print(f"[bold]Download History[/bold]\n{RULE}")
        entries = self.history.recent(self.config.history_entries)
        if not entries:
            self.console.print("No download history.")
            return
        for line in entries:
            self.console.print(escape(line))

    def show_settings(self) -> None:
        self.console.print(
            f"[bold]Settings[/bold]\n{RULE}\n"
            f"Current download directory: {escape(str(self.config.download_dir))}\n"
            f"Verbose mode: {'Enabled' if self.config.verbose else 'Disabled'}\n"
            f"Downloader path: {escape(str(self.service.executable))}\n\n"
            "1. Change download directory\n"
            "2. Toggle verbose mode\n"
            "3. Test downloader\n"
            "0. Back to main menu"
        )
        choice = self._ask("Choose option", choices=["1", "2", "3", "0"])
        if choice == "1":
            new_dir = trim(self._ask("Enter new download directory") or "")
            if not new_dir:
                return
            try:
                ensure_directory(Path(new_dir))
            except ConfigurationError as e:
                self.console.print(f"[red]{escape(e.message)}[/red]")
                return
            self.apply_settings(self.config.with_changes(download_dir=Path(new_dir)))
            self.console.print(f"[green]Download directory changed to: {escape(new_dir)}[/green]")
        elif choice == "2":
            self.apply_settings(self.config.with_changes(verbose=not self.config.verbose))
            state = "enabled" if self.config.verbose else "disabled"
            self.console.print(f"[green]Verbose mode {state}[/green]")
        elif choice == "3":
            self.console.print("Testing downloader...")
            version = probe_version(self.service.executable)
            if version:
                self.console.print(f"[green]yt-dlp {escape(version)}[/green]")
            else:
                self.console.print("[red]Downloader did not respond to --version[/red]")

    def apply_settings(self, config: AppConfig) -> None:
        self.config = config
        set_verbose(config.verbose)
        self.downloader = VideoDownloader(config, self.service.executable, self._reporter())
        if self.config_path is not None:
            try:
                config.save(self.config_path)
            except OSError as e:
                self._log.warning("Could not save settings to %s: %s", self.config_path, e)

    def _reporter(self) -> ReporterChain:
        return ReporterChain([self.history, ConsoleReporter(self.console)])

    # --- Loop --------------------------------------------------------
    def run(self) -> int:
        try:
            ensure_directory(self.config.download_dir)
            self.downloader = VideoDownloader.from_config(self.config, self._reporter())
        except ConfigurationError as e:
            self.console.print(f"[bold red]{escape(e.message)}[/bold red]")
            return EXIT_CONFIG
        self.show_header()
        try:
            while True:
                choice = self.show_main_menu()
                if choice == "0":
                    break
                if choice == "1":
                    self.download_flow("Download Single Video")
                elif choice == "2":
                    self.download_flow("Download Playlist", [ResourceKind.PLAYLIST])
                elif choice == "3":
                    self.download_flow(
                        "Download Channel Videos", [ResourceKind.CHANNEL, ResourceKind.HANDLE]
                    )
                elif choice == "4":
                    self.download_flow("Download Audio Only", audio_only=True)
                elif choice == "5":
                    self.show_settings()
                elif choice == "6":
                    self.show_history()
                self._wait()
        except (EOFError, KeyboardInterrupt):
            self.console.print()
        self.console.print("Thank you for using YouTube Downloader Pro!")
        return EXIT_OK


__all__ = ["InteractiveMenu", "MAIN_MENU"]
