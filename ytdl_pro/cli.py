"""Command-line interface orchestration (one-shot, dry-run, history)."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

from rich import print as rprint
from rich.markup import escape

from .config import DEFAULT_CONFIG_PATH, AppConfig
from .discovery import ensure_directory
from .downloader import VideoDownloader
from .errors import ConfigurationError, ValidationError
from .logging_utils import get_logger, set_verbose
from .reporting import ConsoleReporter, DownloadLog, ReporterChain
from .validation import FORMAT_WHITELIST, parse_quality

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_INVALID = 2
EXIT_CONFIG = 3


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="ytdl-pro",
        description="YouTube video / playlist / channel downloader (yt-dlp front end)",
    )
    p.add_argument(
        "urls",
        nargs="*",
        help="Video, short-link, playlist, channel or @handle URLs. "
        "Without URLs the interactive menu starts",
    )
    p.add_argument(
        "-q",
        "--quality",
        default=None,
        help="Maximum height: 144, 240, 360, 480, 720, 1080, 1440, 2160 or 0/best",
    )
    p.add_argument(
        "-f", "--format", dest="container_format", choices=FORMAT_WHITELIST, default=None,
        help="Preferred container format",
    )
    p.add_argument("-a", "--audio", action="store_true", help="Audio only (mp3)")
    p.add_argument("-o", "--output", default=None, help="Download directory")
    p.add_argument("--downloader", default=None, help="Path to the yt-dlp executable")
    p.add_argument(
        "--timeout", type=float, default=None, help="Abort a download after this many seconds"
    )
    p.add_argument("--verbose", action="store_true", help="Log discovery and built commands")
    p.add_argument(
        "--dry-run", action="store_true", help="Validate and print commands; nothing is run"
    )
    p.add_argument(
        "--report-format",
        choices=["json", "none"],
        default="none",
        help="With --dry-run, print one JSON object per URL",
    )
    p.add_argument(
        "--history",
        nargs="?",
        type=int,
        const=-1,
        default=None,
        metavar="N",
        help="Show the N most recent log entries (default from config) and exit",
    )
    p.add_argument(
        "--config",
        default=str(DEFAULT_CONFIG_PATH),
        help="Settings file (JSON)",
    )
    return p


def load_config(args: argparse.Namespace) -> AppConfig:
    config = AppConfig.from_file(Path(args.config))
    changes: dict = {}
    if args.output:
        changes["download_dir"] = Path(args.output)
    if args.downloader:
        changes["downloader_path"] = Path(args.downloader)
    if args.timeout is not None:
        changes["timeout_seconds"] = args.timeout
    if args.verbose:
        changes["verbose"] = True
    if args.container_format:
        changes["default_format"] = args.container_format
    return config.with_changes(**changes) if changes else config


def show_history(log: DownloadLog, max_entries: int) -> None:
    rprint("[bold]Download History[/bold]")
    rprint("─" * 42)
    entries = log.recent(max_entries)
    if not entries:
        rprint("No download history.")
        return
    for line in entries:
        print(line)


def run_cli(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    quality = None
    if args.quality is not None:
        try:
            quality = parse_quality(args.quality)
        except ValidationError as e:
            parser.error(e.message)
    if args.timeout is not None and args.timeout <= 0:
        parser.error("--timeout must be positive")

    try:
        config = load_config(args)
    except ConfigurationError as e:
        rprint(f"[bold red]{escape(e.message)}[/bold red]")
        return EXIT_CONFIG
    set_verbose(config.verbose)
    log = get_logger()
    history = DownloadLog(config.log_file)

    if args.history is not None:
        show_history(history, args.history if args.history >= 0 else config.history_entries)
        return EXIT_OK

    if not args.urls:
        from .menu import InteractiveMenu

        return InteractiveMenu(config, config_path=Path(args.config)).run()

    reporter = ReporterChain([history, ConsoleReporter()])
    try:
        downloader = VideoDownloader.from_config(config, reporter)
        if not args.dry_run:
            ensure_directory(config.download_dir)
    except ConfigurationError as e:
        rprint(f"[bold red]{escape(e.message)}[/bold red]")
        return EXIT_CONFIG

    # Every request is validated before any process is spawned
    requests = [
        downloader.make_request(url, quality=quality, audio_only=args.audio) for url in args.urls
    ]
    invocations = []
    for request in requests:
        try:
            invocations.append(downloader.prepare(request))
        except ValidationError as e:
            rprint(f"[bold red]{escape(request.url)}[/bold red]: {escape(e.message)}")
            return EXIT_INVALID

    if args.dry_run:
        for inv in invocations:
            if args.report_format == "json":
                print(
                    json.dumps(
                        {
                            "mode": "dry-run",
                            "url": inv.request.url,
                            "quality": inv.request.quality,
                            "format": inv.request.effective_format,
                            "audioOnly": inv.request.audio_only,
                            "argv": inv.argv,
                        }
                    )
                )
            else:
                rprint("[bold]Dry-run[/bold] " + escape(inv.to_command_line()))
        return EXIT_OK

    log.info("Starting session with %d target(s)", len(requests))
    successes = 0
    for idx, inv in enumerate(invocations, start=1):
        request = inv.request
        rprint(
            f"[cyan]Processing target {idx}/{len(requests)}:[/] {escape(request.url)} "
            f"(quality={request.quality_label()}, format={request.effective_format})"
        )
        outcome = downloader.execute(inv)
        if outcome.success:
            successes += 1
            rprint(f"Files saved to: {escape(str(config.download_dir))}")
    failures = len(requests) - successes
    rprint(f"[bold green]Completed[/] downloads: {successes} / {len(requests)}")
    if failures:
        rprint(f"[bold red]Failures:[/] {failures}")
    return EXIT_OK if failures == 0 else EXIT_FAILED


def main() -> None:
    raise SystemExit(run_cli())
