"""Entrypoint launching the command-line interface."""

from ytdl_pro.cli import run_cli


def main():
    # No URLs on the command line starts the interactive menu
    raise SystemExit(run_cli())


if __name__ == "__main__":
    main()
