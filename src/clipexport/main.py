"""Subcommand dispatcher for clipexport.

Usage:
    clipexport export  --manifest export.yaml
    clipexport export  a.mp4 b.mp4 --output final.mp4 --crossfade 1.0
    clipexport trim    source.mp4 --start 10 --end 30 --output clip.mp4
    clipexport split   source.mp4 --at 12.5 --left a.mp4 --right b.mp4
    clipexport probe   source.mp4
"""

import argparse
import sys


def main(args=None):
    parser = argparse.ArgumentParser(
        prog="clipexport",
        description="Export, trim, split, and probe video clips via ffmpeg.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # Register subcommands. Each delegates to its own module's main().
    subparsers.add_parser("export", help="Join clips into one video (concat or crossfade)")
    subparsers.add_parser("trim", help="Trim a clip to [start, end)")
    subparsers.add_parser("split", help="Split a clip into two files")
    subparsers.add_parser("probe", help="Print a clip's duration or metadata")

    # Parse only the subcommand name, pass the rest to the subcommand's parser.
    parsed, remaining = parser.parse_known_args(args)

    if parsed.command is None:
        # No subcommand given: show help and exit with error.
        parser.print_help()
        sys.exit(1)

    if parsed.command == "export":
        from .export_cli import main as export_main
        export_main(remaining)
    elif parsed.command == "trim":
        from .cut_cli import trim_main
        trim_main(remaining)
    elif parsed.command == "split":
        from .cut_cli import split_main
        split_main(remaining)
    elif parsed.command == "probe":
        from .probe_cli import main as probe_main
        probe_main(remaining)


if __name__ == "__main__":
    main()
