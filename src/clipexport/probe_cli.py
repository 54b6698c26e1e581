"""CLI for probing — print a clip's duration or full ffprobe metadata.

Usage:
    clipexport probe source.mp4
    clipexport probe source.mp4 --json
"""

import argparse
import json
import sys

from .common import setup_logging
from .config import build_config
from .errors import ExportError
from .probe import ffprobe_json, probe_duration


def main(args=None):
    parser = argparse.ArgumentParser(
        description="Probe a media file with ffprobe.",
    )
    parser.add_argument("source", help="Path to media file")
    parser.add_argument(
        "--json", action="store_true",
        help="Print full format/stream metadata as JSON",
    )
    parser.add_argument(
        "--config", default=None,
        help="Engine config YAML (ffmpeg/ffprobe paths, timeouts)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Log every engine command",
    )
    parsed = parser.parse_args(args)
    setup_logging(parsed.verbose)

    try:
        config = build_config(parsed.config)
        if parsed.json:
            print(json.dumps(ffprobe_json(config, parsed.source), indent=2))
        else:
            print(f"{probe_duration(config, parsed.source):.3f}")
    except ExportError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
