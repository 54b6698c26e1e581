"""CLIs for single-clip edits — trim and split.

Usage:
    clipexport trim source.mp4 --start 10 --end 30 --output clip.mp4
    clipexport split source.mp4 --at 12.5 --left a.mp4 --right b.mp4
    clipexport split source.mp4 --at 12.5 --left a.mp4 --right b.mp4 --total 40
"""

import argparse
import sys

from .common import setup_logging
from .config import build_config
from .cut import split_clip, trim_clip
from .errors import ExportError
from .probe import probe_duration


def _common_args(parser):
    parser.add_argument("source", help="Path to source video")
    parser.add_argument(
        "--config", default=None,
        help="Engine config YAML (ffmpeg/ffprobe paths, timeouts)",
    )
    parser.add_argument(
        "--gpu", action="store_true",
        help="Use GPU encoding (h264_nvenc). Default is CPU (libx264).",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Log every engine command",
    )


def trim_main(args=None):
    parser = argparse.ArgumentParser(
        description="Trim a clip to [start, end).",
    )
    _common_args(parser)
    parser.add_argument("--start", type=float, required=True, help="Start time in seconds")
    parser.add_argument("--end", type=float, required=True, help="End time in seconds")
    parser.add_argument("--output", required=True, help="Output file path")
    parsed = parser.parse_args(args)
    setup_logging(parsed.verbose)

    print(f"Trimming {parsed.source}  {parsed.start:.1f}s — {parsed.end:.1f}s")
    try:
        config = build_config(parsed.config, gpu=parsed.gpu)
        trim_clip(config, parsed.source, parsed.start, parsed.end, parsed.output)
    except ExportError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    print(f"Done: {parsed.output}")


def split_main(args=None):
    parser = argparse.ArgumentParser(
        description="Split a clip into two files at a time point.",
    )
    _common_args(parser)
    parser.add_argument("--at", type=float, required=True, help="Split point in seconds")
    parser.add_argument("--left", required=True, help="Output path for [0, at)")
    parser.add_argument("--right", required=True, help="Output path for [at, end)")
    parser.add_argument(
        "--total", type=float, default=None,
        help="Source duration in seconds (probed with ffprobe if omitted)",
    )
    parsed = parser.parse_args(args)
    setup_logging(parsed.verbose)

    try:
        config = build_config(parsed.config, gpu=parsed.gpu)
        total = parsed.total
        if total is None:
            total = probe_duration(config, parsed.source)
        print(f"Splitting {parsed.source} ({total:.1f}s) at {parsed.at:.1f}s")
        split_clip(config, parsed.source, parsed.at, parsed.left, parsed.right, total)
    except ExportError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    print(f"Done: {parsed.left}, {parsed.right}")
