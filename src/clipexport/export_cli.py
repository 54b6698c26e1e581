"""CLI for export — join clips into one finished video.

Two modes: a YAML manifest, or clips given on the command line.

Usage:
    # From a YAML export manifest
    clipexport export --manifest export.yaml
    clipexport export --manifest export.yaml --output final.mp4 --gpu

    # Ad hoc, clips on the command line
    clipexport export a.mp4 b.mp4 c.mp4 --output final.mp4
    clipexport export a.mp4 b.mp4 --output final.mp4 --crossfade 1.0 --resolution 720p
    clipexport export a.mp4 b.mp4 --output final.mp4 --fade-in 0.5 --fade-out 0.5

    # Validate only (no rendering)
    clipexport export --manifest export.yaml --validate
"""

import argparse
import sys

from .common import setup_logging
from .config import build_config
from .errors import ExportError
from .export import export
from .export_manifest import load_export_manifest, validate_clip_paths
from .models import ClipReference, ExportRequest, TransitionMode
from .resolution import VALID_RESOLUTIONS


def _parse_args(args=None):
    parser = argparse.ArgumentParser(
        description="Export clips as one video (concat or crossfade).",
    )
    parser.add_argument(
        "inputs", nargs="*",
        help="Clip paths in timeline order (omit when using --manifest)",
    )
    parser.add_argument(
        "--manifest", default=None,
        help="Path to YAML export manifest",
    )
    parser.add_argument(
        "--output", default=None,
        help="Output mp4 path (overrides the manifest's output)",
    )
    parser.add_argument(
        "--crossfade", type=float, default=None, metavar="SECONDS",
        help="Crossfade between clips instead of hard cuts",
    )
    parser.add_argument(
        "--resolution", choices=sorted(VALID_RESOLUTIONS), default=None,
        help="Output height preset (default: source)",
    )
    parser.add_argument(
        "--fade-in", type=float, default=0.0,
        help="Fade-in applied to every clip (seconds)",
    )
    parser.add_argument(
        "--fade-out", type=float, default=0.0,
        help="Fade-out applied to every clip (seconds)",
    )
    parser.add_argument(
        "--config", default=None,
        help="Engine config YAML (ffmpeg/ffprobe paths, timeouts)",
    )
    parser.add_argument(
        "--gpu", action="store_true",
        help="Use GPU encoding (h264_nvenc). Default is CPU (libx264).",
    )
    parser.add_argument(
        "--validate", action="store_true",
        help="Validate manifest only — check paths, don't render",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Log every engine command",
    )
    return parser, parser.parse_args(args)


def _request_from_args(parser, parsed) -> ExportRequest:
    if parsed.manifest is not None:
        if parsed.inputs:
            parser.error("Cannot mix positional clips with --manifest")
        if parsed.crossfade is not None or parsed.resolution is not None:
            parser.error("--crossfade/--resolution come from the manifest when --manifest is used")
        return load_export_manifest(parsed.manifest, output=parsed.output)

    if not parsed.inputs:
        parser.error("Specify clips or --manifest")
    if parsed.output is None:
        parser.error("--output is required without --manifest")

    transition = (
        TransitionMode.crossfade(parsed.crossfade)
        if parsed.crossfade is not None else TransitionMode.none()
    )
    clips = [ClipReference(p, parsed.fade_in, parsed.fade_out) for p in parsed.inputs]
    return ExportRequest(
        clips=clips,
        output=parsed.output,
        transition=transition,
        resolution=parsed.resolution or "source",
    )


def main(args=None):
    parser, parsed = _parse_args(args)
    setup_logging(parsed.verbose)

    try:
        request = _request_from_args(parser, parsed)
        validate_clip_paths(request)
    except (ExportError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if parsed.validate:
        print(f"Export request valid: {len(request.clips)} clips")
        for i, c in enumerate(request.clips):
            print(f"  {i}: {c.path}  fade_in={c.fade_in}s fade_out={c.fade_out}s")
        t = request.transition
        print(f"Transition: {t.kind}" + (f" ({t.duration}s)" if t.is_crossfade else ""))
        print(f"Resolution: {request.resolution}")
        print("All paths verified.")
        return

    try:
        config = build_config(parsed.config, gpu=parsed.gpu)
        print(f"Exporting {len(request.clips)} clips -> {request.output}")
        output = export(config, request)
    except ExportError as e:
        print(f"Export failed: {e}", file=sys.stderr)
        sys.exit(1)

    print(f"\nDone: {output}")


if __name__ == "__main__":
    main()
