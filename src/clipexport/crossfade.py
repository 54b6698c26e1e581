"""Crossfade export — iterative pairwise xfade merges.

Instead of one N-input filter graph, clips are merged two at a time:

    acc = clips[0]
    for clip in clips[1:]:
        L = duration(acc)
        offset = max(0, L - d)
        acc = xfade(acc, clip, d, offset)

Each step dissolves video over [offset, offset + d) and cross-mixes audio
over the same window, writing xfade_step_<i>.mp4 into the request
workspace. N clips cost N-1 probes and N-1 merges, plus a final scale or
remux pass. A bad clip fails only its own step, and the error names it.

The offset is clamped at 0 so a clip shorter than `d` still merges.
"""

import logging
from pathlib import Path

from .common import encode_args, fmt_seconds, is_seconds
from .errors import ValidationError
from .probe import probe_duration
from .resolution import finalize, normalize_resolution, scale_args
from .runner import run_engine
from .workspace import workspace_scope

logger = logging.getLogger(__name__)


def crossfade_offset(left_duration: float, duration: float) -> float:
    """Start of the transition window on the accumulated clip."""
    return max(0.0, left_duration - duration)


def crossfade_filter(duration: float, offset: float) -> str:
    """Two-input xfade (video) + acrossfade (audio) graph, outputs [v] and [a]."""
    d = fmt_seconds(duration)
    o = fmt_seconds(offset)
    return (
        f"[0:v][1:v]xfade=transition=fade:duration={d}:offset={o}[v];"
        f"[0:a][1:a]acrossfade=d={d}[a]"
    )


def expected_duration(durations: list[float], duration: float) -> float:
    """Length of the merged result, matching the per-step offset clamp."""
    if not durations:
        return 0.0
    total = durations[0]
    for d in durations[1:]:
        total = crossfade_offset(total, duration) + d
    return total


def _merge_step(config, left, right, duration, offset, output) -> int:
    args = [
        "-i", str(left),
        "-i", str(right),
        "-filter_complex", crossfade_filter(duration, offset),
        "-map", "[v]",
        "-map", "[a]",
        *encode_args(config.video_codec),
        "-y", str(output),
    ]
    return run_engine(config, args, "FFmpeg xfade step", timeout=config.timeout).returncode


def _encode_single(config, source, output, resolution) -> int:
    args = [
        "-i", str(source),
        *scale_args(resolution),
        *encode_args(config.video_codec),
        "-y", str(output),
    ]
    return run_engine(config, args, "FFmpeg", timeout=config.timeout).returncode


def export_with_crossfades(
    config,
    inputs,
    output: str | Path,
    duration: float,
    resolution: str | None = None,
    workspace=None,
) -> int:
    """Merge `inputs` in order with `duration`-second crossfades.

    Args:
        config: EngineConfig.
        inputs: Clip paths, in timeline order.
        output: Output video path.
        duration: Crossfade length in seconds (> 0).
        resolution: "source", "720p", "1080p" or None.
        workspace: Open TempWorkspace for step files. A private one is
            created (and removed) when omitted.

    Returns:
        Exit code of the final encode/remux.

    Raises:
        ValidationError: No inputs or non-positive duration (before any spawn).
        ProbeError: An accumulator's duration could not be read.
        EngineError: A merge step or the final pass failed.
    """
    inputs = [Path(p) for p in inputs]
    if not inputs:
        raise ValidationError("No input files provided")
    if not is_seconds(duration) or duration <= 0:
        raise ValidationError(f"Crossfade duration must be a finite number > 0, got {duration!r}")
    resolution = normalize_resolution(resolution)
    duration = float(duration)

    # One clip: nothing to transition, encode it straight to the output.
    if len(inputs) == 1:
        logger.info("Single input, encoding directly to %s", output)
        return _encode_single(config, inputs[0], output, resolution)

    with workspace_scope(workspace, base_dir=config.temp_root) as ws:
        current = inputs[0]
        for idx, right in enumerate(inputs[1:], start=1):
            left_duration = probe_duration(config, current)
            offset = crossfade_offset(left_duration, duration)
            step_out = ws.file(f"xfade_step_{idx}.mp4")

            logger.info(
                "Crossfade step %d/%d: %s (%.2fs) + %s at offset %.3fs",
                idx, len(inputs) - 1, current.name, left_duration, right.name, offset,
            )
            _merge_step(config, current, right, duration, offset, step_out)
            current = step_out

        return finalize(config, current, output, resolution)
