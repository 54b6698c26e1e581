"""Single-clip operations — trim, split, transcode.

Each re-encodes (H.264/AAC) for frame-accurate boundaries and writes a
new file; the source is never modified.
"""

import logging
from pathlib import Path

from .common import encode_args, fmt_seconds, is_seconds
from .errors import ValidationError
from .resolution import scale_args
from .runner import run_engine

logger = logging.getLogger(__name__)

# Shortest segment split_clip will produce on either side.
MIN_SEGMENT_SECS = 0.2


def _segment(config, input, start, duration, output, stage, extra=()) -> int:
    Path(output).parent.mkdir(parents=True, exist_ok=True)
    args = [
        "-ss", fmt_seconds(start),
        "-i", str(input),
        "-t", fmt_seconds(duration),
        *extra,
        *encode_args(config.video_codec),
        "-y", str(output),
    ]
    return run_engine(config, args, stage, timeout=config.timeout).returncode


def trim_clip(config, input, start: float, end: float, output) -> int:
    """Cut [start, end) out of `input` into `output`.

    Raises:
        ValidationError: Non-finite times, or end <= start.
    """
    for name, value in (("start", start), ("end", end)):
        if not is_seconds(value):
            raise ValidationError(f"Trim {name} must be a finite number, got {value!r}")
    if end <= start:
        raise ValidationError(f"Invalid trim duration: end ({end}) must be > start ({start})")

    logger.info("Trimming %s  %.3fs - %.3fs", input, start, end)
    return _segment(config, input, start, end - start, output, "FFmpeg trim")


def validate_split(split_time: float, total_duration: float) -> None:
    """Reject split points outside the clip or leaving a sub-0.2s side."""
    for name, value in (("split time", split_time), ("total duration", total_duration)):
        if not is_seconds(value):
            raise ValidationError(f"Split {name} must be a finite number, got {value!r}")
    if split_time <= 0 or split_time >= total_duration:
        raise ValidationError(
            f"Invalid split time {split_time}: must be inside (0, {total_duration})"
        )
    if split_time < MIN_SEGMENT_SECS or (total_duration - split_time) < MIN_SEGMENT_SECS:
        raise ValidationError(
            f"Split at {split_time} would create segments too short "
            f"(< {MIN_SEGMENT_SECS}s)"
        )


def split_clip(config, input, split_time: float, left_output, right_output,
               total_duration: float) -> int:
    """Split `input` at `split_time` into two independently encoded files.

    Returns:
        0 when both halves were written. There is no single engine exit
        code to pass through for a two-part operation.
    """
    validate_split(split_time, total_duration)

    logger.info("Splitting %s at %.3fs", input, split_time)
    _segment(config, input, 0, split_time, left_output, "FFmpeg split (left part)")
    _segment(
        config, input, split_time, total_duration - split_time, right_output,
        "FFmpeg split (right part)",
    )
    return 0


def transcode_to_mp4(config, input, output, resolution=None) -> int:
    """Re-encode any input the engine can read into an H.264/AAC mp4."""
    Path(output).parent.mkdir(parents=True, exist_ok=True)
    args = [
        "-i", str(input),
        *scale_args(resolution),
        *encode_args(config.video_codec),
        "-y", str(output),
    ]
    return run_engine(config, args, "FFmpeg transcode", timeout=config.timeout).returncode
