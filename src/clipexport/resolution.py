"""Resolution normalization — output height presets.

"source" keeps the input frame size. "720p" and "1080p" scale to that
height; the width is derived from the aspect ratio and rounded to an even
number (scale=-2:H) because H.264 with yuv420p needs even dimensions.

The scale is either fused into a strategy's own encode (scale_args or
scale_filter) or applied as a separate pass over a finished intermediate
(finalize).
"""

import logging
from pathlib import Path

from .common import encode_args
from .errors import ValidationError
from .runner import run_engine

logger = logging.getLogger(__name__)

VALID_RESOLUTIONS = {"source", "720p", "1080p"}

RESOLUTION_HEIGHTS = {"720p": 720, "1080p": 1080}


def normalize_resolution(value: str | None) -> str:
    """Map None to "source" and reject unknown presets."""
    if value is None:
        return "source"
    if value not in VALID_RESOLUTIONS:
        raise ValidationError(
            f"Invalid resolution '{value}'. Valid: {sorted(VALID_RESOLUTIONS)}"
        )
    return value


def scale_filter(resolution: str | None) -> str | None:
    """Scale filter expression for a preset, or None for source size."""
    preset = normalize_resolution(resolution)
    height = RESOLUTION_HEIGHTS.get(preset)
    if height is None:
        return None
    return f"scale=-2:{height}"


def scale_args(resolution: str | None) -> list[str]:
    """`-vf scale=...` arguments for a preset (empty for source)."""
    expr = scale_filter(resolution)
    return ["-vf", expr] if expr else []


def finalize(config, source: str | Path, output: str | Path, resolution: str | None) -> int:
    """Write `source` to `output`, rescaling when a preset asks for it.

    With a height preset the clip is re-encoded through the scale filter.
    For "source" the streams are remuxed unchanged (-c copy).

    Returns:
        The engine's exit code.
    """
    preset = normalize_resolution(resolution)
    if preset == "source":
        args = ["-i", str(source), "-c", "copy", "-y", str(output)]
        stage = "Finalization"
    else:
        args = [
            "-i", str(source),
            *scale_args(preset),
            *encode_args(config.video_codec),
            "-y", str(output),
        ]
        stage = "FFmpeg scaling"

    logger.info("Finalizing %s -> %s (%s)", source, output, preset)
    outcome = run_engine(config, args, stage, timeout=config.timeout)
    return outcome.returncode
