"""clipexport.common — shared helpers for building engine invocations.

Contains: path variable resolution, encoder argument sets, number
checks and formatting for filter expressions, and CLI logging setup.
"""

import logging
import math
import re


# ── Path utilities ─────────────────────────────────────────────────

def resolve_path_vars(text: str, paths: dict[str, str]) -> str:
    """Replace ${name} variables in a string using the paths dict."""
    def _replace(match):
        key = match.group(1)
        if key not in paths:
            raise ValueError(f"Unknown path variable: ${{{key}}}")
        return str(paths[key])
    return re.sub(r"\$\{(\w+)\}", _replace, text)


# ── Encoder arguments ──────────────────────────────────────────────

def codec_params(codec: str) -> list[str]:
    """Quality/pixel-format flags for the given video codec."""
    if codec == "h264_nvenc":
        return ["-cq", "20", "-pix_fmt", "yuv420p"]
    return ["-crf", "20", "-pix_fmt", "yuv420p"]


def encode_args(codec: str = "libx264") -> list[str]:
    """Final-encode flags shared by every re-encoding operation.

    H.264 video, AAC audio, and the moov atom up front so exports start
    playing before they are fully downloaded.
    """
    return [
        "-c:v", codec, *codec_params(codec),
        "-c:a", "aac",
        "-movflags", "+faststart",
    ]


# ── Number formatting ──────────────────────────────────────────────

def is_seconds(value) -> bool:
    """True for a finite int or float. bool, NaN and inf are not durations."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def fmt_seconds(value: float) -> str:
    """Format seconds for ffmpeg: millisecond precision, no trailing zeros.

    fmt_seconds(4.0) -> "4", fmt_seconds(0.25) -> "0.25".
    """
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


# ── CLI logging ────────────────────────────────────────────────────

def setup_logging(verbose: bool = False) -> None:
    """Route library logs to stderr; DEBUG shows every engine command line."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
