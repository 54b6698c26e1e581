"""Media probing via ffprobe."""

import json
import logging
from pathlib import Path

from .common import is_seconds
from .errors import EngineError, ProbeError
from .runner import run_engine

logger = logging.getLogger(__name__)


def _ffprobe(config, args: list[str]) -> str:
    """Run ffprobe and return stdout, mapping engine errors to ProbeError."""
    try:
        outcome = run_engine(
            config, args, "FFprobe",
            timeout=config.probe_timeout,
            executable=config.ffprobe,
        )
    except EngineError as e:
        raise ProbeError(str(e)) from e
    return outcome.stdout


def ffprobe_json(config, path: str | Path) -> dict:
    """Full format + stream metadata for a media file."""
    stdout = _ffprobe(config, [
        "-v", "quiet", "-print_format", "json",
        "-show_format", "-show_streams",
        str(path),
    ])
    try:
        return json.loads(stdout)
    except json.JSONDecodeError as e:
        raise ProbeError(f"Failed to parse FFprobe JSON for {path}: {e}") from e


def parse_duration(metadata: dict) -> float | None:
    """Extract format.duration as a float.

    ffprobe prints it as a decimal string ("12.345000"), but a numeric
    value is accepted too. Returns None when absent or unparseable.
    """
    fmt = metadata.get("format") if isinstance(metadata, dict) else None
    if not isinstance(fmt, dict):
        return None
    value = fmt.get("duration")
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            return None
    if not is_seconds(value):
        return None
    return float(value)


def probe_duration(config, path: str | Path) -> float:
    """Media duration in seconds.

    Raises:
        ProbeError: ffprobe failed, printed invalid JSON, or gave no
            usable format.duration.
    """
    stdout = _ffprobe(config, [
        "-v", "quiet", "-print_format", "json",
        "-show_format",
        str(path),
    ])
    try:
        metadata = json.loads(stdout)
    except json.JSONDecodeError as e:
        raise ProbeError(f"Failed to parse FFprobe JSON for {path}: {e}") from e

    duration = parse_duration(metadata)
    if duration is None:
        raise ProbeError(f"Could not determine media duration for {path}")
    logger.debug("Probed %s: %.3fs", path, duration)
    return duration
