"""Concatenation strategies with automatic fallback.

Two ways to join the clips in a concat list:
  - demuxer: `-f concat -i list.txt`. ffmpeg reads the list as one
    virtual input. Fast, but needs every segment to share codec
    parameters.
  - filter graph: every clip is its own input, joined by the concat
    filter. Slower, but tolerates heterogeneous inputs.

export_concat tries the demuxer first and, if that invocation fails for
any reason, runs the filter graph exactly once. The caller only ever sees
the second strategy's result (or error). Both re-encode to the same codec
settings and apply the same resolution preset.
"""

import logging
from pathlib import Path

from .common import encode_args
from .concat_list import read_concat_list, write_concat_list
from .errors import EngineError
from .fades import prepare_clips
from .models import ClipReference
from .resolution import normalize_resolution, scale_args, scale_filter
from .runner import run_engine
from .workspace import workspace_scope

logger = logging.getLogger(__name__)


def concat_filter_graph(n: int, resolution: str | None = None) -> str:
    """Filter expression joining n inputs' video+audio into [v] and [a].

    With a height preset the scale filter is chained onto the concat
    output inside the graph; ffmpeg refuses -vf alongside -filter_complex.
    """
    pads = "".join(f"[{i}:v][{i}:a]" for i in range(n))
    scale = scale_filter(resolution)
    if scale is None:
        return f"{pads}concat=n={n}:v=1:a=1[v][a]"
    return f"{pads}concat=n={n}:v=1:a=1[cv][a];[cv]{scale}[v]"


def export_concat_demuxer(config, list_path, output, resolution=None) -> int:
    """Concatenate via the concat demuxer, re-encoding to normalize codecs."""
    args = [
        "-f", "concat", "-safe", "0",
        "-i", str(list_path),
        *scale_args(resolution),
        *encode_args(config.video_codec),
        "-y", str(output),
    ]
    return run_engine(config, args, "FFmpeg concat demuxer", timeout=config.timeout).returncode


def export_concat_filter(config, list_path, output, resolution=None) -> int:
    """Concatenate via the concat filter, one explicit input per list entry.

    Raises:
        ValidationError: The list has no valid entries (before any spawn).
    """
    resolution = normalize_resolution(resolution)
    base = Path(list_path).parent
    inputs = read_concat_list(list_path)

    args = []
    for path in inputs:
        # Same lookup as the demuxer: relative entries sit beside the list.
        args += ["-i", str(base / path) if not Path(path).is_absolute() else path]
    args += [
        "-filter_complex", concat_filter_graph(len(inputs), resolution),
        "-map", "[v]",
        "-map", "[a]",
        *encode_args(config.video_codec),
        "-y", str(output),
    ]
    return run_engine(config, args, "FFmpeg filter-concat", timeout=config.timeout).returncode


def _fade_clips(inputs, fade_effects) -> list[ClipReference]:
    """Pair list entries with (fade_in, fade_out); missing pairs mean no fade."""
    clips = []
    for i, path in enumerate(inputs):
        fade_in, fade_out = fade_effects[i] if i < len(fade_effects) else (0.0, 0.0)
        clips.append(ClipReference(path, fade_in, fade_out))
    return clips


def export_concat(
    config,
    list_path: str | Path,
    output: str | Path,
    resolution: str | None = None,
    fade_effects=None,
    workspace=None,
) -> int:
    """Concatenate the clips in `list_path` into `output`.

    Args:
        config: EngineConfig.
        list_path: Concat list file (`file '<path>'` per line).
        output: Output video path.
        resolution: "source", "720p", "1080p" or None.
        fade_effects: Optional (fade_in, fade_out) per list entry. Clips
            with fades are re-encoded into the workspace first.
        workspace: Open TempWorkspace for intermediates. A private one is
            created (and removed) when omitted.

    Returns:
        Exit code of whichever strategy produced the output.

    Raises:
        ValidationError: Empty list or bad parameters, before any spawn.
        EngineError: The filter-graph fallback failed too.
    """
    resolution = normalize_resolution(resolution)
    inputs = read_concat_list(list_path)
    clips = _fade_clips(inputs, fade_effects) if fade_effects is not None else None

    with workspace_scope(workspace, base_dir=config.temp_root) as ws:
        if clips is not None:
            logger.info("Applying fade effects to %d clips", len(clips))
            processed = prepare_clips(config, clips, ws)
            list_path = write_concat_list(processed, ws.file("processed_list.txt"))

        try:
            return export_concat_demuxer(config, list_path, output, resolution)
        except EngineError as e:
            logger.warning("Concat demuxer failed, trying filter-concat fallback: %s", e)
            Path(output).unlink(missing_ok=True)

        return export_concat_filter(config, list_path, output, resolution)
