"""Export manifest loader — declare an export request in YAML.

Export manifest schema:
  output: "${exports}/final.mp4"
  resolution: 720p             # source (default) | 720p | 1080p
  transition:
    type: crossfade            # none (default) | crossfade
    duration: 1.0              # required for crossfade, > 0
  paths:
    media: "/data/media"
    exports: "/data/exports"
  clips:
    - path: "${media}/intro.mp4"
      fade_in: 0.5             # optional, >= 0
      fade_out: 0.5            # optional, >= 0
    - "${media}/body.mp4"      # bare string = clip without fades
"""

from pathlib import Path

import yaml

from .common import is_seconds, resolve_path_vars
from .errors import ValidationError
from .models import ClipReference, ExportRequest, TransitionMode


def _number(value, where):
    if value is None:
        return 0.0
    if not is_seconds(value):
        raise ValidationError(f"{where} must be a finite number, got {value!r}")
    return float(value)


def _parse_transition(raw) -> TransitionMode:
    if raw is None:
        return TransitionMode.none()
    if isinstance(raw, str):
        raw = {"type": raw}
    if not isinstance(raw, dict):
        raise ValidationError("Export manifest: 'transition' must be a mapping")

    kind = raw.get("type", "none")
    if kind == "crossfade":
        if "duration" not in raw:
            raise ValidationError("Export manifest: crossfade transition requires 'duration'")
        return TransitionMode.crossfade(_number(raw["duration"], "transition.duration"))
    return TransitionMode(kind)


def _parse_clip(i, raw, paths) -> ClipReference:
    if isinstance(raw, str):
        raw = {"path": raw}
    if not isinstance(raw, dict):
        raise ValidationError(f"Clip {i}: expected a path or a mapping, got {raw!r}")
    if "path" not in raw:
        raise ValidationError(f"Clip {i}: missing required field 'path'")

    path = resolve_path_vars(str(raw["path"]), paths)
    return ClipReference(
        path,
        fade_in=_number(raw.get("fade_in"), f"Clip {i} fade_in"),
        fade_out=_number(raw.get("fade_out"), f"Clip {i} fade_out"),
    )


def load_export_manifest(manifest_path: str | Path, output: str | None = None) -> ExportRequest:
    """Load, validate, and normalize an export manifest.

    Processing pipeline:
      1. Parse YAML.
      2. Resolve ${path} variables in output and clip paths.
      3. Apply defaults (resolution: source, transition: none).
      4. Build the ExportRequest, which validates clips and transition.

    Args:
        manifest_path: Path to the YAML export manifest.
        output: Overrides the manifest's output path when given.

    Returns:
        The ExportRequest described by the manifest.

    Raises:
        ValidationError: Missing/invalid fields (a ValueError).
    """
    with open(manifest_path) as f:
        raw = yaml.safe_load(f)

    if not isinstance(raw, dict):
        raise ValidationError("Export manifest: top level must be a mapping")
    if "clips" not in raw:
        raise ValidationError("Export manifest: missing required 'clips' field")
    if output is None and "output" not in raw:
        raise ValidationError("Export manifest: missing required 'output' field")

    paths = raw.get("paths", {}) or {}
    try:
        clips = [_parse_clip(i, c, paths) for i, c in enumerate(raw["clips"] or [])]
        out = output if output is not None else resolve_path_vars(str(raw["output"]), paths)
    except ValidationError:
        raise
    except ValueError as e:
        raise ValidationError(f"Export manifest: {e}") from e

    return ExportRequest(
        clips=clips,
        output=out,
        transition=_parse_transition(raw.get("transition")),
        resolution=raw.get("resolution", "source"),
    )


def validate_clip_paths(request: ExportRequest) -> None:
    """Check that every clip file exists on disk.

    Raises:
        FileNotFoundError: Lists all missing files.
    """
    missing = [str(c.path) for c in request.clips if not c.path.exists()]
    if missing:
        msg = f"Missing {len(missing)} clip file(s):\n"
        for p in missing:
            msg += f"  - {p}\n"
        raise FileNotFoundError(msg)
