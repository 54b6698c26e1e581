"""Data model for export requests.

All request types are frozen dataclasses: an ExportRequest is built by the
caller and never changes while it is being processed. ClipReference only
points at a file; nothing here touches the file itself.
"""

import uuid
from dataclasses import dataclass, field
from pathlib import Path

from .common import is_seconds
from .errors import ValidationError
from .resolution import normalize_resolution


@dataclass(frozen=True)
class ClipReference:
    """A media file plus optional fade durations in seconds."""

    path: Path
    fade_in: float = 0.0
    fade_out: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, "path", Path(self.path))
        for name in ("fade_in", "fade_out"):
            value = getattr(self, name)
            if value is None:
                value = 0.0
            if not is_seconds(value) or value < 0:
                raise ValidationError(
                    f"Clip {self.path}: {name} must be a finite number >= 0, got {value!r}"
                )
            object.__setattr__(self, name, float(value))

    @property
    def has_fades(self) -> bool:
        return self.fade_in > 0 or self.fade_out > 0


VALID_TRANSITION_KINDS = {"none", "crossfade"}


@dataclass(frozen=True)
class TransitionMode:
    """How adjacent clips are joined: hard cut or crossfade of `duration`."""

    kind: str = "none"
    duration: float = 0.0

    def __post_init__(self):
        if self.kind not in VALID_TRANSITION_KINDS:
            raise ValidationError(
                f"Invalid transition type '{self.kind}'. "
                f"Valid: {sorted(VALID_TRANSITION_KINDS)}"
            )
        if self.kind == "crossfade":
            if not is_seconds(self.duration) or self.duration <= 0:
                raise ValidationError(
                    f"Crossfade duration must be a finite number > 0, got {self.duration!r}"
                )
            object.__setattr__(self, "duration", float(self.duration))

    @classmethod
    def none(cls) -> "TransitionMode":
        return cls("none", 0.0)

    @classmethod
    def crossfade(cls, duration: float) -> "TransitionMode":
        return cls("crossfade", duration)

    @property
    def is_crossfade(self) -> bool:
        return self.kind == "crossfade"


@dataclass(frozen=True)
class ExportRequest:
    """An ordered, non-empty clip sequence and how to render it."""

    clips: tuple
    output: Path
    transition: TransitionMode = field(default_factory=TransitionMode.none)
    resolution: str = "source"
    request_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def __post_init__(self):
        if isinstance(self.clips, (str, Path, ClipReference)):
            raise ValidationError(
                f"clips must be a sequence of clips, got a single {type(self.clips).__name__}"
            )
        clips = tuple(
            c if isinstance(c, ClipReference) else ClipReference(c)
            for c in self.clips
        )
        if not clips:
            raise ValidationError("No clips to export")
        object.__setattr__(self, "clips", clips)
        object.__setattr__(self, "output", Path(self.output))
        object.__setattr__(self, "resolution", normalize_resolution(self.resolution))

    @property
    def has_fades(self) -> bool:
        return any(c.has_fades for c in self.clips)

    @property
    def fade_effects(self) -> list[tuple[float, float]]:
        """Per-clip (fade_in, fade_out) pairs, in clip order."""
        return [(c.fade_in, c.fade_out) for c in self.clips]
