"""Engine configuration — executable paths, timeouts, encoder choice.

An EngineConfig is built once at startup and passed into every operation.
The engine path is write-once: it may be given to the constructor or set
later with set_engine_path(), but a second assignment is rejected.

Engine config file schema (all keys optional):
  engine:
    ffmpeg: /usr/bin/ffmpeg      # default: imageio-ffmpeg's bundled binary
    ffprobe: /usr/bin/ffprobe    # default: PATH lookup, then ffmpeg's sibling
    timeout: 300
    probe_timeout: 30
    poll_interval: 0.1
  encoding:
    video_codec: libx264         # or h264_nvenc
  temp_root: /scratch/clipexport
"""

import os
import shutil
import threading
from pathlib import Path

import imageio_ffmpeg
import yaml

from .errors import ConfigurationError, ValidationError


# ── Timeouts ──────────────────────────────────────────────────────

FFMPEG_TIMEOUT_SECS = 5 * 60
FFMPEG_TIMEOUT_SHORT = 30
FFMPEG_TIMEOUT_LONG = 30 * 60

POLL_INTERVAL = 0.1

VALID_VIDEO_CODECS = {"libx264", "h264_nvenc"}


def _ffprobe_name():
    return "ffprobe.exe" if os.name == "nt" else "ffprobe"


def _sibling_ffprobe(ffmpeg_path: Path) -> Path:
    """ffprobe living next to the given ffmpeg binary."""
    return ffmpeg_path.with_name(_ffprobe_name())


class EngineConfig:
    """Process-wide engine settings with a write-once engine path."""

    def __init__(
        self,
        ffmpeg: str | Path | None = None,
        ffprobe: str | Path | None = None,
        timeout: float | None = FFMPEG_TIMEOUT_SECS,
        probe_timeout: float | None = FFMPEG_TIMEOUT_SHORT,
        poll_interval: float = POLL_INTERVAL,
        video_codec: str = "libx264",
        temp_root: str | Path | None = None,
    ):
        if timeout is not None and timeout <= 0:
            raise ValidationError(f"timeout must be > 0, got {timeout!r}")
        if probe_timeout is not None and probe_timeout <= 0:
            raise ValidationError(f"probe_timeout must be > 0, got {probe_timeout!r}")
        if poll_interval <= 0:
            raise ValidationError(f"poll_interval must be > 0, got {poll_interval!r}")
        if video_codec not in VALID_VIDEO_CODECS:
            raise ValidationError(
                f"Unknown video codec '{video_codec}'. "
                f"Valid: {sorted(VALID_VIDEO_CODECS)}"
            )

        self.timeout = timeout
        self.probe_timeout = probe_timeout
        self.poll_interval = poll_interval
        self.video_codec = video_codec
        self.temp_root = Path(temp_root) if temp_root is not None else None

        self._lock = threading.Lock()
        self._ffmpeg = None
        self._ffprobe = None
        if ffmpeg is not None:
            self.set_engine_path(ffmpeg, ffprobe)

    def set_engine_path(self, ffmpeg, ffprobe=None) -> None:
        """Establish the engine executable. Allowed exactly once."""
        with self._lock:
            if self._ffmpeg is not None:
                raise ConfigurationError(
                    f"FFmpeg path already initialized to {self._ffmpeg}"
                )
            self._ffmpeg = Path(ffmpeg)
            self._ffprobe = Path(ffprobe) if ffprobe else _sibling_ffprobe(self._ffmpeg)

    @property
    def initialized(self) -> bool:
        return self._ffmpeg is not None

    @property
    def ffmpeg(self) -> Path:
        if self._ffmpeg is None:
            raise ConfigurationError("FFmpeg path not initialized")
        return self._ffmpeg

    @property
    def ffprobe(self) -> Path:
        if self._ffprobe is None:
            raise ConfigurationError("FFprobe path not initialized")
        return self._ffprobe

    @classmethod
    def resolve(cls, ffmpeg=None, ffprobe=None, **kwargs) -> "EngineConfig":
        """Build a config, filling in engine paths from the environment.

        ffmpeg falls back to the binary bundled with imageio-ffmpeg. ffprobe
        is not bundled there, so it comes from PATH or sits next to ffmpeg.
        """
        if ffmpeg is None:
            try:
                ffmpeg = imageio_ffmpeg.get_ffmpeg_exe()
            except RuntimeError as e:
                raise ConfigurationError(f"Could not resolve FFmpeg: {e}") from e
        if ffprobe is None:
            ffprobe = shutil.which("ffprobe") or _sibling_ffprobe(Path(ffmpeg))
        return cls(ffmpeg=ffmpeg, ffprobe=ffprobe, **kwargs)

    def __repr__(self):
        return (
            f"EngineConfig(ffmpeg={self._ffmpeg}, ffprobe={self._ffprobe}, "
            f"timeout={self.timeout}, video_codec={self.video_codec})"
        )


def load_engine_config(config_path: str | Path) -> EngineConfig:
    """Load an EngineConfig from a YAML file.

    Args:
        config_path: Path to the YAML engine config.

    Returns:
        An initialized EngineConfig.

    Raises:
        ValidationError: Malformed sections or values.
    """
    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ValidationError("Engine config: top level must be a mapping")

    engine = raw.get("engine", {}) or {}
    encoding = raw.get("encoding", {}) or {}
    if not isinstance(engine, dict):
        raise ValidationError("Engine config: 'engine' must be a mapping")
    if not isinstance(encoding, dict):
        raise ValidationError("Engine config: 'encoding' must be a mapping")

    kwargs = {}
    for key in ("timeout", "probe_timeout", "poll_interval"):
        if key in engine:
            value = engine[key]
            # A null timeout means "wait without a bound"; the poll interval has no such form.
            nullable = key != "poll_interval"
            if not (value is None and nullable) and not isinstance(value, (int, float)):
                raise ValidationError(
                    f"Engine config: engine.{key} must be a number, got {value!r}"
                )
            kwargs[key] = value
    if "video_codec" in encoding:
        kwargs["video_codec"] = encoding["video_codec"]
    if raw.get("temp_root"):
        kwargs["temp_root"] = raw["temp_root"]

    return EngineConfig.resolve(
        ffmpeg=engine.get("ffmpeg"),
        ffprobe=engine.get("ffprobe"),
        **kwargs,
    )


def build_config(config_path=None, gpu: bool = False) -> EngineConfig:
    """EngineConfig for the CLIs: from a YAML file if given, else resolved.

    --gpu switches the encoder to h264_nvenc regardless of the file.
    """
    if config_path is not None:
        config = load_engine_config(config_path)
    else:
        config = EngineConfig.resolve()
    if gpu:
        config.video_codec = "h264_nvenc"
    return config
