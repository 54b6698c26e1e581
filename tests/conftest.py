"""Shared test fixtures for clipexport tests."""

import json
import subprocess

import pytest
import imageio_ffmpeg

from clipexport.config import EngineConfig
from clipexport.errors import EngineFailure
from clipexport.runner import OutcomeStatus, ProcessOutcome

_FFMPEG = imageio_ffmpeg.get_ffmpeg_exe()

# Every module that calls the engine imports run_engine by name.
_ENGINE_MODULES = ["concat", "crossfade", "cut", "fades", "probe", "resolution"]


@pytest.fixture
def source_video(tmp_path):
    """Create a 5-second test video (320x240, 10fps) with audio using ffmpeg."""
    out = tmp_path / "source.mp4"
    subprocess.run(
        [
            _FFMPEG, "-y",
            "-f", "lavfi", "-i", "color=c=blue:s=320x240:d=5:r=10",
            "-f", "lavfi", "-i", "anullsrc=r=44100:cl=mono",
            "-shortest",
            "-c:v", "libx264", "-crf", "28", "-pix_fmt", "yuv420p",
            "-c:a", "aac", "-b:a", "32k",
            str(out),
        ],
        check=True,
        capture_output=True,
    )
    return out


@pytest.fixture
def engine_config(tmp_path):
    """Real engine config: imageio-ffmpeg's binary, system ffprobe if any."""
    return EngineConfig.resolve(temp_root=tmp_path / "work")


@pytest.fixture
def fake_config(tmp_path):
    """Config pointing at binaries that are never actually spawned."""
    return EngineConfig(
        ffmpeg="/fake/ffmpeg", ffprobe="/fake/ffprobe",
        temp_root=tmp_path / "work",
    )


class FakeEngine:
    """Stand-in for run_engine that records every invocation.

    - fail: stage name -> stderr text; matching stages raise EngineFailure.
    - durations: path substring -> seconds, answered for FFprobe calls
      (default_duration otherwise).
    """

    def __init__(self):
        self.calls = []
        self.fail = {}
        self.durations = {}
        self.default_duration = 5.0

    def __call__(self, config, args, stage, timeout=None, executable=None):
        args = [str(a) for a in args]
        self.calls.append((stage, args))
        if stage in self.fail:
            outcome = ProcessOutcome(OutcomeStatus.NONZERO_EXIT, 1, self.fail[stage], stage)
            raise EngineFailure(stage, self.fail[stage], outcome)

        stdout = ""
        if stage == "FFprobe":
            path = args[-1]
            duration = self.default_duration
            for key, value in self.durations.items():
                if key in path:
                    duration = value
            stdout = json.dumps({"format": {"duration": f"{duration:.6f}"}})
        return ProcessOutcome(OutcomeStatus.SUCCESS, 0, "", stage, stdout)

    @property
    def stages(self):
        return [stage for stage, _ in self.calls]

    def calls_for(self, stage):
        return [args for s, args in self.calls if s == stage]


@pytest.fixture
def fake_engine(monkeypatch):
    engine = FakeEngine()
    for name in _ENGINE_MODULES:
        monkeypatch.setattr(f"clipexport.{name}.run_engine", engine)
    return engine


@pytest.fixture
def clip_files(tmp_path):
    """Three placeholder clip files (content is never decoded)."""
    paths = []
    for name in ("a.mp4", "b.mp4", "c.mp4"):
        p = tmp_path / "media" / name
        p.parent.mkdir(exist_ok=True)
        p.write_bytes(b"fake-" + name.encode())
        paths.append(p)
    return paths
