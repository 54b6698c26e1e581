"""Tests for cut operations.

Uses the shared source_video fixture from conftest.py.
Uses moviepy for duration probing (imageio_ffmpeg does NOT bundle ffprobe).
"""

import pytest
from moviepy import VideoFileClip

from clipexport.cut import (
    split_clip,
    transcode_to_mp4,
    trim_clip,
    validate_split,
)
from clipexport.errors import EngineFailure, ValidationError


def _get_duration(path):
    """Probe video duration using moviepy."""
    with VideoFileClip(str(path)) as clip:
        return clip.duration


class TestTrimArgs:
    def test_seek_before_input(self, fake_config, fake_engine, tmp_path):
        trim_clip(fake_config, "/m/src.mp4", 10, 30, tmp_path / "clip.mp4")
        assert fake_engine.stages == ["FFmpeg trim"]
        args = fake_engine.calls[0][1]
        assert args[:6] == ["-ss", "10", "-i", "/m/src.mp4", "-t", "20"]
        assert args[-1] == str(tmp_path / "clip.mp4")

    @pytest.mark.parametrize("start,end", [(5, 5), (5, 2)])
    def test_end_not_after_start_raises(self, fake_config, fake_engine, start, end):
        with pytest.raises(ValidationError, match="Invalid trim duration"):
            trim_clip(fake_config, "/m/src.mp4", start, end, "/out/x.mp4")
        assert fake_engine.calls == []

    @pytest.mark.parametrize("start,end", [
        (float("nan"), 3.0), (1.0, float("nan")), (0.0, float("inf")),
    ])
    def test_non_finite_times_raise(self, fake_config, fake_engine, start, end):
        with pytest.raises(ValidationError, match="finite number"):
            trim_clip(fake_config, "/m/src.mp4", start, end, "/out/x.mp4")
        assert fake_engine.calls == []

    def test_engine_failure_names_stage(self, fake_config, fake_engine, tmp_path):
        fake_engine.fail["FFmpeg trim"] = "No such file"
        with pytest.raises(EngineFailure, match="FFmpeg trim failed"):
            trim_clip(fake_config, "/m/src.mp4", 0, 1, tmp_path / "x.mp4")


class TestValidateSplit:
    def test_valid(self):
        validate_split(5.0, 10.0)

    @pytest.mark.parametrize("at", [0, -1, 10, 12])
    def test_outside_clip(self, at):
        with pytest.raises(ValidationError, match="Invalid split time"):
            validate_split(at, 10.0)

    @pytest.mark.parametrize("at,total", [
        (float("nan"), 10.0), (float("inf"), 10.0), (5.0, float("nan")), (5.0, float("inf")),
    ])
    def test_non_finite_raises(self, at, total):
        with pytest.raises(ValidationError, match="finite number"):
            validate_split(at, total)

    def test_left_too_short(self):
        with pytest.raises(ValidationError, match="too short"):
            validate_split(0.1, 10.0)

    def test_right_too_short(self):
        with pytest.raises(ValidationError, match="too short"):
            validate_split(9.9, 10.0)


class TestSplitArgs:
    def test_two_segments(self, fake_config, fake_engine, tmp_path):
        left, right = tmp_path / "l.mp4", tmp_path / "r.mp4"
        assert split_clip(fake_config, "/m/src.mp4", 4, left, right, 10) == 0
        assert fake_engine.stages == ["FFmpeg split (left part)", "FFmpeg split (right part)"]
        left_args, right_args = (args for _, args in fake_engine.calls)
        assert left_args[:6] == ["-ss", "0", "-i", "/m/src.mp4", "-t", "4"]
        assert right_args[:6] == ["-ss", "4", "-i", "/m/src.mp4", "-t", "6"]

    @pytest.mark.parametrize("at", [0.1, float("nan")])
    def test_invalid_split_never_spawns(self, fake_config, fake_engine, at):
        with pytest.raises(ValidationError):
            split_clip(fake_config, "/m/src.mp4", at, "/l.mp4", "/r.mp4", 10)
        assert fake_engine.calls == []

    def test_right_part_skipped_when_left_fails(self, fake_config, fake_engine, tmp_path):
        fake_engine.fail["FFmpeg split (left part)"] = "boom"
        with pytest.raises(EngineFailure, match="left part"):
            split_clip(fake_config, "/m/src.mp4", 4, tmp_path / "l.mp4", tmp_path / "r.mp4", 10)
        assert fake_engine.stages == ["FFmpeg split (left part)"]


class TestTranscodeArgs:
    def test_scale_and_codec(self, fake_config, fake_engine, tmp_path):
        transcode_to_mp4(fake_config, "/m/in.mov", tmp_path / "out.mp4", "720p")
        args = fake_engine.calls_for("FFmpeg transcode")[0]
        assert args[args.index("-vf") + 1] == "scale=-2:720"
        assert args[args.index("-c:a") + 1] == "aac"


class TestCutIntegration:
    def test_trim(self, engine_config, source_video, tmp_path):
        out = tmp_path / "clip.mp4"
        trim_clip(engine_config, source_video, 1.0, 3.0, out)
        assert out.exists()
        assert 1.5 < _get_duration(out) < 2.5  # ~2 seconds, some tolerance for codec

    def test_trim_preserves_audio(self, engine_config, source_video, tmp_path):
        out = tmp_path / "clip.mp4"
        trim_clip(engine_config, source_video, 1.0, 3.0, out)
        with VideoFileClip(str(out)) as clip:
            assert clip.audio is not None

    def test_trim_creates_parent_dirs(self, engine_config, source_video, tmp_path):
        out = tmp_path / "nested" / "dir" / "clip.mp4"
        trim_clip(engine_config, source_video, 0.0, 2.0, out)
        assert out.exists()

    def test_split(self, engine_config, source_video, tmp_path):
        left, right = tmp_path / "left.mp4", tmp_path / "right.mp4"
        split_clip(engine_config, source_video, 2.0, left, right, 5.0)
        assert 1.5 < _get_duration(left) < 2.5
        assert 2.5 < _get_duration(right) < 3.5

    def test_source_untouched(self, engine_config, source_video, tmp_path):
        before = source_video.read_bytes()
        trim_clip(engine_config, source_video, 0.0, 1.0, tmp_path / "x.mp4")
        assert source_video.read_bytes() == before

    def test_transcode_scales(self, engine_config, source_video, tmp_path):
        out = tmp_path / "720.mp4"
        transcode_to_mp4(engine_config, source_video, out, "720p")
        with VideoFileClip(str(out)) as clip:
            assert clip.h == 720
