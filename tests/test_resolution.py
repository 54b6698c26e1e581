"""Tests for resolution presets and the finalize pass."""

import pytest

from clipexport.errors import ValidationError
from clipexport.resolution import (
    finalize,
    normalize_resolution,
    scale_args,
    scale_filter,
)


class TestPresets:
    def test_source_has_no_scale(self):
        assert scale_filter("source") is None
        assert scale_args("source") == []

    def test_none_is_source(self):
        assert normalize_resolution(None) == "source"
        assert scale_args(None) == []

    @pytest.mark.parametrize("preset,height", [("720p", 720), ("1080p", 1080)])
    def test_height_presets_keep_aspect(self, preset, height):
        # -2: width follows the aspect ratio, rounded to an even number.
        assert scale_filter(preset) == f"scale=-2:{height}"
        assert scale_args(preset) == ["-vf", f"scale=-2:{height}"]

    def test_unknown_preset_raises(self):
        with pytest.raises(ValidationError, match="Invalid resolution"):
            scale_args("480p")


class TestFinalize:
    def test_source_remuxes(self, fake_config, fake_engine):
        finalize(fake_config, "/w/step.mp4", "/out/final.mp4", "source")
        assert fake_engine.stages == ["Finalization"]
        args = fake_engine.calls[0][1]
        assert args == ["-i", "/w/step.mp4", "-c", "copy", "-y", "/out/final.mp4"]

    def test_preset_rescales(self, fake_config, fake_engine):
        finalize(fake_config, "/w/step.mp4", "/out/final.mp4", "1080p")
        assert fake_engine.stages == ["FFmpeg scaling"]
        args = fake_engine.calls[0][1]
        assert args[args.index("-vf") + 1] == "scale=-2:1080"
        assert "libx264" in args
