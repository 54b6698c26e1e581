"""Tests for engine configuration."""

import tempfile
import threading
from pathlib import Path

import pytest
import yaml

from clipexport.config import (
    FFMPEG_TIMEOUT_SECS,
    FFMPEG_TIMEOUT_SHORT,
    EngineConfig,
    build_config,
    load_engine_config,
)
from clipexport.errors import ConfigurationError, ValidationError


def _write_config(content: dict) -> str:
    """Write a config dict to a temp YAML file, return path."""
    f = tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False)
    yaml.dump(content, f)
    f.close()
    return f.name


class TestEngineConfig:
    def test_defaults(self):
        config = EngineConfig(ffmpeg="/opt/ffmpeg")
        assert config.timeout == FFMPEG_TIMEOUT_SECS
        assert config.probe_timeout == FFMPEG_TIMEOUT_SHORT
        assert config.poll_interval == 0.1
        assert config.video_codec == "libx264"

    def test_ffprobe_defaults_to_sibling(self):
        config = EngineConfig(ffmpeg="/opt/bin/ffmpeg")
        assert config.ffprobe.parent == Path("/opt/bin")
        assert config.ffprobe.name.startswith("ffprobe")

    def test_unset_path_raises(self):
        config = EngineConfig()
        assert not config.initialized
        with pytest.raises(ConfigurationError, match="not initialized"):
            config.ffmpeg

    def test_set_engine_path_once(self):
        config = EngineConfig()
        config.set_engine_path("/opt/ffmpeg", "/opt/ffprobe")
        assert config.ffmpeg == Path("/opt/ffmpeg")
        assert config.ffprobe == Path("/opt/ffprobe")

    def test_second_set_is_rejected(self):
        config = EngineConfig(ffmpeg="/opt/ffmpeg")
        with pytest.raises(ConfigurationError, match="already initialized"):
            config.set_engine_path("/other/ffmpeg")
        assert config.ffmpeg == Path("/opt/ffmpeg")

    def test_concurrent_set_only_one_wins(self):
        config = EngineConfig()
        errors = []

        def _set(i):
            try:
                config.set_engine_path(f"/engine/{i}")
            except ConfigurationError as e:
                errors.append(e)

        threads = [threading.Thread(target=_set, args=(i,)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(errors) == 7

    def test_invalid_codec(self):
        with pytest.raises(ValidationError, match="codec"):
            EngineConfig(video_codec="vp9")

    def test_invalid_timeout(self):
        with pytest.raises(ValidationError, match="timeout"):
            EngineConfig(timeout=0)

    def test_invalid_poll_interval(self):
        with pytest.raises(ValidationError, match="poll_interval"):
            EngineConfig(poll_interval=0)

    def test_resolve_uses_imageio_ffmpeg(self):
        config = EngineConfig.resolve()
        assert config.initialized
        assert config.ffmpeg.exists()


class TestLoadEngineConfig:
    def test_explicit_paths_and_settings(self, tmp_path):
        path = _write_config({
            "engine": {
                "ffmpeg": "/opt/ffmpeg",
                "ffprobe": "/opt/ffprobe",
                "timeout": 60,
                "probe_timeout": 5,
                "poll_interval": 0.05,
            },
            "encoding": {"video_codec": "h264_nvenc"},
            "temp_root": str(tmp_path),
        })
        config = load_engine_config(path)
        assert config.ffmpeg == Path("/opt/ffmpeg")
        assert config.ffprobe == Path("/opt/ffprobe")
        assert config.timeout == 60
        assert config.probe_timeout == 5
        assert config.poll_interval == 0.05
        assert config.video_codec == "h264_nvenc"
        assert config.temp_root == tmp_path

    def test_null_timeout_means_unbounded(self):
        path = _write_config({"engine": {"ffmpeg": "/opt/ffmpeg", "timeout": None}})
        assert load_engine_config(path).timeout is None

    def test_empty_file_resolves_engine(self):
        path = _write_config({})
        assert load_engine_config(path).initialized

    def test_non_numeric_timeout_raises(self):
        path = _write_config({"engine": {"ffmpeg": "/opt/ffmpeg", "timeout": "long"}})
        with pytest.raises(ValidationError, match="engine.timeout"):
            load_engine_config(path)

    def test_null_poll_interval_raises(self):
        path = _write_config({"engine": {"ffmpeg": "/opt/ffmpeg", "poll_interval": None}})
        with pytest.raises(ValidationError, match="poll_interval"):
            load_engine_config(path)


class TestBuildConfig:
    def test_gpu_switches_codec(self):
        path = _write_config({"engine": {"ffmpeg": "/opt/ffmpeg"}})
        assert build_config(path, gpu=True).video_codec == "h264_nvenc"

    def test_without_file(self):
        assert build_config().initialized
