"""Fade preprocessing — per-clip fade-in/fade-out via re-encode.

A fade-in covers [0, fade_in) and a fade-out covers
[total - fade_out, total), on both the video (fade) and audio (afade)
streams. Clips without fades are never re-encoded; they are copied or
passed through as-is.
"""

import logging
import shutil
from pathlib import Path

from .common import encode_args, fmt_seconds, is_seconds
from .errors import ValidationError
from .probe import probe_duration
from .runner import run_engine

logger = logging.getLogger(__name__)


def _check_fade(name, value):
    if value is None:
        return 0.0
    if not is_seconds(value) or value < 0:
        raise ValidationError(f"{name} must be a finite number >= 0, got {value!r}")
    return float(value)


def fade_filters(
    fade_in: float | None,
    fade_out: float | None,
    total_duration: float | None = None,
) -> tuple[list[str], list[str]]:
    """Build (video_filters, audio_filters) for the requested fades.

    Raises:
        ValidationError: Negative fades, a fade-out without a total
            duration, or a fade-out longer than the clip.
    """
    fade_in = _check_fade("fade_in", fade_in)
    fade_out = _check_fade("fade_out", fade_out)

    video, audio = [], []
    if fade_in > 0:
        d = fmt_seconds(fade_in)
        video.append(f"fade=t=in:st=0:d={d}")
        audio.append(f"afade=t=in:st=0:d={d}")

    if fade_out > 0:
        if total_duration is None:
            raise ValidationError("fade_out requires the clip's total duration")
        if not is_seconds(total_duration):
            raise ValidationError(f"Invalid clip duration {total_duration!r}")
        if fade_out > total_duration:
            raise ValidationError(
                f"fade_out ({fade_out}) exceeds clip duration ({total_duration})"
            )
        st = fmt_seconds(total_duration - fade_out)
        d = fmt_seconds(fade_out)
        video.append(f"fade=t=out:st={st}:d={d}")
        audio.append(f"afade=t=out:st={st}:d={d}")

    return video, audio


def apply_fade_effects(
    config,
    input: str | Path,
    output: str | Path,
    fade_in: float | None = None,
    fade_out: float | None = None,
    total_duration: float | None = None,
) -> int:
    """Re-encode `input` to `output` with fades applied.

    When a fade-out is requested and `total_duration` is not given, the
    duration is probed first. The source file is left untouched.

    Returns:
        The engine's exit code.
    """
    fade_in = _check_fade("fade_in", fade_in)
    fade_out = _check_fade("fade_out", fade_out)
    if fade_out > 0 and total_duration is None:
        total_duration = probe_duration(config, input)

    video, audio = fade_filters(fade_in, fade_out, total_duration)

    args = ["-i", str(input)]
    if video:
        args += ["-vf", ",".join(video)]
    if audio:
        args += ["-af", ",".join(audio)]
    args += [*encode_args(config.video_codec), "-y", str(output)]

    logger.info("Fading %s (in=%.2fs, out=%.2fs)", input, fade_in, fade_out)
    return run_engine(config, args, "FFmpeg fade", timeout=config.timeout).returncode


def prepare_clips(config, clips, workspace, copy_unfaded: bool = True) -> list[Path]:
    """Run the fade stage over `clips` and return the paths to feed onward.

    Args:
        config: EngineConfig.
        clips: ClipReference sequence, in order.
        workspace: Open TempWorkspace receiving clip_<i>.mp4 outputs.
        copy_unfaded: Copy clips without fades into the workspace. When
            False they are used from their original location.

    Returns:
        One path per clip, in the same order.
    """
    prepared = []
    for i, clip in enumerate(clips):
        target = workspace.file(f"clip_{i}{clip.path.suffix or '.mp4'}")
        if clip.has_fades:
            target = target.with_suffix(".mp4")
            apply_fade_effects(
                config, clip.path, target,
                fade_in=clip.fade_in or None,
                fade_out=clip.fade_out or None,
            )
            prepared.append(target)
        elif copy_unfaded:
            shutil.copy2(clip.path, target)
            prepared.append(target)
        else:
            prepared.append(clip.path)
    return prepared
