"""Process runner — every engine invocation goes through here.

Two wait modes:
  - unbounded (timeout=None): run to completion, capture stderr.
  - bounded: poll the child every `config.poll_interval` seconds and kill
    it once `timeout` seconds have elapsed.

The bounded mode sends stderr to an anonymous temp file instead of a
pipe. ffmpeg writes progress to stderr continuously, and a pipe nobody
drains while we poll would fill and stall the child.

Exit code 0 is the only success. Failures raise an EngineError subclass
whose message is "<stage> failed: <stderr>" and whose `outcome` holds the
ProcessOutcome.
"""

import enum
import logging
import shlex
import subprocess
import tempfile
import time
from dataclasses import dataclass
from pathlib import Path

from .errors import EngineFailure, EngineTimeoutError, InvocationError

logger = logging.getLogger(__name__)


class OutcomeStatus(enum.Enum):
    SUCCESS = "success"
    NONZERO_EXIT = "nonzero-exit"
    SPAWN_FAILURE = "spawn-failure"
    TIMEOUT = "timeout"


@dataclass(frozen=True)
class ProcessOutcome:
    """Result of one engine invocation."""

    status: OutcomeStatus
    returncode: int | None = None
    stderr: str = ""
    stage: str = ""
    stdout: str = ""

    @property
    def ok(self) -> bool:
        return self.status is OutcomeStatus.SUCCESS


def _decode(data: bytes | None) -> str:
    if not data:
        return ""
    return data.decode("utf-8", errors="replace")


def _check(outcome: ProcessOutcome) -> ProcessOutcome:
    if outcome.status is OutcomeStatus.NONZERO_EXIT:
        raise EngineFailure(outcome.stage, outcome.stderr, outcome)
    return outcome


def _run_to_completion(cmd, stage) -> ProcessOutcome:
    try:
        result = subprocess.run(cmd, capture_output=True)
    except OSError as e:
        outcome = ProcessOutcome(OutcomeStatus.SPAWN_FAILURE, None, str(e), stage)
        raise InvocationError(stage, str(e), outcome) from e

    status = OutcomeStatus.SUCCESS if result.returncode == 0 else OutcomeStatus.NONZERO_EXIT
    return ProcessOutcome(
        status,
        result.returncode,
        _decode(result.stderr),
        stage,
        _decode(result.stdout),
    )


def _run_bounded(cmd, stage, timeout, poll_interval) -> ProcessOutcome:
    with tempfile.TemporaryFile() as err, tempfile.TemporaryFile() as out:
        try:
            proc = subprocess.Popen(cmd, stdout=out, stderr=err)
        except OSError as e:
            outcome = ProcessOutcome(OutcomeStatus.SPAWN_FAILURE, None, str(e), stage)
            raise InvocationError(stage, str(e), outcome) from e

        start = time.monotonic()
        try:
            while proc.poll() is None:
                if time.monotonic() - start > timeout:
                    proc.kill()
                    proc.wait()
                    logger.info("%s killed after %ss", stage, timeout)
                    err.seek(0)
                    outcome = ProcessOutcome(
                        OutcomeStatus.TIMEOUT, proc.returncode, _decode(err.read()), stage,
                    )
                    raise EngineTimeoutError(
                        stage, f"operation timed out after {timeout:g} seconds", outcome,
                    )
                time.sleep(poll_interval)
        finally:
            # Reap on every exit path, including KeyboardInterrupt mid-poll.
            if proc.poll() is None:
                proc.kill()
                proc.wait()

        err.seek(0)
        out.seek(0)
        status = OutcomeStatus.SUCCESS if proc.returncode == 0 else OutcomeStatus.NONZERO_EXIT
        return ProcessOutcome(
            status, proc.returncode, _decode(err.read()), stage, _decode(out.read()),
        )


def run_engine(
    config,
    args: list[str],
    stage: str,
    timeout: float | None = None,
    executable: str | Path | None = None,
) -> ProcessOutcome:
    """Run the engine with `args` and return its outcome.

    Args:
        config: EngineConfig supplying the executable and poll interval.
        args: Arguments after the executable.
        stage: Stage name used in error messages, e.g. "FFmpeg trim".
        timeout: Seconds before the process is killed. None waits forever.
        executable: Override the binary (ffprobe runs through here too).

    Returns:
        A successful ProcessOutcome.

    Raises:
        ConfigurationError: Engine path not initialized.
        InvocationError: The process could not be spawned.
        EngineFailure: Nonzero exit; message carries stderr verbatim.
        EngineTimeoutError: The time bound elapsed and the process was killed.
    """
    exe = executable if executable is not None else config.ffmpeg
    cmd = [str(exe), *[str(a) for a in args]]
    logger.debug("%s: %s", stage, shlex.join(cmd))

    if timeout is None:
        outcome = _run_to_completion(cmd, stage)
    else:
        outcome = _run_bounded(cmd, stage, timeout, config.poll_interval)
    return _check(outcome)


def run_ffmpeg(config, args: list[str], timeout: float | None = None) -> int:
    """Run ffmpeg with raw arguments and return its exit code."""
    return run_engine(config, args, "FFmpeg", timeout=timeout).returncode
