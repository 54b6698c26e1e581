"""Error taxonomy for export operations.

Every failure that reaches a caller is an ExportError. Engine invocation
failures share the EngineError base so the concat fallback can catch all
of them at once:

  ExportError
    ConfigurationError   engine path unresolved, unset, or set twice
    ValidationError      bad caller parameters, raised before any spawn
    ProbeError           duration metadata missing or unparseable
    EngineError          an engine invocation did not succeed
      InvocationError    process failed to spawn
      EngineFailure      process ran and exited nonzero
      EngineTimeoutError bounded wait exceeded, process killed

Messages follow "<stage> failed: <diagnostic text>" where the diagnostic
text is the engine's captured stderr, verbatim.
"""


class ExportError(Exception):
    """Base class for all clipexport errors."""


class ConfigurationError(ExportError):
    """Engine executable path is missing or was initialized twice."""


class ValidationError(ExportError, ValueError):
    """Caller-supplied parameters violate a precondition."""


class ProbeError(ExportError):
    """Media metadata could not be read or lacked a usable duration."""


class EngineError(ExportError):
    """An engine invocation failed.

    Attributes:
        stage: Human-readable stage name, e.g. "FFmpeg trim".
        outcome: The ProcessOutcome describing the failed invocation.
    """

    def __init__(self, stage, detail, outcome=None):
        super().__init__(f"{stage} failed: {detail}")
        self.stage = stage
        self.detail = detail
        self.outcome = outcome


class InvocationError(EngineError):
    """The engine process could not be spawned."""


class EngineFailure(EngineError):
    """The engine exited with a nonzero status."""

    @property
    def stderr(self):
        return self.detail


class EngineTimeoutError(EngineError, TimeoutError):
    """The engine exceeded its time bound and was killed."""
