"""Request-scoped temporary workspace for intermediate artifacts.

Per-clip fade outputs, crossfade step files, and rewritten concat lists
all live in one directory owned by a single export request. The directory
name carries the request id, so concurrent requests never collide, and it
is removed when the `with` block exits, whether by return or by exception.
"""

import contextlib
import logging
import tempfile
import uuid
from pathlib import Path

logger = logging.getLogger(__name__)


class TempWorkspace:
    """Owned temp directory, created on enter and removed on exit."""

    def __init__(self, base_dir: str | Path | None = None, request_id: str | None = None):
        self.request_id = request_id or uuid.uuid4().hex
        self.base_dir = Path(base_dir).resolve() if base_dir is not None else None
        self._tmp = None
        self.path = None

    def __enter__(self):
        if self.base_dir is not None:
            self.base_dir.mkdir(parents=True, exist_ok=True)
        self._tmp = tempfile.TemporaryDirectory(
            prefix=f"clipexport-{self.request_id}-",
            dir=self.base_dir,
        )
        self.path = Path(self._tmp.name)
        logger.debug("Workspace created: %s", self.path)
        return self

    def __exit__(self, exc_type, exc, tb):
        self.cleanup()
        return False

    def file(self, name: str) -> Path:
        """Path for an intermediate named `name` inside the workspace."""
        if self.path is None:
            raise RuntimeError("Workspace is not open")
        return self.path / name

    def cleanup(self) -> None:
        if self._tmp is not None:
            logger.debug("Workspace removed: %s", self.path)
            self._tmp.cleanup()
            self._tmp = None


@contextlib.contextmanager
def workspace_scope(workspace: TempWorkspace | None = None, base_dir=None, request_id=None):
    """Yield the caller's open workspace, or own a fresh one for the block."""
    if workspace is not None:
        yield workspace
        return
    with TempWorkspace(base_dir=base_dir, request_id=request_id) as ws:
        yield ws
