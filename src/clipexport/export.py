"""Export orchestration — one request in, one finished video out.

Pipeline:
  1. Validate the request (done at ExportRequest construction, so an
     invalid request never reaches the engine).
  2. Open a workspace keyed by the request id.
  3. Crossfade transition: fade the clips that ask for it, then merge
     pairwise (crossfade.export_with_crossfades).
     No transition: write a concat list and let the strategy selector
     join it, with fades applied per clip (concat.export_concat).
  4. Resolution preset is applied by whichever strategy ran.
  5. The workspace is removed on every exit path.
"""

import logging
from pathlib import Path

from .concat import export_concat
from .concat_list import write_concat_list
from .crossfade import export_with_crossfades
from .errors import ConfigurationError
from .fades import prepare_clips
from .models import ExportRequest
from .workspace import TempWorkspace

logger = logging.getLogger(__name__)


def export(config, request: ExportRequest) -> Path:
    """Render `request` to `request.output`.

    Args:
        config: Initialized EngineConfig.
        request: The ExportRequest to render.

    Returns:
        Path of the finished artifact.

    Raises:
        ConfigurationError: Engine path not initialized.
        ValidationError: Bad parameters discovered before encoding.
        ProbeError: A duration could not be read.
        EngineError: An engine invocation failed (after the concat fallback,
            where applicable). Partial output must be treated as invalid.
    """
    if not config.initialized:
        raise ConfigurationError("FFmpeg path not initialized")

    output = request.output
    output.parent.mkdir(parents=True, exist_ok=True)

    logger.info(
        "Export %s: %d clips, transition=%s, resolution=%s -> %s",
        request.request_id, len(request.clips), request.transition.kind,
        request.resolution, output,
    )

    with TempWorkspace(base_dir=config.temp_root, request_id=request.request_id) as ws:
        if request.transition.is_crossfade:
            inputs = prepare_clips(config, request.clips, ws, copy_unfaded=False)
            export_with_crossfades(
                config, inputs, output,
                duration=request.transition.duration,
                resolution=request.resolution,
                workspace=ws,
            )
        else:
            # The demuxer reads relative entries against the list's own directory.
            list_path = write_concat_list(
                [c.path.resolve() for c in request.clips], ws.file("files.txt"),
            )
            export_concat(
                config, list_path, output,
                resolution=request.resolution,
                fade_effects=request.fade_effects if request.has_fades else None,
                workspace=ws,
            )

    logger.info("Export %s done: %s", request.request_id, output)
    return output
