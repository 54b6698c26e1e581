"""clipexport — ffmpeg-driven clip export.

Join one or more clips into a finished video: concat (demuxer with a
filter-graph fallback) or iterative crossfades, with optional per-clip
fades and a resolution preset. Also trims, splits, and probes single
clips. All media work is done by an external ffmpeg/ffprobe.
"""

from .config import EngineConfig, load_engine_config
from .errors import (
    ConfigurationError,
    EngineError,
    EngineFailure,
    EngineTimeoutError,
    ExportError,
    InvocationError,
    ProbeError,
    ValidationError,
)
from .export import export
from .models import ClipReference, ExportRequest, TransitionMode
