from eventline.errors import ConfigError, InvalidInputError, StyleError, TimelineError
from eventline.interaction import InteractionController, PointerEvent
from eventline.render_state import ChartModel, VisualState
from eventline.sample_index import SampleIndex
from eventline.scales import LinearScale, Scales, compute_scales
from eventline.series import NO_SELECTION, EventLabel, Sample, Snapshot, TimelineEvent
from eventline.style import TimelineStyle, validate_style
from eventline.timeline import CanvasMount, MountPoint, Timeline, TimelineChart, TimelineConfig

__all__ = [
    "CanvasMount",
    "ChartModel",
    "ConfigError",
    "EventLabel",
    "InteractionController",
    "InvalidInputError",
    "LinearScale",
    "MountPoint",
    "NO_SELECTION",
    "PointerEvent",
    "Sample",
    "SampleIndex",
    "Scales",
    "Snapshot",
    "StyleError",
    "Timeline",
    "TimelineChart",
    "TimelineConfig",
    "TimelineError",
    "TimelineEvent",
    "TimelineStyle",
    "VisualState",
    "compute_scales",
    "validate_style",
]
