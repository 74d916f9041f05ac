from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Any, Protocol, Sequence

import numpy as np
from PIL import Image

from eventline.adapters import merge_events, normalize_events, normalize_series, normalize_snapshots
from eventline.errors import InvalidInputError
from eventline.interaction import InteractionController, PointerEvent, TrackingState
from eventline.layout import DEFAULT_PLOT_HEIGHT, ChartLayout
from eventline.painter import TimelinePainter
from eventline.render_state import ChartModel, VisualState
from eventline.series import SeriesData, Snapshot, TimelineEvent
from eventline.style import DEFAULT_STYLE, TimelineStyle


LOGGER = logging.getLogger(__name__)


class MountPoint(Protocol):
    """Container the chart attaches its frames to."""

    @property
    def parent_width(self) -> int:
        ...

    def attach(self, frame: np.ndarray) -> None:
        ...


@dataclass
class CanvasMount:
    """In-memory mount that keeps the most recently attached frame."""

    parent_width: int
    frame: np.ndarray | None = None
    attach_count: int = 0

    def attach(self, frame: np.ndarray) -> None:
        self.frame = frame
        self.attach_count += 1


@dataclass(frozen=True)
class TimelineConfig:
    series: tuple[SeriesData, ...]
    metrics: tuple[str, ...]
    snapshots: tuple[Snapshot, ...]
    events: tuple[TimelineEvent, ...] | None = None
    height: int = DEFAULT_PLOT_HEIGHT
    style: TimelineStyle = field(default=DEFAULT_STYLE)

    def __post_init__(self) -> None:
        self.validate()

    @classmethod
    def build(
        cls,
        *,
        data: Any,
        snapshots: Any,
        metrics: Any,
        events: Any = None,
        height: int | None = None,
        style: TimelineStyle | None = None,
    ) -> "TimelineConfig":
        if data is None:
            raise InvalidInputError("data is required")
        if snapshots is None:
            raise InvalidInputError("snapshots are required")
        if metrics is None:
            raise InvalidInputError("metrics are required")
        if isinstance(metrics, (str, bytes)) or not isinstance(metrics, Sequence):
            raise InvalidInputError("metrics must be a sequence of names")
        if isinstance(data, (str, bytes)) or not isinstance(data, Sequence):
            raise InvalidInputError("data must be a sequence of series")
        labels = tuple(str(m) for m in metrics)
        series = tuple(
            normalize_series(raw, label=labels[i] if i < len(labels) else None) for i, raw in enumerate(data)
        )
        return cls(
            series=series,
            metrics=labels,
            snapshots=normalize_snapshots(snapshots),
            events=None if events is None else normalize_events(events),
            height=DEFAULT_PLOT_HEIGHT if height is None else height,
            style=style or DEFAULT_STYLE,
        )

    def validate(self) -> None:
        if not self.series:
            raise InvalidInputError("at least one series is required")
        if not self.snapshots:
            raise InvalidInputError("at least one snapshot is required")
        for i, data in enumerate(self.series):
            if data.size != len(self.snapshots):
                raise InvalidInputError(
                    f"series {i} has {data.size} samples but there are {len(self.snapshots)} snapshots"
                )
        if len(self.metrics) != len(self.series):
            raise InvalidInputError(f"{len(self.metrics)} metric labels for {len(self.series)} series")
        ids = [s.snapshot_id for s in self.snapshots]
        if len(set(ids)) != len(ids):
            raise InvalidInputError("snapshot ids must be unique")
        if isinstance(self.height, bool) or not isinstance(self.height, int) or self.height <= 0:
            raise InvalidInputError("height must be a positive integer")


class TimelineChart:
    """A rendered chart: owns the interaction controller and repaints on every selection change."""

    def __init__(self, config: TimelineConfig, mount: MountPoint) -> None:
        self._config = config
        self._mount = mount
        markers = merge_events(config.events) if config.events is not None else None
        layout = ChartLayout.from_parent(
            mount.parent_width,
            plot_height=config.height,
            series_count=len(config.series),
            has_events=config.events is not None,
        )
        self._model = ChartModel(
            series=config.series,
            metrics=config.metrics,
            snapshots=config.snapshots,
            events=markers,
            layout=layout,
        )
        self._painter = TimelinePainter(self._model, config.style)
        self._controller = InteractionController(self._model, on_change=lambda index: self.redraw())
        self._frame: np.ndarray | None = None
        self.redraw()

    @property
    def model(self) -> ChartModel:
        return self._model

    @property
    def layout(self) -> ChartLayout:
        return self._model.layout

    @property
    def selected_index(self) -> int:
        return self._controller.selected_index

    @property
    def state(self) -> TrackingState:
        return self._controller.state

    def visual_state(self, index: int | None = None) -> VisualState:
        return self._model.visual_state(self.selected_index if index is None else index)

    def frame(self) -> np.ndarray:
        if self._frame is None:
            self.redraw()
        assert self._frame is not None
        return self._frame

    def redraw(self) -> np.ndarray:
        self._frame = self._painter.paint(self.visual_state())
        self._mount.attach(self._frame)
        return self._frame

    def pointer_move(self, px: float) -> int:
        return self._controller.pointer_move(px)

    def pointer_leave(self) -> int:
        return self._controller.pointer_leave()

    def handle(self, event: PointerEvent) -> int:
        return self._controller.handle(event)

    def reset(self) -> int:
        return self._controller.reset()

    def to_png(self, path: str | Path) -> Path:
        out = Path(path)
        Image.fromarray(self.frame()).save(out, format="PNG")
        return out


class Timeline:
    """Fluent chart builder; values may be set in any order before `render()`."""

    def __init__(self, mount: MountPoint) -> None:
        self._mount = mount
        self._height: int | None = None
        self._data: Any = None
        self._snapshots: Any = None
        self._metrics: Any = None
        self._events: Any = None
        self._style: TimelineStyle | None = None

    def height(self, height: int) -> "Timeline":
        self._height = height
        return self

    def data(self, data: Any) -> "Timeline":
        self._data = data
        return self

    def snapshots(self, snapshots: Any) -> "Timeline":
        self._snapshots = snapshots
        return self

    def metrics(self, metrics: Any) -> "Timeline":
        self._metrics = metrics
        return self

    def events(self, events: Any) -> "Timeline":
        self._events = events
        return self

    def style(self, style: TimelineStyle) -> "Timeline":
        self._style = style
        return self

    def config(self) -> TimelineConfig:
        return TimelineConfig.build(
            data=self._data,
            snapshots=self._snapshots,
            metrics=self._metrics,
            events=self._events,
            height=self._height,
            style=self._style,
        )

    def render(self) -> TimelineChart:
        config = self.config()
        chart = TimelineChart(config, self._mount)
        LOGGER.debug(
            "rendered timeline: %d series, %d snapshots, %s events",
            len(config.series),
            len(config.snapshots),
            "no" if config.events is None else len(config.events),
        )
        return chart
