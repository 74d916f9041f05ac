from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Sequence

import numpy as np

from eventline.errors import InvalidInputError
from eventline.layout import ChartLayout
from eventline.sample_index import SampleIndex
from eventline.scales import LinearScale, Scales, compute_scales
from eventline.series import NO_SELECTION, EventMarker, SeriesData, Snapshot, SnapshotId


LOGGER = logging.getLogger(__name__)

READOUT_LEFT = 10
READOUT_TOP = 10
READOUT_STEP = 14
DATE_LABEL_TOP = 16
PROMOTED_OFFSET_X = 8
PROMOTED_TOP = 24


@dataclass(frozen=True)
class SeriesPath:
    """Pixel runs of one series; absent values split the line."""

    series_index: int
    runs: tuple[tuple[np.ndarray, np.ndarray], ...]


@dataclass(frozen=True)
class CurrentMarker:
    series_index: int
    x: float
    bottom: float
    value: float | None


@dataclass(frozen=True)
class Readout:
    series_index: int
    text: str
    left: float
    top: float


@dataclass(frozen=True)
class DateLabel:
    text: str
    x: float
    top: float


@dataclass(frozen=True)
class EventGlyph:
    snapshot_id: SnapshotId
    x: float
    highlighted: bool


@dataclass(frozen=True)
class PromotedEvent:
    snapshot_id: SnapshotId
    x: float
    top: float
    caption: str


@dataclass(frozen=True)
class VisualState:
    selected_index: int
    markers: tuple[CurrentMarker, ...]
    readouts: tuple[Readout, ...]
    date_label: DateLabel | None
    events: tuple[EventGlyph, ...]
    promoted: PromotedEvent | None

    @property
    def highlighted_events(self) -> tuple[EventGlyph, ...]:
        return tuple(e for e in self.events if e.highlighted)


def format_readout(metric: str, value: float | None) -> str:
    if value is None:
        return f"{metric}: n/a"
    return f"{metric}: {value:.2f}"


def _contiguous_true_runs(mask: np.ndarray) -> list[tuple[int, int]]:
    idx = np.flatnonzero(mask)
    if idx.size == 0:
        return []
    runs: list[tuple[int, int]] = []
    start = int(idx[0])
    prev = int(idx[0])
    for v in idx[1:]:
        iv = int(v)
        if iv == prev + 1:
            prev = iv
            continue
        runs.append((start, prev + 1))
        start = iv
        prev = iv
    runs.append((start, prev + 1))
    return runs


class SeriesRenderer:
    def __init__(
        self,
        series: Sequence[SeriesData],
        metrics: Sequence[str],
        snapshots: Sequence[Snapshot],
        scales: Scales,
        layout: ChartLayout,
    ) -> None:
        if len(scales.y) != len(series):
            raise InvalidInputError("one value scale per series is required")
        self._series = tuple(series)
        self._metrics = tuple(metrics)
        self._snapshots = tuple(snapshots)
        self._scales = scales
        self._layout = layout
        self._paths = tuple(self._build_path(i) for i in range(len(self._series)))

    @property
    def paths(self) -> tuple[SeriesPath, ...]:
        return self._paths

    def _build_path(self, series_index: int) -> SeriesPath:
        data = self._series[series_index]
        px = self._scales.x.map_array(data.x)
        py = self._scales.value_scale(series_index).map_array(data.y)
        runs = tuple((px[a:b], py[a:b]) for a, b in _contiguous_true_runs(data.mask))
        return SeriesPath(series_index=series_index, runs=runs)

    def markers(self, index: int) -> tuple[CurrentMarker, ...]:
        out: list[CurrentMarker] = []
        for i, data in enumerate(self._series):
            y_scale = self._scales.value_scale(i)
            value = data.value_at(index)
            bottom = y_scale.range_min if value is None else y_scale(value)
            out.append(CurrentMarker(series_index=i, x=self._scales.x(data.x[index]), bottom=bottom, value=value))
        return tuple(out)

    def readouts(self, index: int) -> tuple[Readout, ...]:
        return tuple(
            Readout(
                series_index=i,
                text=format_readout(self._metrics[i], data.value_at(index)),
                left=READOUT_LEFT,
                top=READOUT_TOP + i * READOUT_STEP,
            )
            for i, data in enumerate(self._series)
        )

    def date_label(self, index: int) -> DateLabel:
        return DateLabel(text=self._snapshots[index].display_date, x=self._layout.center_x, top=DATE_LABEL_TOP)


class EventOverlay:
    def __init__(self, markers: Sequence[EventMarker], x_scale: LinearScale, layout: ChartLayout) -> None:
        self._markers = tuple(markers)
        self._layout = layout
        self._positions = tuple(x_scale(m.timestamp) for m in self._markers)

    @property
    def markers(self) -> tuple[EventMarker, ...]:
        return self._markers

    def glyphs(self, selected_id: SnapshotId | None) -> tuple[EventGlyph, ...]:
        return tuple(
            EventGlyph(
                snapshot_id=m.snapshot_id,
                x=x,
                highlighted=selected_id is not None and m.snapshot_id == selected_id,
            )
            for m, x in zip(self._markers, self._positions)
        )

    def promoted(self, selected_id: SnapshotId | None) -> PromotedEvent | None:
        if selected_id is None:
            return None
        for m in self._markers:
            if m.snapshot_id == selected_id:
                return PromotedEvent(
                    snapshot_id=m.snapshot_id,
                    x=self._layout.center_x + PROMOTED_OFFSET_X,
                    top=PROMOTED_TOP,
                    caption=m.caption(),
                )
        return None


class ChartModel:
    """Geometry and interaction core of one chart; holds no mutable state."""

    def __init__(
        self,
        *,
        series: Sequence[SeriesData],
        metrics: Sequence[str],
        snapshots: Sequence[Snapshot],
        events: Sequence[EventMarker] | None,
        layout: ChartLayout,
    ) -> None:
        self.series = tuple(series)
        self.metrics = tuple(metrics)
        self.snapshots = tuple(snapshots)
        self.layout = layout
        if len(self.metrics) != len(self.series):
            raise InvalidInputError(f"{len(self.metrics)} metric labels for {len(self.series)} series")
        self.scales = compute_scales(
            self.series,
            panel_width=layout.panel_width,
            plot_height=layout.plot_height,
            snapshot_count=len(self.snapshots),
        )
        self.index = SampleIndex.from_series(self.series[0])
        self.renderer = SeriesRenderer(self.series, self.metrics, self.snapshots, self.scales, layout)
        self.overlay = EventOverlay(events, self.scales.x, layout) if events is not None else None

    @property
    def last_index(self) -> int:
        return self.index.last

    def resolve_selection(self, index: int) -> int | None:
        if index == NO_SELECTION:
            return None
        return self.index.clamp(index)

    def visual_state(self, index: int) -> VisualState:
        resolved = self.resolve_selection(index)
        if resolved is None:
            events = self.overlay.glyphs(None) if self.overlay is not None else ()
            return VisualState(
                selected_index=NO_SELECTION,
                markers=(),
                readouts=(),
                date_label=None,
                events=events,
                promoted=None,
            )
        if resolved != index:
            LOGGER.debug("selection %d clamped to %d", index, resolved)
        selected_id = self.snapshots[resolved].snapshot_id
        return VisualState(
            selected_index=resolved,
            markers=self.renderer.markers(resolved),
            readouts=self.renderer.readouts(resolved),
            date_label=self.renderer.date_label(resolved),
            events=self.overlay.glyphs(selected_id) if self.overlay is not None else (),
            promoted=self.overlay.promoted(selected_id) if self.overlay is not None else None,
        )
