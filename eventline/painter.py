from __future__ import annotations

import logging

import numpy as np

from eventline.layout import MARGIN_LEFT, MARGIN_TOP
from eventline.raster import (
    draw_dot,
    draw_polyline,
    draw_text,
    draw_triangle,
    draw_vline,
    new_canvas,
    stroke_rect,
)
from eventline.render_state import ChartModel, VisualState
from eventline.scales import format_time_ticks, time_ticks
from eventline.style import TimelineStyle


LOGGER = logging.getLogger(__name__)

MARKER_RADIUS = 4.5
LEGEND_DOT_RADIUS = 3.0
EVENT_BOTTOM = 6
TICK_LENGTH = 5
TICK_TARGET = 6


class TimelinePainter:
    """Rasterizes a chart model; the static layer is built once per model."""

    def __init__(self, model: ChartModel, style: TimelineStyle) -> None:
        self._model = model
        self._style = style
        self._static: np.ndarray | None = None

    def static_layer(self) -> np.ndarray:
        if self._static is None:
            self._static = self._paint_static()
        return self._static

    def paint(self, state: VisualState) -> np.ndarray:
        frame = self.static_layer().copy()
        self._paint_events(frame, state)
        self._paint_markers(frame, state)
        self._paint_header(frame, state)
        return frame

    def _paint_static(self) -> np.ndarray:
        layout = self._model.layout
        style = self._style
        canvas = new_canvas(layout.frame_width, layout.frame_height, color=style.rgba("background"))
        stroke_rect(
            canvas,
            MARGIN_LEFT,
            MARGIN_TOP,
            MARGIN_LEFT + layout.panel_width,
            MARGIN_TOP + layout.panel_height,
            style.rgba("border"),
        )
        self._paint_time_axis(canvas)
        for path in self._model.renderer.paths:
            color = style.series_color(path.series_index)
            for xs, ys in path.runs:
                cols = MARGIN_LEFT + xs
                rows = MARGIN_TOP + layout.panel_height - ys
                draw_polyline(canvas, cols, rows, color, width=style.line_width)
        LOGGER.debug("painted static layer %dx%d", layout.frame_width, layout.frame_height)
        return canvas

    def _paint_time_axis(self, canvas: np.ndarray) -> None:
        layout = self._model.layout
        scale = self._model.scales.x
        ticks = time_ticks(scale, TICK_TARGET)
        labels = format_time_ticks(ticks, scale.domain_max - scale.domain_min, TICK_TARGET)
        base = layout.frame_row_from_bottom(0)
        for value, label in zip(ticks.tolist(), labels):
            col = layout.frame_col(scale(value))
            draw_vline(canvas, col, base, base + TICK_LENGTH, self._style.rgba("axis"))
            draw_text(
                canvas,
                col,
                base + TICK_LENGTH + 1,
                label,
                self._style.rgba("text"),
                align="center",
                font_family=self._style.font_family,
                font_size_px=self._style.font_size_px,
            )

    def _paint_events(self, frame: np.ndarray, state: VisualState) -> None:
        layout = self._model.layout
        style = self._style
        row = layout.frame_row_from_bottom(EVENT_BOTTOM)
        for glyph in state.events:
            fill = style.rgba("event_highlight" if glyph.highlighted else "event_fill")
            draw_triangle(frame, layout.frame_col(glyph.x), row, MARKER_RADIUS, fill, style.rgba("event_stroke"))
        promoted = state.promoted
        if promoted is None:
            return
        col = layout.frame_col(promoted.x)
        top = layout.frame_row_from_top(promoted.top)
        draw_triangle(frame, col, top, LEGEND_DOT_RADIUS * 1.5, style.rgba("event_highlight"), style.rgba("event_stroke"))
        self._label(frame, col + LEGEND_DOT_RADIUS * 2 + 2, top, promoted.caption)

    def _paint_markers(self, frame: np.ndarray, state: VisualState) -> None:
        layout = self._model.layout
        for marker in state.markers:
            draw_dot(
                frame,
                layout.frame_col(marker.x),
                layout.frame_row_from_bottom(marker.bottom),
                MARKER_RADIUS,
                self._style.series_color(marker.series_index),
                self._style.rgba("marker_stroke"),
            )

    def _paint_header(self, frame: np.ndarray, state: VisualState) -> None:
        layout = self._model.layout
        for readout in state.readouts:
            col = layout.frame_col(readout.left)
            row = layout.frame_row_from_top(readout.top)
            draw_dot(
                frame,
                col,
                row,
                LEGEND_DOT_RADIUS,
                self._style.series_color(readout.series_index),
                self._style.rgba("marker_stroke"),
            )
            self._label(frame, col + LEGEND_DOT_RADIUS + 3, row, readout.text)
        if state.date_label is not None:
            draw_text(
                frame,
                layout.frame_col(state.date_label.x),
                layout.frame_row_from_top(state.date_label.top),
                state.date_label.text,
                self._style.rgba("text"),
                align="center",
                middle=True,
                font_family=self._style.font_family,
                font_size_px=self._style.font_size_px,
            )

    def _label(self, frame: np.ndarray, x: float, y: float, text: str) -> None:
        draw_text(
            frame,
            x,
            y,
            text,
            self._style.rgba("text"),
            middle=True,
            font_family=self._style.font_family,
            font_size_px=self._style.font_size_px,
        )
