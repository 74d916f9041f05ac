from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Callable, Literal, Optional

from eventline.render_state import ChartModel
from eventline.series import NO_SELECTION


LOGGER = logging.getLogger(__name__)

PointerEventType = Literal["pointer_move", "pointer_leave"]
TrackingState = Literal["idle", "tracking", "suppressed"]


@dataclass(frozen=True)
class PointerEvent:
    """Pointer input in frame (canvas) coordinates."""

    event_type: PointerEventType
    x: Optional[float] = None
    y: Optional[float] = None


class InteractionController:
    """Owns the selected sample index and its pointer-driven transitions.

    Every transition that changes the selection calls `on_change` with the new
    index before returning, so redraws stay on the caller's stack.
    """

    def __init__(self, model: ChartModel, on_change: Callable[[int], None] | None = None) -> None:
        self._model = model
        self._on_change = on_change or (lambda index: None)
        self._state: TrackingState = "idle"
        self._selected = model.last_index

    @property
    def selected_index(self) -> int:
        return self._selected

    @property
    def state(self) -> TrackingState:
        return self._state

    def reset(self) -> int:
        return self._transition("idle", self._model.last_index)

    def pointer_move(self, px: float) -> int:
        t = self._model.scales.x.invert(px)
        return self._transition("tracking", self._model.index.nearest(t))

    def pointer_leave(self) -> int:
        return self._transition("suppressed", NO_SELECTION)

    def handle(self, event: PointerEvent) -> int:
        if event.event_type == "pointer_leave":
            return self.pointer_leave()
        if event.event_type != "pointer_move":
            raise ValueError(f"unsupported pointer event: {event.event_type}")
        if event.x is None or event.y is None:
            raise ValueError("pointer_move requires x and y")
        layout = self._model.layout
        if not layout.in_capture_region(event.x, event.y):
            return self.pointer_leave()
        return self.pointer_move(layout.panel_x(event.x))

    def _transition(self, state: TrackingState, index: int) -> int:
        previous = self._selected
        self._state = state
        self._selected = index
        if index != previous:
            LOGGER.debug("selection %d -> %d (%s)", previous, index, state)
            self._on_change(index)
        return index
