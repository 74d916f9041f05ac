from __future__ import annotations

from dataclasses import dataclass

from eventline.errors import InvalidInputError


DEFAULT_PLOT_HEIGHT = 80
CONTAINER_INSET = 60
MARGIN_LEFT = 20
MARGIN_RIGHT = 20
MARGIN_TOP = 5
MARGIN_BOTTOM = 20
HEADER_PAD = 4
HEADER_ROW = 18
CAPTURE_SLACK = 10


def header_height(series_count: int, has_events: bool) -> int:
    rows = max(series_count, 2 if has_events else 1)
    return HEADER_PAD + HEADER_ROW * rows


@dataclass(frozen=True)
class ChartLayout:
    """Pixel geometry of one rendered chart.

    Panel coordinates put x=0 at the left edge of the plot and measure heights
    upward from the plot bottom; frame coordinates are canvas rows/columns.
    """

    panel_width: int
    plot_height: int
    header_height: int

    def __post_init__(self) -> None:
        if self.panel_width <= 0:
            raise InvalidInputError("container is too narrow for the chart")
        if self.plot_height <= 0:
            raise InvalidInputError("height must be > 0")

    @classmethod
    def from_parent(
        cls,
        parent_width: int,
        *,
        plot_height: int = DEFAULT_PLOT_HEIGHT,
        series_count: int,
        has_events: bool,
    ) -> "ChartLayout":
        return cls(
            panel_width=int(parent_width) - CONTAINER_INSET,
            plot_height=int(plot_height),
            header_height=header_height(series_count, has_events),
        )

    @property
    def panel_height(self) -> int:
        return self.plot_height + self.header_height

    @property
    def frame_width(self) -> int:
        return self.panel_width + MARGIN_LEFT + MARGIN_RIGHT

    @property
    def frame_height(self) -> int:
        return self.panel_height + MARGIN_TOP + MARGIN_BOTTOM

    @property
    def center_x(self) -> float:
        return self.panel_width / 2.0

    def frame_col(self, panel_x: float) -> int:
        return int(round(MARGIN_LEFT + panel_x))

    def frame_row_from_bottom(self, bottom: float) -> int:
        return int(round(MARGIN_TOP + self.panel_height - bottom))

    def frame_row_from_top(self, top: float) -> int:
        return int(round(MARGIN_TOP + top))

    def panel_x(self, frame_x: float) -> float:
        return float(frame_x) - MARGIN_LEFT

    def in_capture_region(self, frame_x: float, frame_y: float) -> bool:
        px = self.panel_x(frame_x)
        py = float(frame_y) - MARGIN_TOP
        return 0.0 <= px <= self.panel_width + CAPTURE_SLACK and 0.0 <= py <= self.panel_height
