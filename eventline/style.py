from __future__ import annotations

from dataclasses import asdict, dataclass, fields
import re
from typing import Any, Mapping

from eventline.errors import StyleError
from eventline.raster import RGBA
from eventline.raster.draw_text import DEFAULT_FONT_FAMILY, DEFAULT_FONT_SIZE_PX

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}([0-9a-fA-F]{2})?$")

CATEGORY10 = (
    "#1F77B4",
    "#FF7F0E",
    "#2CA02C",
    "#D62728",
    "#9467BD",
    "#8C564B",
    "#E377C2",
    "#7F7F7F",
    "#BCBD22",
    "#17BECF",
)


@dataclass(frozen=True)
class TimelineStyle:
    """Color and font tokens for the timeline painter."""

    background: str = "#FFFFFF"
    border: str = "#CCCCCC"
    axis: str = "#000000"
    text: str = "#000000"
    marker_stroke: str = "#000000"
    event_fill: str = "#4B9FD5"
    event_highlight: str = "#CAE3F2"
    event_stroke: str = "#808080"
    series_palette: tuple[str, ...] = CATEGORY10
    font_family: str = DEFAULT_FONT_FAMILY
    font_size_px: float = DEFAULT_FONT_SIZE_PX
    line_width: int = 2

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name == "series_palette":
                if not value or not all(isinstance(c, str) and _HEX_COLOR.match(c) for c in value):
                    raise StyleError("Token `series_palette` must be a non-empty list of hex colors")
            elif f.type == "str" and f.name != "font_family":
                if not isinstance(value, str) or not _HEX_COLOR.match(value):
                    raise StyleError(f"Token `{f.name}` must be a hex color (#RRGGBB or #RRGGBBAA)")
        if not isinstance(self.font_family, str) or not self.font_family.strip():
            raise StyleError("Token `font_family` must be a non-empty string")
        if isinstance(self.font_size_px, bool) or not isinstance(self.font_size_px, (int, float)) or self.font_size_px <= 0:
            raise StyleError("Token `font_size_px` must be a positive number")
        if isinstance(self.line_width, bool) or not isinstance(self.line_width, int) or self.line_width < 1:
            raise StyleError("Token `line_width` must be an integer >= 1")

    def rgba(self, token: str) -> RGBA:
        return hex_to_rgba(getattr(self, token))

    def series_color(self, series_index: int) -> RGBA:
        return hex_to_rgba(self.series_palette[series_index % len(self.series_palette)])


DEFAULT_STYLE = TimelineStyle()


def validate_style(overrides: Mapping[str, Any] | None = None) -> TimelineStyle:
    """Merge token overrides onto the defaults, rejecting unknown tokens."""

    raw: dict[str, Any] = asdict(DEFAULT_STYLE)
    if overrides:
        for key, value in overrides.items():
            if key not in raw:
                raise StyleError(f"Unknown style token: {key}")
            raw[key] = value
    if isinstance(raw["series_palette"], list):
        raw["series_palette"] = tuple(raw["series_palette"])
    if isinstance(raw["font_size_px"], int) and not isinstance(raw["font_size_px"], bool):
        raw["font_size_px"] = float(raw["font_size_px"])
    return TimelineStyle(**raw)


def hex_to_rgba(value: str) -> RGBA:
    if not _HEX_COLOR.match(value):
        raise StyleError(f"not a hex color: {value!r}")
    r, g, b = (int(value[i : i + 2], 16) for i in (1, 3, 5))
    a = int(value[7:9], 16) if len(value) == 9 else 255
    return (r, g, b, a)
