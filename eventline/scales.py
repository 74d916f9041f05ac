from __future__ import annotations

from dataclasses import dataclass
import datetime as dt
import logging
from typing import Sequence

import numpy as np

from eventline.errors import InvalidInputError
from eventline.series import SeriesData


LOGGER = logging.getLogger(__name__)

MARKER_MARGIN = 20
VALUE_BUFFER_RATIO = 0.05

_MINUTE = 60.0
_HOUR = 60.0 * _MINUTE
_DAY = 24.0 * _HOUR
_YEAR = 365.0 * _DAY
TIME_TICK_STEPS = (
    1.0,
    5.0,
    15.0,
    30.0,
    _MINUTE,
    5 * _MINUTE,
    15 * _MINUTE,
    30 * _MINUTE,
    _HOUR,
    3 * _HOUR,
    6 * _HOUR,
    12 * _HOUR,
    _DAY,
    2 * _DAY,
    7 * _DAY,
    30 * _DAY,
    91 * _DAY,
    182 * _DAY,
    _YEAR,
)


@dataclass(frozen=True)
class LinearScale:
    """Affine map from a data domain onto a pixel range; never clamps."""

    domain_min: float
    domain_max: float
    range_min: float
    range_max: float

    def __post_init__(self) -> None:
        if self.domain_min == self.domain_max:
            raise ValueError("scale domain must not be degenerate")

    @property
    def factor(self) -> float:
        return (self.range_max - self.range_min) / (self.domain_max - self.domain_min)

    def __call__(self, value: float) -> float:
        return self.range_min + (float(value) - self.domain_min) * self.factor

    def map_array(self, values: np.ndarray) -> np.ndarray:
        return self.range_min + (np.asarray(values, dtype=np.float64) - self.domain_min) * self.factor

    def invert(self, pixel: float) -> float:
        return self.domain_min + (float(pixel) - self.range_min) / self.factor


@dataclass(frozen=True)
class Scales:
    x: LinearScale
    y: tuple[LinearScale, ...]

    def value_scale(self, series_index: int) -> LinearScale:
        return self.y[series_index]


def time_domain(series: Sequence[SeriesData]) -> tuple[float, float]:
    finite = [s.x[np.isfinite(s.x)] for s in series if s.size]
    stacked = np.concatenate(finite) if finite else np.empty(0, dtype=np.float64)
    if stacked.size == 0:
        return (-1.0, 1.0)
    tmin = float(np.min(stacked))
    tmax = float(np.max(stacked))
    if tmin == tmax:
        tmin -= 1.0
        tmax += 1.0
    return (tmin, tmax)


def value_domain(data: SeriesData, buffer_ratio: float = VALUE_BUFFER_RATIO) -> tuple[float, float]:
    vy = data.y[data.mask]
    if vy.size == 0:
        return (-1.0, 1.0)
    ymin = float(np.min(vy))
    ymax = float(np.max(vy))
    if ymin == ymax:
        # Symmetric widening keeps a constant series on the range midpoint.
        delta = max(1.0, abs(ymin) * buffer_ratio)
        return (ymin - delta, ymax + delta)
    return (ymin, ymax)


def compute_scales(
    series: Sequence[SeriesData],
    *,
    panel_width: int,
    plot_height: int,
    marker_margin: int = MARKER_MARGIN,
    snapshot_count: int | None = None,
) -> Scales:
    if not series:
        raise InvalidInputError("at least one series is required")
    if snapshot_count is not None:
        for i, data in enumerate(series):
            if data.size != snapshot_count:
                raise InvalidInputError(
                    f"series {i} has {data.size} samples but there are {snapshot_count} snapshots"
                )
    if panel_width <= 0:
        raise InvalidInputError("panel width must be > 0")
    if plot_height <= 0:
        raise InvalidInputError("plot height must be > 0")

    tmin, tmax = time_domain(series)
    x = LinearScale(domain_min=tmin, domain_max=tmax, range_min=0.0, range_max=float(panel_width))
    y = []
    for data in series:
        vmin, vmax = value_domain(data)
        y.append(
            LinearScale(
                domain_min=vmin,
                domain_max=vmax,
                range_min=float(marker_margin),
                range_max=float(plot_height),
            )
        )
    LOGGER.debug("time domain [%s, %s] over %d px; %d value scales", tmin, tmax, panel_width, len(y))
    return Scales(x=x, y=tuple(y))


def time_ticks(scale: LinearScale, target: int = 6) -> np.ndarray:
    if target <= 0:
        raise ValueError("target must be > 0")
    span = scale.domain_max - scale.domain_min
    step = time_tick_step(span, target)
    first = np.ceil(scale.domain_min / step) * step
    ticks = np.arange(first, scale.domain_max + 0.5 * step, step, dtype=np.float64)
    return ticks[(ticks >= scale.domain_min) & (ticks <= scale.domain_max)]


def time_tick_step(span: float, target: int) -> float:
    for step in TIME_TICK_STEPS:
        if span / step <= target:
            return step
    years = _nice_number(span / _YEAR / max(target, 1))
    return max(1.0, years) * _YEAR


def format_time_tick(value: float, step: float) -> str:
    try:
        stamp = dt.datetime.fromtimestamp(float(value), tz=dt.timezone.utc)
    except (OverflowError, ValueError, OSError):
        # Outside the datetime range; the axis still needs a label.
        return f"{value:g}"
    if step >= _YEAR:
        return stamp.strftime("%Y")
    if step >= 30 * _DAY:
        return stamp.strftime("%b %Y")
    if step >= _DAY:
        return stamp.strftime("%b %d")
    if step >= _MINUTE:
        return stamp.strftime("%H:%M")
    return stamp.strftime("%H:%M:%S")


def format_time_ticks(ticks: np.ndarray, span: float, target: int = 6) -> list[str]:
    step = time_tick_step(span, target)
    return [format_time_tick(float(v), step) for v in ticks]


def _nice_number(value: float) -> float:
    exp = np.floor(np.log10(value))
    frac = value / (10**exp)
    if frac < 1.5:
        nice_frac = 1.0
    elif frac < 3.0:
        nice_frac = 2.0
    elif frac < 7.0:
        nice_frac = 5.0
    else:
        nice_frac = 10.0
    return float(nice_frac * (10**exp))
