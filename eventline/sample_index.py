from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from eventline.errors import InvalidInputError
from eventline.scales import LinearScale
from eventline.series import SeriesData


@dataclass(frozen=True)
class SampleIndex:
    """Ordered timestamp keys of the reference series.

    Lookups are nearest-below: the result is the largest position whose
    timestamp does not exceed the query, or 0 when the query precedes every
    sample.
    """

    timestamps: np.ndarray

    def __post_init__(self) -> None:
        if self.timestamps.ndim != 1 or self.timestamps.size == 0:
            raise InvalidInputError("sample index needs at least one timestamp")

    @classmethod
    def from_series(cls, reference: SeriesData) -> "SampleIndex":
        keys = np.array(reference.x, dtype=np.float64, copy=True)
        if keys.size > 1 and np.any(np.diff(keys) < 0):
            raise InvalidInputError("reference series timestamps must be non-decreasing")
        keys.setflags(write=False)
        return cls(timestamps=keys)

    @property
    def size(self) -> int:
        return int(self.timestamps.size)

    @property
    def last(self) -> int:
        return self.size - 1

    def nearest(self, t: float) -> int:
        value = float(t)
        if np.isnan(value):
            return 0
        pos = int(np.searchsorted(self.timestamps, value, side="right")) - 1
        return max(0, pos)

    def nearest_pixel(self, px: float, scale: LinearScale) -> int:
        return self.nearest(scale.invert(px))

    def clamp(self, index: int) -> int:
        return min(max(0, int(index)), self.last)
