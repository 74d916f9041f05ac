from __future__ import annotations

from dataclasses import dataclass
from typing import Hashable

import numpy as np


SnapshotId = Hashable
NO_SELECTION = -1


@dataclass(frozen=True)
class Sample:
    timestamp: float
    value: float | None = None


@dataclass(frozen=True)
class Snapshot:
    snapshot_id: SnapshotId
    display_date: str


@dataclass(frozen=True)
class EventLabel:
    name: str


@dataclass(frozen=True)
class TimelineEvent:
    snapshot_id: SnapshotId
    timestamp: float
    labels: tuple[EventLabel, ...]


@dataclass(frozen=True)
class SeriesData:
    """Normalized samples of one metric; `mask` flags finite values."""

    x: np.ndarray
    y: np.ndarray
    mask: np.ndarray
    label: str | None = None

    @property
    def size(self) -> int:
        return int(self.x.size)

    def value_at(self, index: int) -> float | None:
        if not bool(self.mask[index]):
            return None
        return float(self.y[index])


@dataclass(frozen=True)
class EventMarker:
    """One drawn event marker; events sharing a snapshot id are merged into it."""

    snapshot_id: SnapshotId
    timestamp: float
    labels: tuple[EventLabel, ...]

    def caption(self) -> str:
        if not self.labels:
            return ""
        extra = len(self.labels) - 1
        if extra > 0:
            return f"{self.labels[0].name} (... +{extra})"
        return self.labels[0].name
