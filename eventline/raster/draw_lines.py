from __future__ import annotations

import numpy as np

from eventline.raster.canvas import RGBA, fill_rect


def draw_polyline(dst: np.ndarray, xs: np.ndarray, ys: np.ndarray, color: RGBA, width: int = 1) -> None:
    """Straight segments through consecutive points; a single point draws a brush stamp."""

    if xs.size == 0:
        return
    cols = np.rint(xs).astype(np.int32)
    rows = np.rint(ys).astype(np.int32)
    if cols.size == 1:
        _stamp(dst, int(cols[0]), int(rows[0]), color, width)
        return
    visited: set[tuple[int, int]] = set()
    for i in range(cols.size - 1):
        for x, y in _segment_points(int(cols[i]), int(rows[i]), int(cols[i + 1]), int(rows[i + 1])):
            # Shared endpoints would otherwise be blended twice.
            if (x, y) in visited:
                continue
            visited.add((x, y))
            _stamp(dst, x, y, color, width)


def _segment_points(x0: int, y0: int, x1: int, y1: int) -> list[tuple[int, int]]:
    dx = abs(x1 - x0)
    dy = -abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx + dy
    points: list[tuple[int, int]] = []
    while True:
        points.append((x0, y0))
        if x0 == x1 and y0 == y1:
            return points
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x0 += sx
        if e2 <= dx:
            err += dx
            y0 += sy


def _stamp(dst: np.ndarray, x: int, y: int, color: RGBA, width: int) -> None:
    lo = (max(1, width) - 1) // 2
    hi = max(1, width) - 1 - lo
    fill_rect(dst, x - lo, y - lo, x + hi, y + hi, color)
