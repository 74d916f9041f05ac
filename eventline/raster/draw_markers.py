from __future__ import annotations

from typing import Callable

import numpy as np

from eventline.raster.canvas import RGBA, blend_region


ShapeTest = Callable[[np.ndarray, np.ndarray, float], np.ndarray]


def draw_dot(
    dst: np.ndarray,
    cx: float,
    cy: float,
    radius: float,
    fill: RGBA,
    stroke: RGBA | None = None,
) -> None:
    def inside(xx: np.ndarray, yy: np.ndarray, r: float) -> np.ndarray:
        return (xx - cx) ** 2 + (yy - cy) ** 2 <= r * r

    _draw_shape(dst, cx, cy, radius, inside, fill, stroke)


def draw_triangle(
    dst: np.ndarray,
    cx: float,
    cy: float,
    radius: float,
    fill: RGBA,
    stroke: RGBA | None = None,
) -> None:
    """Upward-pointing triangle inscribed in a circle of `radius` around (cx, cy)."""

    def inside(xx: np.ndarray, yy: np.ndarray, r: float) -> np.ndarray:
        top = cy - r
        base = cy + r * 0.5
        half = (yy - top) / max(1e-9, base - top) * r * 0.866
        return (yy >= top) & (yy <= base) & (np.abs(xx - cx) <= half)

    _draw_shape(dst, cx, cy, radius, inside, fill, stroke)


def _draw_shape(
    dst: np.ndarray,
    cx: float,
    cy: float,
    radius: float,
    inside: ShapeTest,
    fill: RGBA,
    stroke: RGBA | None,
) -> None:
    reach = int(np.ceil(radius)) + 1
    x0 = max(0, int(np.floor(cx)) - reach)
    x1 = min(dst.shape[1], int(np.floor(cx)) + reach + 1)
    y0 = max(0, int(np.floor(cy)) - reach)
    y1 = min(dst.shape[0], int(np.floor(cy)) + reach + 1)
    if x1 <= x0 or y1 <= y0:
        return
    yy, xx = np.mgrid[y0:y1, x0:x1].astype(np.float32)
    region = dst[y0:y1, x0:x1]
    if stroke is None:
        blend_region(region, fill, inside(xx, yy, radius).astype(np.float32))
        return
    outer = inside(xx, yy, radius)
    inner = inside(xx, yy, max(0.0, radius - 1.0))
    blend_region(region, fill, inner.astype(np.float32))
    blend_region(region, stroke, (outer & ~inner).astype(np.float32))
