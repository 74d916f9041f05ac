from __future__ import annotations

import numpy as np


RGBA = tuple[int, int, int, int]


def new_canvas(width: int, height: int, color: RGBA = (255, 255, 255, 255)) -> np.ndarray:
    if width <= 0 or height <= 0:
        raise ValueError("canvas width/height must be > 0")
    canvas = np.empty((height, width, 4), dtype=np.uint8)
    canvas[:, :] = np.asarray(color, dtype=np.uint8)
    return canvas


def blend_region(region: np.ndarray, color: RGBA, coverage: np.ndarray | float = 1.0) -> None:
    """Source-over blend `color` into an (h, w, 4) view, scaled by per-pixel coverage."""

    alpha = (color[3] / 255.0) * np.asarray(coverage, dtype=np.float32)
    if np.ndim(alpha) == 2:
        alpha = alpha[:, :, None]
    src = np.asarray(color[:3], dtype=np.float32)
    region[..., :3] = (src * alpha + region[..., :3].astype(np.float32) * (1.0 - alpha)).astype(np.uint8)
    region[..., 3] = 255


def fill_rect(dst: np.ndarray, x0: int, y0: int, x1: int, y1: int, color: RGBA) -> None:
    left = max(0, min(x0, x1))
    right = min(dst.shape[1] - 1, max(x0, x1))
    top = max(0, min(y0, y1))
    bottom = min(dst.shape[0] - 1, max(y0, y1))
    if right < left or bottom < top:
        return
    blend_region(dst[top : bottom + 1, left : right + 1], color)


def draw_hline(dst: np.ndarray, x0: int, x1: int, y: int, color: RGBA) -> None:
    fill_rect(dst, x0, y, x1, y, color)


def draw_vline(dst: np.ndarray, x: int, y0: int, y1: int, color: RGBA) -> None:
    fill_rect(dst, x, y0, x, y1, color)


def stroke_rect(dst: np.ndarray, x0: int, y0: int, x1: int, y1: int, color: RGBA) -> None:
    draw_hline(dst, x0, x1, y0, color)
    draw_hline(dst, x0, x1, y1, color)
    draw_vline(dst, x0, y0 + 1, y1 - 1, color)
    draw_vline(dst, x1, y0 + 1, y1 - 1, color)
