from __future__ import annotations

from functools import lru_cache
import logging
import os
from pathlib import Path
from typing import Literal

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from eventline.raster.canvas import RGBA, blend_region


LOGGER = logging.getLogger(__name__)

DEFAULT_FONT_FAMILY = os.getenv("EVENTLINE_FONT_FAMILY", "Arial")
DEFAULT_FONT_SIZE_PX = 10.5
SANS_FALLBACKS = ("arial", "helvetica", "liberationsans", "dejavusans")
FONT_DIRS = (
    Path.home() / "Library" / "Fonts",
    Path("/Library/Fonts"),
    Path("/System/Library/Fonts"),
    Path("/usr/share/fonts"),
    Path("/usr/local/share/fonts"),
)

Align = Literal["left", "center", "right"]
Font = ImageFont.FreeTypeFont | ImageFont.ImageFont


def text_size(text: str, *, font_family: str = DEFAULT_FONT_FAMILY, font_size_px: float = DEFAULT_FONT_SIZE_PX) -> tuple[int, int]:
    return _glyph_mask(text, font_family, font_size_px).shape[::-1]


def draw_text(
    dst: np.ndarray,
    x: float,
    y: float,
    text: str,
    color: RGBA,
    *,
    align: Align = "left",
    middle: bool = False,
    font_family: str = DEFAULT_FONT_FAMILY,
    font_size_px: float = DEFAULT_FONT_SIZE_PX,
) -> None:
    """Blend `text` into `dst`; (x, y) is the top-left corner unless `align`/`middle` say otherwise."""

    if not text:
        return
    mask = _glyph_mask(text, font_family, font_size_px)
    h, w = mask.shape
    left = int(round(x - {"left": 0.0, "center": w / 2.0, "right": float(w)}[align]))
    top = int(round(y - h / 2.0)) if middle else int(round(y))

    x0, y0 = max(0, left), max(0, top)
    x1, y1 = min(dst.shape[1], left + w), min(dst.shape[0], top + h)
    if x1 <= x0 or y1 <= y0:
        return
    coverage = mask[y0 - top : y1 - top, x0 - left : x1 - left].astype(np.float32) / 255.0
    blend_region(dst[y0:y1, x0:x1], color, coverage)


@lru_cache(maxsize=256)
def _glyph_mask(text: str, font_family: str, font_size_px: float) -> np.ndarray:
    font = load_font(font_family, font_size_px)
    if not text:
        ascent, descent = font.getmetrics() if hasattr(font, "getmetrics") else (int(font_size_px), 0)
        return np.zeros((max(1, ascent + descent), 0), dtype=np.uint8)
    left, top, right, bottom = font.getbbox(text)
    image = Image.new("L", (max(1, int(right - left)), max(1, int(bottom - top))), 0)
    ImageDraw.Draw(image).text((-left, -top), text, fill=255, font=font)
    return np.asarray(image, dtype=np.uint8)


@lru_cache(maxsize=32)
def load_font(font_family: str, font_size_px: float) -> Font:
    size = max(1, int(round(font_size_px)))
    path = _find_font_file(font_family)
    if path is not None:
        try:
            return ImageFont.truetype(str(path), size=size)
        except OSError as exc:
            LOGGER.warning("could not load font %s (%s); using default", path, exc)
    else:
        LOGGER.warning("font family %r not found; using Pillow default", font_family)
    return ImageFont.load_default(size=size)


def _find_font_file(font_family: str) -> Path | None:
    wanted = font_family.strip().lower().replace(" ", "")
    patterns = ((wanted,) if wanted else ()) + SANS_FALLBACKS
    candidates = [
        path
        for base in FONT_DIRS
        if base.exists()
        for ext in ("*.ttf", "*.otf", "*.ttc")
        for path in base.rglob(ext)
    ]
    for pattern in patterns:
        for path in candidates:
            if path.stem.lower().replace(" ", "").startswith(pattern):
                return path
    return None
