from .canvas import RGBA, blend_region, draw_hline, draw_vline, fill_rect, new_canvas, stroke_rect
from .draw_lines import draw_polyline
from .draw_markers import draw_dot, draw_triangle
from .draw_text import draw_text, text_size

__all__ = [
    "RGBA",
    "blend_region",
    "draw_dot",
    "draw_hline",
    "draw_polyline",
    "draw_text",
    "draw_triangle",
    "draw_vline",
    "fill_rect",
    "new_canvas",
    "stroke_rect",
    "text_size",
]
