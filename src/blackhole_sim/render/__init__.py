"""Rendering helpers for the black hole simulator."""

from .assets import get_text_surface, load_font
from .draw import (
    draw_black_hole,
    draw_particles,
    draw_starfield,
    generate_starfield,
)
from .ui import draw_control_panel, status_lines

__all__ = [
    "draw_black_hole",
    "draw_control_panel",
    "draw_particles",
    "draw_starfield",
    "generate_starfield",
    "get_text_surface",
    "load_font",
    "status_lines",
]
