"""
Mandelbrot Raster Package

Renders the Mandelbrot set into a flat RGBA byte buffer, using Numba
for JIT-compiled computation and Pygame for display.

Quick Start:
    from mandelraster import params_from_fragment, render_image
    img = render_image(params_from_fragment("#w=400&h=300&mag=2"))

Or from command line:
    python -m mandelraster "w=800&h=600&x=-0.75&y=0.1&mag=20"

Package Structure:
    - params.py: Viewport parameters and fragment parsing
    - compute.py: JIT-compiled mapping, iteration and compositing
    - palette.py: The fixed 16-color palette
    - renderer.py: Timed and background rendering
    - app.py: Pygame window and image saving
"""

from .params import (
    ViewParams,
    DEFAULTS,
    resolve_params,
    parse_fragment,
    params_from_fragment,
    validate_params,
    format_title,
)
from .compute import (
    pixel_size,
    plane_origin,
    pixel_to_point,
    escapes,
    step,
    iterations,
    new_pixel_buffer,
    draw_mandelbrot_set,
    render_image,
    as_image_array,
)
from .palette import PALETTE, BLACK, color
from .renderer import MandelbrotRenderer, RenderResult

__version__ = "1.0.0"
__all__ = [
    "ViewParams",
    "DEFAULTS",
    "resolve_params",
    "parse_fragment",
    "params_from_fragment",
    "validate_params",
    "format_title",
    "pixel_size",
    "plane_origin",
    "pixel_to_point",
    "escapes",
    "step",
    "iterations",
    "new_pixel_buffer",
    "draw_mandelbrot_set",
    "render_image",
    "as_image_array",
    "PALETTE",
    "BLACK",
    "color",
    "MandelbrotRenderer",
    "RenderResult",
]
