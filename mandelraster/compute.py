"""
Mandelbrot computation functions using Numba JIT compilation.

This module contains the numeric core:
- Mapping pixel indices to points in the complex plane
- The escape-time iteration z -> z² + c for a single point
- Filling a flat RGBA buffer for a whole viewport

Complex numbers are carried as separate (re, im) floats so the same
functions work from plain Python and from inside the compiled kernel.

Geometry: the per-pixel step is p = 4 / min(width, height) / mag, the
top-left pixel sits at (cx - width/2 * p, cy + height/2 * p), and rows
go *down* the imaginary axis (screen rows grow downward).
"""

import numpy as np
from numba import jit, prange

from .palette import PALETTE, BLACK, palette_index


ESCAPE_RADIUS_SQ = 4.0  # |z|² beyond this counts as escaped
PLANE_SPAN = 4.0        # plane units across the shorter image side at mag 1


# ============================================================================
# Coordinate mapping
# ============================================================================

@jit(nopython=True, cache=True)
def pixel_size(width, height, magnification):
    """Complex-plane units per pixel."""
    return PLANE_SPAN / min(width, height) / magnification


@jit(nopython=True, cache=True)
def plane_origin(width, height, cx, cy, p):
    """Plane coordinate of the top-left pixel."""
    return cx - width / 2.0 * p, cy + height / 2.0 * p


@jit(nopython=True, cache=True)
def pixel_to_point(index, width, height, cx, cy, magnification):
    """
    Map a row-major pixel index to its point in the complex plane.

    Args:
        index: Pixel index, 0 .. width*height-1
        width, height: Image dimensions in pixels
        cx, cy: Center of the view
        magnification: Zoom factor (> 0)

    Returns:
        (re, im) tuple
    """
    p = pixel_size(width, height, magnification)
    x0, y0 = plane_origin(width, height, cx, cy, p)
    row = index // width
    col = index % width
    return x0 + col * p, y0 - row * p


# ============================================================================
# Escape-time iteration
# ============================================================================

@jit(nopython=True, cache=True)
def escapes(re, im):
    """True once |z|² exceeds 4. A point exactly on the circle has not escaped."""
    return re * re + im * im > ESCAPE_RADIUS_SQ


@jit(nopython=True, cache=True)
def step(re, im, re0, im0):
    """One application of z² + c, with c = (re0, im0)."""
    return re * re - im * im + re0, 2.0 * re * im + im0


@jit(nopython=True, cache=True)
def iterations(re, im, limit):
    """
    Count iterations until the point escapes.

    The starting point doubles as c. The escape test runs before each
    step, so a point already outside the radius returns 0.

    Returns:
        Escape iteration in [0, limit]. limit means the point never
        escaped within the cap (presumed inside the set).
    """
    re0 = re
    im0 = im
    for i in range(limit + 1):
        if escapes(re, im):
            return i
        re, im = step(re, im, re0, im0)
    return limit


# ============================================================================
# Image compositing
# ============================================================================

@jit(nopython=True, parallel=True, cache=True)
def fill_pixels(width, height, cx, cy, magnification, limit, palette, black, out):
    """
    Render the viewport into a flat RGBA buffer.

    Rows are split across threads with prange. Each row owns the byte
    range [row*width*4, (row+1)*width*4), so no two threads touch the
    same bytes.

    Args:
        width, height: Image dimensions
        cx, cy: View center
        magnification: Zoom factor
        limit: Iteration cap
        palette: (16, 4) uint8 colors
        black: (4,) uint8 color for interior / immediate escape
        out: uint8 buffer of length width*height*4 (modified in place)
    """
    p = pixel_size(width, height, magnification)
    x0, y0 = plane_origin(width, height, cx, cy, p)

    for y in prange(height):
        im = y0 - y * p
        row_offset = y * width * 4
        for x in range(width):
            v = iterations(x0 + x * p, im, limit)
            idx = palette_index(v, limit)
            offset = row_offset + x * 4
            if idx < 0:
                for b in range(4):
                    out[offset + b] = black[b]
            else:
                for b in range(4):
                    out[offset + b] = palette[idx, b]


def new_pixel_buffer(params):
    """Allocate a zeroed RGBA buffer sized for params."""
    return np.zeros(params.buffer_size, dtype=np.uint8)


def draw_mandelbrot_set(params, img):
    """
    Fill img with the Mandelbrot image described by params.

    Args:
        params: ViewParams
        img: Pre-allocated uint8 numpy array or bytearray of length
            width*height*4 (modified in place)

    Returns:
        img, for chaining

    Raises:
        ValueError if img has the wrong size or dtype
    """
    if isinstance(img, np.ndarray):
        out = img
    else:
        out = np.frombuffer(img, dtype=np.uint8)

    if out.dtype != np.uint8:
        raise ValueError(f"buffer must be uint8, got {out.dtype}")
    if out.ndim != 1 or out.size != params.buffer_size:
        raise ValueError(
            f"buffer must hold {params.buffer_size} bytes for a "
            f"{params.width}x{params.height} image, got {out.size}"
        )

    fill_pixels(
        params.width, params.height,
        float(params.center_x), float(params.center_y),
        float(params.magnification), params.limit,
        PALETTE, BLACK, out
    )
    return img


def render_image(params):
    """Allocate a buffer and render params into it."""
    img = new_pixel_buffer(params)
    draw_mandelbrot_set(params, img)
    return img


def as_image_array(img, params):
    """View a flat buffer as a (height, width, 4) RGBA array (no copy)."""
    return np.asarray(img, dtype=np.uint8).reshape(params.height, params.width, 4)


def warmup_jit():
    """
    Warm up JIT compilation with a tiny viewport.

    Call this once at startup so compilation time does not end up in
    the first timed render.
    """
    dummy = np.zeros(4 * 4 * 4, dtype=np.uint8)
    fill_pixels(4, 4, -0.5, 0.0, 1.0, 8, PALETTE, BLACK, dummy)
    pixel_to_point(0, 4, 4, -0.5, 0.0, 1.0)
