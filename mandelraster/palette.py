"""
Fixed 16-color cyclic palette for escape-time coloring.

Escaped points take palette[count % 16], which gives the familiar
banding around the set. Points that hit the iteration cap (the set's
interior) and points that escape on iteration zero are drawn black.

PALETTE and BLACK are read-only numpy arrays so they can be handed
straight to the compiled compositor kernel.
"""

import numpy as np
from numba import jit


PALETTE = np.array([
    [66, 30, 15, 255],     # dark brown
    [25, 7, 26, 255],      # dark violet
    [9, 1, 47, 255],
    [4, 4, 73, 255],
    [0, 7, 100, 255],      # navy
    [12, 44, 138, 255],
    [24, 82, 177, 255],
    [57, 125, 209, 255],
    [134, 181, 229, 255],  # light blue
    [211, 236, 248, 255],
    [241, 233, 191, 255],
    [248, 201, 95, 255],
    [255, 170, 0, 255],    # orange
    [204, 128, 0, 255],
    [153, 87, 0, 255],
    [106, 52, 3, 255],
], dtype=np.uint8)
PALETTE.setflags(write=False)

BLACK = np.array([0, 0, 0, 255], dtype=np.uint8)
BLACK.setflags(write=False)

PALETTE_SIZE = 16


@jit(nopython=True, cache=True)
def palette_index(v, limit):
    """Palette row for iteration count v, or -1 when the pixel is black."""
    if v > 0 and v < limit:
        return v % PALETTE_SIZE
    return -1


def color(v, limit):
    """
    Map an iteration count to an RGBA tuple.

    Args:
        v: Iteration count returned by compute.iterations()
        limit: The iteration cap used for that count

    Returns:
        (r, g, b, a) tuple of ints
    """
    idx = palette_index(v, limit)
    rgba = BLACK if idx < 0 else PALETTE[idx]
    return tuple(int(c) for c in rgba)
