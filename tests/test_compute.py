import numpy as np
import pytest

from mandelraster.compute import (
    pixel_size,
    plane_origin,
    pixel_to_point,
    escapes,
    step,
    iterations,
)


def grid_points(width, height, cx, cy, mag):
    """All mapped points as a (height, width, 2) array."""
    pts = np.empty((height, width, 2))
    for i in range(width * height):
        re, im = pixel_to_point(i, width, height, cx, cy, mag)
        pts[i // width, i % width] = (re, im)
    return pts


# ---------------------------------------------------------------------------
# Coordinate mapping
# ---------------------------------------------------------------------------

def test_pixel_size_uses_shorter_side():
    assert pixel_size(800, 600, 1.5) == pytest.approx(4.0 / 600 / 1.5)
    assert pixel_size(100, 400, 1.0) == pytest.approx(0.04)
    assert pixel_size(2, 1, 1.0) == 4.0


def test_plane_origin_is_top_left():
    x0, y0 = plane_origin(2, 1, 0.0, 0.0, 4.0)
    assert (x0, y0) == (-4.0, 2.0)


def test_two_by_one_mapping():
    assert pixel_to_point(0, 2, 1, 0.0, 0.0, 1.0) == (-4.0, 2.0)
    assert pixel_to_point(1, 2, 1, 0.0, 0.0, 1.0) == (0.0, 2.0)


def test_rows_go_down_the_imaginary_axis():
    # 2x2 image: second row is one step below the first
    _, im_top = pixel_to_point(0, 2, 2, 0.0, 0.0, 1.0)
    _, im_bottom = pixel_to_point(2, 2, 2, 0.0, 0.0, 1.0)
    assert im_bottom < im_top
    assert im_top - im_bottom == pytest.approx(pixel_size(2, 2, 1.0))


@pytest.mark.parametrize("width, height, cx, cy, mag", [
    (8, 6, -0.5, 0.0, 1.5),
    (5, 9, 0.25, -0.3, 4.0),
    (16, 16, 1.0, 1.0, 0.5),
])
def test_grid_is_regular(width, height, cx, cy, mag):
    """Horizontal and vertical spacing both equal the pixel size."""
    p = pixel_size(width, height, mag)
    pts = grid_points(width, height, cx, cy, mag)

    dx = np.diff(pts[:, :, 0], axis=1)
    dy = np.diff(pts[:, :, 1], axis=0)
    np.testing.assert_allclose(dx, p, rtol=1e-9)
    np.testing.assert_allclose(dy, -p, rtol=1e-9)

    # real part constant down a column, imaginary part constant along a row
    np.testing.assert_allclose(np.ptp(pts[:, :, 0], axis=0), 0.0, atol=1e-12)
    np.testing.assert_allclose(np.ptp(pts[:, :, 1], axis=1), 0.0, atol=1e-12)


@pytest.mark.parametrize("width, height, cx, cy, mag", [
    (8, 6, -0.5, 0.0, 1.5),
    (5, 9, 0.25, -0.3, 4.0),
])
def test_grid_symmetric_about_center(width, height, cx, cy, mag):
    """The grid spans [x0, x0 + width*p) so its half-pixel-shifted midpoint is the center."""
    p = pixel_size(width, height, mag)
    pts = grid_points(width, height, cx, cy, mag)
    re_mid = (pts[0, 0, 0] + pts[0, -1, 0] + p) / 2
    im_mid = (pts[0, 0, 1] + pts[-1, 0, 1] - p) / 2
    assert re_mid == pytest.approx(cx)
    assert im_mid == pytest.approx(cy)


# ---------------------------------------------------------------------------
# Escape-time iteration
# ---------------------------------------------------------------------------

def test_escape_boundary_is_exclusive():
    assert not escapes(2.0, 0.0)
    assert not escapes(0.0, -2.0)
    assert escapes(2.0000001, 0.0)
    assert escapes(-4.0, 2.0)
    assert not escapes(0.0, 0.0)


def test_step_is_z_squared_plus_c():
    z = complex(0.3, -0.7)
    c = complex(-0.1, 0.4)
    re, im = step(z.real, z.imag, c.real, c.imag)
    expected = z * z + c
    assert re == pytest.approx(expected.real)
    assert im == pytest.approx(expected.imag)


@pytest.mark.parametrize("limit", [0, 1, 2, 10, 1000])
def test_origin_never_escapes(limit):
    assert iterations(0.0, 0.0, limit) == limit


def test_immediate_escape_is_zero():
    assert iterations(-4.0, 2.0, 10) == 0
    assert iterations(3.0, 0.0, 0) == 0


def test_boundary_point_escapes_after_one_step():
    # (0, 2): |z|² == 4 so no escape at i=0; next is (-4, 2)
    assert iterations(0.0, 2.0, 10) == 1


def test_known_counts():
    # c = 1: 1, 2, 5 -> |5|² > 4 after two steps
    assert iterations(1.0, 0.0, 50) == 2
    # c = -1 cycles 0, -1 forever
    assert iterations(-1.0, 0.0, 50) == 50
    # c = -2 lands on 2 and stays there, exactly on the radius
    assert iterations(-2.0, 0.0, 50) == 50


def test_iterations_in_range():
    rng = np.random.default_rng(1234)
    for re, im in rng.uniform(-2.5, 2.5, size=(200, 2)):
        v = iterations(float(re), float(im), 30)
        assert 0 <= v <= 30


def test_iterations_match_complex_reference():
    """Compare with a straightforward complex-number loop."""
    def reference(c, limit):
        z = c
        for i in range(limit + 1):
            if z.real * z.real + z.imag * z.imag > 4.0:
                return i
            z = z * z + c
        return limit

    for c in [0.25 + 0.5j, -0.75 + 0.1j, 0.35 - 0.35j, -1.8 + 0.01j, 0.4 + 0.6j]:
        assert iterations(c.real, c.imag, 200) == reference(c, 200)
