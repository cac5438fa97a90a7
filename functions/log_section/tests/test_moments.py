import numpy as np
import pytest

from log_section.errors import DegenerateExtremeFiber, DegenerateRegion
from log_section.models import BoundingBox
from log_section.moments import compute_moments, compute_section_properties
from log_section.section_modulus import extreme_fiber_distance, section_modulus


def rectangle_mask(width, height, x0=0, y0=0, canvas=None):
    rows, cols = canvas or (y0 + height + 5, x0 + width + 5)
    mask = np.zeros((rows, cols), dtype=np.uint8)
    mask[y0:y0 + height, x0:x0 + width] = 255
    return mask


def test_raw_moments_use_pixel_centres():
    m = compute_moments(rectangle_mask(4, 2))
    assert m.m00 == 8
    assert m.centroid_px == pytest.approx((2.0, 1.0))


def test_rectangle_area_and_centroid():
    W, H, H_mm = 40, 60, 300.0
    scale = H_mm / H
    _, props = compute_section_properties(rectangle_mask(W, H), scale)
    assert props.area_mm2 == pytest.approx(W * H * scale ** 2)
    assert props.centroid_x_mm == pytest.approx(W / 2 * scale)
    assert props.centroid_y_mm == pytest.approx(H / 2 * scale)


def test_offset_rectangle_centroid():
    scale = 0.5
    _, props = compute_section_properties(rectangle_mask(10, 20, x0=30, y0=7), scale)
    assert props.centroid_x_mm == pytest.approx((30 + 5) * scale)
    assert props.centroid_y_mm == pytest.approx((7 + 10) * scale)


def test_rectangle_ixx_discrete_sum_is_exact():
    # Sum over pixel centres: W * (H^3 - H) / 12 in px^4
    W, H, scale = 30, 50, 2.0
    _, props = compute_section_properties(rectangle_mask(W, H), scale)
    assert props.Ixx_mm4 == pytest.approx(scale ** 4 * W * (H ** 3 - H) / 12)


@pytest.mark.parametrize("H", [10, 100, 400])
def test_rectangle_ixx_converges_to_closed_form(H):
    W = H // 2
    H_mm = 300.0
    scale = H_mm / H
    _, props = compute_section_properties(rectangle_mask(W, H), scale)
    closed = scale ** 4 * W * H ** 3 / 12
    assert abs(props.Ixx_mm4 - closed) / closed <= 1.0 / H ** 2 + 1e-12


def test_ixx_independent_of_vertical_position():
    _, a = compute_section_properties(rectangle_mask(20, 30, y0=0), 1.5)
    _, b = compute_section_properties(rectangle_mask(20, 30, y0=200), 1.5)
    assert a.Ixx_mm4 == pytest.approx(b.Ixx_mm4, rel=1e-12)


def test_empty_mask_is_degenerate():
    with pytest.raises(DegenerateRegion):
        compute_section_properties(np.zeros((5, 5), dtype=np.uint8), 1.0)


def test_rectangle_section_modulus_is_symmetric():
    W, H, H_mm = 40, 60, 300.0
    scale = H_mm / H
    _, props = compute_section_properties(rectangle_mask(W, H, y0=10), scale)
    bbox = BoundingBox(0, 10, W, H)
    assert extreme_fiber_distance(bbox, props.centroid_y_mm, scale) == pytest.approx(H_mm / 2)
    s = section_modulus(props.Ixx_mm4, bbox, props.centroid_y_mm, scale)
    assert s == pytest.approx(props.Ixx_mm4 / (H_mm / 2))


def test_extreme_fiber_takes_larger_side():
    bbox = BoundingBox(0, 0, 10, 10)
    assert extreme_fiber_distance(bbox, 3.0, 1.0) == pytest.approx(7.0)
    assert extreme_fiber_distance(bbox, 8.0, 1.0) == pytest.approx(8.0)


def test_degenerate_extreme_fiber():
    with pytest.raises(DegenerateExtremeFiber):
        section_modulus(1.0, BoundingBox(0, 5, 1, 0), 5.0, 1.0)
    with pytest.raises(DegenerateExtremeFiber):
        section_modulus(1.0, BoundingBox(0, 0, 1, 1), float("nan"), 1.0)
