import math

import pytest

from missile_command.utils import box_contains, clamp, distance, in_bounds, normalize, sanitize_point


def test_normalize_zero_vector_is_zero():
    assert normalize(0.0, 0.0) == (0.0, 0.0)
    assert normalize(3.0, -4.0) == pytest.approx((0.6, -0.8))


def test_box_contains_is_inclusive_on_edges():
    assert box_contains(110, 410, 100, 400, 10, 10)
    assert not box_contains(110.5, 400, 100, 400, 10, 10)
    assert not box_contains(100, 389, 100, 400, 10, 10)


def test_in_bounds_and_distance():
    assert in_bounds(0, 600, 800, 600)
    assert not in_bounds(800.1, 10, 800, 600)
    assert distance(0, 0, 3, 4) == 5.0
    assert clamp(5, 0, 3) == 3


def test_sanitize_point():
    assert sanitize_point(-1, 700, 800, 600) == (0.0, 600.0)
    assert sanitize_point("12", 5, 800, 600) == (12.0, 5.0)
    assert sanitize_point(math.nan, 5, 800, 600) is None
    assert sanitize_point(5, -math.inf, 800, 600) is None
