"""core.vec の 2D ベクトル演算のテスト。"""

from __future__ import annotations

import math

import pytest

from yellowtail.core.vec import distance, perpendicular_offset, unit_perpendicular


def test_distance_is_euclidean() -> None:
    assert distance(0.0, 0.0, 3.0, 4.0) == pytest.approx(5.0)
    assert distance(1.0, 1.0, 1.0, 1.0) == 0.0


def test_unit_perpendicular_rotates_by_90_degrees() -> None:
    px, py = unit_perpendicular(10.0, 0.0)
    assert px == pytest.approx(0.0)
    assert py == pytest.approx(1.0)

    px, py = unit_perpendicular(3.0, 4.0)
    assert math.hypot(px, py) == pytest.approx(1.0)
    # 元の方向と直交する。
    assert px * 3.0 + py * 4.0 == pytest.approx(0.0)


def test_unit_perpendicular_of_zero_vector_is_zero_not_nan() -> None:
    px, py = unit_perpendicular(0.0, 0.0)
    assert (px, py) == (0.0, 0.0)


def test_perpendicular_offset_scales_by_half_width() -> None:
    ox, oy = perpendicular_offset(0.0, 5.0, 3.0)
    assert ox == pytest.approx(-3.0)
    assert oy == pytest.approx(0.0)

    assert perpendicular_offset(0.0, 0.0, 3.0) == (0.0, 0.0)
