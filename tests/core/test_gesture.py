"""core.gesture の状態遷移・太さ・ジャンプベクトル・前進のテスト。"""

from __future__ import annotations

import numpy as np
import pytest

from yellowtail.core.gesture import (
    Gesture,
    GestureConfig,
    GestureState,
    clamp_thickness,
)


def _drawn(points: list[tuple[float, float]], config: GestureConfig | None = None) -> Gesture:
    g = Gesture(config)
    for x, y in points:
        g.add_point(x, y)
    g.compile()
    return g


def test_new_gesture_is_empty() -> None:
    g = Gesture()
    assert g.state is GestureState.EMPTY
    assert not g.exists
    assert not g.active
    assert g.thickness == 14
    assert g.quads.shape == (0, 4, 2)
    assert g.jump == (0.0, 0.0)


def test_first_point_starts_authoring() -> None:
    g = Gesture()
    g.add_point(10.0, 10.0)
    assert g.state is GestureState.AUTHORING
    assert g.exists
    assert g.active


def test_single_point_compiles_to_empty_ribbon() -> None:
    g = _drawn([(10.0, 10.0)])
    assert len(g.ribbon) == 0


def test_compile_produces_n_minus_one_quads() -> None:
    g = _drawn([(0.0, 0.0), (10.0, 0.0), (20.0, 5.0), (30.0, 5.0)])
    assert g.quads.shape == (3, 4, 2)


def test_compile_twice_yields_identical_quads() -> None:
    g = _drawn([(0.0, 0.0), (10.0, 0.0), (20.0, 5.0), (30.0, 5.0)])
    first = g.quads.copy()
    g.compile()
    np.testing.assert_array_equal(g.quads, first)


@pytest.mark.parametrize(("requested", "expected"), [(-5, 2), (1000, 96), (2, 2), (96, 96), (40, 40)])
def test_set_thickness_clamps(requested: int, expected: int) -> None:
    g = Gesture()
    g.set_thickness(requested)
    assert g.thickness == expected


def test_set_thickness_recompiles() -> None:
    g = _drawn([(0.0, 0.0), (10.0, 0.0)])
    g.set_thickness(20)
    quad = g.quads[0]
    assert np.linalg.norm(quad[0] - quad[3]) == pytest.approx(20.0)


def test_adjust_thickness_saturates() -> None:
    g = Gesture(GestureConfig(thickness_min=2, thickness_max=4, initial_thickness=3))
    g.adjust_thickness(+1)
    g.adjust_thickness(+1)
    assert g.thickness == 4
    for _ in range(5):
        g.adjust_thickness(-1)
    assert g.thickness == 2


def test_clamp_thickness_rounds_to_int() -> None:
    assert clamp_thickness(7.6, 2, 96) == 8
    assert isinstance(clamp_thickness(7.6, 2, 96), int)


def test_jump_vector_follows_stroke_while_authoring() -> None:
    g = _drawn([(100.0, 100.0), (100.0, 200.0)])
    assert g.jump == pytest.approx((0.0, -100.0))
    assert g.jump == pytest.approx(g.buffer.span())

    g.add_point(150.0, 200.0)
    g.compile()
    assert g.jump == pytest.approx((-50.0, -100.0))


def test_jump_vector_freezes_when_buffer_fills() -> None:
    g = _drawn([(0.0, 0.0), (10.0, 0.0), (20.0, 0.0)], GestureConfig(capacity=3))
    assert g.jump_frozen
    frozen = g.jump

    g.add_point(20.0, 50.0)
    g.compile()
    assert g.jump == frozen


def test_release_moves_to_looping_and_freezes_jump() -> None:
    g = _drawn([(0.0, 0.0), (10.0, 0.0)])
    g.release()
    assert g.state is GestureState.LOOPING
    assert g.exists
    assert not g.active
    assert g.jump_frozen
    assert g.jump == pytest.approx((-10.0, 0.0))


def test_release_on_empty_gesture_is_noop() -> None:
    g = Gesture()
    g.release()
    assert g.state is GestureState.EMPTY


def test_step_advances_by_jump_vector() -> None:
    g = _drawn([(0.0, 0.0), (10.0, 3.0), (22.0, 1.0), (30.0, 9.0)])
    g.release()
    before = g.buffer.points.copy()
    jump = np.asarray(g.jump)

    g.step()

    after = g.buffer.points
    np.testing.assert_array_equal(after[1:], before[:-1])
    np.testing.assert_allclose(after[0], before[-2] - jump)
    assert len(g.ribbon) == 3


def test_step_keeps_shape_of_looping_stroke() -> None:
    g = _drawn([(0.0, 0.0), (10.0, 0.0), (20.0, 0.0), (30.0, 0.0)])
    g.release()
    for _ in range(3):
        g.step()
    # 3 ステップ（= 点数 - 1）でちょうどジャンプベクトル 1 つ分進む。
    np.testing.assert_allclose(
        g.buffer.points,
        [[60.0, 0.0], [50.0, 0.0], [40.0, 0.0], [30.0, 0.0]],
    )


def test_step_on_empty_gesture_is_noop() -> None:
    g = Gesture()
    g.step()
    assert g.buffer.count == 0
    assert len(g.ribbon) == 0


def test_clear_resets_everything() -> None:
    g = _drawn([(0.0, 0.0), (10.0, 0.0), (20.0, 0.0)])
    g.set_thickness(50)
    g.release()

    g.clear()

    assert g.state is GestureState.EMPTY
    assert not g.exists
    assert g.buffer.count == 0
    assert len(g.ribbon) == 0
    assert g.thickness == 14
    assert g.jump == (0.0, 0.0)
    assert not g.jump_frozen


def test_config_rejects_inverted_thickness_bounds() -> None:
    with pytest.raises(ValueError):
        GestureConfig(thickness_min=10, thickness_max=5)


@pytest.mark.parametrize("initial", [1, 97, 200])
def test_config_rejects_initial_thickness_outside_bounds(initial: int) -> None:
    with pytest.raises(ValueError):
        GestureConfig(initial_thickness=initial)
