"""core.pool のスロット割り当て・スケジューラ・入力イベントのテスト。"""

from __future__ import annotations

import numpy as np
import pytest

from yellowtail.core.gesture import GestureState
from yellowtail.core.pool import GesturePool, PoolConfig
from yellowtail.core.toroidal import ToroidalRenderer


class RecordingContext:
    def __init__(self, width: int = 800, height: int = 600) -> None:
        self.width = width
        self.height = height
        self.cleared: list[tuple[float, float, float]] = []
        self.quads: list[np.ndarray] = []

    def clear_screen(self, color: tuple[float, float, float]) -> None:
        self.cleared.append(color)

    def draw_filled_quad(self, vertices: np.ndarray) -> None:
        self.quads.append(np.array(vertices))


def _stroke(pool: GesturePool, points: list[tuple[float, float]]) -> None:
    x0, y0 = points[0]
    pool.on_stroke_start(x0, y0)
    for x, y in points[1:]:
        pool.on_stroke_move(x, y)
    pool.on_stroke_end()


def test_default_pool() -> None:
    pool = GesturePool()
    assert len(pool) == 36
    assert pool.cursor == -1
    assert pool.active_gesture is None
    assert all(not g.exists for g in pool)


def test_pool_size_must_be_positive() -> None:
    with pytest.raises(ValueError):
        PoolConfig(n_gestures=0)


def test_select_slot_is_round_robin_and_clears() -> None:
    pool = GesturePool(PoolConfig(n_gestures=3))
    pool[0].add_point(1.0, 1.0)

    slots = [pool.gestures.index(pool.select_slot_for_new_stroke()) for _ in range(4)]

    assert slots == [0, 1, 2, 0]
    assert pool.cursor == 0
    assert not pool[0].exists


def test_new_stroke_overwrites_oldest_slot() -> None:
    pool = GesturePool(PoolConfig(n_gestures=2))
    _stroke(pool, [(0.0, 0.0), (10.0, 0.0)])
    _stroke(pool, [(0.0, 50.0), (10.0, 50.0)])
    _stroke(pool, [(0.0, 99.0), (10.0, 99.0), (20.0, 99.0)])

    assert pool.cursor == 0
    assert pool[0].buffer.count == 3
    np.testing.assert_allclose(pool[0].buffer.points[:, 1], [99.0, 99.0, 99.0])
    assert pool[1].buffer.count == 2


def test_end_to_end_stroke_loops_by_its_jump_vector() -> None:
    pool = GesturePool()
    pool.on_stroke_start(100.0, 100.0)
    assert pool.on_stroke_move(100.0, 200.0)
    pool.on_stroke_end()

    g = pool.active_gesture
    assert g is not None
    assert g.state is GestureState.LOOPING
    before = g.buffer.points.copy()
    jump = np.asarray(g.jump)
    assert np.linalg.norm(jump) == pytest.approx(100.0)

    pool.tick(pointer_held=False)

    np.testing.assert_allclose(g.buffer.points, before - jump)
    np.testing.assert_allclose(g.buffer.points, [[100.0, 300.0], [100.0, 200.0]])
    assert len(g.ribbon) > 0
    assert g.thickness == 14


def test_live_stroke_is_frozen_while_pointer_is_held() -> None:
    pool = GesturePool(PoolConfig(n_gestures=4))
    _stroke(pool, [(0.0, 0.0), (10.0, 0.0), (20.0, 0.0)])
    looping = pool.active_gesture

    pool.on_stroke_start(300.0, 300.0)
    pool.on_stroke_move(300.0, 320.0)
    live = pool.active_gesture
    assert live is not looping

    live_before = live.buffer.points.copy()
    looping_before = looping.buffer.points.copy()

    pool.tick(pointer_held=True)

    np.testing.assert_array_equal(live.buffer.points, live_before)
    assert not np.array_equal(looping.buffer.points, looping_before)
    assert live.state is GestureState.AUTHORING


def test_tick_releases_stroke_when_pointer_is_up() -> None:
    pool = GesturePool(PoolConfig(n_gestures=2))
    pool.on_stroke_start(0.0, 0.0)
    pool.on_stroke_move(0.0, 10.0)
    g = pool.active_gesture
    before = g.buffer.points.copy()

    # リリースイベントを取りこぼしたケース。
    pool.tick(pointer_held=False)

    assert g.state is GestureState.LOOPING
    assert not np.array_equal(g.buffer.points, before)


def test_tick_leaves_empty_gestures_alone() -> None:
    pool = GesturePool(PoolConfig(n_gestures=3))
    pool.tick(pointer_held=False)
    assert all(g.state is GestureState.EMPTY for g in pool)


def test_stroke_move_respects_min_move() -> None:
    pool = GesturePool(PoolConfig(min_move=3.0))
    pool.on_stroke_start(0.0, 0.0)

    assert not pool.on_stroke_move(2.0, 2.0)  # 距離 2.83
    assert not pool.on_stroke_move(3.0, 0.0)  # 距離 3 ちょうどは追加しない
    assert pool.on_stroke_move(4.0, 0.0)

    assert pool.active_gesture.buffer.count == 2
    assert len(pool.active_gesture.ribbon) == 1


def test_stroke_move_without_stroke_is_ignored() -> None:
    pool = GesturePool()
    assert not pool.on_stroke_move(10.0, 10.0)
    pool.on_stroke_end()
    assert all(not g.exists for g in pool)


def test_stroke_move_after_release_is_ignored() -> None:
    pool = GesturePool()
    _stroke(pool, [(0.0, 0.0), (10.0, 0.0)])
    assert not pool.on_stroke_move(50.0, 50.0)
    assert pool.active_gesture.buffer.count == 2


def test_thickness_keys_adjust_active_gesture() -> None:
    pool = GesturePool()
    # アクティブな Gesture が無くても例外にならない。
    pool.on_thickness_increase()
    pool.on_thickness_decrease()

    _stroke(pool, [(0.0, 0.0), (10.0, 0.0)])
    g = pool.active_gesture
    pool.on_thickness_increase()
    assert g.thickness == 15
    pool.on_thickness_decrease()
    pool.on_thickness_decrease()
    assert g.thickness == 13

    quad = g.quads[0]
    assert np.linalg.norm(quad[0] - quad[3]) == pytest.approx(13.0)


def test_thickness_keys_saturate() -> None:
    pool = GesturePool()
    _stroke(pool, [(0.0, 0.0), (10.0, 0.0)])
    g = pool.active_gesture
    g.set_thickness(96)
    pool.on_thickness_increase()
    assert g.thickness == 96
    g.set_thickness(2)
    pool.on_thickness_decrease()
    assert g.thickness == 2


def test_clear_all_empties_every_gesture_and_render_draws_nothing() -> None:
    pool = GesturePool(PoolConfig(n_gestures=4))
    _stroke(pool, [(0.0, 0.0), (10.0, 0.0), (20.0, 5.0)])
    _stroke(pool, [(100.0, 100.0), (100.0, 150.0)])
    pool.tick(pointer_held=False)

    pool.on_clear_all()

    for g in pool:
        assert not g.exists
        assert len(g.ribbon) == 0

    ctx = RecordingContext()
    assert pool.render(ctx) == 0
    assert ctx.quads == []
    assert len(ctx.cleared) == 1


def test_render_draws_all_stroke_quads() -> None:
    pool = GesturePool(
        PoolConfig(n_gestures=4),
        renderer=ToroidalRenderer(background_color=(0.0, 0.0, 0.0)),
    )
    _stroke(pool, [(100.0, 100.0), (110.0, 100.0), (120.0, 100.0)])
    _stroke(pool, [(300.0, 300.0), (300.0, 320.0)])

    ctx = RecordingContext()
    drawn = pool.render(ctx)

    assert drawn == 3
    assert len(ctx.quads) == 3
    assert ctx.cleared == [(0.0, 0.0, 0.0)]


def test_render_requeries_canvas_size_each_frame() -> None:
    pool = GesturePool(PoolConfig(n_gestures=1))
    _stroke(pool, [(795.0, 100.0), (805.0, 100.0)])

    wide = RecordingContext(width=1600, height=600)
    narrow = RecordingContext(width=800, height=600)

    assert pool.render(wide) == 1
    # 幅 800 では右端をまたぐので回り込みコピーが増える。
    assert pool.render(narrow) == 3


def test_new_stroke_start_releases_previous_live_stroke() -> None:
    pool = GesturePool(PoolConfig(n_gestures=4))
    pool.on_stroke_start(0.0, 0.0)
    pool.on_stroke_move(10.0, 0.0)
    first = pool.active_gesture

    # ドラッグ中に別のボタンが押されると、押下イベントがもう一度届く。
    pool.on_stroke_start(300.0, 300.0)
    second = pool.active_gesture
    assert second is not first
    assert first.state is GestureState.LOOPING

    first_before = first.buffer.points.copy()
    second_before = second.buffer.points.copy()
    pool.tick(pointer_held=True)

    assert not np.array_equal(first.buffer.points, first_before)
    np.testing.assert_array_equal(second.buffer.points, second_before)
    assert second.state is GestureState.AUTHORING
