# どこで: `src/yellowtail/interactive/gl/draw_renderer.py`。
# 何を: コアの DrawContext を ModernGL で実装するレンダラーをカプセル化する。
# なぜ: コンテキスト生成・シェーダ設定・メッシュ転送をウィンドウ配線から分離し、責務を明確にするため。

from __future__ import annotations

import moderngl
import numpy as np
from pyglet.window import Window

from yellowtail.interactive.gl import utils as render_utils
from yellowtail.interactive.gl.quad_mesh import QuadMesh
from yellowtail.interactive.gl.shader import Shader
from yellowtail.interactive.render_settings import RenderSettings


class DrawRenderer:
    """quad をフレーム単位でまとめ、1 回の draw call で塗りつぶすレンダラー。

    `begin_frame()` → `clear_screen()` / `draw_filled_quad(s)()` → `flush()` の順に呼ぶ。
    """

    def __init__(self, window: Window, settings: RenderSettings) -> None:
        window.switch_to()
        self._window = window
        self.ctx = moderngl.create_context(require=410)
        self.program = Shader.create_shader(self.ctx)
        self._mesh = QuadMesh(self.ctx, self.program)
        self._fill_color = tuple(float(c) for c in settings.fill_color)
        self._pending: list[np.ndarray] = []

    # ---------- DrawContext ----------
    @property
    def width(self) -> int:
        return int(self._window.width)

    @property
    def height(self) -> int:
        return int(self._window.height)

    def clear_screen(self, color: tuple[float, float, float]) -> None:
        """背景色でクリアする。"""
        self.ctx.clear(*color, 1.0)

    def draw_filled_quad(self, vertices: np.ndarray) -> None:
        """4 頂点の quad を今フレームの描画キューへ積む。"""
        quad = np.asarray(vertices, dtype=np.float32).reshape(1, 4, 2)
        self._pending.append(quad)

    def draw_filled_quads(self, quads: np.ndarray) -> None:
        """shape (K,4,2) の quad 列をまとめて描画キューへ積む。"""
        arr = np.asarray(quads)
        if arr.shape[0] == 0:
            return
        self._pending.append(arr)

    # ---------- フレーム ----------
    def _framebuffer_size(self) -> tuple[int, int]:
        getter = getattr(self._window, "get_framebuffer_size", None)
        if callable(getter):
            w, h = getter()
            return int(w), int(h)
        return self.width, self.height

    def begin_frame(self) -> None:
        """screen を bind し、現在のウィンドウサイズに viewport と射影を合わせる。"""
        self.ctx.screen.use()
        fb_w, fb_h = self._framebuffer_size()
        self.ctx.viewport = (0, 0, int(fb_w), int(fb_h))
        # 座標は論理ピクセル（イベント座標と同じ）で扱い、HiDPI の倍率は viewport に任せる。
        w, h = self.width, self.height
        if w > 0 and h > 0:
            projection = render_utils.build_projection(float(w), float(h))
            self.program["projection"].write(projection.tobytes())
        self._pending.clear()

    def flush(self) -> int:
        """積んだ quad を GPU へ送り、塗り色で描画する。描いた quad 数を返す。"""
        pending = self._pending
        if not pending:
            return 0
        quads = pending[0] if len(pending) == 1 else np.concatenate(pending, axis=0)
        pending.clear()

        n_quads = self._mesh.upload(quads)
        self.program["color"].value = (*self._fill_color, 1.0)
        self._mesh.render()
        return n_quads

    def release(self) -> None:
        """GPU リソースを解放する。"""
        self._pending.clear()
        self._mesh.release()
        self.program.release()
        self.ctx.release()
