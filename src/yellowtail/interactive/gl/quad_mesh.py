"""
どこで: `src/yellowtail/interactive/gl/quad_mesh.py`。
何を: quad 列を三角形 2 枚ずつの VBO/IBO に詰め、VAO 経由で塗りつぶし描画する QuadMesh を提供する。
なぜ: バッファの再確保と VAO の張り直しを renderer から切り離して一箇所にまとめるため。
"""

from __future__ import annotations

from typing import Any

import numpy as np

from yellowtail.interactive.gl.quad_indices import INDICES_PER_QUAD, build_quad_indices
from yellowtail.interactive.gl.utils import quads_to_vertices

_VERTEX_BYTES = 2 * 4
_INDEX_BYTES = 4


class QuadMesh:
    """フレームごとの quad 列を GPU へ送り、TRIANGLES で描く。

    容量が足りなくなった時だけ倍々でバッファを取り直す。
    """

    def __init__(
        self,
        ctx: Any,
        program: Any,
        # 初期確保量は quad 数で指定する。36 本 x 600 点 x 回り込みコピーでも数回の拡張で収まる。
        initial_quads: int = 16 * 1024,
    ):
        """
        ctx: moderngl コンテキスト
        program: `in_vert`（vec2）を受け取るシェーダプログラム
        """
        if initial_quads <= 0:
            raise ValueError(f"initial_quads は正の値である必要がある: got={initial_quads}")
        self.ctx = ctx
        self.program = program

        self._quad_capacity = int(initial_quads)
        self.vbo = ctx.buffer(reserve=self._quad_capacity * 4 * _VERTEX_BYTES, dynamic=True)
        self.ibo = ctx.buffer(
            reserve=self._quad_capacity * INDICES_PER_QUAD * _INDEX_BYTES, dynamic=True
        )
        self.vao = self._build_vao()

        self.quad_count: int = 0

    @property
    def quad_capacity(self) -> int:
        """再確保なしで載せられる quad 数。"""
        return self._quad_capacity

    def _build_vao(self) -> Any:
        return self.ctx.simple_vertex_array(
            self.program, self.vbo, "in_vert", index_buffer=self.ibo
        )

    def _reserve(self, n_quads: int) -> None:
        if n_quads <= self._quad_capacity:
            return
        capacity = self._quad_capacity
        while capacity < n_quads:
            capacity *= 2

        self.vao.release()
        self.vbo.release()
        self.ibo.release()
        self.vbo = self.ctx.buffer(reserve=capacity * 4 * _VERTEX_BYTES, dynamic=True)
        self.ibo = self.ctx.buffer(reserve=capacity * INDICES_PER_QUAD * _INDEX_BYTES, dynamic=True)
        self.vao = self._build_vao()
        self._quad_capacity = capacity

    def upload(self, quads: np.ndarray) -> int:
        """shape (K,4,2) の quad 列を GPU へ送り、K を返す。"""
        vertices = quads_to_vertices(quads)
        n_quads = int(vertices.shape[0] // 4)
        self.quad_count = n_quads
        if n_quads == 0:
            return 0

        self._reserve(n_quads)
        self.vbo.orphan()
        self.vbo.write(vertices)
        self.ibo.orphan()
        self.ibo.write(build_quad_indices(n_quads))
        return n_quads

    def render(self) -> None:
        """直前に upload した quad 列を描く。"""
        if self.quad_count == 0:
            return
        self.vao.render(mode=self.ctx.TRIANGLES, vertices=self.quad_count * INDICES_PER_QUAD)

    def release(self) -> None:
        self.vao.release()
        self.vbo.release()
        self.ibo.release()
