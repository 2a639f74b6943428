# どこで: `src/yellowtail/interactive/gl/shader.py`。
# 何を: quad 塗りつぶし用の GLSL ソースとプログラム生成を提供する。
# なぜ: シェーダ文字列を renderer から切り離し、uniform 名（projection/color）の約束を一箇所に置くため。

from __future__ import annotations

from typing import Any

VERTEX_SHADER = """
#version 410

uniform mat4 projection;

in vec2 in_vert;

void main() {
    gl_Position = projection * vec4(in_vert, 0.0, 1.0);
}
"""

FRAGMENT_SHADER = """
#version 410

uniform vec4 color;

out vec4 frag_color;

void main() {
    frag_color = color;
}
"""


class Shader:
    """塗りつぶし用シェーダプログラムのファクトリ。"""

    @staticmethod
    def create_shader(ctx: Any) -> Any:
        """ModernGL コンテキスト上にプログラムを生成して返す。"""
        return ctx.program(vertex_shader=VERTEX_SHADER, fragment_shader=FRAGMENT_SHADER)
