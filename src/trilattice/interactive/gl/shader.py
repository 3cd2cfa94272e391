# どこで: `src/trilattice/interactive/gl/shader.py`。
# 何を: 塗りつぶし三角形用の GLSL シェーダプログラムを生成する。
# なぜ: シェーダ文字列を renderer から分離し、uniform 名を一箇所で管理するため。

from __future__ import annotations

from typing import Any

VERTEX_SHADER = """
#version 410
in vec2 in_vert;
uniform mat4 projection;

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
    """塗りつぶし三角形のシェーダ生成。"""

    @staticmethod
    def create_shader(ctx: Any) -> Any:
        """`projection` / `color` uniform を持つプログラムを返す。"""
        return ctx.program(vertex_shader=VERTEX_SHADER, fragment_shader=FRAGMENT_SHADER)
