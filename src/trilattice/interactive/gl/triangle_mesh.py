"""
どこで: `src/trilattice/interactive/gl/triangle_mesh.py`。
何を: VBO/VAO の確保・更新・解放を担当し、描画可能な TriangleMesh を管理。
なぜ: GPU 転送の詳細を Renderer から切り離し、再確保や VAO の張り直しを一元化するため。
"""

from __future__ import annotations

from typing import Any

import numpy as np


class TriangleMesh:
    """
    三角形列の頂点を GPU に送り込む作業を管理
    """

    def __init__(
        self,
        ctx: Any,
        program: Any,
        # 初期GPUメモリ確保量（既定: 1MB）。必要に応じて自動拡張。
        initial_reserve: int = 1024 * 1024,
    ):
        """
        ctx: moderngl コンテキスト
        program: 塗りつぶし用シェーダープログラム
        VBO: (x, y) float32 を 3 頂点ずつ並べた配列
        """
        self.ctx = ctx
        self.program = program
        self.initial_reserve = initial_reserve

        self.vbo = ctx.buffer(reserve=initial_reserve, dynamic=True)
        self.vao = ctx.simple_vertex_array(program, self.vbo, "in_vert")

        self.vertex_count: int = 0

    def _ensure_capacity(self, vbo_size: int) -> None:
        """データが大きくなったらGPUのバッファを再確保"""
        if vbo_size <= self.vbo.size:
            return
        self.vbo.release()
        self.vbo = self.ctx.buffer(reserve=max(vbo_size, self.initial_reserve), dynamic=True)
        # VAO は VBO が差し替わるときだけ張り直す。
        self.vao.release()
        self.vao = self.ctx.simple_vertex_array(self.program, self.vbo, "in_vert")

    def upload(self, vertices: np.ndarray) -> None:
        """shape (N, 3, 2) の三角形頂点を GPU へ送る"""
        vertices_f32 = np.ascontiguousarray(vertices, dtype=np.float32).reshape((-1, 2))
        self._ensure_capacity(vertices_f32.nbytes)

        self.vertex_count = int(vertices_f32.shape[0])
        if self.vertex_count == 0:
            return
        self.vbo.orphan()
        self.vbo.write(vertices_f32)

    def release(self) -> None:
        """GPUのメモリを解放する（終了時に使う）"""
        self.vbo.release()
        self.vao.release()
