# どこで: `src/trilattice/interactive/gl/draw_renderer.py`。
# 何を: ライブ描画用の ModernGL レンダラーをカプセル化する。
# なぜ: コンテキスト生成・シェーダ設定・メッシュ転送を `run` から分離し、責務を明確にするため。

from __future__ import annotations

import moderngl
from pyglet.window import Window

from trilattice.core.color import ColorRGB
from trilattice.core.frame import TriangleLayer
from trilattice.interactive.gl import utils as render_utils
from trilattice.interactive.gl.shader import Shader
from trilattice.interactive.gl.triangle_mesh import TriangleMesh
from trilattice.interactive.render_settings import RenderSettings


class DrawRenderer:
    """塗りつぶし三角形を描画するシンプルなレンダラー。"""

    def __init__(self, window: Window, settings: RenderSettings) -> None:
        window.switch_to()
        self.ctx = moderngl.create_context(require=410)
        self.program = Shader.create_shader(self.ctx)
        # レイヤーごとに 1 メッシュ。フレーム内容が変わったときだけ upload し直す。
        self._meshes: dict[str, TriangleMesh] = {}
        self._canvas_w, self._canvas_h = settings.canvas_size
        # 射影行列はキャンバス寸法にのみ依存するため初期化時に一度設定する。
        projection = render_utils.build_projection(
            float(self._canvas_w),
            float(self._canvas_h),
        )
        self.program["projection"].write(projection.tobytes())

    def viewport(self, width: int, height: int) -> None:
        """ビューポートをウィンドウサイズに合わせて更新する。"""
        self.ctx.viewport = (0, 0, int(width), int(height))

    def clear(self, color: ColorRGB) -> None:
        """背景色でクリアする。"""
        self.ctx.clear(*color, 1.0)

    def upload_layers(self, layers: list[TriangleLayer]) -> None:
        """レイヤー列の頂点を GPU へ送る。"""
        for layer in layers:
            mesh = self._meshes.get(layer.name)
            if mesh is None:
                mesh = TriangleMesh(self.ctx, self.program)
                self._meshes[layer.name] = mesh
            mesh.upload(layer.triangles.vertices)

    def render_layers(self, layers: list[TriangleLayer]) -> None:
        """upload 済みのレイヤーを描画順に draw call する。"""
        for layer in layers:
            mesh = self._meshes.get(layer.name)
            if mesh is None or mesh.vertex_count == 0:
                continue
            self.program["color"].value = (*layer.color, 1.0)
            mesh.vao.render(mode=self.ctx.TRIANGLES, vertices=mesh.vertex_count)

    def release(self) -> None:
        """GPU リソースを解放する。"""
        for mesh in self._meshes.values():
            mesh.release()
        self._meshes.clear()
        self.program.release()
        self.ctx.release()
