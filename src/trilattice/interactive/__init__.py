# どこで: `src/trilattice/interactive/__init__.py`。
# 何を: pyglet + ModernGL によるライブプレビュー実装をまとめるパッケージ定義。
# なぜ: GUI 依存をこの層に閉じ込めるため。

from __future__ import annotations

__all__ = []
