# どこで: `src/trilattice/core/__init__.py`。
# 何を: マスク・サンプラ・格子生成などヘッドレスなコア実装をまとめるパッケージ定義。
# なぜ: interactive（pyglet/ModernGL）に依存しない層を明示するため。

from __future__ import annotations

__all__ = []
