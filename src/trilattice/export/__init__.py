# どこで: `src/trilattice/export/__init__.py`。
# 何を: SVG / PNG 出力の実装をまとめるパッケージ定義。
# なぜ: interactive 依存なしにフレームをファイルへ書き出せるようにするため。

from __future__ import annotations

__all__ = []
