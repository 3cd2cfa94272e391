# どこで: `src/trilattice/__init__.py`。
# 何を: ルート `trilattice` パッケージを定義する。
# なぜ: import 起点を `trilattice` に統一するため。

from __future__ import annotations

from trilattice.api import export_frame, export_frames, run

__all__ = ["export_frame", "export_frames", "run"]
