"""
どこで: `src/trilattice/core/decor.py`。
何を: 手置きの装飾三角形（頂点 3 組のテーブル）を保持し、フレームの回転角で重心回転して emit する。
なぜ: 座標リストを手続きコードではなくデータとして扱い、生成アルゴリズムから切り離すため。
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

import numpy as np

from trilattice.core.emitter import TriangleEmitter, TriangleSet


@dataclass(frozen=True, slots=True)
class DecorTable:
    """名前付きグループごとの装飾三角形。

    Parameters
    ----------
    groups : tuple[tuple[str, np.ndarray], ...]
        `(name, vertices)` の列。vertices は float64 shape (N, 3, 2)。
    """

    groups: tuple[tuple[str, np.ndarray], ...]

    @classmethod
    def from_mapping(cls, data: Mapping[str, Sequence[Sequence[Any]]] | None) -> DecorTable:
        """`{group: [[x1, y1, x2, y2, x3, y3], ...]}` 形式から構築する。"""

        if data is None:
            return cls(groups=())
        groups: list[tuple[str, np.ndarray]] = []
        for name, rows in data.items():
            try:
                arr = np.asarray(rows if rows else np.zeros((0, 6)), dtype=np.float64)
            except (TypeError, ValueError) as exc:
                raise ValueError(f"decor.{name} は数値 6 個の行の列である必要がある") from exc
            if arr.ndim != 2 or arr.shape[1] != 6:
                raise ValueError(
                    f"decor.{name} は数値 6 個の行の列である必要がある: shape={arr.shape}"
                )
            verts = arr.reshape((-1, 3, 2))
            verts.setflags(write=False)
            groups.append((str(name), verts))
        return cls(groups=tuple(groups))

    def __len__(self) -> int:
        return sum(int(v.shape[0]) for _, v in self.groups)

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(name for name, _ in self.groups)

    def vertices(self) -> np.ndarray:
        """全グループを連結した頂点 shape (N, 3, 2) を返す。"""

        if not self.groups:
            return np.zeros((0, 3, 2), dtype=np.float64)
        return np.concatenate([v for _, v in self.groups], axis=0)

    def rotated(self, angle: float) -> TriangleSet:
        """各三角形を自身の重心周りに angle [rad] 回転した TriangleSet を返す。"""

        verts = self.vertices()
        if verts.shape[0] == 0:
            return TriangleSet.empty()
        centroids = verts.mean(axis=1, keepdims=True)
        d = verts - centroids
        ca = np.cos(angle)
        sa = np.sin(angle)
        out = np.empty_like(verts)
        out[..., 0] = centroids[..., 0] + d[..., 0] * ca - d[..., 1] * sa
        out[..., 1] = centroids[..., 1] + d[..., 0] * sa + d[..., 1] * ca
        return TriangleSet(vertices=out)

    def generate(self, angle: float, emitter: TriangleEmitter) -> int:
        """回転済みの装飾三角形を emitter へ渡し、emit 数を返す。"""

        tris = self.rotated(angle)
        tris.emit(emitter)
        return len(tris)


__all__ = ["DecorTable"]
