"""
どこで: `src/trilattice/core/emitter.py`。
何を: 三角形描画の受け口（TriangleEmitter）と、1 フレーム分の三角形配列（TriangleSet）を定義する。
なぜ: 幾何生成は頂点を計算するだけにし、実際の描画（GL / SVG / テスト収集）を差し替え可能にするため。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

import numpy as np

Point = tuple[float, float]


class TriangleEmitter(Protocol):
    """塗りつぶし三角形 1 枚を受け取る描画先。

    Notes
    -----
    塗り色は呼び出し側（レイヤー）が持ち、emitter は頂点だけを受け取る。
    """

    def triangle(self, p1: Point, p2: Point, p3: Point) -> None: ...


@dataclass(frozen=True, slots=True)
class TriangleSet:
    """三角形列を表す不変配列。

    Parameters
    ----------
    vertices : np.ndarray
        float32 型 shape (N, 3, 2) の頂点配列。
    """

    vertices: np.ndarray

    def __post_init__(self) -> None:
        vertices = np.asarray(self.vertices)
        if vertices.size == 0:
            vertices = np.zeros((0, 3, 2), dtype=np.float32)
        if vertices.ndim != 3 or vertices.shape[1:] != (3, 2):
            raise ValueError("vertices は shape (N,3,2) の配列である必要がある")
        if vertices.dtype != np.float32:
            vertices = vertices.astype(np.float32)
        vertices = np.ascontiguousarray(vertices)
        vertices.setflags(write=False)
        object.__setattr__(self, "vertices", vertices)

    def __len__(self) -> int:
        return int(self.vertices.shape[0])

    @classmethod
    def empty(cls) -> TriangleSet:
        return cls(vertices=np.zeros((0, 3, 2), dtype=np.float32))

    def emit(self, emitter: TriangleEmitter) -> None:
        """保持する三角形を順に emitter へ渡す。"""

        for tri in self.vertices:
            emitter.triangle(
                (float(tri[0, 0]), float(tri[0, 1])),
                (float(tri[1, 0]), float(tri[1, 1])),
                (float(tri[2, 0]), float(tri[2, 1])),
            )


class TriangleBuffer:
    """emit された三角形を貯めて TriangleSet にまとめる emitter。"""

    def __init__(self) -> None:
        self._items: list[tuple[Point, Point, Point]] = []

    def __len__(self) -> int:
        return len(self._items)

    def triangle(self, p1: Point, p2: Point, p3: Point) -> None:
        self._items.append((p1, p2, p3))

    def to_set(self) -> TriangleSet:
        if not self._items:
            return TriangleSet.empty()
        return TriangleSet(vertices=np.asarray(self._items, dtype=np.float32))


__all__ = [
    "Point",
    "TriangleBuffer",
    "TriangleEmitter",
    "TriangleSet",
]
