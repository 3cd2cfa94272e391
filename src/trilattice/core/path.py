"""
どこで: `src/trilattice/core/path.py`。
何を: 直線/3 次ベジェ区間からなる閉パスのモデルと、ポリラインへの平坦化を提供する。
なぜ: マスク生成（ラスタライズ）の入力を「描画 API の呼び出し列」ではなくデータとして扱うため。
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import numpy as np

# 3 次ベジェ 1 区間あたりの既定サンプル数。
DEFAULT_CURVE_SAMPLES = 24


@dataclass(frozen=True, slots=True)
class LineTo:
    """現在点から `end` までの直線区間。"""

    end: tuple[float, float]


@dataclass(frozen=True, slots=True)
class CubicTo:
    """現在点を始点とする 3 次ベジェ区間。"""

    c1: tuple[float, float]
    c2: tuple[float, float]
    end: tuple[float, float]


Segment = LineTo | CubicTo


@dataclass(frozen=True, slots=True)
class VectorPath:
    """始点と区間列で表す閉パス。

    Parameters
    ----------
    start : tuple[float, float]
        始点（絶対座標）。
    segments : tuple[Segment, ...]
        区間列。終点から始点へは暗黙に閉じる。
    """

    start: tuple[float, float]
    segments: tuple[Segment, ...]

    @classmethod
    def from_commands(cls, commands: Sequence[Sequence[Any]]) -> VectorPath:
        """`[["M", x, y], ["C", x1, y1, x2, y2, x, y], ["L", x, y], ...]` 形式から構築する。

        Raises
        ------
        ValueError
            先頭が M でない、未知のコマンド、引数個数の不一致のいずれか。
        """

        if not commands:
            raise ValueError("パスコマンドが空です")

        head = list(commands[0])
        if not head or str(head[0]).upper() != "M":
            raise ValueError(f"パスは M で始まる必要がある: got={head!r}")
        start = _as_point(head[1:], command="M")

        segments: list[Segment] = []
        for raw in commands[1:]:
            cmd = list(raw)
            if not cmd:
                raise ValueError("空のパスコマンドは指定できません")
            op = str(cmd[0]).upper()
            args = cmd[1:]
            if op == "L":
                segments.append(LineTo(end=_as_point(args, command="L")))
            elif op == "C":
                if len(args) != 6:
                    raise ValueError(f"C は 6 個の数値が必要: got={cmd!r}")
                segments.append(
                    CubicTo(
                        c1=_as_point(args[0:2], command="C"),
                        c2=_as_point(args[2:4], command="C"),
                        end=_as_point(args[4:6], command="C"),
                    )
                )
            elif op == "Z":
                # 常に閉じるので明示 Z は読み飛ばす。
                continue
            else:
                raise ValueError(f"未対応のパスコマンド: {op!r}")

        return cls(start=start, segments=tuple(segments))

    def flatten(self, samples_per_curve: int = DEFAULT_CURVE_SAMPLES) -> np.ndarray:
        """パスを折れ線へ平坦化して float64 shape (N, 2) で返す（閉じ点は含めない）。"""

        n = int(samples_per_curve)
        if n < 1:
            raise ValueError("samples_per_curve は 1 以上である必要がある")

        points: list[np.ndarray] = [np.asarray([self.start], dtype=np.float64)]
        current = np.asarray(self.start, dtype=np.float64)
        for seg in self.segments:
            end = np.asarray(seg.end, dtype=np.float64)
            if isinstance(seg, CubicTo):
                pts = cubic_bezier_points(
                    current,
                    np.asarray(seg.c1, dtype=np.float64),
                    np.asarray(seg.c2, dtype=np.float64),
                    end,
                    n,
                )
                points.append(pts[1:])
            else:
                points.append(end.reshape(1, 2))
            current = end

        out = np.concatenate(points, axis=0)
        # 明示的に始点へ戻る最終点は閉じ点なので落とす。
        if out.shape[0] > 1 and np.allclose(out[-1], out[0]):
            out = out[:-1]
        return out


def cubic_bezier_points(
    p0: np.ndarray,
    p1: np.ndarray,
    p2: np.ndarray,
    p3: np.ndarray,
    samples: int,
) -> np.ndarray:
    """3 次ベジェを t=0..1 の等間隔 `samples+1` 点で評価する。"""

    t = np.linspace(0.0, 1.0, int(samples) + 1, dtype=np.float64)[:, None]
    mt = 1.0 - t
    return (
        (mt**3) * p0
        + 3.0 * (mt**2) * t * p1
        + 3.0 * mt * (t**2) * p2
        + (t**3) * p3
    )


def _as_point(values: Sequence[Any], *, command: str) -> tuple[float, float]:
    if len(values) != 2:
        raise ValueError(f"{command} は 2 個の数値が必要: got={list(values)!r}")
    try:
        return float(values[0]), float(values[1])
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{command} の座標は数値である必要がある: got={list(values)!r}") from exc


__all__ = [
    "CubicTo",
    "DEFAULT_CURVE_SAMPLES",
    "LineTo",
    "Segment",
    "VectorPath",
    "cubic_bezier_points",
]
