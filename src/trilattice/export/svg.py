"""
どこで: `src/trilattice/export/svg.py`。
何を: 生成済みフレーム（三角形レイヤー列）を SVG として保存する。
なぜ: interactive 依存なしの最小 headless export（SVG）を用意し、反復可能にするため。
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from trilattice.core.color import ColorRGB, rgb01_to_hex
from trilattice.core.emitter import Point
from trilattice.core.frame import TriangleLayer

_SVG_NS = "http://www.w3.org/2000/svg"
_FLOAT_DECIMALS = 3


def _fmt(value: float, *, decimals: int = _FLOAT_DECIMALS) -> str:
    """SVG 出力向けに float を決定的な文字列へ変換して返す。"""
    text = f"{float(value):.{int(decimals)}f}"
    if text.startswith("-0") and float(text) == 0.0:
        return text[1:]
    return text


class SvgPolygonEmitter:
    """三角形を `<polygon>` 要素の行として貯める emitter。"""

    def __init__(self, fill: ColorRGB) -> None:
        self._fill = rgb01_to_hex(fill)
        self.lines: list[str] = []

    def triangle(self, p1: Point, p2: Point, p3: Point) -> None:
        pts = " ".join(f"{_fmt(x)},{_fmt(y)}" for x, y in (p1, p2, p3))
        self.lines.append(f'    <polygon points="{pts}" />')

    @property
    def fill(self) -> str:
        return self._fill


def export_svg(
    layers: Sequence[TriangleLayer],
    path: str | Path,
    *,
    canvas_size: tuple[int, int],
    background_color: ColorRGB | None = None,
) -> Path:
    """レイヤー列を SVG として保存する。

    Parameters
    ----------
    layers : Sequence[TriangleLayer]
        描画順のレイヤー列。
    path : str or Path
        出力先パス。
    canvas_size : tuple[int, int]
        キャンバス寸法（viewBox）。
    background_color : ColorRGB | None
        指定時は全面の背景矩形を最初に描く。

    Returns
    -------
    Path
        保存先パス。
    """
    _path = Path(path)
    canvas_w, canvas_h = canvas_size
    if canvas_w <= 0 or canvas_h <= 0:
        raise ValueError("canvas_size は正の値である必要がある")

    lines: list[str] = []
    lines.append('<?xml version="1.0" encoding="UTF-8"?>')
    lines.append(
        (
            f'<svg xmlns="{_SVG_NS}" viewBox="0 0 {int(canvas_w)} {int(canvas_h)}" '
            f'width="{int(canvas_w)}" height="{int(canvas_h)}">'
        )
    )
    if background_color is not None:
        lines.append(
            f'  <rect x="0" y="0" width="{int(canvas_w)}" height="{int(canvas_h)}" '
            f'fill="{rgb01_to_hex(background_color)}" />'
        )

    for layer in layers:
        emitter = SvgPolygonEmitter(layer.color)
        layer.triangles.emit(emitter)
        if not emitter.lines:
            continue
        lines.append(f'  <g id="{layer.name}" fill="{emitter.fill}" stroke="none">')
        lines.extend(emitter.lines)
        lines.append("  </g>")

    lines.append("</svg>")

    _path.parent.mkdir(parents=True, exist_ok=True)
    with _path.open("w", encoding="utf-8", newline="\n") as f:
        f.write("\n".join(lines) + "\n")

    return _path
