"""
どこで: `src/trilattice/core/color.py`。
何を: RGB 色表現（0..255 int / 0..1 float）の正規化と相互変換を提供する。
なぜ: 設定ファイル・SVG 出力・GL 描画で同じ色変換規則を共有するため。
"""

from __future__ import annotations

from typing import Any, cast

ColorRGB = tuple[float, float, float]


def coerce_rgb255(value: object) -> tuple[int, int, int]:
    """値を RGB255 タプル `(r, g, b)`（0..255）に正規化して返す。

    Raises
    ------
    ValueError
        長さ 3 のシーケンスでない場合。
    """

    r: object
    g: object
    b: object
    try:
        r, g, b = value  # type: ignore[misc]
    except Exception as exc:
        raise ValueError(f"rgb value must be a length-3 sequence: {value!r}") from exc

    def _clamp(v: object) -> int:
        iv = int(cast(Any, v))
        return 0 if iv < 0 else 255 if iv > 255 else iv

    return _clamp(r), _clamp(g), _clamp(b)


def rgb01_to_rgb255(rgb: ColorRGB) -> tuple[int, int, int]:
    """0..1 float の RGB を 0..255 int の RGB に変換して返す。"""

    r, g, b = rgb
    out: list[int] = []
    for v in (r, g, b):
        fv = float(v)
        fv = 0.0 if fv < 0.0 else 1.0 if fv > 1.0 else fv
        out.append(int(round(fv * 255.0)))
    return int(out[0]), int(out[1]), int(out[2])


def rgb255_to_rgb01(rgb: tuple[int, int, int]) -> ColorRGB:
    """0..255 int の RGB を 0..1 float の RGB に変換して返す。"""

    r, g, b = rgb
    return float(r) / 255.0, float(g) / 255.0, float(b) / 255.0


def rgb01_to_hex(rgb01: ColorRGB) -> str:
    """0..1 float RGB を #RRGGBB に変換して返す。"""

    r, g, b = rgb01_to_rgb255(rgb01)
    return f"#{r:02X}{g:02X}{b:02X}"


__all__ = ["ColorRGB", "coerce_rgb255", "rgb01_to_hex", "rgb01_to_rgb255", "rgb255_to_rgb01"]
