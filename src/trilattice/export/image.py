"""
どこで: `src/trilattice/export/image.py`。
何を: フレームを拡張子に応じて SVG / PNG で保存する。PNG は SVG を resvg に通して作る。
なぜ: 出力の正本を SVG に一本化し、PNG は倍率を変えていつでも作り直せるようにするため。
"""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from pathlib import Path

from trilattice.core.color import ColorRGB, rgb01_to_hex
from trilattice.core.frame import TriangleLayer
from trilattice.core.runtime_config import output_root_dir, runtime_config
from trilattice.export.svg import export_svg


def export_image(
    layers: Sequence[TriangleLayer],
    path: str | Path,
    *,
    canvas_size: tuple[int, int],
    background_color: ColorRGB = (1.0, 1.0, 1.0),
) -> Path:
    """`path` の拡張子（`.svg` / `.png`）に応じてフレームを保存する。

    `.png` の場合は同じ stem の `.svg` も残る。
    """

    out = Path(path)
    kind = out.suffix.lower()
    if kind not in (".svg", ".png"):
        raise ValueError(f"未対応の画像フォーマット: {kind!r}")

    svg_path = export_svg(
        layers,
        out.with_suffix(".svg"),
        canvas_size=canvas_size,
        background_color=background_color,
    )
    if kind == ".svg":
        return svg_path
    return rasterize_svg_to_png(
        svg_path,
        out,
        output_size=png_output_size(canvas_size),
        background_color_rgb01=background_color,
    )


def default_output_path(stem: str, ext: str) -> Path:
    """保存先 `{output_dir}/{ext}/{stem}.{ext}` を返す。"""

    kind = str(ext).lstrip(".").lower()
    return output_root_dir() / kind / f"{stem}.{kind}"


def png_output_size(canvas_size: tuple[int, int]) -> tuple[int, int]:
    """キャンバス寸法に `export.png.scale` を掛けた PNG の (width, height)。"""

    width, height = (int(v) for v in canvas_size)
    if width <= 0 or height <= 0:
        raise ValueError("canvas_size は正の (width, height) である必要がある")
    scale = runtime_config().png_scale
    return int(width * scale), int(height * scale)


def rasterize_svg_to_png(
    svg_path: str | Path,
    png_path: str | Path,
    *,
    output_size: tuple[int, int],
    background_color_rgb01: ColorRGB = (1.0, 1.0, 1.0),
) -> Path:
    """resvg で SVG を `output_size` の PNG に変換する。

    Raises
    ------
    RuntimeError
        resvg が PATH に無い、または非 0 で終了した場合。
    """

    width, height = (int(v) for v in output_size)
    if width <= 0 or height <= 0:
        raise ValueError("output_size は正の (width, height) である必要がある")

    png = Path(png_path)
    png.parent.mkdir(parents=True, exist_ok=True)
    cmd = [
        "resvg",
        "--width", str(width),
        "--height", str(height),
        "--background", rgb01_to_hex(background_color_rgb01),
        str(Path(svg_path)),
        str(png),
    ]  # fmt: skip
    try:
        proc = subprocess.run(cmd, capture_output=True, text=True, check=False)
    except FileNotFoundError as exc:
        raise RuntimeError(
            "resvg が見つかりません（`resvg` をインストールして PATH を通してください）"
        ) from exc

    if proc.returncode != 0:
        details = (proc.stderr or proc.stdout or "").strip()
        raise RuntimeError(f"resvg が失敗しました (code={proc.returncode}). {details}".strip())
    return png
