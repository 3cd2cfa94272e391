"""
どこで: `src/trilattice/core/figure.py`。
何を: フィギュア定義（外周パス・穴パス・装飾三角形）を YAML から読み込む。
なぜ: パスや座標リストをコードから分離し、同梱データと差し替えデータを同じ経路で扱うため。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any

from trilattice.core.decor import DecorTable
from trilattice.core.path import VectorPath

_logger = logging.getLogger(__name__)

_PACKAGED_FIGURE = ("resource", "figure.yaml")


@dataclass(frozen=True, slots=True)
class Figure:
    """マスク生成と装飾描画の入力一式。"""

    outer: tuple[VectorPath, ...]
    holes: tuple[VectorPath, ...]
    decor: DecorTable
    canvas_size: tuple[int, int] | None = None


def load_figure(path: str | Path | None = None) -> Figure:
    """フィギュア YAML をロードして返す。

    Parameters
    ----------
    path : str | Path | None
        YAML パス。None の場合は同梱 `resource/figure.yaml` を使う。

    Raises
    ------
    FileNotFoundError
        明示パスが存在しない場合。
    RuntimeError
        YAML の構文・構造が不正な場合。
    """

    if path is None:
        text = (
            resources.files("trilattice")
            .joinpath(*_PACKAGED_FIGURE)
            .read_text(encoding="utf-8")
        )
        source = "trilattice/resource/figure.yaml"
    else:
        p = Path(str(path)).expanduser()
        if not p.is_file():
            raise FileNotFoundError(f"figure が見つかりません: {p}")
        text = p.read_text(encoding="utf-8")
        source = str(p)

    return parse_figure(text, source=source)


def parse_figure(text: str, *, source: str = "<string>") -> Figure:
    """フィギュア YAML テキストを解釈して返す。"""

    import yaml  # type: ignore[import-untyped]

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise RuntimeError(f"figure の読み込みに失敗しました: source={source}") from exc

    if not isinstance(data, dict):
        raise RuntimeError(f"figure は mapping である必要があります: source={source}")

    outer = _as_paths(data.get("outer"), key="outer", source=source)
    if not outer:
        raise RuntimeError(f"figure.outer が空です: source={source}")
    holes = _as_paths(data.get("holes"), key="holes", source=source)

    decor_raw = data.get("decor")
    if decor_raw is not None and not isinstance(decor_raw, dict):
        raise RuntimeError(f"figure.decor は mapping である必要があります: source={source}")
    try:
        decor = DecorTable.from_mapping(decor_raw)
    except ValueError as exc:
        raise RuntimeError(f"figure.decor が不正です: source={source}") from exc

    canvas_size = _as_canvas(data.get("canvas"), source=source)

    _logger.debug(
        "figure loaded: source=%s outer=%d holes=%d decor=%d",
        source,
        len(outer),
        len(holes),
        len(decor),
    )
    return Figure(outer=outer, holes=holes, decor=decor, canvas_size=canvas_size)


def _as_paths(value: Any, *, key: str, source: str) -> tuple[VectorPath, ...]:
    if value is None:
        return ()
    if not isinstance(value, list):
        raise RuntimeError(f"figure.{key} はパスの配列である必要があります: source={source}")
    out: list[VectorPath] = []
    for i, commands in enumerate(value):
        try:
            out.append(VectorPath.from_commands(commands))
        except (TypeError, ValueError) as exc:
            raise RuntimeError(f"figure.{key}[{i}] が不正です: source={source}") from exc
    return tuple(out)


def _as_canvas(value: Any, *, source: str) -> tuple[int, int] | None:
    if value is None:
        return None
    try:
        w, h = value
        return int(w), int(h)
    except (TypeError, ValueError) as exc:
        raise RuntimeError(f"figure.canvas は [width, height] である必要があります: source={source}") from exc


__all__ = ["Figure", "load_figure", "parse_figure"]
