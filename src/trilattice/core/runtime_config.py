# どこで: `src/trilattice/core/runtime_config.py`。
# 何を: config.yaml による実行時設定（探索・ロード・検証・キャッシュ）を提供する。
# なぜ: 格子寸法・閾値・回転速度・色・出力先を、コードを触らずに差し替えられるようにするため。

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any

from trilattice.core.color import ColorRGB, coerce_rgb255, rgb255_to_rgb01
from trilattice.core.lattice import LatticeSpec

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    """trilattice の実行時設定。"""

    config_path: Path | None
    canvas_size: tuple[int, int]
    wide: LatticeSpec
    narrow: LatticeSpec
    background: LatticeSpec
    width_switch: float
    pivot_fraction: float
    thickness_radius: float
    narrow_band_fraction: float
    rotation_rate: float
    background_color: ColorRGB
    background_lattice_color: ColorRGB
    foreground_color: ColorRGB
    output_dir: Path
    figure_path: Path | None
    png_scale: float


_EXPLICIT_CONFIG_PATH: Path | None = None
_CONFIG_CACHE: RuntimeConfig | None = None


def set_config_path(path: str | Path | None) -> None:
    """以降の設定探索で使う明示 config パスを設定する。

    Notes
    -----
    `path` を None にすると明示指定を解除し、既定の探索に戻る。
    """

    global _EXPLICIT_CONFIG_PATH, _CONFIG_CACHE
    if path is None:
        _EXPLICIT_CONFIG_PATH = None
        _CONFIG_CACHE = None
        return
    p = Path(str(path)).expanduser()
    _EXPLICIT_CONFIG_PATH = p
    _CONFIG_CACHE = None


def _default_config_candidates() -> tuple[Path, ...]:
    cwd = Path.cwd()
    home = Path.home()
    return (
        cwd / ".trilattice" / "config.yaml",
        home / ".config" / "trilattice" / "config.yaml",
    )


def _expand_path_text(text: str) -> str:
    return os.path.expandvars(os.path.expanduser(str(text)))


def _as_optional_path(value: Any) -> Path | None:
    if value is None:
        return None
    s = str(value).strip()
    if not s:
        return None
    return Path(_expand_path_text(s))


def _as_mapping(value: Any, *, key: str) -> dict[str, Any]:
    if value is None:
        return {}
    if isinstance(value, dict):
        return dict(value)
    raise RuntimeError(f"{key} は mapping である必要があります: got={value!r}")


def _as_float(value: Any, *, key: str) -> float:
    if value is None:
        raise RuntimeError(f"{key} が未設定です（同梱 default_config.yaml を確認してください）")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise RuntimeError(f"{key} は数値である必要があります: got={value!r}") from exc


def _as_positive_int(value: Any, *, key: str) -> int:
    if value is None:
        raise RuntimeError(f"{key} が未設定です（同梱 default_config.yaml を確認してください）")
    try:
        iv = int(value)
    except (TypeError, ValueError) as exc:
        raise RuntimeError(f"{key} は整数である必要があります: got={value!r}") from exc
    if iv <= 0:
        raise RuntimeError(f"{key} は正の値である必要があります: got={iv}")
    return iv


def _as_color(value: Any, *, key: str) -> ColorRGB:
    if value is None:
        raise RuntimeError(f"{key} が未設定です（同梱 default_config.yaml を確認してください）")
    try:
        return rgb255_to_rgb01(coerce_rgb255(value))
    except (TypeError, ValueError) as exc:
        raise RuntimeError(f"{key} は [r, g, b]（0..255）である必要があります: got={value!r}") from exc


def _as_lattice_spec(value: Any, *, key: str) -> LatticeSpec:
    spec = _as_mapping(value, key=key)
    base_side = _as_float(spec.get("base_side"), key=f"{key}.base_side")
    spacing = _as_float(spec.get("spacing"), key=f"{key}.spacing")
    try:
        return LatticeSpec(base_side=base_side, spacing=spacing)
    except ValueError as exc:
        raise RuntimeError(f"{key} の寸法が不正です: {exc}") from exc


def _merge_mapping(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """mapping を再帰的にマージする（後勝ち）。"""

    out = dict(base)
    for k, v in override.items():
        prev = out.get(k)
        if isinstance(prev, dict) and isinstance(v, dict):
            out[k] = _merge_mapping(prev, v)
        else:
            out[k] = v
    return out


def _load_yaml_text(text: str, *, source: str) -> dict[str, Any]:
    try:
        import yaml  # type: ignore[import-untyped]
    except Exception as exc:  # pragma: no cover
        raise RuntimeError(f"PyYAML を import できません: {exc}") from exc

    try:
        data = yaml.safe_load(text)
    except Exception as exc:
        raise RuntimeError(f"config.yaml の読み込みに失敗しました: source={source}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise RuntimeError(f"config.yaml は mapping である必要があります: source={source}")

    return dict(data)


def _load_yaml_config(path: Path) -> dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    return _load_yaml_text(text, source=str(path))


def _load_packaged_default_config() -> dict[str, Any]:
    """同梱デフォルト config をロードして dict を返す。"""

    try:
        blob = (
            resources.files("trilattice")
            .joinpath("resource", "default_config.yaml")
            .read_text(encoding="utf-8")
        )
    except Exception as exc:  # pragma: no cover
        raise RuntimeError(
            "同梱 default_config.yaml の読み込みに失敗しました"
            "（パッケージ配布物の package-data を確認してください）"
        ) from exc

    return _load_yaml_text(blob, source="trilattice/resource/default_config.yaml")


def runtime_config() -> RuntimeConfig:
    """実行時設定をロードして返す（キャッシュ）。"""

    global _CONFIG_CACHE
    if _CONFIG_CACHE is not None:
        return _CONFIG_CACHE

    explicit_path = _EXPLICIT_CONFIG_PATH
    if explicit_path is not None and not explicit_path.is_file():
        raise FileNotFoundError(f"config.yaml が見つかりません: {explicit_path}")

    discovered_path: Path | None = None
    for p in _default_config_candidates():
        if p.is_file():
            discovered_path = p
            break

    payload = _load_packaged_default_config()
    if discovered_path is not None:
        payload = _merge_mapping(payload, _load_yaml_config(discovered_path))
    if explicit_path is not None:
        payload = _merge_mapping(payload, _load_yaml_config(explicit_path))
    _logger.debug("config sources: discovered=%s explicit=%s", discovered_path, explicit_path)

    version = payload.get("version")
    if version is None:
        raise RuntimeError(
            "config.yaml の version が未設定です（同梱 default_config.yaml を確認してください）"
        )
    try:
        version_i = int(version)
    except Exception as exc:
        raise RuntimeError(f"config.yaml の version は整数である必要があります: got={version!r}") from exc
    if version_i != 1:
        raise RuntimeError(f"未対応の config.yaml version です: got={version_i}")

    canvas = _as_mapping(payload.get("canvas"), key="canvas")
    canvas_size = (
        _as_positive_int(canvas.get("width"), key="canvas.width"),
        _as_positive_int(canvas.get("height"), key="canvas.height"),
    )

    lattice = _as_mapping(payload.get("lattice"), key="lattice")
    wide = _as_lattice_spec(lattice.get("wide"), key="lattice.wide")
    narrow = _as_lattice_spec(lattice.get("narrow"), key="lattice.narrow")
    background = _as_lattice_spec(lattice.get("background"), key="lattice.background")
    width_switch = _as_float(lattice.get("width_switch"), key="lattice.width_switch")
    pivot_fraction = _as_float(lattice.get("pivot_fraction"), key="lattice.pivot_fraction")
    thickness_radius = _as_float(lattice.get("thickness_radius"), key="lattice.thickness_radius")
    if thickness_radius <= 0:
        raise RuntimeError(f"lattice.thickness_radius は正の値である必要があります: got={thickness_radius}")
    band_fraction = _as_float(
        lattice.get("narrow_band_fraction"), key="lattice.narrow_band_fraction"
    )
    if band_fraction <= 0:
        raise RuntimeError(f"lattice.narrow_band_fraction は正の値である必要があります: got={band_fraction}")

    animation = _as_mapping(payload.get("animation"), key="animation")
    # 0 以下の rate は RotationAnimator 側で最小値へ置き換える。
    rotation_rate = _as_float(animation.get("rotation_rate"), key="animation.rotation_rate")

    colors = _as_mapping(payload.get("colors"), key="colors")
    background_color = _as_color(colors.get("background"), key="colors.background")
    background_lattice_color = _as_color(
        colors.get("background_lattice"), key="colors.background_lattice"
    )
    foreground_color = _as_color(colors.get("foreground"), key="colors.foreground")

    paths = _as_mapping(payload.get("paths"), key="paths")
    output_dir = _as_optional_path(paths.get("output_dir"))
    if output_dir is None:
        raise RuntimeError(
            "paths.output_dir が未設定です（同梱 default_config.yaml を確認してください）"
        )
    figure_path = _as_optional_path(paths.get("figure"))

    export = _as_mapping(payload.get("export"), key="export")
    png = _as_mapping(export.get("png"), key="export.png")
    png_scale = _as_float(png.get("scale"), key="export.png.scale")
    if png_scale <= 0:
        raise RuntimeError(f"export.png.scale は正の値である必要があります: got={png_scale}")

    cfg = RuntimeConfig(
        config_path=explicit_path or discovered_path,
        canvas_size=canvas_size,
        wide=wide,
        narrow=narrow,
        background=background,
        width_switch=width_switch,
        pivot_fraction=pivot_fraction,
        thickness_radius=thickness_radius,
        narrow_band_fraction=band_fraction,
        rotation_rate=rotation_rate,
        background_color=background_color,
        background_lattice_color=background_lattice_color,
        foreground_color=foreground_color,
        output_dir=output_dir,
        figure_path=figure_path,
        png_scale=float(png_scale),
    )
    _CONFIG_CACHE = cfg
    return cfg


def output_root_dir() -> Path:
    """出力ファイルを保存する既定ルートディレクトリを返す。

    上書き順（後勝ち）:
    1) 同梱 default_config.yaml
    2) `./.trilattice/config.yaml` / `~/.config/trilattice/config.yaml`
    3) `run(..., config_path=...)` の `config_path`
    """

    cfg = runtime_config()
    return Path(cfg.output_dir)


__all__ = ["RuntimeConfig", "output_root_dir", "runtime_config", "set_config_path"]
