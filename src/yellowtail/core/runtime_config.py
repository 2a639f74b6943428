# どこで: `src/yellowtail/core/runtime_config.py`。
# 何を: config.yaml による実行時設定（探索・ロード・キャッシュ）を提供する。
# なぜ: プール数や太さ範囲、ウィンドウ設定をコード変更なしに調整できるようにするため。

from __future__ import annotations

import os
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any

from yellowtail.core.gesture import GestureConfig
from yellowtail.core.pool import PoolConfig


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    """yellowtail の実行時設定。"""

    config_path: Path | None
    n_gestures: int
    capacity: int
    min_move: float
    smoothing_weight: float
    thickness_min: int
    thickness_max: int
    initial_thickness: int
    window_size: tuple[int, int]
    window_position: tuple[int, int]
    fps: float
    background_color: tuple[float, float, float]
    fill_color: tuple[float, float, float]

    def pool_config(self) -> PoolConfig:
        """この設定から GesturePool 用の設定を組み立てる。"""
        return PoolConfig(
            n_gestures=self.n_gestures,
            min_move=self.min_move,
            gesture=GestureConfig(
                capacity=self.capacity,
                thickness_min=self.thickness_min,
                thickness_max=self.thickness_max,
                initial_thickness=self.initial_thickness,
                smoothing_weight=self.smoothing_weight,
            ),
        )


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
    p = Path(os.path.expandvars(os.path.expanduser(str(path))))
    _EXPLICIT_CONFIG_PATH = p
    _CONFIG_CACHE = None


def _default_config_candidates() -> tuple[Path, ...]:
    cwd = Path.cwd()
    home = Path.home()
    return (
        cwd / ".yellowtail" / "config.yaml",
        home / ".config" / "yellowtail" / "config.yaml",
    )


def _as_mapping(value: Any, *, key: str) -> dict[str, Any]:
    if value is None:
        return {}
    if isinstance(value, dict):
        return dict(value)
    raise RuntimeError(f"{key} は mapping である必要があります: got={value!r}")


def _as_int(value: Any, *, key: str) -> int:
    if value is None:
        raise RuntimeError(f"{key} が未設定です（同梱 default_config.yaml を確認してください）")
    if isinstance(value, bool):
        raise RuntimeError(f"{key} は整数である必要があります: got={value!r}")
    try:
        return int(value)
    except Exception as exc:
        raise RuntimeError(f"{key} は整数である必要があります: got={value!r}") from exc


def _as_float(value: Any, *, key: str) -> float:
    if value is None:
        raise RuntimeError(f"{key} が未設定です（同梱 default_config.yaml を確認してください）")
    try:
        return float(value)
    except Exception as exc:
        raise RuntimeError(f"{key} は数値である必要があります: got={value!r}") from exc


def _as_int_pair(value: Any, *, key: str) -> tuple[int, int]:
    try:
        seq = list(value)
    except Exception as exc:
        raise RuntimeError(f"{key} は [x, y] の配列である必要があります: got={value!r}") from exc
    if len(seq) != 2:
        raise RuntimeError(f"{key} は [x, y] の配列である必要があります: got={value!r}")
    try:
        return int(seq[0]), int(seq[1])
    except Exception as exc:
        raise RuntimeError(f"{key} は [x, y] の整数配列である必要があります: got={value!r}") from exc


def _as_rgb01(value: Any, *, key: str) -> tuple[float, float, float]:
    try:
        seq = [float(v) for v in value]
    except Exception as exc:
        raise RuntimeError(f"{key} は [r, g, b] の数値配列である必要があります: got={value!r}") from exc
    if len(seq) != 3:
        raise RuntimeError(f"{key} は [r, g, b] の配列である必要があります: got={value!r}")
    if any(c < 0.0 or c > 1.0 for c in seq):
        raise RuntimeError(f"{key} の各成分は 0..1 である必要があります: got={value!r}")
    return seq[0], seq[1], seq[2]


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
            resources.files("yellowtail")
            .joinpath("resource", "default_config.yaml")
            .read_text(encoding="utf-8")
        )
    except Exception as exc:  # pragma: no cover
        raise RuntimeError(
            "同梱 default_config.yaml の読み込みに失敗しました"
            "（パッケージ配布物の package-data を確認してください）"
        ) from exc

    return _load_yaml_text(blob, source="yellowtail/resource/default_config.yaml")


def _merge_sections(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """セクション（mapping）単位でキーを上書きマージする。

    上書き側で一部のキーだけ書けば、残りは既定値のまま残る。
    """
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = _merge_sections(current, value)
        else:
            merged[key] = value
    return merged


def runtime_config() -> RuntimeConfig:
    """実行時設定をロードして返す（キャッシュ）。

    上書き順（後勝ち）:
    1) 同梱 default_config.yaml
    2) `./.yellowtail/config.yaml` / `~/.config/yellowtail/config.yaml`
    3) `run(..., config_path=...)` の `config_path`
    """

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
        payload = _merge_sections(payload, _load_yaml_config(discovered_path))
    if explicit_path is not None:
        payload = _merge_sections(payload, _load_yaml_config(explicit_path))

    version = payload.get("version")
    if version is None:
        raise RuntimeError(
            "config.yaml の version が未設定です（同梱 default_config.yaml を確認してください）"
        )
    version_i = _as_int(version, key="version")
    if version_i != 1:
        raise RuntimeError(f"未対応の config.yaml version です: got={version_i}")

    gestures = _as_mapping(payload.get("gestures"), key="gestures")
    n_gestures = _as_int(gestures.get("count"), key="gestures.count")
    if n_gestures <= 0:
        raise ValueError(f"gestures.count は正の値である必要がある: got={n_gestures}")
    capacity = _as_int(gestures.get("capacity"), key="gestures.capacity")
    if capacity < 2:
        raise ValueError(f"gestures.capacity は 2 以上である必要がある: got={capacity}")
    min_move = _as_float(gestures.get("min_move"), key="gestures.min_move")
    if min_move < 0:
        raise ValueError(f"gestures.min_move は 0 以上である必要がある: got={min_move}")
    smoothing_weight = _as_float(
        gestures.get("smoothing_weight"), key="gestures.smoothing_weight"
    )

    thickness = _as_mapping(payload.get("thickness"), key="thickness")
    thickness_min = _as_int(thickness.get("min"), key="thickness.min")
    thickness_max = _as_int(thickness.get("max"), key="thickness.max")
    if thickness_min > thickness_max:
        raise ValueError(
            f"thickness.min は thickness.max 以下である必要がある: got=({thickness_min}, {thickness_max})"
        )
    initial_thickness = _as_int(thickness.get("initial"), key="thickness.initial")
    initial_thickness = min(thickness_max, max(thickness_min, initial_thickness))

    ui = _as_mapping(payload.get("ui"), key="ui")
    window_size = _as_int_pair(ui.get("window_size"), key="ui.window_size")
    if window_size[0] <= 0 or window_size[1] <= 0:
        raise ValueError(f"ui.window_size は正の値である必要がある: got={window_size}")
    window_position = _as_int_pair(ui.get("window_position"), key="ui.window_position")
    fps = _as_float(ui.get("fps"), key="ui.fps")
    background_color = _as_rgb01(ui.get("background_color"), key="ui.background_color")
    fill_color = _as_rgb01(ui.get("fill_color"), key="ui.fill_color")

    cfg = RuntimeConfig(
        config_path=explicit_path or discovered_path,
        n_gestures=n_gestures,
        capacity=capacity,
        min_move=min_move,
        smoothing_weight=smoothing_weight,
        thickness_min=thickness_min,
        thickness_max=thickness_max,
        initial_thickness=initial_thickness,
        window_size=window_size,
        window_position=window_position,
        fps=fps,
        background_color=background_color,
        fill_color=fill_color,
    )
    _CONFIG_CACHE = cfg
    return cfg


__all__ = ["RuntimeConfig", "runtime_config", "set_config_path"]
