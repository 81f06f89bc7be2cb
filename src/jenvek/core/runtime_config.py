# どこで: `src/jenvek/core/runtime_config.py`。
# 何を: config.yaml による実行時設定（探索・ロード・キャッシュ）を提供する。
# なぜ: 出力先・パレットカタログ・アニメーション周期などをユーザーが差し替えられるようにするため。

from __future__ import annotations

import os
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    """jenvek の実行時設定。"""

    config_path: Path | None
    output_dir: Path
    palette_file: Path | None
    viewport: tuple[int, int]
    animation_fps: float
    animation_cycle_seconds: float
    float_decimals: int


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
        cwd / ".jenvek" / "config.yaml",
        home / ".config" / "jenvek" / "config.yaml",
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


def _as_int_pair(value: Any, *, key: str) -> tuple[int, int] | None:
    if value is None:
        return None
    try:
        seq = list(value)
    except TypeError as exc:
        raise RuntimeError(f"{key} は [w, h] の配列である必要があります: got={value!r}") from exc
    if len(seq) != 2:
        raise RuntimeError(f"{key} は [w, h] の配列である必要があります: got={value!r}")
    try:
        w = int(seq[0])
        h = int(seq[1])
    except (TypeError, ValueError) as exc:
        raise RuntimeError(f"{key} は [w, h] の整数配列である必要があります: got={value!r}") from exc
    return (w, h)


def _as_float(value: Any, *, key: str) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise RuntimeError(f"{key} は数値である必要があります: got={value!r}") from exc


def _require(value: Any, *, key: str) -> Any:
    if value is None:
        raise RuntimeError(
            f"{key} が未設定です（同梱 default_config.yaml を確認してください）"
        )
    return value


def _require_positive(value: float, *, key: str) -> float:
    if value <= 0:
        raise ValueError(f"{key} は正の値である必要があります: got={value}")
    return value


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """mapping を 1 段ずつ再帰的に上書きした dict を返す。"""

    out = dict(base)
    for key, value in override.items():
        current = out.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            out[key] = _merge(current, value)
        else:
            out[key] = value
    return out


def _load_yaml_text(text: str, *, source: str) -> dict[str, Any]:
    import yaml  # type: ignore[import-untyped]

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
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
            resources.files("jenvek")
            .joinpath("resource", "default_config.yaml")
            .read_text(encoding="utf-8")
        )
    except OSError as exc:  # pragma: no cover
        raise RuntimeError(
            "同梱 default_config.yaml の読み込みに失敗しました"
            "（パッケージ配布物の package-data を確認してください）"
        ) from exc

    return _load_yaml_text(blob, source="jenvek/resource/default_config.yaml")


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
        payload = _merge(payload, _load_yaml_config(discovered_path))
    if explicit_path is not None:
        payload = _merge(payload, _load_yaml_config(explicit_path))

    version = _require(payload.get("version"), key="version")
    try:
        version_i = int(version)
    except (TypeError, ValueError) as exc:
        raise RuntimeError(f"config.yaml の version は整数である必要があります: got={version!r}") from exc
    if version_i != 1:
        raise RuntimeError(f"未対応の config.yaml version です: got={version_i}")

    paths = _as_mapping(payload.get("paths"), key="paths")
    output_dir = _require(_as_optional_path(paths.get("output_dir")), key="paths.output_dir")
    palette_file = _as_optional_path(paths.get("palette_file"))

    generation = _as_mapping(payload.get("generation"), key="generation")
    viewport = _require(
        _as_int_pair(generation.get("viewport"), key="generation.viewport"),
        key="generation.viewport",
    )
    if viewport[0] <= 0 or viewport[1] <= 0:
        raise ValueError(f"generation.viewport は正の値である必要があります: got={viewport}")

    animation = _as_mapping(payload.get("animation"), key="animation")
    fps = _require(_as_float(animation.get("fps"), key="animation.fps"), key="animation.fps")
    cycle = _require(
        _as_float(animation.get("cycle_seconds"), key="animation.cycle_seconds"),
        key="animation.cycle_seconds",
    )

    export = _as_mapping(payload.get("export"), key="export")
    decimals = _require(
        _as_float(export.get("float_decimals"), key="export.float_decimals"),
        key="export.float_decimals",
    )
    if decimals < 0:
        raise ValueError(f"export.float_decimals は 0 以上である必要があります: got={decimals}")

    cfg = RuntimeConfig(
        config_path=explicit_path or discovered_path,
        output_dir=output_dir,
        palette_file=palette_file,
        viewport=viewport,
        animation_fps=_require_positive(float(fps), key="animation.fps"),
        animation_cycle_seconds=_require_positive(float(cycle), key="animation.cycle_seconds"),
        float_decimals=int(decimals),
    )
    _CONFIG_CACHE = cfg
    return cfg


def output_root_dir() -> Path:
    """出力ファイルを保存する既定ルートディレクトリを返す。

    上書き順（後勝ち）:
    1) 同梱 default_config.yaml
    2) `./.jenvek/config.yaml` / `~/.config/jenvek/config.yaml`
    3) `set_config_path(...)` の明示パス
    """

    cfg = runtime_config()
    return Path(cfg.output_dir)


__all__ = ["RuntimeConfig", "output_root_dir", "runtime_config", "set_config_path"]
