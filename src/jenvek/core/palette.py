# どこで: `src/jenvek/core/palette.py`。
# 何を: カテゴリ/パレット選択から色リストを解決する Palette Provider と、同梱カタログのロードを提供する。
# なぜ: どの入力でも空でないパレットを返し、生成器側が色の欠落を扱わずに済むようにするため。

from __future__ import annotations

import logging
from importlib import resources
from pathlib import Path
from typing import Any, Mapping, Sequence

from jenvek.core.random_source import RandomSource, StrongRandomSource

_logger = logging.getLogger(__name__)

Palette = tuple[str, ...]
PaletteCatalog = Mapping[str, Palette]

RANDOM_CATEGORY = "random_category"
RANDOM_PALETTE = "random_palette"
RANDOM_IN_CATEGORY = "random_in_category"
FALLBACK = "fallback"

FALLBACK_PALETTE: Palette = ("#FF0000", "#00FF00", "#0000FF", "#FFFF00", "#00FFFF", "#FF00FF")
SAFETY_PALETTE: Palette = ("#333333", "#666666", "#999999", "#CCCCCC")

_CATALOG_CACHE: dict[str, Palette] | None = None


def resolve_palette(
    category: str,
    selector: str | None = None,
    *,
    catalog: PaletteCatalog | None = None,
    rng: RandomSource | None = None,
) -> Palette:
    """カテゴリとパレット指定子から色リストを解決して返す。

    Parameters
    ----------
    category : str
        カテゴリ名。`"random_category"` は `random_palette` 扱いになる。
    selector : str | None
        パレット指定子。`"random_palette"` / `"random_in_category"` /
        カテゴリ名 / `"fallback"` / None。
    catalog : PaletteCatalog | None
        カテゴリ名 -> 色列。None なら `load_palette_catalog()` の結果を使う。
    rng : RandomSource | None
        random 系の選択に使う乱数源。None なら StrongRandomSource。

    Returns
    -------
    Palette
        空でない hex 色のタプル。

    Notes
    -----
    優先順:
    1) random_palette: カテゴリを一様に選び全色を使う
    2) random_in_category: カテゴリ全色をシャッフルし先頭 5..min(10, len) 色を使う
    3) 既知カテゴリ: 全色
    4) それ以外: 6 色フォールバック
    最後に空なら 4 階調グレーへ落とす。
    """

    cat = load_palette_catalog() if catalog is None else catalog
    _rng = rng if rng is not None else StrongRandomSource()
    sel = selector if selector is not None else category
    if category == RANDOM_CATEGORY:
        sel = RANDOM_PALETTE

    colors: Palette
    if sel == RANDOM_PALETTE:
        names = list(cat.keys())
        colors = tuple(cat[_rng.choice(names)]) if names else ()
    elif sel == RANDOM_IN_CATEGORY and category in cat:
        shuffled = _rng.shuffle(cat[category])
        size = min(len(shuffled), _rng.randint(5, min(10, len(shuffled))))
        colors = tuple(shuffled[: max(0, size)])
    elif category in cat:
        colors = tuple(cat[category])
    else:
        if sel != FALLBACK:
            _logger.warning(
                "パレットが見つからないためフォールバックを使います: category=%r selector=%r",
                category,
                selector,
            )
        colors = FALLBACK_PALETTE

    if not colors:
        _logger.warning("パレットが空のためセーフティパレットを使います: category=%r", category)
        return SAFETY_PALETTE
    return colors


def parse_palette_catalog(payload: Any, *, source: str = "<memory>") -> dict[str, Palette]:
    """YAML 由来の payload をカテゴリ -> 色タプルへ正規化する。

    各エントリは `{name, hex}` の mapping か hex 文字列。hex が空のものは捨てる。
    """

    if payload is None:
        return {}
    if isinstance(payload, Mapping) and "categories" in payload:
        payload = payload["categories"]
    if not isinstance(payload, Mapping):
        raise RuntimeError(f"パレットカタログは mapping である必要があります: source={source}")

    out: dict[str, Palette] = {}
    for name, entries in payload.items():
        if entries is None:
            out[str(name)] = ()
            continue
        if isinstance(entries, (str, bytes)) or not isinstance(entries, Sequence):
            raise RuntimeError(
                f"パレットカタログのカテゴリは配列である必要があります: category={name!r} source={source}"
            )
        colors: list[str] = []
        for entry in entries:
            value = entry.get("hex") if isinstance(entry, Mapping) else entry
            if value:
                colors.append(str(value))
        out[str(name)] = tuple(colors)
    return out


def load_palette_catalog(path: str | Path | None = None) -> dict[str, Palette]:
    """パレットカタログをロードして返す。

    Parameters
    ----------
    path : str | Path | None
        YAML ファイル。None なら `paths.palette_file`（設定時）か同梱 `palettes.yaml`。
        None で同梱/設定のカタログを読んだ場合だけキャッシュする。
    """

    global _CATALOG_CACHE

    import yaml  # type: ignore[import-untyped]

    if path is not None:
        p = Path(path).expanduser()
        return parse_palette_catalog(yaml.safe_load(p.read_text(encoding="utf-8")), source=str(p))

    if _CATALOG_CACHE is not None:
        return _CATALOG_CACHE

    from jenvek.core.runtime_config import runtime_config

    configured = runtime_config().palette_file
    if configured is not None:
        catalog = load_palette_catalog(configured)
    else:
        blob = (
            resources.files("jenvek")
            .joinpath("resource", "palettes.yaml")
            .read_text(encoding="utf-8")
        )
        catalog = parse_palette_catalog(yaml.safe_load(blob), source="jenvek/resource/palettes.yaml")

    _CATALOG_CACHE = catalog
    return catalog


def clear_palette_cache() -> None:
    """`load_palette_catalog()` のキャッシュを破棄する。"""

    global _CATALOG_CACHE
    _CATALOG_CACHE = None


__all__ = [
    "FALLBACK",
    "FALLBACK_PALETTE",
    "Palette",
    "PaletteCatalog",
    "RANDOM_CATEGORY",
    "RANDOM_IN_CATEGORY",
    "RANDOM_PALETTE",
    "SAFETY_PALETTE",
    "clear_palette_cache",
    "load_palette_catalog",
    "parse_palette_catalog",
    "resolve_palette",
]
