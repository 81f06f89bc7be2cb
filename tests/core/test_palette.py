"""Palette Provider（カテゴリ解決・フォールバック・同梱カタログ）をテストする。"""

from __future__ import annotations

from pathlib import Path

import pytest

from jenvek.core.palette import (
    FALLBACK_PALETTE,
    SAFETY_PALETTE,
    clear_palette_cache,
    load_palette_catalog,
    parse_palette_catalog,
    resolve_palette,
)
from jenvek.core.random_source import ParkMillerRandomSource
from jenvek.core.runtime_config import set_config_path

CATALOG = {
    "warm": ("#a", "#b", "#c", "#d", "#e", "#f", "#g"),
    "cool": ("#1", "#2", "#3"),
    "empty": (),
}


@pytest.fixture(autouse=True)
def _isolate(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    set_config_path(None)
    clear_palette_cache()
    yield
    set_config_path(None)
    clear_palette_cache()


def test_known_category_returns_all_colors() -> None:
    assert resolve_palette("cool", catalog=CATALOG) == CATALOG["cool"]
    assert resolve_palette("cool", "cool", catalog=CATALOG) == CATALOG["cool"]


def test_unknown_category_returns_six_color_fallback() -> None:
    assert resolve_palette("nope", catalog=CATALOG) == FALLBACK_PALETTE
    assert len(FALLBACK_PALETTE) == 6
    assert resolve_palette("nope", "fallback", catalog=CATALOG) == FALLBACK_PALETTE


def test_empty_category_returns_safety_greys() -> None:
    assert resolve_palette("empty", catalog=CATALOG) == SAFETY_PALETTE
    assert SAFETY_PALETTE == ("#333333", "#666666", "#999999", "#CCCCCC")


def test_random_palette_returns_one_whole_category() -> None:
    rng = ParkMillerRandomSource(9)
    for _ in range(20):
        colors = resolve_palette("warm", "random_palette", catalog=CATALOG, rng=rng)
        assert colors in (CATALOG["warm"], CATALOG["cool"], SAFETY_PALETTE)


def test_random_category_maps_to_random_palette() -> None:
    catalog = {"only": ("#123456", "#654321")}
    assert resolve_palette("random_category", catalog=catalog) == catalog["only"]


def test_random_in_category_takes_shuffled_subset() -> None:
    rng = ParkMillerRandomSource(4)
    for _ in range(20):
        colors = resolve_palette("warm", "random_in_category", catalog=CATALOG, rng=rng)
        assert 5 <= len(colors) <= 7
        assert len(set(colors)) == len(colors)
        assert set(colors) <= set(CATALOG["warm"])


def test_never_empty_for_any_input() -> None:
    for category in ["warm", "cool", "empty", "", "random_category", "???"]:
        for selector in [None, "random_palette", "random_in_category", "fallback", "cool"]:
            assert len(resolve_palette(category, selector, catalog=CATALOG)) > 0
    assert resolve_palette("anything", catalog={}) == FALLBACK_PALETTE
    assert resolve_palette("x", "random_palette", catalog={}) == SAFETY_PALETTE


def test_parse_palette_catalog_accepts_entries_and_strings() -> None:
    parsed = parse_palette_catalog(
        {
            "categories": {
                "a": [{"name": "Red", "hex": "#FF0000"}, "#00FF00", {"name": "NoHex"}],
                "b": None,
            }
        }
    )
    assert parsed == {"a": ("#FF0000", "#00FF00"), "b": ()}

    with pytest.raises(RuntimeError):
        parse_palette_catalog({"a": "#FF0000"})


def test_packaged_catalog_loads_categories() -> None:
    catalog = load_palette_catalog()
    for name in ["warm", "cool", "earth", "pastel", "neon", "monochrome"]:
        assert name in catalog
        assert len(catalog[name]) > 0
    assert all(c.startswith("#") for c in catalog["pastel"])


def test_configured_palette_file_replaces_packaged_catalog(tmp_path: Path) -> None:
    palettes = tmp_path / "mine.yaml"
    palettes.write_text('categories:\n  mine:\n    - "#010203"\n', encoding="utf-8")
    cfg = tmp_path / "config.yaml"
    cfg.write_text(f'paths:\n  palette_file: "{palettes.as_posix()}"\n', encoding="utf-8")
    set_config_path(cfg)

    assert load_palette_catalog() == {"mine": ("#010203",)}
    assert resolve_palette("mine") == ("#010203",)
