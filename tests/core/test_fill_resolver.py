"""塗り解決（none/solid/gradient/pattern）と定義レジストリをテストする。"""

from __future__ import annotations

import pytest

from jenvek.core.fill import (
    NO_FILL,
    DefinitionsRegistry,
    LinearGradient,
    RadialGradient,
    TilePattern,
    create_gradient,
    create_tile_pattern,
    resolve_fill,
)
from jenvek.core.options import FillMode
from jenvek.core.random_source import ParkMillerRandomSource, RandomSource

PALETTE = ("#111111", "#222222", "#333333")


class _Counting(RandomSource):
    def __init__(self, value: float) -> None:
        self.value = value
        self.calls = 0

    def next(self) -> float:
        self.calls += 1
        return self.value


@pytest.mark.parametrize("palette", [PALETTE, ("#ffffff",), ("url(#x)", "#000")])
def test_fill_none_returns_marker_without_consuming_random(palette: tuple[str, ...]) -> None:
    rng = _Counting(0.1)
    reg = DefinitionsRegistry()
    for _ in range(10):
        assert resolve_fill(palette, FillMode.NONE, rng=rng, registry=reg) == NO_FILL
    assert rng.calls == 0
    assert len(reg) == 0


def test_fill_solid_picks_palette_color() -> None:
    rng = ParkMillerRandomSource(3)
    reg = DefinitionsRegistry()
    for _ in range(50):
        assert resolve_fill(PALETTE, "solid", rng=rng, registry=reg) in PALETTE
    assert len(reg) == 0


def test_fill_gradient_registers_definition_below_threshold() -> None:
    reg = DefinitionsRegistry()
    ref = resolve_fill(PALETTE, FillMode.GRADIENT, rng=_Counting(0.1), registry=reg)
    assert ref == "url(#gradient-1)"
    assert "gradient-1" in reg
    assert isinstance(reg.get("gradient-1"), (LinearGradient, RadialGradient))

    solid = resolve_fill(PALETTE, FillMode.GRADIENT, rng=_Counting(0.3), registry=reg)
    assert solid in PALETTE


def test_fill_pattern_uses_half_open_range() -> None:
    reg = DefinitionsRegistry()
    ref = resolve_fill(PALETTE, FillMode.PATTERN, rng=_Counting(0.3), registry=reg)
    assert ref == "url(#pattern-1)"
    assert isinstance(reg.get("pattern-1"), TilePattern)

    assert resolve_fill(PALETTE, FillMode.PATTERN, rng=_Counting(0.6), registry=reg) in PALETTE
    assert resolve_fill(PALETTE, FillMode.PATTERN, rng=_Counting(0.29), registry=reg) in PALETTE
    assert len(reg) == 1


def test_gradient_definition_shape() -> None:
    reg = DefinitionsRegistry()
    grad = create_gradient(PALETTE, rng=ParkMillerRandomSource(11), registry=reg)
    assert 2 <= len(grad.stops) <= 4
    assert grad.stops[0].offset == 0
    assert grad.stops[-1].offset == 100
    for stop in grad.stops:
        assert stop.color in PALETTE
        assert 0.7 <= stop.opacity <= 1.0


def test_tile_pattern_definition_shape() -> None:
    reg = DefinitionsRegistry()
    for seed in range(1, 30):
        tile = create_tile_pattern(PALETTE, rng=ParkMillerRandomSource(seed), registry=reg)
        assert 8 <= tile.size <= 20
        assert 0 <= tile.rotation <= 89
        assert 0.5 <= tile.scale <= 1.5
        assert tile.background.width == tile.size
        assert len(tile.elements) >= 1


def test_registry_ids_are_sequential_and_reset_on_clear() -> None:
    reg = DefinitionsRegistry()
    assert reg.new_id("gradient") == "gradient-1"
    assert reg.new_id("pattern") == "pattern-2"
    reg.clear()
    assert reg.new_id("gradient") == "gradient-1"


def test_registry_rejects_duplicate_ids() -> None:
    reg = DefinitionsRegistry()
    grad = create_gradient(PALETTE, rng=ParkMillerRandomSource(5), registry=reg)
    reg.register(grad)
    with pytest.raises(ValueError):
        reg.register(grad)
