"""
どこで: `src/jenvek/core/fill.py`。
何を: 塗りモード（none/solid/gradient/pattern）から塗り参照を解決し、グラデーション/タイル定義を登録する。
なぜ: 生成器ごとに色決定を書かず、パレット外の色を混入させない単一の経路を用意するため。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence, TypeAlias

from jenvek.core.options import FillMode
from jenvek.core.primitives import Circle, Line, Polygon, Primitive, Rect, Style
from jenvek.core.random_source import RandomSource

NO_FILL = "none"

GRADIENT_PROBABILITY = 0.3
PATTERN_PROBABILITY_RANGE = (0.3, 0.6)
LINEAR_GRADIENT_PROBABILITY = 0.7


@dataclass(frozen=True, slots=True)
class GradientStop:
    """グラデーションの 1 停止点。offset は [%]。"""

    offset: int
    color: str
    opacity: float


@dataclass(frozen=True, slots=True)
class LinearGradient:
    """線形グラデーション。端点はいずれも [%]。"""

    id: str
    x1: int
    y1: int
    x2: int
    y2: int
    stops: tuple[GradientStop, ...]


@dataclass(frozen=True, slots=True)
class RadialGradient:
    """放射グラデーション。中心/焦点/半径はいずれも [%]。"""

    id: str
    cx: int
    cy: int
    r: int
    fx: int
    fy: int
    stops: tuple[GradientStop, ...]


@dataclass(frozen=True, slots=True)
class TilePattern:
    """`userSpaceOnUse` のタイルパターン。

    Parameters
    ----------
    id : str
        定義 id。
    size : int
        タイル一辺 [device unit]。
    rotation : int
        タイル回転 [deg]。
    scale : float
        タイル拡大率。
    background : Rect
        タイル全面の下地矩形。
    elements : tuple[Primitive, ...]
        下地の上に描くタイル内容。
    """

    id: str
    size: int
    rotation: int
    scale: float
    background: Rect
    elements: tuple[Primitive, ...]


FillDefinition: TypeAlias = LinearGradient | RadialGradient | TilePattern


class DefinitionsRegistry:
    """グラデーション/タイル定義を id で保持するレジストリ。

    Notes
    -----
    id は `{prefix}-{連番}` で決定的に採番する（乱数を消費しない）。
    寿命は 1 回の生成パスで、compositor が毎回 `clear()` する。
    """

    def __init__(self) -> None:
        self._items: dict[str, FillDefinition] = {}
        self._counter = 0

    def new_id(self, prefix: str) -> str:
        """未使用の定義 id を採番して返す。"""

        self._counter += 1
        return f"{prefix}-{self._counter}"

    def register(self, definition: FillDefinition) -> str:
        """定義を登録し、`url(#id)` 形式の参照を返す。"""

        if definition.id in self._items:
            raise ValueError(f"定義 id が重複している: {definition.id!r}")
        self._items[definition.id] = definition
        return f"url(#{definition.id})"

    def get(self, definition_id: str) -> FillDefinition:
        return self._items[definition_id]

    def clear(self) -> None:
        """全定義を破棄し、採番もリセットする。"""

        self._items.clear()
        self._counter = 0

    def __contains__(self, definition_id: object) -> bool:
        return definition_id in self._items

    def __iter__(self) -> Iterator[FillDefinition]:
        return iter(self._items.values())

    def __len__(self) -> int:
        return len(self._items)


def resolve_fill(
    palette: Sequence[str],
    fill_mode: FillMode | str,
    *,
    rng: RandomSource,
    registry: DefinitionsRegistry,
) -> str:
    """塗りモードから塗り参照を解決して返す。

    Parameters
    ----------
    palette : Sequence[str]
        色候補（空でないこと）。
    fill_mode : FillMode | str
        塗りモード。
    rng : RandomSource
        乱数源。
    registry : DefinitionsRegistry
        gradient/pattern 定義の登録先。

    Returns
    -------
    str
        `"none"`、パレット色、または `url(#id)`。

    Notes
    -----
    - none: 乱数を消費せず常に `"none"`。
    - gradient: 確率 [0, 0.3) でグラデーション、それ以外は solid。
    - pattern: 確率 [0.3, 0.6) でタイル、それ以外は solid。
    """

    mode = FillMode(fill_mode)
    if mode is FillMode.NONE:
        return NO_FILL

    if mode is FillMode.GRADIENT:
        if rng.next() < GRADIENT_PROBABILITY:
            return registry.register(create_gradient(palette, rng=rng, registry=registry))
    elif mode is FillMode.PATTERN:
        lo, hi = PATTERN_PROBABILITY_RANGE
        if lo <= rng.next() < hi:
            return registry.register(create_tile_pattern(palette, rng=rng, registry=registry))

    return rng.choice(palette)


def create_gradient(
    palette: Sequence[str],
    *,
    rng: RandomSource,
    registry: DefinitionsRegistry,
) -> LinearGradient | RadialGradient:
    """線形（70%）または放射（30%）グラデーション定義を生成して返す（未登録）。"""

    gradient_id = registry.new_id("gradient")
    is_linear = rng.next() < LINEAR_GRADIENT_PROBABILITY

    if is_linear:
        x1 = rng.randint(0, 100)
        y1 = rng.randint(0, 100)
        x2 = rng.randint(0, 100)
        y2 = rng.randint(0, 100)
    else:
        cx = rng.randint(0, 100)
        cy = rng.randint(0, 100)
        r = rng.randint(50, 150)
        fx = rng.randint(0, 100)
        fy = rng.randint(0, 100)

    n_stops = rng.randint(2, 4)
    stops: list[GradientStop] = []
    for i in range(n_stops):
        stops.append(
            GradientStop(
                offset=int((i / (n_stops - 1)) * 100),
                color=rng.choice(palette),
                opacity=rng.uniform(0.7, 1.0),
            )
        )

    if is_linear:
        return LinearGradient(id=gradient_id, x1=x1, y1=y1, x2=x2, y2=y2, stops=tuple(stops))
    return RadialGradient(id=gradient_id, cx=cx, cy=cy, r=r, fx=fx, fy=fy, stops=tuple(stops))


def create_tile_pattern(
    palette: Sequence[str],
    *,
    rng: RandomSource,
    registry: DefinitionsRegistry,
) -> TilePattern:
    """タイルパターン定義を生成して返す（未登録）。

    タイル内容は dots / 水平(+垂直)線 / 斜め(クロス)線 / 2x2 市松 /
    対向三角形 / 線付きの小円 or 小正方形 から一様に選ぶ。
    """

    pattern_id = registry.new_id("pattern")
    size = rng.randint(8, 20)
    rotation = rng.randint(0, 89)
    scale = rng.uniform(0.5, 1.5)
    s = float(size)

    background = Rect(
        x=0.0,
        y=0.0,
        width=s,
        height=s,
        style=Style(fill=rng.choice(palette), stroke=NO_FILL, stroke_width=0.0, opacity=rng.uniform(0.1, 0.3)),
    )

    tile_type = rng.randint(0, 5)
    stroke_color = rng.choice(palette)
    fill_color = rng.choice(palette)
    stroke_width = rng.uniform(0.5, 1.5)

    line_style = Style(fill=NO_FILL, stroke=stroke_color, stroke_width=stroke_width, opacity=1.0)
    solid = Style(fill=fill_color, stroke=NO_FILL, stroke_width=0.0, opacity=1.0)
    half = s / 2.0

    elements: list[Primitive] = []
    if tile_type == 0:
        elements.append(Circle(cx=half, cy=half, r=s * rng.uniform(0.15, 0.3), style=solid))
    elif tile_type == 1:
        elements.append(Line(x1=0.0, y1=half, x2=s, y2=half, style=line_style))
        if rng.next() > 0.6:
            elements.append(Line(x1=half, y1=0.0, x2=half, y2=s, style=line_style))
    elif tile_type == 2:
        elements.append(Line(x1=0.0, y1=0.0, x2=s, y2=s, style=line_style))
        if rng.next() > 0.6:
            elements.append(Line(x1=s, y1=0.0, x2=0.0, y2=s, style=line_style))
    elif tile_type == 3:
        elements.append(Rect(x=0.0, y=0.0, width=half, height=half, style=solid))
        elements.append(Rect(x=half, y=half, width=half, height=half, style=solid))
    elif tile_type == 4:
        elements.append(Polygon(points=((0.0, 0.0), (s, 0.0), (half, s)), style=solid))
        if rng.next() > 0.5:
            opposing = Style(fill=rng.choice(palette), stroke=NO_FILL, stroke_width=0.0, opacity=1.0)
            elements.append(Polygon(points=((0.0, s), (s, s), (half, 0.0)), style=opposing))
    else:
        elem = s * 0.4
        outlined = Style(fill=fill_color, stroke=stroke_color, stroke_width=stroke_width * 0.5, opacity=1.0)
        if rng.next() > 0.5:
            elements.append(Circle(cx=half, cy=half, r=elem / 2.0, style=outlined))
        else:
            elements.append(
                Rect(x=half - elem / 2.0, y=half - elem / 2.0, width=elem, height=elem, style=outlined)
            )

    return TilePattern(
        id=pattern_id,
        size=size,
        rotation=rotation,
        scale=scale,
        background=background,
        elements=tuple(elements),
    )


__all__ = [
    "DefinitionsRegistry",
    "FillDefinition",
    "GradientStop",
    "LinearGradient",
    "NO_FILL",
    "RadialGradient",
    "TilePattern",
    "create_gradient",
    "create_tile_pattern",
    "resolve_fill",
]
