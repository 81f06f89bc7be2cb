"""
どこで: `src/jenvek/core/primitives.py`。
何を: 生成器が出力する描画プリミティブ（circle/rect/ellipse/polygon/line/path）の不変モデルを定義する。
なぜ: 生成結果を書き込み専用の値として保持し、アニメーションは派生属性だけを差し替える形にするため。
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import ClassVar, Iterable, Sequence, TypeAlias

XY = tuple[float, float]
PathCommand = tuple[str, tuple[float, ...]]


@dataclass(frozen=True, slots=True)
class Style:
    """塗り/線/不透明度。

    Parameters
    ----------
    fill : str
        `"none"`、hex 色、または `url(#id)` 参照。
    stroke : str
        線色。`"none"` も可。
    stroke_width : float
        線幅。
    opacity : float
        要素全体の不透明度。
    """

    fill: str
    stroke: str
    stroke_width: float
    opacity: float


@dataclass(frozen=True, slots=True)
class Rotation:
    """点 (cx, cy) まわりの回転 [deg]。"""

    angle: float
    cx: float
    cy: float


@dataclass(frozen=True, slots=True)
class Circle:
    kind: ClassVar[str] = "circle"

    cx: float
    cy: float
    r: float
    style: Style
    rotation: Rotation | None = None

    def center(self) -> XY:
        return self.cx, self.cy


@dataclass(frozen=True, slots=True)
class Rect:
    kind: ClassVar[str] = "rect"

    x: float
    y: float
    width: float
    height: float
    style: Style
    rotation: Rotation | None = None

    def center(self) -> XY:
        return self.x + self.width / 2.0, self.y + self.height / 2.0


@dataclass(frozen=True, slots=True)
class Ellipse:
    kind: ClassVar[str] = "ellipse"

    cx: float
    cy: float
    rx: float
    ry: float
    style: Style
    rotation: Rotation | None = None

    def center(self) -> XY:
        return self.cx, self.cy


@dataclass(frozen=True, slots=True)
class Polygon:
    kind: ClassVar[str] = "polygon"

    points: tuple[XY, ...]
    style: Style
    rotation: Rotation | None = None

    def center(self) -> XY:
        return _centroid(self.points)


@dataclass(frozen=True, slots=True)
class Line:
    kind: ClassVar[str] = "line"

    x1: float
    y1: float
    x2: float
    y2: float
    style: Style
    rotation: Rotation | None = None

    def center(self) -> XY:
        return (self.x1 + self.x2) / 2.0, (self.y1 + self.y2) / 2.0


@dataclass(frozen=True, slots=True)
class Path:
    """構造化コマンド列で表す path。

    Notes
    -----
    コマンドは `("M", (x, y))`, `("L", (x, y))`,
    `("C", (x1, y1, x2, y2, x, y))`, `("A", (rx, ry, rot, large, sweep, x, y))` の 4 種。
    """

    kind: ClassVar[str] = "path"

    commands: tuple[PathCommand, ...]
    style: Style
    rotation: Rotation | None = None

    @classmethod
    def polyline(cls, points: Iterable[Sequence[float]], style: Style) -> "Path":
        """点列を `M ... L ...` の開いた折れ線 path にして返す。"""

        commands: list[PathCommand] = []
        for i, (x, y) in enumerate(points):
            commands.append(("M" if i == 0 else "L", (float(x), float(y))))
        return cls(commands=tuple(commands), style=style)

    def endpoints(self) -> tuple[XY, ...]:
        """各コマンドの終点を返す。"""

        return tuple((args[-2], args[-1]) for _, args in self.commands)

    def center(self) -> XY:
        return _centroid(self.endpoints())


Primitive: TypeAlias = Circle | Rect | Ellipse | Polygon | Line | Path


def _centroid(points: Sequence[XY]) -> XY:
    if not points:
        return 0.0, 0.0
    sx = sum(p[0] for p in points)
    sy = sum(p[1] for p in points)
    n = float(len(points))
    return sx / n, sy / n


def regular_polygon_points(
    cx: float,
    cy: float,
    radius: float,
    sides: int,
    *,
    phase: float = 0.0,
) -> tuple[XY, ...]:
    """正多角形の頂点列を返す。

    Parameters
    ----------
    cx, cy : float
        中心。
    radius : float
        外接円半径。
    sides : int
        辺数。3 未満は 3 にクランプする。
    phase : float
        開始角 [rad]。0 で +X 軸上に頂点を置く。
    """

    n = max(3, int(sides))
    out: list[XY] = []
    for i in range(n):
        a = phase + (i / n) * math.tau
        out.append((cx + math.cos(a) * radius, cy + math.sin(a) * radius))
    return tuple(out)


__all__ = [
    "Circle",
    "Ellipse",
    "Line",
    "Path",
    "PathCommand",
    "Polygon",
    "Primitive",
    "Rect",
    "Rotation",
    "Style",
    "XY",
    "regular_polygon_points",
]
