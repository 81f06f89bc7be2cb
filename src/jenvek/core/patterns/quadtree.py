"""
どこで: `src/jenvek/core/patterns/quadtree.py`。確率的四分木パターン。
何を: ビューポートを確率的に再帰 4 分割し、葉へ rect / circle / ellipse / n-gon / 円弧のいずれかを描く。
なぜ: complexity/density/深さから分割確率を決める再帰生成器を提供するため。
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

from jenvek.core.options import GenerationOptions, PatternKind
from jenvek.core.pattern_registry import pattern
from jenvek.core.patterns.util import clamp, next_fill, shape_style, stroke_style
from jenvek.core.primitives import Circle, Ellipse, Line, Path, Polygon, Rect, regular_polygon_points
from jenvek.core.random_source import RandomSource
from jenvek.core.recursion import RecursionGovernor
from jenvek.core.report import GenerationReport
from jenvek.core.scene import SceneGroup

MIN_EXTENT = 2.0


@dataclass(frozen=True, slots=True)
class Quad:
    x: float
    y: float
    width: float
    height: float
    depth: int


def subdivide_probability(complexity: float, density: float, depth: int, max_depth: int) -> float:
    """分割確率 `0.5 + c/10*0.4 + d/100*0.2 - depth/max*0.3` を [0, 1] にクランプして返す。"""

    p = 0.5 + (complexity / 10.0) * 0.4 + (density / 100.0) * 0.2 - (depth / max(1, max_depth)) * 0.3
    return clamp(p, 0.0, 1.0)


@pattern(PatternKind.QUADTREE)
def quadtree(
    group: SceneGroup,
    options: GenerationOptions,
    palette: Sequence[str],
    *,
    rng: RandomSource,
    governor: RecursionGovernor,
) -> GenerationReport:
    """確率的四分木を生成する。

    Notes
    -----
    - 打ち切り: depth >= max_recursion_depth、幅/高さ < 2、governor 拒否。
    - 分割点は半辺の ±10% でジッタする。
    - `complexity > 5` なら分割線 2 本を子の後に描く（要素数に数えるが governor には数えない）。
    """

    width, height = options.viewport
    max_depth = int(options.max_recursion_depth)
    count = 0

    def _node(q: Quad) -> None:
        nonlocal count
        if q.depth >= max_depth or q.width < MIN_EXTENT or q.height < MIN_EXTENT:
            return
        if not governor.visit(q.depth):
            return

        p = subdivide_probability(options.complexity, options.density, q.depth, max_depth)
        if rng.next() < p:
            half_w = q.width / 2.0
            half_h = q.height / 2.0
            mid_x = q.x + half_w + rng.uniform(-half_w * 0.1, half_w * 0.1)
            mid_y = q.y + half_h + rng.uniform(-half_h * 0.1, half_h * 0.1)
            right = q.x + q.width
            bottom = q.y + q.height
            d = q.depth + 1

            _node(Quad(q.x, q.y, mid_x - q.x, mid_y - q.y, d))
            _node(Quad(mid_x, q.y, right - mid_x, mid_y - q.y, d))
            _node(Quad(q.x, mid_y, mid_x - q.x, bottom - mid_y, d))
            _node(Quad(mid_x, mid_y, right - mid_x, bottom - mid_y, d))

            if options.complexity > 5:
                line_style = stroke_style(
                    options.stroke_color,
                    max(0.1, options.stroke_weight * (0.8 - q.depth * 0.1)),
                    max(0.05, 0.3 - q.depth * 0.05),
                )
                group.add(Line(x1=q.x, y1=mid_y, x2=right, y2=mid_y, style=line_style))
                group.add(Line(x1=mid_x, y1=q.y, x2=mid_x, y2=bottom, style=line_style))
                count += 2
            return

        _leaf(q)
        count += 1

    def _leaf(q: Quad) -> None:
        fill = next_fill(group, options, palette, rng)
        sw = max(0.1, options.stroke_weight * (1.0 - q.depth / max_depth))
        op = max(0.1, options.opacity * (1.0 - q.depth / (max_depth * 1.5)))
        style = shape_style(options, fill, stroke_width=sw, opacity=op)
        cx = q.x + q.width / 2.0
        cy = q.y + q.height / 2.0
        r = min(q.width, q.height) / 2.0 * 0.8 * options.scale

        leaf_type = rng.randint(0, 4)
        if leaf_type == 0:
            group.add(
                Rect(
                    x=q.x + q.width * 0.1,
                    y=q.y + q.height * 0.1,
                    width=q.width * 0.8,
                    height=q.height * 0.8,
                    style=style,
                )
            )
        elif leaf_type == 1:
            group.add(Circle(cx=cx, cy=cy, r=r, style=style))
        elif leaf_type == 2:
            group.add(Ellipse(cx=cx, cy=cy, rx=r, ry=r * rng.uniform(0.5, 1.0), style=style))
        elif leaf_type == 3:
            sides = rng.randint(3, 6)
            group.add(Polygon(points=regular_polygon_points(cx, cy, r, sides), style=style))
        else:
            start = rng.uniform(0.0, math.tau)
            end = start + rng.uniform(math.pi / 2.0, math.pi * 1.5)
            large_arc = 1.0 if (end - start) >= math.pi else 0.0
            x1 = cx + math.cos(start) * r
            y1 = cy + math.sin(start) * r
            x2 = cx + math.cos(end) * r
            y2 = cy + math.sin(end) * r
            arc_style = stroke_style(rng.choice(palette), sw * 1.5, op)
            group.add(
                Path(
                    commands=(("M", (x1, y1)), ("A", (r, r, 0.0, large_arc, 1.0, x2, y2))),
                    style=arc_style,
                )
            )

    _node(Quad(0.0, 0.0, float(width), float(height), 0))

    return GenerationReport(
        element_count=count,
        metrics={
            "maxDepthReached": governor.deepest + 1,
            "nodesVisited": governor.count,
            "complexity": options.complexity,
        },
    )
