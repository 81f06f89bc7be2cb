"""
どこで: `src/jenvek/core/patterns/grid.py`。セルグリッドパターン。
何を: N x N セルへ circle / rect / line / n-gon / ellipse / 入れ子形状のいずれかを置き、必要なら罫線を引く。
なぜ: density をセルの生存確率として扱う格子系の生成器を提供するため。
"""

from __future__ import annotations

import math
from typing import Sequence

from jenvek.core.fill import NO_FILL
from jenvek.core.options import GenerationOptions, PatternKind
from jenvek.core.pattern_registry import pattern
from jenvek.core.patterns.util import next_fill, shape_style, stroke_style
from jenvek.core.primitives import (
    Circle,
    Ellipse,
    Line,
    Polygon,
    Rect,
    Rotation,
    Style,
    regular_polygon_points,
)
from jenvek.core.random_source import RandomSource
from jenvek.core.recursion import RecursionGovernor
from jenvek.core.report import GenerationReport
from jenvek.core.scene import SceneGroup


def cells_per_side(options: GenerationOptions) -> int:
    """1 辺あたりのセル数 `max(2, floor(complexity*1.5 + repetition))` を返す。"""

    return max(2, int(math.floor(options.complexity * 1.5 + options.repetition)))


@pattern(PatternKind.GRID)
def grid(
    group: SceneGroup,
    options: GenerationOptions,
    palette: Sequence[str],
    *,
    rng: RandomSource,
    governor: RecursionGovernor,
) -> GenerationReport:
    """セルグリッドを生成する。

    Notes
    -----
    各セルは確率 `1 - density/100` でスキップする。
    `complexity > 4 and density > 30` のとき (n+1)*2 本の淡い罫線を追加する。
    """

    width, height = options.viewport
    n = cells_per_side(options)
    cell_w = width / n
    cell_h = height / n
    skip_threshold = 1.0 - options.density / 100.0
    sw = options.stroke_weight
    op = options.opacity
    count = 0

    for row in range(n):
        for col in range(n):
            if rng.next() < skip_threshold:
                continue

            cx = col * cell_w + cell_w / 2.0
            cy = row * cell_h + cell_h / 2.0
            content = rng.randint(0, 5)
            fill = next_fill(group, options, palette, rng)
            style = shape_style(options, fill)
            es = min(cell_w, cell_h) * 0.4 * options.scale * rng.uniform(0.7, 1.1)

            if content == 0:
                group.add(Circle(cx=cx, cy=cy, r=es, style=style))
            elif content == 1:
                w = es * 2.0 * rng.uniform(0.8, 1.2)
                h = es * 2.0 * rng.uniform(0.8, 1.2)
                rotation = Rotation(angle=rng.uniform(-20.0, 20.0), cx=cx, cy=cy)
                group.add(Rect(x=cx - w / 2.0, y=cy - h / 2.0, width=w, height=h, style=style, rotation=rotation))
            elif content == 2:
                angle = rng.uniform(0.0, math.tau)
                half = es
                dx = math.cos(angle) * half
                dy = math.sin(angle) * half
                line_style = stroke_style(rng.choice(palette), sw * rng.uniform(1.0, 3.0), op)
                group.add(Line(x1=cx - dx, y1=cy - dy, x2=cx + dx, y2=cy + dy, style=line_style))
            elif content == 3:
                vertices = rng.randint(3, 7)
                group.add(Polygon(points=regular_polygon_points(cx, cy, es, vertices), style=style))
            elif content == 4:
                rx = es * rng.uniform(0.7, 1.3)
                ry = es * rng.uniform(0.7, 1.3)
                group.add(Ellipse(cx=cx, cy=cy, rx=rx, ry=ry, style=style))
            else:
                outer_r = es * 1.2
                ring = shape_style(options, NO_FILL, stroke_width=sw * 0.5, opacity=op * 0.5)
                group.add(Circle(cx=cx, cy=cy, r=outer_r, style=ring))
                inner = outer_r * 0.6
                core = Style(fill=fill, stroke=NO_FILL, stroke_width=0.0, opacity=op)
                group.add(Rect(x=cx - inner / 2.0, y=cy - inner / 2.0, width=inner, height=inner, style=core))
                count += 1
            count += 1

    if options.complexity > 4 and options.density > 30:
        line_style = stroke_style(options.stroke_color, sw * 0.5, op * 0.2)
        for row in range(n + 1):
            y = row * cell_h
            group.add(Line(x1=0.0, y1=y, x2=float(width), y2=y, style=line_style))
            count += 1
        for col in range(n + 1):
            x = col * cell_w
            group.add(Line(x1=x, y1=0.0, x2=x, y2=float(height), style=line_style))
            count += 1

    return GenerationReport(
        element_count=count,
        metrics={"gridSize": f"{n}x{n}", "cellCount": n * n},
    )
