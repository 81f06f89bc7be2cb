"""
どこで: `src/jenvek/core/patterns/scatter.py`。一様ランダム散布パターン。
何を: circle / 回転付き rect / 頂点ジッタ付き polygon をビューポート全体へ散布する。
なぜ: 未知のパターン名に対するフォールバック先にもなる、最も単純な生成器を提供するため。
"""

from __future__ import annotations

import math
from typing import Sequence

from jenvek.core.options import GenerationOptions, PatternKind
from jenvek.core.pattern_registry import pattern
from jenvek.core.patterns.util import next_fill, shape_style
from jenvek.core.primitives import XY, Circle, Polygon, Rect, Rotation
from jenvek.core.random_source import RandomSource
from jenvek.core.recursion import RecursionGovernor
from jenvek.core.report import GenerationReport
from jenvek.core.scene import SceneGroup


def scatter_count(options: GenerationOptions) -> int:
    """散布する形状数 `floor(complexity * density/100 * 20 * repetition)` を返す。"""

    return int(math.floor(options.complexity * (options.density / 100.0) * 20.0 * options.repetition))


@pattern(PatternKind.RANDOM)
def scatter(
    group: SceneGroup,
    options: GenerationOptions,
    palette: Sequence[str],
    *,
    rng: RandomSource,
    governor: RecursionGovernor,
) -> GenerationReport:
    """一様ランダム散布を生成する。

    Notes
    -----
    形状の選択確率は circle 0.3 / rect 0.3 / polygon 0.4。
    寸法は `complexity * scale` に比例する。
    """

    width, height = options.viewport
    size_k = options.complexity * options.scale
    count = 0

    for _ in range(scatter_count(options)):
        shape_type = rng.next()
        style = shape_style(options, next_fill(group, options, palette, rng))

        if shape_type < 0.3:
            cx = rng.uniform(0.0, width)
            cy = rng.uniform(0.0, height)
            group.add(Circle(cx=cx, cy=cy, r=rng.uniform(5.0, 30.0 * size_k), style=style))
        elif shape_type < 0.6:
            w = rng.uniform(10.0, 50.0 * size_k)
            h = rng.uniform(10.0, 50.0 * size_k)
            x = rng.uniform(0.0, width - w)
            y = rng.uniform(0.0, height - h)
            rotation = Rotation(
                angle=rng.uniform(-30.0, 30.0),
                cx=rng.uniform(0.0, width),
                cy=rng.uniform(0.0, height),
            )
            group.add(Rect(x=x, y=y, width=w, height=h, style=style, rotation=rotation))
        else:
            n_points = rng.randint(3, 7)
            cx = rng.uniform(0.0, width)
            cy = rng.uniform(0.0, height)
            radius = rng.uniform(10.0, 40.0 * size_k)
            points: list[XY] = []
            for j in range(n_points):
                angle = (j / n_points) * math.tau + rng.uniform(-0.1, 0.1)
                r = radius * rng.uniform(0.8, 1.2)
                points.append((cx + math.cos(angle) * r, cy + math.sin(angle) * r))
            group.add(Polygon(points=tuple(points), style=style))
        count += 1

    return GenerationReport(
        element_count=count,
        metrics={"complexity": options.complexity, "uniqueColors": len(palette)},
    )
