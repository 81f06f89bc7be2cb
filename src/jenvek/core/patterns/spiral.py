"""
どこで: `src/jenvek/core/patterns/spiral.py`。黄金角（フィボナッチ）スパイラルパターン。
何を: i 番目の要素を角度 `i * goldenAngle`、半径 `R*sqrt(i/n)` に置き、形状を巡回させる。
なぜ: 黄金比に基づく均等な螺旋配置の生成器を提供するため。
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from jenvek.core.options import GenerationOptions, PatternKind
from jenvek.core.pattern_registry import pattern
from jenvek.core.patterns.util import next_fill, shape_style, stroke_style
from jenvek.core.primitives import Circle, Ellipse, Line, Path, Polygon, Rect, Rotation
from jenvek.core.random_source import RandomSource
from jenvek.core.recursion import RecursionGovernor
from jenvek.core.report import GenerationReport
from jenvek.core.scene import SceneGroup

PHI = (1.0 + math.sqrt(5.0)) / 2.0
GOLDEN_ANGLE = math.tau * (1.0 - 1.0 / PHI)


def golden_spiral_points(n: int, radius: float) -> np.ndarray:
    """原点中心の黄金角スパイラル点列 (n, 2) を返す。"""

    if n <= 0:
        return np.zeros((0, 2), dtype=np.float64)
    i = np.arange(n, dtype=np.float64)
    theta = i * GOLDEN_ANGLE
    distance = radius * np.sqrt(i / float(n))
    return np.stack([distance * np.cos(theta), distance * np.sin(theta)], axis=1)


@pattern(PatternKind.FIBONACCI)
def fibonacci(
    group: SceneGroup,
    options: GenerationOptions,
    palette: Sequence[str],
    *,
    rng: RandomSource,
    governor: RecursionGovernor,
) -> GenerationReport:
    """黄金角スパイラルを生成する。

    Notes
    -----
    形状は `i % randint(3, 6)` で circle / 回転正方形 / 三角形 / 楕円 / 放射線分 を巡回する。
    `complexity > 5 and density > 50` のとき間引いた点列を結ぶ螺旋 path を追加する。
    """

    width, height = options.viewport
    cx0 = width / 2.0
    cy0 = height / 2.0
    radius = min(width, height) * 0.45 * options.scale
    n = max(10, int(math.floor(50.0 * options.complexity * (options.density / 100.0) * options.repetition)))
    sw = options.stroke_weight
    op = options.opacity

    points = golden_spiral_points(n, radius)
    count = 0

    for i in range(n):
        theta = i * GOLDEN_ANGLE
        theta_deg = math.degrees(theta)
        x = cx0 + float(points[i, 0])
        y = cy0 + float(points[i, 1])
        size = max(1.0, radius * 0.1 * (1.0 - i / n) * (options.complexity / 5.0))

        style = shape_style(options, next_fill(group, options, palette, rng))
        shape_type = i % rng.randint(3, 6)

        if shape_type == 0:
            group.add(Circle(cx=x, cy=y, r=size, style=style))
        elif shape_type == 1:
            rotation = Rotation(angle=theta_deg + rng.uniform(-10.0, 10.0), cx=x, cy=y)
            group.add(Rect(x=x - size / 2.0, y=y - size / 2.0, width=size, height=size, style=style, rotation=rotation))
        elif shape_type == 2:
            tri = tuple(
                (x + size * math.cos(theta + j * math.tau / 3.0), y + size * math.sin(theta + j * math.tau / 3.0))
                for j in range(3)
            )
            group.add(Polygon(points=tri, style=style))
        elif shape_type == 3:
            rx = size * rng.uniform(0.8, 1.2)
            ry = size * rng.uniform(0.5, 1.0)
            rotation = Rotation(angle=theta_deg + rng.uniform(-10.0, 10.0), cx=x, cy=y)
            group.add(Ellipse(cx=x, cy=y, rx=rx, ry=ry, style=style, rotation=rotation))
        else:
            dx = math.cos(theta) * size
            dy = math.sin(theta) * size
            line_style = stroke_style(rng.choice(palette), sw * rng.uniform(0.5, 1.5), op)
            group.add(Line(x1=x - dx, y1=y - dy, x2=x + dx, y2=y + dy, style=line_style))
        count += 1

    if options.complexity > 5 and options.density > 50:
        step = max(1, n // (50 * int(options.repetition)))
        path_points = points[::step] + np.array([cx0, cy0])
        if len(path_points) > 1:
            group.add(Path.polyline(path_points.tolist(), stroke_style(options.stroke_color, sw * 0.5, 0.4 * op)))
            count += 1

    return GenerationReport(
        element_count=count,
        metrics={
            "goldenRatio": round(PHI, 8),
            "goldenAngleRad": round(GOLDEN_ANGLE, 8),
            "numElements": n,
        },
    )
