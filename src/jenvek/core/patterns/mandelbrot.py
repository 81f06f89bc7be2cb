"""
どこで: `src/jenvek/core/patterns/mandelbrot.py`。Mandelbrot escape-time パターン。
何を: 複素平面の窓 x∈[-2.1, 0.6], y∈[-1.2, 1.2] を格子サンプルし、発散した点だけを反復回数で色分けして描く。
なぜ: escape-time 反復を numba カーネルで計算し、描画側は乱数による間引きと形状選択だけにするため。
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np
from numba import njit  # type: ignore[import-untyped]

from jenvek.core.fill import NO_FILL
from jenvek.core.options import FillMode, GenerationOptions, PatternKind
from jenvek.core.pattern_registry import pattern
from jenvek.core.patterns.util import shape_style
from jenvek.core.primitives import Circle, Ellipse, Polygon, Rect, Rotation
from jenvek.core.random_source import RandomSource
from jenvek.core.recursion import RecursionGovernor
from jenvek.core.report import GenerationReport
from jenvek.core.scene import SceneGroup

X_MIN, X_MAX = -2.1, 0.6
Y_MIN, Y_MAX = -1.2, 1.2


@njit(cache=True, fastmath=True)  # type: ignore[misc]
def escape_time(cr: float, ci: float, max_iter: int) -> int:
    """z <- z^2 + c を |z|^2 > 4 または max_iter まで反復し、反復回数を返す。"""

    x = 0.0
    y = 0.0
    x2 = 0.0
    y2 = 0.0
    it = 0
    while x2 + y2 <= 4.0 and it < max_iter:
        y = 2.0 * x * y + ci
        x = x2 - y2 + cr
        x2 = x * x
        y2 = y * y
        it += 1
    return it


@njit(cache=True)  # type: ignore[misc]
def escape_time_grid(
    resolution: int,
    max_iter: int,
    x_min: float,
    x_max: float,
    y_min: float,
    y_max: float,
) -> np.ndarray:
    """resolution x resolution の反復回数配列 [row, col] を返す。

    セル (row, col) は `c = x_min + (x_max-x_min)*col/res + i*(y_min + (y_max-y_min)*row/res)`。
    """

    out = np.empty((resolution, resolution), dtype=np.int64)
    for row in range(resolution):
        ci = y_min + (y_max - y_min) * (row / resolution)
        for col in range(resolution):
            cr = x_min + (x_max - x_min) * (col / resolution)
            out[row, col] = escape_time(cr, ci, max_iter)
    return out


def mandelbrot_resolution(complexity: float) -> int:
    """格子解像度 `clamp(floor(complexity*7), 10, 100)` を返す。"""

    return max(10, min(100, int(math.floor(complexity * 7.0))))


def mandelbrot_max_iterations(complexity: float) -> int:
    """反復上限 `floor(complexity*20) + 15` を返す。"""

    return int(math.floor(complexity * 20.0)) + 15


@pattern(PatternKind.MANDELBROT)
def mandelbrot(
    group: SceneGroup,
    options: GenerationOptions,
    palette: Sequence[str],
    *,
    rng: RandomSource,
    governor: RecursionGovernor,
) -> GenerationReport:
    """Mandelbrot escape-time フィールドを生成する。

    Notes
    -----
    - セルは確率 `1 - density/100` でスキップする。
    - 描くのは `0 < iter < max_iter` の点だけ。色は `palette[floor(iter/max_iter*(len-1))]`。
    - 形状は `iter % 4` で circle / square / 回転楕円 / ひし形。
    - fill_mode が none なら塗りは常に `"none"`。
    """

    width, height = options.viewport
    resolution = mandelbrot_resolution(options.complexity)
    max_iter = mandelbrot_max_iterations(options.complexity)
    cell_w = width / resolution
    cell_h = height / resolution
    skip_threshold = 1.0 - options.density / 100.0
    no_fill = options.fill_mode is FillMode.NONE

    iterations = escape_time_grid(resolution, max_iter, X_MIN, X_MAX, Y_MIN, Y_MAX)
    count = 0

    for row in range(resolution):
        for col in range(resolution):
            if rng.next() < skip_threshold:
                continue
            it = int(iterations[row, col])
            if not (0 < it < max_iter):
                continue

            norm = it / max_iter
            fill = NO_FILL if no_fill else palette[int(math.floor(norm * (len(palette) - 1)))]
            size = max(1.0, min(cell_w, cell_h) * 0.9 * (1.0 - norm) * options.scale)
            px = col * cell_w + cell_w / 2.0
            py = row * cell_h + cell_h / 2.0
            style = shape_style(options, fill, stroke_width=options.stroke_weight * 0.5)
            half = size / 2.0

            shape_type = it % 4
            if shape_type == 0:
                group.add(Circle(cx=px, cy=py, r=half, style=style))
            elif shape_type == 1:
                group.add(Rect(x=px - half, y=py - half, width=size, height=size, style=style))
            elif shape_type == 2:
                rotation = Rotation(angle=it * 5.0, cx=px, cy=py)
                group.add(Ellipse(cx=px, cy=py, rx=half, ry=size / 4.0, style=style, rotation=rotation))
            else:
                diamond = ((px, py - half), (px + half, py), (px, py + half), (px - half, py))
                group.add(Polygon(points=diamond, style=style))
            count += 1

    return GenerationReport(
        element_count=count,
        metrics={"resolution": resolution, "maxIterations": max_iter},
    )
