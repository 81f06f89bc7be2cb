"""
どこで: `src/jenvek/core/patterns/fractal.py`。深さ再帰フラクタルパターン。
何を: 中心付近の circle/rect から子を放射状に再帰配置し、深さに応じて線幅と不透明度を減衰させる。
なぜ: RecursionGovernor で打ち切られる代表的な再帰生成器を提供するため。
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

from jenvek.core.options import GenerationOptions, PatternKind
from jenvek.core.pattern_registry import pattern
from jenvek.core.patterns.util import next_fill, shape_style
from jenvek.core.primitives import Circle, Rect, Rotation
from jenvek.core.random_source import RandomSource
from jenvek.core.recursion import RecursionGovernor
from jenvek.core.report import GenerationReport
from jenvek.core.scene import SceneGroup


@dataclass(frozen=True, slots=True)
class _Node:
    shape: str  # "circle" | "rect"
    x: float
    y: float
    size: float
    depth: int


def child_scale_factor(depth: int, density: float) -> float:
    """子サイズ倍率 `max(0.1, (0.6 - depth*0.05) * (density/100 + 0.5))` を返す。"""

    return max(0.1, (0.6 - depth * 0.05) * (density / 100.0 + 0.5))


@pattern(PatternKind.RECURSIVE)
def fractal(
    group: SceneGroup,
    options: GenerationOptions,
    palette: Sequence[str],
    *,
    rng: RandomSource,
    governor: RecursionGovernor,
) -> GenerationReport:
    """深さ再帰フラクタルを生成する。

    Notes
    -----
    打ち切り条件（先に満たしたもの）:
    - depth >= max_recursion_depth
    - governor が訪問を拒否
    - 子サイズ < 1
    子の形状は確率 0.6 で親と同じ、それ以外は circle/rect を反転する。
    """

    width, height = options.viewport
    max_depth = int(options.max_recursion_depth)

    initial_size = min(width, height) * 0.4 * options.scale
    start_x = width / 2.0 + rng.uniform(-width * 0.1, width * 0.1)
    start_y = height / 2.0 + rng.uniform(-height * 0.1, height * 0.1)
    root = _Node(
        shape="circle" if rng.next() < 0.5 else "rect",
        x=start_x,
        y=start_y,
        size=initial_size,
        depth=0,
    )

    def _draw(node: _Node) -> None:
        if node.depth >= max_depth or not governor.visit(node.depth):
            return

        fill = next_fill(group, options, palette, rng)
        style = shape_style(
            options,
            fill,
            stroke_width=max(0.1, options.stroke_weight * (1.0 - node.depth / (max_depth * 1.5))),
            opacity=max(0.1, options.opacity * (1.0 - node.depth / (max_depth * 2.0))),
        )
        if node.shape == "circle":
            group.add(Circle(cx=node.x, cy=node.y, r=max(1.0, node.size / 2.0), style=style))
        else:
            side = max(1.0, node.size)
            group.add(
                Rect(
                    x=node.x - node.size / 2.0,
                    y=node.y - node.size / 2.0,
                    width=side,
                    height=side,
                    style=style,
                    rotation=Rotation(angle=rng.uniform(-10.0, 10.0), cx=node.x, cy=node.y),
                )
            )

        n_children = rng.randint(2, max(2, math.floor(options.complexity / 2.0)))
        child_size = node.size * child_scale_factor(node.depth, options.density)
        if child_size < 1.0:
            return

        for i in range(n_children):
            angle = (i / n_children) * math.tau + rng.uniform(-0.2, 0.2)
            distance = node.size * 0.5 * rng.uniform(0.8, 1.2)
            if rng.next() < 0.6:
                shape = node.shape
            else:
                shape = "rect" if node.shape == "circle" else "circle"
            _draw(
                _Node(
                    shape=shape,
                    x=node.x + math.cos(angle) * distance,
                    y=node.y + math.sin(angle) * distance,
                    size=child_size,
                    depth=node.depth + 1,
                )
            )

    _draw(root)

    return GenerationReport(
        element_count=governor.count,
        metrics={
            "recursionDepthReached": governor.deepest + 1,
            "complexity": options.complexity,
        },
    )
