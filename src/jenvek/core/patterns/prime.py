"""
どこで: `src/jenvek/core/patterns/prime.py`。素数インデックスのレイアウトパターン。
何を: 先頭 N 個の素数をグリッドまたは Ulam 風の外向き螺旋へ並べ、`prime % 5` で形状を選ぶ。
なぜ: 素数列の分布を要素サイズ（log 比）と形状で可視化する生成器を提供するため。
"""

from __future__ import annotations

import math
from typing import Sequence

from jenvek.core.fill import NO_FILL
from jenvek.core.options import GenerationOptions, PatternKind
from jenvek.core.pattern_registry import pattern
from jenvek.core.patterns.util import next_fill, shape_style
from jenvek.core.primitives import Circle, Polygon, Rect, Style
from jenvek.core.random_source import RandomSource
from jenvek.core.recursion import RecursionGovernor
from jenvek.core.report import GenerationReport
from jenvek.core.scene import SceneGroup

LAYOUT_GRID = "grid"
LAYOUT_SPIRAL = "spiral"


def is_prime(n: int) -> bool:
    """6k±1 ホイールの試し割りで素数判定する。"""

    if n <= 1:
        return False
    if n <= 3:
        return True
    if n % 2 == 0 or n % 3 == 0:
        return False
    i = 5
    while i * i <= n:
        if n % i == 0 or n % (i + 2) == 0:
            return False
        i += 6
    return True


def first_primes(count: int) -> list[int]:
    """先頭 count 個の素数を昇順で返す。

    Raises
    ------
    ValueError
        count が負の場合。
    """

    if int(count) < 0:
        raise ValueError(f"count は 0 以上である必要がある: got={count}")
    out: list[int] = []
    n = 2
    while len(out) < count:
        if is_prime(n):
            out.append(n)
        n += 1
    return out


def prime_count(options: GenerationOptions) -> int:
    """描く素数の個数 `max(10, floor(100*complexity*density/100*repetition))` を返す。"""

    return max(10, int(math.floor(100.0 * options.complexity * (options.density / 100.0) * options.repetition)))


def _draw_prime(
    group: SceneGroup,
    options: GenerationOptions,
    palette: Sequence[str],
    rng: RandomSource,
    x: float,
    y: float,
    size: float,
    value: int,
) -> None:
    fill = next_fill(group, options, palette, rng)
    style = shape_style(options, fill)
    half = size / 2.0

    shape_type = value % 5
    if shape_type == 0:
        group.add(Circle(cx=x, cy=y, r=half, style=style))
    elif shape_type == 1:
        group.add(Rect(x=x - half, y=y - half, width=size, height=size, style=style))
    elif shape_type == 2:
        tri = ((x, y - half), (x + half * 0.866, y + size / 4.0), (x - half * 0.866, y + size / 4.0))
        group.add(Polygon(points=tri, style=style))
    elif shape_type == 3:
        star = ((x, y - half), (x + size / 4.0, y), (x, y + half), (x - size / 4.0, y))
        group.add(Polygon(points=star, style=style))
    else:
        ring = shape_style(options, NO_FILL, stroke=fill, stroke_width=options.stroke_weight * 1.5)
        group.add(Circle(cx=x, cy=y, r=half, style=ring))
        if size > 4:
            hole = Style(fill=options.background_color, stroke=NO_FILL, stroke_width=0.0, opacity=1.0)
            group.add(Circle(cx=x, cy=y, r=size / 4.0, style=hole))


@pattern(PatternKind.PRIME)
def prime(
    group: SceneGroup,
    options: GenerationOptions,
    palette: Sequence[str],
    *,
    rng: RandomSource,
    governor: RecursionGovernor,
) -> GenerationReport:
    """素数レイアウトを生成する。

    Notes
    -----
    レイアウトは grid / spiral を等確率で選ぶ。要素サイズは
    `log(p+1)/log(largest+1)` に比例する。要素数は素数 1 個につき 1 と数える
    （ring の穴は数えない）。
    """

    width, height = options.viewport
    primes = first_primes(prime_count(options))
    if not primes:
        return GenerationReport(element_count=0, metrics={"primeCount": 0})

    largest = primes[-1]
    log_largest = math.log(largest + 1)
    layout = LAYOUT_GRID if rng.randint(0, 1) == 0 else LAYOUT_SPIRAL
    count = 0

    if layout == LAYOUT_GRID:
        grid_size = int(math.ceil(math.sqrt(len(primes))))
        cell_w = width / grid_size
        cell_h = height / grid_size
        for i, p in enumerate(primes):
            row, col = divmod(i, grid_size)
            x = col * cell_w + cell_w / 2.0
            y = row * cell_h + cell_h / 2.0
            size = max(2.0, min(cell_w, cell_h) * 0.8 * (math.log(p + 1) / log_largest) * options.scale)
            _draw_prime(group, options, palette, rng, x, y, size, p)
            count += 1
    else:
        x = width / 2.0
        y = height / 2.0
        step = min(width, height) / math.sqrt(len(primes)) * 0.5
        dx, dy = step, 0.0
        steps_taken = 0
        steps_limit = 1
        turns = 0
        for p in primes:
            size = max(1.0, step * 0.8 * (math.log(p + 1) / log_largest) * options.scale)
            _draw_prime(group, options, palette, rng, x, y, size, p)
            count += 1

            x += dx
            y += dy
            steps_taken += 1
            if steps_taken >= steps_limit:
                steps_taken = 0
                dx, dy = -dy, dx
                turns += 1
                if turns >= 2:
                    turns = 0
                    steps_limit += 1

    return GenerationReport(
        element_count=count,
        metrics={"primeCount": len(primes), "largestPrime": largest, "layout": layout},
    )
