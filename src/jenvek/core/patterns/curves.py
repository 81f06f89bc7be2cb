"""
どこで: `src/jenvek/core/patterns/curves.py`。曲線系パターン（三角関数波・3 次 Bezier 束・Lissajous 束）。
何を: 乱数で決めたパラメータから曲線をサンプルし、1 本ごとに 1 つの path として描く。
なぜ: 点列サンプルを numpy でまとめて計算し、曲線系の 3 生成器で path 構築を共有するため。
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from jenvek.core.options import GenerationOptions, PatternKind
from jenvek.core.pattern_registry import pattern
from jenvek.core.patterns.util import stroke_style
from jenvek.core.primitives import Path
from jenvek.core.random_source import RandomSource
from jenvek.core.recursion import RecursionGovernor
from jenvek.core.report import GenerationReport
from jenvek.core.scene import SceneGroup

TRIG_FUNCTIONS = ("sin", "cos", "tan")
TAN_CLAMP = 5.0
LISSAJOUS_DELTA_DIVISORS = (1, 2, 3, 4, 6, 8)


def sample_wave(
    func: str,
    *,
    points: int,
    width: float,
    height: float,
    amplitude: float,
    frequency: float,
    phase: float,
    y_offset: float,
) -> np.ndarray:
    """1 本の波を j = 0..points で (points+1, 2) にサンプルする。

    Notes
    -----
    sin/cos は引数 `j/points*2π*freq + phase`。tan は `j/points*π*freq + phase` を
    [-5, 5] にクランプし、振幅を 0.2 倍する。y はビューポート内にクランプする。
    """

    t = np.arange(points + 1, dtype=np.float64) / float(points)
    x = t * float(width)
    if func == "sin":
        y = y_offset + np.sin(t * math.tau * frequency + phase) * amplitude
    elif func == "cos":
        y = y_offset + np.cos(t * math.tau * frequency + phase) * amplitude
    elif func == "tan":
        v = np.clip(np.tan(t * math.pi * frequency + phase), -TAN_CLAMP, TAN_CLAMP)
        y = y_offset + v * amplitude * 0.2
    else:
        raise ValueError(f"未知の波形関数: {func!r}")
    y = np.clip(y, 0.0, float(height))
    return np.stack([x, y], axis=1)


def sample_lissajous(
    a: int,
    b: int,
    delta: float,
    *,
    steps: int,
    repetition: int,
    center: tuple[float, float],
    radius: tuple[float, float],
) -> np.ndarray:
    """Lissajous 曲線 `(cx + rx*sin(a t + δ), cy + ry*sin(b t))` を (steps+1, 2) でサンプルする。"""

    t = np.arange(steps + 1, dtype=np.float64) / float(steps) * math.tau * float(repetition)
    x = center[0] + radius[0] * np.sin(a * t + delta)
    y = center[1] + radius[1] * np.sin(b * t)
    return np.stack([x, y], axis=1)


@pattern(PatternKind.TRIG)
def trig(
    group: SceneGroup,
    options: GenerationOptions,
    palette: Sequence[str],
    *,
    rng: RandomSource,
    governor: RecursionGovernor,
) -> GenerationReport:
    """三角関数波を `floor(complexity*repetition)` 本生成する。"""

    width, height = options.viewport
    n_waves = int(math.floor(options.complexity * options.repetition))
    points = int(math.floor(options.density)) + 10
    count = 0

    for _ in range(n_waves):
        amplitude = rng.uniform(height * 0.05, height * 0.4) * options.scale
        frequency = rng.uniform(0.5, options.complexity / 2.0)
        phase = rng.uniform(0.0, math.tau)
        y_offset = rng.uniform(amplitude, height - amplitude)
        func = rng.choice(TRIG_FUNCTIONS)

        xy = sample_wave(
            func,
            points=points,
            width=width,
            height=height,
            amplitude=amplitude,
            frequency=frequency,
            phase=phase,
            y_offset=y_offset,
        )
        style = stroke_style(
            rng.choice(palette),
            max(0.5, options.stroke_weight * rng.uniform(0.5, 1.5)),
            options.opacity * rng.uniform(0.7, 1.0),
        )
        group.add(Path.polyline(xy.tolist(), style))
        count += 1

    return GenerationReport(
        element_count=count,
        metrics={"waves": n_waves, "pointsPerWave": points, "funcType": "mixed"},
    )


@pattern(PatternKind.BEZIER)
def bezier(
    group: SceneGroup,
    options: GenerationOptions,
    palette: Sequence[str],
    *,
    rng: RandomSource,
    governor: RecursionGovernor,
) -> GenerationReport:
    """3 次 Bezier 曲線を `floor(complexity*density/100*5*repetition)` 本生成する。

    Notes
    -----
    乱数は 1 本ごとに始点・終点・制御点 2 つの順で必ず消費する。
    captured_x / captured_y は始点の各成分を、captured_vector は終点を上書きする。
    """

    width, height = options.viewport
    n_curves = int(math.floor(options.complexity * (options.density / 100.0) * 5.0 * options.repetition))
    count = 0

    for _ in range(n_curves):
        x1 = rng.uniform(0.0, width)
        y1 = rng.uniform(0.0, height)
        x2 = rng.uniform(0.0, width)
        y2 = rng.uniform(0.0, height)
        cx1 = rng.uniform(0.0, width)
        cy1 = rng.uniform(0.0, height)
        cx2 = rng.uniform(0.0, width)
        cy2 = rng.uniform(0.0, height)

        start_x = options.captured_x if options.captured_x is not None else x1
        start_y = options.captured_y if options.captured_y is not None else y1
        if options.captured_vector is not None:
            x2, y2 = options.captured_vector

        style = stroke_style(
            rng.choice(palette),
            max(0.5, options.stroke_weight * rng.uniform(0.5, 2.0)),
            options.opacity * rng.uniform(0.5, 1.0),
        )
        group.add(
            Path(
                commands=(
                    ("M", (float(start_x), float(start_y))),
                    ("C", (cx1, cy1, cx2, cy2, float(x2), float(y2))),
                ),
                style=style,
            )
        )
        count += 1

    return GenerationReport(
        element_count=count,
        metrics={"curves": n_curves, "type": "Cubic Bezier"},
    )


@pattern(PatternKind.LISSAJOUS)
def lissajous(
    group: SceneGroup,
    options: GenerationOptions,
    palette: Sequence[str],
    *,
    rng: RandomSource,
    governor: RecursionGovernor,
) -> GenerationReport:
    """Lissajous 曲線を `floor(complexity*0.5*repetition) + 1` 本生成する。"""

    width, height = options.viewport
    n_curves = int(math.floor(options.complexity * 0.5 * options.repetition)) + 1
    steps = int(math.floor(options.density)) + 50
    center = (width / 2.0, height / 2.0)
    radius = (width * 0.4 * options.scale, height * 0.4 * options.scale)
    freq_hi = options.complexity / 2.0 + 1.0
    count = 0

    for _ in range(n_curves):
        a = rng.randint(1, freq_hi)
        b = rng.randint(1, freq_hi)
        delta = math.pi / rng.choice(LISSAJOUS_DELTA_DIVISORS)

        xy = sample_lissajous(
            a,
            b,
            delta,
            steps=steps,
            repetition=int(options.repetition),
            center=center,
            radius=radius,
        )
        style = stroke_style(
            rng.choice(palette),
            max(0.5, options.stroke_weight * rng.uniform(0.8, 1.2)),
            options.opacity * rng.uniform(0.7, 1.0),
        )
        group.add(Path.polyline(xy.tolist(), style))
        count += 1

    return GenerationReport(
        element_count=count,
        metrics={"curves": n_curves, "stepsPerCurve": steps},
    )
