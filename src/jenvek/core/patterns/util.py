"""
どこで: `src/jenvek/core/patterns/util.py`。パターン生成器の共有補助。
何を: options 由来の塗り解決と Style 構築、値のクランプを提供する。
なぜ: 各生成器で線色/線幅/不透明度の扱いを揃えるため。
"""

from __future__ import annotations

from typing import Sequence

from jenvek.core.fill import NO_FILL, resolve_fill
from jenvek.core.options import GenerationOptions
from jenvek.core.random_source import RandomSource
from jenvek.core.scene import SceneGroup
from jenvek.core.primitives import Style


def next_fill(
    group: SceneGroup,
    options: GenerationOptions,
    palette: Sequence[str],
    rng: RandomSource,
) -> str:
    """options.fill_mode に従って塗り参照を 1 つ解決する（定義は group の registry へ登録）。"""

    return resolve_fill(palette, options.fill_mode, rng=rng, registry=group.definitions)


def shape_style(
    options: GenerationOptions,
    fill: str,
    *,
    stroke: str | None = None,
    stroke_width: float | None = None,
    opacity: float | None = None,
) -> Style:
    """options の線色/線幅/不透明度を既定にした Style を返す。"""

    return Style(
        fill=fill,
        stroke=options.stroke_color if stroke is None else stroke,
        stroke_width=float(options.stroke_weight if stroke_width is None else stroke_width),
        opacity=float(options.opacity if opacity is None else opacity),
    )


def stroke_style(stroke: str, stroke_width: float, opacity: float) -> Style:
    """塗りなしの線用 Style を返す。"""

    return Style(fill=NO_FILL, stroke=stroke, stroke_width=float(stroke_width), opacity=float(opacity))


def clamp(value: float, lo: float, hi: float) -> float:
    return lo if value < lo else hi if value > hi else value
