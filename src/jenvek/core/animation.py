# どこで: `src/jenvek/core/animation.py`。
# 何を: 基底属性と周期位相から、要素ごとの派生属性（半径/回転/不透明度/線幅）を計算する。
# なぜ: 要素を相対的に書き換え続けるとドリフトするため、毎 tick (基底, 位相) から再計算する。

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from jenvek.core.options import AnimationKind
from jenvek.core.primitives import Circle, Line, Primitive, Rotation

if TYPE_CHECKING:
    from jenvek.core.scene import Scene

DEFAULT_CYCLE_SECONDS = 5.0


@dataclass(frozen=True, slots=True)
class AnimatedAttributes:
    """1 要素の派生属性。None の属性は基底値のまま。"""

    r: float | None = None
    rotation: Rotation | None = None
    opacity: float | None = None
    stroke_width: float | None = None


def animation_phase(elapsed: float, cycle_seconds: float = DEFAULT_CYCLE_SECONDS) -> float:
    """経過秒から周期内の位相（0..1）を返す。"""

    cycle = float(cycle_seconds)
    if cycle <= 0:
        raise ValueError(f"cycle_seconds は正の値である必要がある: got={cycle_seconds}")
    return (float(elapsed) % cycle) / cycle


def animate_primitive(
    primitive: Primitive,
    kind: AnimationKind | str,
    phase: float,
    index: int,
    count: int,
    complexity: float,
) -> AnimatedAttributes | None:
    """基底要素と位相から派生属性を計算する。

    Parameters
    ----------
    primitive : Primitive
        基底要素（書き換えない）。
    kind : AnimationKind | str
        アニメーション種別。
    phase : float
        全体の位相（0..1）。
    index, count : int
        アニメーション対象内での通し番号と総数。位相を要素ごとにずらす。
    complexity : float
        pulse の振幅に使う。

    Returns
    -------
    AnimatedAttributes | None
        変化しない要素（line、pulse の非 circle）は None。
    """

    if isinstance(primitive, Line):
        return None

    k = AnimationKind(kind)
    n = max(1, int(count))
    individual = (float(phase) + (int(index) / n) * 0.5) % 1.0
    s = math.sin(individual * math.tau)
    style = primitive.style

    if k is AnimationKind.PULSE:
        if not isinstance(primitive, Circle):
            return None
        return AnimatedAttributes(r=max(1.0, primitive.r * (1.0 + s * 0.1 * float(complexity) / 10.0)))

    if k is AnimationKind.ROTATE:
        cx, cy = primitive.center()
        angle = float(phase) * 360.0 * (int(index) % 3 + 1)
        return AnimatedAttributes(rotation=Rotation(angle=angle, cx=cx, cy=cy))

    if k is AnimationKind.OPACITY:
        value = style.opacity * (0.7 + (s + 1.0) * 0.15)
        return AnimatedAttributes(opacity=min(1.0, max(0.1, value)))

    return AnimatedAttributes(stroke_width=max(0.1, style.stroke_width * (1.0 + s * 0.3)))


def apply_attributes(primitive: Primitive, attrs: AnimatedAttributes) -> Primitive:
    """派生属性を反映した新しい要素を返す（基底は不変）。"""

    out = primitive
    if attrs.r is not None and isinstance(out, Circle):
        out = replace(out, r=attrs.r)
    if attrs.rotation is not None:
        out = replace(out, rotation=attrs.rotation)
    if attrs.opacity is not None or attrs.stroke_width is not None:
        style = out.style
        if attrs.opacity is not None:
            style = replace(style, opacity=attrs.opacity)
        if attrs.stroke_width is not None:
            style = replace(style, stroke_width=attrs.stroke_width)
        out = replace(out, style=style)
    return out


def animate_scene(
    scene: "Scene",
    kind: AnimationKind | str,
    elapsed: float,
    *,
    complexity: float,
    cycle_seconds: float = DEFAULT_CYCLE_SECONDS,
) -> int:
    """Scene の全要素について派生属性を計算し `scene.frame` を置き換える。

    Returns
    -------
    int
        派生属性を持つ要素数。
    """

    phase = animation_phase(elapsed, cycle_seconds)
    targets = [(key, p) for key, p in scene.iter_elements() if not isinstance(p, Line)]
    count = len(targets)

    frame = {}
    for i, (key, primitive) in enumerate(targets):
        attrs = animate_primitive(primitive, kind, phase, i, count, complexity)
        if attrs is not None:
            frame[key] = attrs
    scene.frame = frame
    return len(frame)


def reset_scene(scene: "Scene") -> None:
    """派生属性を破棄し、基底属性の表示へ戻す。"""

    scene.frame = {}


__all__ = [
    "AnimatedAttributes",
    "DEFAULT_CYCLE_SECONDS",
    "animate_primitive",
    "animate_scene",
    "animation_phase",
    "apply_attributes",
    "reset_scene",
]
