"""
どこで: `src/jenvek/core/compositor.py`。Layer Compositor（生成の単一エントリポイント）。
何を: 選択されたパターン生成器をレイヤー数だけ実行し、レイヤーごとにパラメータを減衰させて統計を集約する。
なぜ: 乱数源・定義レジストリ・再帰ガバナの寿命を 1 回の生成呼び出しに閉じ込めるため。
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Sequence

from jenvek.core.options import GenerationOptions, PatternKind
from jenvek.core.palette import SAFETY_PALETTE
from jenvek.core.pattern_registry import PatternFunc, pattern_registry
from jenvek.core.random_source import RandomSource, SeedClock, create_random_source
from jenvek.core.recursion import RecursionGovernor
from jenvek.core.report import GenerationReport, SceneReport
from jenvek.core.scene import Scene

# パターン実装モジュールをインポートしてレジストリに登録させる。
from jenvek.core.patterns import curves as _pattern_curves  # noqa: F401
from jenvek.core.patterns import fractal as _pattern_fractal  # noqa: F401
from jenvek.core.patterns import grid as _pattern_grid  # noqa: F401
from jenvek.core.patterns import mandelbrot as _pattern_mandelbrot  # noqa: F401
from jenvek.core.patterns import prime as _pattern_prime  # noqa: F401
from jenvek.core.patterns import quadtree as _pattern_quadtree  # noqa: F401
from jenvek.core.patterns import scatter as _pattern_scatter  # noqa: F401
from jenvek.core.patterns import spiral as _pattern_spiral  # noqa: F401

_logger = logging.getLogger(__name__)


def layer_options(options: GenerationOptions, layer: int) -> GenerationOptions:
    """レイヤー番号に応じて減衰させた options を返す。

    Notes
    -----
    layer 0 は入力をそのまま返す。layer >= 1 では:
    - complexity = max(1, c - 1.5*layer)
    - density = max(1, d - 15*layer)
    - stroke_weight = sw * max(0.1, 1 - 0.25*layer)
    - opacity = op * max(0.1, 1 - 0.2*layer)
    - scale = s * max(0.1, 1 - 0.15*layer)
    いずれも正の下限を持ち、stroke_weight は layer に対して狭義単調減少（下限到達まで）。
    """

    if layer <= 0:
        return options
    return replace(
        options,
        complexity=max(1.0, options.complexity - layer * 1.5),
        density=max(1.0, options.density - layer * 15.0),
        stroke_weight=options.stroke_weight * max(0.1, 1.0 - layer * 0.25),
        opacity=options.opacity * max(0.1, 1.0 - layer * 0.2),
        scale=options.scale * max(0.1, 1.0 - layer * 0.15),
    )


def resolve_pattern(name: str) -> tuple[PatternKind, PatternFunc]:
    """パターン名から (種類, 生成器) を返す。未知の名前は random にフォールバックする。"""

    kind = PatternKind.parse(name)
    if kind is None or kind not in pattern_registry:
        _logger.warning("未知の pattern のため random にフォールバックします: %r", name)
        kind = PatternKind.RANDOM
    return kind, pattern_registry.get(kind)


def generate(
    options: GenerationOptions,
    palette: Sequence[str],
    *,
    scene: Scene | None = None,
    rng: RandomSource | None = None,
    seed: float | None = None,
    clock: SeedClock | None = None,
) -> SceneReport:
    """1 回分のシーン生成を行い、集約統計を返す。

    Parameters
    ----------
    options : GenerationOptions
        生成パラメータ（内部で sanitized() を通す）。
    palette : Sequence[str]
        色リスト。空ならセーフティパレットを使う。
    scene : Scene | None
        描き込み先。指定時は reset() してから再利用する。None なら新規作成。
    rng : RandomSource | None
        乱数源。None なら options/seed/clock から 1 つ作る。
    seed : float | None
        明示 seed（seeded mode を強制）。
    clock : SeedClock | None
        seed 合成用の時計。

    Returns
    -------
    SceneReport
        集約統計。`scene` に描き込み済みの Scene を保持する。

    Notes
    -----
    生成器内の例外はここで捕捉し、`SceneReport.error` と `Scene.error` に記録する。
    それまでに描いた要素と完了レイヤーの統計は残す。
    """

    opts = options.sanitized()
    colors = tuple(palette) or SAFETY_PALETTE

    if scene is None:
        scene = Scene(opts.width, opts.height, opts.background_color)
    else:
        scene.reset(width=opts.width, height=opts.height, background_color=opts.background_color)

    source = rng if rng is not None else create_random_source(opts, seed=seed, clock=clock)
    kind, func = resolve_pattern(opts.pattern)

    per_layer: dict[int, GenerationReport] = {}
    total = 0
    error: str | None = None
    try:
        for layer in range(int(opts.layer_count)):
            group = scene.add_group()
            governor = RecursionGovernor()
            result = func(group, layer_options(opts, layer), colors, rng=source, governor=governor)
            per_layer[layer] = result
            total += int(result.element_count)
    except Exception as exc:
        _logger.exception("パターン生成に失敗しました: pattern=%s", kind.value)
        error = str(exc) or type(exc).__name__
        scene.error = error

    _logger.debug(
        "生成完了: pattern=%s layers=%d total=%d error=%s",
        kind.value,
        opts.layer_count,
        total,
        error,
    )
    return SceneReport(
        pattern=kind.value,
        layers=int(opts.layer_count),
        viewport=opts.viewport,
        total_elements=total,
        per_layer=per_layer,
        error=error,
        scene=scene,
    )


__all__ = ["generate", "layer_options", "resolve_pattern"]
