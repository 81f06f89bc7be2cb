from __future__ import annotations

from jenvek.core.compositor import generate
from jenvek.core.options import GenerationOptions
from jenvek.core.patterns.grid import cells_per_side
from jenvek.core.primitives import Line

PALETTE = ("#FF0000", "#00FF00", "#0000FF")


def test_cells_per_side_literal_case() -> None:
    opts = GenerationOptions(complexity=3, repetition=2).sanitized()
    assert cells_per_side(opts) == 6


def test_cells_per_side_minimum() -> None:
    assert cells_per_side(GenerationOptions(complexity=1, repetition=1).sanitized()) == 2


def test_grid_metrics_and_no_guides_for_low_complexity() -> None:
    report = generate(GenerationOptions(pattern="grid", complexity=3, repetition=2, density=100), PALETTE, seed=4)
    metrics = report.per_layer[0].metrics
    assert metrics["gridSize"] == "6x6"
    assert metrics["cellCount"] == 36
    assert report.scene is not None
    # density=100 ならスキップされるセルはない
    assert report.total_elements >= 36


def test_grid_guides_for_high_complexity() -> None:
    opts = GenerationOptions(pattern="grid", complexity=5, repetition=1, density=1)
    report = generate(opts, PALETTE, seed=4)
    scene = report.scene
    assert scene is not None
    n = 8
    assert report.per_layer[0].metrics["gridSize"] == f"{n}x{n}"
    # density 1 以下では罫線を引かない
    assert not any(isinstance(p, Line) and p.x1 == 0.0 and p.x2 == 800.0 for _, p in scene.iter_elements())

    opts = GenerationOptions(pattern="grid", complexity=5, repetition=1, density=40)
    scene = generate(opts, PALETTE, seed=4).scene
    assert scene is not None
    horizontal = [p for _, p in scene.iter_elements() if isinstance(p, Line) and p.x1 == 0.0 and p.x2 == 800.0]
    assert len(horizontal) == n + 1
