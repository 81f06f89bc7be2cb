"""Mandelbrot escape-time カーネルとパターン生成をテストする。"""

from __future__ import annotations

import numpy as np

from jenvek.core.compositor import generate
from jenvek.core.fill import NO_FILL
from jenvek.core.options import GenerationOptions
from jenvek.core.patterns.mandelbrot import (
    X_MAX,
    X_MIN,
    Y_MAX,
    Y_MIN,
    escape_time,
    escape_time_grid,
    mandelbrot_max_iterations,
    mandelbrot_resolution,
)

PALETTE = ("#000000", "#444444", "#888888", "#CCCCCC")


def test_max_iterations_and_resolution_formulas() -> None:
    assert mandelbrot_max_iterations(5.0) == 115
    assert mandelbrot_resolution(5.0) == 35
    assert mandelbrot_resolution(1.0) == 10
    assert mandelbrot_resolution(50.0) == 100


def test_boundary_point_never_escapes() -> None:
    max_iter = mandelbrot_max_iterations(5.0)
    assert escape_time(0.25, 0.0, max_iter) == max_iter
    assert escape_time(0.0, 0.0, max_iter) == max_iter


def test_far_point_escapes_within_two_steps() -> None:
    assert escape_time(1.0, 1.0, 115) <= 2
    assert escape_time(3.0, 0.0, 115) == 1


def test_grid_matches_scalar_kernel() -> None:
    res = 12
    grid = escape_time_grid(res, 50, X_MIN, X_MAX, Y_MIN, Y_MAX)
    assert grid.shape == (res, res)
    row, col = 5, 7
    cr = X_MIN + (X_MAX - X_MIN) * (col / res)
    ci = Y_MIN + (Y_MAX - Y_MIN) * (row / res)
    assert int(grid[row, col]) == escape_time(cr, ci, 50)
    assert np.all(grid >= 1)
    assert np.all(grid <= 50)


def test_pattern_draws_only_escaping_points_with_palette_colors() -> None:
    report = generate(GenerationOptions(pattern="mandelbrot", density=100), PALETTE, seed=1)
    assert report.ok
    metrics = report.per_layer[0].metrics
    assert metrics["resolution"] == 35
    assert metrics["maxIterations"] == 115
    scene = report.scene
    assert scene is not None
    assert report.total_elements == scene.element_count > 0
    assert {p.style.fill for _, p in scene.iter_elements()} <= set(PALETTE)


def test_pattern_respects_fill_none() -> None:
    report = generate(GenerationOptions(pattern="mandelbrot", density=100, fill_mode="none"), PALETTE, seed=1)
    assert report.scene is not None
    assert {p.style.fill for _, p in report.scene.iter_elements()} == {NO_FILL}
