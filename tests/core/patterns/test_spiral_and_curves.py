"""黄金角スパイラルと曲線系（trig/bezier/lissajous）の生成をテストする。"""

from __future__ import annotations

import math

import numpy as np
import pytest

from jenvek.core.compositor import generate
from jenvek.core.options import GenerationOptions
from jenvek.core.patterns.curves import sample_lissajous, sample_wave
from jenvek.core.patterns.spiral import GOLDEN_ANGLE, PHI, golden_spiral_points
from jenvek.core.primitives import Path

PALETTE = ("#FF0000", "#00FF00", "#0000FF")


def test_golden_constants() -> None:
    assert PHI == pytest.approx(1.6180339887)
    assert GOLDEN_ANGLE == pytest.approx(2.39996323, abs=1e-7)


def test_golden_spiral_points_radius_and_angle() -> None:
    pts = golden_spiral_points(100, 50.0)
    assert pts.shape == (100, 2)
    np.testing.assert_allclose(pts[0], [0.0, 0.0])
    r = np.hypot(pts[:, 0], pts[:, 1])
    assert np.all(np.diff(r) > 0)
    assert r[-1] < 50.0
    assert golden_spiral_points(0, 10.0).shape == (0, 2)


def test_fibonacci_metrics_and_spiral_path() -> None:
    opts = GenerationOptions(pattern="fibonacci", complexity=6, density=60)
    report = generate(opts, PALETTE, seed=3)
    metrics = report.per_layer[0].metrics
    assert metrics["numElements"] == 180
    assert metrics["goldenRatio"] == pytest.approx(PHI)
    assert report.total_elements == 181
    assert report.scene is not None
    paths = [p for _, p in report.scene.iter_elements() if isinstance(p, Path)]
    assert len(paths) == 1
    assert paths[0].style.opacity == pytest.approx(0.4 * opts.opacity)


def test_sample_wave_clamps_into_viewport() -> None:
    xy = sample_wave("tan", points=50, width=200, height=100, amplitude=80, frequency=3, phase=0.0, y_offset=50)
    assert xy.shape == (51, 2)
    assert xy[0, 0] == 0.0
    assert xy[-1, 0] == pytest.approx(200.0)
    assert np.all((xy[:, 1] >= 0.0) & (xy[:, 1] <= 100.0))
    with pytest.raises(ValueError):
        sample_wave("sec", points=5, width=1, height=1, amplitude=1, frequency=1, phase=0, y_offset=0)


def test_sample_lissajous_closes_after_full_period() -> None:
    xy = sample_lissajous(3, 2, math.pi / 2, steps=100, repetition=1, center=(10.0, 20.0), radius=(5.0, 4.0))
    assert xy.shape == (101, 2)
    np.testing.assert_allclose(xy[0], xy[-1], atol=1e-9)
    assert np.all(np.abs(xy[:, 0] - 10.0) <= 5.0 + 1e-9)


def test_trig_and_lissajous_counts() -> None:
    trig = generate(GenerationOptions(pattern="trig", complexity=4, repetition=2, density=20), PALETTE, seed=1)
    assert trig.total_elements == 8
    assert trig.per_layer[0].metrics["pointsPerWave"] == 30

    liss = generate(GenerationOptions(pattern="lissajous", complexity=4, repetition=1, density=10), PALETTE, seed=1)
    assert liss.total_elements == 3
    assert liss.per_layer[0].metrics["stepsPerCurve"] == 60


@pytest.mark.parametrize("kind", ["trig", "bezier", "lissajous"])
def test_curve_paths_are_unfilled_strokes(kind: str) -> None:
    report = generate(GenerationOptions(pattern=kind, complexity=3, stroke_weight=2.0, opacity=0.5), PALETTE, seed=4)
    scene = report.scene
    assert scene is not None
    paths = [p for _, p in scene.iter_elements() if isinstance(p, Path)]
    assert paths
    for p in paths:
        assert p.style.fill == "none"
        assert p.style.stroke in PALETTE
        assert p.style.stroke_width > 0


def test_bezier_captured_coordinates_override_endpoints() -> None:
    opts = GenerationOptions(
        pattern="bezier",
        complexity=4,
        density=50,
        captured_x=12.0,
        captured_y=34.0,
        captured_vector=(100.0, 200.0),
    )
    report = generate(opts, PALETTE, seed=8)
    assert report.per_layer[0].metrics["curves"] == 10
    assert report.scene is not None
    for _, p in report.scene.iter_elements():
        assert isinstance(p, Path)
        (m, start), (c, args) = p.commands
        assert (m, c) == ("M", "C")
        assert start == (12.0, 34.0)
        assert args[-2:] == (100.0, 200.0)


def test_bezier_random_stream_is_independent_of_captures() -> None:
    plain = generate(GenerationOptions(pattern="bezier"), PALETTE, seed=8)
    captured = generate(GenerationOptions(pattern="bezier", captured_x=1.0), PALETTE, seed=8)
    assert plain.scene is not None and captured.scene is not None
    a = [p for _, p in plain.scene.iter_elements()]
    b = [p for _, p in captured.scene.iter_elements()]
    assert [p.style for p in a] == [p.style for p in b]
    assert [p.commands[1] for p in a] == [p.commands[1] for p in b]
