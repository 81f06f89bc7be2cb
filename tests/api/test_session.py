"""Session（生成・キャプチャ・アニメーション順序・保存）をテストする。"""

from __future__ import annotations

import json
from pathlib import Path

import pyglet
import pytest

from jenvek.api import Session
from jenvek.core.options import GenerationOptions, PatternKind
from jenvek.core.runtime_config import set_config_path

PALETTE = ("#FF0000", "#00FF00", "#0000FF")


class _FixedSeedClock:
    def now_ms(self) -> float:
        return 123456.0

    def time_of_day(self) -> float:
        return 0.25


@pytest.fixture(autouse=True)
def _isolate(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    set_config_path(None)
    yield
    set_config_path(None)


def _clock() -> pyglet.clock.Clock:
    return pyglet.clock.Clock(time_function=lambda: 0.0)


def test_generate_reuses_scene_and_counts_successes() -> None:
    session = Session(GenerationOptions(pattern="grid"), palette=PALETTE)
    first = session.generate(seed=1)
    scene = session.scene
    assert first.ok
    assert session.generation_count == 1
    assert session.last_palette == PALETTE

    session.update(pattern="lissajous")
    second = session.generate(seed=2)
    assert session.scene is scene
    assert second.pattern == "lissajous"
    assert session.generation_count == 2
    assert session.last_report is second


def test_update_sanitizes_options() -> None:
    session = Session(palette=PALETTE)
    opts = session.update(density=1000, layer_count=0)
    assert opts.density == 100.0
    assert opts.layer_count == 1


def test_update_accepts_pattern_kind_member() -> None:
    session = Session(palette=PALETTE)
    session.update(pattern=PatternKind.MANDELBROT)
    assert session.options.pattern == "mandelbrot"
    assert session.generate(seed=1).pattern == "mandelbrot"


def test_default_options_use_configured_viewport(tmp_path: Path) -> None:
    cfg_dir = tmp_path / ".jenvek"
    cfg_dir.mkdir()
    (cfg_dir / "config.yaml").write_text("generation:\n  viewport: [400, 300]\n", encoding="utf-8")

    session = Session(palette=PALETTE)
    assert session.options.viewport == (400, 300)
    assert session.generate(seed=1).viewport == (400, 300)

    explicit = Session(GenerationOptions(width=640, height=480), palette=PALETTE)
    assert explicit.generate(seed=1).viewport == (640, 480)


def test_capture_copies_pointer_into_options() -> None:
    session = Session(palette=PALETTE)
    assert session.capture_x() is None

    session.set_pointer(40, 60)
    assert session.capture_x() == 40.0
    assert session.capture_y() == 60.0
    assert session.capture_vector() == (40.0, 60.0)
    opts = session.options
    assert (opts.captured_x, opts.captured_y, opts.captured_vector) == (40.0, 60.0, (40.0, 60.0))
    assert opts.pointer == (40.0, 60.0)


def test_cursor_seed_is_reproducible_with_fixed_clock() -> None:
    opts = GenerationOptions(pattern="random", use_cursor_seed=True)
    a = Session(opts, palette=PALETTE, seed_clock=_FixedSeedClock())
    b = Session(opts, palette=PALETTE, seed_clock=_FixedSeedClock())
    for s in (a, b):
        s.set_pointer(10, 20)
    a.generate()
    b.generate()
    assert a.scene is not None and b.scene is not None
    assert list(a.scene.iter_elements()) == list(b.scene.iter_elements())


def test_palette_resolution_from_category() -> None:
    session = Session(category="cool", catalog={"cool": ("#000080",)})
    assert session.resolve_palette() == ("#000080",)
    session.category = "missing"
    assert len(session.resolve_palette()) == 6


def test_generate_stops_and_restarts_animation() -> None:
    session = Session(
        GenerationOptions(pattern="random", animation=True, animation_kind="opacity"),
        palette=PALETTE,
        animation_clock=_clock(),
    )
    session.generate(seed=1)
    assert session.is_animating
    driver = session._driver
    assert driver is not None

    session.generate(seed=2)
    assert session.is_animating
    assert session._driver is not driver
    assert not driver.is_running

    session.stop_animation()
    assert not session.is_animating
    assert session.scene is not None
    assert session.scene.frame == {}


def test_start_animation_without_scene_is_noop() -> None:
    session = Session(palette=PALETTE, animation_clock=_clock())
    session.start_animation()
    assert not session.is_animating


def test_save_svg_requires_generation(tmp_path: Path) -> None:
    session = Session(palette=PALETTE)
    with pytest.raises(RuntimeError):
        session.save_svg(tmp_path / "x.svg")


def test_save_svg_and_json(tmp_path: Path) -> None:
    session = Session(GenerationOptions(pattern="fibonacci"), palette=PALETTE)
    session.generate(seed=3)

    svg = session.save_svg(tmp_path / "out.svg")
    assert svg.read_text(encoding="utf-8").startswith("<?xml")

    meta = session.save_json(tmp_path / "out.json")
    data = json.loads(meta.read_text(encoding="utf-8"))
    assert data["generationCount"] == 1
    assert data["optionsUsed"]["pattern"] == "fibonacci"


def test_default_save_paths_use_output_dir(tmp_path: Path) -> None:
    session = Session(GenerationOptions(pattern="trig"), palette=PALETTE)
    session.generate(seed=4)

    svg = session.save_svg()
    meta = session.save_json()
    assert svg.parent == tmp_path / "jenvek_output"
    assert svg.name.startswith("jenVek-svg-") and svg.suffix == ".svg"
    assert meta.name.startswith("jenVek-data-") and meta.suffix == ".json"
    assert svg.is_file() and meta.is_file()
