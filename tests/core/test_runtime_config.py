from pathlib import Path

import pytest

from jenvek.core.runtime_config import output_root_dir, runtime_config, set_config_path


@pytest.fixture(autouse=True)
def _reset_runtime_config() -> None:
    set_config_path(None)
    yield
    set_config_path(None)


def _isolate_config_discovery(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))


def test_packaged_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    cfg = runtime_config()
    assert cfg.config_path is None
    assert cfg.output_dir == tmp_path / "jenvek_output"
    assert output_root_dir() == tmp_path / "jenvek_output"
    assert cfg.palette_file is None
    assert cfg.viewport == (800, 600)
    assert cfg.animation_fps == 60.0
    assert cfg.animation_cycle_seconds == 5.0
    assert cfg.float_decimals == 3


def test_discovered_config_overrides_packaged_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    discovered = tmp_path / ".jenvek" / "config.yaml"
    discovered.parent.mkdir(parents=True, exist_ok=True)
    discovered.write_text(
        'paths:\n  output_dir: "./out_discovered"\nanimation:\n  fps: 30\n',
        encoding="utf-8",
    )

    cfg = runtime_config()
    assert cfg.config_path == discovered
    assert cfg.output_dir == Path("out_discovered")
    assert cfg.animation_fps == 30.0
    # 部分指定は同梱デフォルトとマージされる
    assert cfg.animation_cycle_seconds == 5.0
    assert cfg.viewport == (800, 600)


def test_home_config_is_discovered(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    home_cfg = tmp_path / ".config" / "jenvek" / "config.yaml"
    home_cfg.parent.mkdir(parents=True, exist_ok=True)
    home_cfg.write_text("export:\n  float_decimals: 5\n", encoding="utf-8")

    cfg = runtime_config()
    assert cfg.config_path == home_cfg
    assert cfg.float_decimals == 5


def test_explicit_config_overrides_discovered_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    discovered = tmp_path / ".jenvek" / "config.yaml"
    discovered.parent.mkdir(parents=True, exist_ok=True)
    discovered.write_text('paths:\n  output_dir: "./out_discovered"\n', encoding="utf-8")

    explicit = tmp_path / "explicit.yaml"
    explicit.write_text(
        'paths:\n  output_dir: "./out_explicit"\ngeneration:\n  viewport: [400, 300]\n',
        encoding="utf-8",
    )
    set_config_path(explicit)

    cfg = runtime_config()
    assert cfg.config_path == explicit
    assert cfg.output_dir == Path("out_explicit")
    assert cfg.viewport == (400, 300)


def test_runtime_config_is_cached_until_path_changes(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    first = runtime_config()
    assert runtime_config() is first

    explicit = tmp_path / "explicit.yaml"
    explicit.write_text("animation:\n  cycle_seconds: 2.5\n", encoding="utf-8")
    set_config_path(explicit)
    assert runtime_config().animation_cycle_seconds == 2.5


def test_missing_explicit_config_raises(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    set_config_path(tmp_path / "missing.yaml")
    with pytest.raises(FileNotFoundError):
        runtime_config()


@pytest.mark.parametrize(
    "text, exc",
    [
        ("version: 2\n", RuntimeError),
        ("- just\n- a list\n", RuntimeError),
        ("generation:\n  viewport: [1, 2, 3]\n", RuntimeError),
        ("animation:\n  fps: fast\n", RuntimeError),
        ("animation:\n  fps: 0\n", ValueError),
        ("animation:\n  cycle_seconds: -1\n", ValueError),
        ("generation:\n  viewport: [0, 10]\n", ValueError),
        ("export:\n  float_decimals: -1\n", ValueError),
    ],
)
def test_invalid_config_values_raise(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    text: str,
    exc: type[Exception],
):
    _isolate_config_discovery(tmp_path, monkeypatch)

    explicit = tmp_path / "bad.yaml"
    explicit.write_text(text, encoding="utf-8")
    set_config_path(explicit)
    with pytest.raises(exc):
        runtime_config()
