# どこで: `src/jenvek/api/session.py`。
# 何を: UI 側の状態（options・パレット選択・カーソル/キャプチャ座標・最後の結果）を保持する Session を提供する。
# なぜ: 生成・アニメーション・保存の順序（生成前に必ずアニメーションを止める等）を 1 か所で守るため。

from __future__ import annotations

import logging
import time
from dataclasses import replace
from pathlib import Path
from typing import TYPE_CHECKING, Any, Sequence

from jenvek.core.compositor import generate as _generate
from jenvek.core.options import GenerationOptions, default_options
from jenvek.core.palette import PaletteCatalog, resolve_palette
from jenvek.core.random_source import SeedClock
from jenvek.core.report import SceneReport
from jenvek.core.runtime_config import output_root_dir, runtime_config
from jenvek.core.scene import Scene
from jenvek.export.metadata import export_metadata
from jenvek.export.svg import export_svg

if TYPE_CHECKING:
    from jenvek.interactive.animation_driver import AnimationDriver

_logger = logging.getLogger(__name__)


class Session:
    """1 ユーザー分の生成セッション。

    Notes
    -----
    - `generate()` は実行中のアニメーションを止めてから生成し、
      `options.animation` が True なら生成後に再開する。
    - Scene は 1 つを使い回す（生成ごとに全消去される）。
    - options 未指定なら config の `generation.viewport` を寸法に使う。
    """

    def __init__(
        self,
        options: GenerationOptions | None = None,
        *,
        palette: Sequence[str] | None = None,
        category: str = "warm",
        selector: str | None = None,
        catalog: PaletteCatalog | None = None,
        seed_clock: SeedClock | None = None,
        animation_clock: Any | None = None,
    ) -> None:
        self._options = (options if options is not None else default_options()).sanitized()
        self._fixed_palette = tuple(palette) if palette is not None else None
        self.category = str(category)
        self.selector = selector
        self._catalog = catalog
        self._seed_clock = seed_clock
        self._animation_clock = animation_clock
        self._pointer: tuple[float, float] | None = None
        self._scene: Scene | None = None
        self._driver: AnimationDriver | None = None
        self._last_report: SceneReport | None = None
        self._last_options: GenerationOptions | None = None
        self._last_palette: tuple[str, ...] = ()
        self._generation_count = 0

    # --- 状態 ---------------------------------------------------------------

    @property
    def options(self) -> GenerationOptions:
        return self._options

    def update(self, **changes: Any) -> GenerationOptions:
        """options の一部を差し替えて返す（sanitized 済み）。"""

        self._options = replace(self._options, **changes).sanitized()
        return self._options

    @property
    def scene(self) -> Scene | None:
        return self._scene

    @property
    def last_report(self) -> SceneReport | None:
        return self._last_report

    @property
    def last_palette(self) -> tuple[str, ...]:
        return self._last_palette

    @property
    def generation_count(self) -> int:
        return self._generation_count

    @property
    def is_animating(self) -> bool:
        return self._driver is not None and self._driver.is_running

    # --- カーソル/キャプチャ ---------------------------------------------------

    def set_pointer(self, x: float, y: float) -> None:
        """現在のカーソル位置を記録する（seed とキャプチャに使う）。"""

        self._pointer = (float(x), float(y))
        self._options = replace(self._options, pointer=self._pointer)

    def capture_x(self) -> float | None:
        """現在のカーソル x を captured_x として保持する。"""

        value = self._pointer[0] if self._pointer is not None else None
        self._options = replace(self._options, captured_x=value)
        _logger.debug("captured_x=%s", value)
        return value

    def capture_y(self) -> float | None:
        """現在のカーソル y を captured_y として保持する。"""

        value = self._pointer[1] if self._pointer is not None else None
        self._options = replace(self._options, captured_y=value)
        _logger.debug("captured_y=%s", value)
        return value

    def capture_vector(self) -> tuple[float, float] | None:
        """現在のカーソル位置を captured_vector として保持する。"""

        value = self._pointer
        self._options = replace(self._options, captured_vector=value)
        _logger.debug("captured_vector=%s", value)
        return value

    # --- 生成 ---------------------------------------------------------------

    def resolve_palette(self) -> tuple[str, ...]:
        """現在のパレット選択から色リストを解決して返す。"""

        if self._fixed_palette is not None:
            return self._fixed_palette
        return resolve_palette(self.category, self.selector, catalog=self._catalog)

    def generate(self, *, seed: float | None = None) -> SceneReport:
        """アニメーションを止めてからシーンを生成する。

        Parameters
        ----------
        seed : float | None
            明示 seed（seeded mode を強制）。

        Returns
        -------
        SceneReport
            集約統計。失敗時は `error` が設定される。
        """

        self.stop_animation()

        options = self._options
        palette = self.resolve_palette()
        report = _generate(options, palette, scene=self._scene, seed=seed, clock=self._seed_clock)
        self._scene = report.scene
        self._last_report = report
        self._last_options = options
        self._last_palette = palette

        if report.error is None:
            self._generation_count += 1
            if options.animation:
                self.start_animation()
        return report

    # --- アニメーション -------------------------------------------------------

    def start_animation(self) -> None:
        """最後の Scene に対してアニメーションを開始する。"""

        if self._scene is None or self._last_options is None:
            return
        from jenvek.interactive.animation_driver import AnimationDriver

        self.stop_animation()
        kwargs: dict[str, Any] = {}
        if self._animation_clock is not None:
            kwargs["clock"] = self._animation_clock
        self._driver = AnimationDriver(
            self._scene,
            kind=self._last_options.animation_kind,
            complexity=self._last_options.complexity,
            **kwargs,
        )
        self._driver.start()

    def stop_animation(self) -> None:
        driver = self._driver
        if driver is not None:
            driver.stop()
        self._driver = None

    # --- 保存 ---------------------------------------------------------------

    def _default_path(self, prefix: str, suffix: str) -> Path:
        return output_root_dir() / f"{prefix}-{int(time.time() * 1000)}{suffix}"

    def save_svg(self, path: str | Path | None = None) -> Path:
        """最後の Scene を SVG として保存する。

        Raises
        ------
        RuntimeError
            まだ一度も生成していない場合。
        """

        if self._scene is None:
            raise RuntimeError("保存する Scene がありません（先に generate() を呼んでください）")
        out = Path(path) if path is not None else self._default_path("jenVek-svg", ".svg")
        return export_svg(self._scene, out, decimals=runtime_config().float_decimals)

    def save_json(self, path: str | Path | None = None) -> Path:
        """最後の生成結果のメタデータを JSON として保存する。"""

        out = Path(path) if path is not None else self._default_path("jenVek-data", ".json")
        return export_metadata(
            out,
            report=self._last_report,
            options=self._last_options if self._last_options is not None else self._options,
            generation_count=self._generation_count,
        )


__all__ = ["Session"]
