# どこで: `src/jenvek/interactive/animation_driver.py`。
# 何を: pyglet の clock で一定周期の tick を回し、Scene の派生属性（アニメーション）を更新する。
# なぜ: 属性アニメーションの計算（core）と、時間駆動のスケジューリング（interactive）を分離するため。

from __future__ import annotations

import logging
from typing import Callable

import pyglet

from jenvek.core.animation import animate_scene, reset_scene
from jenvek.core.options import AnimationKind
from jenvek.core.runtime_config import runtime_config
from jenvek.core.scene import Scene

_logger = logging.getLogger(__name__)


class AnimationDriver:
    """Scene の属性アニメーションを fps 周期で駆動する。

    Notes
    -----
    - 実行中フラグ `is_running` を各 tick の先頭で確認する。
    - `stop()` は次回 tick の予約を取り消し、Scene を基底属性の表示へ戻す。
    - 生成処理と並行して動かさない（呼び出し側が生成前に `stop()` する）。
    """

    def __init__(
        self,
        scene: Scene,
        *,
        kind: AnimationKind | str = AnimationKind.PULSE,
        complexity: float = 5.0,
        fps: float | None = None,
        cycle_seconds: float | None = None,
        clock: pyglet.clock.Clock | None = None,
        on_frame: Callable[[Scene], None] | None = None,
    ) -> None:
        """ドライバを初期化する。

        Parameters
        ----------
        scene : Scene
            アニメーション対象。
        kind : AnimationKind | str
            アニメーション種別。
        complexity : float
            pulse の振幅に使う複雑度。
        fps, cycle_seconds : float | None
            tick 頻度と 1 周期の秒数。None なら runtime_config の値。
        clock : pyglet.clock.Clock | None
            スケジューラ。None なら pyglet の既定 clock。
        on_frame : Callable[[Scene], None] | None
            各 tick の派生属性更新後に呼ぶコールバック（再描画など）。
        """

        if fps is None or cycle_seconds is None:
            cfg = runtime_config()
            fps = cfg.animation_fps if fps is None else fps
            cycle_seconds = cfg.animation_cycle_seconds if cycle_seconds is None else cycle_seconds
        self._scene = scene
        self._kind = AnimationKind(kind)
        self._complexity = float(complexity)
        self._fps = float(fps)
        self._cycle = float(cycle_seconds)
        if self._fps <= 0:
            raise ValueError("fps は正の値である必要がある")
        if self._cycle <= 0:
            raise ValueError("cycle_seconds は正の値である必要がある")
        self._clock = clock if clock is not None else pyglet.clock.get_default()
        self._on_frame = on_frame
        self._running = False
        self._start_time = 0.0
        self._frames = 0

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def frames(self) -> int:
        """start 以降に処理した tick 数。"""

        return self._frames

    @property
    def kind(self) -> AnimationKind:
        return self._kind

    def start(self) -> None:
        """tick の予約を開始する。実行中なら何もしない。"""

        if self._running:
            return
        self._running = True
        self._frames = 0
        self._start_time = float(self._clock.time())
        self._clock.schedule_interval(self._tick, 1.0 / self._fps)
        _logger.info("アニメーションを開始します: kind=%s fps=%s", self._kind.value, self._fps)

    def stop(self) -> None:
        """tick の予約を取り消し、Scene を基底属性に戻す。"""

        if not self._running:
            return
        self._running = False
        self._clock.unschedule(self._tick)
        reset_scene(self._scene)
        _logger.info("アニメーションを停止します: frames=%d", self._frames)

    def render(self, elapsed: float) -> int:
        """経過秒 `elapsed` 時点の派生属性を Scene へ反映し、対象要素数を返す。"""

        return animate_scene(
            self._scene,
            self._kind,
            float(elapsed),
            complexity=self._complexity,
            cycle_seconds=self._cycle,
        )

    def _tick(self, dt: float) -> None:
        if not self._running:
            return
        elapsed = float(self._clock.time()) - self._start_time
        self.render(elapsed)
        self._frames += 1
        on_frame = self._on_frame
        if on_frame is not None:
            on_frame(self._scene)


__all__ = ["AnimationDriver"]
