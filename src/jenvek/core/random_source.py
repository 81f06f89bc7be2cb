"""
どこで: `src/jenvek/core/random_source.py`。
何を: 一様乱数 [0, 1) を供給する RandomSource と、strong / seeded（Park–Miller LCG）の 2 実装を提供する。
なぜ: 生成パス全体へ明示的に乱数源を渡し、seed 指定時の再現性とグローバル状態の排除を両立するため。
"""

from __future__ import annotations

import logging
import math
import secrets
import time
from datetime import datetime
from typing import Protocol, Sequence, TypeVar

from jenvek.core.options import GenerationOptions

_logger = logging.getLogger(__name__)

T = TypeVar("T")

PARK_MILLER_MODULUS = 2_147_483_647
PARK_MILLER_MULTIPLIER = 16_807

_SECONDS_PER_DAY = 86_400.0


class RandomSource:
    """一様乱数源の基底クラス。

    サブクラスは `next()` だけを実装する。範囲付きの補助メソッドは
    すべて `next()` の呼び出し列として定義されるため、同じ `next()` 列からは
    同じ結果が得られる。
    """

    def next(self) -> float:
        """[0, 1) の一様乱数を返す。"""

        raise NotImplementedError

    def uniform(self, lo: float, hi: float) -> float:
        """[lo, hi) の一様乱数を返す。lo > hi の場合も線形補間として扱う。"""

        return self.next() * (float(hi) - float(lo)) + float(lo)

    def randint(self, lo: float, hi: float) -> int:
        """lo..hi（両端含む）の整数を返す。

        Notes
        -----
        `floor(uniform(lo, hi + 1))` として定義する。hi は float でもよい。
        """

        return int(math.floor(self.uniform(lo, float(hi) + 1.0)))

    def choice(self, items: Sequence[T]) -> T:
        """列から 1 要素を一様に選んで返す。

        Raises
        ------
        ValueError
            空の列が渡された場合。
        """

        if not items:
            raise ValueError("空の列からは choice できない")
        index = int(self.next() * len(items))
        return items[min(index, len(items) - 1)]

    def shuffle(self, items: Sequence[T]) -> list[T]:
        """Fisher–Yates でシャッフルした新しいリストを返す。"""

        out = list(items)
        for i in range(len(out) - 1, 0, -1):
            j = int(self.next() * (i + 1))
            out[i], out[j] = out[j], out[i]
        return out


class StrongRandomSource(RandomSource):
    """OS の暗号論的乱数（`secrets`）に基づく非再現の乱数源。"""

    def next(self) -> float:
        return secrets.randbits(32) / 4_294_967_296.0


class ParkMillerRandomSource(RandomSource):
    """Park–Miller 最小標準 LCG（乗数 16807, 法 2^31-1）。

    Parameters
    ----------
    seed : float
        任意の数値。`floor(|seed|) mod (2^31-1)` を初期状態とし、0 は 1 に置き換える。
    """

    def __init__(self, seed: float) -> None:
        self._state = normalize_seed(seed)

    @property
    def state(self) -> int:
        """現在の内部状態を返す。"""

        return self._state

    def next(self) -> float:
        self._state = (self._state * PARK_MILLER_MULTIPLIER) % PARK_MILLER_MODULUS
        return (self._state - 1) / (PARK_MILLER_MODULUS - 1)


def normalize_seed(seed: float) -> int:
    """seed 値を LCG の初期状態（1..2^31-2）へ正規化して返す。"""

    value = float(seed)
    if not math.isfinite(value):
        return 1
    state = int(math.floor(abs(value))) % PARK_MILLER_MODULUS
    return state if state != 0 else 1


class SeedClock(Protocol):
    """seed 計算に使う時計。"""

    def now_ms(self) -> float: ...

    def time_of_day(self) -> float: ...


class SystemSeedClock:
    """壁時計に基づく SeedClock。"""

    def now_ms(self) -> float:
        return time.time() * 1000.0

    def time_of_day(self) -> float:
        """0 時からの経過割合（0..1）を返す。"""

        now = datetime.now()
        seconds = (
            now.hour * 3600.0
            + now.minute * 60.0
            + now.second
            + now.microsecond / 1_000_000.0
        )
        return seconds / _SECONDS_PER_DAY


def derive_seed(
    *,
    now_ms: float,
    use_time_seed: bool,
    use_cursor_seed: bool,
    time_of_day: float = 0.0,
    pointer: tuple[float, float] | None = None,
    captured_x: float | None = None,
    captured_y: float | None = None,
) -> float:
    """現在時刻とカーソル/キャプチャ座標から seed 値を合成する。

    Parameters
    ----------
    now_ms : float
        現在時刻 [ms]。
    use_time_seed : bool
        True なら `time_of_day * 1e9` を加える。
    use_cursor_seed : bool
        True ならポインタ座標（`sin/cos(v*0.01)*1e5`）とキャプチャ座標
        （`sin/cos(v)*1e4`）で摂動する。
    time_of_day : float
        0 時からの経過割合（0..1）。
    pointer : tuple[float, float] | None
        現在のカーソル位置。
    captured_x, captured_y : float | None
        キャプチャ済み座標。

    Returns
    -------
    float
        LCG に渡す生の seed 値（正規化前）。
    """

    seed = float(now_ms)
    if use_time_seed:
        seed += float(time_of_day) * 1e9
    if use_cursor_seed:
        if pointer is not None:
            px, py = pointer
            seed += math.sin(float(px) * 0.01) * 1e5
            seed += math.cos(float(py) * 0.01) * 1e5
        if captured_x is not None:
            seed += math.sin(float(captured_x)) * 1e4
        if captured_y is not None:
            seed += math.cos(float(captured_y)) * 1e4
    return seed


def create_random_source(
    options: GenerationOptions,
    *,
    seed: float | None = None,
    clock: SeedClock | None = None,
) -> RandomSource:
    """options に応じた乱数源を 1 つ生成して返す。

    Parameters
    ----------
    options : GenerationOptions
        seeding フラグと座標を参照する。
    seed : float | None
        明示 seed。指定時はフラグに関係なく seeded mode を強制する。
    clock : SeedClock | None
        seed 合成用の時計。None なら SystemSeedClock。

    Returns
    -------
    RandomSource
        seeded mode なら ParkMillerRandomSource、それ以外は StrongRandomSource。
    """

    if seed is not None:
        _logger.debug("seeded random source を使用します（明示 seed）: %s", seed)
        return ParkMillerRandomSource(seed)

    if not options.seeded:
        _logger.debug("strong random source を使用します")
        return StrongRandomSource()

    _clock = clock if clock is not None else SystemSeedClock()
    derived = derive_seed(
        now_ms=_clock.now_ms(),
        use_time_seed=options.use_time_seed,
        use_cursor_seed=options.use_cursor_seed,
        time_of_day=_clock.time_of_day() if options.use_time_seed else 0.0,
        pointer=options.pointer,
        captured_x=options.captured_x,
        captured_y=options.captured_y,
    )
    _logger.debug("seeded random source を使用します: seed=%s", derived)
    return ParkMillerRandomSource(derived)


__all__ = [
    "PARK_MILLER_MODULUS",
    "PARK_MILLER_MULTIPLIER",
    "ParkMillerRandomSource",
    "RandomSource",
    "SeedClock",
    "StrongRandomSource",
    "SystemSeedClock",
    "create_random_source",
    "derive_seed",
    "normalize_seed",
]
