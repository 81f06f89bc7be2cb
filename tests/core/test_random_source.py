"""RandomSource（strong / Park–Miller）と seed 合成をテストする。"""

from __future__ import annotations

import pytest

from jenvek.core.options import GenerationOptions
from jenvek.core.random_source import (
    PARK_MILLER_MODULUS,
    ParkMillerRandomSource,
    RandomSource,
    StrongRandomSource,
    create_random_source,
    derive_seed,
    normalize_seed,
)


class _FixedClock:
    def __init__(self, now_ms: float, time_of_day: float = 0.5) -> None:
        self._now_ms = now_ms
        self._tod = time_of_day

    def now_ms(self) -> float:
        return self._now_ms

    def time_of_day(self) -> float:
        return self._tod


class _Sequence(RandomSource):
    def __init__(self, values: list[float]) -> None:
        self._values = list(values)

    def next(self) -> float:
        return self._values.pop(0)


def test_park_miller_first_state_matches_minimal_standard() -> None:
    rng = ParkMillerRandomSource(1)
    rng.next()
    assert rng.state == 16_807
    rng.next()
    assert rng.state == 282_475_249


def test_park_miller_is_deterministic_and_in_unit_interval() -> None:
    a = ParkMillerRandomSource(42)
    b = ParkMillerRandomSource(42)
    xs = [a.next() for _ in range(1000)]
    ys = [b.next() for _ in range(1000)]
    assert xs == ys
    assert all(0.0 <= x < 1.0 for x in xs)


def test_normalize_seed_never_returns_zero() -> None:
    assert normalize_seed(0) == 1
    assert normalize_seed(PARK_MILLER_MODULUS) == 1
    assert normalize_seed(-42.9) == 42
    assert normalize_seed(float("nan")) == 1


def test_strong_source_stays_in_unit_interval() -> None:
    rng = StrongRandomSource()
    assert all(0.0 <= rng.next() < 1.0 for _ in range(200))


def test_randint_is_inclusive_floor_of_uniform() -> None:
    assert _Sequence([0.0]).randint(2, 4) == 2
    assert _Sequence([0.999]).randint(2, 4) == 4
    assert _Sequence([0.5]).randint(0, 1) == 1


def test_choice_and_shuffle() -> None:
    assert _Sequence([0.0]).choice(["a", "b", "c"]) == "a"
    assert _Sequence([0.99]).choice(["a", "b", "c"]) == "c"
    with pytest.raises(ValueError):
        _Sequence([0.5]).choice([])

    shuffled = ParkMillerRandomSource(7).shuffle(list(range(10)))
    assert sorted(shuffled) == list(range(10))


def test_create_random_source_selects_mode() -> None:
    assert isinstance(create_random_source(GenerationOptions()), StrongRandomSource)
    assert isinstance(create_random_source(GenerationOptions(), seed=42), ParkMillerRandomSource)

    opts = GenerationOptions(use_time_seed=True)
    a = create_random_source(opts, clock=_FixedClock(1000.0))
    b = create_random_source(opts, clock=_FixedClock(1000.0))
    assert isinstance(a, ParkMillerRandomSource)
    assert [a.next() for _ in range(5)] == [b.next() for _ in range(5)]


def test_derive_seed_uses_time_and_cursor_terms() -> None:
    base = derive_seed(now_ms=1000.0, use_time_seed=False, use_cursor_seed=False)
    assert base == 1000.0

    timed = derive_seed(now_ms=1000.0, use_time_seed=True, use_cursor_seed=False, time_of_day=0.5)
    assert timed == pytest.approx(1000.0 + 0.5e9)

    cursor = derive_seed(
        now_ms=0.0,
        use_time_seed=False,
        use_cursor_seed=True,
        pointer=(0.0, 0.0),
    )
    # sin(0) * 1e5 + cos(0) * 1e5
    assert cursor == pytest.approx(1e5)

    ignored = derive_seed(now_ms=0.0, use_time_seed=False, use_cursor_seed=False, pointer=(10.0, 10.0))
    assert ignored == 0.0
