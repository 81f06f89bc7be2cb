from __future__ import annotations

import pytest

from jenvek.core.compositor import generate
from jenvek.core.options import GenerationOptions
from jenvek.core.patterns.prime import first_primes, is_prime, prime_count

PALETTE = ("#FF0000", "#00FF00", "#0000FF")


def test_first_five_primes() -> None:
    primes = first_primes(5)
    assert primes == [2, 3, 5, 7, 11]
    assert primes[-1] == 11


def test_is_prime_wheel() -> None:
    assert [n for n in range(30) if is_prime(n)] == [2, 3, 5, 7, 11, 13, 17, 19, 23, 29]
    assert not is_prime(25)
    assert not is_prime(49)
    assert is_prime(7919)


def test_first_primes_edge_cases() -> None:
    assert first_primes(0) == []
    with pytest.raises(ValueError):
        first_primes(-1)


def test_prime_count_has_floor_of_ten() -> None:
    assert prime_count(GenerationOptions(complexity=1, density=1).sanitized()) == 10
    assert prime_count(GenerationOptions(complexity=5, density=50, repetition=2).sanitized()) == 500


@pytest.mark.parametrize("seed", [1, 2, 3, 4])
def test_prime_pattern_metrics(seed: int) -> None:
    report = generate(GenerationOptions(pattern="prime", complexity=1, density=10), PALETTE, seed=seed)
    assert report.ok
    metrics = report.per_layer[0].metrics
    assert metrics["primeCount"] == 10
    assert metrics["largestPrime"] == 29
    assert metrics["layout"] in ("grid", "spiral")
    assert report.total_elements == 10
