from __future__ import annotations

import logging

import pytest

from jenvek.core.recursion import MAX_RECURSION_SAFETY, RecursionGovernor


def test_governor_counts_and_tracks_deepest() -> None:
    gov = RecursionGovernor()
    assert gov.ceiling == MAX_RECURSION_SAFETY
    assert gov.deepest == -1

    assert gov.visit(0)
    assert gov.visit(3)
    assert gov.visit(1)
    assert gov.count == 3
    assert gov.deepest == 3
    assert not gov.halted


def test_governor_refuses_after_ceiling_and_warns_once(caplog: pytest.LogCaptureFixture) -> None:
    gov = RecursionGovernor(ceiling=2)
    with caplog.at_level(logging.WARNING, logger="jenvek.core.recursion"):
        assert gov.visit()
        assert gov.visit()
        assert not gov.visit()
        assert not gov.visit()

    assert gov.count == 2
    assert gov.halted
    assert len([r for r in caplog.records if r.levelno == logging.WARNING]) == 1


def test_governor_rejects_non_positive_ceiling() -> None:
    with pytest.raises(ValueError):
        RecursionGovernor(ceiling=0)
