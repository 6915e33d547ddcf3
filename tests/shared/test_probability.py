import math

import pytest

from clipscore.shared.probability import (
    EPS,
    clamp_prob,
    outcome_consistent_prob,
    percent_to_prob,
    round_half_up,
)


class TestPercentToProb:
    def test_converts(self):
        assert percent_to_prob(25) == 0.25
        assert percent_to_prob(0) == 0.0
        assert percent_to_prob(100) == 1.0

    @pytest.mark.parametrize("value", [-1, 100.5, math.nan, math.inf])
    def test_rejects(self, value):
        with pytest.raises(ValueError):
            percent_to_prob(value)


def test_outcome_consistent_prob():
    assert outcome_consistent_prob(80, True) == pytest.approx(0.8)
    assert outcome_consistent_prob(80, False) == pytest.approx(0.2)


def test_clamp_prob():
    assert clamp_prob(0.0) == EPS
    assert clamp_prob(1.0) == 1.0 - EPS
    assert clamp_prob(0.3) == 0.3


class TestRoundHalfUp:
    """Halves go toward positive infinity, never to even."""

    @pytest.mark.parametrize(
        "value,expected",
        [(0.5, 1), (1.5, 2), (2.5, 3), (-0.5, 0), (-1.5, -1), (-2.6, -3), (67.807, 68), (12.46, 12)],
    )
    def test_rounding(self, value, expected):
        assert round_half_up(value) == expected

    def test_differs_from_builtin(self):
        assert round(2.5) == 2
        assert round_half_up(2.5) == 3
