"""Probability utilities shared by intake and scoring.

Forecasts are stored as integer percentages; scoring works on unit
probabilities of the realized outcome.

Safe math and bounds:
- Percentages must lie in [0, 100]; otherwise a ValueError is raised.
- Outcome-consistent probabilities are clamped to [EPS, 1 - EPS] so that
  log scoring never sees an exact 0 or 1.
"""

from __future__ import annotations

import math

# Small epsilon to prevent log(0)
EPS = 1e-9


def percent_to_prob(percent: float) -> float:
    """Convert a percentage in [0, 100] to a unit probability.

    Raises ValueError if percent is outside [0, 100] or not finite.
    """
    p = float(percent)
    if not math.isfinite(p):
        raise ValueError("percentage must be finite")
    if p < 0.0 or p > 100.0:
        raise ValueError("percentage must be within [0, 100]")
    return p / 100.0


def outcome_consistent_prob(percent: float, outcome: bool) -> float:
    """Probability the forecast assigned to what actually happened."""
    p = percent_to_prob(percent)
    return p if outcome else 1.0 - p


def clamp_prob(prob: float, eps: float = EPS) -> float:
    """Clamp a probability to [eps, 1 - eps]."""
    return max(eps, min(float(prob), 1.0 - eps))


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward positive infinity.

    -0.5 rounds to 0 and 2.5 rounds to 3, unlike the built-in round().
    """
    return int(math.floor(float(value) + 0.5))


__all__ = [
    "EPS",
    "percent_to_prob",
    "outcome_consistent_prob",
    "clamp_prob",
    "round_half_up",
]
