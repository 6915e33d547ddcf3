"""Logarithmic scoring rules.

The log score rewards ln(p) for the probability assigned to the realized
outcome. It is proper: the best expected score comes from reporting your
true belief.

- ln_score: natural log, used by the time-weighted engine
- log2_score: plain log2 score of one forecast, 0 at p = 0.5
- BASELINE_LOG_SCORE: ln(0.5), what an always-50% forecaster earns
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from clipscore.shared.probability import EPS, clamp_prob

# ln(0.5); duration cancels out so the baseline is a constant
BASELINE_LOG_SCORE = float(np.log(0.5))


def ln_score(p_outcome: float) -> float:
    """Natural log of the outcome-consistent probability, clamped away from 0."""
    return float(np.log(clamp_prob(p_outcome)))


def ln_scores(p_outcome: NDArray[np.float64]) -> NDArray[np.float64]:
    """Vectorized ln_score."""
    return np.log(np.clip(np.asarray(p_outcome, dtype=np.float64), EPS, 1.0 - EPS))


def log2_score(p_outcome: float, scale: float = 100.0, offset: float = 100.0) -> float:
    """Plain log2 score.

    score = log2(p) * scale + offset

    With the defaults p = 0.5 scores exactly 0, p = 0.8 about 67.8 and
    p = 0.2 about -132.2.
    """
    return float(np.log2(clamp_prob(p_outcome))) * scale + offset


def relative_log_score(avg_log_score: float) -> float:
    """Average log score minus the 50% baseline. Positive beats a coin flip."""
    return avg_log_score - BASELINE_LOG_SCORE


__all__ = [
    "BASELINE_LOG_SCORE",
    "ln_score",
    "ln_scores",
    "log2_score",
    "relative_log_score",
]
