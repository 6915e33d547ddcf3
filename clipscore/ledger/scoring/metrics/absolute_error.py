"""Confidence-weighted absolute-error scoring.

Scores live on [0, 100] (100 = exact). The clips at stake scale linearly
with confidence: full confidence risks the whole stake, confidence 1 a
tenth of it.
"""

from __future__ import annotations


def binary_error_score(probability: float, outcome: bool) -> float:
    """100 minus the distance in percentage points from the realized 0/100."""
    actual = 100.0 if outcome else 0.0
    return 100.0 - abs(float(probability) - actual)


def numeric_error_score(
    prediction: float,
    outcome: float,
    min_value: float,
    max_value: float,
) -> float:
    """100 * (1 - |prediction - outcome| / range), floored at 0.

    Returns 0 for a degenerate range.
    """
    span = float(max_value) - float(min_value)
    if span <= 0:
        return 0.0
    normalized_error = abs(float(prediction) - float(outcome)) / span
    return max(0.0, 100.0 * (1.0 - normalized_error))


def confidence_stake(
    score: float,
    confidence: int,
    stake: float = 100.0,
    full_confidence: int = 10,
) -> float:
    """Unrounded clips change: (score / 100) * stake * (confidence / full)."""
    return (score / 100.0) * stake * (confidence / full_confidence)


__all__ = [
    "binary_error_score",
    "numeric_error_score",
    "confidence_stake",
]
