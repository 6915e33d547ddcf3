"""Aggregation of a user's revision history into a single score.

- time_weight: validity intervals and the duration-weighted mean of
  log-probabilities
"""

from __future__ import annotations

from .time_weight import (
    build_validity_intervals,
    compute_time_weighted_score,
    scoring_end_time,
    sort_revisions,
)

__all__ = [
    "build_validity_intervals",
    "compute_time_weighted_score",
    "scoring_end_time",
    "sort_revisions",
]
