"""Time-weighted logarithmic scoring.

Each revision counts for as long as it was the user's standing forecast:

    interval_i = [created_at_i, created_at_{i+1})       (i < last)
    interval_last = [created_at_last, end)
    end = min(close_time, resolution_time or now)

The score is a DURATION-WEIGHTED MEAN of ln(p_outcome), compared with the
ln(0.5) baseline. It is not a mean of per-revision scores, so a forecast
held for a week outweighs one held for a minute.

Intervals with non-positive duration (same-tick revisions, revisions at or
after the end) carry zero weight and are skipped.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Sequence

import numpy as np

from clipscore.shared.clock import ensure_utc
from clipscore.shared.probability import outcome_consistent_prob

from ..metrics.log_score import BASELINE_LOG_SCORE, ln_scores, relative_log_score
from ..types import ForecastRevision, TimeWeightedResult, ValidityInterval


def sort_revisions(revisions: Iterable[ForecastRevision]) -> List[ForecastRevision]:
    """Ascending by creation time; ties broken by forecast id."""
    return sorted(revisions, key=lambda r: (ensure_utc(r.created_at), r.forecast_id))


def scoring_end_time(
    close_time: datetime,
    resolution_time: datetime | None,
    now: datetime,
) -> datetime:
    """End of the last validity interval.

    A missing resolution time means "now", never the close time.
    """
    resolved_at = ensure_utc(resolution_time) if resolution_time is not None else ensure_utc(now)
    return min(ensure_utc(close_time), resolved_at)


def build_validity_intervals(
    revisions: Sequence[ForecastRevision],
    end: datetime,
) -> List[ValidityInterval]:
    """Validity interval for every revision, in ascending order.

    Interval ends are capped at `end` so nothing counts past the question's
    open lifetime. Zero or negative durations are kept here and filtered by
    the caller.
    """
    ordered = sort_revisions(revisions)
    end = ensure_utc(end)
    intervals: List[ValidityInterval] = []
    for i, rev in enumerate(ordered):
        start = ensure_utc(rev.created_at)
        if i + 1 < len(ordered):
            stop = min(ensure_utc(ordered[i + 1].created_at), end)
        else:
            stop = end
        intervals.append(ValidityInterval(forecast_id=rev.forecast_id, start=start, end=stop))
    return intervals


def compute_time_weighted_score(
    revisions: Sequence[ForecastRevision],
    outcome: bool,
    end: datetime,
    scale: float = 100.0,
) -> TimeWeightedResult:
    """Score a binary revision history against the realized outcome.

    Args:
        revisions: The user's revisions for one question (any order)
        outcome: Realized binary outcome
        end: End of the last interval, see scoring_end_time()
        scale: Multiplier for the relative score

    Returns:
        TimeWeightedResult; with no positive-duration interval the user is
        zero-information and every field but the baseline is 0
    """
    by_id = {r.forecast_id: r for r in revisions}
    intervals = [iv for iv in build_validity_intervals(revisions, end) if iv.duration_seconds > 0]

    if not intervals:
        return TimeWeightedResult(
            avg_log_score=BASELINE_LOG_SCORE,
            baseline_log_score=BASELINE_LOG_SCORE,
            relative_score=0.0,
            scaled_score=0.0,
            total_duration=0.0,
            intervals_used=0,
        )

    durations = np.array([iv.duration_seconds for iv in intervals], dtype=np.float64)
    p_outcome = np.array(
        [outcome_consistent_prob(by_id[iv.forecast_id].probability, outcome) for iv in intervals],
        dtype=np.float64,
    )

    total_duration = float(durations.sum())
    weighted = float(np.dot(ln_scores(p_outcome), durations))
    avg_log_score = weighted / total_duration
    relative = relative_log_score(avg_log_score)

    return TimeWeightedResult(
        avg_log_score=avg_log_score,
        baseline_log_score=BASELINE_LOG_SCORE,
        relative_score=relative,
        scaled_score=relative * scale,
        total_duration=total_duration,
        intervals_used=len(intervals),
    )


__all__ = [
    "sort_revisions",
    "scoring_end_time",
    "build_validity_intervals",
    "compute_time_weighted_score",
]
