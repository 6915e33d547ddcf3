"""Scoring engine: resolved question + revision histories -> clips changes.

The engine is pure. It never reads a clock or a database; the caller
passes "now" (used only when the question has no resolution time) and a
consistent snapshot of every participant's revisions.

Mode dispatch:
- TIME_WEIGHTED (binary): duration-weighted ln score vs the 50% baseline
- LOG (binary): log2 score of the latest revision
- CONFIDENCE (binary, numeric): absolute error scaled by confidence

In every mode the result is attached to the user's latest revision.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, Iterable, List, Mapping

from clipscore.ledger.config.scoring_params import ScoringParams, get_scoring_params
from clipscore.shared.enums import QuestionStatus, ScoringMode
from clipscore.shared.probability import outcome_consistent_prob, round_half_up

from .aggregation.time_weight import compute_time_weighted_score, scoring_end_time, sort_revisions
from .metrics.absolute_error import binary_error_score, confidence_stake, numeric_error_score
from .metrics.log_score import log2_score
from .types import (
    BinaryQuestion,
    ForecastRevision,
    NumericQuestion,
    Question,
    UnscoreableError,
    UserScore,
    ValidationError,
)


def ensure_scoreable(question: Question) -> None:
    """Raise UnscoreableError unless the question is resolved with an outcome."""
    if question.status is not QuestionStatus.RESOLVED or question.outcome is None:
        raise UnscoreableError("question must be resolved to score forecasts")


def group_by_user(revisions: Iterable[ForecastRevision]) -> Dict[int, List[ForecastRevision]]:
    """Group a question's revisions per user, each list in ascending order."""
    grouped: Dict[int, List[ForecastRevision]] = {}
    for rev in revisions:
        grouped.setdefault(rev.user_id, []).append(rev)
    return {user_id: sort_revisions(revs) for user_id, revs in grouped.items()}


class ScoringEngine:
    """Compute per-user scores for one resolved question."""

    def __init__(self, params: ScoringParams | None = None):
        self.params = params or get_scoring_params()

    def score(
        self,
        question: Question,
        forecasts_by_user: Mapping[int, Iterable[ForecastRevision]],
        now: datetime,
    ) -> Dict[int, UserScore]:
        """Score every participant.

        Users with no revisions are left out entirely.

        Raises:
            UnscoreableError: If the question is not resolved
            ValidationError: If a revision lacks the value its question kind needs
        """
        ensure_scoreable(question)
        results: Dict[int, UserScore] = {}
        for user_id in sorted(forecasts_by_user):
            revisions = sort_revisions(forecasts_by_user[user_id])
            if not revisions:
                continue
            results[user_id] = self.score_user(question, user_id, revisions, now)
        return results

    def score_user(
        self,
        question: Question,
        user_id: int,
        revisions: List[ForecastRevision],
        now: datetime,
    ) -> UserScore:
        latest = revisions[-1]
        mode = question.scoring_mode

        if isinstance(question, BinaryQuestion):
            for rev in revisions:
                if rev.probability is None:
                    raise ValidationError(f"forecast {rev.forecast_id} has no probability")
            if mode is ScoringMode.TIME_WEIGHTED:
                score = self._time_weighted(question, revisions, now)
            elif mode is ScoringMode.LOG:
                score = self._plain_log(question, latest)
            elif mode is ScoringMode.CONFIDENCE:
                score = binary_error_score(latest.probability, question.outcome)
                return self._staked(user_id, latest, score)
            else:
                raise ValidationError(f"unsupported scoring mode {mode}")
        elif isinstance(question, NumericQuestion):
            if mode is not ScoringMode.CONFIDENCE:
                raise ValidationError(f"numeric questions cannot use {mode.value} scoring")
            if latest.prediction is None:
                raise ValidationError(f"forecast {latest.forecast_id} has no prediction")
            score = numeric_error_score(
                latest.prediction,
                question.outcome,
                question.min_value,
                question.max_value,
            )
            return self._staked(user_id, latest, score)
        else:
            raise ValidationError(f"unsupported question type {type(question).__name__}")

        return UserScore(
            user_id=user_id,
            latest_forecast_id=latest.forecast_id,
            score=score,
            clips_change=round_half_up(score),
        )

    def _time_weighted(
        self,
        question: BinaryQuestion,
        revisions: List[ForecastRevision],
        now: datetime,
    ) -> float:
        end = scoring_end_time(question.close_time, question.resolution_time, now)
        result = compute_time_weighted_score(
            revisions,
            question.outcome,
            end,
            scale=self.params.time_weight.scale,
        )
        return result.scaled_score

    def _plain_log(self, question: BinaryQuestion, latest: ForecastRevision) -> float:
        p = outcome_consistent_prob(latest.probability, question.outcome)
        return log2_score(p, scale=self.params.log_score.scale, offset=self.params.log_score.offset)

    def _staked(self, user_id: int, latest: ForecastRevision, score: float) -> UserScore:
        cp = self.params.confidence
        confidence = latest.confidence if latest.confidence is not None else cp.default_confidence
        delta = confidence_stake(score, confidence, stake=cp.stake, full_confidence=cp.full_confidence)
        return UserScore(
            user_id=user_id,
            latest_forecast_id=latest.forecast_id,
            score=score,
            clips_change=round_half_up(delta),
        )


__all__ = ["ScoringEngine", "ensure_scoreable", "group_by_user"]
