"""Type definitions for the scoring engine."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Union

from clipscore.shared.clock import ensure_utc
from clipscore.shared.enums import (
    DEFAULT_MODE_BY_KIND,
    QuestionKind,
    QuestionStatus,
    ScoringMode,
)
from clipscore.shared.errors import (
    NotFoundError,
    StateError,
    UnscoreableError,
    ValidationError,
)


# ─────────────────────────────────────────────────────────────────────────────
# Question variants
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class BinaryQuestion:
    """A yes/no question. outcome is set iff status is RESOLVED."""

    question_id: int
    close_time: datetime
    status: QuestionStatus = QuestionStatus.OPEN
    scoring_mode: ScoringMode = ScoringMode.TIME_WEIGHTED
    resolution_time: datetime | None = None
    outcome: bool | None = None

    @property
    def kind(self) -> QuestionKind:
        return QuestionKind.BINARY


@dataclass(frozen=True)
class NumericQuestion:
    """A question resolving to a real number in [min_value, max_value]."""

    question_id: int
    close_time: datetime
    min_value: float
    max_value: float
    status: QuestionStatus = QuestionStatus.OPEN
    scoring_mode: ScoringMode = ScoringMode.CONFIDENCE
    resolution_time: datetime | None = None
    outcome: float | None = None

    @property
    def kind(self) -> QuestionKind:
        return QuestionKind.NUMERIC


Question = Union[BinaryQuestion, NumericQuestion]


def question_from_row(row: Mapping[str, Any]) -> Question:
    """Build the question variant matching a persisted question row."""
    kind = QuestionKind(row["kind"])
    mode = row.get("scoring_mode")
    mode = ScoringMode(mode) if mode is not None else DEFAULT_MODE_BY_KIND[kind]
    common = {
        "question_id": int(row["question_id"]),
        "close_time": ensure_utc(row["close_time"]),
        "status": QuestionStatus(row["status"]),
        "scoring_mode": mode,
        "resolution_time": ensure_utc(row.get("resolution_time")),
    }
    if kind is QuestionKind.BINARY:
        outcome = row.get("outcome_binary")
        return BinaryQuestion(outcome=None if outcome is None else bool(outcome), **common)
    outcome = row.get("outcome_numeric")
    return NumericQuestion(
        min_value=float(row["min_value"]),
        max_value=float(row["max_value"]),
        outcome=None if outcome is None else float(outcome),
        **common,
    )


# ─────────────────────────────────────────────────────────────────────────────
# Forecasts and results
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ForecastRevision:
    """One submitted forecast. probability is a percent, prediction a raw value."""

    forecast_id: int
    user_id: int
    created_at: datetime
    probability: float | None = None
    prediction: float | None = None
    confidence: int | None = None


def revision_from_row(row: Mapping[str, Any]) -> ForecastRevision:
    probability = row.get("probability")
    prediction = row.get("prediction")
    confidence = row.get("confidence")
    return ForecastRevision(
        forecast_id=int(row["forecast_id"]),
        user_id=int(row["user_id"]),
        created_at=ensure_utc(row["created_at"]),
        probability=None if probability is None else float(probability),
        prediction=None if prediction is None else float(prediction),
        confidence=None if confidence is None else int(confidence),
    )


@dataclass(frozen=True)
class ValidityInterval:
    """Span during which a revision was the user's standing forecast."""

    forecast_id: int
    start: datetime
    end: datetime

    @property
    def duration_seconds(self) -> float:
        return (self.end - self.start).total_seconds()


@dataclass(frozen=True)
class TimeWeightedResult:
    """Breakdown of a time-weighted log score."""

    avg_log_score: float
    baseline_log_score: float
    relative_score: float
    scaled_score: float
    total_duration: float
    intervals_used: int


@dataclass(frozen=True)
class UserScore:
    """Engine output for one participant; persisted on the latest revision."""

    user_id: int
    latest_forecast_id: int
    score: float
    clips_change: int


__all__ = [
    "BinaryQuestion",
    "NumericQuestion",
    "Question",
    "question_from_row",
    "ForecastRevision",
    "revision_from_row",
    "ValidityInterval",
    "TimeWeightedResult",
    "UserScore",
    "ValidationError",
    "StateError",
    "UnscoreableError",
    "NotFoundError",
]
