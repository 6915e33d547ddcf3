"""Input validation for intake, resolution and question authoring.

All validation happens BEFORE anything is written. Invalid values are
rejected with a ValidationError whose message can be shown to the user;
nothing is silently clamped.

Guards against:
- NaN, Inf, booleans and non-numeric types
- Out-of-domain probabilities, predictions and confidences
- Outcomes that do not match the question kind
"""

from __future__ import annotations

import math
from typing import Tuple

from clipscore.ledger.config.scoring_params import ScoringParams, get_scoring_params
from clipscore.shared.enums import DEFAULT_MODE_BY_KIND, MODES_BY_KIND, QuestionKind, ScoringMode

from .types import BinaryQuestion, NumericQuestion, Question, ValidationError


def _fmt(value: float) -> str:
    return f"{value:g}"


def to_finite_float(value: object, name: str = "value") -> float:
    """Convert a value to a finite float.

    Raises:
        ValidationError: If value is None, a bool, non-numeric, NaN or infinite
    """
    if value is None:
        raise ValidationError(f"{name} is required")
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be a number")
    try:
        f = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be a number")
    if math.isnan(f):
        raise ValidationError(f"{name} is NaN")
    if math.isinf(f):
        raise ValidationError(f"{name} is infinite")
    return f


class ForecastValidator:
    """Validate forecast values against a question's domain.

    All validation is stateless and deterministic.
    """

    def __init__(self, params: ScoringParams | None = None):
        self.params = params or get_scoring_params()
        self.bounds = self.params.intake

    def validate_probability(self, probability: object) -> float:
        """Validate a binary forecast given as a percentage.

        Raises:
            ValidationError: If the percentage is outside [prob_min, prob_max]
                or, when whole numbers are required, has a fractional part
        """
        p = to_finite_float(probability, "probability")
        lo, hi = self.bounds.prob_min, self.bounds.prob_max
        if p < lo or p > hi:
            raise ValidationError(f"probability must be between {_fmt(lo)} and {_fmt(hi)}")
        if self.bounds.integer_probability and not p.is_integer():
            raise ValidationError("probability must be a whole number of percent")
        return p

    def validate_prediction(self, prediction: object, question: NumericQuestion) -> float:
        """Validate a numeric forecast against the question's range."""
        x = to_finite_float(prediction, "prediction")
        if self.bounds.numeric_bounded and not (question.min_value <= x <= question.max_value):
            raise ValidationError(
                f"prediction must be between {_fmt(question.min_value)} and {_fmt(question.max_value)}"
            )
        return x

    def validate_confidence(self, confidence: object) -> int | None:
        """Validate an optional confidence in [confidence_min, confidence_max]."""
        if confidence is None:
            return None
        c = to_finite_float(confidence, "confidence")
        lo, hi = self.bounds.confidence_min, self.bounds.confidence_max
        if not c.is_integer() or c < lo or c > hi:
            raise ValidationError(f"confidence must be a whole number between {lo} and {hi}")
        return int(c)

    def validate_forecast(
        self,
        question: Question,
        value: object,
        confidence: object = None,
    ) -> Tuple[float | None, float | None, int | None]:
        """Validate a submission for either question kind.

        Returns:
            (probability, prediction, confidence) with the field that does not
            apply to the question kind set to None
        """
        conf = self.validate_confidence(confidence)
        if isinstance(question, BinaryQuestion):
            return self.validate_probability(value), None, conf
        if isinstance(question, NumericQuestion):
            return None, self.validate_prediction(value, question), conf
        raise ValidationError(f"unsupported question type {type(question).__name__}")

    def validate_outcome(self, question: Question, outcome: object) -> bool | float:
        """Validate a resolution outcome against the question kind."""
        if isinstance(question, BinaryQuestion):
            if not isinstance(outcome, bool):
                raise ValidationError("binary questions resolve to true or false")
            return outcome
        if isinstance(question, NumericQuestion):
            return to_finite_float(outcome, "outcome")
        raise ValidationError(f"unsupported question type {type(question).__name__}")


def validate_question_fields(
    kind: object,
    min_value: object = None,
    max_value: object = None,
    scoring_mode: object = None,
) -> Tuple[QuestionKind, ScoringMode, float | None, float | None]:
    """Validate question authoring fields.

    Numeric questions need min_value < max_value; binary questions must not
    carry a range. The scoring mode defaults per kind and must be allowed
    for that kind.
    """
    try:
        k = QuestionKind(kind)
    except ValueError:
        raise ValidationError(f"kind must be one of {[q.value for q in QuestionKind]}")

    if scoring_mode is None:
        mode = DEFAULT_MODE_BY_KIND[k]
    else:
        try:
            mode = ScoringMode(scoring_mode)
        except ValueError:
            raise ValidationError(f"scoring_mode must be one of {[m.value for m in ScoringMode]}")
    if mode not in MODES_BY_KIND[k]:
        raise ValidationError(f"{k.value} questions cannot use {mode.value} scoring")

    if k is QuestionKind.BINARY:
        if min_value is not None or max_value is not None:
            raise ValidationError("binary questions do not take min_value/max_value")
        return k, mode, None, None

    lo = to_finite_float(min_value, "min_value")
    hi = to_finite_float(max_value, "max_value")
    if lo >= hi:
        raise ValidationError("min_value must be less than max_value")
    return k, mode, lo, hi


__all__ = [
    "ForecastValidator",
    "to_finite_float",
    "validate_question_fields",
]
