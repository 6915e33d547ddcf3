"""Scoring hyperparameters and configuration.

All scoring-related configuration lives here to ensure:
1. Single source of truth for intake bounds and reward scales
2. Reproducible clips changes (same params = same balances)
3. Easy tuning without touching the engine

IMPORTANT: Changing a scale after questions have been scored changes what
a re-score would pay. Re-scoring a question settles to the new value.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator


class IntakeParams(BaseModel):
    """Valid forecast domain enforced at submission time."""

    prob_min: float = Field(
        default=1.0,
        ge=0.0,
        le=50.0,
        description="Lowest accepted binary probability (percent, inclusive).",
    )
    prob_max: float = Field(
        default=99.0,
        ge=50.0,
        le=100.0,
        description="Highest accepted binary probability (percent, inclusive).",
    )
    integer_probability: bool = Field(
        default=True,
        description="Require whole-number percentages for binary forecasts.",
    )
    numeric_bounded: bool = Field(
        default=True,
        description="Require numeric predictions to lie within [min_value, max_value].",
    )
    confidence_min: int = Field(default=1, ge=1, le=10)
    confidence_max: int = Field(default=10, ge=1, le=10)

    @model_validator(mode="after")
    def _check_order(self) -> "IntakeParams":
        if self.prob_min >= self.prob_max:
            raise ValueError("prob_min must be < prob_max")
        if self.confidence_min > self.confidence_max:
            raise ValueError("confidence_min must be <= confidence_max")
        return self


class TimeWeightParams(BaseModel):
    """Time-weighted logarithmic scoring.

    relative = avg_ln(p_outcome) - ln(0.5); score = relative * scale.
    """

    scale: float = Field(
        default=100.0,
        gt=0.0,
        le=10000.0,
        description="Multiplier applied to the relative log score.",
    )


class LogScoreParams(BaseModel):
    """Plain log2 scoring of the latest forecast.

    score = log2(p_outcome) * scale + offset; offset = scale keeps p=0.5 at 0.
    """

    scale: float = Field(default=100.0, gt=0.0, le=10000.0)
    offset: float = Field(default=100.0, ge=-10000.0, le=10000.0)


class ConfidenceParams(BaseModel):
    """Confidence-weighted absolute-error scoring."""

    stake: float = Field(
        default=100.0,
        gt=0.0,
        le=10000.0,
        description="Clips at stake for a perfect forecast at full confidence.",
    )
    default_confidence: int = Field(
        default=5,
        ge=1,
        le=10,
        description="Confidence used when a forecast was submitted without one.",
    )
    full_confidence: int = Field(
        default=10,
        ge=1,
        le=10,
        description="Confidence value that puts the full stake on the line.",
    )


class ScoringParams(BaseModel):
    """Master configuration for all scoring parameters."""

    intake: IntakeParams = Field(default_factory=IntakeParams)
    time_weight: TimeWeightParams = Field(default_factory=TimeWeightParams)
    log_score: LogScoreParams = Field(default_factory=LogScoreParams)
    confidence: ConfidenceParams = Field(default_factory=ConfidenceParams)


# Default instance for easy import
DEFAULT_SCORING_PARAMS = ScoringParams()


def get_scoring_params() -> ScoringParams:
    """Get scoring parameters."""
    return DEFAULT_SCORING_PARAMS


__all__ = [
    "IntakeParams",
    "TimeWeightParams",
    "LogScoreParams",
    "ConfidenceParams",
    "ScoringParams",
    "DEFAULT_SCORING_PARAMS",
    "get_scoring_params",
]
