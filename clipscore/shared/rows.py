from __future__ import annotations

from datetime import datetime
from typing import Optional, TypedDict

from .enums import QuestionKind, QuestionStatus, ScoringMode


class UserRow(TypedDict, total=False):
    user_id: int
    external_id: str
    name: Optional[str]
    clips: int
    created_at: datetime


class QuestionRow(TypedDict, total=False):
    question_id: int
    title: str
    description: str
    kind: QuestionKind | str
    scoring_mode: ScoringMode | str
    created_by: int
    status: QuestionStatus | str
    close_time: datetime
    resolution_time: Optional[datetime]
    outcome_binary: Optional[bool]
    outcome_numeric: Optional[float]
    min_value: Optional[float]
    max_value: Optional[float]
    created_at: datetime
    creator_name: str


class ForecastRow(TypedDict, total=False):
    forecast_id: int
    question_id: int
    user_id: int
    created_at: datetime
    probability: Optional[float]
    prediction: Optional[float]
    confidence: Optional[int]
    score: Optional[float]
    clips_change: Optional[int]
    user_name: str


class SettlementRow(TypedDict, total=False):
    question_id: int
    user_id: int
    forecast_id: int
    score: float
    clips_change: int
    settled_at: datetime


class LeaderboardRow(TypedDict):
    user_id: int
    name: str
    clips: int


__all__ = [
    "UserRow",
    "QuestionRow",
    "ForecastRow",
    "SettlementRow",
    "LeaderboardRow",
]
