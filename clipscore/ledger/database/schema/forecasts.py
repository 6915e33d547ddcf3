"""Forecast revisions."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Float, ForeignKey, Index, Integer
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class Forecast(Base):
    """One submission. Revisions are appended, never overwritten."""

    __tablename__ = "forecast"

    forecast_id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    question_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("question.question_id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.user_id", ondelete="CASCADE"),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        comment="Submission instant (UTC); orders a user's revisions",
    )
    probability: Mapped[Optional[float]] = mapped_column(
        Float,
        comment="Binary forecast in percent",
    )
    prediction: Mapped[Optional[float]] = mapped_column(
        Float,
        comment="Numeric forecast",
    )
    confidence: Mapped[Optional[int]] = mapped_column(
        Integer,
        comment="Stake multiplier 1-10 for confidence scoring",
    )
    score: Mapped[Optional[float]] = mapped_column(
        Float,
        comment="Set on the latest revision once scored",
    )
    clips_change: Mapped[Optional[int]] = mapped_column(
        Integer,
        comment="Set on the latest revision once scored",
    )

    __table_args__ = (
        Index("ix_forecast_question_id", "question_id"),
        Index("ix_forecast_user_id", "user_id"),
        Index("ix_forecast_question_user_created", "question_id", "user_id", "created_at"),
        {"comment": "Forecast revisions per (question, user)"},
    )


__all__ = ["Forecast"]
