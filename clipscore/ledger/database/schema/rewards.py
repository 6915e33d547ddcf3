"""Applied reward deltas, one row per scored (question, user)."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Float, ForeignKey, Index, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class RewardSettlement(Base):
    __tablename__ = "reward_settlement"

    settlement_id: Mapped[int] = mapped_column(
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
    forecast_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("forecast.forecast_id", ondelete="CASCADE"),
        nullable=False,
        comment="The latest revision the score was attached to",
    )
    score: Mapped[float] = mapped_column(Float, nullable=False)
    clips_change: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Delta currently reflected in the user's balance",
    )
    settled_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint("question_id", "user_id", name="uq_reward_settlement_question_user"),
        Index("ix_reward_settlement_user_id", "user_id"),
        {"comment": "Last applied clips delta per scored participant"},
    )


__all__ = ["RewardSettlement"]
