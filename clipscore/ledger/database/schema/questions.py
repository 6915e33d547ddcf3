"""Forecasting questions."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, CheckConstraint, DateTime, Float, ForeignKey, Index, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, question_kind_enum, question_status_enum, scoring_mode_enum


class Question(Base):
    __tablename__ = "question"

    question_id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        comment="Identifier for a forecasting question",
    )
    title: Mapped[str] = mapped_column(String(512), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    kind: Mapped[str] = mapped_column(
        question_kind_enum,
        nullable=False,
        comment="binary or numeric",
    )
    scoring_mode: Mapped[str] = mapped_column(
        scoring_mode_enum,
        nullable=False,
        comment="How forecasts convert into clips at resolution",
    )
    created_by: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.user_id"),
        nullable=False,
        comment="User who authored the question",
    )
    status: Mapped[str] = mapped_column(
        question_status_enum,
        nullable=False,
        comment="Lifecycle state (open/closed/resolved)",
    )
    close_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        comment="No forecasts are accepted after this instant (UTC)",
    )
    resolution_time: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        comment="When the outcome became known (UTC)",
    )
    outcome_binary: Mapped[Optional[bool]] = mapped_column(
        Boolean,
        comment="Outcome of a resolved binary question",
    )
    outcome_numeric: Mapped[Optional[float]] = mapped_column(
        Float,
        comment="Outcome of a resolved numeric question",
    )
    min_value: Mapped[Optional[float]] = mapped_column(
        Float,
        comment="Lower end of the numeric normalization range",
    )
    max_value: Mapped[Optional[float]] = mapped_column(
        Float,
        comment="Upper end of the numeric normalization range",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.current_timestamp(),
        comment="Row creation timestamp (UTC)",
    )

    __table_args__ = (
        Index("ix_question_status", "status"),
        Index("ix_question_created_by", "created_by"),
        CheckConstraint(
            "status = 'resolved' OR (outcome_binary IS NULL AND outcome_numeric IS NULL)",
            name="outcome_iff_resolved",
        ),
        CheckConstraint(
            "kind = 'binary' OR (min_value IS NOT NULL AND max_value IS NOT NULL AND min_value < max_value)",
            name="numeric_range",
        ),
        {"comment": "Questions users forecast on"},
    )


__all__ = ["Question"]
