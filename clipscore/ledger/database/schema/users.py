"""Users and their clips balance."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import BigInteger, DateTime, Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class User(Base):
    __tablename__ = "users"

    user_id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        comment="Internal surrogate primary key",
    )
    external_id: Mapped[str] = mapped_column(
        String(128),
        nullable=False,
        unique=True,
        comment="Identity-provider subject the user signs in with",
    )
    name: Mapped[Optional[str]] = mapped_column(
        String(255),
        comment="Display name; shown as Anonymous when missing",
    )
    clips: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        default=0,
        comment="Clips balance; changed only by reward application",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.current_timestamp(),
        comment="Row creation timestamp (UTC)",
    )

    __table_args__ = (
        Index("ix_users_clips", "clips"),
        {"comment": "Forecasters and their clips balances"},
    )


__all__ = ["User"]
