"""Shared SQLAlchemy base definitions and enums."""

from __future__ import annotations

from sqlalchemy import Enum as SAEnum, MetaData
from sqlalchemy.orm import DeclarativeBase

from clipscore.shared.enums import QuestionKind, QuestionStatus, ScoringMode


# Shared metadata constant so Alembic sees every table
naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}
metadata = MetaData(naming_convention=naming_convention)


class Base(DeclarativeBase):
    metadata = metadata


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


# Persist enum values ("open"), not member names ("OPEN")
question_kind_enum = SAEnum(
    QuestionKind, name="question_kind", metadata=metadata, values_callable=_enum_values
)
question_status_enum = SAEnum(
    QuestionStatus, name="question_status", metadata=metadata, values_callable=_enum_values
)
scoring_mode_enum = SAEnum(
    ScoringMode, name="scoring_mode", metadata=metadata, values_callable=_enum_values
)


__all__ = [
    "Base",
    "metadata",
    "question_kind_enum",
    "question_status_enum",
    "scoring_mode_enum",
]
