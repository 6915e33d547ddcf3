"""Queries over the ledger schema.

Every function takes an open AsyncSession so handlers can compose several
of them inside one transaction.
"""
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.dialects.sqlite import insert as sqlite_upsert
from sqlalchemy.ext.asyncio import AsyncSession

from clipscore.shared.clock import ensure_utc
from clipscore.shared.enums import QuestionStatus
from clipscore.shared.rows import ForecastRow, LeaderboardRow, QuestionRow, SettlementRow, UserRow

from .schema import Forecast, Question, RewardSettlement, User

ANONYMOUS = "Anonymous"


# ─────────────────────────────────────────────────────────────────────────────
# Row conversion
# ─────────────────────────────────────────────────────────────────────────────


def user_row(user: User) -> UserRow:
    return {
        "user_id": user.user_id,
        "external_id": user.external_id,
        "name": user.name,
        "clips": int(user.clips),
        "created_at": ensure_utc(user.created_at),
    }


def question_row(question: Question) -> QuestionRow:
    return {
        "question_id": question.question_id,
        "title": question.title,
        "description": question.description,
        "kind": question.kind,
        "scoring_mode": question.scoring_mode,
        "created_by": question.created_by,
        "status": question.status,
        "close_time": ensure_utc(question.close_time),
        "resolution_time": ensure_utc(question.resolution_time),
        "outcome_binary": question.outcome_binary,
        "outcome_numeric": question.outcome_numeric,
        "min_value": question.min_value,
        "max_value": question.max_value,
        "created_at": ensure_utc(question.created_at),
    }


def forecast_row(forecast: Forecast) -> ForecastRow:
    return {
        "forecast_id": forecast.forecast_id,
        "question_id": forecast.question_id,
        "user_id": forecast.user_id,
        "created_at": ensure_utc(forecast.created_at),
        "probability": forecast.probability,
        "prediction": forecast.prediction,
        "confidence": forecast.confidence,
        "score": forecast.score,
        "clips_change": forecast.clips_change,
    }


# ─────────────────────────────────────────────────────────────────────────────
# Users
# ─────────────────────────────────────────────────────────────────────────────


async def insert_user(
    session: AsyncSession,
    *,
    external_id: str,
    name: str | None,
    clips: int,
    now: datetime,
) -> User:
    user = User(external_id=external_id, name=name, clips=clips, created_at=ensure_utc(now))
    session.add(user)
    await session.flush()
    return user


async def get_user(session: AsyncSession, user_id: int) -> Optional[User]:
    return await session.get(User, user_id)


async def get_user_by_external_id(session: AsyncSession, external_id: str) -> Optional[User]:
    stmt = select(User).where(User.external_id == external_id)
    return (await session.execute(stmt)).scalar_one_or_none()


async def increment_clips(session: AsyncSession, user_id: int, delta: int) -> Optional[int]:
    """Atomically add delta to a balance; returns the new balance or None if no such user."""
    stmt = (
        update(User)
        .where(User.user_id == user_id)
        .values(clips=User.clips + delta)
        .execution_options(synchronize_session=False)
    )
    result = await session.execute(stmt)
    if not result.rowcount:
        return None
    balance = await session.execute(select(User.clips).where(User.user_id == user_id))
    return int(balance.scalar_one())


async def leaderboard(session: AsyncSession, limit: int) -> List[LeaderboardRow]:
    stmt = select(User.user_id, User.name, User.clips).order_by(User.clips.desc(), User.user_id).limit(limit)
    rows = (await session.execute(stmt)).all()
    return [{"user_id": r.user_id, "name": r.name or ANONYMOUS, "clips": int(r.clips)} for r in rows]


# ─────────────────────────────────────────────────────────────────────────────
# Questions
# ─────────────────────────────────────────────────────────────────────────────


async def insert_question(session: AsyncSession, question: Question) -> Question:
    session.add(question)
    await session.flush()
    return question


async def get_question(session: AsyncSession, question_id: int) -> Optional[Question]:
    return await session.get(Question, question_id)


async def list_questions(
    session: AsyncSession,
    status: QuestionStatus | None = None,
) -> List[tuple[Question, str]]:
    """Questions with their creator's display name, by status (resolved, open, closed) then newest first."""
    stmt = (
        select(Question, User.name)
        .join(User, User.user_id == Question.created_by, isouter=True)
        .order_by(Question.status.desc(), Question.created_at.desc(), Question.question_id.desc())
    )
    if status is not None:
        stmt = stmt.where(Question.status == status)
    rows = (await session.execute(stmt)).all()
    return [(q, name or ANONYMOUS) for q, name in rows]


# ─────────────────────────────────────────────────────────────────────────────
# Forecasts
# ─────────────────────────────────────────────────────────────────────────────


async def insert_forecast(session: AsyncSession, forecast: Forecast) -> Forecast:
    session.add(forecast)
    await session.flush()
    return forecast


async def list_question_forecasts(session: AsyncSession, question_id: int) -> List[Forecast]:
    stmt = (
        select(Forecast)
        .where(Forecast.question_id == question_id)
        .order_by(Forecast.user_id, Forecast.created_at, Forecast.forecast_id)
    )
    return list((await session.execute(stmt)).scalars().all())


async def list_question_forecasts_with_names(
    session: AsyncSession,
    question_id: int,
) -> List[tuple[Forecast, str]]:
    stmt = (
        select(Forecast, User.name)
        .join(User, User.user_id == Forecast.user_id, isouter=True)
        .where(Forecast.question_id == question_id)
        .order_by(Forecast.created_at, Forecast.forecast_id)
    )
    rows = (await session.execute(stmt)).all()
    return [(f, name or ANONYMOUS) for f, name in rows]


async def list_user_forecasts(session: AsyncSession, question_id: int, user_id: int) -> List[Forecast]:
    stmt = (
        select(Forecast)
        .where(Forecast.question_id == question_id, Forecast.user_id == user_id)
        .order_by(Forecast.created_at, Forecast.forecast_id)
    )
    return list((await session.execute(stmt)).scalars().all())


async def latest_forecast(session: AsyncSession, question_id: int, user_id: int) -> Optional[Forecast]:
    """The revision with the greatest creation time; ties go to the greatest id."""
    stmt = (
        select(Forecast)
        .where(Forecast.question_id == question_id, Forecast.user_id == user_id)
        .order_by(Forecast.created_at.desc(), Forecast.forecast_id.desc())
        .limit(1)
    )
    return (await session.execute(stmt)).scalar_one_or_none()


async def count_forecasts(session: AsyncSession, question_id: int | None = None) -> int:
    stmt = select(func.count(Forecast.forecast_id))
    if question_id is not None:
        stmt = stmt.where(Forecast.question_id == question_id)
    return int((await session.execute(stmt)).scalar_one())


async def set_forecast_score(
    session: AsyncSession,
    forecast_id: int,
    score: float | None,
    clips_change: int | None,
) -> None:
    stmt = (
        update(Forecast)
        .where(Forecast.forecast_id == forecast_id)
        .values(score=score, clips_change=clips_change)
        .execution_options(synchronize_session=False)
    )
    await session.execute(stmt)


async def clear_question_scores(session: AsyncSession, question_id: int) -> None:
    """Unset score/clips_change on every revision of a question."""
    stmt = (
        update(Forecast)
        .where(Forecast.question_id == question_id)
        .values(score=None, clips_change=None)
        .execution_options(synchronize_session=False)
    )
    await session.execute(stmt)


# ─────────────────────────────────────────────────────────────────────────────
# Settlements
# ─────────────────────────────────────────────────────────────────────────────


async def get_settlement(session: AsyncSession, question_id: int, user_id: int) -> Optional[SettlementRow]:
    stmt = select(RewardSettlement).where(
        RewardSettlement.question_id == question_id,
        RewardSettlement.user_id == user_id,
    )
    row = (await session.execute(stmt)).scalar_one_or_none()
    if row is None:
        return None
    return {
        "question_id": row.question_id,
        "user_id": row.user_id,
        "forecast_id": row.forecast_id,
        "score": row.score,
        "clips_change": int(row.clips_change),
        "settled_at": ensure_utc(row.settled_at),
    }


async def upsert_settlement(
    session: AsyncSession,
    *,
    question_id: int,
    user_id: int,
    forecast_id: int,
    score: float,
    clips_change: int,
    settled_at: datetime,
) -> None:
    settled_at = ensure_utc(settled_at)
    stmt = sqlite_upsert(RewardSettlement).values(
        question_id=question_id,
        user_id=user_id,
        forecast_id=forecast_id,
        score=score,
        clips_change=clips_change,
        settled_at=settled_at,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["question_id", "user_id"],
        set_={
            "forecast_id": forecast_id,
            "score": score,
            "clips_change": clips_change,
            "settled_at": settled_at,
        },
    )
    await session.execute(stmt)


__all__ = [
    "ANONYMOUS",
    "user_row",
    "question_row",
    "forecast_row",
    "insert_user",
    "get_user",
    "get_user_by_external_id",
    "increment_clips",
    "leaderboard",
    "insert_question",
    "get_question",
    "list_questions",
    "insert_forecast",
    "list_question_forecasts",
    "list_question_forecasts_with_names",
    "list_user_forecasts",
    "latest_forecast",
    "count_forecasts",
    "set_forecast_score",
    "clear_question_scores",
    "get_settlement",
    "upsert_settlement",
]
