"""Clips balances: user accounts, reward deltas and settlements.

Balance changes always go through an atomic ``clips = clips + delta``
update. Scoring calls settle() inside its own transaction so the applied
delta per (question, user) is recorded next to the balance change; a
second scoring pass only applies the difference.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from clipscore.config import LedgerSettings
from clipscore.ledger.database import repository as repo
from clipscore.ledger.scoring.audit import ScoringAuditLogger, get_audit_logger
from clipscore.shared.clock import Clock, SystemClock
from clipscore.shared.errors import NotFoundError, ValidationError
from clipscore.shared.logging import get_logger
from clipscore.shared.rows import LeaderboardRow, UserRow

logger = get_logger("rewards")


def _check_delta(clips_change: object) -> int:
    if isinstance(clips_change, bool) or not isinstance(clips_change, int):
        raise ValidationError("clips change must be an integer")
    return clips_change


class RewardHandler:
    """User accounts and the clips they hold."""

    def __init__(
        self,
        database: Any,
        clock: Clock | None = None,
        audit: ScoringAuditLogger | None = None,
        ledger: LedgerSettings | None = None,
    ):
        """Initialize the handler.

        Args:
            database: Database manager (DBM instance)
            clock: Time source for created/settled timestamps
            audit: Audit logger that records each settlement
            ledger: Starting balance and leaderboard size settings
        """
        self.database = database
        self.clock = clock or SystemClock()
        self.audit = audit or get_audit_logger()
        ledger = ledger or LedgerSettings()
        self.initial_clips = ledger.initial_clips
        self.leaderboard_limit = ledger.leaderboard_limit

    async def create_user(self, external_id: str, name: str | None = None) -> int:
        """Register a user with the starting balance; returns the new user id."""
        if not isinstance(external_id, str) or not external_id.strip():
            raise ValidationError("external id is required")
        try:
            async with self.database.transaction() as session:
                user = await repo.insert_user(
                    session,
                    external_id=external_id,
                    name=name,
                    clips=self.initial_clips,
                    now=self.clock.now(),
                )
                user_id = user.user_id
        except IntegrityError:
            raise ValidationError(f"user {external_id} already exists")
        logger.info({"create_user": {"user_id": user_id, "clips": self.initial_clips}})
        return user_id

    async def get_user(self, user_id: int) -> Optional[UserRow]:
        async with self.database.session() as session:
            user = await repo.get_user(session, user_id)
            return repo.user_row(user) if user is not None else None

    async def get_user_by_external_id(self, external_id: str) -> Optional[UserRow]:
        async with self.database.session() as session:
            user = await repo.get_user_by_external_id(session, external_id)
            return repo.user_row(user) if user is not None else None

    async def apply_delta(self, user_id: int, clips_change: int) -> int:
        """Add clips_change to a user's balance and return the new balance.

        Raises:
            NotFoundError: If the user does not exist
        """
        delta = _check_delta(clips_change)
        async with self.database.transaction() as session:
            balance = await self.increment(session, user_id, delta)
        logger.debug({"apply_delta": {"user_id": user_id, "delta": delta, "balance": balance}})
        return balance

    async def increment(self, session: AsyncSession, user_id: int, delta: int) -> int:
        balance = await repo.increment_clips(session, user_id, delta)
        if balance is None:
            raise NotFoundError(f"user {user_id} not found")
        return balance

    async def settle(
        self,
        session: AsyncSession,
        question_id: int,
        user_id: int,
        forecast_id: int,
        score: float,
        clips_change: int,
        now: datetime | None = None,
    ) -> int:
        """Bring a user's balance in line with their result on one question.

        Applies only the part of clips_change not already applied by an
        earlier settlement of the same (question, user). Must run inside the
        caller's transaction.

        Returns:
            The delta actually applied (0 on an unchanged re-run)
        """
        clips_change = _check_delta(clips_change)
        previous = await repo.get_settlement(session, question_id, user_id)
        already = previous["clips_change"] if previous is not None else 0
        applied = clips_change - already

        if applied:
            balance = await self.increment(session, user_id, applied)
        else:
            user = await repo.get_user(session, user_id)
            if user is None:
                raise NotFoundError(f"user {user_id} not found")
            balance = int(user.clips)

        await repo.upsert_settlement(
            session,
            question_id=question_id,
            user_id=user_id,
            forecast_id=forecast_id,
            score=score,
            clips_change=clips_change,
            settled_at=now or self.clock.now(),
        )
        self.audit.log_settlement(question_id, user_id, clips_change, applied, balance)
        return applied

    async def get_leaderboard(self, limit: int | None = None) -> List[LeaderboardRow]:
        """Users by clips, highest first; ties by user id."""
        limit = self.leaderboard_limit if limit is None else limit
        if limit <= 0:
            return []
        async with self.database.session() as session:
            return await repo.leaderboard(session, limit)


__all__ = ["RewardHandler"]
