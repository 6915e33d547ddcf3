"""Handler for the question lifecycle: author, close, resolve.

A question moves open -> (closed) -> resolved, and resolves exactly once.
Resolution stamps resolution_time from the injected clock; since a
resolved question can never be resolved again, that time never moves.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional

from clipscore.ledger.config.scoring_params import ScoringParams
from clipscore.ledger.database import repository as repo
from clipscore.ledger.database.schema import Question as QuestionModel
from clipscore.ledger.scoring.types import question_from_row
from clipscore.ledger.scoring.validation import ForecastValidator, validate_question_fields
from clipscore.shared.clock import Clock, SystemClock, ensure_utc
from clipscore.shared.enums import QuestionKind, QuestionStatus
from clipscore.shared.errors import NotFoundError, StateError, ValidationError
from clipscore.shared.logging import get_logger
from clipscore.shared.rows import QuestionRow

logger = get_logger("resolution")


class ResolutionHandler:
    """Create questions and move them through their lifecycle."""

    def __init__(self, database: Any, clock: Clock | None = None, params: ScoringParams | None = None):
        self.database = database
        self.clock = clock or SystemClock()
        self.validator = ForecastValidator(params)

    async def create_question(
        self,
        title: str,
        description: str,
        kind: QuestionKind | str,
        close_time: datetime,
        created_by: int,
        min_value: float | None = None,
        max_value: float | None = None,
        scoring_mode: Any = None,
    ) -> int:
        """Create an open question; returns its id.

        Raises:
            ValidationError: Bad title, close time, kind, range or scoring mode
            NotFoundError: created_by is not a known user
        """
        if not isinstance(title, str) or not title.strip():
            raise ValidationError("title is required")
        if not isinstance(close_time, datetime):
            raise ValidationError("close_time must be a datetime")
        k, mode, lo, hi = validate_question_fields(kind, min_value, max_value, scoring_mode)

        async with self.database.transaction() as session:
            if await repo.get_user(session, created_by) is None:
                raise NotFoundError(f"user {created_by} not found")
            question = await repo.insert_question(
                session,
                QuestionModel(
                    title=title.strip(),
                    description=description or "",
                    kind=k,
                    scoring_mode=mode,
                    created_by=created_by,
                    status=QuestionStatus.OPEN,
                    close_time=ensure_utc(close_time),
                    min_value=lo,
                    max_value=hi,
                    created_at=ensure_utc(self.clock.now()),
                ),
            )
            question_id = question.question_id

        logger.info({
            "create_question": {
                "question_id": question_id,
                "kind": k.value,
                "scoring_mode": mode.value,
            }
        })
        return question_id

    async def get_question(self, question_id: int) -> Optional[QuestionRow]:
        async with self.database.session() as session:
            question = await repo.get_question(session, question_id)
            return repo.question_row(question) if question is not None else None

    async def list_questions(self, status: QuestionStatus | str | None = None) -> List[QuestionRow]:
        """Questions with their creator's name: resolved, open, then closed, newest first within each."""
        if status is not None:
            try:
                status = QuestionStatus(status)
            except ValueError:
                raise ValidationError(f"status must be one of {[s.value for s in QuestionStatus]}")
        async with self.database.session() as session:
            rows = await repo.list_questions(session, status)
        out: List[QuestionRow] = []
        for question, creator_name in rows:
            row = repo.question_row(question)
            row["creator_name"] = creator_name
            out.append(row)
        return out

    async def close_question(self, question_id: int) -> None:
        """Stop accepting forecasts before close_time is reached.

        Raises:
            NotFoundError: Unknown question
            StateError: Question is not open
        """
        async with self.database.transaction() as session:
            question = await self._load(session, question_id)
            if QuestionStatus(question.status) is not QuestionStatus.OPEN:
                raise StateError("question is not open")
            question.status = QuestionStatus.CLOSED
        logger.info({"close_question": {"question_id": question_id}})

    async def resolve_question(self, question_id: int, outcome: object) -> None:
        """Record a question's outcome and resolution time.

        Raises:
            NotFoundError: Unknown question
            StateError: Question already resolved
            ValidationError: Outcome does not match the question kind
        """
        try:
            async with self.database.transaction() as session:
                model = await self._load(session, question_id)
                question = question_from_row(repo.question_row(model))
                if question.status is QuestionStatus.RESOLVED:
                    raise StateError("question already resolved")
                value = self.validator.validate_outcome(question, outcome)

                now = ensure_utc(self.clock.now())
                if question.kind is QuestionKind.BINARY:
                    model.outcome_binary = value
                else:
                    model.outcome_numeric = value
                model.status = QuestionStatus.RESOLVED
                model.resolution_time = now
        except (StateError, ValidationError) as e:
            logger.warning({"resolve_question_rejected": {"question_id": question_id, "reason": str(e)}})
            raise

        logger.info({
            "resolve_question": {
                "question_id": question_id,
                "outcome": value,
                "resolution_time": now.isoformat(),
            }
        })

    async def _load(self, session: Any, question_id: int) -> QuestionModel:
        question = await repo.get_question(session, question_id)
        if question is None:
            raise NotFoundError(f"question {question_id} not found")
        return question


__all__ = ["ResolutionHandler"]
