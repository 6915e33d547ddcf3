"""Handler for forecast submission and forecast lookups.

Flow for a submission:
1. Load the question and the user (NotFoundError)
2. Check the question is open and not past close_time (StateError)
3. Validate the value and confidence for the question kind (ValidationError)
4. Append a new forecast revision stamped with the clock's now

Every check runs before the insert and inside the same transaction, so a
rejected submission writes nothing. Revisions are never overwritten.
"""

from __future__ import annotations

from typing import Any, List, Optional

from clipscore.ledger.config.scoring_params import ScoringParams
from clipscore.ledger.database import repository as repo
from clipscore.ledger.database.schema import Forecast
from clipscore.ledger.scoring.types import question_from_row
from clipscore.ledger.scoring.validation import ForecastValidator
from clipscore.shared.clock import Clock, SystemClock, ensure_utc
from clipscore.shared.enums import QuestionStatus
from clipscore.shared.errors import ClipscoreError, NotFoundError, StateError
from clipscore.shared.logging import get_logger
from clipscore.shared.rows import ForecastRow

logger = get_logger("intake")


class ForecastIntakeHandler:
    """Accept forecast revisions for open questions."""

    def __init__(self, database: Any, clock: Clock | None = None, params: ScoringParams | None = None):
        self.database = database
        self.clock = clock or SystemClock()
        self.validator = ForecastValidator(params)

    async def submit_forecast(
        self,
        question_id: int,
        user_id: int,
        value: object,
        confidence: object = None,
    ) -> int:
        """Record a forecast; returns the new forecast id.

        value is a percentage for binary questions and a raw number for
        numeric ones.

        Raises:
            NotFoundError: Unknown question or user
            StateError: Question not open, or past its close time
            ValidationError: Value or confidence outside the allowed domain
        """
        try:
            async with self.database.transaction() as session:
                question_model = await repo.get_question(session, question_id)
                if question_model is None:
                    raise NotFoundError(f"question {question_id} not found")
                if await repo.get_user(session, user_id) is None:
                    raise NotFoundError(f"user {user_id} not found")

                question = question_from_row(repo.question_row(question_model))
                now = ensure_utc(self.clock.now())
                if question.status is not QuestionStatus.OPEN:
                    raise StateError("question is not open for forecasts")
                if now > question.close_time:
                    raise StateError("question has closed")

                probability, prediction, conf = self.validator.validate_forecast(question, value, confidence)

                forecast = await repo.insert_forecast(
                    session,
                    Forecast(
                        question_id=question_id,
                        user_id=user_id,
                        created_at=now,
                        probability=probability,
                        prediction=prediction,
                        confidence=conf,
                    ),
                )
                forecast_id = forecast.forecast_id
        except ClipscoreError as e:
            logger.info({
                "submit_forecast_rejected": {
                    "question_id": question_id,
                    "user_id": user_id,
                    "error": type(e).__name__,
                    "reason": str(e),
                }
            })
            raise

        logger.debug({
            "submit_forecast": {
                "question_id": question_id,
                "user_id": user_id,
                "forecast_id": forecast_id,
            }
        })
        return forecast_id

    async def get_latest_forecast(self, question_id: int, user_id: int) -> Optional[ForecastRow]:
        """The user's current standing forecast, or None if they never submitted."""
        async with self.database.session() as session:
            forecast = await repo.latest_forecast(session, question_id, user_id)
            return repo.forecast_row(forecast) if forecast is not None else None

    async def list_forecasts_for_question(self, question_id: int) -> List[ForecastRow]:
        """Every revision on a question, oldest first, with the forecaster's name."""
        async with self.database.session() as session:
            rows = await repo.list_question_forecasts_with_names(session, question_id)
        out: List[ForecastRow] = []
        for forecast, name in rows:
            row = repo.forecast_row(forecast)
            row["user_name"] = name
            out.append(row)
        return out

    async def list_user_forecasts(self, question_id: int, user_id: int) -> List[ForecastRow]:
        async with self.database.session() as session:
            forecasts = await repo.list_user_forecasts(session, question_id, user_id)
            return [repo.forecast_row(f) for f in forecasts]


__all__ = ["ForecastIntakeHandler"]
