"""Handler for scoring a resolved question.

Flow:
1. Load the question and every forecast revision in one transaction
2. Group revisions per user and run the scoring engine
3. Clear stale scores, then attach score/clips_change to each latest revision
4. Settle each user's clips delta (only the not-yet-applied part)
5. Write the audit trail and return the per-user results

Any failure rolls back the whole question: no partial scores and no
partial balance changes. Running the handler twice leaves balances as
they were after the first run.
"""

from __future__ import annotations

import time
from typing import Any, Dict

from clipscore.ledger.config.scoring_params import ScoringParams
from clipscore.ledger.database import repository as repo
from clipscore.ledger.handlers.rewards import RewardHandler
from clipscore.ledger.scoring.audit import ScoringAuditLogger, compute_results_hash, get_audit_logger
from clipscore.ledger.scoring.engine import ScoringEngine, ensure_scoreable, group_by_user
from clipscore.ledger.scoring.types import UserScore, question_from_row, revision_from_row
from clipscore.shared.clock import Clock, SystemClock, ensure_utc
from clipscore.shared.errors import ClipscoreError, NotFoundError
from clipscore.shared.logging import get_logger

logger = get_logger("scoring")


class ScoreForecastsHandler:
    """Turn a resolved question's forecasts into scores and clips."""

    def __init__(
        self,
        database: Any,
        clock: Clock | None = None,
        params: ScoringParams | None = None,
        rewards: RewardHandler | None = None,
        audit: ScoringAuditLogger | None = None,
    ):
        """Initialize the handler.

        Args:
            database: Database manager (DBM instance)
            clock: Supplies "now" for unresolved-time fallbacks and settlements
            params: Scoring parameters (defaults from get_scoring_params())
            rewards: Reward handler used to settle balances
            audit: Audit logger for the scoring pass
        """
        self.database = database
        self.clock = clock or SystemClock()
        self.engine = ScoringEngine(params)
        self.audit = audit or get_audit_logger()
        self.rewards = rewards or RewardHandler(database, clock=self.clock, audit=self.audit)

    async def score_forecasts(self, question_id: int) -> Dict[int, UserScore]:
        """Score every participant of a resolved question and apply rewards.

        Returns:
            Mapping of user_id -> UserScore (empty if nobody forecast)

        Raises:
            NotFoundError: Unknown question
            UnscoreableError: Question not resolved
        """
        started = time.monotonic()
        now = ensure_utc(self.clock.now())
        total_applied = 0

        try:
            async with self.database.transaction() as session:
                model = await repo.get_question(session, question_id)
                if model is None:
                    raise NotFoundError(f"question {question_id} not found")
                question = question_from_row(repo.question_row(model))
                ensure_scoreable(question)

                forecasts = await repo.list_question_forecasts(session, question_id)
                by_user = group_by_user(revision_from_row(repo.forecast_row(f)) for f in forecasts)
                self.audit.log_pass_start(question_id, question.scoring_mode.value, len(by_user), now)

                results = self.engine.score(question, by_user, now)

                await repo.clear_question_scores(session, question_id)
                for user_id, result in results.items():
                    await repo.set_forecast_score(
                        session,
                        result.latest_forecast_id,
                        result.score,
                        result.clips_change,
                    )
                    total_applied += await self.rewards.settle(
                        session,
                        question_id,
                        user_id,
                        result.latest_forecast_id,
                        result.score,
                        result.clips_change,
                        now,
                    )
                    self.audit.log_user_score(question_id, result)
        except ClipscoreError as e:
            logger.warning({
                "score_forecasts_failed": {
                    "question_id": question_id,
                    "error": type(e).__name__,
                    "reason": str(e),
                }
            })
            raise

        self.audit.log_pass_complete(
            question_id,
            users_scored=len(results),
            total_applied=total_applied,
            results_hash=compute_results_hash(question_id, results),
            duration_seconds=time.monotonic() - started,
        )
        return results


__all__ = ["ScoreForecastsHandler"]
