"""Structured audit logging for scoring passes."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from clipscore.shared.logging import get_logger

from ..types import UserScore


class ScoringAuditLogger:
    """Structured logger for the scoring audit trail.

    Logs the start and end of each pass, each participant's result, and the
    reward deltas actually applied.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or get_logger("scoring.audit")

    def log_pass_start(self, question_id: int, mode: str, participants: int, as_of: datetime) -> None:
        self.logger.info({
            "event": "score_pass_start",
            "question_id": question_id,
            "mode": mode,
            "participants": participants,
            "as_of": as_of.isoformat(),
        })

    def log_user_score(self, question_id: int, result: UserScore) -> None:
        self.logger.debug({
            "event": "user_score",
            "question_id": question_id,
            "user_id": result.user_id,
            "forecast_id": result.latest_forecast_id,
            "score": round(result.score, 4),
            "clips_change": result.clips_change,
        })

    def log_settlement(
        self,
        question_id: int,
        user_id: int,
        clips_change: int,
        applied_delta: int,
        new_balance: int,
    ) -> None:
        self.logger.debug({
            "event": "settlement",
            "question_id": question_id,
            "user_id": user_id,
            "clips_change": clips_change,
            "applied_delta": applied_delta,
            "new_balance": new_balance,
        })

    def log_pass_complete(
        self,
        question_id: int,
        users_scored: int,
        total_applied: int,
        results_hash: str,
        duration_seconds: float,
    ) -> None:
        self.logger.info({
            "event": "score_pass_complete",
            "question_id": question_id,
            "users_scored": users_scored,
            "total_applied": total_applied,
            "results_hash": results_hash[:16] + "...",
            "duration_seconds": round(duration_seconds, 3),
        })


# Default instance
_audit_logger: Optional[ScoringAuditLogger] = None


def get_audit_logger() -> ScoringAuditLogger:
    """Get or create the default audit logger."""
    global _audit_logger
    if _audit_logger is None:
        _audit_logger = ScoringAuditLogger()
    return _audit_logger


__all__ = ["ScoringAuditLogger", "get_audit_logger"]
