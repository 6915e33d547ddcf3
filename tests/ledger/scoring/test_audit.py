"""Tests for the scoring audit trail."""

import logging
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from clipscore.ledger.scoring.audit import (
    ScoringAuditLogger,
    compute_hash,
    compute_results_hash,
    get_audit_logger,
)
from clipscore.ledger.scoring.types import UserScore
from clipscore.shared.enums import ScoringMode


@pytest.fixture
def mock_logger():
    return MagicMock(spec=logging.Logger)


@pytest.fixture
def audit_logger(mock_logger):
    return ScoringAuditLogger(logger=mock_logger)


class TestComputeHash:
    def test_key_order_does_not_matter(self):
        assert compute_hash({"a": 1, "b": 2.5}) == compute_hash({"b": 2.5, "a": 1})

    def test_value_change_changes_hash(self):
        assert compute_hash({"a": 1.0}) != compute_hash({"a": 1.0000001})

    def test_serializes_enums_and_datetimes(self):
        dt = datetime(2025, 1, 1, tzinfo=timezone.utc)
        h = compute_hash({"mode": ScoringMode.LOG, "at": dt})
        assert h == compute_hash({"mode": "log", "at": dt.isoformat()})
        assert len(h) == 64


class TestComputeResultsHash:
    def test_independent_of_insertion_order(self):
        a = UserScore(user_id=1, latest_forecast_id=10, score=12.5, clips_change=13)
        b = UserScore(user_id=2, latest_forecast_id=11, score=-3.0, clips_change=-3)
        assert compute_results_hash(7, {1: a, 2: b}) == compute_results_hash(7, {2: b, 1: a})

    def test_question_id_is_part_of_hash(self):
        assert compute_results_hash(1, {}) != compute_results_hash(2, {})


class TestScoringAuditLogger:
    def test_default_logger(self):
        assert ScoringAuditLogger().logger.name == "clipscore.scoring.audit"

    def test_get_audit_logger_is_cached(self):
        assert get_audit_logger() is get_audit_logger()

    def test_pass_start(self, audit_logger, mock_logger):
        dt = datetime(2025, 1, 1, tzinfo=timezone.utc)
        audit_logger.log_pass_start(3, "log", 2, dt)
        payload = mock_logger.info.call_args[0][0]
        assert payload["event"] == "score_pass_start"
        assert payload["participants"] == 2
        assert payload["as_of"] == dt.isoformat()

    def test_user_score_logged_at_debug(self, audit_logger, mock_logger):
        audit_logger.log_user_score(3, UserScore(user_id=1, latest_forecast_id=9, score=1.23456, clips_change=1))
        payload = mock_logger.debug.call_args[0][0]
        assert payload["score"] == 1.2346
        assert payload["forecast_id"] == 9

    def test_settlement(self, audit_logger, mock_logger):
        audit_logger.log_settlement(3, 1, clips_change=12, applied_delta=0, new_balance=112)
        payload = mock_logger.debug.call_args[0][0]
        assert payload["applied_delta"] == 0
        assert payload["new_balance"] == 112

    def test_pass_complete_truncates_hash(self, audit_logger, mock_logger):
        audit_logger.log_pass_complete(3, 2, 12, "a" * 64, 0.12345)
        payload = mock_logger.info.call_args[0][0]
        assert payload["results_hash"] == "a" * 16 + "..."
        assert payload["duration_seconds"] == 0.123
