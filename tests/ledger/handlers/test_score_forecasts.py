"""End-to-end scoring: engine results land on the latest revision and in balances."""

from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest
import pytest_asyncio

from clipscore.ledger.handlers.score import ScoreForecastsHandler
from clipscore.ledger.scoring.audit import ScoringAuditLogger
from clipscore.shared.errors import NotFoundError, UnscoreableError

T0 = datetime(2025, 1, 1, tzinfo=timezone.utc)


@pytest_asyncio.fixture
async def forecasters(handlers):
    alice = await handlers.rewards.create_user("auth|alice", name="Alice")
    bob = await handlers.rewards.create_user("auth|bob", name="Bob")
    return alice, bob


async def _history(handlers, clock, question_id, alice, bob):
    """Alice: 30% for a day, then 70%. Bob: 50% throughout. Resolved yes at day 4."""
    await handlers.intake.submit_forecast(question_id, alice, 30)
    await handlers.intake.submit_forecast(question_id, bob, 50)
    clock.advance(days=1)
    await handlers.intake.submit_forecast(question_id, alice, 70)
    clock.advance(days=3)
    await handlers.resolution.resolve_question(question_id, True)


class TestTimeWeightedScoring:
    @pytest.mark.asyncio
    async def test_scores_and_balances(self, handlers, clock, binary_question, forecasters):
        alice, bob = forecasters
        await _history(handlers, clock, binary_question, alice, bob)

        results = await handlers.score.score_forecasts(binary_question)

        expected = 100 * ((math.log(0.3) + 3 * math.log(0.7)) / 4 - math.log(0.5))
        assert results[alice].score == pytest.approx(expected)
        assert results[alice].clips_change == 12
        assert results[bob].clips_change == 0
        assert (await handlers.rewards.get_user(alice))["clips"] == 112
        assert (await handlers.rewards.get_user(bob))["clips"] == 100

    @pytest.mark.asyncio
    async def test_result_attached_to_latest_revision_only(self, handlers, clock, binary_question, forecasters):
        alice, bob = forecasters
        await _history(handlers, clock, binary_question, alice, bob)
        await handlers.score.score_forecasts(binary_question)

        first, latest = await handlers.intake.list_user_forecasts(binary_question, alice)
        assert first["score"] is None and first["clips_change"] is None
        assert latest["clips_change"] == 12

    @pytest.mark.asyncio
    async def test_rescoring_is_idempotent(self, handlers, clock, binary_question, forecasters):
        alice, bob = forecasters
        await _history(handlers, clock, binary_question, alice, bob)

        first = await handlers.score.score_forecasts(binary_question)
        clock.advance(days=30)
        second = await handlers.score.score_forecasts(binary_question)

        assert first == second
        assert (await handlers.rewards.get_user(alice))["clips"] == 112

    @pytest.mark.asyncio
    async def test_non_participants_untouched(self, handlers, clock, binary_question, forecasters, author):
        alice, bob = forecasters
        await _history(handlers, clock, binary_question, alice, bob)
        results = await handlers.score.score_forecasts(binary_question)
        assert author not in results
        assert (await handlers.rewards.get_user(author))["clips"] == 100


class TestOtherModes:
    @pytest.mark.asyncio
    async def test_log_mode(self, handlers, clock, author, forecasters):
        alice, bob = forecasters
        qid = await handlers.resolution.create_question(
            "Rain?", "", "binary", T0 + timedelta(days=5), author, scoring_mode="log"
        )
        await handlers.intake.submit_forecast(qid, alice, 80)
        await handlers.intake.submit_forecast(qid, bob, 20)
        clock.advance(days=1)
        await handlers.resolution.resolve_question(qid, True)

        results = await handlers.score.score_forecasts(qid)
        assert results[alice].clips_change == 68
        assert results[bob].clips_change == -132
        assert (await handlers.rewards.get_user(bob))["clips"] == -32

    @pytest.mark.asyncio
    async def test_numeric_confidence_mode(self, handlers, clock, author, forecasters):
        alice, bob = forecasters
        qid = await handlers.resolution.create_question(
            "Temperature?", "", "numeric", T0 + timedelta(days=5), author, 0, 100
        )
        await handlers.intake.submit_forecast(qid, alice, 40, confidence=3)
        await handlers.intake.submit_forecast(qid, bob, 50)
        await handlers.resolution.resolve_question(qid, 50.0)

        results = await handlers.score.score_forecasts(qid)
        assert results[alice].score == pytest.approx(90.0)
        assert results[alice].clips_change == 27
        assert results[bob].clips_change == 50


class TestFailures:
    @pytest.mark.asyncio
    async def test_unresolved_writes_nothing(self, handlers, binary_question, forecasters):
        alice, _ = forecasters
        await handlers.intake.submit_forecast(binary_question, alice, 90)
        with pytest.raises(UnscoreableError, match="must be resolved"):
            await handlers.score.score_forecasts(binary_question)
        latest = await handlers.intake.get_latest_forecast(binary_question, alice)
        assert latest["score"] is None
        assert (await handlers.rewards.get_user(alice))["clips"] == 100

    @pytest.mark.asyncio
    async def test_unknown_question(self, handlers):
        with pytest.raises(NotFoundError):
            await handlers.score.score_forecasts(12345)

    @pytest.mark.asyncio
    async def test_no_forecasts(self, handlers, binary_question):
        await handlers.resolution.resolve_question(binary_question, False)
        assert await handlers.score.score_forecasts(binary_question) == {}


@pytest.mark.asyncio
async def test_audit_trail_written(dbm, clock, binary_question, forecasters, handlers):
    alice, bob = forecasters
    await _history(handlers, clock, binary_question, alice, bob)
    mock_logger = MagicMock()
    handler = ScoreForecastsHandler(dbm, clock=clock, audit=ScoringAuditLogger(logger=mock_logger))

    await handler.score_forecasts(binary_question)

    events = [c.args[0]["event"] for c in mock_logger.info.call_args_list]
    assert events == ["score_pass_start", "score_pass_complete"]
    settlements = [c.args[0] for c in mock_logger.debug.call_args_list if c.args[0]["event"] == "settlement"]
    assert {s["user_id"] for s in settlements} == {alice, bob}
