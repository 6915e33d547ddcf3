"""Users, clips balances, settlements and the leaderboard."""

from __future__ import annotations

import pytest

from clipscore.config import LedgerSettings
from clipscore.ledger.handlers.rewards import RewardHandler
from clipscore.shared.errors import NotFoundError, ValidationError


class TestUsers:
    @pytest.mark.asyncio
    async def test_create_user_gets_starting_balance(self, handlers):
        user_id = await handlers.rewards.create_user("auth|carol", name="Carol")
        user = await handlers.rewards.get_user(user_id)
        assert user["clips"] == 100
        assert user["name"] == "Carol"
        assert (await handlers.rewards.get_user_by_external_id("auth|carol"))["user_id"] == user_id

    @pytest.mark.asyncio
    async def test_configured_starting_balance(self, dbm, clock):
        rewards = RewardHandler(dbm, clock=clock, ledger=LedgerSettings(initial_clips=250))
        user_id = await rewards.create_user("auth|rich")
        assert (await rewards.get_user(user_id))["clips"] == 250

    @pytest.mark.asyncio
    async def test_duplicate_external_id(self, handlers):
        await handlers.rewards.create_user("auth|dup")
        with pytest.raises(ValidationError, match="already exists"):
            await handlers.rewards.create_user("auth|dup")

    @pytest.mark.asyncio
    async def test_blank_external_id(self, handlers):
        with pytest.raises(ValidationError):
            await handlers.rewards.create_user("")

    @pytest.mark.asyncio
    async def test_unknown_user(self, handlers):
        assert await handlers.rewards.get_user(31337) is None


class TestApplyDelta:
    @pytest.mark.asyncio
    async def test_positive_and_negative(self, handlers, author):
        assert await handlers.rewards.apply_delta(author, 25) == 125
        assert await handlers.rewards.apply_delta(author, -40) == 85
        assert (await handlers.rewards.get_user(author))["clips"] == 85

    @pytest.mark.asyncio
    async def test_unknown_user(self, handlers):
        with pytest.raises(NotFoundError, match="user 404 not found"):
            await handlers.rewards.apply_delta(404, 10)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("delta", [1.5, True, "10"])
    async def test_delta_must_be_integer(self, handlers, author, delta):
        with pytest.raises(ValidationError):
            await handlers.rewards.apply_delta(author, delta)


class TestSettle:
    @pytest.mark.asyncio
    async def test_applies_only_the_difference(self, handlers, dbm, author, binary_question):
        forecast_id = await handlers.intake.submit_forecast(binary_question, author, 60)

        async with dbm.transaction() as session:
            applied = await handlers.rewards.settle(session, binary_question, author, forecast_id, 12.0, 12)
        assert applied == 12

        async with dbm.transaction() as session:
            applied = await handlers.rewards.settle(session, binary_question, author, forecast_id, 12.0, 12)
        assert applied == 0

        async with dbm.transaction() as session:
            applied = await handlers.rewards.settle(session, binary_question, author, forecast_id, 9.0, 9)
        assert applied == -3
        assert (await handlers.rewards.get_user(author))["clips"] == 109

    @pytest.mark.asyncio
    async def test_rolled_back_with_the_transaction(self, handlers, dbm, author, binary_question):
        forecast_id = await handlers.intake.submit_forecast(binary_question, author, 60)
        with pytest.raises(RuntimeError):
            async with dbm.transaction() as session:
                await handlers.rewards.settle(session, binary_question, author, forecast_id, 50.0, 50)
                raise RuntimeError("boom")
        assert (await handlers.rewards.get_user(author))["clips"] == 100


class TestLeaderboard:
    @pytest.mark.asyncio
    async def test_ordered_by_clips(self, handlers, author):
        low = await handlers.rewards.create_user("auth|low")
        high = await handlers.rewards.create_user("auth|high", name="High")
        await handlers.rewards.apply_delta(low, -50)
        await handlers.rewards.apply_delta(high, 50)

        board = await handlers.rewards.get_leaderboard()
        assert [row["user_id"] for row in board] == [high, author, low]
        assert board[2]["name"] == "Anonymous"
        assert board[0]["clips"] == 150

    @pytest.mark.asyncio
    async def test_ties_by_user_id_and_limit(self, handlers, author):
        other = await handlers.rewards.create_user("auth|other")
        board = await handlers.rewards.get_leaderboard(limit=1)
        assert [row["user_id"] for row in board] == [min(author, other)]
        assert await handlers.rewards.get_leaderboard(limit=0) == []
