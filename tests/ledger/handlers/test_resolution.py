"""Question authoring and the open -> closed -> resolved lifecycle."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from clipscore.shared.enums import QuestionKind, QuestionStatus, ScoringMode
from clipscore.shared.errors import NotFoundError, StateError, ValidationError

T0 = datetime(2025, 1, 1, tzinfo=timezone.utc)


class TestCreateQuestion:
    @pytest.mark.asyncio
    async def test_binary_defaults(self, handlers, binary_question):
        q = await handlers.resolution.get_question(binary_question)
        assert q["kind"] is QuestionKind.BINARY
        assert q["scoring_mode"] is ScoringMode.TIME_WEIGHTED
        assert q["status"] is QuestionStatus.OPEN
        assert q["close_time"] == T0 + timedelta(days=10)
        assert q["resolution_time"] is None

    @pytest.mark.asyncio
    async def test_numeric_defaults_to_confidence(self, handlers, author):
        qid = await handlers.resolution.create_question(
            "Temperature?", "High in Oslo", "numeric", T0 + timedelta(days=2), author, 0, 40
        )
        q = await handlers.resolution.get_question(qid)
        assert q["scoring_mode"] is ScoringMode.CONFIDENCE
        assert (q["min_value"], q["max_value"]) == (0.0, 40.0)

    @pytest.mark.asyncio
    async def test_explicit_mode(self, handlers, author):
        qid = await handlers.resolution.create_question(
            "Rain?", "", QuestionKind.BINARY, T0 + timedelta(days=2), author, scoring_mode="log"
        )
        assert (await handlers.resolution.get_question(qid))["scoring_mode"] is ScoringMode.LOG

    @pytest.mark.asyncio
    async def test_numeric_log_mode_rejected(self, handlers, author):
        with pytest.raises(ValidationError, match="numeric questions cannot use log scoring"):
            await handlers.resolution.create_question(
                "Temperature?", "", "numeric", T0 + timedelta(days=2), author, 0, 40, scoring_mode="log"
            )

    @pytest.mark.asyncio
    async def test_unknown_creator(self, handlers):
        with pytest.raises(NotFoundError):
            await handlers.resolution.create_question("Rain?", "", "binary", T0, 42)

    @pytest.mark.asyncio
    async def test_blank_title(self, handlers, author):
        with pytest.raises(ValidationError, match="title is required"):
            await handlers.resolution.create_question("  ", "", "binary", T0, author)

    @pytest.mark.asyncio
    async def test_get_unknown(self, handlers):
        assert await handlers.resolution.get_question(404) is None


class TestListQuestions:
    @pytest.mark.asyncio
    async def test_by_status_with_creator(self, handlers, clock, author, binary_question):
        clock.advance(hours=1)
        newer = await handlers.resolution.create_question("Snow?", "", "binary", T0 + timedelta(days=3), author)
        await handlers.resolution.close_question(binary_question)

        open_rows = await handlers.resolution.list_questions("open")
        assert [r["question_id"] for r in open_rows] == [newer]
        assert open_rows[0]["creator_name"] == "Author"

        all_rows = await handlers.resolution.list_questions()
        assert {r["question_id"] for r in all_rows} == {newer, binary_question}

    @pytest.mark.asyncio
    async def test_newest_first(self, handlers, clock, author, binary_question):
        clock.advance(hours=1)
        newer = await handlers.resolution.create_question("Snow?", "", "binary", T0 + timedelta(days=3), author)
        rows = await handlers.resolution.list_questions(QuestionStatus.OPEN)
        assert [r["question_id"] for r in rows] == [newer, binary_question]

    @pytest.mark.asyncio
    async def test_bad_status(self, handlers):
        with pytest.raises(ValidationError):
            await handlers.resolution.list_questions("archived")


class TestCloseQuestion:
    @pytest.mark.asyncio
    async def test_close(self, handlers, binary_question):
        await handlers.resolution.close_question(binary_question)
        assert (await handlers.resolution.get_question(binary_question))["status"] is QuestionStatus.CLOSED

    @pytest.mark.asyncio
    async def test_close_twice(self, handlers, binary_question):
        await handlers.resolution.close_question(binary_question)
        with pytest.raises(StateError):
            await handlers.resolution.close_question(binary_question)

    @pytest.mark.asyncio
    async def test_close_unknown(self, handlers):
        with pytest.raises(NotFoundError):
            await handlers.resolution.close_question(7)


class TestResolveQuestion:
    @pytest.mark.asyncio
    async def test_resolve_records_outcome_and_time(self, handlers, clock, binary_question):
        clock.advance(days=4)
        await handlers.resolution.resolve_question(binary_question, True)
        q = await handlers.resolution.get_question(binary_question)
        assert q["status"] is QuestionStatus.RESOLVED
        assert q["outcome_binary"] is True
        assert q["resolution_time"] == T0 + timedelta(days=4)

    @pytest.mark.asyncio
    async def test_resolve_from_closed(self, handlers, binary_question):
        await handlers.resolution.close_question(binary_question)
        await handlers.resolution.resolve_question(binary_question, False)
        assert (await handlers.resolution.get_question(binary_question))["outcome_binary"] is False

    @pytest.mark.asyncio
    async def test_resolve_twice_rejected(self, handlers, clock, binary_question):
        await handlers.resolution.resolve_question(binary_question, True)
        clock.advance(days=1)
        with pytest.raises(StateError, match="already resolved"):
            await handlers.resolution.resolve_question(binary_question, False)
        q = await handlers.resolution.get_question(binary_question)
        assert q["outcome_binary"] is True
        assert q["resolution_time"] == T0

    @pytest.mark.asyncio
    async def test_binary_outcome_must_be_bool(self, handlers, binary_question):
        with pytest.raises(ValidationError, match="true or false"):
            await handlers.resolution.resolve_question(binary_question, 1)
        assert (await handlers.resolution.get_question(binary_question))["status"] is QuestionStatus.OPEN

    @pytest.mark.asyncio
    async def test_numeric_outcome(self, handlers, author):
        qid = await handlers.resolution.create_question("Temp?", "", "numeric", T0, author, -10, 40)
        await handlers.resolution.resolve_question(qid, 21.5)
        assert (await handlers.resolution.get_question(qid))["outcome_numeric"] == 21.5
        with pytest.raises(StateError):
            await handlers.resolution.resolve_question(qid, 22)

    @pytest.mark.asyncio
    async def test_numeric_outcome_must_be_finite(self, handlers, author):
        qid = await handlers.resolution.create_question("Temp?", "", "numeric", T0, author, -10, 40)
        with pytest.raises(ValidationError):
            await handlers.resolution.resolve_question(qid, float("inf"))

    @pytest.mark.asyncio
    async def test_resolve_unknown(self, handlers):
        with pytest.raises(NotFoundError):
            await handlers.resolution.resolve_question(404, True)


class TestListQuestionsStatusOrder:
    @pytest.mark.asyncio
    async def test_status_descending(self, handlers, clock, author, binary_question):
        """Resolved questions come first, then open, then closed."""
        clock.advance(hours=1)
        closed = await handlers.resolution.create_question("Hail?", "", "binary", T0 + timedelta(days=3), author)
        clock.advance(hours=1)
        resolved = await handlers.resolution.create_question("Fog?", "", "binary", T0 + timedelta(days=3), author)
        await handlers.resolution.close_question(closed)
        await handlers.resolution.resolve_question(resolved, False)

        rows = await handlers.resolution.list_questions()
        assert [r["question_id"] for r in rows] == [resolved, binary_question, closed]
