from __future__ import annotations

from enum import Enum


class QuestionKind(str, Enum):
    BINARY = "binary"
    NUMERIC = "numeric"


class QuestionStatus(str, Enum):
    OPEN = "open"
    CLOSED = "closed"
    RESOLVED = "resolved"


class ScoringMode(str, Enum):
    """How a resolved question converts forecasts into clips.

    TIME_WEIGHTED and LOG are binary-only. CONFIDENCE covers both kinds.
    """

    TIME_WEIGHTED = "time_weighted"
    LOG = "log"
    CONFIDENCE = "confidence"


DEFAULT_MODE_BY_KIND = {
    QuestionKind.BINARY: ScoringMode.TIME_WEIGHTED,
    QuestionKind.NUMERIC: ScoringMode.CONFIDENCE,
}

MODES_BY_KIND = {
    QuestionKind.BINARY: frozenset(ScoringMode),
    QuestionKind.NUMERIC: frozenset({ScoringMode.CONFIDENCE}),
}


__all__ = [
    "QuestionKind",
    "QuestionStatus",
    "ScoringMode",
    "DEFAULT_MODE_BY_KIND",
    "MODES_BY_KIND",
]
