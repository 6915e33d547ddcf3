"""Error taxonomy shared by intake, resolution, scoring and rewards.

Every message is meant to be shown to an end user as-is.
"""

from __future__ import annotations


class ClipscoreError(Exception):
    """Base class for all ledger errors."""

    pass


class ValidationError(ClipscoreError):
    """Raised when an input value is out of domain or a field is missing."""

    pass


class StateError(ClipscoreError):
    """Raised when an operation does not fit the question's lifecycle state."""

    pass


class UnscoreableError(StateError):
    """Raised when scoring is requested for a question without an outcome."""

    pass


class NotFoundError(ClipscoreError):
    """Raised when a question, user or forecast id is unknown."""

    pass


__all__ = [
    "ClipscoreError",
    "ValidationError",
    "StateError",
    "UnscoreableError",
    "NotFoundError",
]
