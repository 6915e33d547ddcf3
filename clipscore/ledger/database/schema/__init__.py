"""Ledger schema. Importing this package registers every table on metadata."""

from .base import Base, metadata
from .forecasts import Forecast
from .questions import Question
from .rewards import RewardSettlement
from .users import User

__all__ = ["Base", "metadata", "User", "Question", "Forecast", "RewardSettlement"]
