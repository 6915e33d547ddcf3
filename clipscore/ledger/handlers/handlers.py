# main handlers module for the ledger - instantiates and makes all handlers available to callers

from typing import Any

from clipscore.ledger.config.scoring_params import ScoringParams
from clipscore.ledger.handlers.intake.submit_forecast import ForecastIntakeHandler
from clipscore.ledger.handlers.resolution.resolve_question import ResolutionHandler
from clipscore.ledger.handlers.rewards.apply_reward import RewardHandler
from clipscore.ledger.handlers.score.score_forecasts import ScoreForecastsHandler
from clipscore.ledger.scoring.audit import get_audit_logger
from clipscore.shared.clock import Clock, SystemClock


class Handlers:
    def __init__(self, database: Any, clock: Clock | None = None, params: ScoringParams | None = None):
        self.database = database
        self.clock = clock or SystemClock()
        settings = getattr(database, "settings", None)
        audit = get_audit_logger()
        self.intake = ForecastIntakeHandler(database, clock=self.clock, params=params)
        self.resolution = ResolutionHandler(database, clock=self.clock, params=params)
        self.rewards = RewardHandler(
            database,
            clock=self.clock,
            audit=audit,
            ledger=settings.ledger if settings is not None else None,
        )
        self.score = ScoreForecastsHandler(
            database,
            clock=self.clock,
            params=params,
            rewards=self.rewards,
            audit=audit,
        )
