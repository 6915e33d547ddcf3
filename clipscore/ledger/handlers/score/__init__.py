from .score_forecasts import ScoreForecastsHandler

__all__ = ["ScoreForecastsHandler"]
