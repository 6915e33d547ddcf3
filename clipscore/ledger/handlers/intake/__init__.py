from .submit_forecast import ForecastIntakeHandler

__all__ = ["ForecastIntakeHandler"]
