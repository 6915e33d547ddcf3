from .handlers import Handlers

__all__ = ["Handlers"]
