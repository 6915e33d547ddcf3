from .resolve_question import ResolutionHandler

__all__ = ["ResolutionHandler"]
