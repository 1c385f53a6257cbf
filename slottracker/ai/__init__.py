"""AI commentary over slot statistics."""

from .commentary import CommentaryService, LuckForecast, SlotInsights
from .state import build_snapshot

__all__ = ["CommentaryService", "LuckForecast", "SlotInsights", "build_snapshot"]
