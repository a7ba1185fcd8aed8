"""Domain Entities - Core business objects."""

from .score_history import ScoreHistoryRecord

__all__ = [
    "ScoreHistoryRecord",
]
