"""Repository implementations."""

from .score_history_repository import PostgresScoreHistoryRepository

__all__ = [
    "PostgresScoreHistoryRepository",
]
