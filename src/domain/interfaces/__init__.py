"""
Domain Interfaces (Ports)
"""

from .repositories import ScoreHistoryRepository

__all__ = [
    "ScoreHistoryRepository",
]
