"""Application services (use cases)."""

from .score_input_builder import build_score_input
from .score_service import ScoreService

__all__ = [
    "build_score_input",
    "ScoreService",
]
