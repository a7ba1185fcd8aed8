"""Pydantic schemas for API request/response validation."""

from .score import (
    ScoreRequestSchema,
    ScoreResponseSchema,
    ScoreHistoryResponseSchema,
    PillarScoreSchema,
    FactorScoreSchema,
    HistoryPointSchema,
)
from .error import ErrorResponseSchema

__all__ = [
    "ScoreRequestSchema",
    "ScoreResponseSchema",
    "ScoreHistoryResponseSchema",
    "PillarScoreSchema",
    "FactorScoreSchema",
    "HistoryPointSchema",
    "ErrorResponseSchema",
]
