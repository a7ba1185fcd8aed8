"""Domain Exceptions - Business rule violations and domain errors."""

from .base import DomainException
from .score import (
    InvalidScoreRequestException,
    ScoreHistoryUnavailableException,
)

__all__ = [
    "DomainException",
    "InvalidScoreRequestException",
    "ScoreHistoryUnavailableException",
]
