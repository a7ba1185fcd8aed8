"""Data Transfer Objects for application layer."""

from .snapshot import (
    Account,
    SavingsGoal,
    SavingsContribution,
    FinancialProfile,
    FinancialSnapshot,
)
from .score import (
    ScoreRequest,
    ScoreResponse,
    ScoreHistoryResponse,
    PillarScoreDTO,
    FactorScoreDTO,
    ScoreChangeDTO,
    HistoryPointDTO,
)

__all__ = [
    "Account",
    "SavingsGoal",
    "SavingsContribution",
    "FinancialProfile",
    "FinancialSnapshot",
    "ScoreRequest",
    "ScoreResponse",
    "ScoreHistoryResponse",
    "PillarScoreDTO",
    "FactorScoreDTO",
    "ScoreChangeDTO",
    "HistoryPointDTO",
]
