"""Data transfer objects for financial health score operations."""

from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional

from src.domain.entities import ScoreHistoryRecord
from src.service.scoring import PillarScore, ScoreChange, ScoreResult

from .snapshot import FinancialSnapshot


@dataclass(frozen=True)
class ScoreRequest:
    """Input data for scoring a user."""
    user_id: str
    snapshot: FinancialSnapshot

    def validate(self) -> List[str]:
        errors = []

        if not self.user_id or not self.user_id.strip():
            errors.append("user_id is required")

        debt_ids = [d.id for d in self.snapshot.debts]
        if len(debt_ids) != len(set(debt_ids)):
            errors.append("debt ids must be unique")

        for budget in self.snapshot.budgets:
            if budget.budgeted < 0:
                errors.append(f"budget for category {budget.category_id} cannot be negative")

        return errors


@dataclass(frozen=True)
class FactorScoreDTO:
    """One sub-factor in score responses."""
    score: int
    max: int
    percentage: float
    detail: str


@dataclass(frozen=True)
class PillarScoreDTO:
    """One pillar and its sub-factors, keyed by sub-factor name."""
    score: int
    max: int
    factors: Dict[str, FactorScoreDTO]

    @classmethod
    def from_pillar(cls, pillar: PillarScore) -> "PillarScoreDTO":
        return cls(
            score=pillar.score,
            max=pillar.max_score,
            factors={
                f.factor.value: FactorScoreDTO(
                    score=f.score,
                    max=f.max_score,
                    percentage=f.percentage,
                    detail=f.detail,
                )
                for f in pillar.factors
            },
        )


@dataclass(frozen=True)
class ScoreChangeDTO:
    """Change relative to the previous score."""
    change: int
    improved: List[str]
    declined: List[str]


@dataclass(frozen=True)
class HistoryPointDTO:
    """A single day in the score trend."""
    scored_date: str
    total: int
    level: int
    trajectory: int
    behavior: int
    position: int

    @classmethod
    def from_entity(cls, record: ScoreHistoryRecord) -> "HistoryPointDTO":
        return cls(
            scored_date=record.scored_date.isoformat(),
            total=record.total,
            level=record.level,
            trajectory=record.trajectory_score,
            behavior=record.behavior_score,
            position=record.position_score,
        )


@dataclass(frozen=True)
class ScoreResponse:
    """Response data for a financial health score."""

    user_id: str
    scored_date: str
    total: int
    max_total: int
    level: int
    level_title: str
    trajectory: PillarScoreDTO
    behavior: PillarScoreDTO
    position: PillarScoreDTO
    tips: List[str]
    previous_score: Optional[int]
    change: Optional[ScoreChangeDTO]
    data_completeness: Dict[str, bool]
    history: List[HistoryPointDTO]
    history_available: bool

    @classmethod
    def from_result(
        cls,
        user_id: str,
        scored_date: date,
        result: ScoreResult,
        change: Optional[ScoreChange],
        history: List[ScoreHistoryRecord],
        history_available: bool,
        max_total: int,
    ) -> "ScoreResponse":
        return cls(
            user_id=user_id,
            scored_date=scored_date.isoformat(),
            total=result.total,
            max_total=max_total,
            level=result.level,
            level_title=result.level_title,
            trajectory=PillarScoreDTO.from_pillar(result.trajectory),
            behavior=PillarScoreDTO.from_pillar(result.behavior),
            position=PillarScoreDTO.from_pillar(result.position),
            tips=list(result.tips),
            previous_score=result.previous_score,
            change=(
                ScoreChangeDTO(
                    change=change.change,
                    improved=list(change.improved),
                    declined=list(change.declined),
                )
                if change is not None
                else None
            ),
            data_completeness=result.data_completeness.to_dict(),
            history=[HistoryPointDTO.from_entity(r) for r in history],
            history_available=history_available,
        )


@dataclass(frozen=True)
class ScoreHistoryResponse:
    """Response containing a user's score trend, newest first."""

    user_id: str
    history: List[HistoryPointDTO]

    @classmethod
    def from_entities(cls, user_id: str, records: list) -> "ScoreHistoryResponse":
        return cls(
            user_id=user_id,
            history=[HistoryPointDTO.from_entity(r) for r in records],
        )
