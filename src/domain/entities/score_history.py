"""Score history entity: one persisted score per user per calendar day."""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, Optional
from uuid import UUID, uuid4

from src.service.scoring import ScoreResult, SubFactor


@dataclass
class ScoreHistoryRecord:
    """
    A user's Financial Health Score as of one calendar day.

    Re-scoring on the same day replaces the record, so a user has at most one
    record per scored_date.
    """

    user_id: str
    scored_date: date
    total: int
    level: int
    trajectory_score: int
    behavior_score: int
    position_score: int
    factor_scores: Dict[SubFactor, int] = field(default_factory=dict)
    id: UUID = field(default_factory=uuid4)
    created_at: Optional[datetime] = None

    @classmethod
    def from_result(
        cls,
        user_id: str,
        scored_date: date,
        result: ScoreResult,
    ) -> "ScoreHistoryRecord":
        """Snapshot a freshly computed result for persistence."""
        return cls(
            user_id=user_id,
            scored_date=scored_date,
            total=result.total,
            level=result.level,
            trajectory_score=result.trajectory.score,
            behavior_score=result.behavior.score,
            position_score=result.position.score,
            factor_scores={factor: f.score for factor, f in result.factors.items()},
        )
