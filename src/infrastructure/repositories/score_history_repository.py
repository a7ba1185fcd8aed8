"""PostgreSQL implementation of ScoreHistoryRepository."""

from typing import List
from uuid import UUID

import structlog
from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities import ScoreHistoryRecord
from src.domain.exceptions import ScoreHistoryUnavailableException
from src.domain.interfaces import ScoreHistoryRepository
from src.infrastructure.database.models import ScoreHistoryModel
from src.service.scoring import SubFactor

logger = structlog.get_logger(__name__)

UPSERT_COLUMNS = (
    "total_score",
    "level",
    "trajectory_score",
    "behavior_score",
    "position_score",
    "factor_scores",
    "created_at",
)


class PostgresScoreHistoryRepository(ScoreHistoryRepository):
    """
    PostgreSQL implementation of the ScoreHistory repository.

    Uses SQLAlchemy async session for database operations. The upsert relies
    on the uq_score_history_user_date constraint; SQLite (used in tests)
    supports the same ON CONFLICT clause.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    async def upsert(self, record: ScoreHistoryRecord) -> ScoreHistoryRecord:
        """Insert the day's record or overwrite the existing one."""
        values = {
            "id": str(record.id),
            "user_id": record.user_id,
            "scored_date": record.scored_date,
            "total_score": record.total,
            "level": record.level,
            "trajectory_score": record.trajectory_score,
            "behavior_score": record.behavior_score,
            "position_score": record.position_score,
            "factor_scores": {
                factor.value: score for factor, score in record.factor_scores.items()
            },
        }
        if record.created_at is not None:
            values["created_at"] = record.created_at

        try:
            stmt = self._insert()(ScoreHistoryModel).values(**values)
            stmt = stmt.on_conflict_do_update(
                index_elements=["user_id", "scored_date"],
                set_={column: getattr(stmt.excluded, column) for column in UPSERT_COLUMNS},
            )
            await self._session.execute(stmt)
            await self._session.flush()
        except SQLAlchemyError as e:
            logger.warning(
                "score_history_write_failed",
                user_id=record.user_id,
                error=str(e),
            )
            raise ScoreHistoryUnavailableException(operation="upsert") from e

        return record

    async def get_recent(self, user_id: str, limit: int = 30) -> List[ScoreHistoryRecord]:
        """Retrieve records for a user, ordered by scored_date descending."""
        stmt = (
            select(ScoreHistoryModel)
            .where(ScoreHistoryModel.user_id == user_id)
            .order_by(ScoreHistoryModel.scored_date.desc())
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        try:
            result = await self._session.execute(stmt)
            models = result.scalars().all()
        except SQLAlchemyError as e:
            logger.warning(
                "score_history_read_failed",
                user_id=user_id,
                error=str(e),
            )
            raise ScoreHistoryUnavailableException(operation="read") from e

        return [self._to_entity(model) for model in models]

    async def get_latest_two(self, user_id: str) -> List[ScoreHistoryRecord]:
        """Retrieve the two most recent records for a user."""
        return await self.get_recent(user_id, limit=2)

    def _insert(self):
        """Pick the INSERT construct matching the session's dialect."""
        dialect = self._session.get_bind().dialect.name
        if dialect == "sqlite":
            return sqlite.insert
        return postgresql.insert

    def _to_entity(self, model: ScoreHistoryModel) -> ScoreHistoryRecord:
        """Convert database model to domain entity."""
        factor_scores = {}
        for key, score in (model.factor_scores or {}).items():
            try:
                factor_scores[SubFactor(key)] = int(score)
            except ValueError:
                logger.warning("unknown_stored_factor", factor=key, record_id=model.id)

        return ScoreHistoryRecord(
            id=UUID(model.id),
            user_id=model.user_id,
            scored_date=model.scored_date,
            total=model.total_score,
            level=model.level,
            trajectory_score=model.trajectory_score,
            behavior_score=model.behavior_score,
            position_score=model.position_score,
            factor_scores=factor_scores,
            created_at=model.created_at,
        )
