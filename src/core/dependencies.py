"""Dependency injection for FastAPI."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.database import get_db_session
from src.infrastructure.repositories import PostgresScoreHistoryRepository
from src.application.services import ScoreService
from src.domain.interfaces import ScoreHistoryRepository


# Repository dependencies
async def get_score_history_repository(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> ScoreHistoryRepository:
    """Get a ScoreHistoryRepository instance."""
    return PostgresScoreHistoryRepository(session)


# Service dependencies
async def get_score_service(
    history_repo: Annotated[ScoreHistoryRepository, Depends(get_score_history_repository)],
) -> ScoreService:
    """Get a ScoreService instance with all dependencies."""
    return ScoreService(history_repository=history_repo)
