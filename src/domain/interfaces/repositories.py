"""Repository interfaces for data persistence."""

from abc import ABC, abstractmethod
from typing import List

from src.domain.entities import ScoreHistoryRecord


class ScoreHistoryRepository(ABC):
    """
    Abstract repository for ScoreHistoryRecord persistence.

    Implementations may use PostgreSQL, in-memory storage, etc. Every method
    raises ScoreHistoryUnavailableException when the store cannot be reached.
    """

    @abstractmethod
    async def upsert(self, record: ScoreHistoryRecord) -> ScoreHistoryRecord:
        """
        Insert a record, or replace the existing one for the same
        (user_id, scored_date).

        Args:
            record: The record to save

        Returns:
            The saved record
        """
        ...

    @abstractmethod
    async def get_recent(self, user_id: str, limit: int = 30) -> List[ScoreHistoryRecord]:
        """
        Retrieve a user's most recent records.

        Args:
            user_id: The user's identifier
            limit: Maximum number of records to return

        Returns:
            List of records, ordered by scored_date descending
        """
        ...

    @abstractmethod
    async def get_latest_two(self, user_id: str) -> List[ScoreHistoryRecord]:
        """
        Retrieve the two most recent records, for delta display.

        Args:
            user_id: The user's identifier

        Returns:
            Zero to two records, newest first
        """
        ...
