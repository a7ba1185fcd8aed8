"""Score service - orchestrates the financial health score use case."""

from datetime import date
from typing import Callable, List, Optional, Tuple

import structlog

from src.application.dto import ScoreHistoryResponse, ScoreRequest, ScoreResponse
from src.application.services.score_input_builder import build_score_input
from src.core.config import settings
from src.core.metrics import record_history_failure
from src.domain.entities import ScoreHistoryRecord
from src.domain.exceptions import (
    InvalidScoreRequestException,
    ScoreHistoryUnavailableException,
)
from src.domain.interfaces import ScoreHistoryRepository
from src.service.scoring import (
    ScoreChange,
    ScoringSettings,
    calculate_financial_health_score,
    calculate_score_change,
    explain_score,
    scoring_settings,
)
from src.service.scoring.models import MAX_TOTAL_SCORE

logger = structlog.get_logger(__name__)


class ScoreService:
    """
    Application service for financial health score use cases.

    History is best-effort: when the store is unavailable a score is still
    returned, without a previous score or trend.
    """

    def __init__(
        self,
        history_repository: ScoreHistoryRepository,
        today: Callable[[], date] = date.today,
        scoring: ScoringSettings = scoring_settings,
        history_window: int = settings.history_window,
    ):
        self._history_repo = history_repository
        self._today = today
        self._scoring = scoring
        self._history_window = history_window

    async def calculate_score(self, request: ScoreRequest) -> ScoreResponse:
        """
        Score a user and record the result for today.

        Args:
            request: The user id and their raw financial snapshot

        Returns:
            ScoreResponse with the score, tips, change and trend

        Raises:
            InvalidScoreRequestException: If request validation fails
        """
        errors = request.validate()
        if errors:
            raise InvalidScoreRequestException("; ".join(errors))

        scored_date = self._today()
        log = logger.bind(user_id=request.user_id, scored_date=scored_date.isoformat())
        log.info("score_requested")

        history_available = True
        try:
            latest = await self._history_repo.get_latest_two(request.user_id)
        except ScoreHistoryUnavailableException as e:
            self._history_degraded(log, e)
            history_available = False
            latest = []

        previous = self._previous_record(latest, scored_date)

        try:
            score_input = build_score_input(request.snapshot, scored_date)
        except ValueError as e:
            raise InvalidScoreRequestException(str(e)) from e

        result = calculate_financial_health_score(
            score_input,
            previous_score=previous.total if previous else None,
            settings=self._scoring,
        )

        change: Optional[ScoreChange] = None
        if previous is not None:
            change = calculate_score_change(result, previous.total, previous.factor_scores)

        record = ScoreHistoryRecord.from_result(request.user_id, scored_date, result)
        history, history_available = await self._record_and_load_history(
            record, history_available, log
        )

        log.info(
            "score_calculated",
            total=result.total,
            level=result.level,
            previous_score=result.previous_score,
            history_available=history_available,
            data_complete=result.data_completeness.is_complete,
        )
        log.debug("score_explained", explanation=explain_score(result))

        return ScoreResponse.from_result(
            user_id=request.user_id,
            scored_date=scored_date,
            result=result,
            change=change,
            history=history,
            history_available=history_available,
            max_total=MAX_TOTAL_SCORE,
        )

    async def get_score_history(self, user_id: str, limit: int = 30) -> ScoreHistoryResponse:
        """
        Get a user's score trend.

        Args:
            user_id: The user's identifier
            limit: Maximum number of daily records to return

        Returns:
            ScoreHistoryResponse, newest first

        Raises:
            ScoreHistoryUnavailableException: If the store cannot be read
        """
        try:
            records = await self._history_repo.get_recent(user_id, limit=limit)
        except ScoreHistoryUnavailableException:
            record_history_failure("read")
            raise
        return ScoreHistoryResponse.from_entities(user_id, records)

    async def _record_and_load_history(
        self,
        record: ScoreHistoryRecord,
        history_available: bool,
        log,
    ) -> Tuple[List[ScoreHistoryRecord], bool]:
        """Upsert today's record, then read back the trend."""
        try:
            await self._history_repo.upsert(record)
        except ScoreHistoryUnavailableException as e:
            self._history_degraded(log, e)
            return [], False

        if not history_available:
            return [record], False

        try:
            history = await self._history_repo.get_recent(
                record.user_id, limit=self._history_window
            )
        except ScoreHistoryUnavailableException as e:
            self._history_degraded(log, e)
            return [record], False

        return history, True

    def _previous_record(
        self,
        latest: List[ScoreHistoryRecord],
        scored_date: date,
    ) -> Optional[ScoreHistoryRecord]:
        """Most recent record from an earlier day (today's own record is skipped)."""
        for record in latest:
            if record.scored_date < scored_date:
                return record
        return None

    def _history_degraded(self, log, error: ScoreHistoryUnavailableException) -> None:
        record_history_failure(error.operation)
        log.warning(
            "score_history_unavailable",
            operation=error.operation,
            error=error.message,
        )
