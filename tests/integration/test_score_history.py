"""
Integration tests for score history persistence.

These tests verify:
1. One record per user per day (same-day re-scoring replaces the record)
2. Records are returned newest first and honour the limit
3. Previous score and change come from an earlier day, never today's record
4. Database errors surface as ScoreHistoryUnavailableException
"""

from datetime import date, timedelta
from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from src.domain.entities import ScoreHistoryRecord
from src.domain.exceptions import ScoreHistoryUnavailableException
from src.infrastructure.database import ScoreHistoryModel
from src.infrastructure.repositories import PostgresScoreHistoryRepository
from src.service.scoring import SubFactor
from tests.integration.conftest import FakeClock, make_score_request


def make_record(user_id: str, scored_date: date, total: int = 500) -> ScoreHistoryRecord:
    """Helper to create a history record."""
    return ScoreHistoryRecord(
        user_id=user_id,
        scored_date=scored_date,
        total=total,
        level=2,
        trajectory_score=total // 3,
        behavior_score=total // 3,
        position_score=total - 2 * (total // 3),
        factor_scores={
            SubFactor.WEALTH_BUILDING_RATE: 40,
            SubFactor.PAYMENT_CONSISTENCY: 150,
        },
    )


# =============================================================================
# Repository Tests
# =============================================================================

class TestScoreHistoryRepository:
    """Tests for PostgresScoreHistoryRepository against SQLite."""

    @pytest.mark.asyncio
    async def test_upsert_and_read_back(self, history_repository: PostgresScoreHistoryRepository):
        record = make_record("user_1", date(2025, 9, 1), total=612)

        await history_repository.upsert(record)
        stored = await history_repository.get_recent("user_1")

        assert len(stored) == 1
        assert stored[0].total == 612
        assert stored[0].scored_date == date(2025, 9, 1)
        assert stored[0].factor_scores == {
            SubFactor.WEALTH_BUILDING_RATE: 40,
            SubFactor.PAYMENT_CONSISTENCY: 150,
        }

    @pytest.mark.asyncio
    async def test_same_day_upsert_replaces(
        self,
        history_repository: PostgresScoreHistoryRepository,
        test_session,
    ):
        day = date(2025, 9, 1)

        await history_repository.upsert(make_record("user_1", day, total=500))
        await history_repository.upsert(make_record("user_1", day, total=540))

        stored = await history_repository.get_recent("user_1")
        assert len(stored) == 1
        assert stored[0].total == 540

        count = await test_session.scalar(
            select(func.count()).select_from(ScoreHistoryModel)
        )
        assert count == 1

    @pytest.mark.asyncio
    async def test_newest_first_with_limit(self, history_repository: PostgresScoreHistoryRepository):
        start = date(2025, 9, 1)
        for offset in range(5):
            await history_repository.upsert(
                make_record("user_1", start + timedelta(days=offset), total=500 + offset)
            )

        stored = await history_repository.get_recent("user_1", limit=3)

        assert [r.scored_date for r in stored] == [
            date(2025, 9, 5),
            date(2025, 9, 4),
            date(2025, 9, 3),
        ]

    @pytest.mark.asyncio
    async def test_latest_two(self, history_repository: PostgresScoreHistoryRepository):
        for offset, total in enumerate([480, 500, 530]):
            await history_repository.upsert(
                make_record("user_1", date(2025, 9, 1) + timedelta(days=offset), total=total)
            )

        latest = await history_repository.get_latest_two("user_1")

        assert [r.total for r in latest] == [530, 500]

    @pytest.mark.asyncio
    async def test_users_are_isolated(self, history_repository: PostgresScoreHistoryRepository):
        await history_repository.upsert(make_record("user_1", date(2025, 9, 1)))
        await history_repository.upsert(make_record("user_2", date(2025, 9, 1)))

        assert len(await history_repository.get_recent("user_1")) == 1
        assert await history_repository.get_recent("user_3") == []

    @pytest.mark.asyncio
    async def test_read_error_raises_unavailable(self, test_session, monkeypatch):
        repository = PostgresScoreHistoryRepository(test_session)
        monkeypatch.setattr(
            test_session,
            "execute",
            AsyncMock(side_effect=OperationalError("SELECT", {}, Exception("db down"))),
        )

        with pytest.raises(ScoreHistoryUnavailableException) as exc_info:
            await repository.get_recent("user_1")

        assert exc_info.value.operation == "read"

    @pytest.mark.asyncio
    async def test_write_error_raises_unavailable(self, test_session, monkeypatch):
        repository = PostgresScoreHistoryRepository(test_session)
        monkeypatch.setattr(
            test_session,
            "execute",
            AsyncMock(side_effect=OperationalError("INSERT", {}, Exception("db down"))),
        )

        with pytest.raises(ScoreHistoryUnavailableException) as exc_info:
            await repository.upsert(make_record("user_1", date(2025, 9, 1)))

        assert exc_info.value.operation == "upsert"


# =============================================================================
# Day-over-Day Tests
# =============================================================================

class TestScoreOverTime:
    """Tests for previous score and change across days via the API."""

    @pytest.mark.asyncio
    async def test_rescoring_same_day_keeps_one_record(
        self,
        clocked_client: AsyncClient,
    ):
        body = make_score_request()

        await clocked_client.post("/v1/score", json=body)
        second = (await clocked_client.post("/v1/score", json=body)).json()

        assert len(second["history"]) == 1
        assert second["previous_score"] is None
        assert second["change"] is None

    @pytest.mark.asyncio
    async def test_previous_score_from_earlier_day(
        self,
        clocked_client: AsyncClient,
        clock: FakeClock,
    ):
        first = (await clocked_client.post("/v1/score", json=make_score_request())).json()

        clock.advance(1)
        second = (await clocked_client.post("/v1/score", json=make_score_request())).json()

        assert second["previous_score"] == first["total"]
        assert second["change"]["change"] == second["total"] - first["total"]
        assert [p["scored_date"] for p in second["history"]] == [
            "2025-09-16",
            "2025-09-15",
        ]

    @pytest.mark.asyncio
    async def test_change_lists_moved_factors(
        self,
        clocked_client: AsyncClient,
        clock: FakeClock,
    ):
        await clocked_client.post("/v1/score", json=make_score_request(savings_goals=[]))

        clock.advance(1)
        response = await clocked_client.post(
            "/v1/score",
            json=make_score_request(savings_goals=[
                {"type": "emergency", "current_amount": 20000, "monthly_contribution": 1000},
            ]),
        )
        change = response.json()["change"]

        assert "Wealth Building" in change["improved"]
        assert "Emergency Fund" in change["improved"]
        assert change["declined"] == []
        assert change["change"] > 0

    @pytest.mark.asyncio
    async def test_same_day_rescore_compares_with_yesterday(
        self,
        clocked_client: AsyncClient,
        clock: FakeClock,
    ):
        yesterday = (await clocked_client.post("/v1/score", json=make_score_request())).json()

        clock.advance(1)
        await clocked_client.post("/v1/score", json=make_score_request())
        again = (await clocked_client.post("/v1/score", json=make_score_request())).json()

        assert again["previous_score"] == yesterday["total"]
        assert len(again["history"]) == 2
