"""
Fixtures for integration tests.

Provides:
- Test client for FastAPI app
- In-memory database for testing
- A history repository that always fails, for degradation tests
- A controllable clock for multi-day history tests
"""

from datetime import date, timedelta
from typing import AsyncGenerator, List

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from src.main import app
from src.application.services import ScoreService
from src.core.dependencies import get_score_history_repository, get_score_service
from src.domain.entities import ScoreHistoryRecord
from src.domain.exceptions import ScoreHistoryUnavailableException
from src.domain.interfaces import ScoreHistoryRepository
from src.infrastructure.database import Base
from src.infrastructure.repositories import PostgresScoreHistoryRepository


# =============================================================================
# Test Doubles
# =============================================================================

class FailingScoreHistoryRepository(ScoreHistoryRepository):
    """History store that is always down."""

    def __init__(self):
        self.call_count = 0

    async def upsert(self, record: ScoreHistoryRecord) -> ScoreHistoryRecord:
        self.call_count += 1
        raise ScoreHistoryUnavailableException(operation="upsert")

    async def get_recent(self, user_id: str, limit: int = 30) -> List[ScoreHistoryRecord]:
        self.call_count += 1
        raise ScoreHistoryUnavailableException(operation="read")

    async def get_latest_two(self, user_id: str) -> List[ScoreHistoryRecord]:
        return await self.get_recent(user_id, limit=2)


class FakeClock:
    """A settable 'today' for the score service."""

    def __init__(self, today: date):
        self.today = today

    def __call__(self) -> date:
        return self.today

    def advance(self, days: int = 1) -> None:
        self.today += timedelta(days=days)


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def test_engine():
    """Create an in-memory SQLite async engine for testing."""
    # Use SQLite with aiosqlite for async support
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    # Create tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Cleanup
    await engine.dispose()


@pytest_asyncio.fixture
async def test_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async_session = async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

    async with async_session() as session:
        yield session


@pytest.fixture
def history_repository(test_session: AsyncSession) -> PostgresScoreHistoryRepository:
    """Score history repository bound to the test session."""
    return PostgresScoreHistoryRepository(test_session)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(date(2025, 9, 15))


# =============================================================================
# App Client Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def client(test_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client with mocked dependencies.

    This client:
    - Uses an in-memory SQLite database
    - Scores against the real calendar date
    """
    async def override_get_score_history_repository():
        return PostgresScoreHistoryRepository(test_session)

    app.dependency_overrides[get_score_history_repository] = override_get_score_history_repository

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def clocked_client(
    history_repository: PostgresScoreHistoryRepository,
    clock: FakeClock,
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client whose 'today' is controlled by the clock fixture."""
    async def override_get_score_service():
        return ScoreService(history_repository=history_repository, today=clock)

    app.dependency_overrides[get_score_service] = override_get_score_service

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client_with_failing_history() -> AsyncGenerator[AsyncClient, None]:
    """Create a test client where the score history store always fails."""
    failing_repository = FailingScoreHistoryRepository()

    async def override_get_score_history_repository():
        return failing_repository

    app.dependency_overrides[get_score_history_repository] = override_get_score_history_repository

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# =============================================================================
# Helper Fixtures
# =============================================================================

def make_score_request(user_id: str = "user_123", **overrides) -> dict:
    """
    Request body for a dual-income household paying down a card.

    $5,000 confirmed income, a $3,000 card with $450 paid over the last three
    months, 12 bills on time and $6,000 in liquid savings.
    """
    today = date.today()
    body = {
        "user_id": user_id,
        "profile": {
            "monthly_income": 5000,
            "income_confirmed": True,
            "household_type": "dual_income",
        },
        "accounts": [
            {"type": "checking", "balance": 2000},
            {"type": "savings", "balance": 4000},
        ],
        "debts": [
            {
                "id": "cc-1",
                "type": "credit_card",
                "current_balance": 3000,
                "monthly_payment": 150,
                "apr": 22.9,
            }
        ],
        "debt_payments": [
            {"debt_id": "cc-1", "date": (today - timedelta(days=d)).isoformat(), "amount": 150}
            for d in (10, 40, 70)
        ],
        "savings_goals": [
            {"type": "emergency", "current_amount": 0, "monthly_contribution": 250}
        ],
        "bill_payments": [
            {"due_date": (today - timedelta(days=30 * m + 5)).isoformat(), "status": "on_time"}
            for m in range(12)
        ],
        "budgets": [
            {"category_id": "groceries", "budgeted": 600},
            {"category_id": "dining", "budgeted": 200},
        ],
        "transactions": [
            {"date": (today - timedelta(days=120)).isoformat(), "amount": -40, "category_id": "gas"},
        ],
    }
    body.update(overrides)
    return body


@pytest.fixture
def score_request() -> dict:
    """Request body for user_123."""
    return make_score_request()
