"""SQLAlchemy ORM models for score history."""

from datetime import datetime, date
from uuid import uuid4

from sqlalchemy import (
    Date,
    DateTime,
    Integer,
    JSON,
    String,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class ScoreHistoryModel(Base):
    """Persisted daily Financial Health Score snapshot."""

    __tablename__ = "score_history"
    __table_args__ = (
        UniqueConstraint("user_id", "scored_date", name="uq_score_history_user_date"),
    )

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    scored_date: Mapped[date] = mapped_column(Date, nullable=False)
    total_score: Mapped[int] = mapped_column(Integer, nullable=False)
    level: Mapped[int] = mapped_column(Integer, nullable=False)
    trajectory_score: Mapped[int] = mapped_column(Integer, nullable=False)
    behavior_score: Mapped[int] = mapped_column(Integer, nullable=False)
    position_score: Mapped[int] = mapped_column(Integer, nullable=False)
    factor_scores: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=datetime.utcnow,
    )
