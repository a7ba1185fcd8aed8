"""Financial health score API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from src.application.dto import ScoreRequest, ScoreResponse
from src.application.dto.score import HistoryPointDTO, PillarScoreDTO
from src.application.services import ScoreService
from src.core.config import settings
from src.core.dependencies import get_score_service
from src.core.metrics import record_score, track_score_latency
from src.presentation.schemas import (
    ErrorResponseSchema,
    ScoreHistoryResponseSchema,
    ScoreRequestSchema,
    ScoreResponseSchema,
)
from src.presentation.schemas.score import (
    FactorScoreSchema,
    HistoryPointSchema,
    PillarScoreSchema,
    ScoreChangeSchema,
)
from src.service.scoring import scoring_settings

score_router = APIRouter(
    prefix="/score",
    responses={
        400: {"model": ErrorResponseSchema, "description": "Invalid request"},
    },
)


def _pillar_schema(pillar: PillarScoreDTO) -> PillarScoreSchema:
    return PillarScoreSchema(
        score=pillar.score,
        max=pillar.max,
        factors={
            name: FactorScoreSchema(
                score=f.score,
                max=f.max,
                percentage=f.percentage,
                detail=f.detail,
            )
            for name, f in pillar.factors.items()
        },
    )


def _history_schema(point: HistoryPointDTO) -> HistoryPointSchema:
    return HistoryPointSchema(
        scored_date=point.scored_date,
        total=point.total,
        level=point.level,
        trajectory=point.trajectory,
        behavior=point.behavior,
        position=point.position,
    )


def _low_factors(response: ScoreResponse) -> list:
    return [
        name
        for pillar in (response.trajectory, response.behavior, response.position)
        for name, f in pillar.factors.items()
        if f.percentage < scoring_settings.tip_threshold_pct
    ]


@score_router.post(
    "",
    response_model=ScoreResponseSchema,
    status_code=200,
    summary="Calculate Financial Health Score",
    description="""Score a user's financial snapshot and record today's score""",
    responses={
        200: {"description": "Score calculated successfully"},
    },
)
async def calculate_score(
    request: ScoreRequestSchema,
    score_service: Annotated[ScoreService, Depends(get_score_service)],
) -> ScoreResponseSchema:
    """
    Calculate the Financial Health Score for a user.

    Returns the 0-1000 score, its pillar breakdown, improvement tips and the
    recent trend. If score history is unavailable the score is still returned
    with history_available set to false.
    """
    dto = ScoreRequest(user_id=request.user_id, snapshot=request.to_snapshot())

    with track_score_latency():
        response = await score_service.calculate_score(dto)

    # Record business metrics
    record_score(response.level, response.total, _low_factors(response))

    return ScoreResponseSchema(
        user_id=response.user_id,
        scored_date=response.scored_date,
        total=response.total,
        max_total=response.max_total,
        level=response.level,
        level_title=response.level_title,
        trajectory=_pillar_schema(response.trajectory),
        behavior=_pillar_schema(response.behavior),
        position=_pillar_schema(response.position),
        tips=response.tips,
        previous_score=response.previous_score,
        change=(
            ScoreChangeSchema(
                change=response.change.change,
                improved=response.change.improved,
                declined=response.change.declined,
            )
            if response.change is not None
            else None
        ),
        data_completeness=response.data_completeness,
        history=[_history_schema(p) for p in response.history],
        history_available=response.history_available,
    )


@score_router.get(
    "/history",
    response_model=ScoreHistoryResponseSchema,
    summary="Get Score History",
    description="""
    Retrieve the daily score history for a user.

    Returns at most one record per day, ordered by date (newest first).
    """,
    responses={
        200: {"description": "History retrieved successfully"},
        503: {"model": ErrorResponseSchema, "description": "Score history unavailable"},
    },
)
async def get_score_history(
    user_id: Annotated[
        str,
        Query(
            min_length=1,
            max_length=255,
            description="User ID to get history for",
        ),
    ],
    limit: Annotated[
        int,
        Query(
            ge=1,
            le=settings.history_max_limit,
            description="Maximum number of daily records to return",
        ),
    ] = settings.history_window,
    score_service: Annotated[ScoreService, Depends(get_score_service)] = None,
) -> ScoreHistoryResponseSchema:
    """
    Get recent score history for a user.

    Returns records ordered by scored_date descending.
    """
    response = await score_service.get_score_history(user_id, limit)

    return ScoreHistoryResponseSchema(
        user_id=response.user_id,
        history=[_history_schema(p) for p in response.history],
    )
