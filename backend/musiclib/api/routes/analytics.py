from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.config import Settings
from ...core.security import get_current_user_id
from ...schemas.analytics import (
    ErrorResponse,
    InsightsResponse,
    RecommendationsResponse,
    StatsResponse,
    TrackOut,
)
from ...services.errors import UserNotFoundError
from ...services.insights import build_listening_insights
from ...services.recommendations import recommend_for_user
from ...services.stats import build_listening_stats
from ..deps import get_db_session, get_settings_dep

logger = logging.getLogger("api.analytics")

router = APIRouter(
    prefix="/v1",
    tags=["analytics"],
    responses={
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)


@router.get("/tracks/recommendations", response_model=RecommendationsResponse)
async def get_recommendations(
    *,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings_dep),
) -> RecommendationsResponse:
    try:
        tracks = await recommend_for_user(session, user_id, limit=settings.recommendation_limit)
    except UserNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found") from exc
    except SQLAlchemyError as exc:
        logger.exception("recommendation query failed", extra={"user_id": user_id})
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to load recommendations") from exc
    return RecommendationsResponse(data=[TrackOut.model_validate(track) for track in tracks])


@router.get("/smart-stats", response_model=InsightsResponse)
async def get_listening_insights(
    *,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings_dep),
) -> InsightsResponse:
    try:
        data = await build_listening_insights(session, user_id, tz=settings.analytics_tz)
    except UserNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found") from exc
    except SQLAlchemyError as exc:
        logger.exception("insight query failed", extra={"user_id": user_id})
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to load listening insights") from exc
    return InsightsResponse(data=data)


@router.get("/users/stats", response_model=StatsResponse)
async def get_listening_stats(
    *,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings_dep),
) -> StatsResponse:
    try:
        data = await build_listening_stats(session, user_id, tz=settings.analytics_tz)
    except UserNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found") from exc
    except SQLAlchemyError as exc:
        logger.exception("stats query failed", extra={"user_id": user_id})
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to load listening stats") from exc
    return StatsResponse(data=data)
