from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.security import get_current_user_id
from ...db.catalog import TrackCatalog
from ...db.history import HistoryStore
from ...schemas.analytics import ErrorResponse, PlayRecordedResponse, RecentPlay, RecentlyPlayedResponse
from ..deps import get_db_session

RECENT_LIMIT = 50

logger = logging.getLogger("api.history")

router = APIRouter(
    prefix="/v1/users/recently-played",
    tags=["history"],
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)


@router.get("", response_model=RecentlyPlayedResponse)
async def get_recently_played(
    *,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
) -> RecentlyPlayedResponse:
    store = HistoryStore(session)
    try:
        if not await store.user_exists(user_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
        events = await store.read_recent(user_id, limit=RECENT_LIMIT)
    except SQLAlchemyError as exc:
        logger.exception("history read failed", extra={"user_id": user_id})
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to load history") from exc
    return RecentlyPlayedResponse(
        data=[
            RecentPlay(
                track_id=event.track_id,
                title=event.track_title,
                artist_name=event.artist_name,
                genre=event.genre,
                played_at=event.played_at,
            )
            for event in events
        ]
    )


@router.post("/{track_id}", response_model=PlayRecordedResponse)
async def record_play(
    track_id: str,
    *,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
) -> PlayRecordedResponse:
    store = HistoryStore(session)
    try:
        if not await store.user_exists(user_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
        track = await TrackCatalog(session).get(track_id)
        if track is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Track not found")
        await store.append(user_id, track)
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.exception("play recording failed", extra={"user_id": user_id, "track_id": track_id})
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to record play") from exc
    return PlayRecordedResponse()
