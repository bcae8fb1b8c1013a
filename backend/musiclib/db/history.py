from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..services.analytics import PlayEvent
from . import models

logger = logging.getLogger("history")


class HistoryStore:
    """Read/append access to the per-user play log.

    The log is append-only and ordered by insertion (row id); reads return it
    oldest first with track and artist metadata resolved.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def user_exists(self, user_id: str) -> bool:
        result = await self.session.execute(select(models.User.id).where(models.User.id == user_id))
        return result.scalar_one_or_none() is not None

    async def read(self, user_id: str) -> List[PlayEvent]:
        result = await self.session.execute(
            select(models.PlayRecord)
            .options(selectinload(models.PlayRecord.track).selectinload(models.Track.artist))
            .where(models.PlayRecord.user_id == user_id)
            .order_by(models.PlayRecord.id)
        )
        return [_to_event(record) for record in result.scalars().all()]

    async def read_recent(self, user_id: str, *, limit: int = 50) -> List[PlayEvent]:
        result = await self.session.execute(
            select(models.PlayRecord)
            .options(selectinload(models.PlayRecord.track).selectinload(models.Track.artist))
            .where(models.PlayRecord.user_id == user_id)
            .order_by(models.PlayRecord.id.desc())
            .limit(limit)
        )
        return [_to_event(record) for record in result.scalars().all()]

    async def append(self, user_id: str, track: models.Track, *, played_at: Optional[datetime] = None) -> models.PlayRecord:
        record = models.PlayRecord(
            user_id=user_id,
            track_id=track.id,
            played_at=played_at or datetime.now(timezone.utc),
        )
        self.session.add(record)
        # Incremented in SQL so concurrent plays of one track all count.
        await self.session.execute(
            update(models.Track).where(models.Track.id == track.id).values(play_count=models.Track.play_count + 1)
        )
        await self.session.commit()
        logger.info("recorded play", extra={"user_id": user_id, "track_id": track.id})
        return record


def _to_event(record: models.PlayRecord) -> PlayEvent:
    track = record.track
    artist = track.artist if track is not None else None
    return PlayEvent(
        track_id=track.id if track is not None else None,
        genre=track.genre if track is not None else None,
        artist_id=artist.id if artist is not None else None,
        artist_name=artist.name if artist is not None else None,
        played_at=record.played_at,
        track_title=track.title if track is not None else None,
        duration=(track.duration or 0) if track is not None else 0,
    )
