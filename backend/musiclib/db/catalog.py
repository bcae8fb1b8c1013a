from __future__ import annotations

from typing import Collection, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from . import models


class TrackCatalog:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, track_id: str) -> Optional[models.Track]:
        return await self.session.get(models.Track, track_id)

    async def by_genre_excluding(self, genre: str, exclude_ids: Collection[str], limit: int) -> List[models.Track]:
        # Ascending id keeps the genre block deterministic across backends.
        stmt = select(models.Track).options(selectinload(models.Track.artist)).where(models.Track.genre == genre)
        if exclude_ids:
            stmt = stmt.where(models.Track.id.not_in(list(exclude_ids)))
        result = await self.session.execute(stmt.order_by(models.Track.id).limit(limit))
        return list(result.scalars().all())

    async def by_popularity_excluding(self, exclude_ids: Collection[str], limit: int) -> List[models.Track]:
        stmt = select(models.Track).options(selectinload(models.Track.artist))
        if exclude_ids:
            stmt = stmt.where(models.Track.id.not_in(list(exclude_ids)))
        result = await self.session.execute(
            stmt.order_by(models.Track.play_count.desc(), models.Track.id).limit(limit)
        )
        return list(result.scalars().all())
