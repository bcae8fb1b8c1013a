from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from musiclib.db import models
from musiclib.db.base import Base
from musiclib.services.analytics import PlayEvent

# 2024-01-07 is a Sunday.
SUNDAY = datetime(2024, 1, 7, 12, 0, tzinfo=timezone.utc)


def on_day(offset: int, *, hour: int = 12) -> datetime:
    """UTC noon ``offset`` days after a Sunday (0=Sun .. 6=Sat)."""
    return (SUNDAY + timedelta(days=offset)).replace(hour=hour)


def play(
    track_id: Optional[str] = "t1",
    *,
    genre: Optional[str] = None,
    artist: Optional[str] = None,
    artist_id: Optional[str] = None,
    played_at: Optional[datetime] = None,
    duration: int = 180,
) -> PlayEvent:
    return PlayEvent(
        track_id=track_id,
        genre=genre,
        artist_id=artist_id if artist_id is not None else (f"id-{artist}" if artist else None),
        artist_name=artist,
        played_at=played_at or SUNDAY,
        track_title=f"Song {track_id}" if track_id else None,
        duration=duration,
    )


def make_track(track_id: str, *, genre: Optional[str] = None, play_count: int = 0, artist_id: Optional[str] = None) -> models.Track:
    return models.Track(
        id=track_id,
        title=f"Song {track_id}",
        album="Album",
        duration=200,
        audio_url=f"https://cdn.example.com/{track_id}.mp3",
        image_url=f"https://cdn.example.com/{track_id}.jpg",
        genre=genre,
        play_count=play_count,
        likes=0,
        artist_id=artist_id,
    )


@asynccontextmanager
async def open_session(url: str) -> AsyncIterator[async_sessionmaker[AsyncSession]]:
    engine = create_async_engine(url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield async_sessionmaker(engine, expire_on_commit=False)
    finally:
        await engine.dispose()


async def seed(session: AsyncSession, rows: Iterable[object]) -> None:
    for row in rows:
        session.add(row)
        # Flush one by one so play rows keep their insertion order.
        await session.flush()
    await session.commit()
