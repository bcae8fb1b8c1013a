from __future__ import annotations

from collections import Counter
from datetime import timezone, tzinfo
from typing import Dict, List, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from ..db.history import HistoryStore
from ..schemas.analytics import (
    ArtistCountOut,
    GenreStat,
    HourStat,
    ListeningStats,
    StatsOverview,
    TrackStat,
)
from .analytics import PlayEvent, localize, rank_artists
from .errors import UserNotFoundError

TOP_GENRE_LIMIT = 5
TOP_TRACK_LIMIT = 10


def hourly_pattern(history: Sequence[PlayEvent], *, tz: tzinfo = timezone.utc) -> List[int]:
    buckets = [0] * 24
    for event in history:
        buckets[localize(event.played_at, tz).hour] += 1
    return buckets


def peak_hour(buckets: Sequence[int]) -> Optional[int]:
    if not any(buckets):
        return None
    return max(range(len(buckets)), key=lambda hour: (buckets[hour], -hour))


def _percent(count: int, total: int) -> int:
    # Halves round up, not to even.
    return int(count * 100 / total + 0.5)


def _top(counter: Counter[str], limit: int) -> List[tuple[str, int]]:
    return sorted(counter.items(), key=lambda item: item[1], reverse=True)[:limit]


def compute_listening_stats(history: Sequence[PlayEvent], *, tz: tzinfo = timezone.utc) -> ListeningStats:
    total = len(history)
    genres: Counter[str] = Counter()
    tracks: Counter[str] = Counter()
    titles: Dict[str, Optional[str]] = {}
    for event in history:
        if event.genre is not None:
            genres[event.genre] += 1
        if event.track_id is not None:
            tracks[event.track_id] += 1
            titles.setdefault(event.track_id, event.track_title)

    # Minutes are floored per play, hours from the minute total.
    minutes = sum(event.duration // 60 for event in history)
    buckets = hourly_pattern(history, tz=tz)

    return ListeningStats(
        overview=StatsOverview(
            total_plays=total,
            total_minutes=minutes,
            total_hours=minutes // 60,
            distinct_tracks=len(tracks),
        ),
        top_genres=[
            GenreStat(genre=genre, count=count, percentage=_percent(count, total))
            for genre, count in _top(genres, TOP_GENRE_LIMIT)
        ],
        top_artists=[ArtistCountOut(name=a.name, count=a.count) for a in rank_artists(history)],
        top_tracks=[
            TrackStat(track_id=track_id, title=titles.get(track_id), play_count=count)
            for track_id, count in _top(tracks, TOP_TRACK_LIMIT)
        ],
        listening_by_hour=[HourStat(hour=hour, count=count) for hour, count in enumerate(buckets)],
        peak_hour=peak_hour(buckets),
    )


async def build_listening_stats(
    session: AsyncSession,
    user_id: str,
    *,
    tz: tzinfo = timezone.utc,
) -> ListeningStats:
    store = HistoryStore(session)
    if not await store.user_exists(user_id):
        raise UserNotFoundError(user_id)
    return compute_listening_stats(await store.read(user_id), tz=tz)
