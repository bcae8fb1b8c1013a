from __future__ import annotations

import logging
from typing import Collection, List, Protocol, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from ..db import models
from ..db.catalog import TrackCatalog
from ..db.history import HistoryStore
from .analytics import PlayEvent, extract_genre_affinity, played_track_ids
from .errors import UserNotFoundError

RECOMMENDATION_LIMIT = 10

logger = logging.getLogger("recommendations")


class Catalog(Protocol):
    async def by_genre_excluding(self, genre: str, exclude_ids: Collection[str], limit: int) -> List[models.Track]: ...

    async def by_popularity_excluding(self, exclude_ids: Collection[str], limit: int) -> List[models.Track]: ...


async def rank_recommendations(
    catalog: Catalog,
    history: Sequence[PlayEvent],
    *,
    limit: int = RECOMMENDATION_LIMIT,
) -> List[models.Track]:
    """Unplayed tracks from the favorite genre, topped up by global popularity.

    Genre matches always come first; the remainder is filled with the most
    played tracks the user has not heard and that are not already picked.
    With no genre signal the whole list comes from popularity.
    """
    played = played_track_ids(history)
    affinity = extract_genre_affinity(history)

    primary: List[models.Track] = []
    if affinity.favorite is not None and limit > 0:
        primary = await catalog.by_genre_excluding(affinity.favorite, played, limit)
        primary = _dedupe(primary, played)[:limit]

    fallback: List[models.Track] = []
    shortfall = limit - len(primary)
    if shortfall > 0:
        excluded = played | {track.id for track in primary}
        fallback = await catalog.by_popularity_excluding(excluded, shortfall)
        fallback = _dedupe(fallback, excluded)[:shortfall]

    logger.debug(
        "ranked recommendations",
        extra={
            "favorite_genre": affinity.favorite,
            "played": len(played),
            "genre_matches": len(primary),
            "popular_fill": len(fallback),
        },
    )
    return primary + fallback


def _dedupe(tracks: Sequence[models.Track], excluded: Collection[str]) -> List[models.Track]:
    seen = set(excluded)
    unique: List[models.Track] = []
    for track in tracks:
        if track.id in seen:
            continue
        seen.add(track.id)
        unique.append(track)
    return unique


async def recommend_for_user(
    session: AsyncSession,
    user_id: str,
    *,
    limit: int = RECOMMENDATION_LIMIT,
) -> List[models.Track]:
    store = HistoryStore(session)
    if not await store.user_exists(user_id):
        raise UserNotFoundError(user_id)
    history = await store.read(user_id)
    return await rank_recommendations(TrackCatalog(session), history, limit=limit)
