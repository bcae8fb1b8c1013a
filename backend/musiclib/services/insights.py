from __future__ import annotations

import logging
from datetime import timezone, tzinfo
from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from ..db.history import HistoryStore
from ..schemas.analytics import ArtistCountOut, DayStat, InsightOut, ListeningInsights
from .analytics import PlayEvent, aggregate_weekly_pattern, generate_insights, rank_artists
from .errors import UserNotFoundError

logger = logging.getLogger("insights")


def summarize_history(history: Sequence[PlayEvent], *, tz: tzinfo = timezone.utc) -> ListeningInsights:
    weekly = aggregate_weekly_pattern(history, tz=tz)
    insights = generate_insights(weekly, len(history))
    top_artists = rank_artists(history)
    return ListeningInsights(
        insights=[InsightOut(type=i.type, icon=i.icon, text=i.text, value=i.value) for i in insights],
        top_artists=[ArtistCountOut(name=a.name, count=a.count) for a in top_artists],
        day_stats=[DayStat(day=day, count=count) for day, count in weekly.items()],
    )


async def build_listening_insights(
    session: AsyncSession,
    user_id: str,
    *,
    tz: tzinfo = timezone.utc,
) -> ListeningInsights:
    store = HistoryStore(session)
    if not await store.user_exists(user_id):
        raise UserNotFoundError(user_id)
    history = await store.read(user_id)
    logger.debug("summarizing history", extra={"user_id": user_id, "plays": len(history)})
    return summarize_history(history, tz=tz)
