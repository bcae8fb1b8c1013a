from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone, tzinfo
from typing import Dict, Iterable, List, Optional, Sequence, Set

GENRE_WINDOW = 50
TOP_ARTIST_LIMIT = 5
TOTAL_PLAYS_INSIGHT_THRESHOLD = 5

# Fixed bucket order; also the scan order for the favorite-day tie-break.
WEEKDAY_LABELS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")
WEEKDAY_NAMES = {
    "Sun": "Sunday",
    "Mon": "Monday",
    "Tue": "Tuesday",
    "Wed": "Wednesday",
    "Thu": "Thursday",
    "Fri": "Friday",
    "Sat": "Saturday",
}


@dataclass(frozen=True, slots=True)
class PlayEvent:
    """One resolved entry of a user's listening history.

    ``track_id`` is ``None`` when the track row has since been deleted, and
    ``artist_id``/``artist_name`` are ``None`` when the artist is gone.
    """

    track_id: Optional[str]
    genre: Optional[str]
    artist_id: Optional[str]
    artist_name: Optional[str]
    played_at: datetime
    track_title: Optional[str] = None
    duration: int = 0


@dataclass(slots=True)
class GenreAffinity:
    counts: Dict[str, int] = field(default_factory=dict)
    favorite: Optional[str] = None


@dataclass(frozen=True, slots=True)
class ArtistCount:
    name: str
    count: int


@dataclass(frozen=True, slots=True)
class Insight:
    type: str
    icon: str
    text: str
    value: int


def localize(moment: datetime, tz: tzinfo) -> datetime:
    # Naive timestamps come back from SQLite; they are stored as UTC.
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(tz)


def weekday_label(moment: datetime, tz: tzinfo = timezone.utc) -> str:
    # datetime.weekday() is Monday-based; labels are Sunday-based.
    return WEEKDAY_LABELS[(localize(moment, tz).weekday() + 1) % 7]


def played_track_ids(history: Iterable[PlayEvent]) -> Set[str]:
    return {event.track_id for event in history if event.track_id is not None}


def extract_genre_affinity(history: Sequence[PlayEvent], *, window: int = GENRE_WINDOW) -> GenreAffinity:
    """Count genres over the most recent ``window`` genre-tagged plays.

    Untagged plays are dropped before the window is applied, so they never
    push tagged plays out of it. The favorite is the first genre whose count
    strictly exceeds the running maximum while scanning the window in order.
    """
    tagged = [event.genre for event in history if event.genre is not None]
    recent = tagged[-window:] if window > 0 else []

    affinity = GenreAffinity()
    best = 0
    for genre in recent:
        count = affinity.counts.get(genre, 0) + 1
        affinity.counts[genre] = count
        if count > best:
            best = count
            affinity.favorite = genre
    return affinity


def rank_artists(history: Iterable[PlayEvent], *, limit: int = TOP_ARTIST_LIMIT) -> List[ArtistCount]:
    # Keyed by display name: distinct artists that share a name are merged.
    counts: Counter[str] = Counter()
    for event in history:
        if event.artist_id is None or event.artist_name is None:
            continue
        counts[event.artist_name] += 1
    # Counter keeps first-insertion order and sorted() is stable.
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [ArtistCount(name=name, count=count) for name, count in ranked[:limit]]


def aggregate_weekly_pattern(history: Iterable[PlayEvent], *, tz: tzinfo = timezone.utc) -> Dict[str, int]:
    """Lifetime play counts per weekday, Sunday first."""
    pattern = {label: 0 for label in WEEKDAY_LABELS}
    for event in history:
        pattern[weekday_label(event.played_at, tz)] += 1
    return pattern


def generate_insights(weekly: Dict[str, int], total: int) -> List[Insight]:
    insights: List[Insight] = []
    if total <= 0:
        return insights

    best_day: Optional[str] = None
    best = 0
    for label in WEEKDAY_LABELS:
        count = weekly.get(label, 0)
        if count > best:
            best = count
            best_day = label
    if best_day is not None:
        insights.append(
            Insight(
                type="activity",
                icon="📅",
                text=f"You listen to the most music on {WEEKDAY_NAMES[best_day]}s",
                value=best,
            )
        )

    if total > TOTAL_PLAYS_INSIGHT_THRESHOLD:
        insights.append(
            Insight(
                type="total",
                icon="🎧",
                text=f"You've played {total} tracks so far",
                value=total,
            )
        )
    return insights
