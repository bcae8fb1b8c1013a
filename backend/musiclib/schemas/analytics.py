from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ArtistOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    image_url: Optional[str] = None
    verified: bool = False
    monthly_listeners: int = 0
    followers: int = 0
    genres: Optional[List[str]] = None


class TrackOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    album: Optional[str] = None
    duration: int = 0
    audio_url: Optional[str] = None
    image_url: Optional[str] = None
    genre: Optional[str] = None
    play_count: int = 0
    likes: int = 0
    artist: Optional[ArtistOut] = None


class RecommendationsResponse(BaseModel):
    success: bool = True
    data: List[TrackOut] = []


class InsightOut(BaseModel):
    type: str
    icon: str
    text: str
    value: int


class ArtistCountOut(BaseModel):
    name: str
    count: int


class DayStat(BaseModel):
    day: str
    count: int


class ListeningInsights(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    insights: List[InsightOut] = []
    top_artists: List[ArtistCountOut] = Field(default_factory=list, alias="topArtists")
    day_stats: List[DayStat] = Field(default_factory=list, alias="dayStats")


class InsightsResponse(BaseModel):
    success: bool = True
    data: ListeningInsights


class StatsOverview(BaseModel):
    total_plays: int = 0
    total_minutes: int = 0
    total_hours: int = 0
    distinct_tracks: int = 0


class GenreStat(BaseModel):
    genre: str
    count: int
    percentage: int


class TrackStat(BaseModel):
    track_id: str
    title: Optional[str] = None
    play_count: int


class HourStat(BaseModel):
    hour: int = Field(..., ge=0, le=23)
    count: int


class ListeningStats(BaseModel):
    overview: StatsOverview
    top_genres: List[GenreStat] = []
    top_artists: List[ArtistCountOut] = []
    top_tracks: List[TrackStat] = []
    listening_by_hour: List[HourStat] = []
    peak_hour: Optional[int] = None


class StatsResponse(BaseModel):
    success: bool = True
    data: ListeningStats


class RecentPlay(BaseModel):
    track_id: Optional[str] = None
    title: Optional[str] = None
    artist_name: Optional[str] = None
    genre: Optional[str] = None
    played_at: datetime


class RecentlyPlayedResponse(BaseModel):
    success: bool = True
    data: List[RecentPlay] = []


class PlayRecordedResponse(BaseModel):
    success: bool = True
    message: str = "Added to recently played"


class ErrorResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    ok: bool = True
    database: bool = True
