from __future__ import annotations

from zoneinfo import ZoneInfo

from factories import on_day, play
from musiclib.services.insights import summarize_history
from musiclib.services.stats import compute_listening_stats, hourly_pattern, peak_hour


def test_summary_for_empty_history():
    summary = summarize_history([])

    assert summary.insights == []
    assert summary.top_artists == []
    assert [(d.day, d.count) for d in summary.day_stats] == [
        ("Sun", 0),
        ("Mon", 0),
        ("Tue", 0),
        ("Wed", 0),
        ("Thu", 0),
        ("Fri", 0),
        ("Sat", 0),
    ]
    dumped = summary.model_dump(by_alias=True)
    assert set(dumped) == {"insights", "topArtists", "dayStats"}


def test_summary_collects_artists_and_days():
    history = [play(f"t{i}", artist="Echo", played_at=on_day(2)) for i in range(6)]

    summary = summarize_history(history)

    assert [(a.name, a.count) for a in summary.top_artists] == [("Echo", 6)]
    assert {d.day: d.count for d in summary.day_stats}["Tue"] == 6
    assert [i.type for i in summary.insights] == ["activity", "total"]


def test_listening_stats_overview_and_rankings():
    history = [
        play("a", genre="Rock", artist="Nova", played_at=on_day(1, hour=21), duration=245),
        play("b", genre="Jazz", artist="Drift", played_at=on_day(1, hour=21), duration=130),
        play("a", genre="Rock", artist="Nova", played_at=on_day(2, hour=8), duration=245),
        play(None, played_at=on_day(3, hour=8)),
    ]

    stats = compute_listening_stats(history)

    assert stats.overview.total_plays == 4
    assert stats.overview.total_minutes == 4 + 2 + 4 + 3
    assert stats.overview.total_hours == 0
    assert stats.overview.distinct_tracks == 2
    assert [(g.genre, g.count, g.percentage) for g in stats.top_genres] == [("Rock", 2, 50), ("Jazz", 1, 25)]
    assert [(t.track_id, t.play_count) for t in stats.top_tracks] == [("a", 2), ("b", 1)]
    assert stats.top_tracks[0].title == "Song a"
    assert [(a.name, a.count) for a in stats.top_artists] == [("Nova", 2), ("Drift", 1)]
    assert len(stats.listening_by_hour) == 24
    # 21:00 and 08:00 both have two plays; the earlier hour wins.
    assert stats.peak_hour == 8


def test_hourly_pattern_respects_zone():
    history = [play("a", played_at=on_day(1, hour=3))]

    assert hourly_pattern(history)[3] == 1
    assert hourly_pattern(history, tz=ZoneInfo("Asia/Tokyo"))[12] == 1


def test_peak_hour_without_plays():
    assert peak_hour([0] * 24) is None
    assert compute_listening_stats([]).peak_hour is None


def test_genre_percentage_rounds_halves_up():
    history = [play("j", genre="Jazz")] + [play(f"r{i}", genre="Rock") for i in range(7)]

    stats = compute_listening_stats(history)

    # 1/8 = 12.5% and 7/8 = 87.5%
    assert [(g.genre, g.percentage) for g in stats.top_genres] == [("Rock", 88), ("Jazz", 13)]
