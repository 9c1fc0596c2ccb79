"""Cumulative song counters updated on every radio play."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Session

from radio_settlement.models.db.songs import Song
from radio_settlement.services.radio_metrics import PlayMetrics


def apply_play_to_song(session: Session, song: Song, metrics: PlayMetrics, played_at: datetime) -> Song:
    song.hype = (song.hype or 0) + metrics.hype_gained
    song.total_radio_plays = (song.total_radio_plays or 0) + 1
    song.last_radio_play = played_at  # type: ignore[assignment]
    song.streams = (song.streams or 0) + metrics.streams_boost
    song.revenue = (song.revenue or 0) + metrics.sales_boost
    session.flush()
    return song


__all__ = ["apply_play_to_song"]
