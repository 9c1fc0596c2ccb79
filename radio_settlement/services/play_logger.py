"""Append-only play log."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Session

from radio_settlement.models.db.playlists import RadioPlay, RadioPlaylist
from radio_settlement.services.radio_metrics import PlayMetrics


def log_play(
    session: Session,
    *,
    playlist: RadioPlaylist,
    station_id: str,
    metrics: PlayMetrics,
    played_at: datetime,
) -> RadioPlay:
    """Insert one play row pointing at its weekly playlist aggregate.

    Never merges with existing rows; every settlement produces a new play.
    """
    play = RadioPlay(
        playlist_id=playlist.id,
        show_id=playlist.show_id,
        song_id=playlist.song_id,
        station_id=station_id,
        listeners=metrics.listeners,
        hype_gained=metrics.hype_gained,
        streams_boost=metrics.streams_boost,
        sales_boost=metrics.sales_boost,
        played_at=played_at,
    )
    session.add(play)
    session.flush()
    return play


__all__ = ["log_play"]
