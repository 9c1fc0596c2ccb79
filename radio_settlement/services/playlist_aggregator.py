"""Weekly playlist aggregation (find-or-create keyed by show, song and week).

The insert is attempted first inside a SAVEPOINT. A unique-constraint
violation means the row already exists (or a concurrent settlement just
created it), so the row is re-selected under a row lock and its play counter
incremented. This keeps at most one row per (show_id, song_id,
week_start_date) without a select-then-insert gap.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from radio_settlement.config import PLAYLIST_SETTINGS
from radio_settlement.models.db.playlists import RadioPlaylist
from radio_settlement.services.errors import PlaylistConflictError
from radio_settlement.utils import get_logger

logger = get_logger(__name__)


@dataclass(slots=True)
class PlaylistUpsert:
    entry: RadioPlaylist
    is_new: bool


def _select_for_update(session: Session, show_id: str, song_id: str, week_start_date: date) -> RadioPlaylist | None:
    stmt = (
        select(RadioPlaylist)
        .where(
            RadioPlaylist.show_id == show_id,
            RadioPlaylist.song_id == song_id,
            RadioPlaylist.week_start_date == week_start_date,
        )
        .with_for_update()
    )
    return session.execute(stmt).scalar_one_or_none()


def upsert_weekly_playlist(
    session: Session,
    *,
    show_id: str,
    song_id: str,
    week_start_date: date,
    now: datetime,
) -> PlaylistUpsert:
    """Record one more airing of ``song_id`` on ``show_id`` for the given week.

    Returns the playlist row and whether it was created by this call.
    Raises PlaylistConflictError if the row could neither be inserted nor
    re-selected within the configured number of attempts.
    """
    max_attempts = max(1, int(PLAYLIST_SETTINGS.get("conflict_max_attempts", 3)))
    for attempt in range(1, max_attempts + 1):
        candidate = RadioPlaylist(
            show_id=show_id,
            song_id=song_id,
            week_start_date=week_start_date,
            times_played=1,
            added_at=now,
            is_active=True,
        )
        try:
            with session.begin_nested():
                session.add(candidate)
        except IntegrityError:
            logger.debug(
                "Playlist insert conflicted; re-selecting existing entry",
                show_id=show_id,
                song_id=song_id,
                week_start_date=week_start_date.isoformat(),
                attempt=attempt,
            )
        else:
            return PlaylistUpsert(entry=candidate, is_new=True)

        existing = _select_for_update(session, show_id, song_id, week_start_date)
        if existing is None:
            # Conflicting row was removed before we could lock it; insert again
            continue
        existing.times_played = (existing.times_played or 0) + 1
        existing.added_at = now  # type: ignore[assignment]
        existing.is_active = True
        session.flush()
        return PlaylistUpsert(entry=existing, is_new=False)

    logger.error(
        "Playlist upsert exhausted conflict retries",
        show_id=show_id,
        song_id=song_id,
        week_start_date=week_start_date.isoformat(),
        attempts=max_attempts,
    )
    raise PlaylistConflictError(show_id, song_id, week_start_date, max_attempts)


__all__ = ["PlaylistUpsert", "upsert_weekly_playlist"]
