"""Typed failures raised by the settlement pipeline.

Every error aborts the surrounding transaction; callers map them to
user-facing messages (see ``api/v1/endpoints/submissions.py``).
"""
from __future__ import annotations

import enum
from typing import Callable


class SettlementError(Exception):
    """Base class for all settlement failures."""


class NotFoundError(SettlementError):
    entity: str = "Record"

    def __init__(self, entity_id: str | None, message: str | None = None):
        self.entity_id = entity_id
        super().__init__(message or f"{self.entity} {entity_id} not found")


class SubmissionNotFoundError(NotFoundError):
    entity = "Radio submission"


class SongNotFoundError(NotFoundError):
    entity = "Song"


class StationNotFoundError(NotFoundError):
    entity = "Station"


class ActiveShowNotFoundError(NotFoundError):
    entity = "Active show"

    def __init__(self, station_id: str):
        super().__init__(station_id, f"No active show found for station {station_id}")


class BandNotFoundError(NotFoundError):
    """Song references a band that does not exist (data-integrity failure)."""
    entity = "Band"


class SubmissionStateError(SettlementError):
    """Submission is not pending; accepting it again would double-credit the band."""

    def __init__(self, submission_id: str, status: str):
        self.submission_id = submission_id
        self.status = status
        super().__init__(f"Radio submission {submission_id} is already {status}")


class PlaylistConflictError(SettlementError):
    """Uniqueness conflicts on the weekly playlist key outlasted the retry budget."""

    def __init__(self, show_id: str, song_id: str, week_start_date: object, attempts: int):
        self.show_id = show_id
        self.song_id = song_id
        self.week_start_date = week_start_date
        self.attempts = attempts
        super().__init__(
            f"Playlist entry for show {show_id}, song {song_id}, week {week_start_date} "
            f"still conflicting after {attempts} attempts"
        )


class SettlementStep(str, enum.Enum):
    """Checkpoints inside the settlement transaction, in execution order.

    Passing one as ``force_failure`` raises SimulatedFailure when it is reached.
    """
    BEFORE_ACCEPT = "before_accept"
    AFTER_ACCEPT = "after_accept"
    AFTER_PLAYLIST = "after_playlist"
    AFTER_PLAY = "after_play"
    AFTER_SONG_UPDATE = "after_song_update"
    AFTER_BAND_UPDATE = "after_band_update"
    AFTER_FAME_EVENT = "after_fame_event"
    AFTER_BAND_EARNINGS = "after_band_earnings"


Checkpoint = Callable[[SettlementStep], None]


class SimulatedFailure(SettlementError):
    """Raised at an injected checkpoint to exercise rollback."""


__all__ = [
    "SettlementError",
    "NotFoundError",
    "SubmissionNotFoundError",
    "SongNotFoundError",
    "StationNotFoundError",
    "ActiveShowNotFoundError",
    "BandNotFoundError",
    "SubmissionStateError",
    "PlaylistConflictError",
    "SimulatedFailure",
    "SettlementStep",
    "Checkpoint",
]
