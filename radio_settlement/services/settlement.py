"""Radio submission settlement orchestrator.

Single public function `process_radio_submission(session, submission_id)` that,
inside one database transaction:
1. Loads the RadioSubmission (must be pending), its Song and RadioStation.
2. Picks the station's active show with the lowest time slot.
3. Resolves the week key (stored week_submitted, else Sunday of "now" in UTC).
4. Marks the submission accepted and stamps reviewed_at.
5. Upserts the weekly playlist row for (show, song, week).
6. Computes play metrics from an injected random draw and logs the play.
7. Adds the play's deltas to the song's cumulative counters.
8. Credits the song's band (fame, fame event, earnings) when it has one.
9. Commits and returns a SettlementSummary.

Any exception at any point, including injected SimulatedFailure checkpoints
and cancellation, rolls the whole transaction back and is re-raised unchanged.
"""
from __future__ import annotations

import random
import time
from dataclasses import asdict, dataclass
from datetime import date, datetime
from typing import Any, Callable, Dict, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from radio_settlement.models.db.enums import SubmissionStatus
from radio_settlement.models.db.songs import Song
from radio_settlement.models.db.stations import RadioShow, RadioStation
from radio_settlement.models.db.submissions import RadioSubmission
from radio_settlement.services.band_cascade import apply_band_cascade
from radio_settlement.services.errors import (
    ActiveShowNotFoundError,
    Checkpoint,
    SettlementStep,
    SimulatedFailure,
    SongNotFoundError,
    StationNotFoundError,
    SubmissionNotFoundError,
)
from radio_settlement.services.play_logger import log_play
from radio_settlement.services.playlist_aggregator import upsert_weekly_playlist
from radio_settlement.services.radio_metrics import calculate_play_metrics
from radio_settlement.services.song_metrics import apply_play_to_song
from radio_settlement.services.submission_state import accept_submission, ensure_transition
from radio_settlement.utils import get_logger, log_business_event, log_performance, utc_now, week_start

logger = get_logger(__name__)

Clock = Callable[[], datetime]
RandomSource = Callable[[], float]


@dataclass(slots=True)
class SettlementSummary:
    submission_id: str
    playlist_id: str
    play_id: str
    listeners: int
    hype_gain: int
    streams_boost: int
    sales_boost: int
    week_start_date: date
    show_id: str
    band_id: Optional[str]
    playlist_times_played: int
    is_new_playlist: bool

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["week_start_date"] = self.week_start_date.isoformat()
        return data


def failure_checkpoint(force_failure: SettlementStep | None) -> Checkpoint:
    """Build a checkpoint callback that raises when ``force_failure`` is reached."""
    def _checkpoint(step: SettlementStep) -> None:
        if force_failure is not None and step == force_failure:
            raise SimulatedFailure(f"Simulated failure {step.value.replace('_', ' ')}")
    return _checkpoint


def resolve_week_start(submission: RadioSubmission, now: datetime) -> date:
    """Backdated submissions keep the week they were queued for."""
    if submission.week_submitted is not None:
        return submission.week_submitted  # type: ignore[return-value]
    return week_start(now)


def _load_active_show(session: Session, station_id: str) -> RadioShow:
    stmt = (
        select(RadioShow)
        .where(RadioShow.station_id == station_id, RadioShow.is_active.is_(True))
        .order_by(RadioShow.time_slot.asc(), RadioShow.id.asc())
        .limit(1)
    )
    show = session.execute(stmt).scalar_one_or_none()
    if show is None:
        raise ActiveShowNotFoundError(station_id)
    return show


def _settle(
    session: Session,
    submission_id: str,
    *,
    now: datetime,
    random_source: RandomSource,
    checkpoint: Checkpoint,
) -> SettlementSummary:
    submission = session.get(RadioSubmission, submission_id)
    if submission is None:
        raise SubmissionNotFoundError(submission_id)
    ensure_transition(submission, SubmissionStatus.ACCEPTED)

    song = session.get(Song, submission.song_id)
    if song is None:
        raise SongNotFoundError(submission.song_id)

    station = session.get(RadioStation, submission.station_id)
    if station is None:
        raise StationNotFoundError(submission.station_id)

    show = _load_active_show(session, station.id)
    week_start_date = resolve_week_start(submission, now)

    checkpoint(SettlementStep.BEFORE_ACCEPT)
    accept_submission(submission, now)
    session.flush()
    checkpoint(SettlementStep.AFTER_ACCEPT)

    upsert = upsert_weekly_playlist(
        session,
        show_id=show.id,
        song_id=song.id,
        week_start_date=week_start_date,
        now=now,
    )
    checkpoint(SettlementStep.AFTER_PLAYLIST)

    metrics = calculate_play_metrics(station.listener_base or 0, random_source())
    play = log_play(
        session,
        playlist=upsert.entry,
        station_id=station.id,
        metrics=metrics,
        played_at=now,
    )
    checkpoint(SettlementStep.AFTER_PLAY)

    apply_play_to_song(session, song, metrics, now)
    checkpoint(SettlementStep.AFTER_SONG_UPDATE)

    apply_band_cascade(
        session,
        song=song,
        station=station,
        play=play,
        metrics=metrics,
        checkpoint=checkpoint,
    )

    return SettlementSummary(
        submission_id=submission.id,
        playlist_id=upsert.entry.id,
        play_id=play.id,
        listeners=metrics.listeners,
        hype_gain=metrics.hype_gained,
        streams_boost=metrics.streams_boost,
        sales_boost=metrics.sales_boost,
        week_start_date=week_start_date,
        show_id=show.id,
        band_id=song.band_id,
        playlist_times_played=upsert.entry.times_played,
        is_new_playlist=upsert.is_new,
    )


def process_radio_submission(
    session: Session,
    submission_id: str,
    *,
    clock: Clock = utc_now,
    random_source: RandomSource = random.random,
    force_failure: SettlementStep | None = None,
) -> SettlementSummary:
    """Accept a pending radio submission and settle all of its side effects.

    Args:
        session: session owned exclusively by this call; it is committed on
            success and rolled back on any failure
        submission_id: RadioSubmission id
        clock: returns the timestamp stamped on every row written
        random_source: returns the listener draw in [0, 1)
        force_failure: raise SimulatedFailure at this checkpoint
    Raises:
        SettlementError subclasses (not found, state, conflict, simulated)
        or any database error, always after a full rollback.
    """
    start_time = time.time()
    now = clock()
    logger.info("Radio settlement started", submission_id=submission_id)

    try:
        summary = _settle(
            session,
            submission_id,
            now=now,
            random_source=random_source,
            checkpoint=failure_checkpoint(force_failure),
        )
        session.commit()
    except BaseException as exc:  # cancellation and timeouts roll back too
        session.rollback()
        logger.warning(
            "Radio settlement rolled back",
            submission_id=submission_id,
            error_type=type(exc).__name__,
            error=str(exc),
        )
        raise

    log_business_event(
        event_type="radio_submission_accepted",
        details=summary.to_dict(),
    )
    log_performance(
        operation="process_radio_submission",
        duration_ms=(time.time() - start_time) * 1000,
        additional_data={"submission_id": submission_id, "is_new_playlist": summary.is_new_playlist},
    )
    return summary


__all__ = ["SettlementSummary", "process_radio_submission", "resolve_week_start", "failure_checkpoint"]
