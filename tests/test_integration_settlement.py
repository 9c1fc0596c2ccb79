import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime, timezone

import pytest
from sqlalchemy import func, select

from radio_settlement.config import PLAYLIST_SETTINGS, RADIO_METRICS
from radio_settlement.models.db import (
    Band, BandEarning, BandFameEvent, RadioPlay, RadioPlaylist, RadioShow, RadioSubmission, Song,
    EarningSource, FameEventType, SubmissionStatus,
)
from radio_settlement.services import playlist_aggregator
from radio_settlement.services.band_cascade import round_fame
from radio_settlement.services.errors import (
    ActiveShowNotFoundError,
    BandNotFoundError,
    PlaylistConflictError,
    SettlementStep,
    SimulatedFailure,
    SongNotFoundError,
    StationNotFoundError,
    SubmissionNotFoundError,
    SubmissionStateError,
)
from radio_settlement.services.settlement import process_radio_submission


def _count(session, model, *criteria):
    return session.execute(select(func.count()).select_from(model).where(*criteria)).scalar_one()


def test_end_to_end_settlement(db_session, seeded_world, fixed_clock, fixed_draw):
    summary = process_radio_submission(db_session, "submission-1", clock=fixed_clock, random_source=fixed_draw)

    assert summary.submission_id == "submission-1"
    assert (summary.listeners, summary.hype_gain, summary.streams_boost, summary.sales_boost) == (620, 1, 372, 9)
    assert summary.week_start_date == date(2024, 1, 7)
    assert summary.show_id == "show-1"
    assert summary.band_id == "band-1"
    assert summary.playlist_times_played == 1
    assert summary.is_new_playlist is True

    submission = db_session.get(RadioSubmission, "submission-1")
    assert submission.status == SubmissionStatus.ACCEPTED
    assert submission.reviewed_at is not None

    playlist = db_session.get(RadioPlaylist, summary.playlist_id)
    assert (playlist.show_id, playlist.song_id, playlist.week_start_date) == ("show-1", "song-1", date(2024, 1, 7))
    assert playlist.times_played == 1
    assert playlist.is_active is True

    play = db_session.get(RadioPlay, summary.play_id)
    assert play.playlist_id == playlist.id
    assert play.station_id == "station-1"
    assert (play.listeners, play.hype_gained, play.streams_boost, play.sales_boost) == (620, 1, 372, 9)

    song = db_session.get(Song, "song-1")
    assert (song.hype, song.total_radio_plays, song.streams, song.revenue) == (11, 6, 1372, 209)
    assert song.last_radio_play is not None

    band = db_session.get(Band, "band-1")
    assert band.fame == pytest.approx(2.1)

    fame_events = db_session.execute(select(BandFameEvent)).scalars().all()
    assert len(fame_events) == 1
    assert fame_events[0].fame_gained == pytest.approx(0.1)
    assert fame_events[0].event_type == FameEventType.RADIO_PLAY
    assert fame_events[0].event_data == {"station_id": "station-1", "station_name": "Galaxy FM", "play_id": play.id}

    earnings = db_session.execute(select(BandEarning)).scalars().all()
    assert len(earnings) == 1
    assert earnings[0].amount == 9
    assert earnings[0].source == EarningSource.RADIO_PLAY
    assert earnings[0].description == "Radio play on Galaxy FM"
    assert earnings[0].metadata_ == {
        "station_id": "station-1",
        "station_name": "Galaxy FM",
        "song_id": "song-1",
        "play_id": play.id,
    }


def test_repeat_submission_same_week_increments_playlist(db_session, seeded_world, submission_factory, fixed_clock, fixed_draw):
    first = process_radio_submission(db_session, "submission-1", clock=fixed_clock, random_source=fixed_draw)
    second_id = submission_factory()
    second = process_radio_submission(db_session, second_id, clock=fixed_clock, random_source=fixed_draw)

    assert second.playlist_id == first.playlist_id
    assert second.is_new_playlist is False
    assert second.playlist_times_played == 2
    assert second.play_id != first.play_id
    assert _count(db_session, RadioPlaylist) == 1
    assert _count(db_session, RadioPlay) == 2

    song = db_session.get(Song, "song-1")
    assert (song.hype, song.total_radio_plays) == (12, 7)
    assert db_session.get(Band, "band-1").fame == pytest.approx(2.2)


def test_times_played_matches_play_count(db_session, seeded_world, submission_factory, fixed_clock, fixed_draw):
    process_radio_submission(db_session, "submission-1", clock=fixed_clock, random_source=fixed_draw)
    for _ in range(3):
        process_radio_submission(db_session, submission_factory(), clock=fixed_clock, random_source=fixed_draw)

    playlist = db_session.execute(select(RadioPlaylist)).scalar_one()
    assert playlist.times_played == 4
    assert _count(db_session, RadioPlay, RadioPlay.playlist_id == playlist.id) == 4


def test_different_week_creates_new_playlist_row(db_session, seeded_world, submission_factory, fixed_clock, fixed_draw):
    process_radio_submission(db_session, "submission-1", clock=fixed_clock, random_source=fixed_draw)
    later = submission_factory(week_submitted=date(2024, 1, 14))
    summary = process_radio_submission(db_session, later, clock=fixed_clock, random_source=fixed_draw)

    assert summary.is_new_playlist is True
    assert summary.week_start_date == date(2024, 1, 14)
    assert _count(db_session, RadioPlaylist) == 2


def test_inactive_playlist_row_is_reactivated(db_session, existing_playlist, fixed_clock, fixed_draw):
    db_session.get(RadioPlaylist, existing_playlist).is_active = False
    db_session.commit()

    summary = process_radio_submission(db_session, "submission-1", clock=fixed_clock, random_source=fixed_draw)

    playlist = db_session.get(RadioPlaylist, existing_playlist)
    assert summary.playlist_id == existing_playlist
    assert playlist.is_active is True
    assert playlist.times_played == 2


def test_week_falls_back_to_clock_when_not_submitted(db_session, seeded_world, submission_factory, fixed_draw):
    submission_id = submission_factory(week_submitted=None)
    wednesday = datetime(2024, 1, 10, 9, 30, tzinfo=timezone.utc)

    summary = process_radio_submission(db_session, submission_id, clock=lambda: wednesday, random_source=fixed_draw)

    assert summary.week_start_date == date(2024, 1, 7)
    assert db_session.get(RadioPlaylist, summary.playlist_id).week_start_date == date(2024, 1, 7)


def test_stored_week_wins_over_clock(db_session, seeded_world, fixed_draw):
    much_later = datetime(2024, 3, 20, tzinfo=timezone.utc)
    summary = process_radio_submission(db_session, "submission-1", clock=lambda: much_later, random_source=fixed_draw)
    assert summary.week_start_date == date(2024, 1, 7)


def test_first_active_show_by_time_slot(db_session, seeded_world, fixed_clock, fixed_draw):
    db_session.get(RadioShow, "show-1").is_active = False
    db_session.commit()

    summary = process_radio_submission(db_session, "submission-1", clock=fixed_clock, random_source=fixed_draw)
    assert summary.show_id == "show-2"


def test_song_without_band_skips_cascade(db_session, seeded_world, fixed_clock, fixed_draw):
    db_session.get(Song, "song-1").band_id = None
    db_session.commit()

    summary = process_radio_submission(db_session, "submission-1", clock=fixed_clock, random_source=fixed_draw)

    assert summary.band_id is None
    assert db_session.get(RadioSubmission, "submission-1").status == SubmissionStatus.ACCEPTED
    assert db_session.get(Song, "song-1").hype == 11
    assert db_session.get(Band, "band-1").fame == pytest.approx(2.0)
    assert _count(db_session, BandFameEvent) == 0
    assert _count(db_session, BandEarning) == 0


def test_zero_sales_writes_fame_event_but_no_earning(db_session, seeded_world, fixed_clock, fixed_draw, monkeypatch):
    monkeypatch.setitem(RADIO_METRICS, "min_sales", 0)
    monkeypatch.setitem(RADIO_METRICS, "sales_ratio", 0.0)

    summary = process_radio_submission(db_session, "submission-1", clock=fixed_clock, random_source=fixed_draw)

    assert summary.sales_boost == 0
    assert _count(db_session, BandFameEvent) == 1
    assert _count(db_session, BandEarning) == 0
    assert db_session.get(Song, "song-1").revenue == 200


@pytest.mark.parametrize("step", list(SettlementStep))
def test_failure_at_any_step_leaves_store_untouched(db_session, seeded_world, snapshot, fixed_clock, fixed_draw, step):
    before = snapshot(db_session)

    with pytest.raises(SimulatedFailure) as exc:
        process_radio_submission(
            db_session, "submission-1", clock=fixed_clock, random_source=fixed_draw, force_failure=step
        )

    assert str(exc.value) == "Simulated failure " + step.value.replace("_", " ")
    assert snapshot(db_session) == before


@pytest.mark.parametrize("step", [SettlementStep.AFTER_PLAYLIST, SettlementStep.AFTER_BAND_UPDATE, SettlementStep.AFTER_BAND_EARNINGS])
def test_failure_does_not_touch_existing_playlist(db_session, existing_playlist, snapshot, fixed_clock, fixed_draw, step):
    before = snapshot(db_session)

    with pytest.raises(SimulatedFailure):
        process_radio_submission(
            db_session, "submission-1", clock=fixed_clock, random_source=fixed_draw, force_failure=step
        )

    assert snapshot(db_session) == before
    assert db_session.get(RadioPlaylist, existing_playlist).times_played == 1


def test_store_usable_after_rollback(db_session, seeded_world, fixed_clock, fixed_draw):
    with pytest.raises(SimulatedFailure):
        process_radio_submission(
            db_session, "submission-1", clock=fixed_clock, random_source=fixed_draw,
            force_failure=SettlementStep.AFTER_FAME_EVENT,
        )

    summary = process_radio_submission(db_session, "submission-1", clock=fixed_clock, random_source=fixed_draw)
    assert summary.is_new_playlist is True
    assert _count(db_session, BandFameEvent) == 1


def test_second_acceptance_is_refused(db_session, seeded_world, snapshot, fixed_clock, fixed_draw):
    process_radio_submission(db_session, "submission-1", clock=fixed_clock, random_source=fixed_draw)
    before = snapshot(db_session)

    with pytest.raises(SubmissionStateError) as exc:
        process_radio_submission(db_session, "submission-1", clock=fixed_clock, random_source=fixed_draw)

    assert exc.value.status == "accepted"
    assert snapshot(db_session) == before


def test_rejected_submission_is_refused(db_session, seeded_world, snapshot, fixed_clock, fixed_draw):
    db_session.get(RadioSubmission, "submission-1").status = SubmissionStatus.REJECTED
    db_session.commit()
    before = snapshot(db_session)

    with pytest.raises(SubmissionStateError):
        process_radio_submission(db_session, "submission-1", clock=fixed_clock, random_source=fixed_draw)
    assert snapshot(db_session) == before


def test_missing_submission(db_session, seeded_world, snapshot, fixed_clock, fixed_draw):
    before = snapshot(db_session)
    with pytest.raises(SubmissionNotFoundError) as exc:
        process_radio_submission(db_session, "nope", clock=fixed_clock, random_source=fixed_draw)
    assert exc.value.entity_id == "nope"
    assert snapshot(db_session) == before


def test_missing_song(db_session, seeded_world, submission_factory, snapshot, fixed_clock, fixed_draw):
    orphan = submission_factory(song_id="ghost-song")
    before = snapshot(db_session)
    with pytest.raises(SongNotFoundError):
        process_radio_submission(db_session, orphan, clock=fixed_clock, random_source=fixed_draw)
    assert snapshot(db_session) == before


def test_missing_station(db_session, seeded_world, submission_factory, snapshot, fixed_clock, fixed_draw):
    orphan = submission_factory(station_id="ghost-station")
    before = snapshot(db_session)
    with pytest.raises(StationNotFoundError):
        process_radio_submission(db_session, orphan, clock=fixed_clock, random_source=fixed_draw)
    assert snapshot(db_session) == before


def test_station_without_active_show(db_session, seeded_world, snapshot, fixed_clock, fixed_draw):
    for show_id in ("show-1", "show-2"):
        db_session.get(RadioShow, show_id).is_active = False
    db_session.commit()
    before = snapshot(db_session)

    with pytest.raises(ActiveShowNotFoundError) as exc:
        process_radio_submission(db_session, "submission-1", clock=fixed_clock, random_source=fixed_draw)

    assert str(exc.value) == "No active show found for station station-1"
    assert snapshot(db_session) == before


def test_dangling_band_reference_aborts(db_session, seeded_world, snapshot, fixed_clock, fixed_draw):
    db_session.get(Song, "song-1").band_id = "ghost-band"
    db_session.commit()
    before = snapshot(db_session)

    with pytest.raises(BandNotFoundError):
        process_radio_submission(db_session, "submission-1", clock=fixed_clock, random_source=fixed_draw)

    assert snapshot(db_session) == before
    assert db_session.get(Song, "song-1").hype == 10


def test_playlist_conflict_retries_exhausted(db_session, existing_playlist, snapshot, fixed_clock, fixed_draw, monkeypatch):
    # Every insert collides with the existing row, and the re-select never sees it
    monkeypatch.setattr(playlist_aggregator, "_select_for_update", lambda *args, **kwargs: None)
    monkeypatch.setitem(PLAYLIST_SETTINGS, "conflict_max_attempts", 2)
    before = snapshot(db_session)

    with pytest.raises(PlaylistConflictError) as exc:
        process_radio_submission(db_session, "submission-1", clock=fixed_clock, random_source=fixed_draw)

    assert exc.value.attempts == 2
    assert snapshot(db_session) == before


def test_interrupt_rolls_back(db_session, seeded_world, snapshot, fixed_clock):
    before = snapshot(db_session)

    def _cancelled():
        raise KeyboardInterrupt

    with pytest.raises(KeyboardInterrupt):
        process_radio_submission(db_session, "submission-1", clock=fixed_clock, random_source=_cancelled)

    assert snapshot(db_session) == before


def test_fame_rounds_halves_up(db_session, seeded_world, fixed_clock, fixed_draw):
    # 0.15 + 0.1 is exactly 0.25 in binary; half-even would give 0.2
    db_session.get(Band, "band-1").fame = 0.15
    db_session.commit()

    process_radio_submission(db_session, "submission-1", clock=fixed_clock, random_source=fixed_draw)

    assert db_session.get(Band, "band-1").fame == pytest.approx(0.3)


@pytest.mark.parametrize(
    "value, expected",
    [(0.25, 0.3), (2.1, 2.1), (2.0 + 0.1, 2.1), (2.05, 2.0), (0.04, 0.0)],
)
def test_round_fame(value, expected):
    assert round_fame(value, 1) == pytest.approx(expected)


def test_concurrent_settlements_share_one_playlist_row(
    session_factory, db_session, seeded_world, submission_factory, fixed_clock, fixed_draw
):
    second_id = submission_factory()
    barrier = threading.Barrier(2, timeout=10)

    def _settle(submission_id):
        session = session_factory()
        try:
            barrier.wait()
            return process_radio_submission(session, submission_id, clock=fixed_clock, random_source=fixed_draw)
        finally:
            session.close()

    with ThreadPoolExecutor(max_workers=2) as pool:
        summaries = list(pool.map(_settle, ["submission-1", second_id]))

    assert sorted(s.is_new_playlist for s in summaries) == [False, True]
    assert len({s.playlist_id for s in summaries}) == 1
    assert sorted(s.playlist_times_played for s in summaries) == [1, 2]

    playlist = db_session.execute(select(RadioPlaylist)).scalar_one()
    assert playlist.times_played == 2
    assert _count(db_session, RadioPlay, RadioPlay.playlist_id == playlist.id) == 2
    assert db_session.get(Song, "song-1").total_radio_plays == 7
    assert db_session.get(Band, "band-1").fame == pytest.approx(2.2)
