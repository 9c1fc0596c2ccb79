import sys
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Dict, List

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, select
from sqlalchemy.orm import Session, sessionmaker

# Ensure project root on sys.path so 'radio_settlement' resolves without an install
ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from radio_settlement.main import app  # type: ignore
from radio_settlement.database import Base, enable_sqlite_savepoints  # type: ignore
from radio_settlement.api import deps  # type: ignore
"""Pytest fixtures and factories.

Every model module must be imported before Base.metadata.create_all().
Each test gets its own file-backed SQLite database so the pipeline's session and
the verification session use separate connections, as they would in production.
"""
from radio_settlement.models.db import (  # noqa: E402
    RadioStation, RadioShow, Song, Band, RadioSubmission, RadioPlaylist, SubmissionStatus,
)

FIXED_NOW = datetime(2024, 1, 8, 12, 0, 0, tzinfo=timezone.utc)
FIXED_DRAW = 0.2


@pytest.fixture()
def engine(tmp_path):
    eng = enable_sqlite_savepoints(
        create_engine(
            f"sqlite+pysqlite:///{tmp_path / 'radio_settlement_test.db'}",
            connect_args={"check_same_thread": False},
        )
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    Base.metadata.drop_all(bind=eng)
    eng.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(session_factory, monkeypatch):
    def _override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[deps.get_db] = _override_get_db
    # /health/detailed opens its own session
    monkeypatch.setattr("radio_settlement.main.SessionLocal", session_factory)
    yield TestClient(app)
    app.dependency_overrides.pop(deps.get_db, None)


@pytest.fixture()
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture()
def fixed_draw():
    return lambda: FIXED_DRAW


# ---------- Data factory helpers ----------

@pytest.fixture()
def seeded_world(db_session: Session) -> Dict[str, str]:
    """Galaxy FM world: one pending backdated submission for a band's song."""
    db_session.add_all([
        RadioStation(id="station-1", name="Galaxy FM", listener_base=1000),
        RadioShow(id="show-1", station_id="station-1", name="Morning Drive", is_active=True, time_slot=1),
        RadioShow(id="show-2", station_id="station-1", name="Late Night", is_active=True, time_slot=2),
        Band(id="band-1", name="The Satellites", fame=2.0),
        Song(
            id="song-1",
            title="Orbit",
            band_id="band-1",
            hype=10,
            total_radio_plays=5,
            streams=1000,
            revenue=200,
        ),
        RadioSubmission(
            id="submission-1",
            song_id="song-1",
            station_id="station-1",
            week_submitted=date(2024, 1, 7),
            status=SubmissionStatus.PENDING,
        ),
    ])
    db_session.commit()
    return {
        "submission_id": "submission-1",
        "song_id": "song-1",
        "band_id": "band-1",
        "station_id": "station-1",
        "show_id": "show-1",
    }


@pytest.fixture()
def submission_factory(db_session: Session):
    counter = {"n": 1}

    def _create(song_id: str = "song-1", station_id: str = "station-1", week_submitted: date | None = date(2024, 1, 7)) -> str:
        counter["n"] += 1
        submission = RadioSubmission(
            id=f"submission-{counter['n']}",
            song_id=song_id,
            station_id=station_id,
            week_submitted=week_submitted,
            status=SubmissionStatus.PENDING,
        )
        db_session.add(submission)
        db_session.commit()
        return submission.id

    return _create


@pytest.fixture()
def existing_playlist(db_session: Session, seeded_world):
    playlist = RadioPlaylist(
        id="playlist-existing",
        show_id="show-1",
        song_id="song-1",
        week_start_date=date(2024, 1, 7),
        times_played=1,
        added_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        is_active=True,
    )
    db_session.add(playlist)
    db_session.commit()
    return playlist.id


def snapshot_store(session: Session) -> Dict[str, List[Dict[str, Any]]]:
    """Dump every table, rows ordered by primary key, for exact before/after comparison."""
    state: Dict[str, List[Dict[str, Any]]] = {}
    for table in Base.metadata.sorted_tables:
        stmt = select(table).order_by(*table.primary_key.columns)
        state[table.name] = [dict(row) for row in session.execute(stmt).mappings().all()]
    session.rollback()
    return state


@pytest.fixture()
def snapshot():
    return snapshot_store
