"""
Station read endpoints: weekly playlist and recent plays.
"""
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.orm import Session
from radio_settlement.api.deps import get_db
from radio_settlement.models.db import RadioStation, RadioShow, RadioPlaylist, RadioPlay
from radio_settlement.models.schemas.playlists import PlaylistEntryRead, PlayRead
from radio_settlement.utils import get_logger, utc_now, week_start

router = APIRouter()
logger = get_logger(__name__)

def _get_station(db: Session, station_id: str) -> RadioStation:
    station = db.get(RadioStation, station_id)
    if station is None:
        raise HTTPException(status_code=404, detail=f"Station {station_id} not found")
    return station

@router.get(
    "/{station_id}/playlist",
    response_model=List[PlaylistEntryRead],
    summary="Weekly playlist for a station"
)
async def get_station_playlist(
    station_id: str,
    week_start_date: Optional[date] = Query(None, alias="week_start", description="Sunday of the week; defaults to current UTC week"),
    include_inactive: bool = Query(False),
    db: Session = Depends(get_db)
) -> List[PlaylistEntryRead]:
    station = _get_station(db, station_id)
    week = week_start_date or week_start(utc_now())
    stmt = (
        select(RadioPlaylist)
        .join(RadioShow, RadioPlaylist.show_id == RadioShow.id)
        .where(RadioShow.station_id == station.id, RadioPlaylist.week_start_date == week)
    )
    if not include_inactive:
        stmt = stmt.where(RadioPlaylist.is_active.is_(True))
    stmt = stmt.order_by(RadioPlaylist.times_played.desc(), RadioPlaylist.added_at.desc())
    rows = db.execute(stmt).scalars().all()
    logger.debug("Station playlist served", station_id=station.id, week_start=week.isoformat(), entries=len(rows))
    return [PlaylistEntryRead.model_validate(r) for r in rows]

@router.get(
    "/{station_id}/plays",
    response_model=List[PlayRead],
    summary="Most recent plays on a station"
)
async def get_station_plays(
    station_id: str,
    limit: int = Query(20, ge=1, le=200),
    db: Session = Depends(get_db)
) -> List[PlayRead]:
    station = _get_station(db, station_id)
    stmt = (
        select(RadioPlay)
        .where(RadioPlay.station_id == station.id)
        .order_by(RadioPlay.played_at.desc(), RadioPlay.id)
        .limit(limit)
    )
    return [PlayRead.model_validate(r) for r in db.execute(stmt).scalars().all()]
