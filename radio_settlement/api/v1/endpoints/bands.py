"""
Band radio earnings endpoint.
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session
from radio_settlement.api.deps import get_db
from radio_settlement.models.db import Band, BandFameEvent, BandEarning, FameEventType, EarningSource
from radio_settlement.models.schemas.bands import BandRadioEarnings, FameEventRead, EarningRead

router = APIRouter()

@router.get(
    "/{band_id}/radio-earnings",
    response_model=BandRadioEarnings,
    summary="Fame events and earnings credited to a band by radio plays"
)
async def get_band_radio_earnings(band_id: str, db: Session = Depends(get_db)) -> BandRadioEarnings:
    band = db.get(Band, band_id)
    if band is None:
        raise HTTPException(status_code=404, detail=f"Band {band_id} not found")

    fame_events = db.execute(
        select(BandFameEvent)
        .where(BandFameEvent.band_id == band.id, BandFameEvent.event_type == FameEventType.RADIO_PLAY)
        .order_by(BandFameEvent.created_at.desc(), BandFameEvent.id)
    ).scalars().all()
    earnings = db.execute(
        select(BandEarning)
        .where(BandEarning.band_id == band.id, BandEarning.source == EarningSource.RADIO_PLAY)
        .order_by(BandEarning.created_at.desc(), BandEarning.id)
    ).scalars().all()

    return BandRadioEarnings(
        band_id=band.id,
        fame=float(band.fame or 0.0),
        total_fame_gained=round(sum(float(e.fame_gained) for e in fame_events), 1),
        total_earnings=sum(int(e.amount) for e in earnings),
        fame_events=[FameEventRead.model_validate(e) for e in fame_events],
        earnings=[EarningRead.model_validate(e) for e in earnings],
    )
