"""Band side of a radio play: fame bump, fame audit row, earnings ledger row.

Only runs for songs that belong to a band. A band id that does not resolve
is a data-integrity failure and aborts the settlement instead of silently
skipping the cascade.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from sqlalchemy.orm import Session

from radio_settlement.config import FAME_SETTINGS
from radio_settlement.models.db.bands import Band, BandFameEvent, BandEarning
from radio_settlement.models.db.enums import EarningSource, FameEventType
from radio_settlement.models.db.playlists import RadioPlay
from radio_settlement.models.db.songs import Song
from radio_settlement.models.db.stations import RadioStation
from radio_settlement.services.errors import BandNotFoundError, Checkpoint, SettlementStep
from radio_settlement.services.radio_metrics import PlayMetrics


def round_fame(value: float, digits: int) -> float:
    """Round to ``digits`` decimals with halves going up (0.25 -> 0.3).

    Works on the exact binary value of ``value``, so 2.05 (stored as
    2.04999...) rounds to 2.0.
    """
    step = Decimal(1).scaleb(-digits)
    return float(Decimal(value).quantize(step, rounding=ROUND_HALF_UP))


@dataclass(slots=True)
class BandCascadeResult:
    band: Band
    fame_event: BandFameEvent
    earning: Optional[BandEarning]


def apply_band_cascade(
    session: Session,
    *,
    song: Song,
    station: RadioStation,
    play: RadioPlay,
    metrics: PlayMetrics,
    checkpoint: Checkpoint,
) -> BandCascadeResult | None:
    """Credit the song's band for one play.

    Returns None when the song has no band.
    """
    if not song.band_id:
        return None

    band = session.get(Band, song.band_id)
    if band is None:
        raise BandNotFoundError(song.band_id)

    fame_gain = float(FAME_SETTINGS["per_radio_play"])
    band.fame = round_fame((band.fame or 0.0) + fame_gain, int(FAME_SETTINGS["round_digits"]))
    session.flush()
    checkpoint(SettlementStep.AFTER_BAND_UPDATE)

    fame_event = BandFameEvent(
        band_id=band.id,
        fame_gained=fame_gain,
        event_type=FameEventType.RADIO_PLAY,
        event_data={
            "station_id": station.id,
            "station_name": station.name,
            "play_id": play.id,
        },
    )
    session.add(fame_event)
    session.flush()
    checkpoint(SettlementStep.AFTER_FAME_EVENT)

    earning: BandEarning | None = None
    # Floors make this always true with default settings; floors are config
    if metrics.sales_boost > 0:
        earning = BandEarning(
            band_id=band.id,
            amount=metrics.sales_boost,
            source=EarningSource.RADIO_PLAY,
            description=f"Radio play on {station.name}",
            metadata_={
                "station_id": station.id,
                "station_name": station.name,
                "song_id": song.id,
                "play_id": play.id,
            },
        )
        session.add(earning)
        session.flush()
        checkpoint(SettlementStep.AFTER_BAND_EARNINGS)

    return BandCascadeResult(band=band, fame_event=fame_event, earning=earning)


__all__ = ["BandCascadeResult", "apply_band_cascade", "round_fame"]
