"""
Pydantic schemas for radio submissions and settlement results.
"""
from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from radio_settlement.models.db.enums import SubmissionStatus

class SubmissionCreate(BaseModel):
    """
    Schema for queueing a song for review by a station.
    """
    song_id: str = Field(min_length=1, max_length=64)
    station_id: str = Field(min_length=1, max_length=64)
    week_submitted: Optional[date] = Field(
        None, description="Sunday the submission is queued for; defaults to the current UTC week"
    )

    @field_validator("week_submitted")
    @classmethod
    def _must_be_sunday(cls, value: Optional[date]) -> Optional[date]:
        # date.weekday(): Sunday == 6
        if value is not None and value.weekday() != 6:
            raise ValueError("week_submitted must be a Sunday")
        return value

class SubmissionRead(BaseModel):
    id: str
    song_id: str
    station_id: str
    week_submitted: Optional[date]
    status: SubmissionStatus
    submitted_at: Optional[datetime]
    reviewed_at: Optional[datetime]
    rejection_reason: Optional[str]

    model_config = ConfigDict(from_attributes=True)

class SettlementSummaryRead(BaseModel):
    """Outcome of accepting a submission; mirrors services.settlement.SettlementSummary."""
    submission_id: str
    playlist_id: str
    play_id: str
    listeners: int = Field(ge=0)
    hype_gain: int = Field(ge=0)
    streams_boost: int = Field(ge=0)
    sales_boost: int = Field(ge=0)
    week_start_date: date
    show_id: str
    band_id: Optional[str]
    playlist_times_played: int = Field(ge=1)
    is_new_playlist: bool

    model_config = ConfigDict(from_attributes=True)
