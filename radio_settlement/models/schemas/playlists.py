"""
Pydantic schemas for weekly playlists and play records.
"""
from datetime import date, datetime
from pydantic import BaseModel, ConfigDict

class PlaylistEntryRead(BaseModel):
    id: str
    show_id: str
    song_id: str
    week_start_date: date
    times_played: int
    added_at: datetime
    is_active: bool

    model_config = ConfigDict(from_attributes=True)

class PlayRead(BaseModel):
    id: str
    playlist_id: str
    show_id: str
    song_id: str
    station_id: str
    listeners: int
    hype_gained: int
    streams_boost: int
    sales_boost: int
    played_at: datetime

    model_config = ConfigDict(from_attributes=True)
