from __future__ import annotations
"""SQLAlchemy models for weekly playlist aggregates and the immutable play log."""
from typing import TYPE_CHECKING
from sqlalchemy import Integer, String, Boolean, Date, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship, Mapped, mapped_column

if TYPE_CHECKING:  # pragma: no cover
    from .stations import RadioShow
from radio_settlement.database import Base, new_id

class RadioPlaylist(Base):
    __tablename__ = "radio_playlists"
    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    show_id: Mapped[str] = mapped_column(String(64), ForeignKey("radio_shows.id"), nullable=False, index=True)
    song_id: Mapped[str] = mapped_column(String(64), ForeignKey("songs.id"), nullable=False, index=True)
    week_start_date: Mapped[Date] = mapped_column(Date, nullable=False, index=True)
    times_played: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    added_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    show: Mapped["RadioShow"] = relationship("RadioShow", back_populates="playlists")
    plays: Mapped[list["RadioPlay"]] = relationship("RadioPlay", back_populates="playlist")

    # One aggregate row per show, song and week; concurrent inserts collide here
    __table_args__ = (
        UniqueConstraint("show_id", "song_id", "week_start_date", name="unique_playlist_show_song_week"),
    )


class RadioPlay(Base):
    """Append-only record of a single airing."""
    __tablename__ = "radio_plays"
    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    playlist_id: Mapped[str] = mapped_column(String(64), ForeignKey("radio_playlists.id"), nullable=False, index=True)
    show_id: Mapped[str] = mapped_column(String(64), ForeignKey("radio_shows.id"), nullable=False, index=True)
    song_id: Mapped[str] = mapped_column(String(64), ForeignKey("songs.id"), nullable=False, index=True)
    station_id: Mapped[str] = mapped_column(String(64), ForeignKey("radio_stations.id"), nullable=False, index=True)

    listeners: Mapped[int] = mapped_column(Integer, nullable=False)
    hype_gained: Mapped[int] = mapped_column(Integer, nullable=False)
    streams_boost: Mapped[int] = mapped_column(Integer, nullable=False)
    sales_boost: Mapped[int] = mapped_column(Integer, nullable=False)
    played_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)

    playlist: Mapped["RadioPlaylist"] = relationship("RadioPlaylist", back_populates="plays")
