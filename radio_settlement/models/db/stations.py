from __future__ import annotations
"""SQLAlchemy models for radio stations and their shows (read-only during settlement)."""
from typing import TYPE_CHECKING
from sqlalchemy import Integer, String, Boolean, ForeignKey
from sqlalchemy.orm import relationship, Mapped, mapped_column

if TYPE_CHECKING:  # pragma: no cover
    from .playlists import RadioPlaylist
from radio_settlement.database import Base, new_id

class RadioStation(Base):
    __tablename__ = "radio_stations"
    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String, nullable=False)
    listener_base: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    shows: Mapped[list["RadioShow"]] = relationship("RadioShow", back_populates="station", order_by="RadioShow.time_slot")


class RadioShow(Base):
    __tablename__ = "radio_shows"
    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    station_id: Mapped[str] = mapped_column(String(64), ForeignKey("radio_stations.id"), nullable=False, index=True)
    name: Mapped[str | None] = mapped_column(String, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)
    # Lower slot airs first; settlement schedules onto the lowest active slot
    time_slot: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    station: Mapped["RadioStation"] = relationship("RadioStation", back_populates="shows")
    playlists: Mapped[list["RadioPlaylist"]] = relationship("RadioPlaylist", back_populates="show")
