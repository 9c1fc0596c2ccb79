from __future__ import annotations
"""SQLAlchemy model for songs and their cumulative radio metrics."""
from sqlalchemy import Integer, String, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from radio_settlement.database import Base, new_id

class Song(Base):
    __tablename__ = "songs"
    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    title: Mapped[str | None] = mapped_column(String, nullable=True)
    # Not a hard FK: a dangling band reference must surface as a settlement error
    band_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)

    hype: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_radio_plays: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    streams: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    revenue: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    last_radio_play: Mapped[DateTime | None] = mapped_column(DateTime(timezone=True), nullable=True)
