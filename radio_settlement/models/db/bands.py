from __future__ import annotations
"""SQLAlchemy models for bands, their fame audit trail and earnings ledger."""
from sqlalchemy import Integer, String, Float, DateTime, ForeignKey, Enum, JSON
from sqlalchemy.orm import relationship, Mapped, mapped_column

from sqlalchemy.sql import func
from radio_settlement.database import Base, new_id
from .enums import FameEventType, EarningSource

class Band(Base):
    __tablename__ = "bands"
    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    name: Mapped[str | None] = mapped_column(String, nullable=True)
    fame: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)

    fame_events: Mapped[list["BandFameEvent"]] = relationship("BandFameEvent", back_populates="band")
    earnings: Mapped[list["BandEarning"]] = relationship("BandEarning", back_populates="band")


class BandFameEvent(Base):
    """Append-only audit row for every fame change."""
    __tablename__ = "band_fame_events"
    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    band_id: Mapped[str] = mapped_column(String(64), ForeignKey("bands.id"), nullable=False, index=True)
    fame_gained: Mapped[float] = mapped_column(Float, nullable=False)
    event_type: Mapped[FameEventType] = mapped_column(Enum(FameEventType), nullable=False, index=True)
    # station_id / station_name / play_id
    event_data: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    created_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    band: Mapped["Band"] = relationship("Band", back_populates="fame_events")


class BandEarning(Base):
    """Append-only ledger row for revenue credited to a band."""
    __tablename__ = "band_earnings"
    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    band_id: Mapped[str] = mapped_column(String(64), ForeignKey("bands.id"), nullable=False, index=True)
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    source: Mapped[EarningSource] = mapped_column(Enum(EarningSource), nullable=False, index=True)
    description: Mapped[str] = mapped_column(String, nullable=False)
    # "metadata" is reserved on declarative classes
    metadata_: Mapped[dict | None] = mapped_column("metadata", JSON, nullable=True)
    created_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    band: Mapped["Band"] = relationship("Band", back_populates="earnings")
