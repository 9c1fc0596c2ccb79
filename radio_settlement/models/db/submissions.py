from __future__ import annotations
"""SQLAlchemy model for radio submissions (a band asking a station to air a song)."""
from sqlalchemy import String, Text, Date, DateTime, Enum
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func
from radio_settlement.database import Base, new_id
from .enums import SubmissionStatus

class RadioSubmission(Base):
    __tablename__ = "radio_submissions"
    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    # Plain columns: missing songs / stations are reported by settlement, not by the DB.
    # The band is always taken from the song at settlement time.
    song_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    station_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)

    # Sunday-aligned week the submission was queued for; overrides "now" when set
    week_submitted: Mapped[Date | None] = mapped_column(Date, nullable=True, index=True)
    status: Mapped[SubmissionStatus] = mapped_column(Enum(SubmissionStatus), default=SubmissionStatus.PENDING, nullable=False, index=True)
    submitted_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    reviewed_at: Mapped[DateTime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
