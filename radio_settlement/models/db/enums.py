"""Central Enum definitions for radio settlement states.

These replace scattered string literals to ensure consistency across
DB models, schemas, and business logic.
"""
from __future__ import annotations
import enum


class SubmissionStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class FameEventType(str, enum.Enum):
    RADIO_PLAY = "radio_play"


class EarningSource(str, enum.Enum):
    RADIO_PLAY = "radio_play"


__all__ = [
    "SubmissionStatus",
    "FameEventType",
    "EarningSource",
]
