"""
Pydantic schemas for band fame events and earnings ledger entries.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from radio_settlement.models.db.enums import EarningSource, FameEventType

class FameEventRead(BaseModel):
    id: str
    band_id: str
    fame_gained: float
    event_type: FameEventType
    event_data: Optional[Dict[str, Any]]
    created_at: Optional[datetime]

    model_config = ConfigDict(from_attributes=True)

class EarningRead(BaseModel):
    id: str
    band_id: str
    amount: int
    source: EarningSource
    description: str
    metadata: Optional[Dict[str, Any]] = Field(None, validation_alias=AliasChoices("metadata_", "metadata"))
    created_at: Optional[datetime]

    model_config = ConfigDict(from_attributes=True)

class BandRadioEarnings(BaseModel):
    """Radio-sourced fame and revenue for a band."""
    band_id: str
    fame: float
    total_fame_gained: float
    total_earnings: int
    fame_events: List[FameEventRead] = Field(default_factory=list)
    earnings: List[EarningRead] = Field(default_factory=list)
