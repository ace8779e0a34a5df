from pydantic import BaseModel, Field
from typing import Optional, List, Dict


class WearRecordIn(BaseModel):
    garment_ids: List[str] = Field(..., min_length=1)
    date: Optional[str] = None


class WearRecordOut(BaseModel):
    wear_history_id: str
    garments_updated: List[str]
    next_available_dates: Dict[str, str]


class WearHistoryEntry(BaseModel):
    id: str
    garment_ids: List[str]
    date_worn: str
    weather_temp: Optional[float] = None
    weather_condition: Optional[str] = None
    created_at: Optional[str] = None


class WearHistoryOut(BaseModel):
    history: List[WearHistoryEntry]
