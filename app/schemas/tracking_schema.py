# app/schemas/tracking_schema.py
import datetime as dt
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional

from app.schemas.common_schema import reject_null

class TrackingEntryCreate(BaseModel):
    date: dt.date
    hours: float = Field(0, ge=0, le=24)
    description: str = Field(..., min_length=1, max_length=2000)
    deliverable: Optional[str] = None
    notes: Optional[str] = None

# 已核准的紀錄不可修改 (由 Service 檢查)
class TrackingEntryUpdate(BaseModel):
    date: Optional[dt.date] = None
    hours: Optional[float] = Field(None, ge=0, le=24)
    description: Optional[str] = Field(None, min_length=1, max_length=2000)
    deliverable: Optional[str] = None
    notes: Optional[str] = None

    @field_validator('date', 'hours', 'description')
    @classmethod
    def validate_not_null(cls, v):
        return reject_null(v)

class TrackingApprove(BaseModel):
    notes: Optional[str] = None

class TrackingEntryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    entry_id: str
    contract_id: str
    date: dt.date
    hours: float
    description: str
    deliverable: Optional[str] = None
    approved: bool
    approved_at: Optional[dt.datetime] = None
    notes: Optional[str] = None
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None
