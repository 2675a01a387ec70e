# app/schemas/shortlist_schema.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime

from app.schemas.common_schema import FreelancerBrief

class ShortlistCreate(BaseModel):
    mission_id: str = Field(..., min_length=1)
    freelancer_id: str = Field(..., min_length=1)
    notes: Optional[str] = Field(None, max_length=2000)

class ShortlistOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    shortlist_id: str
    company_id: str
    mission_id: str
    freelancer_id: str
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    freelancer: Optional[FreelancerBrief] = None
