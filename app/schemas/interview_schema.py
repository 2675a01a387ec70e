# app/schemas/interview_schema.py
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional
from datetime import datetime

from app.schemas.common_schema import UrlStr, reject_null
from app.schemas.application_schema import ApplicationBrief

class InterviewCreate(BaseModel):
    application_id: str = Field(..., min_length=1)
    scheduled_at: datetime
    duration: int = Field(60, ge=15, le=480) # 分鐘
    meeting_link: Optional[UrlStr] = None
    notes: Optional[str] = Field(None, max_length=2000)

class InterviewUpdate(BaseModel):
    scheduled_at: Optional[datetime] = None
    duration: Optional[int] = Field(None, ge=15, le=480)
    meeting_link: Optional[UrlStr] = None
    notes: Optional[str] = Field(None, max_length=2000)

    @field_validator('scheduled_at', 'duration')
    @classmethod
    def validate_not_null(cls, v):
        return reject_null(v)

# 面試結束後由公司評分
class InterviewComplete(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    notes: Optional[str] = Field(None, max_length=2000)

class InterviewOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    interview_id: str
    application_id: str
    scheduled_at: datetime
    duration: int
    meeting_link: Optional[str] = None
    notes: Optional[str] = None
    completed: bool
    rating: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    application: Optional[ApplicationBrief] = None
