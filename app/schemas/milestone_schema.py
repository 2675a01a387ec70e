# app/schemas/milestone_schema.py
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional
from datetime import datetime

from app.models.contract import MilestoneStatusEnum
from app.schemas.common_schema import reject_null

class MilestoneCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    amount: float = Field(..., gt=0)
    due_date: Optional[datetime] = None
    deliverable: Optional[str] = None

# 只有 PENDING 的里程碑可以修改內容
class MilestoneUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    amount: Optional[float] = Field(None, gt=0)
    due_date: Optional[datetime] = None
    deliverable: Optional[str] = None

    @field_validator('title', 'amount')
    @classmethod
    def validate_not_null(cls, v):
        return reject_null(v)

class MilestoneStatusUpdate(BaseModel):
    status: MilestoneStatusEnum
    # 工作者提交時可附上交付內容
    deliverable: Optional[str] = None

class MilestoneOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    milestone_id: str
    contract_id: str
    title: str
    description: Optional[str] = None
    amount: float
    due_date: Optional[datetime] = None
    deliverable: Optional[str] = None
    status: MilestoneStatusEnum
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
