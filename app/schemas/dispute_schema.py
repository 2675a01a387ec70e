# app/schemas/dispute_schema.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Literal, Optional
from datetime import datetime

from app.models.dispute import DisputeStatusEnum
from app.schemas.common_schema import ContractBrief, UserBrief


class DisputeCreate(BaseModel):
    contract_id: str = Field(..., min_length=1)
    reason: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=10, max_length=2000)


class DisputeUpdate(BaseModel):
    status: Optional[DisputeStatusEnum] = None
    resolution: Optional[str] = None


class DisputeResolve(BaseModel):
    resolution: str = Field(..., min_length=10)
    # 省略時視為 RESOLVED
    status: Literal['RESOLVED', 'CLOSED'] = 'RESOLVED'


class DisputeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    dispute_id: str
    contract_id: str
    opened_by: str
    reason: str
    description: str
    status: DisputeStatusEnum
    resolution: Optional[str] = None
    resolved_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    contract: Optional[ContractBrief] = None
    opener: Optional[UserBrief] = None
