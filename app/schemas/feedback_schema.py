# app/schemas/feedback_schema.py
from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from typing import Annotated, Dict, Optional
from datetime import datetime

from app.schemas.common_schema import ContractBrief, MissionBrief, UserBrief, reject_null

# 單項技能評分 1 ~ 5
SkillScore = Annotated[int, Field(ge=1, le=5)]


class FeedbackCreate(BaseModel):
    to_user_id: str = Field(..., min_length=1)
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=2000)
    skills: Optional[Dict[str, SkillScore]] = None
    is_public: bool = True
    # (重要) contract_id 要放在 mission_id 前面，驗證 mission_id 時才讀得到
    contract_id: Optional[str] = None
    mission_id: Optional[str] = Field(None, validate_default=True)

    @field_validator('mission_id')
    @classmethod
    def validate_reference(cls, v: Optional[str], info: ValidationInfo) -> Optional[str]:
        """mission_id 與 contract_id 至少要有一個，錯誤一律標在 mission_id"""
        if not v and not info.data.get('contract_id'):
            raise ValueError('mission_id 或 contract_id 至少需要提供一個')
        return v


class FeedbackUpdate(BaseModel):
    rating: Optional[int] = Field(None, ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=2000)
    skills: Optional[Dict[str, SkillScore]] = None
    is_public: Optional[bool] = None

    @field_validator('rating', 'is_public')
    @classmethod
    def validate_not_null(cls, v):
        return reject_null(v)


class FeedbackOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    feedback_id: str
    from_user_id: str
    to_user_id: str
    mission_id: Optional[str] = None
    contract_id: Optional[str] = None
    rating: int
    comment: Optional[str] = None
    skills: Optional[Dict[str, int]] = None
    is_public: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # 只投影 {user_id, name, role} / {mission_id, title} / {contract_id, title, status}
    from_user: Optional[UserBrief] = None
    to_user: Optional[UserBrief] = None
    mission: Optional[MissionBrief] = None
    contract: Optional[ContractBrief] = None


class UserRating(BaseModel):
    average_rating: float
    total_reviews: int
