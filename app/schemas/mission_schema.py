# app/schemas/mission_schema.py
from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from typing import List, Literal, Optional
from datetime import datetime

from app.models.mission import MissionStatusEnum
from app.schemas.common_schema import CompanyBrief, reject_null

Modality = Literal['remote', 'on-site', 'hybrid']
Urgency = Literal['low', 'medium', 'high']
Experience = Literal['junior', 'mid', 'senior']


def _clean_skills(skills: Optional[List[str]]) -> Optional[List[str]]:
    # 去除空白與重複，保留原本順序
    if skills is None:
        return None
    cleaned = []
    for skill in skills:
        name = skill.strip()
        if name and name not in cleaned:
            cleaned.append(name)
    return cleaned


# 公司刊登任務時的 Request Body
class MissionCreate(BaseModel):
    title: str = Field(..., min_length=5, max_length=255)
    description: str = Field(..., min_length=20)
    required_skills: List[str] = Field(..., min_length=1)
    optional_skills: List[str] = []
    budget_min: Optional[float] = Field(None, ge=0)
    budget_max: Optional[float] = Field(None, ge=0)
    duration: Optional[str] = Field(None, max_length=100)
    modality: Modality = 'remote'
    sector: Optional[str] = Field(None, max_length=100)
    urgency: Urgency = 'medium'
    experience: Experience = 'mid'
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    @field_validator('required_skills')
    @classmethod
    def validate_required_skills(cls, v: List[str]) -> List[str]:
        cleaned = _clean_skills(v)
        if not cleaned:
            raise ValueError('至少需要一項必要技能')
        return cleaned

    @field_validator('optional_skills')
    @classmethod
    def validate_optional_skills(cls, v: List[str]) -> List[str]:
        return _clean_skills(v)

    @field_validator('budget_max')
    @classmethod
    def validate_budget_range(cls, v: Optional[float], info: ValidationInfo) -> Optional[float]:
        budget_min = info.data.get('budget_min')
        if v is not None and budget_min is not None and budget_min > v:
            raise ValueError('budget_max 不可小於 budget_min')
        return v

    @field_validator('end_date')
    @classmethod
    def validate_date_range(cls, v: Optional[datetime], info: ValidationInfo) -> Optional[datetime]:
        start_date = info.data.get('start_date')
        if v is not None and start_date is not None and v < start_date:
            raise ValueError('end_date 不可早於 start_date')
        return v


# 公司更新任務時的 Request Body (所有欄位皆可選)
class MissionUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=5, max_length=255)
    description: Optional[str] = Field(None, min_length=20)
    required_skills: Optional[List[str]] = Field(None, min_length=1)
    optional_skills: Optional[List[str]] = None
    budget_min: Optional[float] = Field(None, ge=0)
    budget_max: Optional[float] = Field(None, ge=0)
    duration: Optional[str] = Field(None, max_length=100)
    modality: Optional[Modality] = None
    sector: Optional[str] = Field(None, max_length=100)
    urgency: Optional[Urgency] = None
    experience: Optional[Experience] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    @field_validator('title', 'description', 'required_skills', 'optional_skills')
    @classmethod
    def validate_not_null(cls, v):
        return reject_null(v)

    @field_validator('required_skills', 'optional_skills')
    @classmethod
    def validate_skills(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return _clean_skills(v)

    @field_validator('budget_max')
    @classmethod
    def validate_budget_range(cls, v: Optional[float], info: ValidationInfo) -> Optional[float]:
        budget_min = info.data.get('budget_min')
        if v is not None and budget_min is not None and budget_min > v:
            raise ValueError('budget_max 不可小於 budget_min')
        return v


class MissionStatusUpdate(BaseModel):
    status: MissionStatusEnum # Service 會驗證狀態轉移是否合法


# 回傳給前端的任務資料 (Output)
class MissionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    mission_id: str
    company_id: str
    title: str
    description: str
    required_skills: List[str] = []
    optional_skills: List[str] = []
    budget_min: Optional[float] = None
    budget_max: Optional[float] = None
    duration: Optional[str] = None
    modality: Optional[str] = None
    sector: Optional[str] = None
    urgency: Optional[str] = None
    experience: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    status: MissionStatusEnum
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    company: Optional[CompanyBrief] = None
