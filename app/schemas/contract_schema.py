# app/schemas/contract_schema.py

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from typing import Any, Dict, List, Optional
from datetime import datetime

from app.models.contract import ContractStatusEnum
from app.schemas.common_schema import CompanyBrief, FreelancerBrief, MissionBrief, reject_null
from app.schemas.milestone_schema import MilestoneOut

# --- 1. 建立合約 (Input) ---
# 公司針對任務與工作者建立合約草案
class ContractCreate(BaseModel):
    mission_id: str = Field(..., min_length=1)
    freelancer_id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1, max_length=255)
    terms: Dict[str, Any] = {}
    fixed_price: Optional[float] = Field(None, gt=0)
    # hourly_rate 與 fixed_price 至少要有一個 (錯誤標在 hourly_rate)
    hourly_rate: Optional[float] = Field(None, gt=0, validate_default=True)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    @field_validator('hourly_rate')
    @classmethod
    def validate_pricing(cls, v: Optional[float], info: ValidationInfo) -> Optional[float]:
        if v is None and info.data.get('fixed_price') is None:
            raise ValueError('hourly_rate 或 fixed_price 至少需要填寫一個')
        return v

    @field_validator('end_date')
    @classmethod
    def validate_date_range(cls, v: Optional[datetime], info: ValidationInfo) -> Optional[datetime]:
        start_date = info.data.get('start_date')
        if v is not None and start_date is not None and v < start_date:
            raise ValueError('end_date 不可早於 start_date')
        return v

# --- 2. 草案修改 (Input) ---
# 只有 DRAFT 狀態可修改
class ContractUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    terms: Optional[Dict[str, Any]] = None
    hourly_rate: Optional[float] = Field(None, gt=0)
    fixed_price: Optional[float] = Field(None, gt=0)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    @field_validator('title', 'terms', 'start_date')
    @classmethod
    def validate_not_null(cls, v):
        return reject_null(v)

# --- 3. 狀態更新 (Input) ---
# 簽署走 /sign，這裡只處理 COMPLETED / TERMINATED
class ContractStatusUpdate(BaseModel):
    status: ContractStatusEnum

# --- 4. 完整合約 (Output) ---
class ContractOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    contract_id: str
    mission_id: str
    freelancer_id: str
    company_id: str
    title: str
    terms: Dict[str, Any] = {}
    hourly_rate: Optional[float] = None
    fixed_price: Optional[float] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    status: ContractStatusEnum
    freelancer_signed: bool
    company_signed: bool
    signed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # 巢狀載入關聯資料
    mission: Optional[MissionBrief] = None
    freelancer: Optional[FreelancerBrief] = None
    company: Optional[CompanyBrief] = None
    milestones: List[MilestoneOut] = []
