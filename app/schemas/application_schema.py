# app/schemas/application_schema.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime

from app.models.application import ApplicationStatusEnum
from app.schemas.common_schema import FreelancerBrief, MissionBrief

# --- 建立 (Create) ---
# mission_id 從 URL 取得，freelancer_id 從 Token 對應的 Profile 取得
class ApplicationCreate(BaseModel):
    cover_letter: str = Field(..., min_length=50, max_length=5000)
    proposed_rate: Optional[float] = Field(None, ge=0)
    availability_plan: Optional[str] = Field(None, min_length=10, max_length=2000)

# --- 狀態更新 (公司審核) ---
class ApplicationStatusUpdate(BaseModel):
    status: ApplicationStatusEnum
    notes: Optional[str] = Field(None, max_length=2000)

# --- 讀取 (Read / Out) ---
class ApplicationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    application_id: str
    mission_id: str
    freelancer_id: str
    cover_letter: str
    proposed_rate: Optional[float] = None
    availability_plan: Optional[str] = None
    notes: Optional[str] = None
    status: ApplicationStatusEnum
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    mission: Optional[MissionBrief] = None
    freelancer: Optional[FreelancerBrief] = None


class ApplicantBrief(FreelancerBrief):
    # 讀取時計算：是否有及格的測驗
    is_certified: bool = False

# 公司檢視任務申請列表時使用，工作者附帶認證標記
class MissionApplicationOut(ApplicationOut):
    freelancer: Optional[ApplicantBrief] = None

# 面試等模組巢狀顯示用
class ApplicationBrief(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    application_id: str
    mission_id: str
    freelancer_id: str
    status: ApplicationStatusEnum
