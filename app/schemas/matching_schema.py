# app/schemas/matching_schema.py
from pydantic import BaseModel, ConfigDict, Field
from typing import List

from app.schemas.mission_schema import MissionOut
from app.schemas.profile_schema import FreelancerProfileView


# 工作者看到的推薦任務
class MissionMatchOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    mission: MissionOut
    score: int = Field(..., ge=0, le=100, description="媒合分數 (0 ~ 100)")
    reasons: List[str] = []


# 公司看到的推薦人才
class FreelancerMatchOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    freelancer: FreelancerProfileView
    score: int = Field(..., ge=0, le=100, description="媒合分數 (0 ~ 100)")
    reasons: List[str] = []
