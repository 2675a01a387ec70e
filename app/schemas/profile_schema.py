# app/schemas/profile_schema.py
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Literal, Optional
from datetime import date, datetime

from app.schemas.common_schema import UrlStr, UserBrief, reject_null

SkillLevel = Literal['beginner', 'intermediate', 'advanced', 'expert']
Seniority = Literal['junior', 'mid', 'senior']

# --- 技能 (直接存在 Profile 的 JSON 欄位) ---
class SkillItem(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    level: SkillLevel = 'intermediate'

class Availability(BaseModel):
    status: Literal['available', 'busy', 'unavailable'] = 'available'
    start_date: Optional[date] = None


# --- 作品集 ---
class PortfolioLink(BaseModel):
    type: str = Field(..., max_length=50)
    url: UrlStr

class PortfolioItemCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    technologies: List[str] = []
    links: List[PortfolioLink] = []

class PortfolioItemUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)
    technologies: Optional[List[str]] = None
    links: Optional[List[PortfolioLink]] = None

    @field_validator('title', 'description', 'technologies', 'links')
    @classmethod
    def validate_not_null(cls, v):
        return reject_null(v)

class PortfolioItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    item_id: str
    profile_id: str
    title: str
    description: str
    technologies: List[str] = []
    links: List[dict] = []
    created_at: Optional[datetime] = None


# --- 自由工作者 (Freelancer) ---
class FreelancerProfileBase(BaseModel):
    title: Optional[str] = Field(None, max_length=255)
    bio: Optional[str] = None
    skills: List[SkillItem] = []
    seniority: Seniority = 'mid'
    daily_rate: Optional[float] = Field(None, ge=0)
    availability: Availability = Availability()
    location: Optional[str] = Field(None, max_length=255)
    remote: bool = True
    languages: List[str] = []
    cv_path: Optional[str] = Field(None, max_length=500)

class FreelancerProfileCreate(FreelancerProfileBase):
    title: str = Field(..., min_length=2, max_length=255) # 建立時職稱必填

class FreelancerProfileUpdate(BaseModel):
    # 更新時全為選填
    title: Optional[str] = Field(None, min_length=2, max_length=255)
    bio: Optional[str] = None
    skills: Optional[List[SkillItem]] = None
    seniority: Optional[Seniority] = None
    daily_rate: Optional[float] = Field(None, ge=0)
    availability: Optional[Availability] = None
    location: Optional[str] = Field(None, max_length=255)
    remote: Optional[bool] = None
    languages: Optional[List[str]] = None
    cv_path: Optional[str] = Field(None, max_length=500)

    @field_validator('skills', 'seniority', 'remote', 'languages')
    @classmethod
    def validate_not_null(cls, v):
        return reject_null(v)

class FreelancerProfileOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    profile_id: str
    user_id: str
    title: Optional[str] = None
    bio: Optional[str] = None
    skills: List[SkillItem] = []
    seniority: Optional[str] = None
    daily_rate: Optional[float] = None
    availability: Optional[Availability] = None
    location: Optional[str] = None
    remote: Optional[bool] = None
    languages: List[str] = []
    cv_path: Optional[str] = None
    portfolio: List[PortfolioItemOut] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class FreelancerProfileView(FreelancerProfileOut):
    """
    對外顯示的 Profile 讀取模型。
    rating / total_reviews / completed_jobs / is_certified 都是讀取時計算，不存進資料庫。
    """
    user: Optional[UserBrief] = None
    rating: float = 0
    total_reviews: int = 0
    completed_jobs: int = 0
    is_certified: bool = False


# --- 公司 (Company) ---
class CompanyProfileBase(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=255)
    industry: Optional[str] = Field(None, max_length=255)
    size: Optional[str] = Field(None, max_length=50)
    description: Optional[str] = None
    website: Optional[UrlStr] = None
    location: Optional[str] = Field(None, max_length=255)
    values: List[str] = []

class CompanyProfileCreate(CompanyProfileBase):
    name: str = Field(..., min_length=2, max_length=255) # 建立時公司名必填

class CompanyProfileUpdate(CompanyProfileBase):
    values: Optional[List[str]] = None # 更新時全為選填

    @field_validator('name', 'values')
    @classmethod
    def validate_not_null(cls, v):
        return reject_null(v)

class CompanyProfileOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    profile_id: str
    user_id: str
    name: str
    industry: Optional[str] = None
    size: Optional[str] = None
    description: Optional[str] = None
    website: Optional[str] = None
    location: Optional[str] = None
    values: List[str] = []
    created_at: Optional[datetime] = None
