# app/schemas/analytics_schema.py
from pydantic import BaseModel, Field
from typing import Annotated, List, Literal, Union

TrendPeriod = Literal['monthly', 'quarterly', 'yearly']


class SkillDemand(BaseModel):
    skill: str
    demand: int # 近 90 天需要此技能的任務數


class SkillCount(BaseModel):
    skill: str
    count: int


class SectorCount(BaseModel):
    sector: str
    count: int


class MarketTrend(BaseModel):
    period: str # e.g. "2024-Q1" / "2024-3" / "2024"
    average_budget: float
    mission_count: int
    top_sectors: List[SectorCount] = []


# --- 依角色不同的摘要 ---
class FreelancerSummary(BaseModel):
    role: Literal['FREELANCE'] = 'FREELANCE'
    total_earnings: float = 0
    active_contracts: int = 0
    completed_jobs: int = 0
    total_applications: int = 0
    conversion_rate: float = 0 # 被錄取的申請比例 (%)
    recent_applications: int = 0
    average_rating: float = 0
    rating_count: int = 0
    skill_demand: List[SkillDemand] = []
    projected_earnings: float = 0 # 日薪 x 20 個工作天 x 進行中合約數


class CompanySummary(BaseModel):
    role: Literal['COMPANY'] = 'COMPANY'
    total_missions: int = 0
    active_missions: int = 0
    completed_missions: int = 0
    active_contracts: int = 0
    active_freelancers: int = 0
    total_spend: float = 0
    total_applications: int = 0
    avg_applications_per_mission: float = 0
    avg_time_to_hire: int = 0 # 天
    recent_missions: int = 0
    success_rate: float = 0 # 已完成任務比例 (%)


class PlatformGrowth(BaseModel):
    new_users: int = 0
    new_missions: int = 0
    new_contracts: int = 0


class AdminSummary(BaseModel):
    role: Literal['ADMIN'] = 'ADMIN'
    total_users: int = 0
    total_missions: int = 0
    total_contracts: int = 0
    total_payments: int = 0
    active_disputes: int = 0
    growth: PlatformGrowth = PlatformGrowth()
    freelancers_count: int = 0
    companies_count: int = 0
    avg_rating: float = 0
    total_volume: float = 0
    avg_match_time: float = 0 # 任務建立到簽約的平均天數
    success_rate: float = 0 # 已完成合約比例 (%)


class ActiveContractsCount(BaseModel):
    active_contracts: int


class ActiveFreelancersCount(BaseModel):
    active_freelancers: int


AnalyticsSummary = Annotated[
    Union[FreelancerSummary, CompanySummary, AdminSummary],
    Field(discriminator='role'),
]
