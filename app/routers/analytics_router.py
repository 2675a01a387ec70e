# app/routers/analytics_router.py

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from app.core.database import get_db
from app.core.security import get_current_user, require_roles
from app.models.user import User, UserRoleEnum
from app.services.analytics_service import AnalyticsService
from app.schemas.common_schema import ApiResponse
from app.schemas.analytics_schema import (
    ActiveContractsCount, ActiveFreelancersCount, AnalyticsSummary, MarketTrend, SkillCount, TrendPeriod,
)
from app.utils.response import success_response

router = APIRouter(
    prefix="/analytics",
    tags=["Analytics"],
    dependencies=[Depends(get_current_user)]
)

admin_only = require_roles(UserRoleEnum.admin)


def get_analytics_service(db: AsyncSession = Depends(get_db)) -> AnalyticsService:
    return AnalyticsService(db)


@router.get("/summary", response_model=ApiResponse[AnalyticsSummary])
async def get_summary(
    current_user: User = Depends(get_current_user),
    service: AnalyticsService = Depends(get_analytics_service)
):
    """
    依登入者角色回傳統計摘要
    - FREELANCE: 收入、合約、申請轉換率、評分、技能需求
    - COMPANY: 任務、合約、花費、平均招募天數
    - ADMIN: 全平台數量與近 30 天成長
    """
    return success_response(await service.get_summary(current_user))

@router.get("/top-skills", response_model=ApiResponse[List[SkillCount]])
async def get_top_skills(
    _: User = Depends(admin_only),
    service: AnalyticsService = Depends(get_analytics_service)
):
    return success_response(await service.get_top_skills())

@router.get("/market-trends", response_model=ApiResponse[List[MarketTrend]])
async def get_market_trends(
    period: TrendPeriod = Query('quarterly'),
    sectors: Optional[List[str]] = Query(None),
    skills: Optional[List[str]] = Query(None),
    service: AnalyticsService = Depends(get_analytics_service)
):
    """近一年的任務依期間分組，可用 ?sectors=A&sectors=B 篩選產業"""
    return success_response(await service.get_market_trends(period, sectors, skills))

@router.get("/active-contracts", response_model=ApiResponse[ActiveContractsCount])
async def get_active_contracts(service: AnalyticsService = Depends(get_analytics_service)):
    return success_response(await service.get_active_contracts())

@router.get("/active-freelancers", response_model=ApiResponse[ActiveFreelancersCount])
async def get_active_freelancers(service: AnalyticsService = Depends(get_analytics_service)):
    return success_response(await service.get_active_freelancers())
