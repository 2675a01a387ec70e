# app/services/analytics_service.py
import logging
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ForbiddenError
from app.models.contract import ContractStatusEnum
from app.models.mission import MissionStatusEnum
from app.models.user import User, UserRoleEnum
from app.repositories.analytics_repo import AnalyticsRepository
from app.repositories.feedback_repo import FeedbackRepository
from app.repositories.profile_repo import ProfileRepository
from app.schemas.analytics_schema import (
    ActiveContractsCount, ActiveFreelancersCount, AdminSummary, CompanySummary, FreelancerSummary,
    MarketTrend, PlatformGrowth, SectorCount, SkillCount, SkillDemand,
)
from app.utils.matching import skill_names

logger = logging.getLogger(__name__)

RECENT_DAYS = 30
SKILL_DEMAND_DAYS = 90
TRENDS_DAYS = 365
WORKING_DAYS_PER_MONTH = 20
TOP_SKILLS_LIMIT = 20
TOP_SECTORS_LIMIT = 5


def _percent(part: float, whole: float) -> float:
    return round(part / whole * 100, 2) if whole else 0


def _days_between(start: datetime, end: datetime) -> float:
    return max((end - start).total_seconds() / 86400, 0)


def average_days(pairs: Iterable[Tuple[datetime, datetime]]) -> float:
    """[(開始, 結束)] 的平均天數，沒有資料時為 0"""
    days = [_days_between(start, end) for start, end in pairs if start and end]
    return sum(days) / len(days) if days else 0


def count_top_skills(
    mission_skills: Iterable[Tuple[list, list]],
    freelancer_skills: Iterable[list],
    limit: int = TOP_SKILLS_LIMIT,
) -> List[SkillCount]:
    """
    任務 (必要 + 加分技能) 與工作者技能一起計數，依次數由多到少
    同次數時保留先出現的順序
    """
    counts: Dict[str, int] = {}
    for required, optional in mission_skills:
        for skill in list(required) + list(optional):
            if skill:
                counts[skill] = counts.get(skill, 0) + 1
    for skills in freelancer_skills:
        for skill in skills:
            name = skill.get("name") if isinstance(skill, dict) else skill
            if name:
                counts[name] = counts.get(name, 0) + 1

    ranked = sorted(counts.items(), key=lambda item: -item[1])
    return [SkillCount(skill=skill, count=count) for skill, count in ranked[:limit]]


def skill_demand(freelancer_skills, mission_skills: List[Tuple[list, list]]) -> List[SkillDemand]:
    """工作者每項技能被多少任務需要 (不分大小寫)，需求高的排前面"""
    demand = []
    for name in skill_names(freelancer_skills):
        count = sum(
            1 for required, optional in mission_skills
            if name in {str(s).strip().lower() for s in list(required) + list(optional)}
        )
        demand.append(SkillDemand(skill=name, demand=count))
    return sorted(demand, key=lambda d: -d.demand)


def _trend_key(created_at: datetime, period: str) -> str:
    if period == 'monthly':
        return f"{created_at.year}-{created_at.month}"
    if period == 'yearly':
        return str(created_at.year)
    return f"{created_at.year}-Q{(created_at.month - 1) // 3 + 1}"


def _budget_midpoint(mission) -> float:
    # 沒填的一端視為 0
    low = float(mission.budget_min or 0)
    high = float(mission.budget_max or 0)
    return (low + high) / 2


def group_market_trends(missions, period: str = 'quarterly', skills: Optional[List[str]] = None) -> List[MarketTrend]:
    """
    依期間分組：平均預算 (預算區間中點)、任務數、前五大產業
    missions 需依建立時間排序，回傳的期間順序與其相同
    """
    wanted = {s.strip().lower() for s in skills or [] if s.strip()}
    groups: Dict[str, list] = {}
    for mission in missions:
        if wanted and not wanted & {str(s).strip().lower() for s in mission.required_skills or []}:
            continue
        groups.setdefault(_trend_key(mission.created_at, period), []).append(mission)

    trends = []
    for key, grouped in groups.items():
        sectors: Dict[str, int] = {}
        for mission in grouped:
            if mission.sector:
                sectors[mission.sector] = sectors.get(mission.sector, 0) + 1
        top_sectors = sorted(sectors.items(), key=lambda item: -item[1])[:TOP_SECTORS_LIMIT]
        trends.append(MarketTrend(
            period=key,
            average_budget=round(sum(_budget_midpoint(m) for m in grouped) / len(grouped), 2),
            mission_count=len(grouped),
            top_sectors=[SectorCount(sector=sector, count=count) for sector, count in top_sectors],
        ))
    return trends


class AnalyticsService:
    def __init__(self, db: AsyncSession):
        self.repo = AnalyticsRepository(db)
        self.profile_repo = ProfileRepository(db)
        self.feedback_repo = FeedbackRepository(db)

    async def get_summary(self, user: User):
        """依角色回傳不同的統計摘要"""
        since = datetime.now() - timedelta(days=RECENT_DAYS)
        if user.role == UserRoleEnum.freelancer:
            return await self._freelancer_summary(user, since)
        if user.role == UserRoleEnum.company:
            return await self._company_summary(user, since)
        if user.role == UserRoleEnum.admin:
            return await self._admin_summary(since)
        raise ForbiddenError(f"不支援的角色: {user.role.value}")

    async def _freelancer_summary(self, user: User, since: datetime) -> FreelancerSummary:
        profile = await self.profile_repo.get_freelancer_profile_by_user_id(user.user_id)
        if not profile:
            return FreelancerSummary()

        contracts = await self.repo.count_contracts_by_status(freelancer_id=profile.profile_id)
        applications = await self.repo.count_freelancer_applications(profile.profile_id, since)
        rating = await self.feedback_repo.calculate_user_rating(user.user_id)
        demand_since = datetime.now() - timedelta(days=SKILL_DEMAND_DAYS)
        mission_skills = await self.repo.list_mission_skills(since=demand_since)

        active = contracts.get(ContractStatusEnum.active, 0)
        return FreelancerSummary(
            total_earnings=await self.repo.sum_freelancer_earnings(profile.profile_id),
            active_contracts=active,
            completed_jobs=contracts.get(ContractStatusEnum.completed, 0),
            total_applications=applications["total"],
            conversion_rate=_percent(applications["accepted"], applications["total"]),
            recent_applications=applications["recent"],
            average_rating=round(rating["average_rating"], 2),
            rating_count=rating["total_reviews"],
            skill_demand=skill_demand(profile.skills, mission_skills),
            projected_earnings=float(profile.daily_rate or 0) * WORKING_DAYS_PER_MONTH * active,
        )

    async def _company_summary(self, user: User, since: datetime) -> CompanySummary:
        profile = await self.profile_repo.get_company_profile_by_user_id(user.user_id)
        if not profile:
            return CompanySummary()

        missions = await self.repo.count_missions_by_status(profile.profile_id)
        contracts = await self.repo.count_contracts_by_status(company_id=profile.profile_id)
        total_missions = sum(missions.values())
        completed_missions = missions.get(MissionStatusEnum.completed, 0)
        total_applications = await self.repo.count_company_applications(profile.profile_id)
        hire_dates = await self.repo.list_hire_dates(company_id=profile.profile_id, completed_only=True)

        return CompanySummary(
            total_missions=total_missions,
            active_missions=missions.get(MissionStatusEnum.published, 0),
            completed_missions=completed_missions,
            active_contracts=contracts.get(ContractStatusEnum.active, 0),
            active_freelancers=await self.repo.count_active_freelancers(company_id=profile.profile_id),
            total_spend=await self.repo.sum_company_spend(profile.profile_id),
            total_applications=total_applications,
            avg_applications_per_mission=round(total_applications / total_missions, 2) if total_missions else 0,
            avg_time_to_hire=int(round(average_days(hire_dates))),
            recent_missions=await self.repo.count_recent_missions(profile.profile_id, since),
            success_rate=_percent(completed_missions, total_missions),
        )

    async def _admin_summary(self, since: datetime) -> AdminSummary:
        counts = await self.repo.count_platform(since)
        hire_dates = await self.repo.list_hire_dates()
        return AdminSummary(
            total_users=counts["total_users"],
            total_missions=counts["total_missions"],
            total_contracts=counts["total_contracts"],
            total_payments=counts["total_payments"],
            active_disputes=counts["active_disputes"],
            growth=PlatformGrowth(
                new_users=counts["new_users"],
                new_missions=counts["new_missions"],
                new_contracts=counts["new_contracts"],
            ),
            freelancers_count=counts["freelancers_count"],
            companies_count=counts["companies_count"],
            avg_rating=round(await self.repo.average_feedback_rating(), 2),
            total_volume=await self.repo.sum_payment_volume(),
            avg_match_time=round(average_days(hire_dates), 2),
            success_rate=_percent(counts["completed_contracts"], counts["total_contracts"]),
        )

    async def get_top_skills(self) -> List[SkillCount]:
        mission_skills = await self.repo.list_mission_skills()
        freelancer_skills = await self.repo.list_freelancer_skills()
        return count_top_skills(mission_skills, freelancer_skills)

    async def get_market_trends(
        self,
        period: str = 'quarterly',
        sectors: Optional[List[str]] = None,
        skills: Optional[List[str]] = None,
    ) -> List[MarketTrend]:
        since = datetime.now() - timedelta(days=TRENDS_DAYS)
        missions = await self.repo.list_missions_for_trends(since, sectors)
        trends = group_market_trends(missions, period, skills)
        logger.info(f"市場趨勢 ({period}): 任務 {len(missions)} 筆，{len(trends)} 個期間")
        return trends

    async def get_active_contracts(self) -> ActiveContractsCount:
        contracts = await self.repo.count_contracts_by_status()
        return ActiveContractsCount(active_contracts=contracts.get(ContractStatusEnum.active, 0))

    async def get_active_freelancers(self) -> ActiveFreelancersCount:
        return ActiveFreelancersCount(active_freelancers=await self.repo.count_active_freelancers())
