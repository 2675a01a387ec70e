# app/repositories/analytics_repo.py
# 統計用的唯讀查詢，只回傳數字或原始欄位，計算邏輯放在 AnalyticsService
import logging
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.models.application import Application, ApplicationStatusEnum
from app.models.company_profile import CompanyProfile
from app.models.contract import Contract, ContractStatusEnum
from app.models.dispute import Dispute, DisputeStatusEnum
from app.models.feedback import Feedback
from app.models.freelancer_profile import FreelancerProfile
from app.models.mission import Mission, MissionStatusEnum
from app.models.payment import Payment
from app.models.user import User

logger = logging.getLogger(__name__)

PAYMENT_COMPLETED = "COMPLETED"


class AnalyticsRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _scalar(self, stmt) -> float:
        result = await self.db.execute(stmt)
        return result.scalar() or 0

    async def count(self, model, *conditions) -> int:
        stmt = select(func.count()).select_from(model)
        if conditions:
            stmt = stmt.where(*conditions)
        return int(await self._scalar(stmt))

    # --- 工作者 ---
    async def sum_freelancer_earnings(self, freelancer_id: str) -> float:
        stmt = (
            select(func.sum(Payment.amount))
            .join(Contract, Payment.contract_id == Contract.contract_id)
            .where(Contract.freelancer_id == freelancer_id, Payment.status == PAYMENT_COMPLETED)
        )
        return float(await self._scalar(stmt))

    async def count_contracts_by_status(
        self, freelancer_id: Optional[str] = None, company_id: Optional[str] = None
    ) -> Dict[ContractStatusEnum, int]:
        stmt = select(Contract.status, func.count(Contract.contract_id)).group_by(Contract.status)
        if freelancer_id is not None:
            stmt = stmt.where(Contract.freelancer_id == freelancer_id)
        if company_id is not None:
            stmt = stmt.where(Contract.company_id == company_id)
        result = await self.db.execute(stmt)
        return {status: count for status, count in result.all()}

    async def count_freelancer_applications(self, freelancer_id: str, since: datetime) -> Dict[str, int]:
        """{total, accepted, recent}"""
        base = Application.freelancer_id == freelancer_id
        return {
            "total": await self.count(Application, base),
            "accepted": await self.count(Application, base, Application.status == ApplicationStatusEnum.accepted),
            "recent": await self.count(Application, base, Application.created_at >= since),
        }

    async def list_mission_skills(self, since: Optional[datetime] = None) -> List[Tuple[list, list]]:
        """[(required_skills, optional_skills)]"""
        stmt = select(Mission.required_skills, Mission.optional_skills)
        if since is not None:
            stmt = stmt.where(Mission.created_at >= since)
        result = await self.db.execute(stmt)
        return [(required or [], optional or []) for required, optional in result.all()]

    async def list_freelancer_skills(self) -> List[list]:
        result = await self.db.execute(select(FreelancerProfile.skills))
        return [skills or [] for skills in result.scalars().all()]

    # --- 公司 ---
    async def count_missions_by_status(self, company_id: str) -> Dict[MissionStatusEnum, int]:
        stmt = (
            select(Mission.status, func.count(Mission.mission_id))
            .where(Mission.company_id == company_id)
            .group_by(Mission.status)
        )
        result = await self.db.execute(stmt)
        return {status: count for status, count in result.all()}

    async def count_recent_missions(self, company_id: str, since: datetime) -> int:
        return await self.count(Mission, Mission.company_id == company_id, Mission.created_at >= since)

    async def sum_company_spend(self, company_id: str) -> float:
        stmt = (
            select(func.sum(Payment.amount))
            .join(Contract, Payment.contract_id == Contract.contract_id)
            .where(Contract.company_id == company_id, Payment.status == PAYMENT_COMPLETED)
        )
        return float(await self._scalar(stmt))

    async def count_company_applications(self, company_id: str) -> int:
        stmt = (
            select(func.count(Application.application_id))
            .join(Mission, Application.mission_id == Mission.mission_id)
            .where(Mission.company_id == company_id)
        )
        return int(await self._scalar(stmt))

    async def count_active_freelancers(self, company_id: Optional[str] = None) -> int:
        """有進行中合約的工作者人數 (不重複)"""
        stmt = select(func.count(func.distinct(Contract.freelancer_id))).where(
            Contract.status == ContractStatusEnum.active
        )
        if company_id is not None:
            stmt = stmt.where(Contract.company_id == company_id)
        return int(await self._scalar(stmt))

    async def list_hire_dates(
        self, company_id: Optional[str] = None, completed_only: bool = False
    ) -> List[Tuple[datetime, datetime]]:
        """[(任務建立時間, 該任務第一份合約建立時間)]"""
        stmt = (
            select(Mission.created_at, func.min(Contract.created_at))
            .join(Contract, Contract.mission_id == Mission.mission_id)
            .group_by(Mission.mission_id, Mission.created_at)
        )
        if company_id is not None:
            stmt = stmt.where(Mission.company_id == company_id)
        if completed_only:
            stmt = stmt.where(Mission.status == MissionStatusEnum.completed)
        result = await self.db.execute(stmt)
        return [(mission_created, contract_created) for mission_created, contract_created in result.all()]

    # --- 全平台 (管理員) ---
    async def count_platform(self, since: datetime) -> dict:
        return {
            "total_users": await self.count(User),
            "total_missions": await self.count(Mission),
            "total_contracts": await self.count(Contract),
            "completed_contracts": await self.count(Contract, Contract.status == ContractStatusEnum.completed),
            "total_payments": await self.count(Payment, Payment.status == PAYMENT_COMPLETED),
            "active_disputes": await self.count(
                Dispute, Dispute.status.in_([DisputeStatusEnum.open, DisputeStatusEnum.in_review])
            ),
            "new_users": await self.count(User, User.created_at >= since),
            "new_missions": await self.count(Mission, Mission.created_at >= since),
            "new_contracts": await self.count(Contract, Contract.created_at >= since),
            "freelancers_count": await self.count(FreelancerProfile),
            "companies_count": await self.count(CompanyProfile),
        }

    async def average_feedback_rating(self) -> float:
        return float(await self._scalar(select(func.avg(Feedback.rating))))

    async def sum_payment_volume(self) -> float:
        stmt = select(func.sum(Payment.amount)).where(Payment.status == PAYMENT_COMPLETED)
        return float(await self._scalar(stmt))

    async def list_missions_for_trends(self, since: datetime, sectors: Optional[List[str]] = None) -> List[Mission]:
        stmt = select(Mission).where(Mission.created_at >= since)
        if sectors:
            stmt = stmt.where(Mission.sector.in_(sectors))
        stmt = stmt.order_by(Mission.created_at, Mission.mission_id)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())
