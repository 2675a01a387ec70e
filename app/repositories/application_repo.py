# app/repositories/application_repo.py
import logging
from typing import List, Optional, Set

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import joinedload

from app.models.application import Application, ApplicationStatusEnum
from app.models.freelancer_profile import FreelancerProfile
from app.models.mission import Mission
from app.utils.pagination import fetch_page

logger = logging.getLogger(__name__)


class ApplicationRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    def _get_common_application_options(self):
        """ApplicationOut 需要 mission 與 freelancer.user；權限檢查需要 mission.company"""
        return [
            joinedload(Application.mission).joinedload(Mission.company),
            joinedload(Application.freelancer).joinedload(FreelancerProfile.user),
        ]

    async def create_application(self, application: Application) -> Application:
        try:
            self.db.add(application)
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"建立申請失敗: {e}", exc_info=True)
            raise
        return await self.get_application_by_id(application.application_id)

    async def get_application_by_id(self, application_id: str) -> Optional[Application]:
        stmt = (
            select(Application)
            .where(Application.application_id == application_id)
            .options(*self._get_common_application_options())
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def get_application_by_mission_and_freelancer(
        self, mission_id: str, freelancer_id: str
    ) -> Optional[Application]:
        stmt = select(Application).where(
            Application.mission_id == mission_id,
            Application.freelancer_id == freelancer_id,
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def list_applications_by_mission(
        self,
        mission_id: str,
        page: int,
        limit: int,
        status: Optional[ApplicationStatusEnum] = None,
    ) -> dict:
        stmt = select(Application).where(Application.mission_id == mission_id)
        if status is not None:
            stmt = stmt.where(Application.status == status)
        stmt = stmt.order_by(Application.created_at.desc(), Application.application_id)
        return await fetch_page(self.db, stmt, page, limit, self._get_common_application_options())

    async def list_applications_by_freelancer(self, freelancer_id: str, page: int, limit: int) -> dict:
        stmt = (
            select(Application)
            .where(Application.freelancer_id == freelancer_id)
            .order_by(Application.created_at.desc(), Application.application_id)
        )
        return await fetch_page(self.db, stmt, page, limit, self._get_common_application_options())

    async def get_applied_mission_ids(self, freelancer_id: str) -> Set[str]:
        """媒合用：工作者已申請過的任務"""
        stmt = select(Application.mission_id).where(Application.freelancer_id == freelancer_id)
        result = await self.db.execute(stmt)
        return set(result.scalars().all())

    async def get_applicant_ids(self, mission_id: str) -> Set[str]:
        """媒合用：已申請此任務的工作者 (profile_id)"""
        stmt = select(Application.freelancer_id).where(Application.mission_id == mission_id)
        result = await self.db.execute(stmt)
        return set(result.scalars().all())

    async def update_application(self, application: Application) -> Application:
        await self.db.commit()
        return await self.get_application_by_id(application.application_id)
