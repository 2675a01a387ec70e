# app/repositories/interview_repo.py
import logging
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import joinedload

from app.models.application import Application
from app.models.company_profile import CompanyProfile
from app.models.freelancer_profile import FreelancerProfile
from app.models.interview import Interview
from app.models.mission import Mission
from app.utils.pagination import fetch_page

logger = logging.getLogger(__name__)


class InterviewRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    def _get_common_interview_options(self):
        # 權限檢查要用到 application -> mission.company / freelancer
        return [
            joinedload(Interview.application).options(
                joinedload(Application.mission).joinedload(Mission.company),
                joinedload(Application.freelancer),
            ),
        ]

    async def create_interview(self, interview: Interview) -> Interview:
        try:
            self.db.add(interview)
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"建立面試失敗: {e}", exc_info=True)
            raise
        return await self.get_interview_by_id(interview.interview_id)

    async def get_interview_by_id(self, interview_id: str) -> Optional[Interview]:
        stmt = (
            select(Interview)
            .where(Interview.interview_id == interview_id)
            .options(*self._get_common_interview_options())
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def list_interviews_by_user(self, user_id: str, page: int, limit: int) -> dict:
        """
        列出與使用者有關的面試
        (工作者：自己的申請；公司：自己任務底下的申請)
        """
        stmt = (
            select(Interview)
            .join(Application, Interview.application_id == Application.application_id)
            .join(Mission, Application.mission_id == Mission.mission_id)
            .join(CompanyProfile, Mission.company_id == CompanyProfile.profile_id)
            .join(FreelancerProfile, Application.freelancer_id == FreelancerProfile.profile_id)
            .where(or_(CompanyProfile.user_id == user_id, FreelancerProfile.user_id == user_id))
            .order_by(Interview.scheduled_at.desc(), Interview.interview_id)
        )
        return await fetch_page(self.db, stmt, page, limit, self._get_common_interview_options())

    async def update_interview(self, interview: Interview) -> Interview:
        await self.db.commit()
        return await self.get_interview_by_id(interview.interview_id)
