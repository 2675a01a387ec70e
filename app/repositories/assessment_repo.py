# app/repositories/assessment_repo.py
import logging
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import joinedload

from app.models.application import Application
from app.models.assessment import Assessment, AssessmentTypeEnum
from app.models.company_profile import CompanyProfile
from app.models.freelancer_profile import FreelancerProfile
from app.models.mission import Mission
from app.utils.pagination import fetch_page

logger = logging.getLogger(__name__)


class AssessmentRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    def _get_common_assessment_options(self):
        # 權限檢查要用到 application -> mission.company / freelancer
        return [
            joinedload(Assessment.application).options(
                joinedload(Application.mission).joinedload(Mission.company),
                joinedload(Application.freelancer),
            ),
            joinedload(Assessment.reviewer),
        ]

    async def create_assessment(self, assessment: Assessment) -> Assessment:
        try:
            self.db.add(assessment)
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"建立測驗失敗: {e}", exc_info=True)
            raise
        return await self.get_assessment_by_id(assessment.assessment_id)

    async def get_assessment_by_id(self, assessment_id: str) -> Optional[Assessment]:
        stmt = (
            select(Assessment)
            .where(Assessment.assessment_id == assessment_id)
            .options(*self._get_common_assessment_options())
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def list_assessments(
        self,
        page: int,
        limit: int,
        user_id: Optional[str] = None,
        type: Optional[AssessmentTypeEnum] = None,
        application_id: Optional[str] = None,
    ) -> dict:
        """
        user_id 為 None 時列出全部 (管理員)
        否則只列出與該使用者有關的測驗 (出題的公司 / 作答的工作者)
        """
        stmt = select(Assessment)
        if user_id is not None:
            stmt = (
                stmt.join(Application, Assessment.application_id == Application.application_id)
                .join(Mission, Application.mission_id == Mission.mission_id)
                .join(CompanyProfile, Mission.company_id == CompanyProfile.profile_id)
                .join(FreelancerProfile, Application.freelancer_id == FreelancerProfile.profile_id)
                .where(or_(CompanyProfile.user_id == user_id, FreelancerProfile.user_id == user_id))
            )
        if type is not None:
            stmt = stmt.where(Assessment.type == type)
        if application_id is not None:
            stmt = stmt.where(Assessment.application_id == application_id)
        stmt = stmt.order_by(Assessment.created_at.desc(), Assessment.assessment_id)
        return await fetch_page(self.db, stmt, page, limit, self._get_common_assessment_options())

    async def update_assessment(self, assessment: Assessment) -> Assessment:
        await self.db.commit()
        return await self.get_assessment_by_id(assessment.assessment_id)
