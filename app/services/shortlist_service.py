# app/services/shortlist_service.py
import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError, ForbiddenError, NotFoundError
from app.models.shortlist import Shortlist
from app.models.user import User
from app.repositories.profile_repo import ProfileRepository
from app.repositories.shortlist_repo import ShortlistRepository
from app.schemas.shortlist_schema import ShortlistCreate
from app.services.mission_service import MissionService

logger = logging.getLogger(__name__)


class ShortlistService:
    def __init__(self, db: AsyncSession):
        self.repo = ShortlistRepository(db)
        self.profile_repo = ProfileRepository(db)
        self.mission_service = MissionService(db)

    async def _get_company_profile(self, user: User):
        company = await self.profile_repo.get_company_profile_by_user_id(user.user_id)
        if not company:
            raise NotFoundError("請先建立公司 Profile", code="PROFILE_NOT_FOUND")
        return company

    async def add_to_shortlist(self, data: ShortlistCreate, user: User) -> Shortlist:
        company = await self._get_company_profile(user)
        mission = await self.mission_service.get_owned_mission(data.mission_id, user)

        freelancer = await self.profile_repo.get_freelancer_profile_by_id(data.freelancer_id)
        if not freelancer:
            raise NotFoundError("工作者不存在", code="FREELANCER_NOT_FOUND")

        existing = await self.repo.find_existing(company.profile_id, mission.mission_id, freelancer.profile_id)
        if existing:
            raise ConflictError("此工作者已在候選名單中", code="ALREADY_SHORTLISTED")

        entry = Shortlist(
            company_id=company.profile_id,
            mission_id=mission.mission_id,
            freelancer_id=freelancer.profile_id,
            notes=data.notes,
        )
        created = await self.repo.create(entry)
        logger.info(f"公司 {company.profile_id} 將工作者 {freelancer.profile_id} 加入任務 {mission.mission_id} 候選名單")
        return created

    async def list_shortlist(self, user: User, mission_id: Optional[str] = None) -> List[Shortlist]:
        company = await self._get_company_profile(user)
        return await self.repo.list_by_company(company.profile_id, mission_id)

    async def remove_from_shortlist(self, shortlist_id: str, user: User) -> None:
        company = await self._get_company_profile(user)
        entry = await self.repo.get_by_id(shortlist_id)
        if not entry:
            raise NotFoundError("候選名單項目不存在")
        if entry.company_id != company.profile_id:
            raise ForbiddenError("你無權操作此候選名單")
        await self.repo.delete(entry)
