# app/services/mission_service.py
import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ForbiddenError, NotFoundError, ValidationError, invalid_transition
from app.models.mission import Mission, MissionStatusEnum
from app.models.user import User, UserRoleEnum
from app.repositories.mission_repo import MissionRepository
from app.repositories.profile_repo import ProfileRepository
from app.schemas.mission_schema import MissionCreate, MissionStatusUpdate, MissionUpdate

logger = logging.getLogger(__name__)

# (目前狀態, 新狀態) -> 允許的角色
MISSION_TRANSITIONS = {
    (MissionStatusEnum.draft, MissionStatusEnum.published): [UserRoleEnum.company, UserRoleEnum.admin],
    (MissionStatusEnum.draft, MissionStatusEnum.cancelled): [UserRoleEnum.company, UserRoleEnum.admin],
    (MissionStatusEnum.published, MissionStatusEnum.completed): [UserRoleEnum.company, UserRoleEnum.admin],
    (MissionStatusEnum.published, MissionStatusEnum.cancelled): [UserRoleEnum.company, UserRoleEnum.admin],
}

# 可以修改內容的狀態
EDITABLE_STATUSES = (MissionStatusEnum.draft, MissionStatusEnum.published)


class MissionService:
    def __init__(self, db: AsyncSession):
        self.repo = MissionRepository(db)
        self.profile_repo = ProfileRepository(db)

    async def _get_company_profile(self, user: User):
        profile = await self.profile_repo.get_company_profile_by_user_id(user.user_id)
        if not profile:
            raise NotFoundError("請先建立公司 Profile", code="PROFILE_NOT_FOUND")
        return profile

    def _is_owner(self, mission: Mission, user: User) -> bool:
        return mission.company is not None and mission.company.user_id == user.user_id

    async def create_mission(self, data: MissionCreate, user: User) -> Mission:
        company = await self._get_company_profile(user)
        mission = Mission(**data.model_dump(), company_id=company.profile_id)
        created = await self.repo.create_mission(mission)
        logger.info(f"公司 {company.profile_id} 建立任務 {created.mission_id}")
        return created

    async def list_missions(
        self,
        page: int,
        limit: int,
        status: Optional[MissionStatusEnum] = None,
        q: Optional[str] = None,
        skill: Optional[str] = None,
        modality: Optional[str] = None,
        experience: Optional[str] = None,
        user: Optional[User] = None,
    ) -> dict:
        """
        一般使用者只能看到 PUBLISHED；管理員可依 status 篩選
        """
        if user is None or user.role != UserRoleEnum.admin:
            status = MissionStatusEnum.published
        return await self.repo.list_missions(
            page, limit, status=status, q=q, skill=skill, modality=modality, experience=experience
        )

    async def list_my_missions(self, user: User, page: int, limit: int) -> dict:
        company = await self._get_company_profile(user)
        return await self.repo.list_missions_by_company(company.profile_id, page, limit)

    async def get_mission(self, mission_id: str, user: Optional[User] = None) -> Mission:
        mission = await self.repo.get_mission_by_id(mission_id)
        if not mission:
            raise NotFoundError("任務不存在", code="MISSION_NOT_FOUND")
        # 未發佈的任務只有擁有者與管理員看得到
        if mission.status != MissionStatusEnum.published:
            if user is None or (user.role != UserRoleEnum.admin and not self._is_owner(mission, user)):
                raise NotFoundError("任務不存在", code="MISSION_NOT_FOUND")
        return mission

    async def get_owned_mission(self, mission_id: str, user: User) -> Mission:
        """擁有者 (或管理員) 才能操作的任務"""
        mission = await self.repo.get_mission_by_id(mission_id)
        if not mission:
            raise NotFoundError("任務不存在", code="MISSION_NOT_FOUND")
        if user.role != UserRoleEnum.admin and not self._is_owner(mission, user):
            raise ForbiddenError("你無權操作此任務")
        return mission

    async def update_mission(self, mission_id: str, data: MissionUpdate, user: User) -> Mission:
        mission = await self.get_owned_mission(mission_id, user)
        if mission.status not in EDITABLE_STATUSES:
            raise ForbiddenError("任務已結束，無法修改", code="MISSION_CLOSED")
        changes = data.model_dump(exclude_unset=True)

        # 只送其中一邊時，要跟資料庫裡的另一邊比對
        budget_min = changes.get("budget_min", mission.budget_min)
        budget_max = changes.get("budget_max", mission.budget_max)
        if budget_min is not None and budget_max is not None and float(budget_min) > float(budget_max):
            raise ValidationError(
                "budget_max 不可小於 budget_min",
                details=[{"field": "budget_max", "message": "budget_max 不可小於 budget_min"}],
            )

        for key, value in changes.items():
            setattr(mission, key, value)
        return await self.repo.update_mission(mission)

    async def update_mission_status(self, mission_id: str, data: MissionStatusUpdate, user: User) -> Mission:
        mission = await self.get_owned_mission(mission_id, user)

        transition = (mission.status, data.status)
        if transition not in MISSION_TRANSITIONS:
            raise invalid_transition(mission.status.value, data.status.value)
        if user.role not in MISSION_TRANSITIONS[transition]:
            raise ForbiddenError(f"你的角色 ({user.role.value}) 無權執行此狀態轉移")

        logger.info(f"任務 {mission_id} 狀態: {mission.status.value} -> {data.status.value}")
        mission.status = data.status
        return await self.repo.update_mission(mission)
