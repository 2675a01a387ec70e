# app/services/application_service.py
import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import BadRequestError, ConflictError, ForbiddenError, NotFoundError, invalid_transition
from app.models.application import Application, ApplicationStatusEnum
from app.models.mission import MissionStatusEnum
from app.models.user import User, UserRoleEnum
from app.repositories.application_repo import ApplicationRepository
from app.repositories.profile_repo import ProfileRepository
from app.schemas.application_schema import ApplicationCreate, ApplicationStatusUpdate, MissionApplicationOut
from app.services.mission_service import MissionService
from app.models.notification import NotificationTypeEnum
from app.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

S = ApplicationStatusEnum

# 公司可以透過 PATCH /applications/{id}/status 直接執行的轉移
# (INTERVIEW_* 只能由面試流程觸發，ASSESSMENT_* 只能由測驗流程觸發)
APPLICATION_TRANSITIONS = {
    (S.pending, S.shortlisted),
    (S.pending, S.rejected),
    (S.pending, S.accepted),
    (S.shortlisted, S.rejected),
    (S.shortlisted, S.accepted),
    (S.interview_completed, S.accepted),
    (S.interview_completed, S.rejected),
    (S.assessment_sent, S.rejected),
    (S.assessment_completed, S.accepted),
    (S.assessment_completed, S.rejected),
}

# 可以安排面試的申請狀態
SCHEDULABLE_STATUSES = (S.pending, S.shortlisted, S.assessment_completed, S.interview_scheduled)

# 可以寄送測驗的申請狀態
ASSESSABLE_STATUSES = (S.pending, S.shortlisted, S.assessment_sent, S.assessment_completed)


class ApplicationService:
    def __init__(self, db: AsyncSession):
        self.repo = ApplicationRepository(db)
        self.profile_repo = ProfileRepository(db)
        self.mission_service = MissionService(db)
        self.notification_service = NotificationService(db)

    async def _get_freelancer_profile(self, user: User):
        profile = await self.profile_repo.get_freelancer_profile_by_user_id(user.user_id)
        if not profile:
            raise NotFoundError("請先建立工作者 Profile", code="PROFILE_NOT_FOUND")
        return profile

    def is_mission_owner(self, application: Application, user: User) -> bool:
        mission = application.mission
        return mission is not None and mission.company is not None and mission.company.user_id == user.user_id

    def is_applicant(self, application: Application, user: User) -> bool:
        return application.freelancer is not None and application.freelancer.user_id == user.user_id

    async def apply_to_mission(self, mission_id: str, data: ApplicationCreate, user: User) -> Application:
        profile = await self._get_freelancer_profile(user)
        mission = await self.mission_service.get_mission(mission_id, user)
        if mission.status != MissionStatusEnum.published:
            raise BadRequestError("此任務目前不開放申請", code="MISSION_NOT_OPEN")

        existing = await self.repo.get_application_by_mission_and_freelancer(mission_id, profile.profile_id)
        if existing:
            raise ConflictError("你已經申請過此任務", code="ALREADY_APPLIED")

        application = Application(
            **data.model_dump(),
            mission_id=mission_id,
            freelancer_id=profile.profile_id,
            status=S.pending,
        )
        created = await self.repo.create_application(application)

        await self.notification_service.create_notification(
            user_id=mission.company.user_id,
            type=NotificationTypeEnum.application_received,
            title=f"任務「{mission.title}」收到新的申請",
            link_url=f"/missions/{mission_id}/applications",
            data={"mission_id": mission_id, "application_id": created.application_id},
        )
        return created

    async def list_mission_applications(
        self,
        mission_id: str,
        user: User,
        page: int,
        limit: int,
        status: Optional[ApplicationStatusEnum] = None,
    ) -> dict:
        await self.mission_service.get_owned_mission(mission_id, user)
        result = await self.repo.list_applications_by_mission(mission_id, page, limit, status)

        # 附加每位應徵者的認證標記 (整頁一次查詢)
        certified = await self.profile_repo.get_certified_profile_ids(
            list({a.freelancer_id for a in result["items"]})
        )
        items = []
        for application in result["items"]:
            item = MissionApplicationOut.model_validate(application)
            if item.freelancer is not None:
                item.freelancer.is_certified = application.freelancer_id in certified
            items.append(item)
        result["items"] = items
        return result

    async def list_my_applications(self, user: User, page: int, limit: int) -> dict:
        profile = await self._get_freelancer_profile(user)
        return await self.repo.list_applications_by_freelancer(profile.profile_id, page, limit)

    async def get_application(self, application_id: str, user: User) -> Application:
        application = await self.repo.get_application_by_id(application_id)
        if not application:
            raise NotFoundError("申請不存在", code="APPLICATION_NOT_FOUND")
        if (
            user.role != UserRoleEnum.admin
            and not self.is_applicant(application, user)
            and not self.is_mission_owner(application, user)
        ):
            raise ForbiddenError("你無權檢視此申請")
        return application

    async def update_application_status(
        self, application_id: str, data: ApplicationStatusUpdate, user: User
    ) -> Application:
        application = await self.get_application(application_id, user)
        if not self.is_mission_owner(application, user):
            raise ForbiddenError("只有任務的公司可以審核申請")

        transition = (application.status, data.status)
        if transition not in APPLICATION_TRANSITIONS:
            raise invalid_transition(application.status.value, data.status.value)

        logger.info(f"申請 {application_id} 狀態: {application.status.value} -> {data.status.value}")
        application.status = data.status
        if data.notes is not None:
            application.notes = data.notes
        updated = await self.repo.update_application(application)

        await self.notification_service.create_notification(
            user_id=updated.freelancer.user_id,
            type=NotificationTypeEnum.application_status,
            title=f"你對「{updated.mission.title}」的申請狀態已更新為 {data.status.value}",
            link_url=f"/applications/{application_id}",
            data={"application_id": application_id, "status": data.status.value},
        )
        return updated

    async def set_status(self, application: Application, new_status: ApplicationStatusEnum) -> Application:
        """(內部使用) 面試 / 測驗流程推進申請狀態，不經過公司審核的轉移表"""
        logger.info(f"申請 {application.application_id} 狀態: {application.status.value} -> {new_status.value}")
        application.status = new_status
        return await self.repo.update_application(application)
