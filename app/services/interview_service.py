# app/services/interview_service.py
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import BadRequestError, ForbiddenError, NotFoundError
from app.models.application import ApplicationStatusEnum
from app.models.interview import Interview
from app.models.user import User, UserRoleEnum
from app.repositories.interview_repo import InterviewRepository
from app.schemas.interview_schema import InterviewComplete, InterviewCreate, InterviewUpdate
from app.services.application_service import ApplicationService, SCHEDULABLE_STATUSES
from app.models.notification import NotificationTypeEnum
from app.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


class InterviewService:
    def __init__(self, db: AsyncSession):
        self.repo = InterviewRepository(db)
        self.application_service = ApplicationService(db)
        self.notification_service = NotificationService(db)

    async def schedule_interview(self, data: InterviewCreate, user: User) -> Interview:
        application = await self.application_service.get_application(data.application_id, user)
        if not self.application_service.is_mission_owner(application, user):
            raise ForbiddenError("只有任務的公司可以安排面試")
        if application.status not in SCHEDULABLE_STATUSES:
            raise BadRequestError(
                f"申請狀態為 {application.status.value}，無法安排面試",
                code="INVALID_STATUS_TRANSITION",
            )

        interview = Interview(**data.model_dump())
        created = await self.repo.create_interview(interview)

        if application.status != ApplicationStatusEnum.interview_scheduled:
            await self.application_service.set_status(application, ApplicationStatusEnum.interview_scheduled)

        await self.notification_service.create_notification(
            user_id=application.freelancer.user_id,
            type=NotificationTypeEnum.interview_scheduled,
            title=f"「{application.mission.title}」已安排面試",
            message=f"面試時間: {data.scheduled_at.isoformat()}",
            link_url=f"/interviews/{created.interview_id}",
            data={"interview_id": created.interview_id, "application_id": application.application_id},
        )
        return await self.repo.get_interview_by_id(created.interview_id)

    async def list_my_interviews(self, user: User, page: int, limit: int) -> dict:
        return await self.repo.list_interviews_by_user(user.user_id, page, limit)

    async def get_interview(self, interview_id: str, user: User) -> Interview:
        interview = await self.repo.get_interview_by_id(interview_id)
        if not interview:
            raise NotFoundError("面試不存在", code="INTERVIEW_NOT_FOUND")
        application = interview.application
        if (
            user.role != UserRoleEnum.admin
            and not self.application_service.is_applicant(application, user)
            and not self.application_service.is_mission_owner(application, user)
        ):
            raise ForbiddenError("你無權檢視此面試")
        return interview

    async def _get_owned_open_interview(self, interview_id: str, user: User) -> Interview:
        interview = await self.get_interview(interview_id, user)
        if not self.application_service.is_mission_owner(interview.application, user):
            raise ForbiddenError("只有任務的公司可以修改面試")
        # 已完成的面試為終態
        if interview.completed:
            raise BadRequestError("面試已完成，無法修改", code="INTERVIEW_COMPLETED")
        return interview

    async def update_interview(self, interview_id: str, data: InterviewUpdate, user: User) -> Interview:
        interview = await self._get_owned_open_interview(interview_id, user)
        for key, value in data.model_dump(exclude_unset=True).items():
            setattr(interview, key, value)
        return await self.repo.update_interview(interview)

    async def complete_interview(self, interview_id: str, data: InterviewComplete, user: User) -> Interview:
        interview = await self._get_owned_open_interview(interview_id, user)
        interview.completed = True
        interview.rating = data.rating
        if data.notes is not None:
            interview.notes = data.notes
        updated = await self.repo.update_interview(interview)

        application = updated.application
        if application.status == ApplicationStatusEnum.interview_scheduled:
            await self.application_service.set_status(application, ApplicationStatusEnum.interview_completed)
        logger.info(f"面試 {interview_id} 完成，評分 {data.rating}")
        return await self.repo.get_interview_by_id(interview_id)
