# app/services/assessment_service.py
import logging
import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import BadRequestError, ForbiddenError, NotFoundError
from app.models.application import ApplicationStatusEnum
from app.models.assessment import Assessment, AssessmentTypeEnum
from app.models.notification import NotificationTypeEnum
from app.models.user import User, UserRoleEnum
from app.repositories.assessment_repo import AssessmentRepository
from app.schemas.assessment_schema import AssessmentCreate, AssessmentScore, AssessmentSubmit
from app.services.application_service import ApplicationService, ASSESSABLE_STATUSES
from app.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


class AssessmentService:
    def __init__(self, db: AsyncSession):
        self.repo = AssessmentRepository(db)
        self.application_service = ApplicationService(db)
        self.notification_service = NotificationService(db)

    async def create_assessment(self, data: AssessmentCreate, user: User) -> Assessment:
        """
        公司針對申請出題
        - 只有任務的公司 (或管理員) 可以出題
        - 申請狀態會變成 ASSESSMENT_SENT
        """
        application = await self.application_service.get_application(data.application_id, user)
        if user.role != UserRoleEnum.admin and not self.application_service.is_mission_owner(application, user):
            raise ForbiddenError("只有任務的公司可以寄送測驗")
        if application.status not in ASSESSABLE_STATUSES:
            raise BadRequestError(
                f"申請狀態為 {application.status.value}，無法寄送測驗",
                code="INVALID_STATUS_TRANSITION",
            )

        # 每題都要有 id，作答時用來對應
        questions = []
        for question in data.questions:
            item = question.model_dump()
            item["id"] = item["id"] or str(uuid.uuid4())
            questions.append(item)

        assessment = Assessment(
            **data.model_dump(exclude={"questions"}),
            questions=questions,
            reviewer_id=user.user_id,
        )
        created = await self.repo.create_assessment(assessment)

        # 已完成過測驗的申請再收到測驗時不退回 ASSESSMENT_SENT
        if application.status in (ApplicationStatusEnum.pending, ApplicationStatusEnum.shortlisted):
            await self.application_service.set_status(application, ApplicationStatusEnum.assessment_sent)

        await self.notification_service.create_notification(
            user_id=application.freelancer.user_id,
            type=NotificationTypeEnum.assessment_sent,
            title=f"「{application.mission.title}」寄來了一份測驗",
            link_url=f"/assessments/{created.assessment_id}",
            data={"assessment_id": created.assessment_id, "application_id": application.application_id},
        )
        return await self.repo.get_assessment_by_id(created.assessment_id)

    async def list_assessments(
        self,
        user: User,
        page: int,
        limit: int,
        type: Optional[AssessmentTypeEnum] = None,
        application_id: Optional[str] = None,
    ) -> dict:
        user_id = None if user.role == UserRoleEnum.admin else user.user_id
        return await self.repo.list_assessments(page, limit, user_id, type, application_id)

    async def get_assessment(self, assessment_id: str, user: User) -> Assessment:
        assessment = await self.repo.get_assessment_by_id(assessment_id)
        if not assessment:
            raise NotFoundError("測驗不存在", code="ASSESSMENT_NOT_FOUND")
        application = assessment.application
        if (
            user.role != UserRoleEnum.admin
            and not self.application_service.is_applicant(application, user)
            and not self.application_service.is_mission_owner(application, user)
        ):
            raise ForbiddenError("你無權檢視此測驗")
        return assessment

    async def submit_assessment(self, assessment_id: str, data: AssessmentSubmit, user: User) -> Assessment:
        assessment = await self.get_assessment(assessment_id, user)
        application = assessment.application
        if not self.application_service.is_applicant(application, user):
            raise ForbiddenError("只有應徵的工作者可以作答")
        if assessment.submitted_at is not None:
            raise BadRequestError("測驗已經提交過了", code="ASSESSMENT_ALREADY_SUBMITTED")

        answered = {answer.question_id for answer in data.answers}
        missing = [q["id"] for q in assessment.questions or [] if q.get("id") not in answered]
        if missing:
            raise BadRequestError(
                "部分題目尚未作答",
                code="MISSING_ANSWERS",
                details={"question_ids": missing},
            )

        assessment.answers = [answer.model_dump() for answer in data.answers]
        assessment.submitted_at = datetime.now()
        updated = await self.repo.update_assessment(assessment)

        if application.status == ApplicationStatusEnum.assessment_sent:
            await self.application_service.set_status(application, ApplicationStatusEnum.assessment_completed)

        await self.notification_service.create_notification(
            user_id=assessment.reviewer_id,
            type=NotificationTypeEnum.assessment_completed,
            title=f"測驗「{assessment.title}」已提交，等待評分",
            link_url=f"/assessments/{assessment_id}",
            data={"assessment_id": assessment_id, "application_id": application.application_id},
        )
        logger.info(f"測驗 {assessment_id} 已提交 (application {application.application_id})")
        return updated

    async def score_assessment(self, assessment_id: str, data: AssessmentScore, user: User) -> Assessment:
        assessment = await self.get_assessment(assessment_id, user)
        if user.role != UserRoleEnum.admin and assessment.reviewer_id != user.user_id:
            raise ForbiddenError("只有出題者可以評分")
        if assessment.submitted_at is None:
            raise BadRequestError("測驗尚未提交", code="ASSESSMENT_NOT_SUBMITTED")
        if data.score > assessment.max_score:
            raise BadRequestError(
                f"分數不可超過滿分 {assessment.max_score}",
                code="SCORE_EXCEEDS_MAX",
                details=[{"field": "score", "message": "分數不可超過滿分"}],
            )

        assessment.score = data.score
        if data.review_notes is not None:
            assessment.review_notes = data.review_notes
        updated = await self.repo.update_assessment(assessment)

        await self.notification_service.create_notification(
            user_id=updated.application.freelancer.user_id,
            type=NotificationTypeEnum.assessment_scored,
            title=f"測驗「{updated.title}」已評分: {data.score:g} / {updated.max_score}",
            link_url=f"/assessments/{assessment_id}",
            data={"assessment_id": assessment_id, "score": data.score},
        )
        logger.info(f"測驗 {assessment_id} 評分 {data.score} / {updated.max_score}")
        return updated
