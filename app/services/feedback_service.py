# app/services/feedback_service.py
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import BadRequestError, ForbiddenError, NotFoundError
from app.models.feedback import Feedback
from app.models.user import User, UserRoleEnum
from app.repositories.contract_repo import ContractRepository
from app.repositories.feedback_repo import FeedbackRepository
from app.repositories.mission_repo import MissionRepository
from app.repositories.user_repo import UserRepository
from app.schemas.feedback_schema import FeedbackCreate, FeedbackUpdate
from app.services.contract_service import contract_party
from app.models.notification import NotificationTypeEnum
from app.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


class FeedbackService:
    def __init__(self, db: AsyncSession):
        self.repo = FeedbackRepository(db)
        self.user_repo = UserRepository(db)
        self.mission_repo = MissionRepository(db)
        self.contract_repo = ContractRepository(db)
        self.notification_service = NotificationService(db)

    async def create_feedback(self, data: FeedbackCreate, user: User) -> Feedback:
        if data.to_user_id == user.user_id:
            raise BadRequestError("不能評價自己", code="SELF_FEEDBACK")

        to_user = await self.user_repo.get_user_by_id(data.to_user_id)
        if not to_user:
            raise NotFoundError("被評價的使用者不存在", code="USER_NOT_FOUND")

        if data.mission_id:
            mission = await self.mission_repo.get_mission_by_id(data.mission_id)
            if not mission:
                raise NotFoundError("任務不存在", code="MISSION_NOT_FOUND")

        if data.contract_id:
            contract = await self.contract_repo.get_contract_by_id(data.contract_id)
            if not contract:
                raise NotFoundError("合約不存在", code="CONTRACT_NOT_FOUND")
            # 針對合約的評價只能由合約一方給出
            if contract_party(contract, user) is None:
                raise ForbiddenError("你不是此合約的一方")

        feedback = Feedback(
            **data.model_dump(),
            from_user_id=user.user_id,
        )
        created = await self.repo.create(feedback)
        logger.info(f"使用者 {user.user_id} 評價 {data.to_user_id}: {data.rating}")

        await self.notification_service.create_notification(
            user_id=data.to_user_id,
            type=NotificationTypeEnum.feedback_received,
            title=f"{user.name} 給了你新的評價",
            link_url="/feedback/me",
            data={"feedback_id": created.feedback_id},
        )
        return created

    async def get_feedback(self, feedback_id: str, user: User) -> Feedback:
        feedback = await self.repo.get_by_id(feedback_id)
        if not feedback:
            raise NotFoundError("評價不存在", code="FEEDBACK_NOT_FOUND")
        # 非公開評價只有雙方與管理員看得到
        if not feedback.is_public and user.role != UserRoleEnum.admin and user.user_id not in (
            feedback.from_user_id, feedback.to_user_id
        ):
            raise NotFoundError("評價不存在", code="FEEDBACK_NOT_FOUND")
        return feedback

    async def list_public_feedback(self, user_id: str, page: int, limit: int) -> dict:
        return await self.repo.find_by_user_id(user_id, page, limit, is_public=True)

    async def list_my_feedback(self, user: User, page: int, limit: int) -> dict:
        """自己收到的評價 (含非公開)"""
        return await self.repo.find_by_user_id(user.user_id, page, limit)

    async def get_user_rating(self, user_id: str) -> dict:
        return await self.repo.calculate_user_rating(user_id)

    async def update_feedback(self, feedback_id: str, data: FeedbackUpdate, user: User) -> Feedback:
        feedback = await self.get_feedback(feedback_id, user)
        if feedback.from_user_id != user.user_id:
            raise ForbiddenError("只有評價者可以修改評價")
        for key, value in data.model_dump(exclude_unset=True).items():
            setattr(feedback, key, value)
        return await self.repo.update(feedback)

    async def delete_feedback(self, feedback_id: str, user: User) -> None:
        feedback = await self.get_feedback(feedback_id, user)
        if feedback.from_user_id != user.user_id and user.role != UserRoleEnum.admin:
            raise ForbiddenError("只有評價者可以刪除評價")
        await self.repo.delete(feedback)
