# app/services/notification_service.py

from sqlalchemy.ext.asyncio import AsyncSession
from typing import Any, Dict, Optional
import logging

from app.core.exceptions import ForbiddenError, NotFoundError
from app.models.user import User
from app.models.notification import Notification, NotificationTypeEnum
from app.repositories.notification_repo import NotificationRepository

logger = logging.getLogger(__name__)

class NotificationService:
    def __init__(self, db: AsyncSession):
        self.repo = NotificationRepository(db)

    async def create_notification(
        self,
        user_id: str,
        type: NotificationTypeEnum,
        title: str,
        link_url: Optional[str] = None,
        message: Optional[str] = None,
        data: Optional[Dict[str, Any]] = None,
    ) -> Notification:
        """
        (內部使用) 其他 Service 在狀態變動後呼叫，建立一則站內通知
        """
        notification = Notification(
            user_id=user_id,
            type=type,
            title=title,
            message=message,
            link_url=link_url,
            data=data,
            is_read=False
        )
        logger.info(f"建立通知 [{type.value}] -> {user_id}: {title}")
        return await self.repo.create_notification(notification)

    async def get_my_notifications(
        self,
        user: User,
        page: int,
        limit: int,
        unread_only: bool = False,
        type: Optional[NotificationTypeEnum] = None,
    ) -> dict:
        return await self.repo.list_notifications_by_user(user.user_id, page, limit, unread_only, type)

    async def mark_notification_as_read(self, notification_id: str, user: User) -> Notification:
        notification = await self.repo.get_notification_by_id(notification_id)
        if not notification:
            raise NotFoundError("通知不存在", code="NOTIFICATION_NOT_FOUND")

        # 只能標記自己的通知
        if notification.user_id != user.user_id:
            raise ForbiddenError("無權操作此通知")

        if notification.is_read:
            return notification
        return await self.repo.mark_as_read(notification)
