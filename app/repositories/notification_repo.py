# app/repositories/notification_repo.py

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from typing import Optional
import logging

from app.models.notification import Notification, NotificationTypeEnum
from app.utils.pagination import fetch_page

logger = logging.getLogger(__name__)

class NotificationRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_notification(self, notification: Notification) -> Notification:
        """
        新增一筆通知
        """
        try:
            self.db.add(notification)
            # 先 flush 取得 DB 產生的預設值 (例如 created_at)，再提交
            await self.db.flush()
            await self.db.refresh(notification)
            await self.db.commit()
            return notification
        except Exception as e:
            await self.db.rollback()
            logger.error(f"建立通知失敗: {e}", exc_info=True)
            raise

    async def get_notification_by_id(self, notification_id: str) -> Optional[Notification]:
        """
        依 ID 獲取通知 (主要用於權限檢查)
        """
        stmt = select(Notification).where(Notification.notification_id == notification_id)
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def list_notifications_by_user(
        self,
        user_id: str,
        page: int,
        limit: int,
        unread_only: bool = False,
        type: Optional[NotificationTypeEnum] = None,
    ) -> dict:
        """
        獲取某位使用者的通知 (依時間降序排列)
        """
        stmt = select(Notification).where(Notification.user_id == user_id)
        if unread_only:
            stmt = stmt.where(Notification.is_read.is_(False))
        if type is not None:
            stmt = stmt.where(Notification.type == type)
        stmt = stmt.order_by(Notification.created_at.desc(), Notification.notification_id)
        return await fetch_page(self.db, stmt, page, limit)

    async def mark_as_read(self, notification: Notification) -> Notification:
        """
        將單一通知設為已讀
        """
        notification.is_read = True
        await self.db.commit()
        await self.db.refresh(notification)
        return notification
