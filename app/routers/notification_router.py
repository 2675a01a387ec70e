# app/routers/notification_router.py

from fastapi import APIRouter, Depends, Query
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_db
from app.models.notification import NotificationTypeEnum
from app.models.user import User
from app.core.security import get_current_user
from app.services.notification_service import NotificationService
from app.schemas.common_schema import ApiResponse, Page
from app.schemas.notification_schema import NotificationOut
from app.utils.response import success_response

router = APIRouter(
    prefix="/notifications",
    tags=["Notifications"]
)

def get_notification_service(db: AsyncSession = Depends(get_db)) -> NotificationService:
    return NotificationService(db)

@router.get(
    "/my",
    response_model=ApiResponse[Page[NotificationOut]],
    summary="獲取我的通知列表"
)
async def get_my_notifications(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.PAGINATION_DEFAULT_LIMIT, ge=1),
    unread_only: bool = False,
    type: Optional[NotificationTypeEnum] = Query(None, description="只列出某一類通知"),
    current_user: User = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service)
):
    """
    獲取當前登入者的通知列表 (依時間倒序)。
    前端應使用此 API 定期輪詢 (Polling)。
    """
    return success_response(await service.get_my_notifications(current_user, page, limit, unread_only, type))

@router.patch(
    "/{notification_id}/read",
    response_model=ApiResponse[NotificationOut],
    summary="將通知設為已讀"
)
async def mark_as_read(
    notification_id: str,
    current_user: User = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service)
):
    """
    當使用者點擊通知時，前端應呼叫此 API 將其標記為已讀。
    """
    return success_response(await service.mark_notification_as_read(notification_id, current_user))
