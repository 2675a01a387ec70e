# app/routers/feedback_router.py

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_db
from app.core.security import get_current_user
from app.models.user import User
from app.services.feedback_service import FeedbackService
from app.schemas.common_schema import ApiResponse, Page
from app.schemas.feedback_schema import FeedbackCreate, FeedbackOut, FeedbackUpdate, UserRating
from app.utils.response import success_response

router = APIRouter(
    prefix="/feedback",
    tags=["Feedback"],
    dependencies=[Depends(get_current_user)]
)


def get_feedback_service(db: AsyncSession = Depends(get_db)) -> FeedbackService:
    return FeedbackService(db)


@router.post("", response_model=ApiResponse[FeedbackOut], status_code=status.HTTP_201_CREATED)
async def create_feedback(
    data: FeedbackCreate,
    current_user: User = Depends(get_current_user),
    service: FeedbackService = Depends(get_feedback_service)
):
    """
    留下評價。mission_id 與 contract_id 至少要有一個。
    """
    feedback = await service.create_feedback(data, current_user)
    return success_response(feedback, "評價已送出")

# 注意：/me 與 /user/... 必須定義在 /{feedback_id} 之前
@router.get("/me", response_model=ApiResponse[Page[FeedbackOut]])
async def list_my_feedback(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.PAGINATION_DEFAULT_LIMIT, ge=1),
    current_user: User = Depends(get_current_user),
    service: FeedbackService = Depends(get_feedback_service)
):
    """我收到的所有評價 (包含不公開的)"""
    return success_response(await service.list_my_feedback(current_user, page, limit))

@router.get("/user/{user_id}", response_model=ApiResponse[Page[FeedbackOut]])
async def list_user_feedback(
    user_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.PAGINATION_DEFAULT_LIMIT, ge=1),
    service: FeedbackService = Depends(get_feedback_service)
):
    """某位使用者收到的公開評價"""
    return success_response(await service.list_public_feedback(user_id, page, limit))

@router.get("/user/{user_id}/rating", response_model=ApiResponse[UserRating])
async def get_user_rating(
    user_id: str,
    service: FeedbackService = Depends(get_feedback_service)
):
    return success_response(await service.get_user_rating(user_id))

@router.get("/{feedback_id}", response_model=ApiResponse[FeedbackOut])
async def get_feedback(
    feedback_id: str,
    current_user: User = Depends(get_current_user),
    service: FeedbackService = Depends(get_feedback_service)
):
    return success_response(await service.get_feedback(feedback_id, current_user))

@router.patch("/{feedback_id}", response_model=ApiResponse[FeedbackOut])
async def update_feedback(
    feedback_id: str,
    data: FeedbackUpdate,
    current_user: User = Depends(get_current_user),
    service: FeedbackService = Depends(get_feedback_service)
):
    """(作者) 修改評價"""
    return success_response(await service.update_feedback(feedback_id, data, current_user))

@router.delete("/{feedback_id}", response_model=ApiResponse[None])
async def delete_feedback(
    feedback_id: str,
    current_user: User = Depends(get_current_user),
    service: FeedbackService = Depends(get_feedback_service)
):
    """(作者 / 管理員) 刪除評價"""
    await service.delete_feedback(feedback_id, current_user)
    return success_response(message="評價已刪除")
