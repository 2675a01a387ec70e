# app/routers/user_router.py
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_db
from app.core.security import get_current_user, require_roles
from app.models.user import User, UserRoleEnum
from app.schemas.common_schema import ApiResponse, Page
from app.schemas.user_schema import UserOut, UserStatusUpdate
from app.services.user_service import UserService
from app.utils.response import success_response

router = APIRouter(
    prefix="/users",
    tags=["Users"],
    dependencies=[Depends(get_current_user)] # (重要) 整個路由都需要登入
)

@router.get("/me", response_model=ApiResponse[UserOut])
async def read_users_me(
    current_user: User = Depends(get_current_user)
):
    """
    獲取當前登入使用者的基本資料 (不含密碼)
    """
    return success_response(current_user)

@router.get("", response_model=ApiResponse[Page[UserOut]])
async def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.PAGINATION_DEFAULT_LIMIT, ge=1),
    role: Optional[UserRoleEnum] = None,
    admin: User = Depends(require_roles(UserRoleEnum.admin)),
    db: AsyncSession = Depends(get_db)
):
    """(管理員) 使用者列表"""
    return success_response(await UserService(db).list_users(page, limit, role))

@router.get("/{user_id}", response_model=ApiResponse[UserOut])
async def read_user(
    user_id: str,
    db: AsyncSession = Depends(get_db)
):
    return success_response(await UserService(db).get_user(user_id))

@router.patch("/{user_id}/status", response_model=ApiResponse[UserOut])
async def update_user_status(
    user_id: str,
    data: UserStatusUpdate,
    admin: User = Depends(require_roles(UserRoleEnum.admin)),
    db: AsyncSession = Depends(get_db)
):
    """(管理員) 停權 / 復權"""
    user = await UserService(db).set_user_status(user_id, data.is_active, admin)
    return success_response(user)
