# app/services/user_service.py
import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import BadRequestError, NotFoundError
from app.models.user import User, UserRoleEnum
from app.repositories.user_repo import UserRepository

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, db: AsyncSession):
        self.user_repo = UserRepository(db)

    async def get_user(self, user_id: str) -> User:
        user = await self.user_repo.get_user_by_id(user_id)
        if not user:
            raise NotFoundError("使用者不存在", code="USER_NOT_FOUND")
        return user

    async def list_users(self, page: int, limit: int, role: Optional[UserRoleEnum] = None) -> dict:
        return await self.user_repo.list_users(page, limit, role)

    async def set_user_status(self, user_id: str, is_active: bool, admin: User) -> User:
        """(管理員) 停權 / 復權"""
        if user_id == admin.user_id and not is_active:
            raise BadRequestError("不可停權自己的帳號")
        user = await self.get_user(user_id)
        user.is_active = is_active
        logger.info(f"管理員 {admin.user_id} 將使用者 {user_id} 設為 is_active={is_active}")
        return await self.user_repo.update_user(user)
