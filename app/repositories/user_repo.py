# app/repositories/user_repo.py
# 負責與使用者相關的資料庫操作
import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from app.models.user import User, UserRoleEnum
from app.utils.pagination import fetch_page

logger = logging.getLogger(__name__)

class UserRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user_by_email(self, email: str) -> User | None:
        """
        透過 email 查詢使用者
        """
        stmt = select(User).where(User.email == email)
        result = await self.db.execute(stmt)
        return result.scalars().first()
    
    async def create_user(self, user: User) -> User:
        """
        新增使用者到資料庫
        """
        try:
            self.db.add(user)
            await self.db.commit()
            await self.db.refresh(user)
            return user
        except Exception as e:
            await self.db.rollback()
            logger.error(f"建立使用者失敗: {e}", exc_info=True)
            raise
    
    async def get_user_by_id(self, user_id: str) -> User | None:
        """
        透過 user_id 查詢使用者
        """
        stmt = select(User).where(User.user_id == user_id)
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def list_users(
        self, page: int, limit: int, role: Optional[UserRoleEnum] = None
    ) -> dict:
        """(管理員) 分頁列出使用者，可依角色篩選"""
        stmt = select(User)
        if role is not None:
            stmt = stmt.where(User.role == role)
        stmt = stmt.order_by(User.created_at.desc(), User.user_id)
        return await fetch_page(self.db, stmt, page, limit)

    async def update_user(self, user: User) -> User:
        """儲存對 User 物件的變更"""
        await self.db.commit()
        await self.db.refresh(user)
        return user
