# app/repositories/feedback_repo.py
import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import joinedload

from app.models.feedback import Feedback
from app.utils.pagination import fetch_page

logger = logging.getLogger(__name__)


class FeedbackRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    def _get_common_feedback_options(self):
        # 投影 from_user / to_user / mission / contract
        return [
            joinedload(Feedback.from_user),
            joinedload(Feedback.to_user),
            joinedload(Feedback.mission),
            joinedload(Feedback.contract),
        ]

    async def create(self, feedback: Feedback) -> Feedback:
        try:
            self.db.add(feedback)
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"建立評價失敗: {e}", exc_info=True)
            raise
        return await self.get_by_id(feedback.feedback_id)

    async def get_by_id(self, feedback_id: str) -> Optional[Feedback]:
        stmt = (
            select(Feedback)
            .where(Feedback.feedback_id == feedback_id)
            .options(*self._get_common_feedback_options())
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def find_by_user_id(
        self,
        user_id: str,
        page: int = 1,
        limit: int = 10,
        is_public: Optional[bool] = None,
    ) -> dict:
        """
        某位使用者「收到」的評價，新到舊
        is_public 為 None 時不過濾
        """
        stmt = select(Feedback).where(Feedback.to_user_id == user_id)
        if is_public is not None:
            stmt = stmt.where(Feedback.is_public.is_(is_public))
        stmt = stmt.order_by(Feedback.created_at.desc(), Feedback.feedback_id)
        return await fetch_page(self.db, stmt, page, limit, self._get_common_feedback_options())

    async def find_by_author(self, user_id: str, page: int = 1, limit: int = 10) -> dict:
        """某位使用者「給出」的評價"""
        stmt = (
            select(Feedback)
            .where(Feedback.from_user_id == user_id)
            .order_by(Feedback.created_at.desc(), Feedback.feedback_id)
        )
        return await fetch_page(self.db, stmt, page, limit, self._get_common_feedback_options())

    async def calculate_user_rating(self, user_id: str) -> dict:
        """
        公開評價的平均分數與數量
        沒有任何公開評價時兩者皆為 0
        """
        stmt = select(
            func.avg(Feedback.rating),
            func.count(Feedback.feedback_id),
        ).where(Feedback.to_user_id == user_id, Feedback.is_public.is_(True))
        result = await self.db.execute(stmt)
        average, total = result.one()
        return {
            "average_rating": float(average) if average is not None else 0,
            "total_reviews": total or 0,
        }

    async def update(self, feedback: Feedback) -> Feedback:
        await self.db.commit()
        return await self.get_by_id(feedback.feedback_id)

    async def delete(self, feedback: Feedback) -> None:
        await self.db.delete(feedback)
        await self.db.commit()
