# app/repositories/profile_repo.py
import logging
from typing import Dict, List, Optional, Set

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload, joinedload

from app.models.freelancer_profile import FreelancerProfile, PortfolioItem
from app.models.company_profile import CompanyProfile
from app.models.contract import Contract, ContractStatusEnum
from app.models.application import Application
from app.models.assessment import Assessment
from app.models.feedback import Feedback

logger = logging.getLogger(__name__)

# 認證門檻：測驗得分 / 滿分 >= 70%
CERTIFIED_PASS_RATIO = 0.7
# 沒有滿分可參考時，以原始分數 70 為門檻
CERTIFIED_MIN_RAW_SCORE = 70


def is_passing_score(score, max_score) -> bool:
    if score is None:
        return False
    if max_score:
        return float(score) / float(max_score) >= CERTIFIED_PASS_RATIO
    return float(score) >= CERTIFIED_MIN_RAW_SCORE


class ProfileRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    def _freelancer_options(self):
        # FreelancerProfileView 需要 portfolio 與 user
        return [
            selectinload(FreelancerProfile.portfolio),
            joinedload(FreelancerProfile.user),
        ]

    async def _save(self, obj):
        try:
            self.db.add(obj)
            await self.db.commit()
            return obj
        except Exception as e:
            await self.db.rollback()
            logger.error(f"儲存 Profile 失敗: {e}", exc_info=True)
            raise

    # --- Freelancer ---
    async def get_freelancer_profile_by_user_id(self, user_id: str) -> FreelancerProfile | None:
        stmt = (
            select(FreelancerProfile)
            .where(FreelancerProfile.user_id == user_id)
            .options(*self._freelancer_options())
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def get_freelancer_profile_by_id(self, profile_id: str) -> FreelancerProfile | None:
        stmt = (
            select(FreelancerProfile)
            .where(FreelancerProfile.profile_id == profile_id)
            .options(*self._freelancer_options())
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def create_freelancer_profile(self, user_id: str, data: dict) -> FreelancerProfile:
        new_profile = FreelancerProfile(**data, user_id=user_id)
        await self._save(new_profile)
        return await self.get_freelancer_profile_by_id(new_profile.profile_id)

    async def update_freelancer_profile(self, profile: FreelancerProfile, data: dict) -> FreelancerProfile:
        """更新工作者 Profile (data 只包含有被傳入的欄位)"""
        for key, value in data.items():
            setattr(profile, key, value)
        await self._save(profile)
        return await self.get_freelancer_profile_by_id(profile.profile_id)

    async def list_available_freelancers(self, limit: int) -> List[FreelancerProfile]:
        """
        媒合用：availability.status = available 的工作者
        JSON 欄位的過濾在不同資料庫寫法不同，這裡先取出再用 Python 過濾
        """
        stmt = (
            select(FreelancerProfile)
            .options(*self._freelancer_options())
            .order_by(FreelancerProfile.created_at, FreelancerProfile.profile_id)
        )
        result = await self.db.execute(stmt)
        profiles = [
            p for p in result.scalars().unique().all()
            if isinstance(p.availability, dict) and p.availability.get("status") == "available"
        ]
        return profiles[:limit]

    # --- Portfolio ---
    async def get_portfolio_item(self, item_id: str) -> PortfolioItem | None:
        stmt = select(PortfolioItem).where(PortfolioItem.item_id == item_id)
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def list_portfolio_items(self, profile_id: str) -> List[PortfolioItem]:
        stmt = (
            select(PortfolioItem)
            .where(PortfolioItem.profile_id == profile_id)
            .order_by(PortfolioItem.created_at, PortfolioItem.item_id)
        )
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def create_portfolio_item(self, profile_id: str, data: dict) -> PortfolioItem:
        item = PortfolioItem(**data, profile_id=profile_id)
        await self._save(item)
        await self.db.refresh(item)
        return item

    async def update_portfolio_item(self, item: PortfolioItem, data: dict) -> PortfolioItem:
        for key, value in data.items():
            setattr(item, key, value)
        await self._save(item)
        await self.db.refresh(item)
        return item

    async def delete_portfolio_item(self, item: PortfolioItem) -> None:
        await self.db.delete(item)
        await self.db.commit()

    # --- Company ---
    async def get_company_profile_by_user_id(self, user_id: str) -> CompanyProfile | None:
        stmt = select(CompanyProfile).where(CompanyProfile.user_id == user_id)
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def get_company_profile_by_id(self, profile_id: str) -> CompanyProfile | None:
        stmt = select(CompanyProfile).where(CompanyProfile.profile_id == profile_id)
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def create_company_profile(self, user_id: str, data: dict) -> CompanyProfile:
        new_profile = CompanyProfile(**data, user_id=user_id)
        await self._save(new_profile)
        await self.db.refresh(new_profile)
        return new_profile

    async def update_company_profile(self, profile: CompanyProfile, data: dict) -> CompanyProfile:
        """更新公司 Profile"""
        for key, value in data.items():
            setattr(profile, key, value)
        await self._save(profile)
        await self.db.refresh(profile)
        return profile

    # --- 讀取時計算的統計 (批次) ---
    async def get_ratings_for_users(self, user_ids: List[str]) -> Dict[str, dict]:
        """
        {user_id: {"average_rating", "total_reviews"}}
        只計算公開評價，沒有評價的使用者不會出現在結果中
        """
        if not user_ids:
            return {}
        stmt = (
            select(
                Feedback.to_user_id,
                func.avg(Feedback.rating),
                func.count(Feedback.feedback_id),
            )
            .where(Feedback.to_user_id.in_(user_ids), Feedback.is_public.is_(True))
            .group_by(Feedback.to_user_id)
        )
        result = await self.db.execute(stmt)
        return {
            user_id: {"average_rating": float(avg or 0), "total_reviews": count}
            for user_id, avg, count in result.all()
        }

    async def count_completed_contracts(self, profile_ids: List[str]) -> Dict[str, int]:
        """{freelancer profile_id: 已完成合約數}"""
        if not profile_ids:
            return {}
        stmt = (
            select(Contract.freelancer_id, func.count(Contract.contract_id))
            .where(
                Contract.freelancer_id.in_(profile_ids),
                Contract.status == ContractStatusEnum.completed,
            )
            .group_by(Contract.freelancer_id)
        )
        result = await self.db.execute(stmt)
        return {profile_id: count for profile_id, count in result.all()}

    async def get_certified_profile_ids(self, profile_ids: List[str]) -> Set[str]:
        """有至少一份已評分且及格的測驗的工作者"""
        if not profile_ids:
            return set()
        stmt = (
            select(Application.freelancer_id, Assessment.score, Assessment.max_score)
            .join(Assessment, Assessment.application_id == Application.application_id)
            .where(
                Application.freelancer_id.in_(profile_ids),
                Assessment.score.is_not(None),
            )
        )
        result = await self.db.execute(stmt)
        return {
            profile_id
            for profile_id, score, max_score in result.all()
            if is_passing_score(score, max_score)
        }
