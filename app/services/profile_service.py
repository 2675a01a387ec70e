# app/services/profile_service.py
import logging
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError, ForbiddenError, NotFoundError
from app.models.company_profile import CompanyProfile
from app.models.freelancer_profile import FreelancerProfile, PortfolioItem
from app.models.user import User
from app.repositories.profile_repo import ProfileRepository
from app.schemas.profile_schema import (
    CompanyProfileCreate, CompanyProfileUpdate,
    FreelancerProfileCreate, FreelancerProfileOut, FreelancerProfileUpdate, FreelancerProfileView,
    PortfolioItemCreate, PortfolioItemUpdate,
)
from app.schemas.common_schema import UserBrief

logger = logging.getLogger(__name__)


class ProfileService:
    def __init__(self, db: AsyncSession):
        self.repo = ProfileRepository(db)

    # --- Freelancer ---
    async def get_my_freelancer_profile(self, user: User) -> FreelancerProfile:
        profile = await self.repo.get_freelancer_profile_by_user_id(user.user_id)
        if not profile:
            raise NotFoundError("尚未建立工作者 Profile", code="PROFILE_NOT_FOUND")
        return profile

    async def create_freelancer_profile(self, user: User, data: FreelancerProfileCreate) -> FreelancerProfile:
        existing = await self.repo.get_freelancer_profile_by_user_id(user.user_id)
        if existing:
            raise ConflictError("工作者 Profile 已存在", code="PROFILE_EXISTS")
        # JSON 欄位 (skills / availability) 需要可序列化的值
        profile = await self.repo.create_freelancer_profile(user.user_id, data.model_dump(mode="json"))
        logger.info(f"建立工作者 Profile: {profile.profile_id} (user {user.user_id})")
        return profile

    async def update_freelancer_profile(self, user: User, data: FreelancerProfileUpdate) -> FreelancerProfile:
        profile = await self.get_my_freelancer_profile(user)
        return await self.repo.update_freelancer_profile(
            profile, data.model_dump(mode="json", exclude_unset=True)
        )

    async def get_freelancer_view(self, profile_id: str) -> FreelancerProfileView:
        profile = await self.repo.get_freelancer_profile_by_id(profile_id)
        if not profile:
            raise NotFoundError("工作者不存在", code="FREELANCER_NOT_FOUND")
        views = await self.build_freelancer_views([profile])
        return views[0]

    async def build_freelancer_views(self, profiles: List[FreelancerProfile]) -> List[FreelancerProfileView]:
        """
        附加讀取時計算的欄位：評價、已完成合約數、是否通過認證
        一次查完整批 profile，避免 N+1
        """
        profile_ids = [p.profile_id for p in profiles]
        user_ids = [p.user_id for p in profiles]

        ratings = await self.repo.get_ratings_for_users(user_ids)
        completed = await self.repo.count_completed_contracts(profile_ids)
        certified = await self.repo.get_certified_profile_ids(profile_ids)

        views = []
        for profile in profiles:
            rating = ratings.get(profile.user_id, {})
            base = FreelancerProfileOut.model_validate(profile).model_dump()
            views.append(FreelancerProfileView(
                **base,
                user=UserBrief.model_validate(profile.user) if profile.user else None,
                rating=round(rating.get("average_rating", 0), 2),
                total_reviews=rating.get("total_reviews", 0),
                completed_jobs=completed.get(profile.profile_id, 0),
                is_certified=profile.profile_id in certified,
            ))
        return views

    # --- Portfolio ---
    async def list_my_portfolio(self, user: User) -> List[PortfolioItem]:
        profile = await self.get_my_freelancer_profile(user)
        return await self.repo.list_portfolio_items(profile.profile_id)

    async def add_portfolio_item(self, user: User, data: PortfolioItemCreate) -> PortfolioItem:
        profile = await self.get_my_freelancer_profile(user)
        return await self.repo.create_portfolio_item(profile.profile_id, data.model_dump(mode="json"))

    async def _get_my_portfolio_item(self, user: User, item_id: str) -> PortfolioItem:
        profile = await self.get_my_freelancer_profile(user)
        item = await self.repo.get_portfolio_item(item_id)
        if not item:
            raise NotFoundError("作品不存在")
        if item.profile_id != profile.profile_id:
            raise ForbiddenError("你無權修改此作品")
        return item

    async def update_portfolio_item(self, user: User, item_id: str, data: PortfolioItemUpdate) -> PortfolioItem:
        item = await self._get_my_portfolio_item(user, item_id)
        return await self.repo.update_portfolio_item(item, data.model_dump(mode="json", exclude_unset=True))

    async def delete_portfolio_item(self, user: User, item_id: str) -> None:
        item = await self._get_my_portfolio_item(user, item_id)
        await self.repo.delete_portfolio_item(item)

    # --- Company ---
    async def get_my_company_profile(self, user: User) -> CompanyProfile:
        profile = await self.repo.get_company_profile_by_user_id(user.user_id)
        if not profile:
            raise NotFoundError("尚未建立公司 Profile", code="PROFILE_NOT_FOUND")
        return profile

    async def create_company_profile(self, user: User, data: CompanyProfileCreate) -> CompanyProfile:
        existing = await self.repo.get_company_profile_by_user_id(user.user_id)
        if existing:
            raise ConflictError("公司 Profile 已存在", code="PROFILE_EXISTS")
        profile = await self.repo.create_company_profile(user.user_id, data.model_dump())
        logger.info(f"建立公司 Profile: {profile.profile_id} (user {user.user_id})")
        return profile

    async def update_company_profile(self, user: User, data: CompanyProfileUpdate) -> CompanyProfile:
        profile = await self.get_my_company_profile(user)
        return await self.repo.update_company_profile(profile, data.model_dump(exclude_unset=True))
