# app/services/matching_service.py
import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import ForbiddenError, NotFoundError
from app.models.user import User, UserRoleEnum
from app.repositories.application_repo import ApplicationRepository
from app.repositories.mission_repo import MissionRepository
from app.repositories.profile_repo import ProfileRepository
from app.repositories.shortlist_repo import ShortlistRepository
from app.services.mission_service import MissionService
from app.services.profile_service import ProfileService
from app.utils.matching import (
    calculate_freelancer_match, calculate_mission_match, has_any_required_skill, rank_matches,
)

logger = logging.getLogger(__name__)


class MatchingService:
    def __init__(self, db: AsyncSession):
        self.profile_repo = ProfileRepository(db)
        self.mission_repo = MissionRepository(db)
        self.application_repo = ApplicationRepository(db)
        self.shortlist_repo = ShortlistRepository(db)
        self.mission_service = MissionService(db)
        self.profile_service = ProfileService(db)

    async def _resolve_freelancer(self, freelancer_id: Optional[str], user: User):
        """未指定 freelancer_id 時使用登入者自己的 Profile"""
        if freelancer_id:
            profile = await self.profile_repo.get_freelancer_profile_by_id(freelancer_id)
        else:
            profile = await self.profile_repo.get_freelancer_profile_by_user_id(user.user_id)
        if not profile:
            raise NotFoundError("工作者不存在", code="FREELANCER_NOT_FOUND")
        if user.role != UserRoleEnum.admin and profile.user_id != user.user_id:
            raise ForbiddenError("只能查看自己的推薦任務")
        return profile

    async def get_top_matching_missions(
        self, user: User, freelancer_id: Optional[str] = None, limit: int = 10
    ) -> List[dict]:
        """
        工作者的推薦任務：
        PUBLISHED 任務 (最多 MATCHING_POOL_SIZE 筆)，排除已申請過的
        """
        freelancer = await self._resolve_freelancer(freelancer_id, user)

        missions = await self.mission_repo.list_published_missions(settings.MATCHING_POOL_SIZE)
        applied = await self.application_repo.get_applied_mission_ids(freelancer.profile_id)
        ratings = await self.profile_repo.get_ratings_for_users([freelancer.user_id])
        rating = ratings.get(freelancer.user_id, {}).get("average_rating", 0)

        scored = []
        for mission in missions:
            if mission.mission_id in applied:
                continue
            score, reasons = calculate_mission_match(freelancer, mission, rating=rating)
            scored.append({
                "item_id": mission.mission_id,
                "score": score,
                "reasons": reasons,
                "created_at": mission.created_at,
                "item_object": mission,
            })

        ranked = rank_matches(scored, limit)
        logger.info(
            f"工作者 {freelancer.profile_id} 推薦任務: 候選 {len(missions)}，評分 {len(scored)}，回傳 {len(ranked)}"
        )
        return [
            {"mission": r["item_object"], "score": r["score"], "reasons": r["reasons"]}
            for r in ranked
        ]

    async def get_top_matching_freelancers(self, mission_id: str, user: User, limit: int = 10) -> List[dict]:
        """
        任務的推薦人才：
        可接案的工作者 (最多 MATCHING_POOL_SIZE 筆)，排除已申請與已在候選名單中的，
        並且至少要符合一項必要技能
        """
        mission = await self.mission_service.get_owned_mission(mission_id, user)

        pool = await self.profile_repo.list_available_freelancers(settings.MATCHING_POOL_SIZE)
        applicants = await self.application_repo.get_applicant_ids(mission_id)
        shortlisted = await self.shortlist_repo.get_shortlisted_freelancer_ids(mission_id)

        candidates = [
            p for p in pool
            if p.profile_id not in applicants
            and p.profile_id not in shortlisted
            and has_any_required_skill(mission.required_skills, p.skills)
        ]
        views = await self.profile_service.build_freelancer_views(candidates)

        scored = []
        for profile, view in zip(candidates, views):
            score, reasons = calculate_freelancer_match(
                mission, profile, rating=view.rating, completed_jobs=view.completed_jobs
            )
            scored.append({
                "item_id": profile.profile_id,
                "score": score,
                "reasons": reasons,
                "created_at": profile.created_at,
                "item_object": view,
            })

        ranked = rank_matches(scored, limit)
        logger.info(
            f"任務 {mission_id} 推薦人才: 候選 {len(pool)}，過濾後 {len(candidates)}，回傳 {len(ranked)}"
        )
        return [
            {"freelancer": r["item_object"], "score": r["score"], "reasons": r["reasons"]}
            for r in ranked
        ]
