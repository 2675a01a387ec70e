# app/routers/matching_router.py

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from app.core.database import get_db
from app.core.security import get_current_user, require_roles
from app.models.user import User, UserRoleEnum
from app.services.matching_service import MatchingService
from app.schemas.common_schema import ApiResponse
from app.schemas.matching_schema import FreelancerMatchOut, MissionMatchOut
from app.utils.response import success_response

router = APIRouter(
    prefix="/matching",
    tags=["Matching"],
    dependencies=[Depends(get_current_user)]
)


def get_matching_service(db: AsyncSession = Depends(get_db)) -> MatchingService:
    return MatchingService(db)


@router.get(
    "/missions",
    response_model=ApiResponse[List[MissionMatchOut]],
    summary="推薦任務給工作者"
)
async def get_matching_missions(
    freelancer_id: Optional[str] = Query(None, description="(管理員) 指定工作者檔案"),
    limit: int = Query(10, ge=1, le=50),
    current_user: User = Depends(require_roles(UserRoleEnum.freelancer, UserRoleEnum.admin)),
    service: MatchingService = Depends(get_matching_service)
):
    """
    依技能、預算、經驗與工作型態計算配對分數 (0-100)，
    分數由高到低排序，已申請過的任務不會出現。
    """
    matches = await service.get_top_matching_missions(current_user, freelancer_id, limit)
    return success_response(matches)

@router.get(
    "/freelancers",
    response_model=ApiResponse[List[FreelancerMatchOut]],
    summary="推薦工作者給任務"
)
async def get_matching_freelancers(
    mission_id: str = Query(...),
    limit: int = Query(10, ge=1, le=50),
    current_user: User = Depends(require_roles(UserRoleEnum.company, UserRoleEnum.admin)),
    service: MatchingService = Depends(get_matching_service)
):
    """
    (公司) 只有任務擁有者可以查詢，已申請或已在候選名單的工作者會被排除。
    """
    matches = await service.get_top_matching_freelancers(mission_id, current_user, limit)
    return success_response(matches)
