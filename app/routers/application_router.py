# app/routers/application_router.py

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.core.config import settings
from app.core.database import get_db
from app.core.security import get_current_user, require_roles
from app.models.application import ApplicationStatusEnum
from app.models.user import User, UserRoleEnum
from app.services.application_service import ApplicationService
from app.schemas.application_schema import (
    ApplicationCreate, ApplicationOut, ApplicationStatusUpdate, MissionApplicationOut
)
from app.schemas.common_schema import ApiResponse, Page
from app.utils.response import success_response

router = APIRouter(
    prefix="/applications",
    tags=["Applications"],
    dependencies=[Depends(get_current_user)] # 重要：此 router 下所有 API 都需要登入
)

# 申請掛在 /missions/{mission_id}/applications 下，語意更清晰
mission_application_router = APIRouter(
    prefix="/missions",
    tags=["Applications"], # 歸類到同一個 Tag
    dependencies=[Depends(get_current_user)]
)


def get_application_service(db: AsyncSession = Depends(get_db)) -> ApplicationService:
    return ApplicationService(db)


@mission_application_router.post(
    "/{mission_id}/applications",
    response_model=ApiResponse[ApplicationOut],
    status_code=status.HTTP_201_CREATED
)
async def apply_to_mission(
    mission_id: str,
    data: ApplicationCreate,
    current_user: User = Depends(require_roles(UserRoleEnum.freelancer)),
    service: ApplicationService = Depends(get_application_service)
):
    """
    (工作者) 申請任務。同一任務只能申請一次。
    """
    return success_response(await service.apply_to_mission(mission_id, data, current_user), "申請已送出")

@mission_application_router.get(
    "/{mission_id}/applications",
    response_model=ApiResponse[Page[MissionApplicationOut]]
)
async def list_mission_applications(
    mission_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.PAGINATION_DEFAULT_LIMIT, ge=1),
    status: Optional[ApplicationStatusEnum] = None,
    current_user: User = Depends(get_current_user),
    service: ApplicationService = Depends(get_application_service)
):
    """
    (公司) 檢視自己任務收到的申請，每位應徵者附帶 is_certified
    """
    result = await service.list_mission_applications(mission_id, current_user, page, limit, status)
    return success_response(result)


@router.get("/my", response_model=ApiResponse[Page[ApplicationOut]])
async def list_my_applications(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.PAGINATION_DEFAULT_LIMIT, ge=1),
    current_user: User = Depends(require_roles(UserRoleEnum.freelancer)),
    service: ApplicationService = Depends(get_application_service)
):
    """(工作者) 我送出的申請"""
    return success_response(await service.list_my_applications(current_user, page, limit))

@router.get("/{application_id}", response_model=ApiResponse[ApplicationOut])
async def get_application(
    application_id: str,
    current_user: User = Depends(get_current_user),
    service: ApplicationService = Depends(get_application_service)
):
    return success_response(await service.get_application(application_id, current_user))

@router.patch("/{application_id}/status", response_model=ApiResponse[ApplicationOut])
async def update_application_status(
    application_id: str,
    data: ApplicationStatusUpdate,
    current_user: User = Depends(require_roles(UserRoleEnum.company)),
    service: ApplicationService = Depends(get_application_service)
):
    """
    (公司) 審核申請：
    - PENDING -> SHORTLISTED / REJECTED / ACCEPTED
    - SHORTLISTED -> REJECTED / ACCEPTED
    - INTERVIEW_COMPLETED -> ACCEPTED / REJECTED
    """
    return success_response(await service.update_application_status(application_id, data, current_user))
