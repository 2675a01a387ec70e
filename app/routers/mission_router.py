# app/routers/mission_router.py
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Literal, Optional

from app.core.config import settings
from app.core.database import get_db
from app.core.security import get_current_user, require_roles
from app.models.mission import MissionStatusEnum
from app.models.user import User, UserRoleEnum
from app.services.mission_service import MissionService
from app.schemas.common_schema import ApiResponse, Page
from app.schemas.mission_schema import MissionCreate, MissionOut, MissionStatusUpdate, MissionUpdate
from app.utils.response import success_response

router = APIRouter(
    prefix="/missions",
    tags=["Missions"],
    dependencies=[Depends(get_current_user)]
)

company_only = require_roles(UserRoleEnum.company)


def get_mission_service(db: AsyncSession = Depends(get_db)) -> MissionService:
    return MissionService(db)


@router.get("", response_model=ApiResponse[Page[MissionOut]])
async def list_missions(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.PAGINATION_DEFAULT_LIMIT, ge=1),
    q: Optional[str] = Query(None, description="標題 / 描述關鍵字"),
    skill: Optional[str] = Query(None, description="必要技能"),
    modality: Optional[Literal['remote', 'on-site', 'hybrid']] = None,
    experience: Optional[Literal['junior', 'mid', 'senior']] = None,
    status: Optional[MissionStatusEnum] = Query(None, description="(管理員) 狀態篩選"),
    current_user: User = Depends(get_current_user),
    service: MissionService = Depends(get_mission_service)
):
    """
    瀏覽任務 (一般使用者只會看到 PUBLISHED)
    """
    result = await service.list_missions(
        page, limit, status=status, q=q, skill=skill,
        modality=modality, experience=experience, user=current_user,
    )
    return success_response(result)

@router.get("/my", response_model=ApiResponse[Page[MissionOut]])
async def list_my_missions(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.PAGINATION_DEFAULT_LIMIT, ge=1),
    current_user: User = Depends(company_only),
    service: MissionService = Depends(get_mission_service)
):
    """(公司) 我刊登的任務，包含草稿"""
    return success_response(await service.list_my_missions(current_user, page, limit))

@router.get("/{mission_id}", response_model=ApiResponse[MissionOut])
async def get_mission(
    mission_id: str,
    current_user: User = Depends(get_current_user),
    service: MissionService = Depends(get_mission_service)
):
    return success_response(await service.get_mission(mission_id, current_user))

@router.post("", response_model=ApiResponse[MissionOut], status_code=status.HTTP_201_CREATED)
async def create_mission(
    data: MissionCreate,
    current_user: User = Depends(company_only),
    service: MissionService = Depends(get_mission_service)
):
    """(公司) 建立任務，初始狀態為 DRAFT"""
    return success_response(await service.create_mission(data, current_user), "任務已建立")

@router.put("/{mission_id}", response_model=ApiResponse[MissionOut])
async def update_mission(
    mission_id: str,
    data: MissionUpdate,
    current_user: User = Depends(company_only),
    service: MissionService = Depends(get_mission_service)
):
    return success_response(await service.update_mission(mission_id, data, current_user))

@router.patch("/{mission_id}/status", response_model=ApiResponse[MissionOut])
async def update_mission_status(
    mission_id: str,
    data: MissionStatusUpdate,
    current_user: User = Depends(require_roles(UserRoleEnum.company, UserRoleEnum.admin)),
    service: MissionService = Depends(get_mission_service)
):
    """
    任務狀態流轉：
    - DRAFT -> PUBLISHED / CANCELLED
    - PUBLISHED -> COMPLETED / CANCELLED
    """
    return success_response(await service.update_mission_status(mission_id, data, current_user))
