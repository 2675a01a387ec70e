# app/routers/dispute_router.py

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.core.config import settings
from app.core.database import get_db
from app.core.security import get_current_user, require_roles
from app.models.dispute import DisputeStatusEnum
from app.models.user import User, UserRoleEnum
from app.services.dispute_service import DisputeService
from app.schemas.common_schema import ApiResponse, Page
from app.schemas.dispute_schema import DisputeCreate, DisputeOut, DisputeResolve, DisputeUpdate
from app.utils.response import success_response

router = APIRouter(
    prefix="/disputes",
    tags=["Disputes"],
    dependencies=[Depends(get_current_user)]
)

admin_only = require_roles(UserRoleEnum.admin)


def get_dispute_service(db: AsyncSession = Depends(get_db)) -> DisputeService:
    return DisputeService(db)


@router.post("", response_model=ApiResponse[DisputeOut], status_code=status.HTTP_201_CREATED)
async def open_dispute(
    data: DisputeCreate,
    current_user: User = Depends(get_current_user),
    service: DisputeService = Depends(get_dispute_service)
):
    """(合約雙方) 提出爭議"""
    return success_response(await service.open_dispute(data, current_user), "爭議已提出")

@router.get("", response_model=ApiResponse[Page[DisputeOut]])
async def list_disputes(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.PAGINATION_DEFAULT_LIMIT, ge=1),
    status: Optional[DisputeStatusEnum] = None,
    current_user: User = Depends(get_current_user),
    service: DisputeService = Depends(get_dispute_service)
):
    """管理員看到全部爭議，其他使用者只看到自己合約的"""
    return success_response(await service.list_disputes(current_user, page, limit, status))

@router.get("/{dispute_id}", response_model=ApiResponse[DisputeOut])
async def get_dispute(
    dispute_id: str,
    current_user: User = Depends(get_current_user),
    service: DisputeService = Depends(get_dispute_service)
):
    return success_response(await service.get_dispute(dispute_id, current_user))

@router.patch("/{dispute_id}", response_model=ApiResponse[DisputeOut])
async def update_dispute(
    dispute_id: str,
    data: DisputeUpdate,
    current_user: User = Depends(admin_only),
    service: DisputeService = Depends(get_dispute_service)
):
    """(管理員) 狀態流轉，RESOLVED / CLOSED 必須附上處理結果"""
    return success_response(await service.update_dispute(dispute_id, data, current_user))

@router.post("/{dispute_id}/resolve", response_model=ApiResponse[DisputeOut])
async def resolve_dispute(
    dispute_id: str,
    data: DisputeResolve,
    current_user: User = Depends(admin_only),
    service: DisputeService = Depends(get_dispute_service)
):
    """(管理員) 結案，未指定狀態時為 RESOLVED"""
    return success_response(await service.resolve_dispute(dispute_id, data, current_user), "爭議已結案")
