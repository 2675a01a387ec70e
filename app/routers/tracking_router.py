# app/routers/tracking_router.py

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_db
from app.core.security import get_current_user
from app.models.user import User
from app.services.tracking_service import TrackingService
from app.schemas.common_schema import ApiResponse, Page
from app.schemas.tracking_schema import TrackingApprove, TrackingEntryCreate, TrackingEntryOut, TrackingEntryUpdate
from app.utils.response import success_response

router = APIRouter(
    prefix="/tracking",
    tags=["Tracking"],
    dependencies=[Depends(get_current_user)]
)

contract_tracking_router = APIRouter(
    prefix="/contracts",
    tags=["Tracking"],
    dependencies=[Depends(get_current_user)]
)


def get_tracking_service(db: AsyncSession = Depends(get_db)) -> TrackingService:
    return TrackingService(db)


@contract_tracking_router.post(
    "/{contract_id}/tracking",
    response_model=ApiResponse[TrackingEntryOut],
    status_code=status.HTTP_201_CREATED
)
async def create_tracking_entry(
    contract_id: str,
    data: TrackingEntryCreate,
    current_user: User = Depends(get_current_user),
    service: TrackingService = Depends(get_tracking_service)
):
    """(工作者) 回報工時，合約必須是 ACTIVE"""
    return success_response(await service.create_entry(contract_id, data, current_user))

@contract_tracking_router.get("/{contract_id}/tracking", response_model=ApiResponse[Page[TrackingEntryOut]])
async def list_tracking_entries(
    contract_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.PAGINATION_DEFAULT_LIMIT, ge=1),
    current_user: User = Depends(get_current_user),
    service: TrackingService = Depends(get_tracking_service)
):
    return success_response(await service.list_entries(contract_id, current_user, page, limit))


@router.get("/{entry_id}", response_model=ApiResponse[TrackingEntryOut])
async def get_tracking_entry(
    entry_id: str,
    current_user: User = Depends(get_current_user),
    service: TrackingService = Depends(get_tracking_service)
):
    return success_response(await service.get_entry(entry_id, current_user))

@router.put("/{entry_id}", response_model=ApiResponse[TrackingEntryOut])
async def update_tracking_entry(
    entry_id: str,
    data: TrackingEntryUpdate,
    current_user: User = Depends(get_current_user),
    service: TrackingService = Depends(get_tracking_service)
):
    """(工作者) 已核准的紀錄不能再修改"""
    return success_response(await service.update_entry(entry_id, data, current_user))

@router.post("/{entry_id}/approve", response_model=ApiResponse[TrackingEntryOut])
async def approve_tracking_entry(
    entry_id: str,
    data: TrackingApprove,
    current_user: User = Depends(get_current_user),
    service: TrackingService = Depends(get_tracking_service)
):
    """(公司) 核准工時"""
    return success_response(await service.approve_entry(entry_id, data, current_user))
