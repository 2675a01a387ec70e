# app/routers/milestone_router.py

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.core.database import get_db
from app.core.security import get_current_user
from app.models.user import User
from app.services.milestone_service import MilestoneService
from app.schemas.common_schema import ApiResponse
from app.schemas.milestone_schema import MilestoneCreate, MilestoneOut, MilestoneStatusUpdate, MilestoneUpdate
from app.utils.response import success_response

router = APIRouter(
    prefix="/milestones",
    tags=["Milestones"],
    dependencies=[Depends(get_current_user)]
)

# 建立 / 列出里程碑掛在合約底下
contract_milestone_router = APIRouter(
    prefix="/contracts",
    tags=["Milestones"],
    dependencies=[Depends(get_current_user)]
)


def get_milestone_service(db: AsyncSession = Depends(get_db)) -> MilestoneService:
    return MilestoneService(db)


@contract_milestone_router.post(
    "/{contract_id}/milestones",
    response_model=ApiResponse[MilestoneOut],
    status_code=status.HTTP_201_CREATED
)
async def create_milestone(
    contract_id: str,
    data: MilestoneCreate,
    current_user: User = Depends(get_current_user),
    service: MilestoneService = Depends(get_milestone_service)
):
    """(公司) 為合約新增里程碑"""
    return success_response(await service.create_milestone(contract_id, data, current_user))

@contract_milestone_router.get("/{contract_id}/milestones", response_model=ApiResponse[List[MilestoneOut]])
async def list_milestones(
    contract_id: str,
    current_user: User = Depends(get_current_user),
    service: MilestoneService = Depends(get_milestone_service)
):
    return success_response(await service.list_milestones(contract_id, current_user))


@router.get("/{milestone_id}", response_model=ApiResponse[MilestoneOut])
async def get_milestone(
    milestone_id: str,
    current_user: User = Depends(get_current_user),
    service: MilestoneService = Depends(get_milestone_service)
):
    return success_response(await service.get_milestone(milestone_id, current_user))

@router.put("/{milestone_id}", response_model=ApiResponse[MilestoneOut])
async def update_milestone(
    milestone_id: str,
    data: MilestoneUpdate,
    current_user: User = Depends(get_current_user),
    service: MilestoneService = Depends(get_milestone_service)
):
    """(公司) 只能修改 PENDING 的里程碑"""
    return success_response(await service.update_milestone(milestone_id, data, current_user))

@router.patch("/{milestone_id}/status", response_model=ApiResponse[MilestoneOut])
async def update_milestone_status(
    milestone_id: str,
    data: MilestoneStatusUpdate,
    current_user: User = Depends(get_current_user),
    service: MilestoneService = Depends(get_milestone_service)
):
    """
    - (工作者) PENDING -> SUBMITTED (可附上交付物)
    - (公司) SUBMITTED -> APPROVED
    付款 (APPROVED -> PAID) 請走 POST /milestones/{id}/payments
    """
    return success_response(await service.update_milestone_status(milestone_id, data, current_user))
