# app/routers/shortlist_router.py

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from app.core.database import get_db
from app.core.security import require_roles
from app.models.user import User, UserRoleEnum
from app.services.shortlist_service import ShortlistService
from app.schemas.common_schema import ApiResponse
from app.schemas.shortlist_schema import ShortlistCreate, ShortlistOut
from app.utils.response import success_response

company_only = require_roles(UserRoleEnum.company)

router = APIRouter(
    prefix="/shortlist",
    tags=["Shortlist"],
    dependencies=[Depends(company_only)]
)


def get_shortlist_service(db: AsyncSession = Depends(get_db)) -> ShortlistService:
    return ShortlistService(db)


@router.post("", response_model=ApiResponse[ShortlistOut], status_code=status.HTTP_201_CREATED)
async def add_to_shortlist(
    data: ShortlistCreate,
    current_user: User = Depends(company_only),
    service: ShortlistService = Depends(get_shortlist_service)
):
    return success_response(await service.add_to_shortlist(data, current_user), "已加入候選名單")

@router.get("", response_model=ApiResponse[List[ShortlistOut]])
async def list_shortlist(
    mission_id: Optional[str] = None,
    current_user: User = Depends(company_only),
    service: ShortlistService = Depends(get_shortlist_service)
):
    return success_response(await service.list_shortlist(current_user, mission_id))

@router.delete("/{shortlist_id}", response_model=ApiResponse[None])
async def remove_from_shortlist(
    shortlist_id: str,
    current_user: User = Depends(company_only),
    service: ShortlistService = Depends(get_shortlist_service)
):
    await service.remove_from_shortlist(shortlist_id, current_user)
    return success_response(message="已從候選名單移除")
