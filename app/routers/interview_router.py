# app/routers/interview_router.py

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_db
from app.core.security import get_current_user, require_roles
from app.models.user import User, UserRoleEnum
from app.services.interview_service import InterviewService
from app.schemas.common_schema import ApiResponse, Page
from app.schemas.interview_schema import InterviewComplete, InterviewCreate, InterviewOut, InterviewUpdate
from app.utils.response import success_response

router = APIRouter(
    prefix="/interviews",
    tags=["Interviews"],
    dependencies=[Depends(get_current_user)]
)

company_only = require_roles(UserRoleEnum.company)


def get_interview_service(db: AsyncSession = Depends(get_db)) -> InterviewService:
    return InterviewService(db)


@router.post("", response_model=ApiResponse[InterviewOut], status_code=status.HTTP_201_CREATED)
async def schedule_interview(
    data: InterviewCreate,
    current_user: User = Depends(company_only),
    service: InterviewService = Depends(get_interview_service)
):
    """
    (公司) 針對申請安排面試，申請狀態會變成 INTERVIEW_SCHEDULED
    """
    interview = await service.schedule_interview(data, current_user)
    return success_response(interview, "面試已安排")

@router.get("/my", response_model=ApiResponse[Page[InterviewOut]])
async def list_my_interviews(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.PAGINATION_DEFAULT_LIMIT, ge=1),
    current_user: User = Depends(get_current_user),
    service: InterviewService = Depends(get_interview_service)
):
    return success_response(await service.list_my_interviews(current_user, page, limit))

@router.get("/{interview_id}", response_model=ApiResponse[InterviewOut])
async def get_interview(
    interview_id: str,
    current_user: User = Depends(get_current_user),
    service: InterviewService = Depends(get_interview_service)
):
    return success_response(await service.get_interview(interview_id, current_user))

@router.put("/{interview_id}", response_model=ApiResponse[InterviewOut])
async def update_interview(
    interview_id: str,
    data: InterviewUpdate,
    current_user: User = Depends(company_only),
    service: InterviewService = Depends(get_interview_service)
):
    """(公司) 改期或修改會議連結，已完成的面試不能再修改"""
    return success_response(await service.update_interview(interview_id, data, current_user))

@router.post("/{interview_id}/complete", response_model=ApiResponse[InterviewOut])
async def complete_interview(
    interview_id: str,
    data: InterviewComplete,
    current_user: User = Depends(company_only),
    service: InterviewService = Depends(get_interview_service)
):
    """
    (公司) 完成面試並給予 1-5 分評價，申請狀態會變成 INTERVIEW_COMPLETED
    """
    return success_response(await service.complete_interview(interview_id, data, current_user))
