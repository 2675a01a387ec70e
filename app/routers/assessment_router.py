# app/routers/assessment_router.py

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.core.config import settings
from app.core.database import get_db
from app.core.security import get_current_user, require_roles
from app.models.assessment import AssessmentTypeEnum
from app.models.user import User, UserRoleEnum
from app.services.assessment_service import AssessmentService
from app.schemas.common_schema import ApiResponse, Page
from app.schemas.assessment_schema import AssessmentCreate, AssessmentOut, AssessmentScore, AssessmentSubmit
from app.utils.response import success_response

router = APIRouter(
    prefix="/assessments",
    tags=["Assessments"],
    dependencies=[Depends(get_current_user)]
)

company_or_admin = require_roles(UserRoleEnum.company, UserRoleEnum.admin)
freelancer_only = require_roles(UserRoleEnum.freelancer)


def get_assessment_service(db: AsyncSession = Depends(get_db)) -> AssessmentService:
    return AssessmentService(db)


@router.get("", response_model=ApiResponse[Page[AssessmentOut]])
async def list_assessments(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.PAGINATION_DEFAULT_LIMIT, ge=1),
    type: Optional[AssessmentTypeEnum] = None,
    application_id: Optional[str] = None,
    current_user: User = Depends(get_current_user),
    service: AssessmentService = Depends(get_assessment_service)
):
    """列出與自己有關的測驗 (管理員可看全部)"""
    return success_response(
        await service.list_assessments(current_user, page, limit, type, application_id)
    )

@router.post("", response_model=ApiResponse[AssessmentOut], status_code=status.HTTP_201_CREATED)
async def create_assessment(
    data: AssessmentCreate,
    current_user: User = Depends(company_or_admin),
    service: AssessmentService = Depends(get_assessment_service)
):
    """
    (公司) 針對申請寄送測驗，申請狀態會變成 ASSESSMENT_SENT
    """
    assessment = await service.create_assessment(data, current_user)
    return success_response(assessment, "測驗已寄送")

@router.get("/{assessment_id}", response_model=ApiResponse[AssessmentOut])
async def get_assessment(
    assessment_id: str,
    current_user: User = Depends(get_current_user),
    service: AssessmentService = Depends(get_assessment_service)
):
    return success_response(await service.get_assessment(assessment_id, current_user))

@router.post("/{assessment_id}/submit", response_model=ApiResponse[AssessmentOut])
async def submit_assessment(
    assessment_id: str,
    data: AssessmentSubmit,
    current_user: User = Depends(freelancer_only),
    service: AssessmentService = Depends(get_assessment_service)
):
    """(工作者) 提交答案，每一題都必須作答；申請狀態會變成 ASSESSMENT_COMPLETED"""
    assessment = await service.submit_assessment(assessment_id, data, current_user)
    return success_response(assessment, "測驗已提交")

@router.patch("/{assessment_id}/score", response_model=ApiResponse[AssessmentOut])
async def score_assessment(
    assessment_id: str,
    data: AssessmentScore,
    current_user: User = Depends(company_or_admin),
    service: AssessmentService = Depends(get_assessment_service)
):
    """(出題的公司 / 管理員) 評分，得分 / 滿分 >= 70% 的工作者會被標示為已認證"""
    return success_response(await service.score_assessment(assessment_id, data, current_user))
