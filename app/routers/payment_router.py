# app/routers/payment_router.py

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_db
from app.core.security import get_current_user, require_roles
from app.models.user import User, UserRoleEnum
from app.services.payment_service import PaymentService
from app.schemas.common_schema import ApiResponse, Page
from app.schemas.payment_schema import PaymentCreate, PaymentOut
from app.utils.response import success_response

router = APIRouter(
    tags=["Payments"],
    dependencies=[Depends(get_current_user)]
)


def get_payment_service(db: AsyncSession = Depends(get_db)) -> PaymentService:
    return PaymentService(db)


@router.post(
    "/milestones/{milestone_id}/payments",
    response_model=ApiResponse[PaymentOut],
    status_code=status.HTTP_201_CREATED
)
async def record_payment(
    milestone_id: str,
    data: PaymentCreate,
    current_user: User = Depends(require_roles(UserRoleEnum.company)),
    service: PaymentService = Depends(get_payment_service)
):
    """
    (公司) 記錄里程碑付款。里程碑必須已 APPROVED，付款後變成 PAID。
    未填金額時以里程碑金額為準。
    """
    payment = await service.record_payment(milestone_id, data, current_user)
    return success_response(payment, "付款已記錄")

@router.get("/contracts/{contract_id}/payments", response_model=ApiResponse[Page[PaymentOut]])
async def list_contract_payments(
    contract_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.PAGINATION_DEFAULT_LIMIT, ge=1),
    current_user: User = Depends(get_current_user),
    service: PaymentService = Depends(get_payment_service)
):
    return success_response(await service.list_payments(contract_id, current_user, page, limit))
