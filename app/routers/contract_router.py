# app/routers/contract_router.py

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.services.contract_service import ContractService
from app.schemas.contract_schema import (
    ContractCreate, ContractUpdate, ContractStatusUpdate, ContractOut
)
from app.schemas.common_schema import ApiResponse, Page

from app.core.config import settings
from app.models.user import User, UserRoleEnum
from app.core.security import get_current_user, require_roles # 依賴注入：獲取當前使用者
from app.core.database import get_db # 依賴注入：獲取 DB Session
from app.utils.response import success_response

router = APIRouter(
    prefix="/contracts",
    tags=["Contracts"] # API 文件分組
)

# 輔助函式：在路由中快速實例化 Service
def get_contract_service(db: AsyncSession = Depends(get_db)) -> ContractService:
    return ContractService(db)

@router.post(
    "",
    response_model=ApiResponse[ContractOut],
    status_code=status.HTTP_201_CREATED,
    summary="建立合約草案"
)
async def api_create_contract(
    contract_data: ContractCreate,
    service: ContractService = Depends(get_contract_service),
    current_user: User = Depends(require_roles(UserRoleEnum.company))
):
    """
    (公司) 申請被接受 (ACCEPTED) 後，針對該任務與工作者建立 DRAFT 合約。
    固定價格與時薪至少需擇一。
    """
    contract = await service.create_contract(contract_data, current_user)
    return success_response(contract, "合約草案已建立")

@router.get(
    "/my",
    response_model=ApiResponse[Page[ContractOut]],
    summary="獲取我的合約列表"
)
async def api_get_my_contracts(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.PAGINATION_DEFAULT_LIMIT, ge=1),
    service: ContractService = Depends(get_contract_service),
    current_user: User = Depends(get_current_user)
):
    """
    (公司 / 工作者) 所有與我相關的合約 (我發出的或我承接的)。
    """
    return success_response(await service.get_my_contracts(current_user, page, limit))

@router.get(
    "/{contract_id}",
    response_model=ApiResponse[ContractOut],
    summary="檢視合約詳情"
)
async def api_get_contract_details(
    contract_id: str,
    service: ContractService = Depends(get_contract_service),
    current_user: User = Depends(get_current_user)
):
    """
    Service 層會驗證 current_user 必須是合約雙方之一 (或管理員)。
    """
    return success_response(await service.get_contract_details(contract_id, current_user))

@router.put(
    "/{contract_id}",
    response_model=ApiResponse[ContractOut],
    summary="修改草案 (公司)"
)
async def api_update_draft_contract(
    contract_id: str,
    data: ContractUpdate,
    service: ContractService = Depends(get_contract_service),
    current_user: User = Depends(get_current_user)
):
    """
    (公司) 只有 DRAFT 狀態的合約可以修改條款、金額與期限。
    """
    return success_response(await service.update_draft_contract(contract_id, data, current_user))

@router.post(
    "/{contract_id}/sign",
    response_model=ApiResponse[ContractOut],
    summary="簽署合約 (雙方)"
)
async def api_sign_contract(
    contract_id: str,
    service: ContractService = Depends(get_contract_service),
    current_user: User = Depends(get_current_user)
):
    """
    第一方簽署 -> PENDING_SIGNATURES；雙方都簽署 -> ACTIVE
    """
    contract = await service.sign_contract(contract_id, current_user)
    return success_response(contract, "簽署完成")

@router.patch(
    "/{contract_id}/status",
    response_model=ApiResponse[ContractOut],
    summary="合約狀態流轉 (雙方)"
)
async def api_update_contract_status(
    contract_id: str,
    data: ContractStatusUpdate,
    service: ContractService = Depends(get_contract_service),
    current_user: User = Depends(get_current_user)
):
    """
    Service 層會使用狀態機驗證：
    - (公司) ACTIVE -> COMPLETED
    - (雙方) DRAFT / PENDING_SIGNATURES / ACTIVE -> TERMINATED
    """
    return success_response(await service.update_contract_status(contract_id, data, current_user))
