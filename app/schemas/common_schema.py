# app/schemas/common_schema.py
# 共用的回應外殼、分頁格式，以及各模組巢狀顯示用的精簡 Schema
from pydantic import BaseModel, ConfigDict, HttpUrl, PlainSerializer
from typing import Annotated, Generic, List, Optional, TypeVar

from app.models.contract import ContractStatusEnum
from app.models.user import UserRoleEnum

T = TypeVar("T")

# HttpUrl 驗證後以 str 寫入資料庫
UrlStr = Annotated[HttpUrl, PlainSerializer(lambda v: str(v), return_type=str)]


def reject_null(v):
    """部分更新時，必填欄位可以省略，但不能明確送 null"""
    if v is None:
        raise ValueError('此欄位不可為 null')
    return v


class ApiResponse(BaseModel, Generic[T]):
    """所有成功回應的外殼: {success: true, data: ..., message?}"""
    success: bool = True
    data: Optional[T] = None
    message: Optional[str] = None


class PaginationMeta(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class Page(BaseModel, Generic[T]):
    """列表端點統一的分頁格式"""
    items: List[T]
    pagination: PaginationMeta


# --- 巢狀顯示用 (只投影必要欄位) ---
class UserBrief(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    name: str
    role: UserRoleEnum


class MissionBrief(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    mission_id: str
    title: str


class ContractBrief(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    contract_id: str
    title: str
    status: ContractStatusEnum


class CompanyBrief(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    profile_id: str
    name: str
    industry: Optional[str] = None
    location: Optional[str] = None


class FreelancerBrief(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    profile_id: str
    user_id: str
    title: Optional[str] = None
    user: Optional[UserBrief] = None
