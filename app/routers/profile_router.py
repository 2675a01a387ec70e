# app/routers/profile_router.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.core.database import get_db
from app.core.security import get_current_user, require_roles
from app.models.user import User, UserRoleEnum
from app.services.profile_service import ProfileService
from app.schemas.common_schema import ApiResponse
from app.schemas.profile_schema import (
    CompanyProfileCreate, CompanyProfileOut, CompanyProfileUpdate,
    FreelancerProfileCreate, FreelancerProfileOut, FreelancerProfileUpdate, FreelancerProfileView,
    PortfolioItemCreate, PortfolioItemOut, PortfolioItemUpdate,
)
from app.utils.response import success_response

router = APIRouter(
    prefix="/profiles",
    tags=["Profiles"],
    dependencies=[Depends(get_current_user)]
)

freelancer_only = require_roles(UserRoleEnum.freelancer)
company_only = require_roles(UserRoleEnum.company)


def get_profile_service(db: AsyncSession = Depends(get_db)) -> ProfileService:
    return ProfileService(db)


# --- 工作者 ---
@router.get("/freelancer/me", response_model=ApiResponse[FreelancerProfileOut])
async def get_my_freelancer_profile(
    current_user: User = Depends(freelancer_only),
    service: ProfileService = Depends(get_profile_service)
):
    return success_response(await service.get_my_freelancer_profile(current_user))

@router.post("/freelancer/me", response_model=ApiResponse[FreelancerProfileOut], status_code=status.HTTP_201_CREATED)
async def create_my_freelancer_profile(
    data: FreelancerProfileCreate,
    current_user: User = Depends(freelancer_only),
    service: ProfileService = Depends(get_profile_service)
):
    return success_response(await service.create_freelancer_profile(current_user, data), "Profile 已建立")

@router.put("/freelancer/me", response_model=ApiResponse[FreelancerProfileOut])
async def update_my_freelancer_profile(
    data: FreelancerProfileUpdate,
    current_user: User = Depends(freelancer_only),
    service: ProfileService = Depends(get_profile_service)
):
    return success_response(await service.update_freelancer_profile(current_user, data))


# --- 作品集 ---
@router.get("/freelancer/me/portfolio", response_model=ApiResponse[List[PortfolioItemOut]])
async def list_my_portfolio(
    current_user: User = Depends(freelancer_only),
    service: ProfileService = Depends(get_profile_service)
):
    return success_response(await service.list_my_portfolio(current_user))

@router.post("/freelancer/me/portfolio", response_model=ApiResponse[PortfolioItemOut], status_code=status.HTTP_201_CREATED)
async def add_portfolio_item(
    data: PortfolioItemCreate,
    current_user: User = Depends(freelancer_only),
    service: ProfileService = Depends(get_profile_service)
):
    return success_response(await service.add_portfolio_item(current_user, data))

@router.put("/freelancer/me/portfolio/{item_id}", response_model=ApiResponse[PortfolioItemOut])
async def update_portfolio_item(
    item_id: str,
    data: PortfolioItemUpdate,
    current_user: User = Depends(freelancer_only),
    service: ProfileService = Depends(get_profile_service)
):
    return success_response(await service.update_portfolio_item(current_user, item_id, data))

@router.delete("/freelancer/me/portfolio/{item_id}", response_model=ApiResponse[None])
async def delete_portfolio_item(
    item_id: str,
    current_user: User = Depends(freelancer_only),
    service: ProfileService = Depends(get_profile_service)
):
    await service.delete_portfolio_item(current_user, item_id)
    return success_response(None, "作品已刪除")


# --- 公開的工作者頁面 (含評價與認證) ---
@router.get("/freelancers/{profile_id}", response_model=ApiResponse[FreelancerProfileView])
async def get_freelancer_profile(
    profile_id: str,
    service: ProfileService = Depends(get_profile_service)
):
    return success_response(await service.get_freelancer_view(profile_id))


# --- 公司 ---
@router.get("/company/me", response_model=ApiResponse[CompanyProfileOut])
async def get_my_company_profile(
    current_user: User = Depends(company_only),
    service: ProfileService = Depends(get_profile_service)
):
    return success_response(await service.get_my_company_profile(current_user))

@router.post("/company/me", response_model=ApiResponse[CompanyProfileOut], status_code=status.HTTP_201_CREATED)
async def create_my_company_profile(
    data: CompanyProfileCreate,
    current_user: User = Depends(company_only),
    service: ProfileService = Depends(get_profile_service)
):
    return success_response(await service.create_company_profile(current_user, data), "Profile 已建立")

@router.put("/company/me", response_model=ApiResponse[CompanyProfileOut])
async def update_my_company_profile(
    data: CompanyProfileUpdate,
    current_user: User = Depends(company_only),
    service: ProfileService = Depends(get_profile_service)
):
    return success_response(await service.update_company_profile(current_user, data))
