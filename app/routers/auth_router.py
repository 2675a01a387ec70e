# app/routers/auth_router.py
import logging
from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.database import get_db
from app.core.security import get_current_user
from app.models.user import User
from app.services.auth_service import AuthService
from app.schemas.common_schema import ApiResponse
from app.schemas.user_schema import AuthResult, RefreshRequest, Token, UserCreate, UserLogin, UserOut
from app.utils.response import success_response


logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth", # 路由前綴
    tags=["Auth"]    # API 文件分類標籤
)


@router.post("/register", response_model=ApiResponse[AuthResult], status_code=status.HTTP_201_CREATED)
async def register_new_user(
    user_data: UserCreate, # Request Body 會被 Pydantic 驗證
    db: AsyncSession = Depends(get_db)
):
    """
    註冊新使用者 (FREELANCE / COMPANY)，成功後直接登入
    
    - 密碼需至少8碼，且包含英文和數字。
    """
    auth_service = AuthService(db)
    new_user = await auth_service.register_user(user_data)
    return success_response(auth_service.issue_tokens(new_user), "註冊成功")


@router.post("/login", response_model=ApiResponse[AuthResult])
async def login(
    credentials: UserLogin,
    db: AsyncSession = Depends(get_db)
):
    """以 JSON (email / password) 登入，回傳 access + refresh token"""
    auth_service = AuthService(db)
    result = await auth_service.login(credentials.email, credentials.password)
    return success_response(result, "登入成功")


@router.post("/refresh", response_model=ApiResponse[AuthResult])
async def refresh_token(
    body: RefreshRequest,
    db: AsyncSession = Depends(get_db)
):
    """用 refresh token 換一組新的 token"""
    auth_service = AuthService(db)
    return success_response(await auth_service.refresh(body.refresh_token))


@router.post("/token", response_model=Token)
async def login_for_access_token(
    # (重要) 使用 OAuth2PasswordRequestForm 會強制 API 只接受 form-data
    # 格式為 username=...&password=... (給 Swagger UI 的 Authorize 按鈕使用)
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_db)
):
    """
    提供帳號 (username 欄位傳 email) 和密碼以取得 Access Token
    """
    auth_service = AuthService(db)
    # form_data.username 欄位就是我們的 email
    result = await auth_service.login(form_data.username, form_data.password)
    return Token(
        access_token=result["access_token"],
        refresh_token=result["refresh_token"],
        token_type="bearer",
    )


@router.get("/me", response_model=ApiResponse[UserOut])
async def read_auth_me(current_user: User = Depends(get_current_user)):
    """目前登入者"""
    return success_response(current_user)
