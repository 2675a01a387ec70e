# app/core/security.py
# 負責密碼雜湊與 JWT 權杖的產生與驗證
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable

from passlib.context import CryptContext
from jose import JWTError, jwt
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_db
from app.core.exceptions import AuthError, ForbiddenError
from app.schemas.user_schema import TokenData
from app.repositories.user_repo import UserRepository
from app.models.user import User, UserRoleEnum

logger = logging.getLogger(__name__)

# 1. 密碼雜湊設定 (Bcrypt)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# 2. (重要) 定義 Token 從哪裡來 (Authorization Header)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token")

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """驗證明文密碼是否與雜湊值相符"""
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    """產生密碼的雜湊值"""
    return pwd_context.hash(password)


def _encode(data: dict, token_type: str, expires_delta: timedelta) -> str:
    to_encode = data.copy() # 避免修改原始資料
    expire = datetime.now(timezone.utc) + expires_delta
    to_encode.update({"exp": expire, "type": token_type})
    return jwt.encode(
        to_encode,
        settings.JWT_SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM
    )

# 2. JWT 權杖產生與驗證
def create_access_token(data: dict) -> str:
    """
    根據傳入的 data (e.g., user_id) 產生 JWT access token
    """
    return _encode(
        data, ACCESS_TOKEN_TYPE,
        timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )

def create_refresh_token(data: dict) -> str:
    """產生 refresh token (效期較長，只能用於 /auth/refresh)"""
    return _encode(
        data, REFRESH_TOKEN_TYPE,
        timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
    )


def verify_token(token: str, expected_type: str = ACCESS_TOKEN_TYPE) -> TokenData | None:
    """
    驗證 JWT，回傳 TokenData (Pydantic Model) 或 None
    - access token 不能拿來 refresh，refresh token 也不能拿來呼叫 API
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM]
        )
    except JWTError:
        return None

    user_id = payload.get("user_id")
    role = payload.get("role")
    if user_id is None or role is None:
        return None
    if payload.get("type") != expected_type:
        return None

    return TokenData(user_id=user_id, role=role)

def verify_access_token(token: str) -> TokenData | None:
    return verify_token(token, ACCESS_TOKEN_TYPE)


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db)
) -> User:
    """
    FastAPI 依賴項：驗證 Token 並回傳 User Model (用於 REST API)
    """
    token_data = verify_access_token(token)
    if token_data is None:
        raise AuthError("無法驗證憑證", code="INVALID_TOKEN")

    user_repo = UserRepository(db)
    user = await user_repo.get_user_by_id(user_id=token_data.user_id)

    if user is None:
        raise AuthError("無法驗證憑證", code="INVALID_TOKEN")

    if not user.is_active:
        raise ForbiddenError("此帳號已被停權", code="ACCOUNT_DISABLED")

    return user


def require_roles(*roles: UserRoleEnum) -> Callable:
    """
    依賴項工廠：限制只有特定角色可以呼叫
    用法: current_user: User = Depends(require_roles(UserRoleEnum.company))
    """
    async def _checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in roles:
            allowed = ", ".join(r.value for r in roles)
            raise ForbiddenError(f"此操作僅限角色: {allowed}")
        return current_user
    return _checker
