# app/services/auth_service.py
import logging

from sqlalchemy.ext.asyncio import AsyncSession
from app.repositories.user_repo import UserRepository
from app.core.exceptions import AuthError, ConflictError
from app.core.security import (
    verify_password, create_access_token, create_refresh_token,
    get_password_hash, verify_token, REFRESH_TOKEN_TYPE,
)
from app.models.user import User
from app.schemas.user_schema import UserCreate

logger = logging.getLogger(__name__)

class AuthService:
    def __init__(self, db: AsyncSession):
        self.user_repo = UserRepository(db)

    async def authenticate_user(self, email: str, password: str) -> User | None:
        """
        驗證使用者帳號密碼。
        成功回傳 User 物件，失敗回傳 None。
        """
        user = await self.user_repo.get_user_by_email(email)
        
        # 1. 檢查使用者是否存在
        if not user:
            return None
        
        # 2. 檢查是否被停權
        if not user.is_active:
            return None
            
        # 3. 檢查密碼是否正確
        if not verify_password(plain_password=password, hashed_password=user.password_hash):
            return None
            
        return user

    async def register_user(self, user_create: UserCreate) -> User:
        """
        處理使用者註冊
        """
        # 1. 檢查 Email 是否已被註冊
        existing_user = await self.user_repo.get_user_by_email(user_create.email)
        if existing_user:
            raise ConflictError("此 Email 已經被註冊", code="EMAIL_EXISTS")
            
        # 2. 雜湊密碼
        hashed_password = get_password_hash(user_create.password)
        
        # 3. 建立 User ORM 模型
        new_user = User(
            email=user_create.email,
            name=user_create.name,
            password_hash=hashed_password,
            role=user_create.role
        )
        
        # 4. 呼叫 Repository 儲存到資料庫
        created_user = await self.user_repo.create_user(new_user)
        logger.info(f"新使用者註冊: {created_user.user_id} ({created_user.role.value})")
        return created_user

    async def login(self, email: str, password: str) -> dict:
        """登入成功回傳 {user, access_token, refresh_token, token_type}"""
        user = await self.authenticate_user(email, password)
        if not user:
            raise AuthError("不正確的帳號或密碼", code="INVALID_CREDENTIALS")
        logger.info(f"User logged in: {user.user_id}")
        return self.issue_tokens(user)

    async def refresh(self, refresh_token: str) -> dict:
        """用 refresh token 換一組新的 token (refresh token 一併輪替)"""
        token_data = verify_token(refresh_token, REFRESH_TOKEN_TYPE)
        if token_data is None:
            raise AuthError("Refresh token 無效或已過期", code="INVALID_REFRESH_TOKEN")

        user = await self.user_repo.get_user_by_id(token_data.user_id)
        if not user or not user.is_active:
            raise AuthError("Refresh token 無效或已過期", code="INVALID_REFRESH_TOKEN")

        logger.info(f"Token refreshed: {user.user_id}")
        return self.issue_tokens(user)

    def _token_claims(self, user: User) -> dict:
        return {
            "sub": user.email, # 'sub' 是 JWT 的標準欄位
            "user_id": str(user.user_id),
            "role": user.role.value # 確保存入的是字串
        }

    def issue_tokens(self, user: User) -> dict:
        claims = self._token_claims(user)
        return {
            "user": user,
            "access_token": create_access_token(data=claims),
            "refresh_token": create_refresh_token(data=claims),
            "token_type": "bearer",
        }
