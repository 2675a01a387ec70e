# app/schemas/user_schema.py
from pydantic import BaseModel, EmailStr, Field, field_validator, ConfigDict
import re
from datetime import datetime
from app.models.user import UserRoleEnum
from typing import Optional

# 登入請求的格式
class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

# Token 回應的格式
class Token(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "bearer"

# Token 內的資料
class TokenData(BaseModel):
    user_id: str
    role: str

# /auth/refresh 的 Request Body
class RefreshRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1)


# 註冊請求 Body
class UserCreate(BaseModel):
    email: EmailStr
    name: str = Field(..., min_length=2, max_length=100)
    # 密碼要求英數混合
    password: str = Field(..., min_length=8)
    role: UserRoleEnum

    @field_validator('password')
    @classmethod
    def validate_password(cls, v: str) -> str:
        """
        驗證密碼是否至少8碼且包含英文和數字
        """
        if not re.search(r'(?=.*[a-zA-Z])(?=.*[0-9])', v):
            raise ValueError('密碼必須包含英文和數字')
        return v

    @field_validator('role')
    @classmethod
    def validate_role(cls, v: UserRoleEnum) -> UserRoleEnum:
        # 管理員帳號不開放自行註冊
        if v == UserRoleEnum.admin:
            raise ValueError('不可註冊為管理員')
        return v

# 註冊/查詢使用者的安全回應
class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: str # 我們在 MySQL 中使用 CHAR(36)，但在 Pydantic 中視為 str
    email: EmailStr
    name: str
    role: UserRoleEnum
    is_active: bool
    created_at: Optional[datetime] = None

# 登入/註冊/refresh 成功後回傳
class AuthResult(Token):
    user: UserOut

# (管理員) 停權 / 復權
class UserStatusUpdate(BaseModel):
    is_active: bool
