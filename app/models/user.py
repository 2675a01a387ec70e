# models/user.py
import enum
import uuid
from sqlalchemy import Column, String, Boolean, Enum, TIMESTAMP, CHAR, func
from sqlalchemy.orm import relationship
from app.core.database import Base

# 對應 SQL 中的 ENUM 型別
class UserRoleEnum(str, enum.Enum):
    admin = "ADMIN"
    freelancer = "FREELANCE"
    company = "COMPANY"

class User(Base):
    __tablename__ = "users"

    # 基本欄位
    user_id = Column(CHAR(36), primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(100), nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(Enum(UserRoleEnum, values_callable=lambda obj: [e.value for e in obj]), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    # 關聯設定 (依角色，只會有其中一個)
    freelancer_profile = relationship(
        "FreelancerProfile", # <-- 使用字串
        back_populates="user", 
        uselist=False, 
        cascade="all, delete-orphan"
    )
    
    company_profile = relationship(
        "CompanyProfile",
        back_populates="user", 
        uselist=False, 
        cascade="all, delete-orphan"
    )
