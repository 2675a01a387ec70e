# app/models/company_profile.py
import uuid
from sqlalchemy import Column, String, TEXT, ForeignKey, JSON, CHAR, TIMESTAMP, func
from sqlalchemy.orm import relationship
from app.core.database import Base

class CompanyProfile(Base):
    __tablename__ = "company_profiles"
    profile_id = Column(CHAR(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(CHAR(36), ForeignKey("users.user_id", ondelete="CASCADE"), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    industry = Column(String(255))
    size = Column(String(50))
    description = Column(TEXT)
    website = Column(String(500))
    location = Column(String(255))
    values = Column(JSON, default=list)
    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    # 1-to-1 反向關聯到 User
    user = relationship("User", back_populates="company_profile")

    missions = relationship("Mission", back_populates="company")
