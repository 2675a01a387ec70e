# app/models/freelancer_profile.py
import uuid
from sqlalchemy import Column, String, TEXT, ForeignKey, JSON, DECIMAL, CHAR, Boolean, Enum, TIMESTAMP, func
from sqlalchemy.orm import relationship
from app.core.database import Base

SeniorityEnum = Enum('junior', 'mid', 'senior', name="seniority_enum")

class FreelancerProfile(Base):
    __tablename__ = "freelancer_profiles"
    profile_id = Column(CHAR(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(CHAR(36), ForeignKey("users.user_id", ondelete="CASCADE"), unique=True, nullable=False, index=True)
    title = Column(String(255))
    bio = Column(TEXT)
    # [{"name": "React", "level": "expert"}, ...] (保持順序)
    skills = Column(JSON, default=list)
    seniority = Column(SeniorityEnum, default='mid')
    daily_rate = Column(DECIMAL(10, 2))
    # {"status": "available", "start_date": "2025-01-01"}
    availability = Column(JSON, default=dict)
    location = Column(String(255))
    remote = Column(Boolean, default=True)
    languages = Column(JSON, default=list)
    # 僅儲存路徑字串，上傳流程不在此服務處理
    cv_path = Column(String(500))
    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    # 1-to-1 反向關聯到 User
    user = relationship("User", back_populates="freelancer_profile")

    # 作品集 (1-to-Many)
    portfolio = relationship(
        "PortfolioItem",
        back_populates="profile",
        cascade="all, delete-orphan",
        order_by="PortfolioItem.created_at",
    )


class PortfolioItem(Base):
    __tablename__ = "portfolio_items"
    item_id = Column(CHAR(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    profile_id = Column(CHAR(36), ForeignKey("freelancer_profiles.profile_id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(TEXT, nullable=False)
    technologies = Column(JSON, default=list)
    # [{"type": "github", "url": "..."}]
    links = Column(JSON, default=list)
    created_at = Column(TIMESTAMP, server_default=func.now())

    profile = relationship("FreelancerProfile", back_populates="portfolio")
