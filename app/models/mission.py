# models/mission.py
import enum
import uuid
from sqlalchemy import Column, String, TEXT, DECIMAL, TIMESTAMP, ForeignKey, Enum, CHAR, JSON, func
from sqlalchemy.orm import relationship
from app.core.database import Base

class MissionStatusEnum(str, enum.Enum):
    draft = "DRAFT"
    published = "PUBLISHED"
    completed = "COMPLETED"
    cancelled = "CANCELLED"

class Mission(Base):
    __tablename__ = "missions"

    mission_id = Column(CHAR(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    company_id = Column(CHAR(36), ForeignKey("company_profiles.profile_id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(TEXT, nullable=False)
    # 技能直接以字串列表儲存 (e.g. ["react", "typescript"])
    required_skills = Column(JSON, default=list, nullable=False)
    optional_skills = Column(JSON, default=list)
    budget_min = Column(DECIMAL(10, 2))
    budget_max = Column(DECIMAL(10, 2))
    duration = Column(String(100))
    modality = Column(Enum('remote', 'on-site', 'hybrid', name="modality_enum"), default='remote')
    sector = Column(String(100))
    urgency = Column(Enum('low', 'medium', 'high', name="urgency_enum"), default='medium')
    experience = Column(Enum('junior', 'mid', 'senior', name="experience_enum"), default='mid')
    start_date = Column(TIMESTAMP, nullable=True)
    end_date = Column(TIMESTAMP, nullable=True)
    status = Column(
        Enum(MissionStatusEnum, values_callable=lambda obj: [e.value for e in obj], name="mission_status_enum"),
        default=MissionStatusEnum.draft, nullable=False, index=True
    )
    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    # 建立與 CompanyProfile 的 '一' 關聯
    company = relationship("CompanyProfile", back_populates="missions")

    applications = relationship(
        "Application",
        back_populates="mission",
        cascade="all, delete-orphan" # 刪除任務時，一併刪除關聯申請
    )
