# app/models/application.py
import enum
import uuid
from sqlalchemy import Column, String, Text, DECIMAL, ForeignKey, TIMESTAMP, Enum, CHAR, UniqueConstraint, func
from sqlalchemy.orm import relationship
from app.core.database import Base

class ApplicationStatusEnum(str, enum.Enum):
    pending = "PENDING"
    shortlisted = "SHORTLISTED"
    rejected = "REJECTED"
    accepted = "ACCEPTED"
    interview_scheduled = "INTERVIEW_SCHEDULED"
    interview_completed = "INTERVIEW_COMPLETED"
    assessment_sent = "ASSESSMENT_SENT"
    assessment_completed = "ASSESSMENT_COMPLETED"

class Application(Base):
    __tablename__ = "applications"
    # 同一位工作者對同一個任務只能申請一次
    __table_args__ = (
        UniqueConstraint("mission_id", "freelancer_id", name="uq_application_mission_freelancer"),
    )

    application_id = Column(CHAR(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    mission_id = Column(CHAR(36), ForeignKey("missions.mission_id", ondelete="CASCADE"), nullable=False, index=True)
    freelancer_id = Column(CHAR(36), ForeignKey("freelancer_profiles.profile_id", ondelete="CASCADE"), nullable=False, index=True)

    cover_letter = Column(Text, nullable=False)
    proposed_rate = Column(DECIMAL(10, 2))
    availability_plan = Column(Text)
    notes = Column(Text)

    status = Column(
        Enum(ApplicationStatusEnum, values_callable=lambda obj: [e.value for e in obj], name="application_status_enum"),
        default=ApplicationStatusEnum.pending, nullable=False
    )

    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    # --- 建立關聯 (Relationships) ---
    mission = relationship("Mission", back_populates="applications")
    freelancer = relationship("FreelancerProfile")

    interviews = relationship(
        "Interview",
        back_populates="application",
        cascade="all, delete-orphan",
        order_by="Interview.scheduled_at.desc()",
    )

    assessments = relationship(
        "Assessment",
        back_populates="application",
        cascade="all, delete-orphan",
        order_by="Assessment.created_at.desc()",
    )
