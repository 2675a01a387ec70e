# app/models/contract.py

import enum
import uuid
from sqlalchemy import (
    Column, String, TEXT, DECIMAL, TIMESTAMP, Boolean, ForeignKey, Enum, CHAR, JSON, func
)
from sqlalchemy.orm import relationship
from app.core.database import Base

class ContractStatusEnum(str, enum.Enum):
    draft = "DRAFT"
    pending_signatures = "PENDING_SIGNATURES"
    active = "ACTIVE"
    completed = "COMPLETED"
    terminated = "TERMINATED"

class MilestoneStatusEnum(str, enum.Enum):
    pending = "PENDING"
    submitted = "SUBMITTED"
    approved = "APPROVED"
    paid = "PAID"

class Contract(Base):
    __tablename__ = "contracts"

    contract_id = Column(CHAR(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    
    # --- 關聯 ---
    mission_id = Column(CHAR(36), ForeignKey("missions.mission_id", ondelete="RESTRICT"), nullable=False, index=True)
    freelancer_id = Column(CHAR(36), ForeignKey("freelancer_profiles.profile_id", ondelete="RESTRICT"), nullable=False, index=True)
    company_id = Column(CHAR(36), ForeignKey("company_profiles.profile_id", ondelete="RESTRICT"), nullable=False, index=True)
    
    # --- 合約內容 ---
    title = Column(String(255), nullable=False)
    terms = Column(JSON, default=dict)
    hourly_rate = Column(DECIMAL(10, 2), nullable=True)
    fixed_price = Column(DECIMAL(10, 2), nullable=True)
    start_date = Column(TIMESTAMP, nullable=False, server_default=func.now())
    end_date = Column(TIMESTAMP, nullable=True)
    
    # --- 狀態管理 ---
    status = Column(
        Enum(ContractStatusEnum, values_callable=lambda obj: [e.value for e in obj], name="contract_status_enum"),
        default=ContractStatusEnum.draft, nullable=False
    )
    # 雙方都簽署後才會進入 ACTIVE
    freelancer_signed = Column(Boolean, default=False, nullable=False)
    company_signed = Column(Boolean, default=False, nullable=False)
    signed_at = Column(TIMESTAMP, nullable=True)
    
    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    # --- SQLAlchemy Relationships ---
    mission = relationship("Mission")
    freelancer = relationship("FreelancerProfile")
    company = relationship("CompanyProfile")

    milestones = relationship(
        "Milestone",
        back_populates="contract",
        cascade="all, delete-orphan",
        order_by="Milestone.due_date",
    )


class Milestone(Base):
    __tablename__ = "milestones"

    milestone_id = Column(CHAR(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    contract_id = Column(CHAR(36), ForeignKey("contracts.contract_id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    description = Column(TEXT)
    amount = Column(DECIMAL(10, 2), nullable=False)
    due_date = Column(TIMESTAMP, nullable=True)
    deliverable = Column(TEXT)
    status = Column(
        Enum(MilestoneStatusEnum, values_callable=lambda obj: [e.value for e in obj], name="milestone_status_enum"),
        default=MilestoneStatusEnum.pending, nullable=False
    )
    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    contract = relationship("Contract", back_populates="milestones")
