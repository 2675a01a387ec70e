# app/models/dispute.py

import enum
import uuid
from sqlalchemy import Column, String, TEXT, TIMESTAMP, ForeignKey, Enum, CHAR, func
from sqlalchemy.orm import relationship
from app.core.database import Base

class DisputeStatusEnum(str, enum.Enum):
    open = "OPEN"
    in_review = "IN_REVIEW"
    resolved = "RESOLVED"
    closed = "CLOSED"

class Dispute(Base):
    __tablename__ = "disputes"

    dispute_id = Column(CHAR(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    contract_id = Column(CHAR(36), ForeignKey("contracts.contract_id", ondelete="RESTRICT"), nullable=False, index=True)
    opened_by = Column(CHAR(36), ForeignKey("users.user_id", ondelete="RESTRICT"), nullable=False, index=True)
    reason = Column(String(100), nullable=False)
    description = Column(TEXT, nullable=False)
    status = Column(
        Enum(DisputeStatusEnum, values_callable=lambda obj: [e.value for e in obj], name="dispute_status_enum"),
        default=DisputeStatusEnum.open, nullable=False, index=True
    )
    # RESOLVED / CLOSED 時必填
    resolution = Column(TEXT)
    resolved_at = Column(TIMESTAMP, nullable=True)
    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    contract = relationship("Contract")
    opener = relationship("User")
