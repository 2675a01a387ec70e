# app/models/payment.py

import uuid
from sqlalchemy import Column, String, TEXT, DECIMAL, TIMESTAMP, ForeignKey, CHAR, func
from sqlalchemy.orm import relationship
from app.core.database import Base

class Payment(Base):
    __tablename__ = "payments"

    payment_id = Column(CHAR(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    milestone_id = Column(CHAR(36), ForeignKey("milestones.milestone_id", ondelete="RESTRICT"), nullable=False, index=True)
    contract_id = Column(CHAR(36), ForeignKey("contracts.contract_id", ondelete="RESTRICT"), nullable=False, index=True)
    payer_id = Column(CHAR(36), ForeignKey("users.user_id", ondelete="RESTRICT"), nullable=False, index=True)
    amount = Column(DECIMAL(10, 2), nullable=False)
    currency = Column(String(3), default="USD", nullable=False)
    method = Column(String(50))
    # 這裡只記錄已完成的付款，不串接金流
    status = Column(String(20), default="COMPLETED", nullable=False)
    notes = Column(TEXT)
    created_at = Column(TIMESTAMP, server_default=func.now())

    milestone = relationship("Milestone")
    payer = relationship("User")
