# app/models/tracking_entry.py

import uuid
from sqlalchemy import Column, TEXT, DECIMAL, Boolean, TIMESTAMP, Date, ForeignKey, CHAR, func
from sqlalchemy.orm import relationship
from app.core.database import Base

class TrackingEntry(Base):
    __tablename__ = "tracking_entries"

    entry_id = Column(CHAR(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    contract_id = Column(CHAR(36), ForeignKey("contracts.contract_id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    hours = Column(DECIMAL(6, 2), default=0)
    description = Column(TEXT, nullable=False)
    deliverable = Column(TEXT)
    # approved 之後不可再修改
    approved = Column(Boolean, default=False, nullable=False)
    approved_at = Column(TIMESTAMP, nullable=True)
    notes = Column(TEXT)
    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    contract = relationship("Contract")
