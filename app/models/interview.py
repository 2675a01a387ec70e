# app/models/interview.py
import uuid
from sqlalchemy import Column, String, Text, INT, Boolean, ForeignKey, TIMESTAMP, CHAR, func
from sqlalchemy.orm import relationship
from app.core.database import Base

class Interview(Base):
    __tablename__ = "interviews"

    interview_id = Column(CHAR(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    application_id = Column(CHAR(36), ForeignKey("applications.application_id", ondelete="CASCADE"), nullable=False, index=True)
    scheduled_at = Column(TIMESTAMP, nullable=False)
    duration = Column(INT, nullable=False, default=60) # 分鐘
    meeting_link = Column(String(500))
    notes = Column(Text)
    # completed 之後即為終態，不可再修改
    completed = Column(Boolean, default=False, nullable=False)
    rating = Column(INT, nullable=True)

    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    application = relationship("Application", back_populates="interviews")
