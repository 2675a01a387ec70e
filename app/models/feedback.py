# app/models/feedback.py

import uuid
from sqlalchemy import Column, TEXT, INT, Boolean, JSON, TIMESTAMP, ForeignKey, CHAR, func
from sqlalchemy.orm import relationship
from app.core.database import Base

class Feedback(Base):
    __tablename__ = "feedback"

    feedback_id = Column(CHAR(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    from_user_id = Column(CHAR(36), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True)
    to_user_id = Column(CHAR(36), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True)
    # 至少需要其中一個 (由 Schema 驗證)
    mission_id = Column(CHAR(36), ForeignKey("missions.mission_id", ondelete="SET NULL"), nullable=True, index=True)
    contract_id = Column(CHAR(36), ForeignKey("contracts.contract_id", ondelete="SET NULL"), nullable=True, index=True)

    rating = Column(INT, nullable=False)
    comment = Column(TEXT)
    # {"react": 5, "communication": 4}
    skills = Column(JSON, nullable=True)
    # 只有公開評價會列入平均分數
    is_public = Column(Boolean, default=True, nullable=False)

    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    from_user = relationship("User", foreign_keys=[from_user_id])
    to_user = relationship("User", foreign_keys=[to_user_id])
    mission = relationship("Mission")
    contract = relationship("Contract")
