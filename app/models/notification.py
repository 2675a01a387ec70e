# app/models/notification.py
# 站內通知。type 給前端分類與顯示圖示，data 放導向時需要的 id
import enum
import uuid
from sqlalchemy import Column, String, TEXT, BOOLEAN, CHAR, JSON, Enum, ForeignKey, TIMESTAMP, func
from sqlalchemy.orm import relationship
from app.core.database import Base


class NotificationTypeEnum(str, enum.Enum):
    application_received = "APPLICATION_RECEIVED"
    application_status = "APPLICATION_STATUS"
    interview_scheduled = "INTERVIEW_SCHEDULED"
    assessment_sent = "ASSESSMENT_SENT"
    assessment_completed = "ASSESSMENT_COMPLETED"
    assessment_scored = "ASSESSMENT_SCORED"
    contract_created = "CONTRACT_CREATED"
    contract_signed = "CONTRACT_SIGNED"
    contract_status = "CONTRACT_STATUS"
    milestone_status = "MILESTONE_STATUS"
    tracking_submitted = "TRACKING_SUBMITTED"
    tracking_approved = "TRACKING_APPROVED"
    payment_received = "PAYMENT_RECEIVED"
    feedback_received = "FEEDBACK_RECEIVED"
    dispute_updated = "DISPUTE_UPDATED"


class Notification(Base):
    __tablename__ = "notifications"

    notification_id = Column(CHAR(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # 接收通知的 user
    user_id = Column(CHAR(36), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True)

    type = Column(
        Enum(NotificationTypeEnum, values_callable=lambda obj: [e.value for e in obj], name="notification_type_enum"),
        nullable=False, index=True
    )
    title = Column(String(255), nullable=False)
    message = Column(TEXT)

    # 點擊通知後要導向的前端 URL
    link_url = Column(String(500))
    # e.g. {"contract_id": ..., "milestone_id": ...}
    data = Column(JSON, nullable=True)

    is_read = Column(BOOLEAN, default=False, nullable=False)
    created_at = Column(TIMESTAMP, server_default=func.now())

    user = relationship("User")
