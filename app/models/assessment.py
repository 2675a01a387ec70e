# app/models/assessment.py
import enum
import uuid
from sqlalchemy import Column, String, TEXT, INT, DECIMAL, JSON, Enum, ForeignKey, TIMESTAMP, CHAR, func
from sqlalchemy.orm import relationship
from app.core.database import Base

class AssessmentTypeEnum(str, enum.Enum):
    qcm = "QCM"
    challenge = "CHALLENGE"
    technical_test = "TECHNICAL_TEST"
    portfolio_review = "PORTFOLIO_REVIEW"

class Assessment(Base):
    __tablename__ = "assessments"

    assessment_id = Column(CHAR(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    application_id = Column(CHAR(36), ForeignKey("applications.application_id", ondelete="CASCADE"), nullable=False, index=True)
    # 出題的公司使用者，評分也只能由他 (或管理員) 進行
    reviewer_id = Column(CHAR(36), ForeignKey("users.user_id", ondelete="RESTRICT"), nullable=False, index=True)

    type = Column(
        Enum(AssessmentTypeEnum, values_callable=lambda obj: [e.value for e in obj], name="assessment_type_enum"),
        nullable=False
    )
    title = Column(String(255), nullable=False)
    description = Column(TEXT)

    # [{id, question, type, options, correct_answer, points}]
    questions = Column(JSON, nullable=False)
    # [{question_id, answer, file_url}]，提交前為 NULL
    answers = Column(JSON, nullable=True)

    max_score = Column(INT, nullable=False)
    time_limit = Column(INT, nullable=True) # 分鐘
    score = Column(DECIMAL(8, 2), nullable=True)
    review_notes = Column(TEXT)
    submitted_at = Column(TIMESTAMP, nullable=True)

    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    application = relationship("Application", back_populates="assessments")
    reviewer = relationship("User")
