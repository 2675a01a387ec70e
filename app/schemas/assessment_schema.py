# app/schemas/assessment_schema.py
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Literal, Optional
from datetime import datetime

from app.models.assessment import AssessmentTypeEnum
from app.schemas.application_schema import ApplicationBrief
from app.schemas.common_schema import UserBrief

QuestionType = Literal['text', 'multiple_choice', 'code', 'file_upload']


class AssessmentQuestion(BaseModel):
    id: Optional[str] = None # 省略時由 Service 產生
    question: str = Field(..., min_length=5)
    type: QuestionType
    options: Optional[List[str]] = None # 選擇題用
    correct_answer: Optional[str] = None
    points: int = Field(10, ge=1)


class AssessmentAnswer(BaseModel):
    question_id: str = Field(..., min_length=1)
    answer: str
    file_url: Optional[str] = None


# --- 公司出題 ---
class AssessmentCreate(BaseModel):
    application_id: str = Field(..., min_length=1)
    type: AssessmentTypeEnum
    title: str = Field(..., min_length=5, max_length=255)
    description: Optional[str] = None
    questions: List[AssessmentQuestion] = Field(..., min_length=1)
    max_score: int = Field(..., ge=1)
    time_limit: Optional[int] = Field(None, ge=5) # 分鐘


# --- 工作者作答 ---
class AssessmentSubmit(BaseModel):
    answers: List[AssessmentAnswer] = Field(..., min_length=1)


# --- 公司評分 ---
class AssessmentScore(BaseModel):
    score: float = Field(..., ge=0)
    review_notes: Optional[str] = None


class AssessmentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    assessment_id: str
    application_id: str
    reviewer_id: str
    type: AssessmentTypeEnum
    title: str
    description: Optional[str] = None
    questions: List[AssessmentQuestion]
    answers: Optional[List[AssessmentAnswer]] = None
    max_score: int
    time_limit: Optional[int] = None
    score: Optional[float] = None
    review_notes: Optional[str] = None
    submitted_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    application: Optional[ApplicationBrief] = None
    reviewer: Optional[UserBrief] = None
