# backend/council_feedback/models/feedback.py

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from council_feedback.models.common import PriorityEnum, utcnow

MAX_SUGGESTIONS = 4


class FeedbackStatusEnum(str, Enum):
    PENDING = "pending"
    REVIEWED = "reviewed"
    APPROVED = "approved"
    REJECTED = "rejected"
    IMPLEMENTED = "implemented"


class SuggestionInDB(BaseModel):
    """Feedback 문서에 내장되는 개별 제안 (issue / improvement 한 쌍)"""
    suggestion_number: int = Field(..., ge=1, le=MAX_SUGGESTIONS)
    issue_description: str = Field(..., min_length=1, max_length=200)
    suggested_improvement: str = Field(..., min_length=1, max_length=200)


class FeedbackInDB(BaseModel):
    """
    MongoDB의 'feedback' 컬렉션에 저장되는 문서 형태입니다 (_id 제외).
    insert 전에 이 모델로 검증하므로 잘못된 입력은 DB에 닿지 않습니다.
    """
    name: str = Field(..., min_length=1, max_length=100)
    email: Optional[str] = Field(None, max_length=150)
    suggestions: List[SuggestionInDB] = Field(..., min_length=1, max_length=MAX_SUGGESTIONS)

    status: FeedbackStatusEnum = FeedbackStatusEnum.PENDING
    priority: PriorityEnum = PriorityEnum.MEDIUM

    submitted_at: datetime = Field(default_factory=utcnow)
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    model_config = ConfigDict(use_enum_values=True)
