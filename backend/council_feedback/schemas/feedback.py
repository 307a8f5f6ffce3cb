# backend/council_feedback/schemas/feedback.py

from datetime import datetime
from typing import List, Optional

from council_feedback.models.common import PriorityEnum, PyObjectId
from council_feedback.models.feedback import FeedbackStatusEnum
from council_feedback.schemas.common import CamelModel


class SuggestionSubmit(CamelModel):
    # 클라이언트가 보낸 suggestionNumber는 무시하고 서버에서 위치 기준으로 재부여
    suggestion_number: Optional[int] = None
    issue_description: Optional[str] = None
    suggested_improvement: Optional[str] = None


class FeedbackSubmit(CamelModel):
    """
    [요청] POST /feedback
    필수값 검증은 crud 계층에서 수행 (VALIDATION_ERROR 코드 일관성 유지)
    """
    name: Optional[str] = None
    email: Optional[str] = None
    suggestions: Optional[List[SuggestionSubmit]] = None


class FeedbackSubmitResult(CamelModel):
    id: str
    submitted_at: datetime
    suggestion_count: int


class SuggestionRead(CamelModel):
    suggestion_number: int
    issue_description: str
    suggested_improvement: str


class FeedbackRead(CamelModel):
    """
    [응답] GET /feedback, GET /admin/feedback 등
    """
    id: PyObjectId
    name: str
    email: Optional[str] = None
    suggestions: List[SuggestionRead]
    status: FeedbackStatusEnum
    priority: PriorityEnum
    submitted_at: datetime
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class FeedbackSummary(CamelModel):
    """통계 화면의 최근 피드백 목록용 축약 형태"""
    id: PyObjectId
    name: str
    submitted_at: datetime
    status: FeedbackStatusEnum
    suggestions: List[SuggestionRead]


class FeedbackStatusUpdate(CamelModel):
    """
    [요청] PUT /admin/feedback/{id}/status
    """
    status: Optional[str] = None
