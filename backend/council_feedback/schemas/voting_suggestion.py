# backend/council_feedback/schemas/voting_suggestion.py

from datetime import datetime
from typing import Optional

from pydantic import ConfigDict, Field

from council_feedback.models.common import PriorityEnum, PyObjectId
from council_feedback.models.voting_suggestion import VotingStatusEnum
from council_feedback.schemas.common import CamelModel
from council_feedback.schemas.feedback import SuggestionRead


# --- API 요청(Request) 스키마 ---

class PromoteRequest(CamelModel):
    """
    [요청] POST /admin/feedback/{id}/promote
    Feedback의 제안 하나를 편집된 문구로 VotingSuggestion에 복사합니다.
    """
    suggestion_number: Optional[int] = None
    title: Optional[str] = None
    edited_issue_description: Optional[str] = None
    edited_suggested_improvement: Optional[str] = None
    priority: PriorityEnum = PriorityEnum.MEDIUM


class VotingSuggestionCreate(CamelModel):
    """
    [요청] POST /admin/suggestions
    원본 Feedback 없이 관리자가 직접 작성하는 경우
    """
    title: Optional[str] = None
    issue_description: Optional[str] = None
    suggested_improvement: Optional[str] = None
    submitter_name: Optional[str] = None
    submitter_email: Optional[str] = None
    original_feedback_id: Optional[str] = None
    priority: PriorityEnum = PriorityEnum.MEDIUM


class VotingSuggestionUpdate(CamelModel):
    """
    [요청] PUT /admin/suggestions/{id}
    모든 필드는 선택 사항. status는 activate/close로만 변경하고,
    originalFeedbackId/createdBy는 출처 보존을 위해 받지 않습니다.
    """
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    issue_description: Optional[str] = Field(None, min_length=1, max_length=500)
    suggested_improvement: Optional[str] = Field(None, min_length=1, max_length=500)
    submitter_name: Optional[str] = Field(None, min_length=1)
    submitter_email: Optional[str] = None
    priority: Optional[PriorityEnum] = None

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)


# --- API 응답(Response) 스키마 ---

class OriginalFeedbackSummary(CamelModel):
    id: PyObjectId
    name: str
    email: Optional[str] = None
    submitted_at: Optional[datetime] = None


class VotingSuggestionRead(CamelModel):
    id: PyObjectId
    title: str
    issue_description: str
    suggested_improvement: str
    submitter_name: str
    submitter_email: Optional[str] = None
    original_feedback_id: Optional[PyObjectId] = None
    original_feedback: Optional[OriginalFeedbackSummary] = None
    status: VotingStatusEnum
    priority: PriorityEnum
    created_by: str
    created_at: datetime
    updated_at: Optional[datetime] = None


class PromotionSource(CamelModel):
    id: PyObjectId
    submitter: str
    original_suggestion: SuggestionRead


class PromoteResult(CamelModel):
    voting_suggestion: VotingSuggestionRead
    original_feedback: PromotionSource


class DeletedSuggestion(CamelModel):
    id: str
    title: str
