# backend/council_feedback/models/voting_suggestion.py

from datetime import datetime
from enum import Enum
from typing import Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field

from council_feedback.models.common import PriorityEnum, utcnow


class VotingStatusEnum(str, Enum):
    # draft -> active -> closed. active 상태만 공개/투표 가능
    DRAFT = "draft"
    ACTIVE = "active"
    CLOSED = "closed"


class VotingSuggestionInDB(BaseModel):
    """
    MongoDB의 'voting_suggestions' 컬렉션 문서 (_id 제외).
    original_feedback_id는 Feedback에 대한 비소유 역참조입니다.
    """
    title: str = Field(..., min_length=1, max_length=200)
    issue_description: str = Field(..., min_length=1, max_length=500)
    suggested_improvement: str = Field(..., min_length=1, max_length=500)
    submitter_name: str = Field(..., min_length=1)
    submitter_email: Optional[str] = None
    original_feedback_id: Optional[ObjectId] = None

    status: VotingStatusEnum = VotingStatusEnum.DRAFT
    priority: PriorityEnum = PriorityEnum.MEDIUM
    created_by: str = "admin"

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    model_config = ConfigDict(
        use_enum_values=True,
        arbitrary_types_allowed=True,
        str_strip_whitespace=True,
    )
