# backend/council_feedback/models/vote.py

from datetime import datetime
from enum import Enum
from typing import Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field

from council_feedback.models.common import safe_object_id, utcnow


class VoteValueEnum(str, Enum):
    AGREE = "agree"
    DISAGREE = "disagree"


class VoteTypeEnum(str, Enum):
    FEEDBACK_SUGGESTION = "feedback_suggestion"
    VOTING_SUGGESTION = "voting_suggestion"


class VoteInDB(BaseModel):
    """
    MongoDB의 'votes' 컬렉션 문서 (_id 제외). 생성 후 변경/삭제하지 않습니다.
    (suggestion_id, voter_fingerprint)는 unique 인덱스로 보호됩니다.
    """
    suggestion_id: str = Field(..., min_length=1)
    # 투표 시점의 VotingSuggestion.original_feedback_id 복사본 (추적용, 비권위적)
    feedback_id: Optional[ObjectId] = None
    voting_suggestion_id: Optional[ObjectId] = None
    vote_type: VoteTypeEnum = VoteTypeEnum.VOTING_SUGGESTION

    vote: VoteValueEnum
    voter_fingerprint: str = Field(..., min_length=1)
    ip_address: str = ""
    user_agent: str = ""

    voted_at: datetime = Field(default_factory=utcnow)

    model_config = ConfigDict(use_enum_values=True, arbitrary_types_allowed=True)


def backfill_voting_suggestion_id(vote: VoteInDB) -> VoteInDB:
    """
    legacy 정규화: suggestion_id가 유효한 ObjectId면 voting_suggestion_id를 채웁니다.
    검증 이후 write path에서 명시적으로 호출합니다.
    """
    if vote.vote_type != VoteTypeEnum.VOTING_SUGGESTION.value or vote.voting_suggestion_id is not None:
        return vote
    oid = safe_object_id(vote.suggestion_id)
    if oid is None:
        return vote
    return vote.model_copy(update={"voting_suggestion_id": oid})
