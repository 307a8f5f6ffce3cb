# backend/council_feedback/schemas/vote.py

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel

from council_feedback.models.common import PriorityEnum, PyObjectId
from council_feedback.models.vote import VoteValueEnum
from council_feedback.schemas.common import CamelModel
from council_feedback.schemas.voting_suggestion import OriginalFeedbackSummary


class VoteRequest(CamelModel):
    """
    [요청] POST /voting/suggestions/{id}/vote
    값 검증은 INVALID_VOTE 코드를 내기 위해 crud에서 수행
    """
    vote: Any = None


class VoteCounts(BaseModel):
    agree: int = 0
    disagree: int = 0
    total: int = 0


class VotingStats(CamelModel):
    total_votes: int = 0
    agree_votes: int = 0
    disagree_votes: int = 0
    unique_voters: int = 0


class ActiveSuggestionRead(CamelModel):
    """
    [응답] GET /voting/suggestions 의 항목
    """
    suggestion_id: PyObjectId
    title: str
    issue_description: str
    suggested_improvement: str
    submitter: str
    submitter_email: Optional[str] = None
    priority: PriorityEnum
    created_at: datetime
    votes: VoteCounts
    original_feedback: Optional[OriginalFeedbackSummary] = None


class VoteCastResult(CamelModel):
    suggestion_id: str
    vote: VoteValueEnum
    vote_counts: VoteCounts


class SuggestionVotes(CamelModel):
    suggestion_id: str
    votes: VoteCounts


class VoteCheckResult(CamelModel):
    has_voted: bool
    vote: Optional[VoteValueEnum] = None


class RecentVote(CamelModel):
    id: PyObjectId
    vote: VoteValueEnum
    voted_at: datetime
    suggestion_id: str
