# backend/council_feedback/crud/statistics.py

import logging
from typing import Any, Awaitable, Callable, Dict

from pymongo.errors import PyMongoError

from council_feedback.crud import feedback as feedback_crud
from council_feedback.crud import voting_suggestions as suggestion_crud
from council_feedback.crud import votes as vote_crud
from council_feedback.schemas.vote import VotingStats

logger = logging.getLogger(__name__)


async def _or_default(section: str, query: Callable[[], Awaitable[Any]], default: Any) -> Any:
    """
    정보성 집계이므로 store 오류 시 해당 섹션만 기본값으로 대체합니다.
    """
    try:
        return await query()
    except PyMongoError:
        logger.exception("Statistics section '%s' failed; using empty result", section)
        return default


async def get_admin_statistics() -> Dict[str, Any]:
    votes_col = vote_crud.get_votes_collection()

    return {
        "feedback": await _or_default("feedback", feedback_crud.count_feedback_by_status, {}),
        "suggestions": await _or_default("suggestions", suggestion_crud.count_suggestions_by_status, {}),
        "voting": await _or_default("voting", lambda: vote_crud.get_voting_stats(votes_col), VotingStats()),
        "recent": {
            "feedback": await _or_default("recent_feedback", feedback_crud.get_recent_feedback, []),
            "votes": await _or_default("recent_votes", lambda: vote_crud.get_recent_votes(votes_col), []),
        },
    }
