# backend/council_feedback/crud/votes.py

import logging
from typing import Any, List, Optional

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.errors import DuplicateKeyError

from council_feedback.core.errors import AlreadyVoted, NotFound, ResponseCode, ValidationFailed
from council_feedback.crud import feedback as feedback_crud
from council_feedback.crud import voting_suggestions as suggestion_crud
from council_feedback.db.mongo import VOTES_COLLECTION, get_db
from council_feedback.models.vote import VoteInDB, VoteValueEnum, backfill_voting_suggestion_id
from council_feedback.schemas.vote import (
    ActiveSuggestionRead,
    RecentVote,
    SuggestionVotes,
    VoteCastResult,
    VoteCheckResult,
    VoteCounts,
    VotingStats,
)
from council_feedback.utils.fingerprint import generate_fingerprint

logger = logging.getLogger(__name__)

VOTE_VALUES = {v.value for v in VoteValueEnum}


def get_votes_collection() -> AsyncIOMotorCollection:
    return get_db()[VOTES_COLLECTION]


# -------------------------
# 집계 쿼리 (store handle을 받는 순수 함수)
# -------------------------
async def get_vote_counts(col: AsyncIOMotorCollection, suggestion_id: str) -> VoteCounts:
    cursor = col.aggregate([
        {"$match": {"suggestion_id": suggestion_id}},
        {"$group": {"_id": "$vote", "count": {"$sum": 1}}},
    ])
    rows = await cursor.to_list(length=None)

    counts = {v: 0 for v in VOTE_VALUES}
    for row in rows:
        if row["_id"] in counts:
            counts[row["_id"]] = row["count"]
    return VoteCounts(
        agree=counts[VoteValueEnum.AGREE.value],
        disagree=counts[VoteValueEnum.DISAGREE.value],
        total=sum(counts.values()),
    )


async def get_voting_stats(col: AsyncIOMotorCollection) -> VotingStats:
    voters = await col.distinct("voter_fingerprint")
    return VotingStats(
        total_votes=await col.count_documents({}),
        agree_votes=await col.count_documents({"vote": VoteValueEnum.AGREE.value}),
        disagree_votes=await col.count_documents({"vote": VoteValueEnum.DISAGREE.value}),
        unique_voters=len(voters),
    )


async def get_user_vote(col: AsyncIOMotorCollection, suggestion_id: str, voter_fingerprint: str) -> Optional[dict]:
    return await col.find_one({"suggestion_id": suggestion_id, "voter_fingerprint": voter_fingerprint})


async def get_recent_votes(col: AsyncIOMotorCollection, limit: int = 10) -> List[RecentVote]:
    cursor = col.find(
        {},
        {"vote": 1, "voted_at": 1, "suggestion_id": 1},
        sort=[("voted_at", -1), ("_id", -1)],
        limit=limit,
    )
    docs = await cursor.to_list(length=limit)
    return [
        RecentVote(id=d["_id"], vote=d["vote"], voted_at=d["voted_at"], suggestion_id=d["suggestion_id"])
        for d in docs
    ]


# -------------------------
# Voting service
# -------------------------
async def _require_active(suggestion_id: str) -> dict:
    suggestion = await suggestion_crud.get_active_suggestion_doc(suggestion_id)
    if not suggestion:
        # draft/closed 이거나 존재하지 않음
        raise NotFound("Active suggestion not found", code=ResponseCode.SUGGESTION_NOT_FOUND)
    return suggestion


async def get_active_suggestions_with_votes() -> List[ActiveSuggestionRead]:
    docs = await suggestion_crud.get_active_suggestion_docs()
    originals = await feedback_crud.get_feedback_summaries(d.get("original_feedback_id") for d in docs)
    col = get_votes_collection()

    result = []
    for doc in docs:
        suggestion_id = str(doc["_id"])
        result.append(ActiveSuggestionRead(
            suggestion_id=suggestion_id,
            title=doc["title"],
            issue_description=doc["issue_description"],
            suggested_improvement=doc["suggested_improvement"],
            submitter=doc["submitter_name"],
            submitter_email=doc.get("submitter_email"),
            priority=doc.get("priority", "medium"),
            created_at=doc["created_at"],
            votes=await get_vote_counts(col, suggestion_id),
            original_feedback=suggestion_crud.serialize_original_feedback(
                originals.get(doc.get("original_feedback_id"))
            ),
        ))
    return result


# CREATE
async def cast_vote(suggestion_id: str, vote: Any, ip_address: str, user_agent: str) -> VoteCastResult:
    """
    1) vote 값 검증 -> 2) active 제안 확인 -> 3) fingerprint 계산
    -> 4) 기존 투표 확인 -> 5) 저장 -> 6) 갱신된 집계 반환

    경로 값 대신 저장된 문서의 _id 문자열을 키로 사용합니다 (대소문자/공백 차이 무시).
    4)와 5) 사이의 경쟁 상태는 unique 인덱스가 막고,
    DuplicateKeyError도 ALREADY_VOTED로 변환합니다.
    """
    if not isinstance(vote, str) or vote not in VOTE_VALUES:
        raise ValidationFailed('Invalid vote. Must be "agree" or "disagree"', code=ResponseCode.INVALID_VOTE)

    suggestion = await _require_active(suggestion_id)
    suggestion_id = str(suggestion["_id"])
    voter_fingerprint = generate_fingerprint(ip_address, user_agent)
    col = get_votes_collection()

    existing = await get_user_vote(col, suggestion_id, voter_fingerprint)
    if existing:
        raise AlreadyVoted(existing["vote"])

    new_vote = backfill_voting_suggestion_id(VoteInDB(
        suggestion_id=suggestion_id,
        feedback_id=suggestion.get("original_feedback_id"),
        vote=vote,
        voter_fingerprint=voter_fingerprint,
        ip_address=ip_address or "",
        user_agent=user_agent or "",
    ))

    try:
        await col.insert_one(new_vote.model_dump())
    except DuplicateKeyError:
        # 동시 요청이 먼저 저장됨
        winner = await get_user_vote(col, suggestion_id, voter_fingerprint)
        logger.info("Concurrent duplicate vote rejected on suggestion %s", suggestion_id)
        raise AlreadyVoted(winner["vote"] if winner else None)

    logger.info("Vote recorded: %s on suggestion %s", vote, suggestion_id)

    return VoteCastResult(
        suggestion_id=suggestion_id,
        vote=vote,
        vote_counts=await get_vote_counts(col, suggestion_id),
    )


# READ
async def get_suggestion_votes(suggestion_id: str) -> SuggestionVotes:
    suggestion = await _require_active(suggestion_id)
    suggestion_id = str(suggestion["_id"])
    return SuggestionVotes(
        suggestion_id=suggestion_id,
        votes=await get_vote_counts(get_votes_collection(), suggestion_id),
    )


async def check_user_vote(suggestion_id: str, ip_address: str, user_agent: str) -> VoteCheckResult:
    suggestion = await _require_active(suggestion_id)
    voter_fingerprint = generate_fingerprint(ip_address, user_agent)
    existing = await get_user_vote(get_votes_collection(), str(suggestion["_id"]), voter_fingerprint)
    return VoteCheckResult(
        has_voted=existing is not None,
        vote=existing["vote"] if existing else None,
    )
