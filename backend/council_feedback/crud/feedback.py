# backend/council_feedback/crud/feedback.py

import logging
import math
from typing import Dict, List, Optional, Tuple

from email_validator import EmailNotValidError, validate_email

from council_feedback.core.errors import NotFound, ResponseCode, ValidationFailed
from council_feedback.db.mongo import FEEDBACK_COLLECTION, get_db
from council_feedback.models.common import safe_object_id, utcnow
from council_feedback.models.feedback import MAX_SUGGESTIONS, FeedbackInDB, FeedbackStatusEnum
from council_feedback.schemas.common import Pagination
from council_feedback.schemas.feedback import (
    FeedbackRead,
    FeedbackSubmit,
    FeedbackSubmitResult,
    FeedbackSummary,
    SuggestionRead,
)
from council_feedback.utils.sanitize import sanitize_email, sanitize_text

logger = logging.getLogger(__name__)

FEEDBACK_STATUSES = {s.value for s in FeedbackStatusEnum}

# 동일 시각 제출 시에도 정렬이 흔들리지 않도록 _id를 보조 키로 사용
NEWEST_FIRST = [("submitted_at", -1), ("_id", -1)]


def get_feedback_collection():
    """
    Motor DB 핸들에서 feedback 컬렉션을 가져옵니다.
    """
    return get_db()[FEEDBACK_COLLECTION]


def serialize_feedback_read(doc) -> FeedbackRead:
    """
    Mongo document(dict) -> FeedbackRead (응답용)
    """
    return FeedbackRead(
        id=doc["_id"],
        name=doc["name"],
        email=doc.get("email"),
        suggestions=[SuggestionRead(**s) for s in doc.get("suggestions", [])],
        status=doc.get("status", FeedbackStatusEnum.PENDING.value),
        priority=doc.get("priority", "medium"),
        submitted_at=doc["submitted_at"],
        ip_address=doc.get("ip_address"),
        user_agent=doc.get("user_agent"),
        created_at=doc.get("created_at"),
        updated_at=doc.get("updated_at"),
    )


def serialize_feedback_summary(doc) -> FeedbackSummary:
    return FeedbackSummary(
        id=doc["_id"],
        name=doc["name"],
        submitted_at=doc["submitted_at"],
        status=doc.get("status", FeedbackStatusEnum.PENDING.value),
        suggestions=[SuggestionRead(**s) for s in doc.get("suggestions", [])],
    )


def is_valid_email(email: str) -> bool:
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


# CREATE
async def create_feedback(
    data: FeedbackSubmit,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> FeedbackSubmitResult:
    """
    피드백 접수: 필수값 확인 -> sanitize -> 이메일/개수 검증 -> 문서 모델 검증 -> 저장
    suggestionNumber는 클라이언트 값과 무관하게 1..N 위치로 재부여합니다.
    """
    if not data.name or not data.suggestions:
        raise ValidationFailed("Missing required fields")

    email = sanitize_email(data.email) if data.email else ""
    if email and not is_valid_email(email):
        raise ValidationFailed("Invalid email format", code=ResponseCode.INVALID_EMAIL)

    if len(data.suggestions) > MAX_SUGGESTIONS:
        raise ValidationFailed(
            f"Maximum {MAX_SUGGESTIONS} suggestions allowed",
            code=ResponseCode.TOO_MANY_SUGGESTIONS,
        )

    now = utcnow()
    feedback = FeedbackInDB(
        name=sanitize_text(data.name),
        email=email or None,
        suggestions=[
            {
                "suggestion_number": index + 1,
                "issue_description": sanitize_text(s.issue_description),
                "suggested_improvement": sanitize_text(s.suggested_improvement),
            }
            for index, s in enumerate(data.suggestions)
        ],
        submitted_at=now,
        ip_address=ip_address,
        user_agent=user_agent,
        created_at=now,
        updated_at=now,
    )

    col = get_feedback_collection()
    res = await col.insert_one(feedback.model_dump())

    logger.info(
        "Feedback saved: id=%s name=%s suggestions=%d",
        res.inserted_id, feedback.name, len(feedback.suggestions),
    )

    return FeedbackSubmitResult(
        id=str(res.inserted_id),
        submitted_at=feedback.submitted_at,
        suggestion_count=len(feedback.suggestions),
    )


# READ ALL (관리자 전용)
async def get_all_feedback() -> List[FeedbackRead]:
    col = get_feedback_collection()
    docs = await col.find({}, sort=NEWEST_FIRST).to_list(length=None)
    return [serialize_feedback_read(d) for d in docs]


# READ PAGE
async def get_feedback_page(
    status: str = "all",
    page: int = 1,
    limit: int = 50,
) -> Tuple[List[FeedbackRead], Pagination]:
    if status != "all" and status not in FEEDBACK_STATUSES:
        raise ValidationFailed("Invalid status filter")

    query = {} if status == "all" else {"status": status}
    skip = (page - 1) * limit

    col = get_feedback_collection()
    docs = await col.find(query, sort=NEWEST_FIRST, skip=skip, limit=limit).to_list(length=limit)
    total = await col.count_documents(query)

    pagination = Pagination(
        current=page,
        limit=limit,
        total=total,
        pages=math.ceil(total / limit),
    )
    return [serialize_feedback_read(d) for d in docs], pagination


# READ ONE (raw document)
async def get_feedback_doc(feedback_id: str) -> Optional[dict]:
    oid = safe_object_id(feedback_id)
    if oid is None:
        return None
    return await get_feedback_collection().find_one({"_id": oid})


async def get_feedback_summaries(feedback_ids) -> Dict:
    """
    VotingSuggestion 응답에 붙일 원본 피드백 요약 (name, email, submitted_at).
    {ObjectId: doc} 형태로 반환합니다.
    """
    ids = list({fid for fid in feedback_ids if fid is not None})
    if not ids:
        return {}
    cursor = get_feedback_collection().find(
        {"_id": {"$in": ids}},
        {"name": 1, "email": 1, "submitted_at": 1},
    )
    docs = await cursor.to_list(length=None)
    return {d["_id"]: d for d in docs}


# UPDATE STATUS
async def update_feedback_status(feedback_id: str, status: Optional[str]) -> FeedbackRead:
    if status not in FEEDBACK_STATUSES:
        raise ValidationFailed("Invalid status value")

    oid = safe_object_id(feedback_id)
    if oid is None:
        raise NotFound("Feedback not found")

    col = get_feedback_collection()
    result = await col.update_one(
        {"_id": oid},
        {"$set": {"status": status, "updated_at": utcnow()}},
    )
    if result.matched_count == 0:
        raise NotFound("Feedback not found")

    updated = await col.find_one({"_id": oid})
    logger.info("Updated feedback %s status to: %s", feedback_id, status)
    return serialize_feedback_read(updated)


# DELETE ALL (관리자 전용 초기화)
async def delete_all_feedback() -> int:
    result = await get_feedback_collection().delete_many({})
    logger.warning("Feedback collection reset - deleted %d documents", result.deleted_count)
    return result.deleted_count


# STATS
async def count_feedback_by_status() -> Dict[str, int]:
    cursor = get_feedback_collection().aggregate([
        {"$group": {"_id": "$status", "count": {"$sum": 1}}},
    ])
    rows = await cursor.to_list(length=None)
    return {row["_id"]: row["count"] for row in rows}


async def get_recent_feedback(limit: int = 5) -> List[FeedbackSummary]:
    cursor = get_feedback_collection().find(
        {},
        {"name": 1, "submitted_at": 1, "status": 1, "suggestions": 1},
        sort=NEWEST_FIRST,
        limit=limit,
    )
    docs = await cursor.to_list(length=limit)
    return [serialize_feedback_summary(d) for d in docs]
