# backend/council_feedback/crud/voting_suggestions.py

import logging
from typing import Any, Dict, List, Optional

from council_feedback.core.errors import NotFound, ResponseCode, ValidationFailed
from council_feedback.crud import feedback as feedback_crud
from council_feedback.db.mongo import VOTING_SUGGESTIONS_COLLECTION, get_db
from council_feedback.models.common import safe_object_id, utcnow
from council_feedback.models.voting_suggestion import VotingStatusEnum, VotingSuggestionInDB
from council_feedback.schemas.feedback import SuggestionRead
from council_feedback.schemas.voting_suggestion import (
    DeletedSuggestion,
    OriginalFeedbackSummary,
    PromoteRequest,
    PromoteResult,
    PromotionSource,
    VotingSuggestionCreate,
    VotingSuggestionRead,
    VotingSuggestionUpdate,
)

logger = logging.getLogger(__name__)

VOTING_STATUSES = {s.value for s in VotingStatusEnum}

# 출처 보존: 수정 요청에서 항상 제거되는 필드 (camelCase / snake_case 모두)
PROTECTED_FIELDS = ("originalFeedbackId", "original_feedback_id", "createdBy", "created_by")

NEWEST_FIRST = [("created_at", -1), ("_id", -1)]


def get_voting_suggestions_collection():
    return get_db()[VOTING_SUGGESTIONS_COLLECTION]


def _is_blank(v) -> bool:
    return v is None or (isinstance(v, str) and v.strip() == "")


def _check_submitter_email(email: Optional[str]) -> Optional[str]:
    """
    공백이면 None, 형식이 틀리면 INVALID_EMAIL (피드백 접수와 동일한 기준)
    """
    if _is_blank(email):
        return None
    email = email.strip()
    if not feedback_crud.is_valid_email(email):
        raise ValidationFailed("Invalid email format", code=ResponseCode.INVALID_EMAIL)
    return email


def serialize_original_feedback(doc) -> Optional[OriginalFeedbackSummary]:
    if not doc:
        return None
    return OriginalFeedbackSummary(
        id=doc["_id"],
        name=doc.get("name", ""),
        email=doc.get("email"),
        submitted_at=doc.get("submitted_at"),
    )


def serialize_voting_suggestion(doc, original_feedback=None) -> VotingSuggestionRead:
    """
    Mongo document(dict) -> VotingSuggestionRead
    original_feedback: feedback 컬렉션에서 조회한 요약 문서 (없으면 None)
    """
    return VotingSuggestionRead(
        id=doc["_id"],
        title=doc["title"],
        issue_description=doc["issue_description"],
        suggested_improvement=doc["suggested_improvement"],
        submitter_name=doc["submitter_name"],
        submitter_email=doc.get("submitter_email"),
        original_feedback_id=doc.get("original_feedback_id"),
        original_feedback=serialize_original_feedback(original_feedback),
        status=doc.get("status", VotingStatusEnum.DRAFT.value),
        priority=doc.get("priority", "medium"),
        created_by=doc.get("created_by", "admin"),
        created_at=doc["created_at"],
        updated_at=doc.get("updated_at"),
    )


async def _with_original_feedback(docs: List[dict]) -> List[VotingSuggestionRead]:
    originals = await feedback_crud.get_feedback_summaries(
        d.get("original_feedback_id") for d in docs
    )
    return [
        serialize_voting_suggestion(d, originals.get(d.get("original_feedback_id")))
        for d in docs
    ]


async def _insert(suggestion: VotingSuggestionInDB) -> dict:
    col = get_voting_suggestions_collection()
    res = await col.insert_one(suggestion.model_dump())
    return await col.find_one({"_id": res.inserted_id})


# PROMOTE (Feedback 제안 -> VotingSuggestion 복사. 원본 Feedback은 수정하지 않음)
async def promote_suggestion(feedback_id: str, data: PromoteRequest) -> PromoteResult:
    if (
        data.suggestion_number is None
        or data.suggestion_number < 1
        or _is_blank(data.title)
        or _is_blank(data.edited_issue_description)
        or _is_blank(data.edited_suggested_improvement)
    ):
        raise ValidationFailed("Missing required fields for promotion")

    feedback = await feedback_crud.get_feedback_doc(feedback_id)
    if not feedback:
        raise NotFound("Original feedback not found", code=ResponseCode.FEEDBACK_NOT_FOUND)

    original = next(
        (s for s in feedback.get("suggestions", []) if s.get("suggestion_number") == data.suggestion_number),
        None,
    )
    if original is None:
        raise NotFound("Suggestion not found in feedback", code=ResponseCode.SUGGESTION_NOT_FOUND)

    # 편집된 문구를 사용. 상태는 항상 draft로 시작
    suggestion = VotingSuggestionInDB(
        title=data.title,
        issue_description=data.edited_issue_description,
        suggested_improvement=data.edited_suggested_improvement,
        submitter_name=feedback["name"],
        submitter_email=feedback.get("email") or None,
        original_feedback_id=feedback["_id"],
        priority=data.priority,
        status=VotingStatusEnum.DRAFT,
        created_by="admin",
    )
    saved = await _insert(suggestion)

    logger.info("Promoted feedback %s #%d to voting suggestion %s",
                feedback_id, data.suggestion_number, saved["_id"])

    return PromoteResult(
        voting_suggestion=serialize_voting_suggestion(saved, feedback),
        original_feedback=PromotionSource(
            id=feedback["_id"],
            submitter=feedback["name"],
            original_suggestion=SuggestionRead(**original),
        ),
    )


# CREATE (관리자 직접 작성)
async def create_voting_suggestion(data: VotingSuggestionCreate) -> VotingSuggestionRead:
    if (
        _is_blank(data.title)
        or _is_blank(data.issue_description)
        or _is_blank(data.suggested_improvement)
        or _is_blank(data.submitter_name)
    ):
        raise ValidationFailed("Missing required fields")

    submitter_email = _check_submitter_email(data.submitter_email)

    original_oid = None
    if not _is_blank(data.original_feedback_id):
        original_oid = safe_object_id(data.original_feedback_id)
        if original_oid is None:
            raise ValidationFailed("Invalid originalFeedbackId")

    suggestion = VotingSuggestionInDB(
        title=data.title,
        issue_description=data.issue_description,
        suggested_improvement=data.suggested_improvement,
        submitter_name=data.submitter_name,
        submitter_email=submitter_email,
        original_feedback_id=original_oid,
        priority=data.priority,
        status=VotingStatusEnum.DRAFT,
    )
    saved = await _insert(suggestion)

    logger.info("Admin suggestion created: id=%s title=%s", saved["_id"], saved["title"])
    return (await _with_original_feedback([saved]))[0]


# READ ALL
async def get_voting_suggestions(status: str = "all") -> List[VotingSuggestionRead]:
    if status != "all" and status not in VOTING_STATUSES:
        raise ValidationFailed("Invalid status filter")

    query = {} if status == "all" else {"status": status}
    docs = await get_voting_suggestions_collection().find(query, sort=NEWEST_FIRST).to_list(length=None)
    return await _with_original_feedback(docs)


async def get_active_suggestion_docs() -> List[dict]:
    col = get_voting_suggestions_collection()
    return await col.find({"status": VotingStatusEnum.ACTIVE.value}, sort=NEWEST_FIRST).to_list(length=None)


# READ ONE (active only, raw document)
async def get_active_suggestion_doc(suggestion_id: str) -> Optional[dict]:
    oid = safe_object_id(suggestion_id)
    if oid is None:
        return None
    return await get_voting_suggestions_collection().find_one(
        {"_id": oid, "status": VotingStatusEnum.ACTIVE.value}
    )


# UPDATE (부분 수정)
async def update_voting_suggestion(suggestion_id: str, updates: Dict[str, Any]) -> VotingSuggestionRead:
    payload = {k: v for k, v in (updates or {}).items() if k not in PROTECTED_FIELDS}
    data = VotingSuggestionUpdate.model_validate(payload)
    if data.submitter_email is not None:
        data.submitter_email = _check_submitter_email(data.submitter_email)
    update_fields = {k: v for k, v in data.model_dump(mode="json").items() if v is not None}

    oid = safe_object_id(suggestion_id)
    if oid is None:
        raise NotFound("Suggestion not found")

    col = get_voting_suggestions_collection()
    if update_fields:
        update_fields["updated_at"] = utcnow()
        result = await col.update_one({"_id": oid}, {"$set": update_fields})
        if result.matched_count == 0:
            raise NotFound("Suggestion not found")

    updated = await col.find_one({"_id": oid})
    if not updated:
        raise NotFound("Suggestion not found")

    logger.info("Updated suggestion %s (%s)", suggestion_id, ", ".join(sorted(update_fields)) or "no changes")
    return (await _with_original_feedback([updated]))[0]


# DELETE
async def delete_voting_suggestion(suggestion_id: str) -> DeletedSuggestion:
    oid = safe_object_id(suggestion_id)
    if oid is None:
        raise NotFound("Suggestion not found")

    deleted = await get_voting_suggestions_collection().find_one_and_delete({"_id": oid})
    if not deleted:
        raise NotFound("Suggestion not found")

    logger.info("Deleted suggestion: %s", suggestion_id)
    return DeletedSuggestion(id=str(deleted["_id"]), title=deleted["title"])


# LIFECYCLE
async def set_voting_status(suggestion_id: str, status: VotingStatusEnum) -> VotingSuggestionRead:
    """
    activate / close 공용. 현재 상태와 무관하게 강제로 설정합니다
    (closed -> active, draft -> closed 도 허용).
    """
    oid = safe_object_id(suggestion_id)
    if oid is None:
        raise NotFound("Suggestion not found")

    col = get_voting_suggestions_collection()
    result = await col.update_one(
        {"_id": oid},
        {"$set": {"status": status.value, "updated_at": utcnow()}},
    )
    if result.matched_count == 0:
        raise NotFound("Suggestion not found")

    updated = await col.find_one({"_id": oid})
    logger.info("Suggestion %s status set to: %s", suggestion_id, status.value)
    return (await _with_original_feedback([updated]))[0]


# STATS
async def count_suggestions_by_status() -> Dict[str, int]:
    cursor = get_voting_suggestions_collection().aggregate([
        {"$group": {"_id": "$status", "count": {"$sum": 1}}},
    ])
    rows = await cursor.to_list(length=None)
    return {row["_id"]: row["count"] for row in rows}
