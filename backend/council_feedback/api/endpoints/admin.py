# backend/council_feedback/api/endpoints/admin.py
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, Query, status

from council_feedback.api import deps
from council_feedback.core.errors import ResponseCode
from council_feedback.crud import feedback as feedback_crud
from council_feedback.crud import statistics as statistics_crud
from council_feedback.crud import voting_suggestions as suggestion_crud
from council_feedback.models.voting_suggestion import VotingStatusEnum
from council_feedback.schemas.feedback import FeedbackStatusUpdate
from council_feedback.schemas.voting_suggestion import PromoteRequest, VotingSuggestionCreate

router = APIRouter(tags=["Admin"], dependencies=[Depends(deps.get_current_admin)])


# ---------- Feedback 큐레이션 ----------

@router.get("/feedback")
async def read_feedback_page(
    status_filter: str = Query("all", alias="status"),
    limit: int = Query(50, ge=1, le=1000),
    page: int = Query(1, ge=1),
):
    items, pagination = await feedback_crud.get_feedback_page(status_filter, page=page, limit=limit)
    return {
        "message": "Feedback retrieved successfully",
        "data": items,
        "pagination": pagination,
    }


@router.put("/feedback/{feedback_id}/status")
async def update_feedback_status(feedback_id: str, payload: FeedbackStatusUpdate):
    feedback = await feedback_crud.update_feedback_status(feedback_id, payload.status)
    return {
        "message": "Feedback status updated successfully",
        "data": feedback,
    }


@router.post("/feedback/{feedback_id}/promote", status_code=status.HTTP_201_CREATED)
async def promote_feedback_suggestion(feedback_id: str, payload: PromoteRequest):
    result = await suggestion_crud.promote_suggestion(feedback_id, payload)
    return {
        "message": "Suggestion promoted to voting successfully",
        "code": ResponseCode.SUCCESS,
        "data": result,
    }


# ---------- VotingSuggestion 관리 ----------

@router.get("/suggestions")
async def read_suggestions(status_filter: str = Query("all", alias="status")):
    suggestions = await suggestion_crud.get_voting_suggestions(status_filter)
    return {
        "message": "Suggestions retrieved successfully",
        "data": suggestions,
        "count": len(suggestions),
    }


@router.post("/suggestions", status_code=status.HTTP_201_CREATED)
async def create_suggestion(payload: VotingSuggestionCreate):
    suggestion = await suggestion_crud.create_voting_suggestion(payload)
    return {
        "message": "Suggestion created successfully",
        "code": ResponseCode.SUCCESS,
        "data": suggestion,
    }


@router.put("/suggestions/{suggestion_id}")
async def update_suggestion(suggestion_id: str, updates: Dict[str, Any] = Body(...)):
    suggestion = await suggestion_crud.update_voting_suggestion(suggestion_id, updates)
    return {
        "message": "Suggestion updated successfully",
        "data": suggestion,
    }


@router.delete("/suggestions/{suggestion_id}")
async def delete_suggestion(suggestion_id: str):
    deleted = await suggestion_crud.delete_voting_suggestion(suggestion_id)
    return {
        "message": "Suggestion deleted successfully",
        "data": deleted,
    }


@router.post("/suggestions/{suggestion_id}/activate")
async def activate_suggestion(suggestion_id: str):
    suggestion = await suggestion_crud.set_voting_status(suggestion_id, VotingStatusEnum.ACTIVE)
    return {
        "message": "Suggestion activated for voting",
        "data": suggestion,
    }


@router.post("/suggestions/{suggestion_id}/close")
async def close_suggestion(suggestion_id: str):
    suggestion = await suggestion_crud.set_voting_status(suggestion_id, VotingStatusEnum.CLOSED)
    return {
        "message": "Suggestion voting closed",
        "data": suggestion,
    }


# ---------- 통계 ----------

@router.get("/statistics")
async def read_statistics():
    return {
        "message": "Statistics retrieved successfully",
        "data": await statistics_crud.get_admin_statistics(),
    }
