# backend/council_feedback/api/endpoints/feedback.py
import logging

from fastapi import APIRouter, Depends, Request, status

from council_feedback.api import deps
from council_feedback.core.errors import ResponseCode
from council_feedback.crud import feedback as feedback_crud
from council_feedback.schemas.feedback import FeedbackSubmit
from council_feedback.utils.fingerprint import get_client_ip, get_user_agent

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Feedback"])


# CREATE (공개)
@router.post("", status_code=status.HTTP_201_CREATED)
async def submit_feedback(payload: FeedbackSubmit, request: Request):
    logger.info(
        "Feedback submission received: name=%s suggestions=%s",
        payload.name, len(payload.suggestions) if payload.suggestions is not None else None,
    )
    result = await feedback_crud.create_feedback(
        payload,
        ip_address=get_client_ip(request),
        user_agent=get_user_agent(request),
    )
    return {
        "message": "Feedback submitted successfully",
        "code": ResponseCode.SUCCESS,
        "data": result,
    }


# READ ALL (관리자 전용)
@router.get("", dependencies=[Depends(deps.get_current_admin)])
async def read_all_feedback():
    feedback = await feedback_crud.get_all_feedback()
    return {
        "message": "Feedback retrieved successfully",
        "data": feedback,
        "count": len(feedback),
    }


# DELETE ALL (관리자 전용, 디버그/초기화 용도)
@router.get("/reset", dependencies=[Depends(deps.get_current_admin)])
async def reset_feedback():
    deleted_count = await feedback_crud.delete_all_feedback()
    return {
        "message": f"Database reset successful! Deleted {deleted_count} feedback items.",
        "deletedCount": deleted_count,
    }
