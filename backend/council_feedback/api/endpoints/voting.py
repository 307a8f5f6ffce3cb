# backend/council_feedback/api/endpoints/voting.py
from fastapi import APIRouter, Request, status

from council_feedback.core.errors import ResponseCode
from council_feedback.crud import votes as vote_crud
from council_feedback.schemas.vote import VoteRequest
from council_feedback.utils.fingerprint import get_client_ip, get_user_agent

router = APIRouter(tags=["Voting"])


@router.get("/suggestions")
async def read_active_suggestions():
    """
    [공개] active 상태의 제안 + 실시간 집계
    """
    suggestions = await vote_crud.get_active_suggestions_with_votes()
    return {
        "message": "Active suggestions retrieved successfully",
        "data": suggestions,
        "count": len(suggestions),
    }


@router.post("/suggestions/{suggestion_id}/vote", status_code=status.HTTP_201_CREATED)
async def submit_vote(suggestion_id: str, payload: VoteRequest, request: Request):
    result = await vote_crud.cast_vote(
        suggestion_id,
        payload.vote,
        ip_address=get_client_ip(request),
        user_agent=get_user_agent(request),
    )
    return {
        "message": "Vote recorded successfully",
        "code": ResponseCode.SUCCESS,
        "data": result,
    }


@router.get("/suggestions/{suggestion_id}/votes")
async def read_vote_counts(suggestion_id: str):
    return {
        "message": "Vote counts retrieved successfully",
        "data": await vote_crud.get_suggestion_votes(suggestion_id),
    }


@router.get("/check/{suggestion_id}")
async def check_vote(suggestion_id: str, request: Request):
    result = await vote_crud.check_user_vote(
        suggestion_id,
        ip_address=get_client_ip(request),
        user_agent=get_user_agent(request),
    )
    return {
        "message": "Vote check completed",
        "data": result,
    }
