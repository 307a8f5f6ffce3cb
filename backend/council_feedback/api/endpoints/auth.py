# backend/council_feedback/api/endpoints/auth.py
import logging

from fastapi import APIRouter

from council_feedback.core.errors import Unauthorized
from council_feedback.core.security import create_access_token, verify_admin_credentials
from council_feedback.schemas.auth import AdminLogin, TokenResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])


@router.post("/login", response_model=TokenResponse)
async def admin_login(body: AdminLogin):
    """
    관리자 로그인 -> /admin/*, GET /feedback, GET /feedback/reset 에 쓰는 Bearer 토큰 발급
    """
    if not verify_admin_credentials(body.username, body.password):
        logger.warning("Rejected admin login for user=%s", body.username)
        raise Unauthorized("Invalid credentials")

    return TokenResponse(access_token=create_access_token(body.username))
