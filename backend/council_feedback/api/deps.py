from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError

from council_feedback.core.errors import Unauthorized
from council_feedback.core.security import ADMIN_ROLE, decode_access_token

# 스와거 문서에서 토큰 입력창을 보여주기 위함. 토큰 누락도 UNAUTHORIZED envelope으로 응답
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/admin/login", auto_error=False)


async def get_current_admin(token: Optional[str] = Depends(oauth2_scheme)) -> str:
    """
    관리자 JWT를 검증하고 subject(관리자 이름)를 반환합니다.
    """
    if not token:
        raise Unauthorized()

    try:
        payload = decode_access_token(token)
    except JWTError:
        raise Unauthorized()

    subject = payload.get("sub")
    if subject is None or payload.get("role") != ADMIN_ROLE:
        raise Unauthorized()

    return subject
