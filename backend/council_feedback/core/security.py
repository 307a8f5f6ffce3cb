import hmac
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Union

from jose import jwt

from council_feedback.core.config import settings

ADMIN_ROLE = "admin"


def create_access_token(subject: Union[str, Any], role: str = ADMIN_ROLE) -> str:
    """
    관리자용 Access Token 생성
    """
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode = {"exp": expire, "sub": str(subject), "type": "access", "role": role}
    encoded_jwt = jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
    return encoded_jwt


def decode_access_token(token: str) -> Dict[str, Any]:
    # JWTError는 호출측(deps)에서 처리
    return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])


def verify_admin_credentials(username: str, password: str) -> bool:
    if not settings.ADMIN_PASSWORD:
        return False
    user_ok = hmac.compare_digest(username.encode("utf-8"), settings.ADMIN_USERNAME.encode("utf-8"))
    pass_ok = hmac.compare_digest(password.encode("utf-8"), settings.ADMIN_PASSWORD.encode("utf-8"))
    return user_ok and pass_ok
