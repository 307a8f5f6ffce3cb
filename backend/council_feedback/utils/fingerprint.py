# backend/council_feedback/utils/fingerprint.py

import hashlib
from typing import Optional

from fastapi import Request

from council_feedback.core.config import settings

FINGERPRINT_LENGTH = 32


def generate_fingerprint(ip: Optional[str], user_agent: Optional[str]) -> str:
    """
    (IP, User-Agent) -> 32자리 소문자 hex 토큰.
    salt 없이 결정적으로 계산되므로 재시작 후에도 같은 투표자는 같은 값이 됩니다.
    계정/인증 수단이 아니라 중복 투표를 줄이기 위한 휴리스틱입니다.
    """
    raw = f"{ip or ''}{user_agent or ''}"
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()[:FINGERPRINT_LENGTH]


def get_client_ip(request: Request) -> str:
    if settings.TRUST_PROXY_HEADERS:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            first = forwarded.split(",")[0].strip()
            if first:
                return first
    return request.client.host if request.client else ""


def get_user_agent(request: Request) -> str:
    return request.headers.get("user-agent", "")
