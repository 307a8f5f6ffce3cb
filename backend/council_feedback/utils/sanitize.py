# backend/council_feedback/utils/sanitize.py

from typing import Optional

from markupsafe import escape


def sanitize_text(v: Optional[str]) -> str:
    """
    양쪽 공백 제거 후 HTML 특수문자(<, >, &, ", ')를 escape.
    저장형 스크립트 삽입 방지용. None은 빈 문자열로 취급합니다.
    """
    if v is None:
        return ""
    if not isinstance(v, str):
        v = str(v)
    return str(escape(v.strip()))


def sanitize_email(v: Optional[str]) -> str:
    return sanitize_text(v).lower()
