# backend/council_feedback/models/common.py

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Optional, Union

from bson import ObjectId
from bson.errors import InvalidId
from pydantic import BeforeValidator


def _to_str_id(v: Any) -> Any:
    if isinstance(v, ObjectId):
        return str(v)
    return v


# Mongo ObjectId를 응답에서 문자열로 다루기 위한 타입
PyObjectId = Annotated[str, BeforeValidator(_to_str_id)]


class PriorityEnum(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def safe_object_id(value: Union[str, ObjectId, None]) -> Optional[ObjectId]:
    """
    str/ObjectId 입력을 안전하게 ObjectId로 변환합니다.
    변환이 불가능하면 None (= 해당 id는 resolve되지 않음).
    """
    if isinstance(value, ObjectId):
        return value
    if not isinstance(value, str):
        # ObjectId(None)은 새 id를 만들어버림
        return None
    value = value.strip()
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
