# backend/council_feedback/schemas/common.py

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    API 요청/응답 공통 베이스.
    기존 클라이언트가 camelCase 필드명을 사용하므로 alias를 camelCase로 맞춥니다.
    (내부/DB에서는 snake_case)
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Pagination(CamelModel):
    current: int
    limit: int
    total: int
    pages: int
