# backend/council_feedback/core/errors.py

import logging
from enum import Enum
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)


class ResponseCode(str, Enum):
    """응답 envelope의 machine-readable code 값"""
    SUCCESS = "SUCCESS"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_EMAIL = "INVALID_EMAIL"
    TOO_MANY_SUGGESTIONS = "TOO_MANY_SUGGESTIONS"
    NOT_FOUND = "NOT_FOUND"
    FEEDBACK_NOT_FOUND = "FEEDBACK_NOT_FOUND"
    SUGGESTION_NOT_FOUND = "SUGGESTION_NOT_FOUND"
    ALREADY_VOTED = "ALREADY_VOTED"
    INVALID_VOTE = "INVALID_VOTE"
    UNAUTHORIZED = "UNAUTHORIZED"
    SERVER_ERROR = "SERVER_ERROR"


class ApiError(Exception):
    """
    crud/service 계층에서 발생시키는 오류의 기반 클래스.
    main에 등록된 핸들러가 {error, code, ...} envelope으로 변환합니다.
    """
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: ResponseCode = ResponseCode.SERVER_ERROR
    message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, code: Optional[ResponseCode] = None, **extra: Any):
        self.message = message or self.message
        if code is not None:
            self.code = code
        self.extra = extra
        super().__init__(self.message)

    def to_body(self) -> dict:
        body = {"error": self.message, "code": self.code.value}
        body.update(self.extra)
        return body


class ValidationFailed(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = ResponseCode.VALIDATION_ERROR
    message = "Validation failed"


class NotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    code = ResponseCode.NOT_FOUND
    message = "Not found"


class Conflict(ApiError):
    status_code = status.HTTP_409_CONFLICT


class AlreadyVoted(Conflict):
    code = ResponseCode.ALREADY_VOTED
    message = "You have already voted on this suggestion"

    def __init__(self, existing_vote: Optional[str] = None):
        super().__init__(existingVote=existing_vote)


class Unauthorized(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = ResponseCode.UNAUTHORIZED
    message = "Could not validate credentials"


class ServerError(ApiError):
    pass


# -------------------------
# FastAPI 핸들러
# -------------------------
async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    headers = None
    if isinstance(exc, Unauthorized):
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(status_code=exc.status_code, content=exc.to_body(), headers=headers)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "Validation failed",
            "code": ResponseCode.VALIDATION_ERROR.value,
            "details": jsonable_encoder(exc.errors()),
        },
    )


async def model_validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
    # 문서 모델(models/*) 검증 실패: DB에 닿기 전에 걸러짐
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "Validation failed",
            "code": ResponseCode.VALIDATION_ERROR.value,
            "details": jsonable_encoder(exc.errors(include_url=False, include_context=False, include_input=False)),
        },
    )


async def store_error_handler(request: Request, exc: PyMongoError) -> JSONResponse:
    logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error", "code": ResponseCode.SERVER_ERROR.value},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(ValidationError, model_validation_handler)
    app.add_exception_handler(PyMongoError, store_error_handler)
