# backend/council_feedback/api/endpoints/health.py
import logging

from fastapi import APIRouter
from pymongo.errors import PyMongoError

from council_feedback.db.mongo import get_db
from council_feedback.models.common import utcnow

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


async def _ping_store():
    """
    (연결 여부, 오류 메시지). 연결 전(get_db RuntimeError)도 degraded로 취급
    """
    try:
        await get_db().command("ping")
    except (PyMongoError, RuntimeError) as e:
        logger.warning("Health check: store unavailable (%s)", e)
        return False, str(e)
    return True, None


@router.get("/health")
async def health_check():
    """
    [운영] API 생존 + Mongo 연결 상태
    """
    store_ok, store_error = await _ping_store()
    return {
        "status": "OK" if store_ok else "degraded",
        "message": "Council Feedback API is running!",
        "timestamp": utcnow().isoformat(),
        "mongo": store_ok,
        "mongo_error": store_error,
    }
