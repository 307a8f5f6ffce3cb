# main.py
import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from council_feedback.api.endpoints import admin, auth, feedback, health, voting
from council_feedback.core.config import settings
from council_feedback.core.errors import register_exception_handlers
from council_feedback.db.mongo import close_mongo_connection, connect_to_mongo, ensure_indexes

load_dotenv()

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

if not settings.is_production:
    logger.warning("Running in %s mode.", settings.ENVIRONMENT)


# [수명 주기 관리] DB 연결/인덱스 생성 및 해제
@asynccontextmanager
async def lifespan(app: FastAPI):
    await connect_to_mongo()
    await ensure_indexes()
    yield
    await close_mongo_connection()


app = FastAPI(title="Council Feedback Backend", lifespan=lifespan)

register_exception_handlers(app)

# --- 미들웨어 설정 ---

# CORS: 피드백 폼 / 관리자 화면 접근 허용. 프로덕션에서는 localhost 정규식 비활성화
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_origin_regex=None if settings.is_production else settings.CORS_ORIGIN_REGEX,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def read_root():
    return {"message": "Backend is running!"}


# 공개 API
app.include_router(health.router, prefix="/api")
app.include_router(feedback.router, prefix="/api/feedback")
app.include_router(voting.router, prefix="/api/voting")

# 관리자 API
app.include_router(auth.router, prefix="/api/admin")
app.include_router(admin.router, prefix="/api/admin")
