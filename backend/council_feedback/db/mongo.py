# backend/council_feedback/db/mongo.py
import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from council_feedback.core.config import settings

logger = logging.getLogger(__name__)

FEEDBACK_COLLECTION = "feedback"
VOTING_SUGGESTIONS_COLLECTION = "voting_suggestions"
VOTES_COLLECTION = "votes"

client: AsyncIOMotorClient | None = None
db = None


async def connect_to_mongo():
    global client, db
    client = AsyncIOMotorClient(settings.MONGO_URI)
    db = client[settings.MONGO_DB_NAME]
    logger.info("MongoDB connected (db=%s)", settings.MONGO_DB_NAME)


async def close_mongo_connection():
    global client, db
    if client:
        client.close()
        logger.info("MongoDB connection closed")
    client = None
    db = None


def get_db() -> AsyncIOMotorDatabase:
    if db is None:
        raise RuntimeError("MongoDB not initialized. Did you call connect_to_mongo()?")
    return db


async def ensure_indexes():
    """
    컬렉션 인덱스 생성 (idempotent).
    votes의 (suggestion_id, voter_fingerprint) unique 인덱스가 중복 투표를 막는 유일한 장치입니다.
    """
    database = get_db()

    feedback = database[FEEDBACK_COLLECTION]
    await feedback.create_index([("name", ASCENDING)])
    await feedback.create_index([("status", ASCENDING)])
    await feedback.create_index([("submitted_at", DESCENDING)])

    suggestions = database[VOTING_SUGGESTIONS_COLLECTION]
    await suggestions.create_index([("status", ASCENDING)])
    await suggestions.create_index([("created_at", DESCENDING)])

    votes = database[VOTES_COLLECTION]
    await votes.create_index(
        [("suggestion_id", ASCENDING), ("voter_fingerprint", ASCENDING)],
        unique=True,
        name="unique_vote_per_voter",
    )
    await votes.create_index([("suggestion_id", ASCENDING)])
    await votes.create_index([("voter_fingerprint", ASCENDING)])
    await votes.create_index([("vote_type", ASCENDING)])
    await votes.create_index([("voting_suggestion_id", ASCENDING)])
    await votes.create_index([("voted_at", DESCENDING)])

    logger.info("MongoDB indexes ensured")
