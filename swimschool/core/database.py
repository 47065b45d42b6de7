import logging
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING, DESCENDING
from swimschool.core.config import MONGODB_URL, DATABASE_NAME

logger = logging.getLogger(__name__)


class MongoDB:
    client: AsyncIOMotorClient = None
    db = None

mongodb = MongoDB()

async def connect_to_mongo():
    mongodb.client = AsyncIOMotorClient(MONGODB_URL)
    mongodb.db = mongodb.client[DATABASE_NAME]

    # Test connection
    await mongodb.client.admin.command("ping")
    logger.info("MongoDB connected to %s", DATABASE_NAME)

async def close_mongo_connection():
    if mongodb.client is not None:
        mongodb.client.close()
    logger.info("MongoDB disconnected")

async def ensure_indexes():
    db = mongodb.db
    # One registration per (student, class); the insert itself enforces it.
    await db.registrations.create_index(
        [("student_id", ASCENDING), ("class_id", ASCENDING)], unique=True
    )
    await db.registrations.create_index("payment_reference")
    await db.registrations.create_index([("student_id", ASCENDING), ("created_at", DESCENDING)])
    await db.payments.create_index("reference", unique=True)
    await db.users.create_index("email", unique=True)
    await db.users.create_index("id", unique=True)
    await db.classes.create_index("id", unique=True)
    await db.classes.create_index([("date", ASCENDING), ("time", ASCENDING)])
    await db.classes.create_index([("class_type", ASCENDING), ("is_active", ASCENDING)])
    await db.products.create_index("id", unique=True)
    await db.products.create_index([("category", ASCENDING), ("is_active", ASCENDING)])
    logger.info("MongoDB indexes ensured")
