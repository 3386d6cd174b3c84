"""MongoDB database connection using Motor (async driver)."""
import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from worklog.config import settings

logger = logging.getLogger(__name__)


class Database:
    """MongoDB database connection manager."""

    client: AsyncIOMotorClient | None = None
    db: AsyncIOMotorDatabase | None = None

    async def connect(self) -> None:
        """Connect to MongoDB and make sure the query indexes exist."""
        self.client = AsyncIOMotorClient(
            settings.mongodb_url,
            tz_aware=True,
            serverSelectionTimeoutMS=settings.mongodb_timeout_ms,
        )
        self.db = self.client[settings.mongodb_db_name]
        await ensure_indexes(self.db)
        logger.info("Connected to MongoDB: %s", settings.mongodb_db_name)

    async def disconnect(self) -> None:
        """Disconnect from MongoDB."""
        if self.client:
            self.client.close()
            logger.info("Disconnected from MongoDB")


async def ensure_indexes(db) -> None:
    """Create the indexes the entry and summary queries rely on."""
    await db["users"].create_index("email", unique=True)
    await db["projects"].create_index([("user_id", ASCENDING), ("is_active", ASCENDING)])
    await db["time_entries"].create_index(
        [("user_id", ASCENDING), ("start_time", DESCENDING)]
    )
    await db["time_entries"].create_index(
        [("project_id", ASCENDING), ("start_time", DESCENDING)]
    )
    await db["time_entries"].create_index([("user_id", ASCENDING), ("end_time", ASCENDING)])


# Global database instance
database = Database()


async def get_database() -> AsyncIOMotorDatabase:
    """Dependency to get database instance."""
    if database.db is None:
        raise RuntimeError("Database not connected")
    return database.db
