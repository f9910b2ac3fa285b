"""
Async MongoDB connection manager.

Services work directly on Motor collections, so this module only owns the
client: connecting (with a ping so a bad URI fails at startup), liveness
checks for the health endpoint, and shutdown.

Example:
    from common.database import MongoDB, set_main_database

    db = MongoDB()
    await db.connect(uri="mongodb://localhost:27017", database_name="coursehub")
    set_main_database(db)

    courses = db.get_collection("courses")
"""

import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)

# ─────────────────────────────────────────────────────────────────
# Singleton database instance
# ─────────────────────────────────────────────────────────────────

_main_database: Optional["MongoDB"] = None


def _mask_uri(uri: str) -> str:
    """Drop credentials from a connection string before logging it."""
    return uri.split("@")[-1] if "@" in uri else uri


class MongoDB:
    """Owns one Motor client bound to one database."""

    def __init__(self, server_selection_timeout_ms: int = 5000):
        self._client: Optional[AsyncIOMotorClient] = None
        self._database_name: Optional[str] = None
        self._timeout_ms = server_selection_timeout_ms

    async def connect(self, uri: str, database_name: str) -> None:
        """
        Open the client and verify the server answers.

        Args:
            uri: MongoDB connection string
            database_name: Database holding the courses, users and
                courseprogresses collections
        """
        logger.info(f"Connecting to MongoDB: {_mask_uri(uri)}")

        client = AsyncIOMotorClient(uri, serverSelectionTimeoutMS=self._timeout_ms)
        try:
            await client.admin.command("ping")
        except PyMongoError as e:
            client.close()
            logger.error(f"Failed to connect to MongoDB: {e}")
            raise

        self._client = client
        self._database_name = database_name
        logger.info(f"Connected to MongoDB database: {database_name}")

    async def disconnect(self) -> None:
        if self._client is None:
            return
        logger.info(f"Disconnecting from MongoDB database: {self._database_name}")
        self._client.close()
        self._client = None
        self._database_name = None

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    async def ping(self) -> bool:
        """Whether the server currently answers. Never raises."""
        if self._client is None:
            return False
        try:
            await self._client.admin.command("ping")
            return True
        except PyMongoError as e:
            logger.warning(f"MongoDB ping failed: {e}")
            return False

    @property
    def db(self) -> AsyncIOMotorDatabase:
        """The Motor database handed to the services."""
        if self._client is None or self._database_name is None:
            raise RuntimeError("Database not connected")
        return self._client[self._database_name]

    def get_collection(self, name: str):
        return self.db[name]


# ─────────────────────────────────────────────────────────────────
# Singleton initialization and getter
# ─────────────────────────────────────────────────────────────────

def set_main_database(db: "MongoDB") -> None:
    global _main_database
    _main_database = db
    logger.info("Main database singleton set")


def get_main_database() -> "MongoDB":
    """
    Get the main application database singleton.

    Raises:
        RuntimeError: If database not initialized
    """
    if _main_database is None:
        raise RuntimeError("Main database not initialized. Call set_main_database() first.")
    return _main_database
