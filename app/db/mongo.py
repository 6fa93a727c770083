"""
app/db/mongo.py

Purpose: MongoDB connection setup

- Initializes Motor client with connection pooling and bounded timeouts
- Single collection: users
- Retry logic with exponential backoff
- Proper connection lifecycle management
"""

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo.errors import ConnectionFailure, ServerSelectionTimeoutError
from typing import Optional
import asyncio
from app.core.config import Settings, settings
from app.core.exceptions import StoreConnectionError
from app.core.logging import get_logger

logger = get_logger(__name__)

# Global MongoDB client
_client: Optional[AsyncIOMotorClient] = None
_database: Optional[AsyncIOMotorDatabase] = None


async def connect_to_mongo(config: Settings = None):
    """
    Establishes connection to MongoDB with retry logic.
    Called during application startup when the mongo backend is selected.

    Args:
        config: Settings to connect with, defaults to the process settings

    Raises:
        StoreConnectionError: If no attempt succeeds
    """
    global _client, _database
    config = config or settings

    if _client is not None:
        logger.warning("MongoDB client already initialized")
        return

    max_retries = config.MONGODB_CONNECT_RETRIES
    retry_delay = config.MONGODB_RETRY_DELAY_SECONDS

    for attempt in range(1, max_retries + 1):
        client = None
        try:
            logger.info(
                f"Attempting to connect to MongoDB (attempt {attempt}/{max_retries})"
            )

            client = AsyncIOMotorClient(
                config.MONGODB_URL,
                maxPoolSize=config.MONGODB_MAX_POOL_SIZE,
                minPoolSize=config.MONGODB_MIN_POOL_SIZE,
                serverSelectionTimeoutMS=config.MONGODB_SERVER_SELECTION_TIMEOUT_MS,
                connectTimeoutMS=config.MONGODB_CONNECT_TIMEOUT_MS,
                socketTimeoutMS=config.MONGODB_SOCKET_TIMEOUT_MS,
                retryWrites=True,
                retryReads=True,
            )

            # Verify connection
            await client.admin.command("ping")

            _client = client
            _database = client[config.MONGODB_DB_NAME]
            logger.info(
                f"✅ Successfully connected to MongoDB: {config.MONGODB_DB_NAME}"
            )
            return

        except (ConnectionFailure, ServerSelectionTimeoutError) as e:
            if client is not None:
                client.close()
            logger.error(
                f"Failed to connect to MongoDB (attempt {attempt}/{max_retries}): {e}"
            )

            if attempt < max_retries:
                logger.info(f"Retrying in {retry_delay} seconds...")
                await asyncio.sleep(retry_delay)
                retry_delay *= 2  # Exponential backoff
            else:
                logger.critical("Failed to connect to MongoDB after all retries")
                raise StoreConnectionError("Could not establish MongoDB connection") from e


async def close_mongo_connection():
    """
    Closes the MongoDB connection.
    Called during application shutdown.
    """
    global _client, _database

    if _client:
        logger.info("Closing MongoDB connection")
        _client.close()
        _client = None
        _database = None
        logger.info("MongoDB connection closed")


async def get_database() -> AsyncIOMotorDatabase:
    """
    Returns the MongoDB database instance.

    Raises:
        RuntimeError: If database is not initialized
    """
    if _database is None:
        raise RuntimeError(
            "Database not initialized. Call connect_to_mongo() during startup."
        )
    return _database


def get_users_collection(name: Optional[str] = None) -> AsyncIOMotorCollection:
    """
    Returns the users collection, `name` defaulting to MONGODB_USERS_COLLECTION.

    Fields:
    - _id: ObjectId (exposed as a 24-char hex id)
    - name: str
    - email: str (lowercased, unique)
    - image: str (URL or empty)
    """
    if _database is None:
        raise RuntimeError(
            "Database not initialized. Call connect_to_mongo() during startup."
        )
    return _database[name or settings.MONGODB_USERS_COLLECTION]
