"""
app/services/store_factory.py

Purpose: Picks the user store at startup

- USER_STORE_BACKEND=memory: fresh MemoryUserStore, optionally seeded
- USER_STORE_BACKEND=mongo: connects, bootstraps schema/indexes, wraps the collection
"""

from app.core.config import Settings, settings as default_settings
from app.core.logging import get_logger
from app.db.mongo import connect_to_mongo, close_mongo_connection, get_database, get_users_collection
from app.db.indexes import create_indexes
from app.services.memory_user_store import MemoryUserStore, SAMPLE_USERS
from app.services.mongo_user_store import MongoUserStore
from app.services.user_store import UserStore

logger = get_logger(__name__)


async def build_user_store(config: Settings = None) -> UserStore:
    """
    Constructs the configured user store. Called once per process.

    Raises:
        StoreConnectionError: If the mongo backend cannot be reached
    """
    config = config or default_settings

    if config.uses_mongo:
        logger.info("Connecting to MongoDB...")
        await connect_to_mongo(config)
        logger.info("Creating database indexes...")
        await create_indexes(await get_database(), config.MONGODB_USERS_COLLECTION)
        return MongoUserStore(get_users_collection(config.MONGODB_USERS_COLLECTION))

    seed = SAMPLE_USERS if config.SEED_SAMPLE_USERS else None
    store = MemoryUserStore(seed=seed)
    logger.info(f"Using in-memory user store with {len(seed or [])} sample users")
    return store


async def close_user_store(store: UserStore):
    """Releases backend resources held by the store."""
    if isinstance(store, MongoUserStore):
        await close_mongo_connection()
