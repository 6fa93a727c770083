"""
app/db/indexes.py

Purpose: Collection schema and index management

- $jsonSchema validator on the users collection
- Unique index on email (decides concurrent duplicate creates)
- Idempotent, safe to run on every startup
"""

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING

from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)

EMAIL_INDEX_NAME = "email_unique"

USER_SCHEMA = {
    "$jsonSchema": {
        "bsonType": "object",
        "required": ["name", "email", "image"],
        "properties": {
            "name": {"bsonType": "string", "minLength": 1},
            "email": {"bsonType": "string", "minLength": 3, "pattern": "^[^\\s@]+@[^\\s@]+\\.[^\\s@]+$"},
            "image": {"bsonType": "string"},
        },
    }
}


async def ensure_users_schema(database: AsyncIOMotorDatabase, name: str = None):
    """
    Creates the users collection with its validator, or attaches the
    validator to an existing collection.
    """
    name = name or settings.MONGODB_USERS_COLLECTION
    existing = await database.list_collection_names()

    if name not in existing:
        await database.create_collection(name, validator=USER_SCHEMA)
        logger.info(f"Created collection '{name}' with schema validator")
    else:
        await database.command("collMod", name, validator=USER_SCHEMA)
        logger.debug(f"Refreshed schema validator on '{name}'")


async def create_indexes(database: AsyncIOMotorDatabase, name: str = None):
    """
    Creates all necessary indexes on the users collection.
    This function is idempotent - safe to run multiple times.
    """
    name = name or settings.MONGODB_USERS_COLLECTION
    try:
        await ensure_users_schema(database, name)

        users = database[name]
        await users.create_index([("email", ASCENDING)], unique=True, name=EMAIL_INDEX_NAME)
        logger.debug(f"Created unique index on {name}.email")

        user_indexes = await users.index_information()
        logger.info(f"✅ Database indexes ready: {sorted(user_indexes)}")

    except Exception as e:
        logger.error(f"Failed to create indexes: {str(e)}", exc_info=True)
        raise


async def drop_all_indexes(database: AsyncIOMotorDatabase, name: str = None):
    """
    Drops all custom indexes (keeps _id index).
    Use with caution! Only for maintenance.
    """
    name = name or settings.MONGODB_USERS_COLLECTION
    logger.warning(f"Dropping all indexes on '{name}'...")
    await database[name].drop_indexes()
    logger.info("✅ All indexes dropped successfully")


if __name__ == "__main__":
    """
    Run this script directly to create indexes manually.
    """
    import asyncio
    from app.db.mongo import connect_to_mongo, close_mongo_connection, get_database

    async def main():
        await connect_to_mongo()
        await create_indexes(await get_database())
        await close_mongo_connection()

    asyncio.run(main())
