import asyncio
from app.db.mongo import connect_to_mongo, close_mongo_connection, get_users_collection
from app.db.indexes import EMAIL_INDEX_NAME

# Configure logging
import logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

async def check_indexes():
    await connect_to_mongo()
    users = get_users_collection()

    try:
        indexes = await users.index_information()
        logger.info(f"Existing indexes: {list(indexes.keys())}")

        email_index = indexes.get(EMAIL_INDEX_NAME)
        if email_index is None:
            logger.error(f"❌ '{EMAIL_INDEX_NAME}' is missing. Run scripts/init_db.py or start the app with the mongo backend.")
        elif not email_index.get("unique"):
            logger.error(f"❌ '{EMAIL_INDEX_NAME}' exists but is not unique.")
        else:
            logger.info(f"✅ '{EMAIL_INDEX_NAME}' (unique) exists.")

    finally:
        await close_mongo_connection()

if __name__ == "__main__":
    asyncio.run(check_indexes())
