"""
Database initialization script for the MongoDB user store

Creates the users collection with its schema validator and the unique
email index. Optionally seeds the two sample users.

    python scripts/init_db.py            # schema + indexes
    python scripts/init_db.py --seed     # also insert sample users
    python scripts/init_db.py --reset    # drop custom indexes first
"""

import argparse
import asyncio
import sys
from pathlib import Path
import os
from dotenv import load_dotenv

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Load environment variables
load_dotenv()

from motor.motor_asyncio import AsyncIOMotorClient
import logging

from app.db.indexes import create_indexes, drop_all_indexes
from app.services.memory_user_store import SAMPLE_USERS

logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
logger = logging.getLogger(__name__)


MONGODB_URL = os.getenv("MONGODB_URL")
MONGODB_DB_NAME = os.getenv("MONGODB_DB_NAME")
MONGODB_USERS_COLLECTION = os.getenv("MONGODB_USERS_COLLECTION", "users")


async def seed_sample_users(collection):
    """Insert the sample users unless their emails already exist"""
    for fields in SAMPLE_USERS:
        result = await collection.update_one(
            {"email": fields.email},
            {"$setOnInsert": fields.to_document()},
            upsert=True
        )
        if result.upserted_id:
            logger.info(f"  ✅ Seeded {fields.email}")
        else:
            logger.info(f"  ℹ️  {fields.email} already exists")


async def main(seed: bool, reset: bool):
    """Main initialization"""
    if not MONGODB_URL or not MONGODB_DB_NAME:
        raise ValueError("❌ MONGODB_URL and MONGODB_DB_NAME must be set in .env file")

    logger.info("=" * 60)
    logger.info("  UserDesk Database Setup")
    logger.info("=" * 60 + "\n")

    logger.info(f"🔌 Connecting to MongoDB: {MONGODB_DB_NAME}")
    client = AsyncIOMotorClient(MONGODB_URL, serverSelectionTimeoutMS=5000)
    db = client[MONGODB_DB_NAME]

    try:
        await client.admin.command('ping')
        logger.info("✅ Connected successfully\n")

        if reset and MONGODB_USERS_COLLECTION in await db.list_collection_names():
            await drop_all_indexes(db, MONGODB_USERS_COLLECTION)

        await create_indexes(db, MONGODB_USERS_COLLECTION)

        users = db[MONGODB_USERS_COLLECTION]
        if seed:
            logger.info("\n🌱 Seeding sample users...")
            await seed_sample_users(users)

        logger.info(f"\n📊 Users stored: {await users.count_documents({})}")
        logger.info("\n✅ Database initialization complete!")

    except Exception as e:
        logger.error(f"\n❌ Error: {e}")
        raise

    finally:
        client.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Initialize the UserDesk MongoDB collection")
    parser.add_argument("--seed", action="store_true", help="insert the sample users")
    parser.add_argument("--reset", action="store_true", help="drop custom indexes before recreating them")
    args = parser.parse_args()
    asyncio.run(main(seed=args.seed, reset=args.reset))
