"""
Database initialization script - user profile and bank account collections

Run once (or after changing collection ids) to create indexes:
    python scripts/init_db.py

    python scripts/init_db.py --drop   # drop custom indexes first
"""

import asyncio
import sys
from pathlib import Path
from dotenv import load_dotenv

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Load environment variables before settings are read
load_dotenv()

import logging

from app.core.config import settings
from app.db.mongo import connect_to_mongo, close_mongo_connection, get_database
from app.db.indexes import create_indexes, drop_all_indexes

logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
logger = logging.getLogger(__name__)


async def main(drop: bool = False):
    logger.info(f"🔌 Connecting to MongoDB: {settings.DATABASE_ID}")
    await connect_to_mongo()

    try:
        if drop:
            await drop_all_indexes()

        await create_indexes()

        db = get_database()
        for name in (settings.USER_COLLECTION_ID, settings.BANK_COLLECTION_ID):
            indexes = await db[name].index_information()
            logger.info(f"  📋 {name}: {', '.join(sorted(indexes))}")

        logger.info("✅ Database ready")
    finally:
        await close_mongo_connection()


if __name__ == "__main__":
    asyncio.run(main(drop="--drop" in sys.argv[1:]))
