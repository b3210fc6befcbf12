"""
app/db/mongo.py

Purpose: Document store connection setup

- Initializes Motor client with connection pooling
- Two collections: user profiles and linked bank accounts
- Health checks and startup retry logic
- Proper connection lifecycle management
"""

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo.errors import ConnectionFailure, ServerSelectionTimeoutError
from typing import Optional
import asyncio
from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)

# Global MongoDB client
_client: Optional[AsyncIOMotorClient] = None
_database: Optional[AsyncIOMotorDatabase] = None


async def connect_to_mongo():
    """
    Establishes connection to MongoDB with retry logic.
    Called during application startup.
    """
    global _client, _database

    if _client is not None:
        logger.warning("MongoDB client already initialized")
        return

    max_retries = settings.MONGODB_CONNECT_RETRIES
    retry_delay = settings.MONGODB_RETRY_DELAY_SECONDS

    for attempt in range(1, max_retries + 1):
        try:
            logger.info(
                f"Attempting to connect to MongoDB (attempt {attempt}/{max_retries})"
            )

            _client = AsyncIOMotorClient(
                settings.MONGODB_URL,
                maxPoolSize=settings.MONGODB_MAX_POOL_SIZE,
                minPoolSize=min(5, settings.MONGODB_MAX_POOL_SIZE),
                serverSelectionTimeoutMS=5000,
                connectTimeoutMS=10000,
                retryWrites=True,
                retryReads=True,
                tz_aware=True,
            )

            _database = _client[settings.DATABASE_ID]

            await _client.admin.command("ping")

            logger.info(f"✅ Connected to MongoDB database: {settings.DATABASE_ID}")
            return

        except (ConnectionFailure, ServerSelectionTimeoutError) as e:
            logger.error(
                f"Failed to connect to MongoDB (attempt {attempt}/{max_retries}): {e}"
            )
            _client = None
            _database = None

            if attempt < max_retries:
                logger.info(f"Retrying in {retry_delay} seconds...")
                await asyncio.sleep(retry_delay)
                retry_delay *= 2
            else:
                logger.critical("Failed to connect to MongoDB after all retries")
                raise ConnectionError("Could not establish MongoDB connection") from e


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


async def check_database_health() -> bool:
    """
    Checks if the database connection is healthy.

    Returns:
        True if connection is healthy, False otherwise
    """
    try:
        if _client is None:
            logger.error("MongoDB client not initialized")
            return False

        await _client.admin.command("ping")
        return True

    except Exception as e:
        logger.error(f"Database health check failed: {str(e)}")
        return False


def get_database() -> AsyncIOMotorDatabase:
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


def get_users_collection() -> AsyncIOMotorCollection:
    """
    Returns the user profile collection.

    Fields:
    - _id: str (document id)
    - user_id: str (identity-backend account id)
    - email, first_name, last_name, address1, city, state, postal_code,
      date_of_birth, ssn: str
    - dwolla_customer_url: str
    - dwolla_customer_id: str
    - created_at: datetime
    """
    return get_database()[settings.USER_COLLECTION_ID]


def get_banks_collection() -> AsyncIOMotorCollection:
    """
    Returns the linked bank account collection.

    Fields:
    - _id: str (document id)
    - user_id: str (profile document id)
    - bank_id: str (aggregation item id)
    - account_id, access_token, funding_source_url, sharable_id: str
    - created_at: datetime
    """
    return get_database()[settings.BANK_COLLECTION_ID]
