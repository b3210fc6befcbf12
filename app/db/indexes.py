"""
app/db/indexes.py

Purpose: Database index management

- Lookup indexes for profile and bank documents
- Non-unique: uniqueness is left to the store's owners, lookups report
  ambiguous matches instead
"""

from app.db.mongo import get_users_collection, get_banks_collection
from app.core.logging import get_logger

logger = get_logger(__name__)


async def create_indexes():
    """
    Creates all necessary database indexes.
    This function is idempotent - safe to run multiple times.
    """
    try:
        users = get_users_collection()
        banks = get_banks_collection()

        logger.info("Creating database indexes...")

        # ==============================================
        # USERS COLLECTION INDEXES
        # ==============================================

        # Identity-backend account id (get_user_info lookups)
        await users.create_index("user_id", name="user_id_idx")
        logger.debug("Created index on users.user_id")

        await users.create_index("email", name="email_idx")
        logger.debug("Created index on users.email")

        # ==============================================
        # BANKS COLLECTION INDEXES
        # ==============================================

        # Owner's accounts, newest first (dashboard)
        await banks.create_index(
            [("user_id", 1), ("created_at", -1)],
            name="bank_user_idx"
        )
        logger.debug("Created compound index on banks.user_id + created_at")

        await banks.create_index("account_id", name="bank_account_idx")
        logger.debug("Created index on banks.account_id")

        await banks.create_index("sharable_id", name="bank_sharable_idx")
        logger.debug("Created index on banks.sharable_id")

        logger.info("✅ All database indexes created successfully")

        user_indexes = await users.index_information()
        bank_indexes = await banks.index_information()

        logger.info(
            f"Index summary: Users={len(user_indexes)}, Banks={len(bank_indexes)}"
        )

    except Exception as e:
        logger.error(f"Failed to create indexes: {str(e)}", exc_info=True)
        raise


async def drop_all_indexes():
    """
    Drops all custom indexes (keeps _id index).
    Only for maintenance/migration.
    """
    try:
        users = get_users_collection()
        banks = get_banks_collection()

        logger.warning("Dropping all database indexes...")

        await users.drop_indexes()
        await banks.drop_indexes()

        logger.info("✅ All indexes dropped successfully")

    except Exception as e:
        logger.error(f"Failed to drop indexes: {str(e)}", exc_info=True)
        raise
