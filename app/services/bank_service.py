"""
app/services/bank_service.py

Purpose: Linked bank account documents

- One document per completed account link (never updated in place)
- Listing a profile's linked accounts for the dashboard
"""

from app.db.mongo import get_banks_collection
from app.core.logging import get_logger, LogContext
from datetime import datetime, timezone
from typing import Dict, Any, List, Optional
from utils.id_utils import generate_id

logger = get_logger(__name__)


async def create_bank_document(fields: Dict[str, Any]) -> Dict[str, Any]:
    """
    Persists a bank account document.

    Returns:
        The stored document, including its generated _id
    """
    with LogContext(user_id=fields.get("user_id"), item_id=fields.get("bank_id")):
        banks = get_banks_collection()

        document = {
            "_id": generate_id(),
            **fields,
            "created_at": datetime.now(timezone.utc),
        }

        await banks.insert_one(document)
        logger.info("Bank account document created")

        return document


async def find_bank_documents(user_id: str, limit: int = 100) -> List[Dict[str, Any]]:
    """Linked accounts of a profile, newest first."""
    banks = get_banks_collection()
    cursor = banks.find({"user_id": user_id}).sort("created_at", -1)
    return await cursor.to_list(length=limit)


async def find_bank_document(document_id: str) -> Optional[Dict[str, Any]]:
    banks = get_banks_collection()
    return await banks.find_one({"_id": document_id})


async def find_bank_by_account_id(account_id: str) -> Optional[Dict[str, Any]]:
    """Most recent link of an aggregation account id."""
    banks = get_banks_collection()
    return await banks.find_one({"account_id": account_id}, sort=[("created_at", -1)])
